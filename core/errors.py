class WeatherLookupError(Exception):
    """Base class for anything that goes wrong while fetching weather for a location."""

    def __init__(self, message: str, location: str = ""):
        super().__init__(message)
        self.location = location


class LocationNotFoundError(WeatherLookupError):
    """The weather source didn't recognise the location we asked about."""


class WeatherServiceUnavailableError(WeatherLookupError):
    """Network trouble, timeouts, quota or auth problems - worth retrying later."""
