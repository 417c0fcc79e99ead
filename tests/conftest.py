import random
from datetime import date, datetime, timedelta

import pytest

from core.errors import LocationNotFoundError, WeatherServiceUnavailableError
from core.forecast import ForecastSynthesizer
from core.models import DailySummary, DailyTemperature, SnapshotTemperature, WeatherSnapshot


class FakeRedis:
    """Just enough of the redis client for ContextStorage, kept in a dict"""

    def __init__(self):
        self.values = {}
        self.lists = {}
        self.ttls = {}

    def ping(self):
        return True

    def get(self, key):
        return self.values.get(key)

    def setex(self, key, ttl, value):
        self.values[key] = value.encode() if isinstance(value, str) else value
        self.ttls[key] = ttl

    def expire(self, key, ttl):
        if key in self.values or key in self.lists:
            self.ttls[key] = ttl

    def delete(self, *keys):
        for key in keys:
            self.values.pop(key, None)
            self.lists.pop(key, None)
            self.ttls.pop(key, None)

    def lpush(self, key, value):
        self.lists.setdefault(key, []).insert(0, value.encode() if isinstance(value, str) else value)

    def ltrim(self, key, start, end):
        self.lists[key] = self.lists.get(key, [])[start:end + 1]

    def lrange(self, key, start, end):
        return self.lists.get(key, [])[start:end + 1]


class StubWeatherClient:
    """Hands back a fixed snapshot, or raises whatever it was told to"""

    def __init__(self, snapshot=None, error=None):
        self.snapshot = snapshot
        self.error = error
        self.calls = []

    def fetch_current_weather(self, location):
        self.calls.append(location)
        if self.error:
            raise self.error
        return self.snapshot.model_copy(update={"location": location})


def build_snapshot(condition="Clear", temp=20, wind_speed=3.0, humidity=50,
                   precipitation=0.0, pop=None, location="Paris, France"):
    return WeatherSnapshot(
        location=location,
        temperature=SnapshotTemperature(current=temp, feels_like=temp, min=temp - 3, max=temp + 3),
        condition=condition,
        description=condition.lower(),
        humidity=humidity,
        pressure=1015,
        wind_speed=wind_speed,
        wind_direction=180,
        cloud_cover=20,
        visibility=10,
        precipitation=precipitation,
        precipitation_probability=pop,
        observed_at=datetime(2024, 10, 19, 9, 0),
    )


def build_day(offset=0, low=15, high=22, avg=None, condition="Clear", pop=10,
              humidity=50, wind=3.0, rain=0.0, suitability="good"):
    day = date(2024, 10, 19) + timedelta(days=offset)
    return DailySummary(
        date=day,
        label=f"{day:%a}, {day:%b} {day.day}",
        temperature=DailyTemperature(min=low, avg=avg if avg is not None else round((low + high) / 2), max=high),
        condition=condition,
        avg_humidity=humidity,
        avg_wind_speed=wind,
        total_rain=rain,
        precipitation_probability=pop,
        suitability=suitability,
    )


@pytest.fixture
def make_snapshot():
    return build_snapshot


@pytest.fixture
def make_day():
    return build_day


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def seeded_synthesizer():
    return ForecastSynthesizer(rng=random.Random(42))


@pytest.fixture
def stub_weather():
    return StubWeatherClient(snapshot=build_snapshot())


@pytest.fixture
def missing_location_weather():
    return StubWeatherClient(error=LocationNotFoundError("No matching location", "Atlantis"))


@pytest.fixture
def broken_weather():
    return StubWeatherClient(error=WeatherServiceUnavailableError("timeout", "Paris"))


@pytest.fixture
def make_weather():
    def factory(**snapshot_fields):
        return StubWeatherClient(snapshot=build_snapshot(**snapshot_fields))
    return factory
