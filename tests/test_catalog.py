import pytest
from pydantic import ValidationError

from core.catalog import DEFAULT_CATALOG, ActivityProfile, CatalogResolver


def test_exact_match_wins():
    resolver = CatalogResolver(DEFAULT_CATALOG.activity_names())
    assert resolver.resolve("  Beach ") == "beach"


def test_substring_scan_follows_catalog_order():
    resolver = CatalogResolver(DEFAULT_CATALOG.activity_names())
    assert resolver.resolve("hiking in the alps") == "hiking"
    # "sightseeing" is declared before "city tour", so it wins
    assert resolver.resolve("city tour and sightseeing") == "sightseeing"


def test_input_contained_in_key():
    resolver = CatalogResolver(DEFAULT_CATALOG.activity_names())
    assert resolver.resolve("water") == "water sports"


def test_unknown_and_blank_inputs():
    resolver = CatalogResolver(DEFAULT_CATALOG.activity_names())
    assert resolver.resolve("bungee jumping") is None
    assert resolver.resolve("   ") is None


def test_catalog_is_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_CATALOG.activities[0].ideal_temp_min = -50


def test_with_activity_returns_new_catalog():
    kayak = ActivityProfile(name="Kayaking", ideal_conditions=("Clear",), avoid_conditions=("Thunderstorm",),
                            ideal_temp_min=15, ideal_temp_max=30, max_wind_speed=10,
                            max_precipitation=20, category="outdoor")
    extended = DEFAULT_CATALOG.with_activity(kayak)

    assert extended.activity_profile("kayaking") is not None
    assert DEFAULT_CATALOG.activity_profile("kayaking") is None
    assert extended.activity_names()[-1] == "kayaking"
