from core.packing_list import BUCKETS, PackingListGenerator

ESSENTIALS = ["travel documents", "phone charger", "medications", "personal hygiene items", "cash and cards"]


def all_buckets(packing_list):
    return {name: getattr(packing_list, name) for name in BUCKETS}


def test_wide_temperature_swing_gets_layers_and_hot_tips(make_day):
    days = [make_day(0, low=5, high=15), make_day(1, low=20, high=33)]
    tips = PackingListGenerator().generate(days).summary.packing_tips

    assert "Pack layers - temperature varies significantly between day and night" in tips
    assert "Pack light, breathable fabrics and stay hydrated" in tips
    assert tips == [
        "Pack layers - temperature varies significantly between day and night",
        "Bring warm layers for chilly mornings and evenings",
        "Pack light, breathable fabrics and stay hydrated",
    ]


def test_buckets_are_disjoint_and_essentials_always_there(make_day):
    days = [
        make_day(0, low=-4, high=6, condition="Snow", humidity=85, wind=12.0),
        make_day(1, low=18, high=31, condition="Clear", pop=70),
        make_day(2, low=12, high=19, condition="Rain"),
        make_day(3, low=10, high=14, condition="Fog"),
    ]
    packing_list = PackingListGenerator().generate(days, ["beach", "hiking trip", "museum", "cycling"])

    seen = {}
    for name, items in all_buckets(packing_list).items():
        assert len(items) == len(set(items))
        for item in items:
            assert item not in seen, f"{item} is in both {seen.get(item)} and {name}"
            seen[item] = name

    assert set(ESSENTIALS) <= set(packing_list.essentials)
    assert packing_list.summary.total_items == len(seen)


def test_essentials_without_any_weather():
    packing_list = PackingListGenerator().generate([], [])

    assert packing_list.essentials == ESSENTIALS
    assert packing_list.summary.total_items == 5
    assert packing_list.summary.temperature_range is None
    assert packing_list.summary.packing_tips == []


def test_cold_days_pick_up_both_cold_bands(make_day):
    packing_list = PackingListGenerator().generate([make_day(0, low=-5, high=5, condition="Clouds")])

    assert "heavy winter coat" in packing_list.clothing
    assert "thermal underwear" in packing_list.clothing
    assert "warm jacket" in packing_list.clothing
    assert "winter gloves" in packing_list.accessories
    assert "closed shoes" in packing_list.accessories
    # neither day edge falls in the mild bands
    assert "jeans" not in packing_list.clothing
    assert "t-shirts" not in packing_list.clothing


def test_condition_items_are_categorized(make_day):
    packing_list = PackingListGenerator().generate([make_day(0, low=12, high=18, condition="Rain")])

    assert "waterproof jacket" in packing_list.clothing
    assert "umbrella" in packing_list.accessories
    assert "rain cover for bags" in packing_list.accessories


def test_activity_gear_has_its_own_bucket(make_day):
    packing_list = PackingListGenerator().generate([make_day(0, condition="Clouds")], ["Hiking in the hills"])

    assert "hiking boots" in packing_list.activity_gear
    assert "trail snacks" in packing_list.activity_gear
    assert "hiking boots" not in packing_list.accessories


def test_item_stays_in_first_bucket(make_day):
    # sunscreen arrives with the Clear condition before the beach gear does
    packing_list = PackingListGenerator().generate([make_day(0, low=24, high=27, condition="Clear")], ["beach"])

    assert "sunscreen" in packing_list.special
    assert "sunscreen" not in packing_list.activity_gear
    assert "swimsuit" in packing_list.activity_gear


def test_unknown_activity_adds_no_gear(make_day):
    packing_list = PackingListGenerator().generate([make_day(0, condition="Clouds")], ["karaoke"])
    assert packing_list.activity_gear == []


def test_special_conditions(make_day):
    days = [make_day(0, low=22, high=27, condition="Clear", humidity=80, wind=11.0)]
    packing_list = PackingListGenerator().generate(days)

    assert "moisture-wicking clothing" in packing_list.special
    assert "windbreaker" in packing_list.special
    assert "sunscreen SPF 50+" in packing_list.special
    assert ("High humidity expected - pack moisture-wicking clothes and extra changes"
            in packing_list.summary.packing_tips)


def test_summary_fields(make_day):
    days = [make_day(0, low=12, high=20, condition="Clouds"), make_day(1, low=14, high=22, condition="Rain", pop=65),
            make_day(2, low=13, high=21, condition="Clouds")]
    summary = PackingListGenerator().generate(days).summary

    assert summary.temperature_range == "12°C to 22°C"
    assert summary.weather_variety == "Clouds, Rain"
    assert summary.rain_expected
    assert summary.packing_tips[0] == "Don't forget rain protection - precipitation is likely during your trip"


def test_categorize_item_checks_clothing_first():
    generator = PackingListGenerator()
    assert generator.categorize_item("light clothing") == "clothing"
    assert generator.categorize_item("sun hat") == "accessories"
    assert generator.categorize_item("notebook") == "special"
