"""
Rule tables for the weather advisory engine.

Everything here is frozen. Components receive an ``AdvisoryCatalog`` when
they are built, so a test can pass in a smaller or stranger table without
touching module state. Order inside every tuple matters: catalog resolution
falls back to a scan in declaration order, and the first hit wins.
"""
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from core.models import ConditionType


class ActivityProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    ideal_conditions: Tuple[ConditionType, ...]
    avoid_conditions: Tuple[ConditionType, ...]
    ideal_temp_min: int
    ideal_temp_max: int
    max_wind_speed: float
    max_precipitation: int
    category: str  # outdoor / indoor / mixed


class AlternativeRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    regime: str  # rainy / clear_comfortable / clear_hot
    activity: str
    reason: str


class TemperatureBand(BaseModel):
    model_config = ConfigDict(frozen=True)

    lower: float
    upper: float
    items: Tuple[str, ...]

    def contains(self, temperature: float) -> bool:
        return self.lower <= temperature < self.upper


class ConditionItems(BaseModel):
    model_config = ConfigDict(frozen=True)

    condition: ConditionType
    items: Tuple[str, ...]


class ActivityGear(BaseModel):
    model_config = ConfigDict(frozen=True)

    activity: str
    items: Tuple[str, ...]


class PackingRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature_bands: Tuple[TemperatureBand, ...]
    condition_items: Tuple[ConditionItems, ...]
    activity_gear: Tuple[ActivityGear, ...]
    essentials: Tuple[str, ...]
    high_humidity: Tuple[str, ...]
    high_uv: Tuple[str, ...]
    high_wind: Tuple[str, ...]
    clothing_keywords: Tuple[str, ...]
    accessory_keywords: Tuple[str, ...]

    def items_for_condition(self, condition: str) -> Tuple[str, ...]:
        for entry in self.condition_items:
            if entry.condition == condition:
                return entry.items
        return ()

    def gear_for(self, activity_key: str) -> Tuple[str, ...]:
        for entry in self.activity_gear:
            if entry.activity == activity_key:
                return entry.items
        return ()


class AdvisoryCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    activities: Tuple[ActivityProfile, ...]
    alternatives: Tuple[AlternativeRule, ...]
    packing: PackingRules

    def activity_profile(self, key: str) -> Optional[ActivityProfile]:
        for profile in self.activities:
            if profile.name == key:
                return profile
        return None

    def activity_names(self) -> List[str]:
        return [profile.name for profile in self.activities]

    def with_activity(self, profile: ActivityProfile) -> "AdvisoryCatalog":
        """Copy of this catalog with one profile added (or replaced, keeping its slot)."""
        profile = profile.model_copy(update={"name": profile.name.lower()})
        activities = list(self.activities)
        for i, existing in enumerate(activities):
            if existing.name == profile.name:
                activities[i] = profile
                break
        else:
            activities.append(profile)
        return self.model_copy(update={"activities": tuple(activities)})


class CatalogResolver:
    """
    Turns free text like "Hiking in the hills" into a catalog key.

    Phase one is an exact lookup on the normalized text. Phase two walks the
    keys in catalog order and returns the first one that is contained in the
    input or contains it.
    """

    def __init__(self, keys: Sequence[str]):
        self._keys: Tuple[str, ...] = tuple(keys)
        self._exact: Dict[str, str] = {key: key for key in self._keys}

    def resolve(self, text: str) -> Optional[str]:
        normalized = (text or "").lower().strip()
        if not normalized:
            return None

        if normalized in self._exact:
            return self._exact[normalized]

        for key in self._keys:
            if key in normalized or normalized in key:
                return key

        return None


def _indoor(name: str) -> ActivityProfile:
    # Indoor venues don't care about the weather at all
    return ActivityProfile(
        name=name,
        ideal_conditions=("Rain", "Clouds", "Clear"),
        avoid_conditions=(),
        ideal_temp_min=-10,
        ideal_temp_max=40,
        max_wind_speed=100,
        max_precipitation=100,
        category="indoor",
    )


DEFAULT_ACTIVITY_PROFILES: Tuple[ActivityProfile, ...] = (
    ActivityProfile(name="hiking", ideal_conditions=("Clear", "Clouds"),
                    avoid_conditions=("Rain", "Thunderstorm", "Snow"),
                    ideal_temp_min=15, ideal_temp_max=28, max_wind_speed=20,
                    max_precipitation=10, category="outdoor"),
    ActivityProfile(name="sightseeing", ideal_conditions=("Clear", "Clouds"),
                    avoid_conditions=("Thunderstorm", "Snow"),
                    ideal_temp_min=10, ideal_temp_max=30, max_wind_speed=25,
                    max_precipitation=30, category="outdoor"),
    ActivityProfile(name="beach", ideal_conditions=("Clear",),
                    avoid_conditions=("Rain", "Thunderstorm", "Clouds"),
                    ideal_temp_min=22, ideal_temp_max=35, max_wind_speed=15,
                    max_precipitation=5, category="outdoor"),
    ActivityProfile(name="photography", ideal_conditions=("Clear", "Clouds"),
                    avoid_conditions=("Rain", "Thunderstorm", "Fog"),
                    ideal_temp_min=5, ideal_temp_max=32, max_wind_speed=30,
                    max_precipitation=20, category="outdoor"),
    ActivityProfile(name="cycling", ideal_conditions=("Clear", "Clouds"),
                    avoid_conditions=("Rain", "Thunderstorm", "Snow"),
                    ideal_temp_min=12, ideal_temp_max=28, max_wind_speed=25,
                    max_precipitation=10, category="outdoor"),
    ActivityProfile(name="water sports", ideal_conditions=("Clear",),
                    avoid_conditions=("Thunderstorm", "Rain"),
                    ideal_temp_min=20, ideal_temp_max=35, max_wind_speed=20,
                    max_precipitation=5, category="outdoor"),
    ActivityProfile(name="picnic", ideal_conditions=("Clear", "Clouds"),
                    avoid_conditions=("Rain", "Thunderstorm"),
                    ideal_temp_min=18, ideal_temp_max=30, max_wind_speed=20,
                    max_precipitation=10, category="outdoor"),
    _indoor("museum"),
    _indoor("shopping"),
    _indoor("indoor dining"),
    _indoor("spa"),
    _indoor("art gallery"),
    _indoor("theater"),
    _indoor("cinema"),
    ActivityProfile(name="city tour", ideal_conditions=("Clear", "Clouds"),
                    avoid_conditions=("Thunderstorm", "Snow"),
                    ideal_temp_min=10, ideal_temp_max=30, max_wind_speed=30,
                    max_precipitation=30, category="mixed"),
    ActivityProfile(name="restaurant hopping", ideal_conditions=("Clear", "Clouds"),
                    avoid_conditions=("Thunderstorm",),
                    ideal_temp_min=5, ideal_temp_max=35, max_wind_speed=35,
                    max_precipitation=40, category="mixed"),
)

DEFAULT_ALTERNATIVES: Tuple[AlternativeRule, ...] = (
    AlternativeRule(regime="rainy", activity="museum", reason="Perfect for rainy weather"),
    AlternativeRule(regime="rainy", activity="shopping", reason="Stay dry while exploring"),
    AlternativeRule(regime="rainy", activity="art gallery", reason="Cultural indoor experience"),
    AlternativeRule(regime="rainy", activity="spa", reason="Relax and unwind indoors"),
    AlternativeRule(regime="clear_comfortable", activity="hiking",
                    reason="Perfect weather for outdoor exploration"),
    AlternativeRule(regime="clear_comfortable", activity="sightseeing",
                    reason="Great visibility and comfort"),
    AlternativeRule(regime="clear_comfortable", activity="photography",
                    reason="Excellent lighting conditions"),
    AlternativeRule(regime="clear_comfortable", activity="picnic",
                    reason="Ideal conditions for outdoor dining"),
    AlternativeRule(regime="clear_hot", activity="beach",
                    reason="Hot weather perfect for water activities"),
    AlternativeRule(regime="clear_hot", activity="water sports",
                    reason="Cool off with water activities"),
)

DEFAULT_PACKING_RULES = PackingRules(
    temperature_bands=(
        TemperatureBand(lower=float("-inf"), upper=0, items=(
            "heavy winter coat", "thermal underwear", "winter gloves", "warm hat",
            "scarf", "insulated boots")),
        TemperatureBand(lower=0, upper=10, items=(
            "warm jacket", "sweater", "long pants", "closed shoes", "light gloves")),
        TemperatureBand(lower=10, upper=20, items=(
            "light jacket", "long-sleeve shirts", "jeans", "comfortable shoes")),
        TemperatureBand(lower=20, upper=28, items=(
            "t-shirts", "shorts", "light pants", "sandals", "sun hat")),
        TemperatureBand(lower=28, upper=float("inf"), items=(
            "light breathable clothing", "shorts", "tank tops", "flip-flops", "sun hat",
            "cooling towel")),
    ),
    condition_items=(
        ConditionItems(condition="Rain", items=(
            "waterproof jacket", "umbrella", "waterproof shoes", "rain cover for bags")),
        ConditionItems(condition="Thunderstorm", items=(
            "waterproof jacket", "sturdy umbrella", "waterproof shoes", "rain cover for bags")),
        ConditionItems(condition="Snow", items=(
            "winter boots", "waterproof pants", "warm layers", "waterproof gloves")),
        ConditionItems(condition="Clear", items=(
            "sunglasses", "sunscreen", "sun hat", "light clothing")),
        ConditionItems(condition="Clouds", items=("light jacket", "sunglasses (just in case)")),
        ConditionItems(condition="Mist", items=("light jacket", "umbrella (just in case)")),
        ConditionItems(condition="Fog", items=("warm layer", "visibility gear if driving")),
    ),
    activity_gear=(
        ActivityGear(activity="hiking", items=(
            "hiking boots", "backpack", "water bottle", "trail snacks", "first aid kit",
            "map/GPS")),
        ActivityGear(activity="beach", items=(
            "swimsuit", "beach towel", "sunscreen", "beach bag", "sunglasses", "flip-flops")),
        ActivityGear(activity="sightseeing", items=(
            "comfortable walking shoes", "day bag", "camera", "portable charger",
            "water bottle")),
        ActivityGear(activity="museum", items=(
            "comfortable shoes", "light bag", "camera (check if allowed)", "notebook")),
        ActivityGear(activity="photography", items=(
            "camera equipment", "extra batteries", "memory cards", "lens cloth", "tripod")),
        ActivityGear(activity="water sports", items=(
            "swimsuit", "water shoes", "waterproof bag", "sunscreen", "towel")),
        ActivityGear(activity="cycling", items=(
            "helmet", "cycling shoes", "water bottle", "repair kit", "comfortable clothing")),
        ActivityGear(activity="shopping", items=(
            "comfortable shoes", "reusable shopping bag", "wallet", "portable charger")),
    ),
    essentials=(
        "travel documents", "phone charger", "medications", "personal hygiene items",
        "cash and cards",
    ),
    high_humidity=("moisture-wicking clothing", "extra changes of clothes", "antifungal powder"),
    high_uv=("sunscreen SPF 50+", "UV protection clothing", "lip balm with SPF"),
    high_wind=("windbreaker", "secure hat", "protective eyewear"),
    clothing_keywords=(
        "coat", "jacket", "shirt", "pants", "shorts", "dress", "sweater", "underwear",
        "clothing",
    ),
    accessory_keywords=(
        "hat", "sunglasses", "gloves", "scarf", "shoes", "boots", "sandals", "umbrella", "bag",
    ),
)

DEFAULT_CATALOG = AdvisoryCatalog(
    activities=DEFAULT_ACTIVITY_PROFILES,
    alternatives=DEFAULT_ALTERNATIVES,
    packing=DEFAULT_PACKING_RULES,
)
