import logging
from typing import Dict, List, Optional

from core.catalog import DEFAULT_CATALOG, AdvisoryCatalog, CatalogResolver
from core.models import DailySummary, PackingList, PackingSummary

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BUCKETS = ("clothing", "accessories", "activity_gear", "essentials", "special")


class _Buckets:
    """Five ordered, duplicate-free lists. An item lives in whichever bucket took it first."""

    def __init__(self):
        self.items: Dict[str, List[str]] = {name: [] for name in BUCKETS}
        self.placed = set()

    def add(self, bucket: str, item: str):
        if item in self.placed:
            return
        self.placed.add(item)
        self.items[bucket].append(item)

    def total(self) -> int:
        return len(self.placed)


class PackingListGenerator:
    """
    Works out what to pack from the daily forecast and the activities planned.

    Weather-driven items are sorted into clothing/accessories/special by a
    keyword check, activity gear always gets its own bucket, and the
    essentials go in no matter what.
    """

    def __init__(self, catalog: AdvisoryCatalog = DEFAULT_CATALOG):
        self.rules = catalog.packing
        self.resolver = CatalogResolver([entry.activity for entry in self.rules.activity_gear])

    def categorize_item(self, item: str) -> str:
        # clothing is checked first: "rain cover for bags" is a bag, "light clothing" is clothing
        if any(keyword in item for keyword in self.rules.clothing_keywords):
            return "clothing"
        if any(keyword in item for keyword in self.rules.accessory_keywords):
            return "accessories"
        return "special"

    def generate(self, days: List[DailySummary], activities: Optional[List[str]] = None) -> PackingList:
        activities = activities or []
        buckets = _Buckets()

        for item in self.rules.essentials:
            buckets.add("essentials", item)

        for day in days:
            for band in self.rules.temperature_bands:
                if band.contains(day.temperature.min) or band.contains(day.temperature.max):
                    for item in band.items:
                        buckets.add(self.categorize_item(item), item)

        conditions = list(dict.fromkeys(day.condition for day in days))
        for condition in conditions:
            for item in self.rules.items_for_condition(condition):
                buckets.add(self.categorize_item(item), item)

        for activity in activities:
            key = self.resolver.resolve(activity)
            if key:
                for item in self.rules.gear_for(key):
                    buckets.add("activity_gear", item)
            else:
                logger.info(f"No packing gear listed for activity '{activity}'")

        avg_humidity = sum(d.avg_humidity for d in days) / len(days) if days else 0
        if avg_humidity > 70:
            for item in self.rules.high_humidity:
                buckets.add("special", item)

        if any(d.avg_wind_speed > 10 for d in days):
            for item in self.rules.high_wind:
                buckets.add("special", item)

        if "Clear" in conditions:
            for item in self.rules.high_uv:
                buckets.add("special", item)

        summary = self._summarize(days, conditions, avg_humidity, buckets.total())
        logger.info(f"Generated packing list with {summary.total_items} items for {len(days)} days")

        return PackingList(summary=summary, **buckets.items)

    def _summarize(self, days: List[DailySummary], conditions: List[str],
                   avg_humidity: float, total_items: int) -> PackingSummary:
        if not days:
            return PackingSummary(total_items=total_items)

        min_temp = min(d.temperature.min for d in days)
        max_temp = max(d.temperature.max for d in days)
        rain_expected = any(d.precipitation_probability > 50 for d in days)

        tips = []
        if max_temp - min_temp > 15:
            tips.append("Pack layers - temperature varies significantly between day and night")
        if rain_expected:
            tips.append("Don't forget rain protection - precipitation is likely during your trip")
        if min_temp < 10:
            tips.append("Bring warm layers for chilly mornings and evenings")
        if max_temp > 30:
            tips.append("Pack light, breathable fabrics and stay hydrated")
        if avg_humidity > 70:
            tips.append("High humidity expected - pack moisture-wicking clothes and extra changes")

        return PackingSummary(
            total_items=total_items,
            temperature_range=f"{min_temp}°C to {max_temp}°C",
            weather_variety=", ".join(conditions),
            rain_expected=rain_expected,
            packing_tips=tips,
        )
