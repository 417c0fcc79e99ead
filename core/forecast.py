import math
import random
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from core.models import (
    BestTimeOfDay,
    DailySummary,
    DailyTemperature,
    ForecastPoint,
    PointTemperature,
    WeatherSnapshot,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

POINT_COUNT = 40
INTERVAL_HOURS = 3
POINTS_PER_DAY = 8
DAILY_AMPLITUDE = 5

TIME_SLOTS = {
    "morning": range(6, 12),
    "afternoon": range(12, 18),
    "evening": range(18, 24),
}

SLOT_RECOMMENDATIONS = {
    "morning": "Morning is the best time with clearer skies and comfortable temperatures.",
    "afternoon": "Afternoon offers good weather conditions for outdoor activities.",
    "evening": "Evening is ideal for outdoor activities with pleasant weather.",
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ForecastSynthesizer:
    """
    Builds a multi-day forecast out of a single current reading.

    The weather source only gives us "right now" on its free tier, so this is
    an extrapolation: a daily temperature wave plus a bit of noise. Treat the
    numbers as a rough guide, not a real forecast. Pass a seeded Random if
    you need the same points twice.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 point_count: int = POINT_COUNT, interval_hours: int = INTERVAL_HOURS):
        self.rng = rng or random.Random()
        self.point_count = point_count
        self.interval_hours = interval_hours

    def _jitter(self, spread: float) -> float:
        # uniform in [-spread/2, spread/2)
        return (self.rng.random() - 0.5) * spread

    def synthesize(self, snapshot: WeatherSnapshot, start: Optional[datetime] = None) -> List[ForecastPoint]:
        start = start or datetime.now()
        points = []

        for i in range(self.point_count):
            variation = math.sin(2 * math.pi * i / POINTS_PER_DAY) * DAILY_AMPLITUDE
            temperature = PointTemperature(
                temp=round(snapshot.temperature.current + variation + self._jitter(3)),
                feels_like=round(snapshot.temperature.feels_like + variation + self._jitter(3)),
                min=round(snapshot.temperature.min + variation - 2),
                max=round(snapshot.temperature.max + variation + 2),
            )

            points.append(ForecastPoint(
                timestamp=start + timedelta(hours=self.interval_hours * i),
                temperature=temperature,
                condition=snapshot.condition,
                humidity=round(_clamp(snapshot.humidity + self._jitter(10), 0, 100)),
                wind_speed=round(max(0.0, snapshot.wind_speed + self._jitter(2)), 1),
                cloud_cover=round(_clamp(snapshot.cloud_cover + self._jitter(20), 0, 100)),
                precipitation_probability=round(self.rng.random() * 30),
                rain=snapshot.precipitation,
            ))

        logger.info(f"Synthesized {len(points)} forecast points for {snapshot.location}")
        return points


def _day_label(day) -> str:
    return f"{day:%a}, {day:%b} {day.day}"


def _dominant_condition(points: List[ForecastPoint]) -> str:
    counts: Dict[str, int] = {}
    for point in points:
        counts[point.condition] = counts.get(point.condition, 0) + 1

    # dicts keep insertion order, so the first condition seen wins a tie
    best, best_count = None, 0
    for condition, count in counts.items():
        if count > best_count:
            best, best_count = condition, count
    return best


def _day_verdict(avg_pop: float, any_rain: bool, condition: str) -> str:
    if avg_pop > 70 or any_rain or condition == "Thunderstorm":
        return "poor"
    if avg_pop > 40 or condition == "Rain":
        return "fair"
    return "good"


def summarize_days(points: List[ForecastPoint], days: int = 5) -> List[DailySummary]:
    """Group forecast points by calendar date and aggregate each day, oldest first."""
    by_date: Dict = {}
    for point in points:
        by_date.setdefault(point.timestamp.date(), []).append(point)

    summaries = []
    for day, day_points in list(by_date.items())[:days]:
        temps = [p.temperature.temp for p in day_points]
        pops = [p.precipitation_probability for p in day_points]
        avg_pop = sum(pops) / len(pops)
        total_rain = round(sum(p.rain for p in day_points), 1)
        condition = _dominant_condition(day_points)

        summaries.append(DailySummary(
            date=day,
            label=_day_label(day),
            temperature=DailyTemperature(
                min=min(temps),
                avg=round(sum(temps) / len(temps)),
                max=max(temps),
            ),
            condition=condition,
            avg_humidity=round(sum(p.humidity for p in day_points) / len(day_points)),
            avg_wind_speed=round(sum(p.wind_speed for p in day_points) / len(day_points), 1),
            total_rain=total_rain,
            precipitation_probability=max(pops),
            suitability=_day_verdict(avg_pop, any(p.rain > 0 for p in day_points), condition),
        ))

    return summaries


def _score_slot(points: List[ForecastPoint]) -> float:
    if not points:
        return 0

    score = 100.0
    score -= sum(p.precipitation_probability for p in points) / len(points)
    if any(p.rain > 0 for p in points):
        score -= 20

    avg_temp = sum(p.temperature.temp for p in points) / len(points)
    if avg_temp < 10 or avg_temp > 35:
        score -= 10

    return max(0.0, score)


def best_time_of_day(points: List[ForecastPoint]) -> BestTimeOfDay:
    """Pick the part of the day (morning/afternoon/evening) with the friendliest weather."""
    all_scores = {}
    for slot, hours in TIME_SLOTS.items():
        slot_points = [p for p in points if p.timestamp.hour in hours]
        all_scores[slot] = round(_score_slot(slot_points), 1)

    # max() returns the first of equal scores, so morning beats a tied afternoon
    best = max(all_scores, key=lambda slot: all_scores[slot])

    return BestTimeOfDay(
        best_time=best,
        score=all_scores[best],
        all_scores=all_scores,
        recommendation=SLOT_RECOMMENDATIONS[best],
    )
