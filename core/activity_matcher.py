import logging
from typing import List, Optional

from core.catalog import DEFAULT_CATALOG, AdvisoryCatalog, CatalogResolver
from core.models import (
    ActivityAnalysis,
    ActivityAssessment,
    ActivitySummary,
    AlternativeActivity,
    BestDay,
    DailySummary,
    WeatherSnapshot,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

RAINY_CONDITIONS = ("Rain", "Thunderstorm")
MAX_ALTERNATIVES = 4


def _tier(score: int) -> str:
    if score >= 70:
        return "excellent"
    if score >= 50:
        return "good"
    if score >= 30:
        return "fair"
    return "poor"


class ActivityMatcher:
    """
    Scores planned activities against the weather.

    Every activity name is free text from the user, so it goes through the
    catalog resolver first. Anything we can't place gets a neutral "unknown"
    verdict rather than an error.
    """

    def __init__(self, catalog: AdvisoryCatalog = DEFAULT_CATALOG):
        self.catalog = catalog
        self.resolver = CatalogResolver(catalog.activity_names())

    def find_activity_key(self, activity: str) -> Optional[str]:
        return self.resolver.resolve(activity)

    def assess_activity(self, activity: str, weather: WeatherSnapshot) -> ActivityAssessment:
        """Start at 100 and knock points off for every way the weather works against the activity."""
        key = self.find_activity_key(activity)
        if not key:
            logger.info(f"Activity not in catalog: '{activity}'")
            return ActivityAssessment(
                activity=activity,
                suitability="unknown",
                score=50,
                reason="Activity not recognized",
            )

        profile = self.catalog.activity_profile(key)
        score = 100
        issues = []
        recommendations = []

        if weather.condition in profile.avoid_conditions:
            score -= 40
            issues.append(f"{weather.condition.lower()} weather")
            recommendations.append("Consider rescheduling or choosing an indoor alternative")

        current = weather.temperature.current
        if current < profile.ideal_temp_min:
            score -= 20
            issues.append(f"temperature too low ({current}°C)")
            recommendations.append("Dress warmly or wait for warmer weather")
        elif current > profile.ideal_temp_max:
            score -= 20
            issues.append(f"temperature too high ({current}°C)")
            recommendations.append("Stay hydrated and seek shade regularly")

        if weather.wind_speed > profile.max_wind_speed:
            score -= 15
            issues.append(f"high winds ({weather.wind_speed} m/s)")
            recommendations.append("Wind may affect comfort and safety")

        pop = weather.precipitation_probability
        if pop is not None and pop > profile.max_precipitation:
            score -= 25
            issues.append(f"high chance of rain ({pop}%)")
            recommendations.append("Bring rain gear or choose an indoor activity")

        score = max(0, min(100, score))

        return ActivityAssessment(
            activity=activity,
            activity_key=key,
            suitability=_tier(score),
            score=score,
            category=profile.category,
            issues=issues,
            recommendations=recommendations,
            weather_condition=weather.condition,
        )

    def _weather_regime(self, weather: WeatherSnapshot) -> Optional[str]:
        current = weather.temperature.current
        if weather.condition in RAINY_CONDITIONS:
            return "rainy"
        if weather.condition == "Clear":
            if current > 30:
                return "clear_hot"
            if current >= 10:
                return "clear_comfortable"
        # Clear-and-cold, Clouds, Mist, Fog and Snow get no suggestions
        return None

    def suggest_alternatives(self, weather: WeatherSnapshot,
                             planned_activities: Optional[List[str]] = None) -> List[AlternativeActivity]:
        regime = self._weather_regime(weather)
        if not regime:
            return []

        planned = [p.lower() for p in (planned_activities or [])]
        alternatives = []
        for rule in self.catalog.alternatives:
            if rule.regime != regime:
                continue
            if any(rule.activity in p for p in planned):
                continue
            alternatives.append(AlternativeActivity(activity=rule.activity, reason=rule.reason))

        return alternatives[:MAX_ALTERNATIVES]

    def find_best_day(self, activity: str, days: List[DailySummary]) -> BestDay:
        key = self.find_activity_key(activity)
        if not key:
            return BestDay(activity=activity, reason="Activity not recognized")
        if not days:
            return BestDay(activity=activity, reason="No forecast available")

        profile = self.catalog.activity_profile(key)

        def day_score(day: DailySummary) -> int:
            score = 100
            if day.condition in profile.avoid_conditions:
                score -= 40
            if day.condition not in profile.ideal_conditions:
                score -= 10
            avg = day.temperature.avg
            if avg < profile.ideal_temp_min or avg > profile.ideal_temp_max:
                score -= 20
            if day.precipitation_probability > profile.max_precipitation:
                score -= 30
            return max(0, score)

        scores = [day_score(day) for day in days]
        best_index = scores.index(max(scores))
        best = days[best_index]

        reasons = []
        if best.condition in profile.ideal_conditions:
            reasons.append(f"{best.condition.lower()} weather")
        if profile.ideal_temp_min <= best.temperature.avg <= profile.ideal_temp_max:
            reasons.append("comfortable temperature")
        if best.precipitation_probability <= 30:
            reasons.append("low chance of rain")

        return BestDay(
            activity=activity,
            best_day=best.label,
            score=scores[best_index],
            condition=best.condition,
            reason=f"Best conditions: {', '.join(reasons)}" if reasons else "Most suitable based on forecast",
        )

    def analyze_activities(self, activities: List[str], weather: WeatherSnapshot,
                           days: List[DailySummary]) -> ActivityAnalysis:
        """Assess every planned activity, flag the shaky ones and offer something else if needed."""
        if not activities:
            return ActivityAnalysis(
                has_activities=False,
                alternatives=self.suggest_alternatives(weather, []),
            )

        assessments = []
        for activity in activities:
            assessment = self.assess_activity(activity, weather)
            best_day = self.find_best_day(activity, days)
            assessments.append(assessment.model_copy(update={
                "best_day": best_day.best_day,
                "best_day_score": best_day.score,
            }))

        conflicts = [a for a in assessments if a.suitability in ("fair", "poor")]
        alternatives = self.suggest_alternatives(weather, activities) if conflicts else []

        counts = {tier: sum(1 for a in assessments if a.suitability == tier)
                  for tier in ("excellent", "good", "fair", "poor")}
        if counts["poor"]:
            overall = "poor"
        elif counts["fair"]:
            overall = "fair"
        elif counts["good"]:
            overall = "good"
        else:
            overall = "excellent"

        logger.info(f"Analyzed {len(assessments)} activities: {len(conflicts)} conflicts")

        return ActivityAnalysis(
            has_activities=True,
            assessments=assessments,
            conflicts=conflicts,
            alternatives=alternatives,
            summary=ActivitySummary(total=len(assessments), overall_suitability=overall, **counts),
        )
