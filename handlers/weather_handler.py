import logging
from typing import Any, Dict, List, Optional

from core.activity_matcher import ActivityMatcher
from core.errors import LocationNotFoundError, WeatherServiceUnavailableError
from core.forecast import ForecastSynthesizer, best_time_of_day, summarize_days
from core.models import (
    ActivityAnalysis,
    AdvisorResponse,
    BestTimeOfDay,
    DailySummary,
    Intent,
    PackingList,
    ResponseAction,
    WeatherSnapshot,
)
from core.packing_list import PackingListGenerator

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TIER_EMOJI = {
    "excellent": "✅",
    "good": "👍",
    "fair": "⚠️",
}

EXAMPLE_DESTINATIONS = ["Paris", "Tokyo", "New York", "London"]


class WeatherHandler:
    """
    Answers weather questions for a destination.

    One lookup of the current conditions feeds everything else: the
    synthesized forecast, the best time of day, the activity check and the
    packing list. The result is a chat-ready text plus the structured data
    behind it, so a UI can render buttons and details however it likes.
    """

    def __init__(self, weather_client, synthesizer: Optional[ForecastSynthesizer] = None,
                 activity_matcher: Optional[ActivityMatcher] = None,
                 packing_generator: Optional[PackingListGenerator] = None,
                 forecast_days: int = 10):
        self.weather_client = weather_client
        self.synthesizer = synthesizer or ForecastSynthesizer()
        self.activity_matcher = activity_matcher or ActivityMatcher()
        self.packing_generator = packing_generator or PackingListGenerator()
        self.forecast_days = forecast_days

        logger.info("WeatherHandler ready")

    def handle(self, message: str, intent: Intent, context: Optional[Dict[str, Any]] = None) -> AdvisorResponse:
        context = context or {}
        destination = intent.entities.location or context.get("destination")

        if not destination:
            return self.ask_for_destination()

        try:
            snapshot = self.weather_client.fetch_current_weather(destination)
        except LocationNotFoundError as e:
            logger.warning(f"Location not found: {destination} ({str(e)})")
            return self.location_not_found()
        except WeatherServiceUnavailableError as e:
            logger.error(f"Weather service unavailable for {destination}: {str(e)}")
            return self.service_unavailable()

        points = self.synthesizer.synthesize(snapshot, start=snapshot.observed_at)
        days = summarize_days(points, self.forecast_days)
        best_time = best_time_of_day(points)

        activities = context.get("activities") or []
        analysis = self.activity_matcher.analyze_activities(activities, snapshot, days)
        packing_list = self.packing_generator.generate(days, activities)

        text = self.build_response_text(snapshot, days, best_time, analysis, packing_list)

        return AdvisorResponse(
            text=text,
            data={
                "current_weather": snapshot.model_dump(mode="json"),
                "forecast": [day.model_dump(mode="json") for day in days],
                "best_time_of_day": best_time.model_dump(mode="json"),
                "activity_recommendations": analysis.model_dump(mode="json"),
                "packing_list": packing_list.model_dump(mode="json"),
            },
            suggestions=self.build_suggestions(analysis, snapshot),
            actions=self.build_actions(analysis, destination),
        )

    def build_response_text(self, snapshot: WeatherSnapshot, days: List[DailySummary],
                            best_time: BestTimeOfDay, analysis: ActivityAnalysis,
                            packing_list: PackingList) -> str:
        lines = [f"**Weather Report for {snapshot.location}**", ""]

        lines.append("📍 **Current Conditions**")
        lines.append(f"Temperature: {snapshot.temperature.current}°C "
                     f"(feels like {snapshot.temperature.feels_like}°C)")
        lines.append(f"Conditions: {snapshot.description or snapshot.condition.lower()}")
        lines.append(f"Humidity: {snapshot.humidity}%")
        lines.append(f"Wind: {snapshot.wind_speed} m/s")
        lines.append("")

        lines.append("📅 **Forecast Summary**")
        for day in days[:5]:
            line = f"{day.label}: {day.temperature.min}-{day.temperature.max}°C, {day.condition}"
            if day.precipitation_probability > 30:
                line += f" ({day.precipitation_probability}% rain)"
            lines.append(line)
        lines.append("")

        lines.append("⏰ **Best Time for Outdoor Activities**")
        lines.append(best_time.recommendation)
        lines.append("")

        if analysis.has_activities:
            lines.append("🎯 **Your Planned Activities Analysis**")
            for assessment in analysis.assessments:
                emoji = TIER_EMOJI.get(assessment.suitability, "❌")
                lines.append(f"{emoji} **{assessment.activity}**: {assessment.suitability}")
                if assessment.issues:
                    lines.append(f"   Issues: {', '.join(assessment.issues)}")
                if assessment.recommendations:
                    lines.append(f"   Tip: {assessment.recommendations[0]}")
                if assessment.best_day:
                    lines.append(f"   Best day: {assessment.best_day}")
                lines.append("")

            if analysis.alternatives:
                lines.append("💡 **Alternative Activity Suggestions**")
                for alt in analysis.alternatives:
                    lines.append(f"• {alt.activity}: {alt.reason}")
                lines.append("")

        lines.append("🎒 **Packing Recommendations**")
        for tip in packing_list.summary.packing_tips:
            lines.append(f"• {tip}")
        lines.append("")
        lines.append(f"Essential items: {', '.join(packing_list.essentials[:3])}")
        if packing_list.clothing:
            lines.append(f"Clothing: {', '.join(packing_list.clothing[:3])}")
        if packing_list.special:
            lines.append(f"Don't forget: {', '.join(packing_list.special[:3])}")

        return "\n".join(lines)

    def build_suggestions(self, analysis: ActivityAnalysis, snapshot: WeatherSnapshot) -> List[str]:
        suggestions = []
        if analysis.conflicts:
            suggestions.append("Reschedule outdoor activities")
            suggestions.append("View alternative activities")

        pop = snapshot.precipitation_probability
        if pop is not None and pop > 50:
            suggestions.append("Get rain gear recommendations")

        suggestions.append("See full forecast")
        suggestions.append("Get detailed packing list")
        return suggestions

    def build_actions(self, analysis: ActivityAnalysis, destination: str) -> List[ResponseAction]:
        actions = [ResponseAction(type="view_forecast", label="View Full Forecast",
                                  data={"destination": destination})]

        if analysis.conflicts:
            actions.append(ResponseAction(
                type="reschedule_activities",
                label="Reschedule Activities",
                data={"conflicts": [c.model_dump(mode="json") for c in analysis.conflicts]},
            ))

        actions.append(ResponseAction(type="view_packing_list", label="View Packing List",
                                      data={"destination": destination}))
        return actions

    @staticmethod
    def ask_for_destination() -> AdvisorResponse:
        return AdvisorResponse(
            text="I can help you with weather information! Which destination would you like to know about?",
            data={},
            suggestions=list(EXAMPLE_DESTINATIONS),
            actions=[],
        )

    @staticmethod
    def location_not_found() -> AdvisorResponse:
        return AdvisorResponse(
            text="I couldn't find weather information for that location. "
                 "Could you provide the city name or check the spelling?",
            data={},
            suggestions=["Try a major city nearby", "Check spelling"],
            actions=[],
        )

    @staticmethod
    def service_unavailable() -> AdvisorResponse:
        return AdvisorResponse(
            text="I'm having trouble getting weather data right now. Please try again in a few minutes.",
            data={},
            suggestions=["Try again"],
            actions=[],
        )
