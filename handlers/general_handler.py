import logging
from typing import Any, Dict, Optional

from core.models import AdvisorResponse, Intent

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Hello! I'm your travel planning assistant. I can help you with:\n\n"
    "🌤️ Weather forecasts and best time to visit\n"
    "🎯 Activity recommendations based on weather\n"
    "🎒 Packing suggestions for your trip\n\n"
    "Just tell me your destination and travel plans!"
)

HELP_SUGGESTIONS = [
    "Check weather for my trip",
    "What should I pack?",
    "Best time for outdoor activities",
]


class GeneralHandler:
    """
    Greetings, help, and everything that isn't a weather question.

    Without a Gemini client this is just the help text. With one, activity,
    accommodation and transport questions get a free-form answer instead.
    """

    def __init__(self, gemini_client=None):
        self.gemini = gemini_client

    def handle(self, message: str, intent: Intent, context: Optional[Dict[str, Any]] = None) -> AdvisorResponse:
        if intent.type == "general" or not self.gemini:
            return AdvisorResponse(text=HELP_TEXT, data={}, suggestions=list(HELP_SUGGESTIONS), actions=[])

        context = context or {}
        destination = intent.entities.location or context.get("destination")
        prompt = message
        if destination:
            prompt = f"{message}\n\n(The traveller is planning a trip to {destination}.)"

        logger.info(f"Passing {intent.type} question to Gemini")
        answer = self.gemini.generate_simple_chat_response(prompt, context.get("history"))

        return AdvisorResponse(text=answer, data={}, suggestions=list(HELP_SUGGESTIONS), actions=[])
