import logging
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime, timezone

from core.models import AdvisorResponse, Intent
from handlers.general_handler import GeneralHandler
from handlers.weather_handler import WeatherHandler

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

METADATA_FIELDS = ("destination", "activities", "time_reference")


class ConversationManager:
    """
    The main coordinator that routes user messages to the right handler.

    ``advise`` is the whole engine for one message: classify, pick a handler,
    build the answer. ``process_user_message`` wraps that with the per-user
    context that lives in storage, so follow-up questions remember the
    destination and activities from earlier turns.
    """

    def __init__(self, storage, query_classifier, weather_client, gemini_client=None,
                 weather_handler: Optional[WeatherHandler] = None,
                 general_handler: Optional[GeneralHandler] = None):
        self.storage = storage
        self.classifier = query_classifier

        self.weather_handler = weather_handler or WeatherHandler(weather_client)
        self.general_handler = general_handler or GeneralHandler(gemini_client)

        # Anything without a dedicated handler falls through to the general one
        self.handlers = {
            "weather": self.weather_handler,
            "general": self.general_handler,
        }

        logger.info("ConversationManager initialized")

    def route_to_handler(self, message: str, intent: Intent, context: Dict[str, Any]) -> AdvisorResponse:
        handler = self.handlers.get(intent.type, self.general_handler)
        logger.info(f"Routing {intent.type} message to {type(handler).__name__}")
        return handler.handle(message, intent, context)

    def _classify_and_route(self, message: str, context: Dict[str, Any]) -> Tuple[Intent, AdvisorResponse]:
        intent = self.classifier.detect_intent(message, context)
        return intent, self.route_to_handler(message, intent, context)

    def advise(self, message: str, context: Optional[Dict[str, Any]] = None) -> AdvisorResponse:
        """Answer one chat message given whatever we already know (destination, activities)"""
        _, response = self._classify_and_route(message, context or {})
        return response

    @staticmethod
    def _merge_entities(context: Dict[str, Any], intent: Intent) -> Dict[str, Any]:
        entities = intent.entities
        if entities.location:
            context["destination"] = entities.location
        if entities.time_reference:
            context["time_reference"] = entities.time_reference
        if entities.activities:
            activities: List[str] = list(context.get("activities") or [])
            for activity in entities.activities:
                if activity not in activities:
                    activities.append(activity)
            context["activities"] = activities
        return context

    def process_user_message(self, user_id: str, message: str,
                             metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Handle one chat turn for a user, start to finish.

        Loads their stored context, lets the UI override bits of it via
        metadata, folds in whatever the message itself mentions, answers, and
        saves everything back for the next turn.
        """
        try:
            logger.info(f"Processing message from user {user_id}: {message}")

            context = self.storage.get_context(user_id).model_dump()
            for field in METADATA_FIELDS:
                if metadata and metadata.get(field) is not None:
                    context[field] = metadata[field]

            intent = self.classifier.detect_intent(message, context)
            context = self._merge_entities(context, intent)
            context["history"] = self.storage.get_history(user_id)

            response = self.route_to_handler(message, intent, context)

            updated = self.storage.update_context(user_id, {
                "destination": context.get("destination"),
                "activities": context.get("activities"),
                "time_reference": context.get("time_reference"),
                "last_intent": intent.type,
            })
            self.storage.save_turn(user_id, message, response.text, intent.type)

            return {
                "success": True,
                "intent": intent.type,
                "confidence": intent.confidence,
                "response": response.model_dump(mode="json"),
                "context": {
                    "destination": updated.destination,
                    "time_reference": updated.time_reference,
                    "activities": updated.activities,
                },
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

        except Exception as e:
            logger.error(f"Error processing message for {user_id}: {str(e)}")
            return {
                "success": False,
                "response": AdvisorResponse(text="Sorry, I encountered an error. Please try again.").model_dump(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

    def get_context(self, user_id: str) -> Dict[str, Any]:
        return {"success": True, "context": self.storage.get_context(user_id).model_dump(mode="json")}

    def clear_context(self, user_id: str) -> Dict[str, Any]:
        self.storage.clear_context(user_id)
        return {"success": True, "message": "Conversation context cleared"}
