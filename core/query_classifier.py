import re
import logging
from typing import Any, Dict, List, Optional

from core.models import Intent, IntentEntities

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


DEFAULT_INTENT_PATTERNS = {
    "weather": {
        "keywords": [
            "weather", "temperature", "rain", "forecast", "climate", "sunny", "hot", "cold",
            "best time", "when to visit"
        ],
        "patterns": [
            r"what'?s?\s+the\s+weather",
            r"how'?s?\s+the\s+weather",
            r"weather\s+in",
            r"best\s+time\s+to\s+(visit|go|travel)",
            r"should\s+i\s+bring\s+(umbrella|jacket|sunscreen)",
            r"will\s+it\s+rain",
            r"what\s+to\s+pack",
        ]
    },
    "activity": {
        "keywords": ["activity", "activities", "things to do", "visit", "attractions", "sightseeing"],
        "patterns": [
            r"what\s+can\s+i\s+do",
            r"things\s+to\s+do",
            r"activities\s+in",
            r"places\s+to\s+visit",
        ]
    },
    "accommodation": {
        "keywords": ["hotel", "accommodation", "stay", "lodge", "hostel", "resort"],
        "patterns": [
            r"where\s+to\s+stay",
            r"hotel\s+in",
            r"accommodation",
        ]
    },
    "transport": {
        "keywords": ["transport", "flight", "train", "bus", "car", "taxi", "how to get"],
        "patterns": [
            r"how\s+to\s+get\s+to",
            r"transport\s+to",
            r"flights?\s+to",
        ]
    },
    "general": {
        "keywords": ["hello", "hi", "help", "thanks", "thank you"],
        "patterns": [
            r"^(hello|hi|hey)",
            r"help\s+me",
            r"thank",
        ]
    }
}

# Place names are capitalized words following "in"; this one is deliberately case-sensitive
LOCATION_PATTERN = re.compile(r"\bin\s+([A-Z][a-zA-Z]*(?:\s+[A-Z][a-zA-Z]*)*)")

TIME_PATTERNS = [
    re.compile(r"tomorrow", re.IGNORECASE),
    re.compile(r"next\s+week", re.IGNORECASE),
    re.compile(r"this\s+weekend", re.IGNORECASE),
    re.compile(r"(january|february|march|april|may|june|july|august|september|october|november|december)",
               re.IGNORECASE),
]

ACTIVITY_KEYWORDS = ["hiking", "sightseeing", "beach", "museum", "shopping", "dining", "nightlife"]


class QueryClassifier:
    """
    Figures out what kind of travel question someone is asking and pulls out useful info.

    Pure pattern matching: every category gets +1 per keyword found in the
    message and +2 per regex that matches. No randomness and no network, so the
    same message and context always give the same Intent.
    """

    def __init__(self, intent_patterns: Optional[Dict[str, Dict[str, List[str]]]] = None):
        self.type_patterns = {}
        for intent_type, config in (intent_patterns or DEFAULT_INTENT_PATTERNS).items():
            self.type_patterns[intent_type] = {
                "keywords": list(config["keywords"]),
                "patterns": [re.compile(p, re.IGNORECASE) for p in config["patterns"]],
            }

    def score_message(self, message: str) -> Dict[str, int]:
        normalized = message.lower().strip()
        scores = {}
        for intent_type, config in self.type_patterns.items():
            score = 0
            for keyword in config["keywords"]:
                if keyword in normalized:
                    score += 1
            for pattern in config["patterns"]:
                if pattern.search(message):
                    score += 2
            scores[intent_type] = score
        return scores

    def extract_entities(self, message: str) -> IntentEntities:
        location = None
        location_match = LOCATION_PATTERN.search(message)
        if location_match:
            location = location_match.group(1).strip()

        time_reference = None
        for pattern in TIME_PATTERNS:
            match = pattern.search(message)
            if match:
                time_reference = match.group(0)
                break

        lowered = message.lower()
        activities = [activity for activity in ACTIVITY_KEYWORDS if activity in lowered]

        return IntentEntities(location=location, time_reference=time_reference, activities=activities)

    @staticmethod
    def calculate_confidence(ranked: List[tuple]) -> float:
        top_score = ranked[0][1] if ranked else 0
        if top_score == 0:
            return 0.3

        second_score = ranked[1][1] if len(ranked) > 1 else 0
        gap = top_score - second_score
        if gap >= 2:
            return 0.9
        if gap >= 1:
            return 0.7
        return 0.5

    def detect_intent(self, message: str, context: Optional[Dict[str, Any]] = None) -> Intent:
        """
        Classify one chat message.

        When nothing matches at all we lean on the conversation: if a
        destination is already known, the user is probably following up on the
        weather, otherwise it's small talk.
        """
        message = message or ""
        context = context or {}

        scores = self.score_message(message)
        # sorted() is stable, so ties keep the category declaration order
        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)

        if not ranked or ranked[0][1] == 0:
            intent_type = "weather" if context.get("destination") else "general"
        else:
            intent_type = ranked[0][0]

        intent = Intent(
            type=intent_type,
            confidence=self.calculate_confidence(ranked),
            entities=self.extract_entities(message),
            scores=scores,
            raw_message=message,
        )

        logger.info(f"Classified message as {intent.type} (confidence {intent.confidence})")
        return intent
