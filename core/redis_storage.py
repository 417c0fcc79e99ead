import os
import redis
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from core.models import ConversationContext

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 1800
MAX_HISTORY = 50


class ContextStorage:
    """
    Remembers each user's conversation between chat turns.

    The context (destination, activities, ...) is one JSON blob per user with
    a TTL, so an idle conversation quietly forgets itself after half an hour.
    Reading a context pushes the expiry back out. Chat turns go into a
    capped Redis list next to it.
    """

    def __init__(self, redis_client=None, ttl_seconds: Optional[int] = None,
                 namespace: str = "travel_assistant"):
        self.redis_client = redis_client or redis.from_url(os.getenv('REDIS_URL', 'redis://localhost:6379'))
        self.ttl_seconds = ttl_seconds or int(os.getenv('CONTEXT_TTL_SECONDS', DEFAULT_TTL_SECONDS))
        self.namespace = namespace

    def _context_key(self, user_id: str) -> str:
        return f"{self.namespace}:{user_id}:context"

    def _history_key(self, user_id: str) -> str:
        return f"{self.namespace}:{user_id}:history"

    def get_context(self, user_id: str) -> ConversationContext:
        """Get what we know about this user, or a blank context if it expired or never existed"""
        key = self._context_key(user_id)
        try:
            data = self.redis_client.get(key)
            if not data:
                return ConversationContext()
            self.redis_client.expire(key, self.ttl_seconds)
            return ConversationContext.model_validate_json(data)
        except redis.exceptions.RedisError as e:
            logger.error(f"Error getting context for {user_id}: {str(e)}")
            return ConversationContext()
        except ValueError as e:
            # pydantic's ValidationError is a ValueError; a corrupt blob is as good as none
            logger.warning(f"Discarding unreadable context for {user_id}: {str(e)}")
            return ConversationContext()

    def update_context(self, user_id: str, updates: Dict[str, Any]) -> ConversationContext:
        """
        Merge updates into the stored context and save it with a fresh TTL.

        Keys that aren't part of the context are ignored; None values don't
        wipe out what we already had, but an empty string clears the field.
        """
        current = self.get_context(user_id)
        merged = current.model_dump()
        for field, value in updates.items():
            if field in ConversationContext.model_fields and value is not None:
                merged[field] = None if value == "" else value
        merged["updated_at"] = datetime.now(timezone.utc)

        updated = ConversationContext.model_validate(merged)
        self.redis_client.setex(self._context_key(user_id), self.ttl_seconds, updated.model_dump_json())
        logger.info(f"Updated context for {user_id}: destination={updated.destination}, "
                    f"{len(updated.activities)} activities")
        return updated

    def clear_context(self, user_id: str):
        self.redis_client.delete(self._context_key(user_id), self._history_key(user_id))
        logger.info(f"Cleared context for {user_id}")

    def save_turn(self, user_id: str, user_message: str, assistant_answer: str, intent: Optional[str] = None):
        """Save one question/answer pair, keeping only the most recent turns"""
        key = self._history_key(user_id)
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "user": user_message,
            "assistant": assistant_answer,
            "intent": intent,
        }
        self.redis_client.lpush(key, json.dumps(record))
        self.redis_client.ltrim(key, 0, MAX_HISTORY - 1)
        self.redis_client.expire(key, self.ttl_seconds)

    def get_history(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent turns, oldest first so they read like a transcript"""
        try:
            raw = self.redis_client.lrange(self._history_key(user_id), 0, limit - 1)
        except redis.exceptions.RedisError as e:
            logger.error(f"Error getting history for {user_id}: {str(e)}")
            return []

        history = []
        for item in reversed(raw):
            try:
                history.append(json.loads(item))
            except json.JSONDecodeError:
                logger.warning(f"Skipping unreadable history entry for {user_id}")
        return history
