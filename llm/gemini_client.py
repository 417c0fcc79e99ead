import google.generativeai as genai
import os
from typing import Any, Dict, List, Optional
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"

FALLBACK_REPLY = "Sorry, I couldn't come up with an answer right now. Please try asking again."


class GeminiClient:
    """
    Thin wrapper around Google's Gemini API for the questions our rules don't cover.

    Weather, activity scoring and packing never go through here. This only
    backs free-form answers to hotel/transport/activity questions. Failures
    come back as a polite message rather than an exception so one bad call
    doesn't sink the chat turn.
    """

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key or os.getenv('GOOGLE_AI_API_KEY')

        if not self.api_key:
            raise ValueError(
                "You need a Google AI API key to use this. Either set the GOOGLE_AI_API_KEY "
                "environment variable or pass it directly when creating the client."
            )

        self.model_name = model_name or os.getenv('GEMINI_MODEL', DEFAULT_MODEL)
        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(self.model_name)

        logger.info(f"Gemini client ready ({self.model_name})")

    def generate_response(self, prompt: str, max_tokens: int = 600) -> str:
        try:
            response = self.model.generate_content(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    max_output_tokens=max_tokens,
                    temperature=0.7,
                    top_p=0.9,
                    top_k=40
                )
            )

            if response.text:
                logger.info(f"Got response from Gemini: {len(response.text)} characters")
                return response.text.strip()

            logger.warning("Gemini returned an empty response")
            return FALLBACK_REPLY

        except Exception as e:
            logger.error(f"Gemini API error: {str(e)}")
            return FALLBACK_REPLY

    def generate_simple_chat_response(self, user_message: str,
                                      conversation_history: Optional[List[Dict[str, Any]]] = None) -> str:
        """Answer a travel question, with the last few turns as context"""
        context = ""
        if conversation_history:
            for turn in conversation_history[-6:]:
                context += f"User: {turn.get('user', '')}\nAssistant: {turn.get('assistant', '')}\n"

        prompt = f"""You are a friendly travel planning assistant. Answer briefly and practically.
If the question is about weather or packing, suggest the user ask about the weather for their destination.

{context}User: {user_message}
Assistant:"""

        return self.generate_response(prompt)
