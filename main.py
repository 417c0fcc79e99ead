import streamlit as st
import os
import uuid
from dotenv import load_dotenv
import logging

# Load environment variables from .env file
load_dotenv()

from llm.gemini_client import GeminiClient
from core.query_classifier import QueryClassifier
from core.redis_storage import ContextStorage
from core.conversation_manager import ConversationManager
from external_apis.weather_api import WeatherClient

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="Travel Weather Assistant",
    page_icon="🌤️",
    layout="wide"
)

st.markdown("""
<style>
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}

    .context-item {
        background-color: #f8f9fa;
        padding: 8px 12px;
        margin: 4px 0;
        border-radius: 8px;
        border-left: 4px solid #28a745;
        font-size: 0.85em;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def init_components():
    """Wire up storage, the weather client and the conversation manager once per server."""
    try:
        storage = ContextStorage()

        try:
            storage.redis_client.ping()
        except Exception as e:
            st.error(f"Redis connection failed: {str(e)}")
            return None, None

        # Gemini is optional; without it non-weather questions get the help text
        gemini = None
        if os.getenv("GOOGLE_AI_API_KEY"):
            gemini = GeminiClient()
        else:
            logger.info("GOOGLE_AI_API_KEY not set, running without Gemini")

        conversation_manager = ConversationManager(
            storage=storage,
            query_classifier=QueryClassifier(),
            weather_client=WeatherClient(),
            gemini_client=gemini,
        )
        return storage, conversation_manager

    except Exception as e:
        st.error(f"Initialization error: {str(e)}")
        return None, None


def get_user_id() -> str:
    if "user_id" not in st.session_state:
        st.session_state.user_id = str(uuid.uuid4())
    return st.session_state.user_id


def display_context_sidebar(conversation_manager, user_id):
    """Show (and let the user edit) the destination and activities we remember."""
    context = conversation_manager.get_context(user_id)["context"]

    st.markdown("### 🌍 Your Trip")
    if context.get("destination"):
        st.markdown(f'<div class="context-item">Destination: {context["destination"]}</div>',
                    unsafe_allow_html=True)
    else:
        st.info("No destination yet")

    if context.get("time_reference"):
        st.markdown(f'<div class="context-item">When: {context["time_reference"]}</div>',
                    unsafe_allow_html=True)

    st.markdown("### 🎯 Planned Activities")
    if context.get("activities"):
        for activity in context["activities"]:
            st.markdown(f'<div class="context-item">{activity}</div>', unsafe_allow_html=True)
    else:
        st.info("No activities yet")

    st.markdown("---")

    with st.form("trip_details"):
        destination = st.text_input("Destination", value=context.get("destination") or "")
        activities = st.text_input("Activities (comma separated)",
                                   value=", ".join(context.get("activities") or []))
        if st.form_submit_button("Save trip details"):
            st.session_state.metadata = {
                "destination": destination.strip(),
                "activities": [a.strip() for a in activities.split(",") if a.strip()],
            }
            st.success("Saved - it will be used with your next message")

    if st.button("🗑️ Clear Chat", help="Forget this conversation"):
        conversation_manager.clear_context(user_id)
        st.session_state.pop("suggestions", None)
        st.session_state.pop("metadata", None)
        st.success("Chat cleared!")
        st.rerun()


def send_message(conversation_manager, user_id, message):
    metadata = st.session_state.pop("metadata", None)
    with st.spinner("Checking the weather..."):
        result = conversation_manager.process_user_message(user_id, message, metadata)

    if not result.get("success"):
        st.session_state.suggestions = []
        st.session_state.last_error = result["response"]["text"]
        return

    st.session_state.suggestions = result["response"].get("suggestions", [])


def main():
    storage, conversation_manager = init_components()

    if not conversation_manager:
        st.error("Failed to initialize. Please check your configuration.")
        st.stop()

    user_id = get_user_id()

    with st.sidebar:
        try:
            display_context_sidebar(conversation_manager, user_id)
        except Exception as e:
            st.error(f"Error loading context: {str(e)}")

    for turn in storage.get_history(user_id, limit=50):
        with st.chat_message("user"):
            st.markdown(turn.get("user", ""))
        with st.chat_message("assistant"):
            st.markdown(turn.get("assistant", ""))

    if "last_error" in st.session_state:
        st.error(st.session_state.pop("last_error"))

    suggestions = st.session_state.get("suggestions", [])
    if suggestions:
        columns = st.columns(len(suggestions))
        for column, suggestion in zip(columns, suggestions):
            if column.button(suggestion, key=f"suggestion_{suggestion}"):
                send_message(conversation_manager, user_id, suggestion)
                st.rerun()

    user_input = st.chat_input("Ask about the weather, activities or packing for your trip...")
    if user_input:
        send_message(conversation_manager, user_id, user_input)
        st.rerun()


if __name__ == "__main__":
    main()
