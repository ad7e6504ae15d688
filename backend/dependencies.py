"""
Dependency injection for FastAPI endpoints.

Provides singleton instances of Config, the calendar store and the
conversation memory, plus per-request agents built on top of them.

Tests swap any of these through app.dependency_overrides.
"""

from functools import lru_cache
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from jeeves.core.config import Config
from jeeves.core.memory import ConversationMemory
from jeeves.core.store import CalendarStore, JsonFileCalendarStore
from jeeves.agents import CalendarAgent, ChatAgent


@lru_cache()
def get_config() -> Config:
    """
    Get cached Config instance.

    lru_cache keeps one Config for the lifetime of the application.
    """
    return Config()


@lru_cache()
def get_calendar_store() -> CalendarStore:
    """Get the JSON-file calendar store, creating the data file if needed."""
    config = get_config()
    store = JsonFileCalendarStore(config.get_calendar_file())
    store.initialize()
    return store


@lru_cache()
def get_memory() -> ConversationMemory:
    """Get the conversation memory shared by bot and API."""
    config = get_config()
    memory = ConversationMemory(
        config.get_memory_file(),
        max_messages=config.get("max_messages_per_user", section="preferences", default=30),
    )
    memory.initialize()
    return memory


def get_calendar_agent() -> CalendarAgent:
    """
    Get CalendarAgent for appointment operations.

    A new agent per request, sharing the store and Config singletons.
    """
    return CalendarAgent(get_calendar_store(), get_config())


def get_chat_agent() -> ChatAgent:
    """Get ChatAgent for free-text messages."""
    return ChatAgent(get_memory(), get_config())
