"""
Agent Layer for JeevesBot

Each agent handles one domain and returns the standard AgentResponse, so
the Telegram bot, the REST API and the CLI share the same behavior.

- BaseAgent: Abstract base class defining the agent interface
- AgentResponse: Standard response structure for agent outputs
- CalendarAgent: Appointment parsing, storage, listing and deletion
- ChatAgent: Free-text replies with per-user conversation memory

Usage:
    from jeeves.agents import CalendarAgent
    from jeeves.core import Config, JsonFileCalendarStore

    config = Config()
    agent = CalendarAgent(JsonFileCalendarStore(config.get_calendar_file()), config)
    response = agent.process("add_appointment", {"text": "21-11-2025. 14:30. Peter. Ghostin 06"})
"""

from .base_agent import BaseAgent, AgentResponse
from .calendar_agent import CalendarAgent
from .chat_agent import ChatAgent

__all__ = [
    'BaseAgent',
    'AgentResponse',
    'CalendarAgent',
    'ChatAgent',
]
