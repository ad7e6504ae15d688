"""
Chat Agent for JeevesBot
Answers free-text (non-command) messages and keeps the per-user
conversation history the replies are based on.
"""

from typing import Any, Dict, List

from .base_agent import BaseAgent, AgentResponse
from ..core.memory import ConversationMemory


CHAT_PROMPT_BASE = "You are a helpful digital assistant for business management.\n\n"
CHAT_PROMPT_MIDDLE = 'Current user message: "'
CHAT_PROMPT_SUFFIX = (
    '"\n\nPlease respond helpfully and professionally to their message, '
    "considering any previous conversation.\n"
    "Keep your response under 600 characters and write in Dutch without using a greeting."
)

CALENDAR_ONLY_REPLY = (
    "I'm currently focused on calendar functionality. "
    "Please use /help to see available commands."
)


def is_slash_command(message: str) -> bool:
    return message.startswith("/")


class ChatAgent(BaseAgent):
    """
    Agent for conversational messages.

    Handles intents:
    - chat: Record the user's message and produce a reply
    - clear_history: Forget a user's conversation
    """

    INTENTS = ["chat", "clear_history"]

    def __init__(self, memory: ConversationMemory, config):
        super().__init__(memory, config, "chat")

    @property
    def memory(self) -> ConversationMemory:
        return self.store

    def get_supported_intents(self) -> List[str]:
        return self.INTENTS

    def can_handle(self, intent: str, context: Dict[str, Any]) -> bool:
        return intent in self.INTENTS

    def process(self, intent: str, context: Dict[str, Any]) -> AgentResponse:
        self.log_action(f"processing_{intent}", {"user_id": context.get("user_id")})

        validation = self.validate_required_params(context, ["user_id"])
        if validation:
            return validation

        if intent == "chat":
            return self._handle_chat(context)
        if intent == "clear_history":
            self.memory.clear(context["user_id"])
            return AgentResponse.ok("Conversation history cleared")
        return AgentResponse.error(f"Unknown intent: {intent}")

    def _handle_chat(self, context: Dict[str, Any]) -> AgentResponse:
        """
        Context params:
            user_id (int): Telegram user id
            message (str): The user's message

        Slash commands and blank messages are not chat; they produce a
        successful response with no reply.
        """
        user_id = context["user_id"]
        message = (context.get("message") or "").strip()

        if not message or is_slash_command(message):
            return AgentResponse.ok("Not a chat message", data={"reply": None})

        self.memory.add_user_message(user_id, message)
        history = self.memory.get_history(user_id)
        prompt = self.build_prompt(history, message)

        # No language model is wired in; every message gets the calendar reply
        reply = CALENDAR_ONLY_REPLY

        self.memory.add_assistant_message(user_id, reply)
        return AgentResponse.ok("Reply generated", data={"reply": reply, "prompt": prompt})

    @staticmethod
    def build_prompt(history, message: str) -> str:
        history_text = ConversationMemory.format_for_prompt(history)
        return f"{CHAT_PROMPT_BASE}{history_text}{CHAT_PROMPT_MIDDLE}{message}{CHAT_PROMPT_SUFFIX}"
