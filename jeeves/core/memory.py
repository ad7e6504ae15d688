"""
Conversation memory for JeevesBot
Keeps the most recent chat messages per user so replies can take earlier
turns into account. Only the last max_messages entries per user are kept.
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional


logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGES = 30


@dataclass
class ConversationMessage:
    role: str  # 'user' or 'assistant'
    content: str
    timestamp: str


class ConversationMemory:
    """
    Bounded per-user message history.

    With a file_path the history is persisted as JSON keyed by user id;
    without one it lives in memory only.
    """

    def __init__(self, file_path: Optional[Path] = None,
                 max_messages: int = DEFAULT_MAX_MESSAGES):
        self.file_path = Path(file_path) if file_path else None
        self.max_messages = max(1, max_messages)
        self._memory: Dict[str, List[Dict[str, str]]] = {}

    def initialize(self) -> None:
        """Create the memory file with an empty mapping if missing"""
        if self.file_path and not self.file_path.exists():
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self._save({})
            logger.info(f"Conversation memory file initialized at {self.file_path}")

    def add_user_message(self, user_id: int, content: str) -> None:
        self._add_message(user_id, "user", content)

    def add_assistant_message(self, user_id: int, content: str) -> None:
        self._add_message(user_id, "assistant", content)

    def get_history(self, user_id: int) -> List[ConversationMessage]:
        memory = self._load()
        return [ConversationMessage(**m) for m in memory.get(str(user_id), [])]

    def clear(self, user_id: int) -> None:
        memory = self._load()
        if str(user_id) in memory:
            del memory[str(user_id)]
            self._save(memory)
            logger.info(f"Cleared conversation history for user {user_id}")

    @staticmethod
    def format_for_prompt(history: List[ConversationMessage]) -> str:
        """Render history as 'User: ...' / 'Assistant: ...' lines"""
        if not history:
            return ""
        lines = [
            f"{'User' if m.role == 'user' else 'Assistant'}: {m.content}"
            for m in history
        ]
        return "Recent conversation:\n" + "\n".join(lines) + "\n\n"

    def _add_message(self, user_id: int, role: str, content: str) -> None:
        memory = self._load()
        messages = memory.setdefault(str(user_id), [])
        messages.append(asdict(ConversationMessage(
            role=role,
            content=content,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )))
        memory[str(user_id)] = messages[-self.max_messages:]
        self._save(memory)

    def _load(self) -> Dict[str, List[Dict[str, str]]]:
        if self.file_path is None:
            return self._memory
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load conversation memory: {e}")
            return {}

    def _save(self, memory: Dict[str, List[Dict[str, str]]]) -> None:
        if self.file_path is None:
            self._memory = memory
            return
        try:
            with open(self.file_path, "w", encoding="utf-8") as f:
                json.dump(memory, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save conversation memory: {e}")
