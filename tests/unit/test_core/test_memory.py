"""
Unit tests for ConversationMemory.
"""

import json
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from jeeves.core.memory import ConversationMemory, ConversationMessage


@pytest.fixture
def file_memory(tmp_path):
    memory = ConversationMemory(tmp_path / "data" / "conversation-memory.json", max_messages=4)
    memory.initialize()
    return memory


class TestConversationMemory:
    def test_initialize_creates_empty_mapping(self, file_memory):
        assert json.loads(file_memory.file_path.read_text()) == {}

    def test_roles_and_order(self, file_memory):
        file_memory.add_user_message(42, "hello")
        file_memory.add_assistant_message(42, "hi")

        history = file_memory.get_history(42)
        assert [(m.role, m.content) for m in history] == [("user", "hello"), ("assistant", "hi")]
        assert all(m.timestamp for m in history)

    def test_oldest_messages_dropped(self, file_memory):
        for i in range(6):
            file_memory.add_user_message(1, f"message {i}")

        contents = [m.content for m in file_memory.get_history(1)]
        assert contents == ["message 2", "message 3", "message 4", "message 5"]

    def test_users_are_separate(self, file_memory):
        file_memory.add_user_message(1, "from one")
        file_memory.add_user_message(2, "from two")

        assert [m.content for m in file_memory.get_history(1)] == ["from one"]
        assert file_memory.get_history(3) == []

    def test_clear(self, file_memory):
        file_memory.add_user_message(1, "forget me")
        file_memory.add_user_message(2, "keep me")

        file_memory.clear(1)

        assert file_memory.get_history(1) == []
        assert len(file_memory.get_history(2)) == 1

    def test_persisted_between_instances(self, file_memory):
        file_memory.add_user_message(7, "saved")
        reopened = ConversationMemory(file_memory.file_path)
        assert reopened.get_history(7)[0].content == "saved"

    def test_corrupt_file_reads_empty(self, file_memory):
        file_memory.file_path.write_text("garbage")
        assert file_memory.get_history(1) == []

    def test_in_memory_default_limit(self):
        memory = ConversationMemory()
        for i in range(35):
            memory.add_user_message(1, str(i))

        history = memory.get_history(1)
        assert len(history) == 30
        assert history[0].content == "5"

    @pytest.mark.parametrize("limit", [0, -3])
    def test_non_positive_limit_keeps_latest_message(self, limit):
        memory = ConversationMemory(max_messages=limit)
        for i in range(5):
            memory.add_user_message(1, str(i))

        assert [m.content for m in memory.get_history(1)] == ["4"]


class TestFormatForPrompt:
    def test_empty_history(self):
        assert ConversationMemory.format_for_prompt([]) == ""

    def test_renders_roles(self):
        history = [
            ConversationMessage(role="user", content="When is my call?", timestamp="t1"),
            ConversationMessage(role="assistant", content="Use /viewcal", timestamp="t2"),
        ]
        assert ConversationMemory.format_for_prompt(history) == (
            "Recent conversation:\nUser: When is my call?\nAssistant: Use /viewcal\n\n"
        )
