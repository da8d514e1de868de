"""Tests for memory data models."""

from dataclasses import FrozenInstanceError

import pytest

from maxchat.memory import ConversationTurn, Role, UserMemory


class TestConversationTurn:
    """Tests for the ConversationTurn dataclass."""

    def test_is_immutable(self):
        """Turns cannot be modified once created."""
        turn = ConversationTurn(role=Role.USER, content="hello")
        with pytest.raises(FrozenInstanceError):
            turn.content = "changed"  # type: ignore[misc]

    def test_to_dict_uses_role_value(self):
        turn = ConversationTurn(role=Role.ASSISTANT, content="hi")
        assert turn.to_dict() == {"role": "assistant", "content": "hi"}

    def test_from_dict(self):
        turn = ConversationTurn.from_dict({"role": "system", "content": "persona"})
        assert turn.role is Role.SYSTEM
        assert turn.content == "persona"

    def test_from_dict_unknown_role(self):
        with pytest.raises(ValueError):
            ConversationTurn.from_dict({"role": "tool", "content": "x"})

    def test_from_dict_missing_content(self):
        with pytest.raises(KeyError):
            ConversationTurn.from_dict({"role": "user"})

    def test_from_dict_non_string_content(self):
        with pytest.raises(TypeError):
            ConversationTurn.from_dict({"role": "user", "content": 42})


class TestUserMemory:
    """Tests for the UserMemory dataclass."""

    def test_defaults(self):
        memory = UserMemory(user_id="u1")
        assert memory.last_project is None
        assert memory.last_task is None
        assert memory.conversation == []

    def test_to_dict_camel_case(self):
        memory = UserMemory(
            user_id="u1",
            last_project="shop",
            last_task="fix cart",
            conversation=[ConversationTurn(role=Role.USER, content="fix cart")],
        )
        assert memory.to_dict() == {
            "userId": "u1",
            "lastProject": "shop",
            "lastTask": "fix cart",
            "conversation": [{"role": "user", "content": "fix cart"}],
        }

    def test_serialization(self):
        memory = UserMemory(
            user_id="u1",
            last_task="hi",
            conversation=[
                ConversationTurn(role=Role.SYSTEM, content="persona"),
                ConversationTurn(role=Role.USER, content="hi"),
            ],
        )
        restored = UserMemory.from_dict(memory.to_dict())
        assert restored == memory

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(TypeError):
            UserMemory.from_dict(["not", "a", "record"])  # type: ignore[arg-type]

    def test_from_dict_requires_conversation_list(self):
        with pytest.raises(TypeError):
            UserMemory.from_dict({"userId": "u1", "conversation": "oops"})

    def test_from_dict_requires_user_id(self):
        with pytest.raises(KeyError):
            UserMemory.from_dict({"conversation": [{"role": "system", "content": "persona"}]})

    def test_history_excludes_system_turns(self):
        memory = UserMemory(
            user_id="u1",
            conversation=[
                ConversationTurn(role=Role.SYSTEM, content="persona"),
                ConversationTurn(role=Role.USER, content="hi"),
                ConversationTurn(role=Role.ASSISTANT, content="hello"),
            ],
        )
        assert [t.content for t in memory.history] == ["hi", "hello"]

    def test_from_dict_rejects_empty_conversation(self):
        with pytest.raises(ValueError):
            UserMemory.from_dict({"userId": "u1", "conversation": []})

    @pytest.mark.parametrize("key", ["lastProject", "lastTask"])
    def test_from_dict_rejects_non_string_metadata(self, key: str):
        data = {
            "userId": "u1",
            "conversation": [{"role": "system", "content": "persona"}],
            key: {"nested": True},
        }
        with pytest.raises(TypeError):
            UserMemory.from_dict(data)
