"""Data models for per-user conversation memory."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Author of a conversation turn."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ConversationTurn:
    """One message in a conversation.

    Attributes:
        role: Who wrote the message.
        content: The message text.
    """

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConversationTurn":
        """Create from a stored dict. Raises on unknown roles or missing keys."""
        content = data["content"]
        if not isinstance(content, str):
            raise TypeError("turn content must be a string")
        return cls(role=Role(data["role"]), content=content)


@dataclass
class UserMemory:
    """Conversation state kept for a single user.

    Attributes:
        user_id: Primary key of the record.
        last_project: Project name from the most recent request that sent one.
        last_task: Prompt of the most recent request.
        conversation: Turns in chronological order.
    """

    user_id: str
    last_project: str | None = None
    last_task: str | None = None
    conversation: list[ConversationTurn] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk layout."""
        return {
            "userId": self.user_id,
            "lastProject": self.last_project,
            "lastTask": self.last_task,
            "conversation": [turn.to_dict() for turn in self.conversation],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserMemory":
        """Create from the on-disk layout.

        Raises:
            TypeError, KeyError, ValueError: If the data is not a valid record.
        """
        if not isinstance(data, dict):
            raise TypeError("memory record must be an object")
        turns = data.get("conversation")
        if not isinstance(turns, list):
            raise TypeError("conversation must be a list")
        if not turns:
            raise ValueError("conversation must not be empty")
        for key in ("lastProject", "lastTask"):
            if not isinstance(data.get(key), (str, type(None))):
                raise TypeError(f"{key} must be a string or null")
        return cls(
            user_id=str(data["userId"]),
            last_project=data.get("lastProject"),
            last_task=data.get("lastTask"),
            conversation=[ConversationTurn.from_dict(turn) for turn in turns],
        )

    @property
    def history(self) -> list[ConversationTurn]:
        """Turns other than system directives."""
        return [turn for turn in self.conversation if turn.role is not Role.SYSTEM]
