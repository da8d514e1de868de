"""Per-user conversation memory: load with default, bounded append, persist."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from ..config import MAX_TURNS
from ..persona import DEFAULT_PERSONA
from .backends import MemoryBackend
from .models import ConversationTurn, Role, UserMemory

if TYPE_CHECKING:
    from ..logging import JSONLLogger


logger = logging.getLogger(__name__)


def trim_conversation(
    conversation: list[ConversationTurn],
    max_turns: int = MAX_TURNS,
    pin_system: bool = True,
) -> list[ConversationTurn]:
    """Keep the most recent turns of a conversation.

    Args:
        conversation: Turns in chronological order.
        max_turns: How many turns to keep.
        pin_system: If True, system turns are kept in front and the limit
            applies only to the remaining turns. If False, the tail is taken
            regardless of role, so old system turns can be dropped.

    Returns:
        A new list with the retained turns in their original order.
    """
    if not pin_system:
        return list(conversation[-max_turns:])

    pinned = [turn for turn in conversation if turn.role is Role.SYSTEM]
    rest = [turn for turn in conversation if turn.role is not Role.SYSTEM]
    return pinned + rest[-max_turns:]


class MemoryStore:
    """Loads, extends and persists UserMemory records through a backend.

    Reads and writes are best effort: failures are logged and never raised
    to the caller.
    """

    def __init__(
        self,
        backend: MemoryBackend,
        persona: str = DEFAULT_PERSONA,
        max_turns: int = MAX_TURNS,
        pin_system: bool = True,
        events: JSONLLogger | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            backend: Keyed storage for serialized records.
            persona: Content of the system turn placed in fresh records.
            max_turns: Conversation cap applied after every append.
            pin_system: Keep system turns outside the cap.
            events: Optional JSONL logger for storage failures.
        """
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        self.backend = backend
        self.persona = persona
        self.max_turns = max_turns
        self.pin_system = pin_system
        self.events = events

    def new_memory(self, user_id: str) -> UserMemory:
        """Create the default record for a user."""
        return UserMemory(
            user_id=user_id,
            conversation=[ConversationTurn(role=Role.SYSTEM, content=self.persona)],
        )

    def load(self, user_id: str) -> UserMemory:
        """Load the record for a user.

        Returns a fresh default record if none is stored or the stored one
        cannot be read.
        """
        try:
            data = self.backend.load(user_id)
            if data is None:
                return self.new_memory(user_id)
            memory = UserMemory.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Failed to load memory for %s: %s", user_id, e)
            if self.events:
                self.events.log_memory_failure("load", user_id, str(e))
            return self.new_memory(user_id)

        if memory.user_id != user_id:
            memory.user_id = user_id
        return memory

    def save(self, user_id: str, memory: UserMemory) -> bool:
        """Persist the record for a user.

        Returns:
            True if the write succeeded, False if it failed and was logged.
        """
        try:
            self.backend.save(user_id, memory.to_dict())
        except (OSError, ValueError, TypeError) as e:
            logger.error("Failed to save memory for %s: %s", user_id, e)
            if self.events:
                self.events.log_memory_failure("save", user_id, str(e))
            return False
        return True

    def append(self, memory: UserMemory, turn: ConversationTurn) -> UserMemory:
        """Return a copy of memory with turn appended and the cap applied."""
        conversation = trim_conversation(
            [*memory.conversation, turn],
            max_turns=self.max_turns,
            pin_system=self.pin_system,
        )
        return replace(memory, conversation=conversation)
