"""Conversation memory: models, storage backends and the store."""

from .backends import FileMemoryBackend, InMemoryBackend, MemoryBackend, filename_for
from .models import ConversationTurn, Role, UserMemory
from .store import MemoryStore, trim_conversation

__all__ = [
    "ConversationTurn",
    "FileMemoryBackend",
    "InMemoryBackend",
    "MemoryBackend",
    "MemoryStore",
    "Role",
    "UserMemory",
    "filename_for",
    "trim_conversation",
]
