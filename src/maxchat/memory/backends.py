"""Keyed blob backends for memory records."""

import copy
import hashlib
import json
import re
from pathlib import Path
from typing import Any, Protocol

_SAFE_KEY = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9_.-]*")


class MemoryBackend(Protocol):
    """Key-value storage for serialized memory records."""

    def load(self, key: str) -> dict[str, Any] | None:
        """Return the stored value, or None if the key is absent."""
        ...

    def save(self, key: str, value: dict[str, Any]) -> None:
        """Store a value under key, replacing any previous one."""
        ...


def filename_for(key: str) -> str:
    """Derive the file name for a key.

    Keys made of letters, digits, ``_``, ``-`` and ``.`` (not leading) map to
    ``memory_<key>.json``. Anything else is hashed into
    ``memory_sha256+<hex>.json``; ``+`` never appears in a plain key, so the
    two forms cannot collide and the name never leaves the memory directory.
    """
    if _SAFE_KEY.fullmatch(key):
        return f"memory_{key}.json"
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return f"memory_sha256+{digest}.json"


class FileMemoryBackend:
    """Stores one pretty-printed JSON file per key."""

    def __init__(self, memory_dir: Path) -> None:
        self.memory_dir = Path(memory_dir)

    def path_for(self, key: str) -> Path:
        return self.memory_dir / filename_for(key)

    def load(self, key: str) -> dict[str, Any] | None:
        path = self.path_for(key)
        if not path.exists():
            return None

        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def save(self, key: str, value: dict[str, Any]) -> None:
        self.memory_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(value, f, indent=2, ensure_ascii=False)


class InMemoryBackend:
    """Dict-backed backend; values are copied on the way in and out."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def load(self, key: str) -> dict[str, Any] | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def save(self, key: str, value: dict[str, Any]) -> None:
        self._data[key] = copy.deepcopy(value)
