"""Tests for memory storage backends."""

import hashlib
import json
from pathlib import Path

import pytest

from maxchat.memory import FileMemoryBackend, InMemoryBackend, filename_for


class TestFilenameFor:
    def test_simple_key(self):
        assert filename_for("u1") == "memory_u1.json"

    def test_allowed_punctuation(self):
        assert filename_for("user-1_a.b") == "memory_user-1_a.b.json"

    def test_deterministic(self):
        assert filename_for("a/b") == filename_for("a/b")

    @pytest.mark.parametrize("key", ["../etc/passwd", "a/b", "..", ".hidden", "ñandú", "a b", ""])
    def test_unsafe_keys_are_hashed(self, key: str):
        name = filename_for(key)
        assert name.startswith("memory_")
        assert name.endswith(".json")
        assert "/" not in name
        assert name.startswith("memory_sha256+")
        assert len(name) == len("memory_sha256+") + 64 + len(".json")

    def test_distinct_unsafe_keys_get_distinct_names(self):
        assert filename_for("a/b") != filename_for("a/c")

    def test_hashed_name_never_matches_a_plain_key(self):
        digest = hashlib.sha256(b"alice@example.com").hexdigest()
        assert filename_for(digest) == f"memory_{digest}.json"
        assert filename_for("alice@example.com") != filename_for(digest)

    def test_trailing_newline_is_hashed(self):
        assert filename_for("u1\n") != filename_for("u1")
        assert "\n" not in filename_for("u1\n")


class TestFileMemoryBackend:
    @pytest.fixture
    def backend(self, tmp_path: Path) -> FileMemoryBackend:
        return FileMemoryBackend(tmp_path / "memory")

    def test_load_missing_returns_none(self, backend: FileMemoryBackend):
        assert backend.load("nobody") is None

    def test_save_creates_directory(self, backend: FileMemoryBackend):
        backend.save("u1", {"userId": "u1"})
        assert backend.memory_dir.is_dir()
        assert backend.path_for("u1").exists()

    def test_save_and_load(self, backend: FileMemoryBackend):
        value = {"userId": "u1", "conversation": [{"role": "user", "content": "habari"}]}
        backend.save("u1", value)
        assert backend.load("u1") == value

    def test_file_is_pretty_printed_json(self, backend: FileMemoryBackend):
        backend.save("u1", {"userId": "u1", "lastTask": "niko poa"})
        text = backend.path_for("u1").read_text(encoding="utf-8")
        assert text.startswith("{\n  ")
        assert json.loads(text)["lastTask"] == "niko poa"

    def test_save_overwrites(self, backend: FileMemoryBackend):
        backend.save("u1", {"v": 1})
        backend.save("u1", {"v": 2})
        assert backend.load("u1") == {"v": 2}

    def test_unsafe_key_stays_inside_directory(self, backend: FileMemoryBackend):
        backend.save("../escape", {"v": 1})
        path = backend.path_for("../escape")
        assert path.parent == backend.memory_dir
        assert backend.load("../escape") == {"v": 1}

    def test_corrupt_file_raises(self, backend: FileMemoryBackend):
        backend.memory_dir.mkdir(parents=True)
        backend.path_for("u1").write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            backend.load("u1")


class TestInMemoryBackend:
    def test_load_missing_returns_none(self):
        assert InMemoryBackend().load("u1") is None

    def test_values_are_copied(self):
        backend = InMemoryBackend()
        value = {"conversation": []}
        backend.save("u1", value)
        value["conversation"].append("mutated")

        loaded = backend.load("u1")
        assert loaded == {"conversation": []}
        loaded["conversation"].append("again")
        assert backend.load("u1") == {"conversation": []}

    def test_contains(self):
        backend = InMemoryBackend()
        backend.save("u1", {})
        assert "u1" in backend
        assert "u2" not in backend


def test_hashed_user_and_hex_user_keep_separate_records(tmp_path: Path):
    backend = FileMemoryBackend(tmp_path)
    email = "alice@example.com"
    digest = hashlib.sha256(email.encode("utf-8")).hexdigest()

    backend.save(email, {"userId": email, "lastTask": "secret plan"})

    assert backend.load(digest) is None
    assert backend.load(email) == {"userId": email, "lastTask": "secret plan"}
