"""Runtime configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from .persona import DEFAULT_PERSONA

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_MEMORY_DIR = Path("/tmp/memory")
MAX_TURNS = 15


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag such as ``1``/``true``/``no`` from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _load_persona(path: str | None) -> str:
    if not path:
        return DEFAULT_PERSONA
    return Path(path).read_text(encoding="utf-8")


@dataclass
class Settings:
    """Settings for the chat handler and its HTTP surface."""

    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_MODEL
    gemini_api_url: str = GEMINI_API_BASE
    temperature: float = 0.9
    max_output_tokens: int = 900
    memory_dir: Path = DEFAULT_MEMORY_DIR
    max_turns: int = MAX_TURNS
    pin_system: bool = True
    serialize_users: bool = True
    persona: str = field(default=DEFAULT_PERSONA, repr=False)
    log_dir: Path | None = None
    host: str = "0.0.0.0"
    port: int = 8000

    def __post_init__(self) -> None:
        if self.max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        if self.log_dir is None:
            self.log_dir = Path.home() / ".maxchat" / "logs"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        log_dir = os.getenv("MAXCHAT_LOG_DIR")
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            gemini_api_url=os.getenv("GEMINI_API_URL", GEMINI_API_BASE),
            temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.9")),
            max_output_tokens=int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "900")),
            memory_dir=Path(os.getenv("MAXCHAT_MEMORY_DIR", str(DEFAULT_MEMORY_DIR))),
            max_turns=int(os.getenv("MAXCHAT_MAX_TURNS", str(MAX_TURNS))),
            pin_system=_env_bool("MAXCHAT_PIN_SYSTEM", True),
            serialize_users=_env_bool("MAXCHAT_SERIALIZE_USERS", True),
            persona=_load_persona(os.getenv("MAXCHAT_PERSONA_FILE")),
            log_dir=Path(log_dir) if log_dir else None,
            host=os.getenv("MAXCHAT_HOST", "0.0.0.0"),
            port=int(os.getenv("MAXCHAT_PORT", "8000")),
        )
