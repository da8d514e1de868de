"""JSONL event log for request observability."""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    user_id: str | None = None
    status_code: int | None = None
    language: str | None = None
    duration_ms: float | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {}}


class JSONLLogger:
    """Logger that writes structured events in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "events.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".maxchat" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Append an entry. Write failures are reported and dropped."""
        try:
            self._rotate_if_needed()
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry.to_dict(), ensure_ascii=False, default=str) + "\n")
        except OSError as e:
            logger.warning("Could not write %s event to %s: %s", entry.event, self.log_path, e)

    def log(
        self,
        event: str,
        *,
        user_id: str | None = None,
        status_code: int | None = None,
        language: str | None = None,
        duration_ms: float | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            user_id=user_id,
            status_code=status_code,
            language=language,
            duration_ms=duration_ms,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_request(self, user_id: str, language: str, prompt_chars: int) -> None:
        """Log an accepted chat request."""
        self.log("request", user_id=user_id, language=language, prompt_chars=prompt_chars)

    def log_reply(self, user_id: str, duration_ms: float, reply_chars: int) -> None:
        """Log a reply returned to the caller."""
        self.log(
            "reply",
            user_id=user_id,
            status_code=200,
            duration_ms=duration_ms,
            reply_chars=reply_chars,
        )

    def log_upstream_error(self, user_id: str, status_code: int, error: Any) -> None:
        """Log a non-success answer from the generation endpoint."""
        self.log(
            "upstream_error",
            user_id=user_id,
            status_code=status_code,
            error=error if isinstance(error, str) else json.dumps(error, default=str),
        )

    def log_memory_failure(self, operation: str, user_id: str, error: str) -> None:
        """Log a failed memory read or write."""
        self.log(f"memory_{operation}_failed", user_id=user_id, error=error)

    def log_server_error(self, user_id: str | None, error: str) -> None:
        """Log an unexpected pipeline failure."""
        self.log("server_error", user_id=user_id, status_code=500, error=error)

