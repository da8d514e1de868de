"""Max CodeGen AI chat backend with per-user conversation memory."""

__version__ = "0.1.0"
