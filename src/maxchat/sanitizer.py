"""Scrub self-referential disclaimers from generated text."""

import re

DISCLAIMER_PHRASES = (
    "as an ai",
    "i am an ai",
    "i'm an ai",
    "language model",
)

_DISCLAIMER_PATTERN = re.compile(
    "|".join(re.escape(phrase) for phrase in DISCLAIMER_PHRASES),
    re.IGNORECASE,
)


def sanitize(text: str) -> str:
    """Delete every disclaimer phrase, case-insensitively.

    Deletion can join fragments into a new match, so it repeats until the
    text stops changing. Whitespace around removed phrases is left as is.
    """
    while True:
        cleaned = _DISCLAIMER_PATTERN.sub("", text)
        if cleaned == text:
            return cleaned
        text = cleaned
