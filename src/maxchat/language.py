"""Heuristic language detection used to steer reply tone."""

from enum import Enum


class Language(str, Enum):
    """Language register detected in a prompt."""

    ENGLISH = "english"
    MIXED = "mixed"
    SWAHILI = "swahili"


SWAHILI_WORDS = (
    "habari",
    "sasa",
    "niko",
    "kwani",
    "basi",
    "ndio",
    "karibu",
    "asante",
)

SHENG_WORDS = (
    "bro",
    "maze",
    "manze",
    "noma",
    "fiti",
    "safi",
    "buda",
    "msee",
    "mwana",
    "poa",
)

# At or above this many matches a prompt counts as fully Swahili/Sheng.
SWAHILI_THRESHOLD = 3


def count_matches(text: str) -> int:
    """Count list words that appear anywhere in text.

    Matching is by substring on the lower-cased text, so "bro" also matches
    inside "brother". Each list word counts at most once.
    """
    lower = text.lower()
    return sum(1 for word in (*SWAHILI_WORDS, *SHENG_WORDS) if word in lower)


def classify(text: str) -> Language:
    """Classify text as English, mixed, or Swahili/Sheng."""
    matches = count_matches(text)
    if matches == 0:
        return Language.ENGLISH
    if matches < SWAHILI_THRESHOLD:
        return Language.MIXED
    return Language.SWAHILI
