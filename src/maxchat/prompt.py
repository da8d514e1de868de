"""Render conversation memory into the text sent for generation."""

from collections.abc import Iterable

from .language import Language
from .memory import ConversationTurn, Role

LANGUAGE_DIRECTIVES = {
    Language.SWAHILI: "Respond fully in Swahili or Sheng naturally depending on tone.",
    Language.MIXED: "Respond bilingually, mostly English, with natural Swahili/Sheng flavor.",
    Language.ENGLISH: "Respond in English, friendly Kenyan developer tone.",
}


def role_label(role: Role) -> str:
    """Label shown before a turn. Only user turns are distinguished."""
    return "User" if role is Role.USER else "Assistant"


def render_turn(turn: ConversationTurn) -> str:
    return f"{role_label(turn.role)}: {turn.content}"


def assemble(conversation: Iterable[ConversationTurn], language: Language) -> str:
    """Build the prompt blob for the generation endpoint.

    Args:
        conversation: Turns in chronological order, already trimmed.
        language: Tag of the latest user prompt.

    Returns:
        The rendered turns followed by a language instruction line.
    """
    lines = "\n".join(render_turn(turn) for turn in conversation)
    return f"\n{lines}\n\nSystem instruction: {LANGUAGE_DIRECTIVES[language]}\n"
