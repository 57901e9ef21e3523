"""
Discord Embed Templates
========================

Payload builders for the ``/gpt`` command responses.

Color Codes:
- Green (answer): 0x00FF00
"""

from __future__ import annotations

from typing import Any, Dict, Optional

# Discord response types
RESPONSE_TYPE_CHANNEL_MESSAGE = 4

# Embed color codes
COLOR_ANSWER = 0x00FF00  # Green

ANSWER_TITLE = "Disco GPT"
PLACEHOLDER_CONTENT = "Enviando prompt..."
TIMEOUT_NOTICE = "The model did not answer in time."

# Discord message limits
MAX_CONTENT_LENGTH = 2000
MAX_EMBED_DESCRIPTION_LENGTH = 4096


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def create_acknowledgment() -> Dict[str, Any]:
    """Initial channel-message response sent before the model is asked."""
    return {
        "type": RESPONSE_TYPE_CHANNEL_MESSAGE,
        "data": {"content": PLACEHOLDER_CONTENT},
    }


def format_question(prompt: str) -> str:
    """Quote the user's prompt for the edited message content."""
    return _truncate(f"> Pergunta: {prompt}", MAX_CONTENT_LENGTH)


def create_answer_embed(answer: Optional[str]) -> Dict[str, Any]:
    """
    Create the embed carrying the model's answer.

    Parameters
    ----------
    answer : Optional[str]
        Completion text.  ``None`` or empty leaves the description out.

    Returns
    -------
    Dict[str, Any]
        Discord embed dict
    """
    embed: Dict[str, Any] = {
        "title": ANSWER_TITLE,
        "color": COLOR_ANSWER,
    }
    if answer:
        embed["description"] = _truncate(answer, MAX_EMBED_DESCRIPTION_LENGTH)
    return embed


def create_answer_edit(prompt: str, answer: Optional[str]) -> Dict[str, Any]:
    """Body of the edit applied to the acknowledgment message."""
    return {
        "content": format_question(prompt),
        "embeds": [create_answer_embed(answer)],
    }
