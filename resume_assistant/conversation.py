"""Builds the message sequence sent to the language model.

The chat-completions API rejects malformed role sequences, so instead of
replaying the whole client-side history the assembler sends a short
window: one system message, at most one earlier user message and one
earlier assistant message, and the current query last.
"""

from __future__ import annotations

from collections.abc import Sequence

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

# How far back in the history to look, and the hard cap on kept messages.
HISTORY_WINDOW = 6
MAX_HISTORY_MESSAGES = 4

_CONVERSATION_ROLES = ("human", "ai")


def select_history(history: Sequence[BaseMessage]) -> list[BaseMessage]:
    """Pick the most recent user and assistant messages from *history*.

    Scans the last ``HISTORY_WINDOW`` messages from newest to oldest and
    keeps the first message seen for each role, preserving chronological
    order in the result.
    """
    kept: list[BaseMessage] = []
    for message in reversed(list(history)[-HISTORY_WINDOW:]):
        if message.type not in _CONVERSATION_ROLES:
            continue
        if not any(m.type == message.type for m in kept):
            kept.insert(0, message)
        if len(kept) >= MAX_HISTORY_MESSAGES or len(kept) == len(_CONVERSATION_ROLES):
            break
    return kept


def assemble(
    system_prompt: str,
    history: Sequence[BaseMessage],
    query: str,
) -> list[BaseMessage]:
    """Return ``[system, *selected history, user(query)]``."""
    return [
        SystemMessage(content=system_prompt),
        *select_history(history),
        HumanMessage(content=query),
    ]
