"""Conversation summaries for the meeting / email hand-off forms.

The client calls this when the user opens the scheduling form: the model
condenses the chat into a few bullet points, proposes a meeting title and
says whether the follow-up looks like a meeting or just an email.  Any
failure falls back to a fixed summary so the form can always be filled.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from resume_assistant.services.llm_gateway import LanguageModelGateway, UpstreamError

logger = logging.getLogger(__name__)

SUMMARY_WINDOW = 10

SUMMARY_PROMPT_TEMPLATE = """You are an AI assistant that summarizes conversations and suggests meeting titles.

Based on the following conversation, provide:
1. A concise summary in 3-5 bullet points covering decisions, blockers, next steps
2. A suggested meeting title (max 8 words)
3. Whether this seems like it needs a meeting ('meeting') or just an email follow-up ('email')

Keep the total summary under 120 words.

Conversation:
{conversation}

Respond in JSON format:
{{
  "summary": "• Point 1\\n• Point 2\\n• Point 3",
  "title": "Suggested Meeting Title",
  "suggestedMode": "meeting" or "email"
}}"""

SUMMARY_REQUEST = (
    "Please analyze this conversation and provide the summary, title, and suggested mode."
)

_FENCED_JSON_RE = re.compile(r"```json\s*(\{.*?\})\s*```", re.DOTALL)


@dataclass(frozen=True)
class ConversationSummary:
    summary: str
    title: str
    suggested_mode: str  # "meeting" | "email"


FALLBACK_SUMMARY = ConversationSummary(
    summary=(
        "• Discussion about project requirements\n"
        "• Need for follow-up\n"
        "• Action items identified"
    ),
    title="Project Discussion",
    suggested_mode="email",
)


def format_conversation(history: Sequence[BaseMessage]) -> str:
    """Render the last ``SUMMARY_WINDOW`` messages as ``Role: text`` lines."""
    lines = []
    for message in list(history)[-SUMMARY_WINDOW:]:
        speaker = "User" if message.type == "human" else "Assistant"
        lines.append(f"{speaker}: {message.content}")
    return "\n".join(lines)


def extract_json(content: str) -> str:
    """Strip a ```json fenced block down to the JSON object it contains."""
    content = content.strip()
    if content.startswith("```json"):
        start, end = content.find("{"), content.rfind("}")
        if start != -1 and end > start:
            return content[start : end + 1]
    elif "```json" in content:
        match = _FENCED_JSON_RE.search(content)
        if match:
            return match.group(1)
    return content


def parse_summary(content: str) -> ConversationSummary:
    """Parse the model's JSON reply.

    Raises:
        ValueError: if the reply is not a JSON object.
    """
    parsed = json.loads(extract_json(content))
    if not isinstance(parsed, dict):
        raise ValueError("Summary reply is not a JSON object")
    return ConversationSummary(
        summary=str(parsed.get("summary") or "Summary not available"),
        title=str(parsed.get("title") or "Meeting"),
        suggested_mode="meeting" if parsed.get("suggestedMode") == "meeting" else "email",
    )


def summarize_conversation(
    history: Sequence[BaseMessage],
    gateway: LanguageModelGateway,
) -> ConversationSummary:
    """Summarise *history* with the model, or return ``FALLBACK_SUMMARY``."""
    if not gateway.is_configured:
        logger.warning("No model API key configured; returning fallback summary")
        return FALLBACK_SUMMARY

    messages = [
        SystemMessage(content=SUMMARY_PROMPT_TEMPLATE.format(
            conversation=format_conversation(history),
        )),
        HumanMessage(content=SUMMARY_REQUEST),
    ]

    raw: str | None = None
    try:
        completion = gateway.chat(messages)
        raw = completion["choices"][0]["message"]["content"]
        return parse_summary(raw)
    except (UpstreamError, ValueError):
        logger.exception("Summary generation failed (raw reply: %r)", raw)
        return FALLBACK_SUMMARY
