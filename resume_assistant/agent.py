"""LangGraph-based intent router for the resume assistant.

Architecture:
  Each ``/ask`` request runs once through a small LangGraph StateGraph:

    1. **classify**      — keyword rules pick one ``Intent``
                           (see ``resume_assistant.intents``)
    2. **canned_reply**  — scripted answer, no external call
    3. **model_reply**   — selects a system prompt, assembles a bounded
                           message window and calls the language model

  Routing:
    classify → (canned intent?) → canned_reply → END
    classify → (model intent?)  → model_reply  → END

  The graph is compiled without a checkpointer: the client sends its own
  history with every request and nothing is persisted server-side.

  Every path returns the same envelope::

    {"message": str,
     "metadata": {"model": str, "show_meeting_popup": bool | None,
                  "usage": {"prompt_tokens", "completion_tokens", "total_tokens"}}}
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from langchain_core.messages import AnyMessage, BaseMessage
from langgraph.graph import END, StateGraph
from typing_extensions import TypedDict

from resume_assistant.conversation import assemble
from resume_assistant.intents import MODEL_INTENTS, Intent, classify
from resume_assistant.prompts import (
    DEMO_FALLBACK_REPLY,
    DEMO_REPLY,
    KNOWN_NAME_REPLY,
    MEETING_OFFER_REPLY,
    MEETING_SCHEDULED_REPLY,
    NON_CAREER_REPLY,
    RESUME_DOWNLOAD_REPLY,
    SALARY_REPLY,
    TIME_DISCUSSION_REPLY,
    UNKNOWN_NAME_REPLY,
    get_career_prompt,
    get_persona_prompt,
)
from resume_assistant.services.llm_gateway import (
    LanguageModelGateway,
    get_language_model_gateway,
)
from resume_assistant.services.metrics import metrics

logger = logging.getLogger(__name__)

ZERO_USAGE = {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}
DEMO_USAGE = {"prompt_tokens": 100, "completion_tokens": 50, "total_tokens": 150}

# intent → (reply, metadata.model, show_meeting_popup)
_CANNED_REPLIES: dict[Intent, tuple[str, str, bool | None]] = {
    Intent.RESUME_DOWNLOAD: (RESUME_DOWNLOAD_REPLY, "direct", None),
    Intent.AVAILABILITY_QUESTION: (MEETING_OFFER_REPLY, "meeting-offer", False),
    Intent.DIRECT_SCHEDULING_REQUEST: (MEETING_SCHEDULED_REPLY, "meeting-scheduled", True),
    Intent.EXPLICIT_SCHEDULE_CONFIRMATION: (MEETING_SCHEDULED_REPLY, "meeting-scheduled", True),
    Intent.TIME_DISCUSSION_REDIRECT: (TIME_DISCUSSION_REPLY, "meeting-scheduled", True),
    Intent.SALARY_REDIRECT: (SALARY_REPLY, "meeting-offer", False),
    Intent.OBVIOUS_NON_CAREER: (NON_CAREER_REPLY, "career-filter", None),
}


# ── State schema ─────────────────────────────────────────────────────


class RouterState(TypedDict, total=False):
    """The state that flows through the graph for one query.

    ``intent`` is written by the classify node and read by the
    conditional edge; ``response`` is the final envelope.
    """

    query: str
    mode: str
    history: list[AnyMessage]
    user_name: str | None
    intent: Intent
    response: dict[str, Any]


def build_response(
    message: str,
    model: str,
    *,
    usage: dict[str, Any] | None = None,
    show_meeting_popup: bool | None = None,
) -> dict[str, Any]:
    """Build the uniform response envelope."""
    return {
        "message": message,
        "metadata": {
            "model": model,
            "show_meeting_popup": show_meeting_popup,
            "usage": dict(usage if usage is not None else ZERO_USAGE),
        },
    }


# ── Nodes ────────────────────────────────────────────────────────────


def classify_node(state: RouterState) -> dict:
    """Classify the query against its history."""
    intent = classify(state["query"], state.get("history", []))
    metrics.record_intent(intent.value)
    logger.info("Intent: %s (mode=%s)", intent.value, state.get("mode", "text"))
    return {"intent": intent}


def canned_reply_node(state: RouterState) -> dict:
    """Answer a canned intent without any external call."""
    intent = state["intent"]
    if intent is Intent.NAME_QUERY:
        user_name = state.get("user_name")
        message = KNOWN_NAME_REPLY.format(user_name=user_name) if user_name else UNKNOWN_NAME_REPLY
        return {"response": build_response(message, "direct")}

    message, model, show_popup = _CANNED_REPLIES[intent]
    return {"response": build_response(message, model, show_meeting_popup=show_popup)}


def _make_model_reply_node(gateway: LanguageModelGateway):
    """Create the node that answers through the language model.

    The gateway is captured in the closure so every request shares one
    HTTP client.
    """

    def model_reply_node(state: RouterState) -> dict:
        """Pick the system prompt, assemble the window and call the model."""
        if state["intent"] is Intent.CONVERSATIONAL:
            system_prompt = get_persona_prompt()
        else:
            system_prompt = get_career_prompt()

        messages = assemble(system_prompt, state.get("history", []), state["query"])

        if not gateway.is_configured:
            logger.warning("No model API key configured; returning demo reply")
            return {"response": build_response(DEMO_REPLY, "demo", usage=DEMO_USAGE)}

        try:
            completion = gateway.chat(messages)
        except Exception as e:
            # Any gateway failure, not only UpstreamError, degrades to a scripted reply.
            logger.exception(
                "Model API call failed (%s); returning fallback reply", type(e).__name__,
            )
            return {
                "response": build_response(DEMO_FALLBACK_REPLY, "demo-fallback", usage=DEMO_USAGE),
            }

        return {
            "response": build_response(
                completion["choices"][0]["message"]["content"],
                completion.get("model", gateway.model),
                usage=completion.get("usage") or ZERO_USAGE,
            ),
        }

    return model_reply_node


# ── Conditional edge ─────────────────────────────────────────────────


def route_by_intent(state: RouterState) -> str:
    """Send model intents to the model node, everything else to canned."""
    if state["intent"] in MODEL_INTENTS:
        return "model_reply"
    return "canned_reply"


# ── Graph assembly ───────────────────────────────────────────────────


def build_router_graph(gateway: LanguageModelGateway):
    """Build and compile the classify → reply graph."""
    graph = StateGraph(RouterState)

    graph.add_node("classify", classify_node)
    graph.add_node("canned_reply", canned_reply_node)
    graph.add_node("model_reply", _make_model_reply_node(gateway))

    graph.set_entry_point("classify")
    graph.add_conditional_edges(
        "classify",
        route_by_intent,
        {"canned_reply": "canned_reply", "model_reply": "model_reply"},
    )
    graph.add_edge("canned_reply", END)
    graph.add_edge("model_reply", END)

    return graph.compile()


class IntentRouter:
    """Entry point for one assistant query.

    ``handle`` is synchronous (the model call blocks); async callers
    should offload it with ``asyncio.to_thread``.
    """

    def __init__(self, gateway: LanguageModelGateway | None = None) -> None:
        self._gateway = gateway or get_language_model_gateway()
        self._graph = build_router_graph(self._gateway)

    @property
    def gateway(self) -> LanguageModelGateway:
        return self._gateway

    def handle(
        self,
        query: str,
        mode: str = "text",
        history: Sequence[BaseMessage] = (),
        user_name: str | None = None,
    ) -> dict[str, Any]:
        """Classify *query* and return the response envelope."""
        result = self._graph.invoke(
            {
                "query": query,
                "mode": mode,
                "history": list(history),
                "user_name": user_name,
            }
        )
        return result["response"]


def create_intent_router() -> IntentRouter:
    """Build an IntentRouter on the shared gateway."""
    router = IntentRouter()
    logger.debug(
        "Intent router compiled — model: %s, configured: %s",
        router.gateway.model, router.gateway.is_configured,
    )
    return router
