"""FastAPI route definitions for the resume assistant API."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from resume_assistant import config
from resume_assistant.agent import IntentRouter
from resume_assistant.api.schemas import (
    AskRequest,
    AssistantResponse,
    HealthResponse,
    SummaryRequest,
    SummaryResponse,
    to_langchain_history,
)
from resume_assistant.summary import summarize_conversation

logger = logging.getLogger(__name__)

router = APIRouter()

# Per-client-IP limit shared by the model-backed endpoints.
limiter = Limiter(key_func=get_remote_address, enabled=config.RATE_LIMIT_ENABLED)


def _get_router(request: Request) -> IntentRouter:
    """Retrieve the IntentRouter built during the FastAPI lifespan."""
    intent_router = getattr(request.app.state, "intent_router", None)
    if intent_router is None:
        raise HTTPException(
            status_code=503,
            detail="The assistant is still starting up. Please try again in a moment.",
        )
    return intent_router


def _internal_error(exc: Exception) -> HTTPException:
    """500 response; the exception text is only exposed in development."""
    detail = str(exc) if config.EXPOSE_ERROR_DETAILS else "An internal error occurred. Please try again."
    return HTTPException(status_code=500, detail=detail)


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse()


@router.post(
    "/assistant/ask",
    response_model=AssistantResponse,
    response_model_exclude_none=True,
)
@limiter.limit(config.RATE_LIMIT)
async def ask(request: Request, body: AskRequest):
    """Answer one assistant query.

    Model failures never surface here: the router converts them into a
    scripted reply, so this endpoint returns 200 for them.  The router
    call blocks on the model API, so it runs in the default thread pool.
    """
    intent_router = _get_router(request)
    request_id = getattr(request.state, "request_id", "?")

    try:
        envelope = await asyncio.to_thread(
            intent_router.handle,
            body.query,
            body.mode,
            to_langchain_history(body.history),
            body.user_name,
        )
        return AssistantResponse.model_validate(envelope)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("[%s] Error processing assistant query", request_id)
        raise _internal_error(e) from e


@router.get("/assistant/download")
async def download_resume():
    """Serve the resume PDF as an attachment."""
    if not config.RESUME_PDF_PATH.is_file():
        logger.error("Resume PDF not found at %s", config.RESUME_PDF_PATH)
        raise HTTPException(status_code=404, detail="The resume PDF is not available.")
    return FileResponse(
        config.RESUME_PDF_PATH,
        media_type="application/pdf",
        filename=config.RESUME_PDF_FILENAME,
    )


@router.post("/ai/summary", response_model=SummaryResponse)
@limiter.limit(config.RATE_LIMIT)
async def conversation_summary(request: Request, body: SummaryRequest):
    """Summarise the chat for the meeting / email hand-off form."""
    intent_router = _get_router(request)
    request_id = getattr(request.state, "request_id", "?")

    try:
        result = await asyncio.to_thread(
            summarize_conversation,
            to_langchain_history(body.chat_history),
            intent_router.gateway,
        )
    except Exception as e:
        logger.exception("[%s] Error generating conversation summary", request_id)
        raise _internal_error(e) from e

    return SummaryResponse(
        summary=result.summary,
        suggested_title=result.title,
        suggested_mode=result.suggested_mode,
    )
