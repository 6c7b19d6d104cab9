"""FastAPI server for the Resume Assistant backend.

Run with:
    uvicorn resume_assistant.server:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from resume_assistant.agent import create_intent_router
from resume_assistant.api.routes import limiter, router
from resume_assistant.config import (
    CORS_ORIGINS,
    EXPOSE_ERROR_DETAILS,
    LOG_LEVEL,
    SERVER_HOST,
    SERVER_PORT,
)
from resume_assistant.services.resume import DataLoadError, get_resume_store

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: initialise shared resources ────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Start-up: warm the resume cache and build the intent router once.

    Loading the resume here means request threads only ever read the
    cached record.  A broken resume file does not stop the server (the
    canned intents still work), but every model-routed query, small talk
    included, then fails with a 500: both prompts take the persona name
    from the resume.
    """
    try:
        get_resume_store().load()
    except DataLoadError:
        logger.exception("Resume data failed to load at start-up")

    logger.info("Building intent router…")
    application.state.intent_router = create_intent_router()
    logger.info("Assistant ready.")
    yield


# ── FastAPI application ──────────────────────────────────────────────
app = FastAPI(
    title="Resume Assistant",
    description=(
        "Chat backend answering questions about a professional background, "
        "with meeting and email hand-off signals for the client."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Rate limiting ────────────────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# ── Request-ID middleware ────────────────────────────────────────────
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> Response:
    """Attach a unique request ID to every request for log correlation.

    The ID is echoed in the ``X-Request-ID`` response header and prefixed
    to the request log line.
    """
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id
    logger.info(
        "[%s] %s %s", request_id, request.method, request.url.path,
    )
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ── Last-resort error handler ────────────────────────────────────────
@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 for anything the routes did not handle."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error: dict[str, str] = {
        "message": str(exc) if EXPOSE_ERROR_DETAILS else "Internal server error",
    }
    return JSONResponse(status_code=500, content={"error": error})


# ── Register routes ──────────────────────────────────────────────────
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Resume Assistant",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


# ── CLI entry point ──────────────────────────────────────────────────

if __name__ == "__main__":
    logger.info("Starting Resume Assistant API on %s:%d", SERVER_HOST, SERVER_PORT)
    uvicorn.run(
        "resume_assistant.server:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
    )
