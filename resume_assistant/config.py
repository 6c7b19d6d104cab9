"""Centralized configuration for the Resume Assistant backend.

Secret resolution order (per variable):
  1. Environment variable / ``.env`` file  (local dev)
  2. AWS SSM Parameter Store SecureString  (when ``AWS_EXECUTION_ENV`` is set)

The SSM paths follow the convention ``/resume-assistant/<VARIABLE_NAME>``.

Unlike most values, the model API key is optional: without it the service
still answers canned intents and replies to model-bound queries with a
scripted demo message.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ── Feature flag: running on AWS? ────────────────────────────────────
_ON_AWS = bool(os.getenv("AWS_EXECUTION_ENV"))


# ── Secret resolution ────────────────────────────────────────────────

def _get_ssm_parameter(name: str) -> str | None:
    """Fetch a SecureString from SSM Parameter Store.

    Returns ``None`` if the parameter does not exist or boto3 is
    unavailable.  Errors are logged but never raised so that local-dev
    fallback still works.
    """
    try:
        import boto3  # noqa: PLC0415  (boto3 is an optional extra)

        ssm = boto3.client("ssm")
        resp = ssm.get_parameter(Name=f"/resume-assistant/{name}", WithDecryption=True)
        return resp["Parameter"]["Value"]
    except Exception:
        logger.debug("SSM lookup for %s failed (expected locally)", name)
        return None


def _optional_secret(name: str) -> str | None:
    """Return a secret from env-var or SSM, or ``None`` when it is unset."""
    value = os.getenv(name)
    if value and not value.startswith("your_"):
        return value

    if _ON_AWS:
        return _get_ssm_parameter(name)

    return None


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ── Environment ─────────────────────────────────────────────────────
APP_ENV: str = os.getenv("APP_ENV", "development")
# Error details are only returned to clients in development.
EXPOSE_ERROR_DETAILS: bool = APP_ENV == "development"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Language model (Perplexity chat completions) ────────────────────
PERPLEXITY_API_KEY: str | None = _optional_secret("PERPLEXITY_API_KEY")
PERPLEXITY_BASE_URL: str = os.getenv("PERPLEXITY_BASE_URL", "https://api.perplexity.ai")
MODEL_NAME: str = os.getenv("MODEL_NAME", "sonar")
MODEL_TEMPERATURE: float = float(os.getenv("MODEL_TEMPERATURE", "0.3"))
MODEL_MAX_TOKENS: int = int(os.getenv("MODEL_MAX_TOKENS", "1000"))

# ── Resume data ─────────────────────────────────────────────────────
RESUME_DATA_PATH: Path = Path(
    os.getenv("RESUME_DATA_PATH", str(_PROJECT_ROOT / "data" / "resume.json"))
)
RESUME_PDF_PATH: Path = Path(
    os.getenv("RESUME_PDF_PATH", str(_PROJECT_ROOT / "data" / "resume.pdf"))
)
RESUME_PDF_FILENAME: str = os.getenv("RESUME_PDF_FILENAME", "Resume.pdf")
# Public origin of this API, used to build the resume download link.
PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
CORS_ORIGINS: list[str] = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173,http://localhost:5174",
).split(",")
RATE_LIMIT: str = os.getenv("RATE_LIMIT", "100 per 15 minutes")
RATE_LIMIT_ENABLED: bool = _env_flag("RATE_LIMIT_ENABLED", "true")
