"""
Gemini Model Manager - cached model instances for the AI gateway.

Supports two backends:
  1. Vertex AI SDK (production, Cloud Run) uses GOOGLE_CLOUD_PROJECT + service account
  2. google-generativeai (local dev) uses GOOGLE_API_KEY
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from sitediary.infrastructure.settings import (
    GEMINI_LOCATION,
    GEMINI_MODEL,
    PLACEHOLDER_CREDENTIALS,
)
from sitediary.observability.logging import get_logger

logger = get_logger(__name__)

SETUP_HINT = (
    "Set GOOGLE_API_KEY (google-generativeai) or GOOGLE_CLOUD_PROJECT (Vertex AI) "
    "in your environment or .env file."
)


class GeminiInitializationError(RuntimeError):
    """Raised when Gemini model cannot be initialized."""


def _credential(name: str) -> str | None:
    # Read fresh: settings may have been imported before dotenv ran
    value = (os.getenv(name) or "").strip()
    if value in PLACEHOLDER_CREDENTIALS:
        return None
    return value


def is_gemini_configured() -> bool:
    """True when an API key or a Vertex AI project is set to a real value."""
    return bool(_credential("GOOGLE_API_KEY") or _credential("GOOGLE_CLOUD_PROJECT"))


def get_gemini_status() -> dict[str, Any]:
    """Credential readiness for health checks (no API call is made)."""
    configured = is_gemini_configured()
    return {
        "ready": configured,
        "google_api_key": _credential("GOOGLE_API_KEY") is not None,
        "google_cloud_project": _credential("GOOGLE_CLOUD_PROJECT") is not None,
        "model": GEMINI_MODEL,
        "message": "AI provider is configured" if configured else SETUP_HINT,
    }


@lru_cache(maxsize=8)
def get_gemini_model(system_instruction: str | None = None) -> Any:
    """
    Get or create a cached Gemini model for ``system_instruction``.

    System instructions are per-model-instance in the Gemini API, so each
    distinct instruction gets its own cached model. Uses Vertex AI when a
    project is configured and the SDK is installed, otherwise falls back to
    google-generativeai with GOOGLE_API_KEY.

    Raises:
        GeminiInitializationError: If no backend can be initialized
    """
    project = _credential("GOOGLE_CLOUD_PROJECT")
    location = os.getenv("GEMINI_LOCATION", "") or GEMINI_LOCATION

    if project:
        try:
            import vertexai
            from vertexai.generative_models import GenerativeModel

            vertexai.init(project=project, location=location)
            model = GenerativeModel(GEMINI_MODEL, system_instruction=system_instruction)
            logger.info(
                "Initialized Gemini model (Vertex AI): project=%s, location=%s, model=%s",
                project,
                location,
                GEMINI_MODEL,
            )
            return model
        except ImportError:
            logger.info("Vertex AI SDK not installed, trying google-generativeai fallback")

    api_key = _credential("GOOGLE_API_KEY")
    if not api_key:
        raise GeminiInitializationError(
            "Neither Vertex AI nor GOOGLE_API_KEY available. " + SETUP_HINT
        )

    try:
        import google.generativeai as genai
    except ImportError as e:
        raise GeminiInitializationError(
            "No Gemini SDK available. Install google-cloud-aiplatform or google-generativeai."
        ) from e

    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(GEMINI_MODEL, system_instruction=system_instruction)
    logger.info("Initialized Gemini model (google-generativeai): model=%s", GEMINI_MODEL)
    return model


def clear_model_cache() -> None:
    """
    Clear the cached model instances.

    Useful for testing or when credentials change.
    """
    get_gemini_model.cache_clear()
    logger.info("Cleared Gemini model cache")
