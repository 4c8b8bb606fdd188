"""Health check endpoint.

Liveness probe plus AI provider credential readiness.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from sitediary.config import APP_VERSION, ENV
from sitediary.llm.gemini import get_gemini_status

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Does not call the provider, only checks credential presence."""
    return {
        "status": "healthy",
        "service": "SiteDiary API",
        "version": APP_VERSION,
        "environment": ENV,
        "timestamp": datetime.now(UTC).isoformat(),
        "llm": get_gemini_status(),
    }
