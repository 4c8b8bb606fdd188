"""Centralized configuration for the SiteDiary backend.

Re-exports everything from sitediary.infrastructure.settings, then adds typed
constants for the LLM provider, AI rate limiting and the API surface.
Environment variable overrides use safe defaults so the app starts without
extra env configuration.
"""

from __future__ import annotations

import os

from sitediary.infrastructure.settings import *  # noqa: F401, F403

# --- App ---
APP_VERSION: str = "1.0.0"

# --- LLM ---
LLM_TIMEOUT_SECONDS: int = int(os.getenv("SITEDIARY_LLM_TIMEOUT", "30"))
LLM_MAX_RETRIES: int = int(os.getenv("SITEDIARY_LLM_MAX_RETRIES", "3"))
LLM_MAX_WORKERS: int = int(os.getenv("SITEDIARY_LLM_MAX_WORKERS", "4"))

SUMMARY_TEMPERATURE: float = 0.7
SUMMARY_MAX_TOKENS: int = 600
BEAUTIFY_TEMPERATURE: float = 0.5
BEAUTIFY_MAX_TOKENS: int = 300

# --- AI Rate Limiting ---
# Global per operation name, not per caller.
AI_RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("SITEDIARY_AI_RATE_LIMIT_WINDOW", "60"))
AI_RATE_LIMIT_MAX_REQUESTS: int = int(os.getenv("SITEDIARY_AI_RATE_LIMIT_MAX", "2"))
AI_RATE_LIMIT_MAX_IDENTIFIERS: int = 10000

# --- API ---
API_SUMMARY_LOOKBACK_DAYS: int = 7
API_TEXT_MAX_LENGTH: int = 10_000
CORS_ALLOWED_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("SITEDIARY_CORS_ORIGINS", "").split(",")
    if origin.strip()
]
