"""
Application-wide settings and environment configuration
"""

from __future__ import annotations

import os

# Environment
ENV = os.getenv("SITEDIARY_ENV", "development")

# API Configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
LOG_LEVEL = os.getenv("SITEDIARY_LOG_LEVEL", "INFO")

# Gemini (credentials are read per call in sitediary.llm.gemini)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-001")
GEMINI_LOCATION = os.getenv("GEMINI_LOCATION", "us-central1")

# Values shipped in .env.example; treated as "not configured"
PLACEHOLDER_CREDENTIALS = frozenset(
    {
        "",
        "your-google-api-key-here",
        "your-gcp-project-id",
        "changeme",
    }
)


def is_development() -> bool:
    """Check if running in development"""
    return os.getenv("SITEDIARY_ENV", ENV) == "development"
