"""HTTP and GraphQL transports for the SiteDiary service."""

from __future__ import annotations


def main() -> None:
    """Run the API with uvicorn (``sitediary-api`` console script)."""
    import uvicorn

    from sitediary.config import API_HOST, API_PORT, LOG_LEVEL

    uvicorn.run("sitediary.api.app:app", host=API_HOST, port=API_PORT, log_level=LOG_LEVEL.lower())
