"""FastAPI server for the SiteDiary API (REST + GraphQL)"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sitediary.api.dependencies import AppServices, build_services
from sitediary.api.graphql.schema import build_graphql_router
from sitediary.api.responses import error_response, success_response
from sitediary.api.routes.ai import router as ai_router
from sitediary.api.routes.diaries import router as diaries_router
from sitediary.api.routes.health import router as health_router
from sitediary.config import APP_VERSION, CORS_ALLOWED_ORIGINS, ENV, is_development
from sitediary.errors import ErrorCode, NormalizedError
from sitediary.observability.logging import get_logger
from sitediary.observability.telemetry import counter, log_event

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:8000",
]


def _allowed_origins(development: bool) -> list[str]:
    origins = list(CORS_ALLOWED_ORIGINS)
    if development:
        origins.extend(o for o in DEV_ORIGINS if o not in origins)
    return origins


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a VALIDATION envelope that names the invalid fields only.

    Side Effects:
        - Logs the full validation errors
        - Increments api.validation_errors counter
    """
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    counter("api.validation_errors")

    return error_response(
        NormalizedError.of(
            ErrorCode.VALIDATION,
            "Invalid request format. Please check your request and try again.",
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={
                "errorCount": len(exc.errors()),
                "invalidFields": [str(err["loc"][-1]) for err in exc.errors() if err.get("loc")],
            },
        )
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    counter("api.unhandled_errors")

    return error_response(
        NormalizedError.of(ErrorCode.INTERNAL, "An unexpected error occurred.", status=500)
    )


def create_app(services: AppServices | None = None, development: bool | None = None) -> FastAPI:
    """Build the application. Tests pass their own services (fake provider, seeded diaries)."""
    if development is None:
        development = is_development()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.services.gateway.shutdown()
        logger.info("SiteDiary API stopped")

    app = FastAPI(title="SiteDiary API", version=APP_VERSION, lifespan=lifespan)
    app.state.services = services or build_services()

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(development),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.include_router(health_router)
    app.include_router(ai_router)
    app.include_router(diaries_router)
    app.include_router(build_graphql_router(development), prefix="/api/graphql")

    @app.get("/")
    async def root() -> JSONResponse:
        return success_response(
            {
                "service": "SiteDiary API",
                "version": APP_VERSION,
                "graphql": "/api/graphql",
                "health": "/health",
            },
            "SiteDiary API is running",
        )

    log_event("api.startup", service="sitediary", version=APP_VERSION, env=ENV)
    return app


app = create_app()
