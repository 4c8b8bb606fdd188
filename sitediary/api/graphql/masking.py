"""
GraphQL error masking.

In production only errors explicitly built as ClientSafeError (or carrying
the ``clientSafe: true`` extension marker) reach the client with their
message; their extensions are cut down to an allow-list. Every other error
is replaced with a generic message and a fixed INTERNAL_SERVER_ERROR shape.
Development returns errors untouched.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from graphql import GraphQLError
from strawberry.extensions import SchemaExtension

from sitediary.api.responses import utc_timestamp
from sitediary.errors import NormalizedError
from sitediary.observability.logging import get_logger
from sitediary.observability.telemetry import counter

logger = get_logger(__name__)

DEFAULT_MASKED_ERROR_MESSAGE = "Something went wrong. Please try again later."

SAFE_EXTENSION_KEYS = ("success", "code", "clientSafe", "http", "timestamp", "details")


class ClientSafeError(GraphQLError):
    """Error whose message and envelope may be shown to any client."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_SERVER_ERROR",
        status: int = 500,
        details: Any = None,
    ) -> None:
        extensions: dict[str, Any] = {
            "success": False,
            "code": code,
            "http": {"status": status},
            "timestamp": utc_timestamp(),
            "clientSafe": True,
        }
        if details is not None:
            extensions["details"] = details
        super().__init__(message, extensions=extensions)


class InternalError(GraphQLError):
    """Error whose detail must never leave the process outside development."""


def graphql_error_from(error: NormalizedError) -> ClientSafeError:
    return ClientSafeError(
        error.message, code=error.code, status=error.status, details=error.details
    )


def ensure_graphql_error(error: object) -> GraphQLError:
    """Wrap anything that is not a GraphQLError as an InternalError."""
    if isinstance(error, GraphQLError):
        return error

    message = error if isinstance(error, str) else getattr(error, "message", None)
    if not isinstance(message, str) or not message:
        message = str(error) if isinstance(error, BaseException) else ""

    return InternalError(
        message or DEFAULT_MASKED_ERROR_MESSAGE,
        original_error=error if isinstance(error, Exception) else None,
    )


def _variant_of(error: GraphQLError) -> type[GraphQLError] | None:
    # Resolver errors arrive wrapped in a located GraphQLError
    for candidate in (error, error.original_error):
        if isinstance(candidate, (InternalError, ClientSafeError)):
            return type(candidate)
    return None


def is_client_safe(error: GraphQLError) -> bool:
    variant = _variant_of(error)
    if variant is not None:
        return issubclass(variant, ClientSafeError)

    extensions = error.extensions or {}
    return extensions.get("clientSafe") is True


def pick_safe_extensions(extensions: dict[str, Any]) -> dict[str, Any]:
    safe: dict[str, Any] = {}

    for key in SAFE_EXTENSION_KEYS:
        value = extensions.get(key)
        if value is None:
            continue

        if key == "http":
            status = value.get("status") if isinstance(value, dict) else None
            if isinstance(status, int) and not isinstance(status, bool):
                safe["http"] = {"status": status}
            continue

        safe[key] = value

    safe["clientSafe"] = True
    safe.setdefault("timestamp", utc_timestamp())
    safe.setdefault("success", False)
    return safe


def mask_graphql_error(error: object, is_development: bool) -> GraphQLError:
    """Decide what a GraphQL client may see of ``error``."""
    graphql_error = ensure_graphql_error(error)

    if is_development:
        return graphql_error

    location = {
        "nodes": graphql_error.nodes,
        "source": graphql_error.source,
        "positions": graphql_error.positions,
        "path": graphql_error.path,
    }

    if is_client_safe(graphql_error):
        return GraphQLError(
            graphql_error.message,
            extensions=pick_safe_extensions(graphql_error.extensions or {}),
            **location,
        )

    counter("graphql.error.masked")
    logger.error(
        "Masked internal GraphQL error at %s: %s", graphql_error.path, graphql_error.message
    )
    return GraphQLError(
        DEFAULT_MASKED_ERROR_MESSAGE,
        extensions={
            "success": False,
            "code": "INTERNAL_SERVER_ERROR",
            "clientSafe": True,
            "http": {"status": 500},
            "timestamp": utc_timestamp(),
        },
        **location,
    )


class ErrorMaskingExtension(SchemaExtension):
    """Runs every error of an operation result through ``mask_graphql_error``."""

    def __init__(self, is_development: bool) -> None:
        self.is_development = is_development

    def on_operation(self) -> Iterator[None]:
        # The instance is shared across operations; hold on to this one's context
        execution_context = self.execution_context
        yield
        result = execution_context.result
        errors = getattr(result, "errors", None)
        if errors:
            result.errors = [mask_graphql_error(e, self.is_development) for e in errors]
