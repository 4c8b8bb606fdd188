"""
Error taxonomy and normalization.

Every failure that leaves the core is a NormalizedError. ``normalize_error``
turns arbitrary raised values into one, and ``map_provider_error`` applies the
upstream AI provider status mapping first.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Codes surfaced to API and GraphQL clients."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFIGURATION = "CONFIGURATION"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    PROVIDER_RATE_LIMIT = "PROVIDER_RATE_LIMIT"
    PROVIDER_UNAUTHORIZED = "PROVIDER_UNAUTHORIZED"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    INTERNAL = "INTERNAL"


class NormalizedError(BaseModel):
    """Structured, immutable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    status: int = 500
    details: Any = None

    @classmethod
    def of(
        cls,
        code: ErrorCode | str,
        message: str,
        status: int = 500,
        details: Any = None,
    ) -> NormalizedError:
        return cls(
            code=code.value if isinstance(code, ErrorCode) else code,
            message=message,
            status=status,
            details=details,
        )


class AppError(Exception):
    """Domain error that already knows its code, status and details."""

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        status: int = 500,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.message = message
        self.status = status
        self.details = details

    def to_normalized(self) -> NormalizedError:
        return NormalizedError(
            code=self.code, message=self.message, status=self.status, details=self.details
        )


def normalize_error(error: object, fallback: NormalizedError) -> NormalizedError:
    """
    Classify any raised value into a NormalizedError.

    - AppError: its own fields pass through unchanged.
    - Other exceptions: fallback code/status/details, but the exception's own
      message wins when it has one.
    - Anything else: the fallback as-is.
    """
    if isinstance(error, NormalizedError):
        return error

    if isinstance(error, AppError):
        return error.to_normalized()

    if isinstance(error, BaseException):
        return fallback.model_copy(update={"message": str(error) or fallback.message})

    return fallback


# =============================================================================
# UPSTREAM PROVIDER MAPPING
# =============================================================================

_STATUS_ATTRIBUTES = ("status_code", "code", "status")


def extract_http_status(error: object) -> int | None:
    """Read an HTTP status from a provider exception.

    google.api_core exceptions expose it as ``code``; HTTP clients use
    ``status_code`` or ``status``.
    """
    for attr in _STATUS_ATTRIBUTES:
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return int(value)
    return None


def map_provider_error(error: object, fallback: NormalizedError) -> NormalizedError:
    """Map an AI provider failure to the provider error taxonomy.

    ``fallback`` supplies the operation-specific message for failures that are
    neither domain errors nor recognized HTTP statuses; its code and status
    are always PROVIDER_ERROR / 500.
    """
    if isinstance(error, (AppError, NormalizedError)):
        return normalize_error(error, fallback)

    status = extract_http_status(error)

    if status == 401:
        return NormalizedError.of(
            ErrorCode.PROVIDER_UNAUTHORIZED,
            "Invalid AI provider credentials. Please check your configuration.",
            status=401,
        )
    if status == 429:
        return NormalizedError.of(
            ErrorCode.PROVIDER_RATE_LIMIT,
            "AI provider rate limit exceeded. Please try again later.",
            status=429,
        )
    if status in (500, 503):
        return NormalizedError.of(
            ErrorCode.PROVIDER_UNAVAILABLE,
            "AI provider is temporarily unavailable. Please try again later.",
            status=status,
        )

    generic = fallback.model_copy(
        update={"code": ErrorCode.PROVIDER_ERROR.value, "status": 500}
    )
    return normalize_error(error, generic)
