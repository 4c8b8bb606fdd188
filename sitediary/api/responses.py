"""REST response envelopes.

Success: ``{success: true, message, data, timestamp}``
Error:   ``{success: false, error: {code, message, details?}, timestamp}``
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from sitediary.errors import NormalizedError


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def success_response(data: Any, message: str = "Success", status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": True,
            "message": message,
            "data": jsonable_encoder(data, by_alias=True),
            "timestamp": utc_timestamp(),
        },
    )


def error_body(error: NormalizedError) -> dict[str, Any]:
    body: dict[str, Any] = {"code": error.code, "message": error.message}
    if error.details is not None:
        body["details"] = jsonable_encoder(error.details)
    return {"success": False, "error": body, "timestamp": utc_timestamp()}


def error_response(error: NormalizedError, status_code: int | None = None) -> JSONResponse:
    """Render a NormalizedError; its own status is used unless overridden."""
    return JSONResponse(status_code=status_code or error.status, content=error_body(error))

