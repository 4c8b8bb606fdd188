"""
AI endpoints: diary summaries and text enhancement.

Both endpoints return the standard REST envelope. Rate-limit and
configuration failures carry details (wait time, setup hint) that clients
show to the user; they are never retried server-side.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sitediary.api.dependencies import AppServices, get_services
from sitediary.api.responses import error_response, success_response
from sitediary.config import API_SUMMARY_LOOKBACK_DAYS, API_TEXT_MAX_LENGTH
from sitediary.diaries.models import validate_iso_date
from sitediary.diaries.selection import SelectionCriteria
from sitediary.diaries.summary import beautify_text, summarize_diaries
from sitediary.errors import ErrorCode, NormalizedError
from sitediary.observability.logging import get_logger
from sitediary.result import Err

router = APIRouter(prefix="/api/ai", tags=["ai"])
logger = get_logger(__name__)


# ============================================================================
# Request Models
# ============================================================================


class SummarizeRequest(BaseModel):
    """Summary request. Dates default to the last seven days."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start_date: str | None = None
    end_date: str | None = None
    # Left uncoerced: anything that is not a positive integer selects range mode
    limit: Any = None

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_date(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        return validate_iso_date(v)

    def to_criteria(self, today: date | None = None) -> SelectionCriteria:
        today = today or date.today()
        return SelectionCriteria(
            start_date=self.start_date
            or (today - timedelta(days=API_SUMMARY_LOOKBACK_DAYS)).isoformat(),
            end_date=self.end_date or today.isoformat(),
            limit=self.limit,
        )


class BeautifyRequest(BaseModel):
    text: Any = Field(default=None)


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/summarize")
def summarize(
    payload: SummarizeRequest | None = None,
    services: AppServices = Depends(get_services),
) -> JSONResponse:
    """Summarize site diaries in a date range, or the most recent ``limit`` entries."""
    criteria = (payload or SummarizeRequest()).to_criteria()

    outcome = summarize_diaries(criteria, services.diaries, services.gateway)
    if isinstance(outcome, Err):
        return error_response(outcome.error)

    result = outcome.value
    if result.status == "empty":
        return error_response(
            NormalizedError.of(
                ErrorCode.NOT_FOUND,
                "No site diaries found for the requested period.",
                status=404,
                details={
                    "dateRange": {"startDate": result.start_date, "endDate": result.end_date},
                    "diariesCount": result.diaries_count,
                    "limit": result.limit,
                    "helpText": result.help_text,
                },
            )
        )

    return success_response(
        {
            "summary": result.summary,
            "diariesCount": result.diaries_count,
            "dateRange": {"startDate": result.start_date, "endDate": result.end_date},
            "limit": result.limit,
        },
        "Summary generated successfully",
    )


@router.post("/beautify")
def beautify(
    payload: BeautifyRequest,
    services: AppServices = Depends(get_services),
) -> JSONResponse:
    """Enhance user-entered text so it reads professionally."""
    config_error = services.gateway.check_configuration()
    if config_error is not None:
        return error_response(config_error)

    text = payload.text
    if not text or not isinstance(text, str):
        return error_response(
            NormalizedError.of(
                ErrorCode.VALIDATION,
                'Please provide a "text" field with a string value.',
                status=400,
            )
        )

    if len(text) > API_TEXT_MAX_LENGTH:
        return error_response(
            NormalizedError.of(
                ErrorCode.VALIDATION,
                f"Text is too long. Maximum {API_TEXT_MAX_LENGTH} characters.",
                status=400,
                details={"maxLength": API_TEXT_MAX_LENGTH},
            )
        )

    if not text.strip():
        return success_response(
            {"originalText": text, "beautifiedText": text, "enhanced": False},
            "Text is empty, no enhancement needed.",
        )

    outcome = beautify_text(text, services.gateway)
    if isinstance(outcome, Err):
        return error_response(outcome.error)

    return success_response(outcome.value, "Text enhanced successfully")
