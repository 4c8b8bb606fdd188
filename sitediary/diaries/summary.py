"""
Summary and text-enhancement service.

Facade between the transports (REST routes, GraphQL resolvers) and the
selector / AI gateway. Everything returns a Result; transports render it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from sitediary.ai.gateway import AIGateway
from sitediary.diaries.repository import DiaryRepository
from sitediary.diaries.selection import SelectionCriteria, SelectionResult, select_diaries
from sitediary.observability.logging import get_logger
from sitediary.result import Err, Ok, Result

logger = get_logger(__name__)


class DiarySummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Literal["empty", "generated"]
    summary: str
    diaries_count: int
    start_date: str
    end_date: str
    limit: int | None = None
    help_text: str | None = None


class BeautifyResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    original_text: str
    beautified_text: str
    enhanced: bool


def select_for_summary(criteria: SelectionCriteria, repository: DiaryRepository) -> SelectionResult:
    return select_diaries(criteria, repository.list_all())


def build_empty_summary_message(result: SelectionResult) -> str:
    """Help text shown instead of a summary when no diaries were selected."""
    if result.limit:
        noun = "entry" if result.limit == 1 else "entries"
        range_text = f"searched the most recent {result.limit} {noun}"
    else:
        range_text = f"searched between {result.start_date} and {result.end_date}"

    return (
        f"No site diary entries were found ({range_text}).\n\n"
        "To generate a summary, try these steps:\n"
        "• Create new diary entries for the period\n"
        '• Use the "Recent Entries" options to review the latest activity\n'
        "• Confirm diary entries exist in the Diary section\n\n"
        "Once diary entries are available, the AI will generate insights covering "
        "weather conditions, team activities, safety observations, and progress updates."
    )


def summarize_diaries(
    criteria: SelectionCriteria,
    repository: DiaryRepository,
    gateway: AIGateway,
) -> Result[DiarySummary]:
    """Select diaries and summarize them.

    An empty selection is not an error: the result carries ``status="empty"``
    and help text, and the provider is never called.
    """
    config_error = gateway.check_configuration()
    if config_error is not None:
        return Err(config_error)

    selection = select_for_summary(criteria, repository)

    if not selection.diaries:
        message = build_empty_summary_message(selection)
        logger.info(
            "No diaries selected for summary (start=%s, end=%s, limit=%s)",
            selection.start_date,
            selection.end_date,
            selection.limit,
        )
        return Ok(
            DiarySummary(
                status="empty",
                summary=message,
                diaries_count=0,
                start_date=selection.start_date,
                end_date=selection.end_date,
                limit=selection.limit,
                help_text=message,
            )
        )

    outcome = gateway.summarize(selection.diaries)
    if isinstance(outcome, Err):
        return outcome

    return Ok(
        DiarySummary(
            status="generated",
            summary=outcome.value,
            diaries_count=len(selection.diaries),
            start_date=selection.start_date,
            end_date=selection.end_date,
            limit=selection.limit,
        )
    )


def beautify_text(text: str, gateway: AIGateway) -> Result[BeautifyResult]:
    outcome = gateway.beautify(text)
    if isinstance(outcome, Err):
        return outcome

    return Ok(
        BeautifyResult(
            original_text=text,
            beautified_text=outcome.value,
            enhanced=outcome.value != text,
        )
    )
