"""
Strawberry GraphQL schema for site diaries and AI operations.

Resolvers call the same service functions as the REST routes. Failures are
raised as ClientSafeError built from the NormalizedError, and the masking
extension decides what reaches the client.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

import strawberry
from fastapi import Request
from starlette.concurrency import run_in_threadpool
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from sitediary.api.dependencies import AppServices
from sitediary.api.graphql.masking import ErrorMaskingExtension, graphql_error_from
from sitediary.config import API_SUMMARY_LOOKBACK_DAYS
from sitediary.diaries.models import DiaryRecord, DiaryRecordInput
from sitediary.diaries.models import Weather as WeatherModel
from sitediary.diaries.repository import DuplicateDiaryError
from sitediary.diaries.selection import SelectionCriteria
from sitediary.diaries.summary import beautify_text, summarize_diaries
from sitediary.errors import ErrorCode, NormalizedError
from sitediary.llm.gemini import get_gemini_status
from sitediary.result import Err

# ============================================================================
# Types
# ============================================================================


@strawberry.type
class Weather:
    temperature: int
    description: str


@strawberry.type
class SiteDiary:
    id: str
    date: str
    created_by: str
    title: str
    content: str | None = None
    weather: Weather | None = None
    attendees: list[str] | None = None
    attachments: list[str] | None = None

    @classmethod
    def from_record(cls, record: DiaryRecord) -> SiteDiary:
        return cls(
            id=record.id,
            date=record.date,
            created_by=record.created_by,
            title=record.title,
            content=record.content,
            weather=(
                Weather(
                    temperature=record.weather.temperature,
                    description=record.weather.description,
                )
                if record.weather
                else None
            ),
            attendees=record.attendees,
            attachments=record.attachments,
        )


@strawberry.type
class DiarySummaryPayload:
    status: str
    summary: str
    diaries_count: int
    start_date: str
    end_date: str
    limit: int | None = None
    help_text: str | None = None


@strawberry.type
class BeautifyPayload:
    original_text: str
    beautified_text: str
    enhanced: bool


@strawberry.type
class AIStatus:
    is_configured: bool
    message: str


@strawberry.input
class WeatherInput:
    temperature: int
    description: str


@strawberry.input
class SiteDiaryInput:
    date: str
    created_by: str
    title: str
    id: str | None = None
    content: str | None = None
    weather: WeatherInput | None = None
    attendees: list[str] | None = None
    attachments: list[str] | None = None

    def to_model(self) -> DiaryRecordInput:
        try:
            return DiaryRecordInput(
                id=self.id,
                date=self.date,
                created_by=self.created_by,
                title=self.title,
                content=self.content,
                weather=(
                    WeatherModel(
                        temperature=self.weather.temperature,
                        description=self.weather.description,
                    )
                    if self.weather
                    else None
                ),
                attendees=self.attendees,
                attachments=self.attachments,
            )
        except ValueError as e:
            raise graphql_error_from(
                NormalizedError.of(
                    ErrorCode.VALIDATION, "Invalid site diary input.", status=400,
                    details={"invalidFields": _invalid_fields(e)},
                )
            ) from e


def _invalid_fields(error: ValueError) -> list[str]:
    errors = getattr(error, "errors", None)
    if not callable(errors):
        return []
    return [str(err["loc"][-1]) for err in errors() if err.get("loc")]


def _services(info: Info) -> AppServices:
    return info.context["services"]


# ============================================================================
# Root types
# ============================================================================


@strawberry.type
class Query:
    @strawberry.field
    def site_diaries(self, info: Info) -> list[SiteDiary]:
        return [SiteDiary.from_record(d) for d in _services(info).diaries.list_all()]

    @strawberry.field
    def site_diary(self, info: Info, id: str) -> SiteDiary | None:
        record = _services(info).diaries.get(id)
        return SiteDiary.from_record(record) if record else None

    @strawberry.field
    def ai_status(self, info: Info) -> AIStatus:
        configured = _services(info).gateway.check_configuration() is None
        return AIStatus(is_configured=configured, message=get_gemini_status()["message"])


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def summarize_site_diaries(
        self,
        info: Info,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int | None = None,
    ) -> DiarySummaryPayload:
        services = _services(info)
        today = date.today()
        criteria = SelectionCriteria(
            start_date=start_date
            or (today - timedelta(days=API_SUMMARY_LOOKBACK_DAYS)).isoformat(),
            end_date=end_date or today.isoformat(),
            limit=limit,
        )

        outcome = await run_in_threadpool(
            summarize_diaries, criteria, services.diaries, services.gateway
        )
        if isinstance(outcome, Err):
            raise graphql_error_from(outcome.error)

        result = outcome.value
        return DiarySummaryPayload(
            status=result.status,
            summary=result.summary,
            diaries_count=result.diaries_count,
            start_date=result.start_date,
            end_date=result.end_date,
            limit=result.limit,
            help_text=result.help_text,
        )

    @strawberry.mutation
    async def beautify_text(self, info: Info, text: str) -> BeautifyPayload:
        outcome = await run_in_threadpool(beautify_text, text, _services(info).gateway)
        if isinstance(outcome, Err):
            raise graphql_error_from(outcome.error)

        result = outcome.value
        return BeautifyPayload(
            original_text=result.original_text,
            beautified_text=result.beautified_text,
            enhanced=result.enhanced,
        )

    @strawberry.mutation
    def create_site_diary(self, info: Info, input: SiteDiaryInput) -> SiteDiary:
        try:
            record = _services(info).diaries.add(input.to_model())
        except DuplicateDiaryError as e:
            raise graphql_error_from(
                NormalizedError.of(ErrorCode.VALIDATION, str(e), status=409)
            ) from e
        return SiteDiary.from_record(record)

    @strawberry.mutation
    def update_site_diary(self, info: Info, id: str, input: SiteDiaryInput) -> SiteDiary | None:
        record = _services(info).diaries.update(id, input.to_model())
        return SiteDiary.from_record(record) if record else None

    @strawberry.mutation
    def delete_site_diary(self, info: Info, id: str) -> bool:
        return _services(info).diaries.delete(id)


def build_schema(is_development: bool) -> strawberry.Schema:
    return strawberry.Schema(
        query=Query,
        mutation=Mutation,
        extensions=[ErrorMaskingExtension(is_development=is_development)],
    )


async def get_context(request: Request) -> dict[str, Any]:
    return {"services": request.app.state.services}


def build_graphql_router(is_development: bool) -> GraphQLRouter:
    return GraphQLRouter(
        build_schema(is_development),
        context_getter=get_context,
        graphql_ide="graphiql" if is_development else None,
    )
