"""Service container shared by the REST routes and GraphQL resolvers.

Built once per application and stored on ``app.state.services``; handlers
receive it through FastAPI dependency injection or the GraphQL context.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from sitediary.ai.gateway import AIGateway
from sitediary.diaries.repository import DiaryRepository, seed_diaries
from sitediary.infrastructure.rate_limiter import RateLimiter
from sitediary.llm.client import GeminiTextProvider, TextProvider


@dataclass
class AppServices:
    diaries: DiaryRepository
    rate_limiter: RateLimiter
    gateway: AIGateway


def build_services(
    provider: TextProvider | None = None,
    diaries: DiaryRepository | None = None,
    rate_limiter: RateLimiter | None = None,
) -> AppServices:
    limiter = rate_limiter or RateLimiter()
    return AppServices(
        diaries=diaries if diaries is not None else DiaryRepository(seed_diaries()),
        rate_limiter=limiter,
        gateway=AIGateway(provider or GeminiTextProvider(), limiter),
    )


def get_services(request: Request) -> AppServices:
    return request.app.state.services
