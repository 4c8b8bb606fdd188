"""
Pytest configuration for SiteDiary tests

Provides a fake text provider, sample diaries and app/client fixtures so no
test ever reaches Gemini.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi.testclient import TestClient

from sitediary.ai.gateway import AIGateway
from sitediary.api.app import create_app
from sitediary.api.dependencies import AppServices, build_services
from sitediary.diaries.models import DiaryRecord, Weather
from sitediary.diaries.repository import DiaryRepository, seed_diaries
from sitediary.infrastructure.rate_limiter import RateLimiter
from sitediary.observability.telemetry import reset_telemetry


@dataclass
class ProviderCall:
    prompt: str
    system_instruction: str
    temperature: float
    max_output_tokens: int


@dataclass
class FakeProvider:
    """Scripted TextProvider.

    ``responses`` are consumed in order; an Exception entry is raised instead
    of returned. When the script runs out, ``default_response`` is used.
    ``block`` makes generate() wait on the event (timeout tests).
    """

    configured: bool = True
    responses: list[Any] = field(default_factory=list)
    default_response: str = "Generated text"
    block: threading.Event | None = None
    calls: list[ProviderCall] = field(default_factory=list)

    def is_configured(self) -> bool:
        return self.configured

    def generate(
        self,
        prompt: str,
        *,
        system_instruction: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        self.calls.append(ProviderCall(prompt, system_instruction, temperature, max_output_tokens))
        if self.block is not None:
            self.block.wait(timeout=5)

        response = self.responses.pop(0) if self.responses else self.default_response
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture(autouse=True)
def _clean_telemetry() -> Iterator[None]:
    reset_telemetry()
    yield
    reset_telemetry()


@pytest.fixture
def sample_diaries() -> list[DiaryRecord]:
    """Five diaries dated 2024-12-13 down to 2024-12-09."""
    return seed_diaries()


@pytest.fixture
def make_diary():
    def _make(diary_id: str, diary_date: str, title: str = "Daily log") -> DiaryRecord:
        return DiaryRecord(
            id=diary_id,
            date=diary_date,
            created_by="Site Manager",
            title=title,
            content=f"Work carried out on {diary_date}",
            weather=Weather(temperature=18, description="overcast"),
            attendees=["Crew A"],
        )

    return _make


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def rate_limiter() -> RateLimiter:
    return RateLimiter(window_seconds=60, max_requests=2)


@pytest.fixture
def repository(sample_diaries) -> DiaryRepository:
    return DiaryRepository(sample_diaries)


@pytest.fixture
def gateway(provider, rate_limiter) -> Iterator[AIGateway]:
    gw = AIGateway(provider, rate_limiter, timeout_seconds=2)
    yield gw
    gw.shutdown()


@pytest.fixture
def services(provider, repository, rate_limiter) -> Iterator[AppServices]:
    built = build_services(provider=provider, diaries=repository, rate_limiter=rate_limiter)
    yield built
    built.gateway.shutdown()


@pytest.fixture
def client(services) -> TestClient:
    """Client for a development app (errors are not masked)."""
    return TestClient(create_app(services, development=True))


@pytest.fixture
def production_client(services) -> TestClient:
    """Client for a production app (GraphQL errors are masked)."""
    return TestClient(create_app(services, development=False), raise_server_exceptions=False)
