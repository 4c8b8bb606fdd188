"""Unit tests for the AI gateway: configuration, rate limit and provider calls"""

from __future__ import annotations

import threading

from google.api_core import exceptions as google_exceptions

from sitediary.ai.gateway import FALLBACK_SUMMARY, NO_DIARIES_SUMMARY, AIGateway
from sitediary.config import (
    BEAUTIFY_MAX_TOKENS,
    BEAUTIFY_TEMPERATURE,
    SUMMARY_MAX_TOKENS,
    SUMMARY_TEMPERATURE,
)
from sitediary.infrastructure.rate_limiter import RateLimiter
from sitediary.llm.prompts import BEAUTIFY_SYSTEM_PROMPT, SUMMARY_SYSTEM_PROMPT
from sitediary.observability.telemetry import get_counter, get_latency_stats
from sitediary.result import Err, Ok


class TestConfigurationCheck:
    def test_summarize_without_credentials_skips_rate_limiter(
        self, gateway, provider, rate_limiter, sample_diaries
    ):
        provider.configured = False

        outcome = gateway.summarize(sample_diaries)

        assert isinstance(outcome, Err)
        assert outcome.error.code == "CONFIGURATION"
        assert outcome.error.status == 503
        assert "setupHint" in outcome.error.details
        assert rate_limiter.get_record("summarize") is None
        assert provider.calls == []

    def test_beautify_without_credentials_skips_rate_limiter(self, gateway, provider, rate_limiter):
        provider.configured = False

        outcome = gateway.beautify("crew poured slab")

        assert outcome.error.code == "CONFIGURATION"
        assert rate_limiter.get_record("beautify") is None

    def test_check_configuration_ok(self, gateway):
        assert gateway.check_configuration() is None


class TestSummarize:
    def test_success_strips_provider_text(self, gateway, provider, sample_diaries):
        provider.responses = ["  Weekly overview  \n"]

        outcome = gateway.summarize(sample_diaries)

        assert outcome == Ok("Weekly overview")
        call = provider.calls[0]
        assert call.system_instruction == SUMMARY_SYSTEM_PROMPT
        assert call.temperature == SUMMARY_TEMPERATURE
        assert call.max_output_tokens == SUMMARY_MAX_TOKENS
        assert "Foundation Pour" in call.prompt
        assert get_counter("ai.summarize.success") == 1
        assert get_latency_stats("ai.summarize.latency")["count"] == 1

    def test_empty_provider_text_uses_fallback(self, gateway, provider, sample_diaries):
        provider.responses = ["   "]

        assert gateway.summarize(sample_diaries) == Ok(FALLBACK_SUMMARY)

    def test_no_diaries_consumes_budget_without_provider_call(self, gateway, provider, rate_limiter):
        outcome = gateway.summarize([])

        assert outcome == Ok(NO_DIARIES_SUMMARY)
        assert provider.calls == []
        assert rate_limiter.get_record("summarize").count == 1

    def test_third_call_rate_limited(self, gateway, provider, sample_diaries):
        gateway.summarize(sample_diaries)
        gateway.summarize(sample_diaries)

        outcome = gateway.summarize(sample_diaries)

        assert isinstance(outcome, Err)
        assert outcome.error.code == "RATE_LIMIT_EXCEEDED"
        assert outcome.error.status == 429
        details = outcome.error.details
        assert details["identifier"] == "summarize"
        assert details["waitTimeSeconds"] > 0
        assert details["maxRequestsPerWindow"] == 2
        assert details["windowSeconds"] == 60
        assert len(provider.calls) == 2

    def test_summarize_and_beautify_budgets_are_separate(self, gateway, sample_diaries):
        gateway.summarize(sample_diaries)
        gateway.summarize(sample_diaries)

        assert isinstance(gateway.beautify("site was tidy"), Ok)


class TestBeautify:
    def test_success(self, gateway, provider):
        provider.responses = ["The site was left tidy at the end of the shift."]

        outcome = gateway.beautify("site tidy end of shift")

        assert outcome == Ok("The site was left tidy at the end of the shift.")
        call = provider.calls[0]
        assert call.system_instruction == BEAUTIFY_SYSTEM_PROMPT
        assert call.temperature == BEAUTIFY_TEMPERATURE
        assert call.max_output_tokens == BEAUTIFY_MAX_TOKENS
        assert "site tidy end of shift" in call.prompt

    def test_blank_input_returned_without_budget(self, gateway, provider, rate_limiter):
        assert gateway.beautify("") == Ok("")
        assert gateway.beautify("   \n") == Ok("   \n")
        assert provider.calls == []
        assert rate_limiter.get_record("beautify") is None

    def test_empty_provider_text_returns_original(self, gateway, provider):
        provider.responses = [""]

        assert gateway.beautify("crew on site") == Ok("crew on site")


class TestProviderFailures:
    def test_http_429_maps_to_provider_rate_limit(self, gateway, provider, sample_diaries):
        provider.responses = [google_exceptions.ResourceExhausted("quota exceeded")]

        outcome = gateway.summarize(sample_diaries)

        assert outcome.error.code == "PROVIDER_RATE_LIMIT"
        assert outcome.error.status == 429
        assert get_counter("ai.summarize.error") == 1

    def test_http_401_maps_to_unauthorized(self, gateway, provider):
        provider.responses = [google_exceptions.Unauthenticated("invalid key")]

        outcome = gateway.beautify("text")

        assert outcome.error.code == "PROVIDER_UNAUTHORIZED"
        assert outcome.error.status == 401

    def test_generic_failure_maps_to_provider_error(self, gateway, provider):
        provider.responses = [RuntimeError("")]

        outcome = gateway.beautify("text")

        assert outcome.error.code == "PROVIDER_ERROR"
        assert outcome.error.status == 500
        assert outcome.error.message == (
            "Failed to enhance text. Please try again or contact support."
        )

    def test_failed_call_still_consumes_budget(self, gateway, provider, rate_limiter):
        provider.responses = [RuntimeError("boom")]

        gateway.beautify("text")

        assert rate_limiter.get_record("beautify").count == 1

    def test_timeout_maps_to_provider_error(self, provider, sample_diaries):
        release = threading.Event()
        provider.block = release
        limiter = RateLimiter(window_seconds=60, max_requests=2)
        gateway = AIGateway(provider, limiter, timeout_seconds=0.05)

        try:
            outcome = gateway.summarize(sample_diaries)
        finally:
            release.set()
            gateway.shutdown()

        assert isinstance(outcome, Err)
        assert outcome.error.code == "PROVIDER_ERROR"
        assert outcome.error.status == 500
        assert "did not respond" in outcome.error.message
        assert limiter.get_record("summarize").count == 1
        assert get_counter("ai.summarize.timeout") == 1
