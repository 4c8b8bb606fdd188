"""
AI gateway for diary summaries and text enhancement.

Each call walks the same steps and stops at the first failure:

    CONFIG_CHECK -> RATE_LIMIT_CHECK -> PROVIDER_CALL -> Ok | Err

The configuration check never touches the rate limiter. Once the limiter has
allowed a call its budget is spent, even if the provider then fails or times
out.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from sitediary.config import (
    BEAUTIFY_MAX_TOKENS,
    BEAUTIFY_TEMPERATURE,
    LLM_MAX_WORKERS,
    LLM_TIMEOUT_SECONDS,
    SUMMARY_MAX_TOKENS,
    SUMMARY_TEMPERATURE,
)
from sitediary.diaries.models import DiaryRecord
from sitediary.errors import ErrorCode, NormalizedError, map_provider_error
from sitediary.infrastructure.rate_limiter import RateLimiter
from sitediary.llm.client import TextProvider
from sitediary.llm.gemini import SETUP_HINT
from sitediary.llm.prompts import (
    BEAUTIFY_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    build_beautify_prompt,
    build_summary_prompt,
)
from sitediary.observability.logging import get_logger
from sitediary.observability.telemetry import counter, log_event, time_block
from sitediary.result import Err, Ok, Result

logger = get_logger(__name__)

SUMMARIZE = "summarize"
BEAUTIFY = "beautify"

NO_DIARIES_SUMMARY = "No site diaries to summarize."
FALLBACK_SUMMARY = "Unable to generate summary."

_FAILURE_MESSAGES = {
    SUMMARIZE: "Failed to generate summary. Please try again or contact support.",
    BEAUTIFY: "Failed to enhance text. Please try again or contact support.",
}


class AIGateway:
    """Guards every AI provider call with configuration and rate-limit checks."""

    def __init__(
        self,
        provider: TextProvider,
        rate_limiter: RateLimiter,
        timeout_seconds: float = LLM_TIMEOUT_SECONDS,
        max_workers: int = LLM_MAX_WORKERS,
    ) -> None:
        self._provider = provider
        self._rate_limiter = rate_limiter
        self._timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="sitediary-llm"
        )

    def check_configuration(self) -> NormalizedError | None:
        """Return a CONFIGURATION error when the provider has no usable credential."""
        if self._provider.is_configured():
            return None
        counter("ai.not_configured")
        return NormalizedError.of(
            ErrorCode.CONFIGURATION,
            "AI provider is not configured.",
            status=503,
            details={"setupHint": SETUP_HINT},
        )

    def summarize(self, diaries: Sequence[DiaryRecord]) -> Result[str]:
        """Summarize ``diaries`` into one period report."""
        blocked = self._preflight(SUMMARIZE)
        if blocked is not None:
            return Err(blocked)

        if not diaries:
            return Ok(NO_DIARIES_SUMMARY)

        outcome = self._call_provider(
            SUMMARIZE,
            build_summary_prompt(diaries),
            system_instruction=SUMMARY_SYSTEM_PROMPT,
            temperature=SUMMARY_TEMPERATURE,
            max_output_tokens=SUMMARY_MAX_TOKENS,
        )
        if isinstance(outcome, Err):
            return outcome

        return Ok(outcome.value.strip() or FALLBACK_SUMMARY)

    def beautify(self, text: str) -> Result[str]:
        """Rewrite ``text`` in a professional tone. Blank input is returned as-is."""
        config_error = self.check_configuration()
        if config_error is not None:
            return Err(config_error)

        if not text or not text.strip():
            return Ok(text)

        blocked = self._consume_budget(BEAUTIFY)
        if blocked is not None:
            return Err(blocked)

        outcome = self._call_provider(
            BEAUTIFY,
            build_beautify_prompt(text),
            system_instruction=BEAUTIFY_SYSTEM_PROMPT,
            temperature=BEAUTIFY_TEMPERATURE,
            max_output_tokens=BEAUTIFY_MAX_TOKENS,
        )
        if isinstance(outcome, Err):
            return outcome

        return Ok(outcome.value.strip() or text)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _preflight(self, operation: str) -> NormalizedError | None:
        config_error = self.check_configuration()
        if config_error is not None:
            return config_error
        return self._consume_budget(operation)

    def _consume_budget(self, operation: str) -> NormalizedError | None:
        status = self._rate_limiter.check_and_consume(operation)
        if status.allowed:
            return None

        wait = status.retry_after_seconds
        window = self._rate_limiter.window_seconds
        return NormalizedError.of(
            ErrorCode.RATE_LIMIT_EXCEEDED,
            (
                f"Rate limit exceeded. Please wait {wait} seconds before trying again. "
                f"(Max {status.limit} requests per {window:g} seconds)"
            ),
            status=429,
            details={
                "identifier": operation,
                "waitTimeSeconds": wait,
                "maxRequestsPerWindow": status.limit,
                "windowSeconds": window,
            },
        )

    def _call_provider(
        self,
        operation: str,
        prompt: str,
        *,
        system_instruction: str,
        temperature: float,
        max_output_tokens: int,
    ) -> Result[str]:
        future = self._executor.submit(
            self._provider.generate,
            prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

        fallback = NormalizedError.of(ErrorCode.PROVIDER_ERROR, _FAILURE_MESSAGES[operation])

        try:
            with time_block(f"ai.{operation}.latency"):
                text = future.result(timeout=self._timeout_seconds)
        except FutureTimeoutError:
            future.cancel()
            counter(f"ai.{operation}.timeout")
            log_event("ai.provider.timeout", operation=operation, timeout=self._timeout_seconds)
            return Err(
                fallback.model_copy(
                    update={
                        "message": (
                            f"AI provider did not respond within "
                            f"{self._timeout_seconds:g} seconds. Please try again later."
                        )
                    }
                )
            )
        except Exception as e:
            logger.error("AI %s call failed: %s: %s", operation, type(e).__name__, e)
            error = map_provider_error(e, fallback)
            counter(f"ai.{operation}.error")
            log_event("ai.provider.error", operation=operation, code=error.code, status=error.status)
            return Err(error)

        counter(f"ai.{operation}.success")
        return Ok(text or "")
