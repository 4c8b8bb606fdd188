"""
Fixed-window rate limiter for AI provider calls.

Each identifier (operation name such as "summarize" or "beautify") gets a
counter that allows ``max_requests`` calls per ``window_seconds``. The first
call after the window expires starts a fresh window.

NOTE: identifiers are operation names only, so the budget is shared by every
caller of the process. Multi-tenant use needs a per-caller key (API key, IP or
user id) folded into the identifier.
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

from cachetools import LRUCache

from sitediary.config import (
    AI_RATE_LIMIT_MAX_IDENTIFIERS,
    AI_RATE_LIMIT_MAX_REQUESTS,
    AI_RATE_LIMIT_WINDOW_SECONDS,
)
from sitediary.observability.logging import get_logger
from sitediary.observability.telemetry import counter, log_event

logger = get_logger(__name__)


@dataclass
class RateLimitRecord:
    identifier: str
    count: int
    window_reset_at: float


class RateLimitStatus(NamedTuple):
    """Outcome of a check-and-consume call."""

    identifier: str
    allowed: bool
    count: int
    limit: int
    window_reset_at: float
    retry_after_seconds: int


class RateLimiter:
    """
    Thread-safe fixed-window counter keyed by identifier.

    Budget is consumed at check time, before the guarded operation runs, so a
    call that later fails or times out still counts against the window.
    """

    def __init__(
        self,
        window_seconds: float = AI_RATE_LIMIT_WINDOW_SECONDS,
        max_requests: int = AI_RATE_LIMIT_MAX_REQUESTS,
        max_identifiers: int = AI_RATE_LIMIT_MAX_IDENTIFIERS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")

        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._lock = threading.Lock()
        # Bounded so per-caller identifiers cannot grow the map without limit
        self._records: LRUCache[str, RateLimitRecord] = LRUCache(maxsize=max_identifiers)

    def check_and_consume(self, identifier: str, now: float | None = None) -> RateLimitStatus:
        """Atomically check the window for ``identifier`` and consume one request."""
        if now is None:
            now = self._clock()

        with self._lock:
            record = self._records.get(identifier)

            if record is None or now > record.window_reset_at:
                record = RateLimitRecord(
                    identifier=identifier,
                    count=1,
                    window_reset_at=now + self.window_seconds,
                )
                self._records[identifier] = record
                return self._status(record, allowed=True, retry_after=0)

            if record.count < self.max_requests:
                record.count += 1
                return self._status(record, allowed=True, retry_after=0)

            retry_after = math.ceil(record.window_reset_at - now)
            status = self._status(record, allowed=False, retry_after=retry_after)

        counter(f"ai.rate_limit.rejected.{identifier}")
        log_event(
            "ai.rate_limit.exceeded",
            identifier=identifier,
            count=status.count,
            limit=self.max_requests,
            retry_after=retry_after,
        )
        return status

    def get_record(self, identifier: str) -> RateLimitRecord | None:
        """Return a copy of the current record for ``identifier``, if any."""
        with self._lock:
            record = self._records.get(identifier)
            if record is None:
                return None
            return RateLimitRecord(record.identifier, record.count, record.window_reset_at)

    def reset(self, identifier: str | None = None) -> None:
        """Drop one identifier's window, or every window when none is given."""
        with self._lock:
            if identifier is None:
                self._records.clear()
            else:
                self._records.pop(identifier, None)
        logger.debug("Rate limit windows reset: %s", identifier or "all")

    def _status(self, record: RateLimitRecord, allowed: bool, retry_after: int) -> RateLimitStatus:
        return RateLimitStatus(
            identifier=record.identifier,
            allowed=allowed,
            count=record.count,
            limit=self.max_requests,
            window_reset_at=record.window_reset_at,
            retry_after_seconds=retry_after,
        )
