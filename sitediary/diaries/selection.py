"""
Diary selection for AI summaries.

Two modes:
  - recent-N: the ``limit`` most recent diaries regardless of the requested
    dates; the effective range shrinks to the dates actually selected.
  - range: diaries whose date falls inside [start_date, end_date].

A limit that is not a positive integer silently selects range mode.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from sitediary.diaries.models import DiaryRecord


@dataclass(frozen=True)
class SelectionCriteria:
    start_date: str
    end_date: str
    limit: object = None


@dataclass(frozen=True)
class SelectionResult:
    diaries: list[DiaryRecord]
    start_date: str
    end_date: str
    limit: int | None


def normalize_limit(limit: object) -> int | None:
    """Return ``limit`` as a positive int, or None when it is not one."""
    if isinstance(limit, bool):
        return None
    if isinstance(limit, int):
        return limit if limit > 0 else None
    if isinstance(limit, float) and math.isfinite(limit) and limit.is_integer() and limit > 0:
        return int(limit)
    return None


def select_diaries(
    criteria: SelectionCriteria, all_diaries: Sequence[DiaryRecord]
) -> SelectionResult:
    """Pick the diaries that feed a summary request. Never mutates ``all_diaries``."""
    limit = normalize_limit(criteria.limit)

    if limit is not None:
        # sorted() is stable: diaries sharing a date keep their relative order
        newest_first = sorted(all_diaries, key=lambda d: d.date, reverse=True)
        diaries = newest_first[:limit]

        if not diaries:
            return SelectionResult(diaries, criteria.start_date, criteria.end_date, limit)

        return SelectionResult(
            diaries=diaries,
            start_date=diaries[-1].date,
            end_date=diaries[0].date,
            limit=limit,
        )

    diaries = [d for d in all_diaries if criteria.start_date <= d.date <= criteria.end_date]
    return SelectionResult(diaries, criteria.start_date, criteria.end_date, None)
