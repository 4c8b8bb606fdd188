"""Ok / Err result type returned by every core operation.

Core calls never raise for expected failures; they return ``Err`` carrying a
single NormalizedError. Transports decide how to render it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from sitediary.errors import NormalizedError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: NormalizedError

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
