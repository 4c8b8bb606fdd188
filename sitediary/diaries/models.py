"""
Site diary domain models.

A diary is one day's record from a construction site: who wrote it, the
weather, attendees, free-text content and links to uploaded attachments.
"""

from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_iso_date(value: str) -> str:
    """Ensure ``value`` is a real calendar date in ``yyyy-mm-dd`` form.

    Selection compares dates as strings, which is only chronological for this
    exact format.
    """
    if not ISO_DATE_PATTERN.match(value):
        raise ValueError("date must use the yyyy-mm-dd format")
    date.fromisoformat(value)
    return value


def require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be empty")
    return value.strip()


class Weather(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature: int
    description: str


class DiaryFields(BaseModel):
    """Fields shared by stored diaries and create/update payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: str
    created_by: str
    title: str
    content: str | None = None
    weather: Weather | None = None
    attendees: list[str] | None = None
    attachments: list[str] | None = None

    @field_validator("date")
    @classmethod
    def date_is_iso(cls, v: str) -> str:
        return validate_iso_date(v)

    @field_validator("created_by", "title")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return require_text(v)


class DiaryRecord(DiaryFields):
    """A stored site diary entry. Serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str


class DiaryRecordInput(DiaryFields):
    """Payload for creating or replacing a diary; the id is generated when absent."""

    id: str | None = None
