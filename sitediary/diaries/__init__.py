"""Site diary records, selection and summaries."""

from sitediary.diaries.models import DiaryRecord, DiaryRecordInput, Weather
from sitediary.diaries.repository import DiaryRepository, seed_diaries
from sitediary.diaries.selection import SelectionCriteria, SelectionResult, select_diaries

__all__ = [
    "DiaryRecord",
    "DiaryRecordInput",
    "DiaryRepository",
    "SelectionCriteria",
    "SelectionResult",
    "Weather",
    "seed_diaries",
    "select_diaries",
]
