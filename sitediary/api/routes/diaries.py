"""
Site diary endpoints.

Thin read/create surface over the in-memory repository; the repository is a
stand-in for the external diary store.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from sitediary.api.dependencies import AppServices, get_services
from sitediary.api.responses import error_response, success_response
from sitediary.diaries.models import DiaryRecordInput
from sitediary.diaries.repository import DuplicateDiaryError
from sitediary.errors import ErrorCode, NormalizedError

router = APIRouter(prefix="/api/site-diary", tags=["site-diary"])


@router.get("")
def list_diaries(services: AppServices = Depends(get_services)) -> JSONResponse:
    """List diary headlines (id, date, title, author)."""
    headlines = [
        {"id": d.id, "date": d.date, "title": d.title, "createdBy": d.created_by}
        for d in services.diaries.list_all()
    ]
    return success_response(headlines, "Site diaries retrieved successfully")


@router.get("/{diary_id}")
def get_diary(diary_id: str, services: AppServices = Depends(get_services)) -> JSONResponse:
    diary = services.diaries.get(diary_id)
    if diary is None:
        return error_response(
            NormalizedError.of(
                ErrorCode.NOT_FOUND, "Entry not found", status=404, details={"id": diary_id}
            )
        )
    return success_response(diary, "Site diary entry retrieved successfully")


@router.post("")
def create_diary(
    payload: DiaryRecordInput, services: AppServices = Depends(get_services)
) -> JSONResponse:
    try:
        diary = services.diaries.add(payload)
    except DuplicateDiaryError as e:
        return error_response(
            NormalizedError.of(ErrorCode.VALIDATION, str(e), status=409, details={"id": payload.id})
        )
    return success_response(diary, "Site diary created successfully", status_code=201)
