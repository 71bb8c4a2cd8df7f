"""
Admin Settings API.

GET returns the merged settings (defaults for anything not stored); PUT
applies a full or partial form and replaces the stored document.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel

from src.api.deps import get_store, require_session
from src.components.settings import (
    GetSettingsInput,
    SettingsSaveError,
    UpdateSettingsInput,
    ValidationError,
    run_get,
    run_update,
)
from src.domain.entities import AuthSession
from src.ports.store import ContentStorePort

router = APIRouter()


class ValidationErrorResponse(BaseModel):
    field: str
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response with validation errors."""

    detail: str
    errors: list[ValidationErrorResponse]


def validation_errors_to_response(errors: list[ValidationError]) -> list[dict[str, str]]:
    return [
        ValidationErrorResponse(field=e.field, code=e.code, message=e.message).model_dump()
        for e in errors
    ]


@router.get("", summary="Get site settings")
def get_site_settings(
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
) -> dict[str, Any]:
    """Current settings; defaults when nothing is stored or the read fails."""
    result = run_get(GetSettingsInput(), store=store)
    return result.settings.model_dump(by_alias=True)


@router.put(
    "",
    summary="Update site settings",
    responses={400: {"model": ErrorResponse, "description": "Validation errors"}},
)
def update_site_settings(
    updates: dict[str, Any] = Body(...),
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
) -> dict[str, Any]:
    """
    Update site settings.

    Validates before persisting; the stored document is left unchanged on
    a 400.
    """
    try:
        result = run_update(UpdateSettingsInput(updates=updates), store=store)
    except SettingsSaveError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Validation failed",
                "errors": validation_errors_to_response(result.errors),
            },
        )
    return result.settings.model_dump(by_alias=True)
