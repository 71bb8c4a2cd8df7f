"""
Settings component - site settings singleton.

Key behaviors:
- Reads overlay the stored record on the defaults field by field; missing
  or null fields take the default
- A store read failure yields the defaults (logged)
- Writes replace the whole singleton; concurrent saves are last-writer-wins
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

from pydantic import ValidationError as PydanticValidationError

from src.domain.entities import SiteSettings
from src.ports.store import StoreError

from .models import (
    GetSettingsInput,
    GetSettingsOutput,
    UpdateSettingsInput,
    UpdateSettingsOutput,
    ValidationError,
)
from .ports import SETTINGS_PATH, ContentStorePort

logger = logging.getLogger(__name__)

SOCIAL_FIELDS = ("facebook", "twitter", "instagram", "youtube", "linkedin", "pinterest")


class SettingsSaveError(Exception):
    """Settings could not be written."""


def get_default_settings() -> SiteSettings:
    return SiteSettings()


def merge_with_defaults(stored: dict[str, Any] | None) -> SiteSettings:
    """
    Overlay a stored record on the defaults.

    Fields that are missing, null or fail validation individually fall back
    to their default.
    """
    defaults = get_default_settings().model_dump(by_alias=True)
    if not stored:
        return SiteSettings.model_validate(defaults)

    merged = dict(defaults)
    for name, info in SiteSettings.model_fields.items():
        key = info.alias or name
        value = stored.get(key, stored.get(name))
        if value is None:
            continue
        candidate = {**merged, key: value}
        try:
            SiteSettings.model_validate(candidate)
        except PydanticValidationError:
            logger.warning("Ignoring invalid stored setting %s=%r", key, value)
            continue
        merged = candidate
    return SiteSettings.model_validate(merged)


def _validate_url(value: str) -> bool:
    if not value:
        return True
    result = urlparse(value)
    return result.scheme in ("http", "https") and bool(result.netloc)


def _validate_settings(settings: SiteSettings) -> list[ValidationError]:
    errors: list[ValidationError] = []
    if not settings.site_name.strip():
        errors.append(ValidationError("siteName", "required", "Site name is required"))
    for name in SOCIAL_FIELDS:
        if not _validate_url(getattr(settings, name)):
            errors.append(
                ValidationError(
                    field=name,
                    code="invalid_url",
                    message=f"Invalid URL format for '{name}': must be http or https URL",
                )
            )
    return errors


def _parse_pydantic_errors(exc: PydanticValidationError) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field = ".".join(str(part) for part in loc) if loc else "_schema"
        error_type = error.get("type", "unknown")
        code = "required" if "missing" in error_type else "invalid_value"
        errors.append(
            ValidationError(
                field=field,
                code=code,
                message=f"Field '{field}': {error.get('msg', 'Invalid value')}",
            )
        )
    return errors


def get_settings(store: ContentStorePort) -> SiteSettings:
    try:
        stored = store.get_singleton(SETTINGS_PATH)
    except StoreError:
        logger.exception("Error loading settings; using defaults")
        return get_default_settings()
    return merge_with_defaults(stored)


def save_settings(store: ContentStorePort, settings: SiteSettings) -> SiteSettings:
    """Replace the singleton. Raises SettingsSaveError."""
    try:
        store.upsert_singleton(SETTINGS_PATH, settings.to_document(), merge=False)
    except StoreError as e:
        logger.exception("Error saving settings")
        raise SettingsSaveError("Failed to save settings") from e
    logger.info("Site settings saved")
    return settings


# --- Component Entry Points ---


def run_get(inp: GetSettingsInput, *, store: ContentStorePort) -> GetSettingsOutput:
    """Always returns settings; defaults when nothing is stored or the read fails."""
    try:
        stored = store.get_singleton(SETTINGS_PATH)
    except StoreError:
        logger.exception("Error loading settings; using defaults")
        return GetSettingsOutput(settings=get_default_settings(), from_defaults=True)
    return GetSettingsOutput(settings=merge_with_defaults(stored), from_defaults=stored is None)


def run_update(inp: UpdateSettingsInput, *, store: ContentStorePort) -> UpdateSettingsOutput:
    """
    Apply the form on top of the current settings and replace the singleton.

    Validation errors leave the stored record untouched. Raises
    SettingsSaveError when the write fails.
    """
    current = get_settings(store)
    updated = current.model_dump(by_alias=True)
    for key, value in inp.updates.items():
        info = SiteSettings.model_fields.get(key)
        updated[info.alias if info is not None and info.alias else key] = value

    try:
        new_settings = SiteSettings.model_validate(updated)
    except PydanticValidationError as e:
        return UpdateSettingsOutput(
            settings=current, errors=_parse_pydantic_errors(e), success=False
        )

    errors = _validate_settings(new_settings)
    if errors:
        return UpdateSettingsOutput(settings=current, errors=errors, success=False)

    saved = save_settings(store, new_settings)
    return UpdateSettingsOutput(settings=saved, errors=[], success=True)


def run(
    inp: GetSettingsInput | UpdateSettingsInput,
    *,
    store: ContentStorePort,
) -> GetSettingsOutput | UpdateSettingsOutput:
    """
    Main entry point for the settings component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, GetSettingsInput):
        return run_get(inp, store=store)
    elif isinstance(inp, UpdateSettingsInput):
        return run_update(inp, store=store)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
