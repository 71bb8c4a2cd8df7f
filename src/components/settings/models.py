"""
Settings component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import SiteSettings


@dataclass(frozen=True)
class GetSettingsInput:
    """Input for getting settings."""

    pass


@dataclass(frozen=True)
class GetSettingsOutput:
    """Output from getting settings."""

    settings: SiteSettings
    from_defaults: bool = False


@dataclass(frozen=True)
class UpdateSettingsInput:
    """Full or partial settings form (camelCase or snake_case keys)."""

    updates: dict[str, Any]


@dataclass(frozen=True)
class ValidationError:
    """Validation error with actionable message."""

    field: str
    code: str
    message: str


@dataclass(frozen=True)
class UpdateSettingsOutput:
    """Output from updating settings."""

    settings: SiteSettings
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True
