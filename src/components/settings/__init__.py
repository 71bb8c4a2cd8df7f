"""
Settings component - site settings management.
"""

from .component import (
    SOCIAL_FIELDS,
    SettingsSaveError,
    get_default_settings,
    get_settings,
    merge_with_defaults,
    run,
    run_get,
    run_update,
    save_settings,
)
from .models import (
    GetSettingsInput,
    GetSettingsOutput,
    UpdateSettingsInput,
    UpdateSettingsOutput,
    ValidationError,
)
from .ports import SETTINGS_PATH

__all__ = [
    # Component entry points
    "run",
    "run_get",
    "run_update",
    # Functions
    "get_default_settings",
    "get_settings",
    "merge_with_defaults",
    "save_settings",
    # Models
    "GetSettingsInput",
    "GetSettingsOutput",
    "UpdateSettingsInput",
    "UpdateSettingsOutput",
    "ValidationError",
    # Errors
    "SettingsSaveError",
    # Constants
    "SETTINGS_PATH",
    "SOCIAL_FIELDS",
]
