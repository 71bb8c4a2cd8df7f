"""
Settings component port definitions.
"""

from __future__ import annotations

from src.ports.store import ContentStorePort

SETTINGS_PATH = "settings/siteSettings"

__all__ = ["ContentStorePort", "SETTINGS_PATH"]
