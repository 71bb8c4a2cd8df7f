"""
Content component port definitions.

Posts are read and written through the shared document store port; the
collection name is fixed here.
"""

from __future__ import annotations

from src.ports.clock import ClockPort
from src.ports.store import ContentStorePort

POSTS_COLLECTION = "posts"

__all__ = ["ClockPort", "ContentStorePort", "POSTS_COLLECTION"]
