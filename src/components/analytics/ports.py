"""
Analytics component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import ActivityItem, PeriodSummary, TopPost


class SessionStoragePort(Protocol):
    """Tab-scoped key/value storage holding the analytics session id."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class AnalyticsAggregatorPort(Protocol):
    """
    Read side of analytics.

    Implementations return zero values (0, [], empty summary) instead of
    raising when the underlying store fails.
    """

    def count_by_type(self, event_type: str) -> int: ...

    def get_top_posts(self, n: int = 10) -> list[TopPost]: ...

    def get_recent_activity(self, n: int = 10) -> list[ActivityItem]: ...

    def get_period_summary(self, start: datetime, end: datetime) -> PeriodSummary: ...

    def get_post_views(self, post_id: str) -> int: ...

    def get_post_clicks(self, post_id: str) -> int: ...
