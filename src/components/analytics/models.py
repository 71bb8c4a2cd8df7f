"""
Analytics component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.domain.entities import EventType


@dataclass(frozen=True)
class RecordEventInput:
    """One event as reported by a page handler or the tracking endpoint."""

    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)
    session_id: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class RecordEventOutput:
    event_id: str | None = None
    errors: list[str] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class TopPost:
    id: str
    title: str
    views: int
    clicks: int


@dataclass(frozen=True)
class ActivityItem:
    type: EventType
    description: str
    timestamp: datetime


@dataclass(frozen=True)
class PeriodSummary:
    page_views: int = 0
    post_views: int = 0
    affiliate_clicks: int = 0
    total_events: int = 0


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything the admin analytics view shows, loaded in one join."""

    total_page_views: int
    total_post_views: int
    total_affiliate_clicks: int
    top_posts: list[TopPost]
    recent_activity: list[ActivityItem]
