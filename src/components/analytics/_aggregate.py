"""
Full-scan aggregation over the analytics event log.

Pure functions over already-parsed events; the ScanAggregator in
component.py feeds them from the store.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from src.domain.entities import (
    AffiliateClickEvent,
    AnalyticsEvent,
    PageViewEvent,
    PostViewEvent,
)

from .models import ActivityItem, PeriodSummary, TopPost
from ._impl import describe_event


def scan_order(events: Iterable[AnalyticsEvent]) -> list[AnalyticsEvent]:
    """Timestamp ascending, then event id."""
    return sorted(events, key=lambda e: (e.timestamp, e.id or ""))


def top_posts(
    views: Iterable[PostViewEvent],
    clicks: Iterable[AffiliateClickEvent],
    n: int = 10,
) -> list[TopPost]:
    """
    Rank posts by view count.

    Equal view counts keep the order in which each post id first appears in
    the view scan (see scan_order). Clicks for posts with no views are
    dropped. A missing title never overwrites a known one.
    """
    stats: dict[str, dict] = {}
    for event in scan_order(views):
        post_id = event.data.post_id
        if not post_id:
            continue
        entry = stats.setdefault(post_id, {"title": "Untitled", "views": 0, "clicks": 0})
        if event.data.post_title:
            entry["title"] = event.data.post_title
        entry["views"] += 1

    for event in clicks:
        entry = stats.get(event.data.post_id)
        if entry is not None:
            entry["clicks"] += 1

    ranked = sorted(stats.items(), key=lambda kv: kv[1]["views"], reverse=True)
    return [
        TopPost(id=post_id, title=s["title"], views=s["views"], clicks=s["clicks"])
        for post_id, s in ranked[: max(n, 0)]
    ]


def recent_activity(events: Iterable[AnalyticsEvent]) -> list[ActivityItem]:
    """Map events (already newest-first) to activity rows."""
    return [
        ActivityItem(type=e.event_type, description=describe_event(e), timestamp=e.timestamp)
        for e in events
    ]


def period_summary(
    events: Iterable[AnalyticsEvent],
    start: datetime,
    end: datetime,
) -> PeriodSummary:
    page_views = post_views = affiliate_clicks = total = 0
    for e in events:
        if not (start <= e.timestamp <= end):
            continue
        total += 1
        if isinstance(e, PageViewEvent):
            page_views += 1
        elif isinstance(e, PostViewEvent):
            post_views += 1
        elif isinstance(e, AffiliateClickEvent):
            affiliate_clicks += 1
    return PeriodSummary(
        page_views=page_views,
        post_views=post_views,
        affiliate_clicks=affiliate_clicks,
        total_events=total,
    )
