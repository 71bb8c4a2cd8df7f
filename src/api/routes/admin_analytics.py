"""
Admin Analytics API.

Dashboard totals, top posts, recent activity and per-period summaries,
plus the collection counts shown on the dashboard landing.
"""

import asyncio
import logging
from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.deps import get_aggregator, get_rules, get_store, require_session
from src.api.schemas import (
    ActivityResponse,
    DashboardResponse,
    PeriodSummaryResponse,
    StatsResponse,
    TopPostResponse,
)
from src.components.analytics import AnalyticsAggregatorPort, load_dashboard
from src.domain.entities import AuthSession
from src.ports.store import ContentStorePort, StoreError
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()
stats_router = APIRouter()

DEFAULT_PERIOD_DAYS = 30
COUNTED_COLLECTIONS = ("users", "posts", "pages", "settings")


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    top: int | None = Query(default=None, ge=1, le=100),
    recent: int | None = Query(default=None, ge=1, le=100),
    session: AuthSession = Depends(require_session),
    aggregator: AnalyticsAggregatorPort = Depends(get_aggregator),
    rules: Rules = Depends(get_rules),
) -> DashboardResponse:
    """All dashboard reads run together; the response waits for every one."""
    snapshot = await load_dashboard(
        aggregator,
        top_n=top or rules.analytics.default_top_posts,
        recent_n=recent or rules.analytics.default_recent_activity,
    )
    return DashboardResponse(
        total_page_views=snapshot.total_page_views,
        total_post_views=snapshot.total_post_views,
        total_affiliate_clicks=snapshot.total_affiliate_clicks,
        top_posts=[
            TopPostResponse(id=p.id, title=p.title, views=p.views, clicks=p.clicks)
            for p in snapshot.top_posts
        ],
        recent_activity=[
            ActivityResponse(type=a.type, description=a.description, timestamp=a.timestamp)
            for a in snapshot.recent_activity
        ],
    )


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@router.get("/period", response_model=PeriodSummaryResponse)
def get_period(
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    session: AuthSession = Depends(require_session),
    aggregator: AnalyticsAggregatorPort = Depends(get_aggregator),
) -> PeriodSummaryResponse:
    """Counts for an inclusive window; defaults to the last 30 days."""
    end = _as_utc(end) if end else datetime.now(UTC)
    start = _as_utc(start) if start else end - timedelta(days=DEFAULT_PERIOD_DAYS)
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="start must not be after end"
        )
    summary = aggregator.get_period_summary(start, end)
    return PeriodSummaryResponse(
        page_views=summary.page_views,
        post_views=summary.post_views,
        affiliate_clicks=summary.affiliate_clicks,
        total_events=summary.total_events,
    )


@router.get("/posts/{post_id}")
def get_post_stats(
    post_id: str,
    session: AuthSession = Depends(require_session),
    aggregator: AnalyticsAggregatorPort = Depends(get_aggregator),
) -> dict[str, int | str]:
    return {
        "postId": post_id,
        "views": aggregator.get_post_views(post_id),
        "clicks": aggregator.get_post_clicks(post_id),
    }


def count_collection(store: ContentStorePort, name: str) -> int:
    try:
        return len(store.get_collection(name))
    except StoreError:
        logger.exception("Error loading counts for %s", name)
        return 0


async def load_collection_counts(store: ContentStorePort) -> dict[str, int]:
    counts = await asyncio.gather(
        *(asyncio.to_thread(count_collection, store, name) for name in COUNTED_COLLECTIONS)
    )
    return dict(zip(COUNTED_COLLECTIONS, counts, strict=True))


@stats_router.get("", response_model=StatsResponse)
async def get_stats(
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
) -> StatsResponse:
    return StatsResponse(**await load_collection_counts(store))
