"""
Analytics component - event recording and dashboard aggregation.

Key behaviors:
- Recording never raises; failures are logged and the caller carries on
- Every event gets the server timestamp, session id and user agent
- Aggregation is a full scan of the event log behind AnalyticsAggregatorPort
- Read failures degrade to zero values
- The dashboard reads run concurrently and are joined before returning
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from src.domain.entities import AffiliateClickEvent, PostViewEvent
from src.ports.clock import ClockPort
from src.ports.store import ContentStorePort, StoreError

from ._aggregate import period_summary, recent_activity, top_posts
from ._impl import build_event, get_or_create_session_id, parse_events
from .models import (
    ActivityItem,
    DashboardSnapshot,
    PeriodSummary,
    RecordEventInput,
    RecordEventOutput,
    TopPost,
)
from .ports import AnalyticsAggregatorPort, SessionStoragePort

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "analytics_events"


# --- Recording ---


def run_record(
    inp: RecordEventInput,
    *,
    store: ContentStorePort,
    clock: ClockPort,
    collection: str = DEFAULT_COLLECTION,
) -> RecordEventOutput:
    """Append one event. Errors are reported in the output, never raised."""
    try:
        event = build_event(
            inp.event_type, inp.payload, clock.now(), inp.session_id, inp.user_agent
        )
    except ValidationError as e:
        logger.warning("Rejected analytics event %r: %s", inp.event_type, e)
        return RecordEventOutput(errors=[str(e)], success=False)

    try:
        event_id = store.insert(collection, event.to_document())
    except Exception as e:
        logger.exception("Error logging analytics event %s", inp.event_type)
        return RecordEventOutput(errors=[str(e)], success=False)

    return RecordEventOutput(event_id=event_id)


class AnalyticsRecorder:
    """Per-visitor recorder: binds the session storage and user agent."""

    def __init__(
        self,
        store: ContentStorePort,
        clock: ClockPort,
        session_storage: SessionStoragePort,
        user_agent: str | None = None,
        collection: str = DEFAULT_COLLECTION,
        enabled: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._session_storage = session_storage
        self._user_agent = user_agent
        self._collection = collection
        self._enabled = enabled
        self._rng = rng

    @property
    def session_id(self) -> str:
        return get_or_create_session_id(self._session_storage, self._clock.now(), self._rng)

    def record(self, event_type: str, payload: dict[str, Any]) -> str | None:
        """Returns the stored event id, or None if disabled or failed."""
        if not self._enabled:
            return None
        try:
            session_id = self.session_id
        except Exception:
            logger.exception("Could not resolve analytics session id")
            session_id = None
        out = run_record(
            RecordEventInput(
                event_type=event_type,
                payload=payload,
                session_id=session_id,
                user_agent=self._user_agent,
            ),
            store=self._store,
            clock=self._clock,
            collection=self._collection,
        )
        return out.event_id

    def track_page_view(self, page_path: str, page_title: str) -> str | None:
        return self.record("page_view", {"pagePath": page_path, "pageTitle": page_title})

    def track_post_view(self, post_id: str, post_title: str) -> str | None:
        return self.record("post_view", {"postId": post_id, "postTitle": post_title})

    def track_affiliate_click(
        self, post_id: str, post_title: str, affiliate_url: str
    ) -> str | None:
        return self.record(
            "affiliate_click",
            {"postId": post_id, "postTitle": post_title, "affiliateUrl": affiliate_url},
        )

    def track_newsletter_signup(self, email: str) -> str | None:
        return self.record("newsletter_signup", {"email": email})

    def track_search(self, search_term: str) -> str | None:
        return self.record("search", {"searchTerm": search_term})


# --- Aggregation ---


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=UTC)


class ScanAggregator:
    """AnalyticsAggregatorPort over a full scan of the event collection."""

    def __init__(self, store: ContentStorePort, collection: str = DEFAULT_COLLECTION) -> None:
        self._store = store
        self._collection = collection

    def _of_type(self, event_type: str) -> list[dict[str, Any]]:
        return self._store.query(self._collection, "eventType", "==", event_type)

    def count_by_type(self, event_type: str) -> int:
        try:
            return len(self._of_type(event_type))
        except StoreError:
            logger.exception("Error counting %s events", event_type)
            return 0

    def get_top_posts(self, n: int = 10) -> list[TopPost]:
        try:
            views = parse_events(self._of_type("post_view"))
            clicks = parse_events(self._of_type("affiliate_click"))
        except StoreError:
            logger.exception("Error getting top posts")
            return []
        return top_posts(
            [e for e in views if isinstance(e, PostViewEvent)],
            [e for e in clicks if isinstance(e, AffiliateClickEvent)],
            n,
        )

    def get_recent_activity(self, n: int = 10) -> list[ActivityItem]:
        if n <= 0:
            return []
        try:
            docs = self._store.get_collection(
                self._collection, order_by="timestamp", descending=True, limit=n
            )
        except StoreError:
            logger.exception("Error getting recent activity")
            return []
        return recent_activity(parse_events(docs))

    def get_period_summary(self, start: datetime, end: datetime) -> PeriodSummary:
        try:
            docs = self._store.get_collection(self._collection)
        except StoreError:
            logger.exception("Error getting analytics for period")
            return PeriodSummary()
        return period_summary(parse_events(docs), _aware(start), _aware(end))

    def _count_for_post(self, event_type: str, post_id: str) -> int:
        try:
            docs = self._store.query(self._collection, "data.postId", "==", post_id)
        except StoreError:
            logger.exception("Error counting %s events for post %s", event_type, post_id)
            return 0
        return sum(1 for d in docs if d.get("eventType") == event_type)

    def get_post_views(self, post_id: str) -> int:
        return self._count_for_post("post_view", post_id)

    def get_post_clicks(self, post_id: str) -> int:
        return self._count_for_post("affiliate_click", post_id)


async def load_dashboard(
    aggregator: AnalyticsAggregatorPort,
    top_n: int = 10,
    recent_n: int = 10,
) -> DashboardSnapshot:
    """Issue the dashboard reads concurrently; returns once all complete."""
    page_views, post_views, clicks, top, recent = await asyncio.gather(
        asyncio.to_thread(aggregator.count_by_type, "page_view"),
        asyncio.to_thread(aggregator.count_by_type, "post_view"),
        asyncio.to_thread(aggregator.count_by_type, "affiliate_click"),
        asyncio.to_thread(aggregator.get_top_posts, top_n),
        asyncio.to_thread(aggregator.get_recent_activity, recent_n),
    )
    return DashboardSnapshot(
        total_page_views=page_views,
        total_post_views=post_views,
        total_affiliate_clicks=clicks,
        top_posts=top,
        recent_activity=recent,
    )
