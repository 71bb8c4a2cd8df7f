"""
Tests for analytics aggregation: top posts, recent activity, period
summaries and the dashboard join.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from src.adapters.clock import FixedClock
from src.adapters.memory_store import InMemoryDocumentStore
from src.components.analytics import (
    RecordEventInput,
    ScanAggregator,
    describe_event,
    load_dashboard,
    period_summary,
    run_record,
    top_posts,
)
from src.domain.entities import (
    AffiliateClickEvent,
    NewsletterSignupEvent,
    PageViewEvent,
    PostViewEvent,
    SearchEvent,
)
from src.ports.store import StoreError

T0 = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)

# --- Mock Store ---


class FailingStore:
    """Store whose every read fails."""

    def get_collection(self, name: str, **kwargs: Any) -> list[dict[str, Any]]:
        raise StoreError("offline")

    def query(self, *args: Any, **kwargs: Any) -> list[dict[str, Any]]:
        raise StoreError("offline")


# --- Helpers ---


def view(
    post_id: str, title: str | None = None, *, at: int = 0, event_id: str = ""
) -> PostViewEvent:
    return PostViewEvent(
        id=event_id or None,
        timestamp=T0 + timedelta(seconds=at),
        data={"postId": post_id, "postTitle": title},
    )


def click(post_id: str, *, at: int = 0) -> AffiliateClickEvent:
    return AffiliateClickEvent(
        timestamp=T0 + timedelta(seconds=at),
        data={"postId": post_id, "affiliateUrl": "https://example.com"},
    )


def record(
    store: InMemoryDocumentStore,
    clock: FixedClock,
    event_type: str,
    payload: dict[str, Any],
) -> None:
    out = run_record(RecordEventInput(event_type, payload), store=store, clock=clock)
    assert out.success, out.errors
    clock.advance(seconds=1)


@pytest.fixture
def aggregator(store: InMemoryDocumentStore) -> ScanAggregator:
    return ScanAggregator(store)


# --- Top Posts ---


class TestTopPosts:
    def test_scenario_views_and_clicks(self) -> None:
        """Clicks for a post with no views are dropped."""
        views = [view("p1", "X", at=0), view("p1", at=1)]
        clicks = [click("p1", at=2), click("p2", at=3)]

        result = top_posts(views, clicks, n=5)

        assert len(result) == 1
        assert (result[0].id, result[0].title, result[0].views, result[0].clicks) == (
            "p1",
            "X",
            2,
            1,
        )

    def test_sorted_by_views_and_capped(self) -> None:
        views = [view("a", at=0), view("b", at=1), view("b", at=2), view("c", at=3)]
        views += [view("c", at=4), view("c", at=5)]

        result = top_posts(views, [], n=2)

        assert [p.id for p in result] == ["c", "b"]

    def test_tie_break_by_first_view(self) -> None:
        """Equal counts rank by the earliest view, regardless of input order."""
        views = [view("late", at=10), view("early", at=1)]
        views += [view("late", at=11), view("early", at=2)]

        result = top_posts(views, [], n=10)

        assert [p.id for p in result] == ["early", "late"]

    def test_tie_break_same_timestamp_uses_event_id(self) -> None:
        views = [view("b", event_id="e2"), view("a", event_id="e1")]
        assert [p.id for p in top_posts(views, [])] == ["a", "b"]

    def test_untitled_default_and_title_kept(self) -> None:
        views = [view("p1", at=0), view("p1", "Named", at=1), view("p1", None, at=2)]
        assert top_posts(views, [])[0].title == "Named"

        assert top_posts([view("p9")], [])[0].title == "Untitled"

    def test_zero_n_returns_empty(self) -> None:
        assert top_posts([view("p1")], [], n=0) == []

    def test_idempotent(self) -> None:
        views = [view("a", at=0), view("b", at=1), view("b", at=2), view("a", at=3)]
        clicks = [click("a"), click("b")]
        assert top_posts(views, clicks) == top_posts(list(reversed(views)), clicks)


# --- Descriptions ---


class TestDescribeEvent:
    def test_descriptions(self) -> None:
        assert (
            describe_event(PageViewEvent(timestamp=T0, data={"pageTitle": "Home"}))
            == "Page view: Home"
        )
        assert describe_event(PageViewEvent(timestamp=T0)) == "Page view: Unknown page"
        assert describe_event(view("p1", "Aurora")) == "Post viewed: Aurora"
        assert describe_event(view("p1")) == "Post viewed: Unknown post"
        assert describe_event(click("p1")) == "Affiliate link clicked: Unknown post"
        assert describe_event(NewsletterSignupEvent(timestamp=T0)) == "Newsletter signup"
        assert (
            describe_event(SearchEvent(timestamp=T0, data={"searchTerm": "laptop"}))
            == "Search: laptop"
        )


# --- Period Summary ---


class TestPeriodSummary:
    def test_counts_within_inclusive_range(self) -> None:
        events = [
            PageViewEvent(timestamp=T0),
            view("p1", at=60),
            click("p1", at=120),
            SearchEvent(timestamp=T0 + timedelta(seconds=180)),
            PageViewEvent(timestamp=T0 + timedelta(days=2)),
        ]

        summary = period_summary(events, T0, T0 + timedelta(seconds=180))

        assert summary.page_views == 1
        assert summary.post_views == 1
        assert summary.affiliate_clicks == 1
        assert summary.total_events == 4


# --- Scan Aggregator ---


class TestScanAggregator:
    def test_counts_and_top_posts_from_store(
        self, store: InMemoryDocumentStore, clock: FixedClock, aggregator: ScanAggregator
    ) -> None:
        record(store, clock, "post_view", {"postId": "p1", "postTitle": "X"})
        record(store, clock, "post_view", {"postId": "p1"})
        record(store, clock, "affiliate_click", {"postId": "p1", "affiliateUrl": "https://a"})
        record(store, clock, "affiliate_click", {"postId": "p2", "affiliateUrl": "https://b"})
        record(store, clock, "page_view", {"pagePath": "/", "pageTitle": "Home"})

        assert aggregator.count_by_type("post_view") == 2
        assert aggregator.count_by_type("affiliate_click") == 2
        assert aggregator.count_by_type("page_view") == 1

        top = aggregator.get_top_posts(5)
        assert [(p.id, p.title, p.views, p.clicks) for p in top] == [("p1", "X", 2, 1)]

    def test_aggregation_is_repeatable(
        self, store: InMemoryDocumentStore, clock: FixedClock, aggregator: ScanAggregator
    ) -> None:
        for post_id in ("a", "b", "c", "b", "a"):
            record(store, clock, "post_view", {"postId": post_id})

        first = aggregator.get_top_posts(10)
        second = aggregator.get_top_posts(10)

        assert first == second
        assert [p.id for p in first] == ["a", "b", "c"]

    def test_recent_activity_newest_first(
        self, store: InMemoryDocumentStore, clock: FixedClock, aggregator: ScanAggregator
    ) -> None:
        record(store, clock, "page_view", {"pagePath": "/", "pageTitle": "Home"})
        record(store, clock, "search", {"searchTerm": "tv"})
        record(store, clock, "post_view", {"postId": "p1", "postTitle": "Aurora"})

        recent = aggregator.get_recent_activity(2)

        assert [a.description for a in recent] == ["Post viewed: Aurora", "Search: tv"]

    def test_per_post_counts(
        self, store: InMemoryDocumentStore, clock: FixedClock, aggregator: ScanAggregator
    ) -> None:
        record(store, clock, "post_view", {"postId": "p1"})
        record(store, clock, "post_view", {"postId": "p1"})
        record(store, clock, "affiliate_click", {"postId": "p1", "affiliateUrl": "https://a"})

        assert aggregator.get_post_views("p1") == 2
        assert aggregator.get_post_clicks("p1") == 1
        assert aggregator.get_post_views("missing") == 0

    def test_malformed_documents_skipped(
        self, store: InMemoryDocumentStore, clock: FixedClock, aggregator: ScanAggregator
    ) -> None:
        record(store, clock, "post_view", {"postId": "p1"})
        store.insert("analytics_events", {"eventType": "post_view", "timestamp": "not a date"})

        assert [p.views for p in aggregator.get_top_posts()] == [1]

    def test_store_failure_degrades_to_zero_values(self) -> None:
        aggregator = ScanAggregator(FailingStore())  # type: ignore[arg-type]

        assert aggregator.count_by_type("page_view") == 0
        assert aggregator.get_top_posts() == []
        assert aggregator.get_recent_activity() == []
        assert aggregator.get_period_summary(T0, T0).total_events == 0
        assert aggregator.get_post_views("p1") == 0


class TestLoadDashboard:
    def test_joins_all_reads(
        self, store: InMemoryDocumentStore, clock: FixedClock, aggregator: ScanAggregator
    ) -> None:
        record(store, clock, "page_view", {"pagePath": "/", "pageTitle": "Home"})
        record(store, clock, "post_view", {"postId": "p1", "postTitle": "Aurora"})
        record(store, clock, "affiliate_click", {"postId": "p1", "affiliateUrl": "https://a"})

        snapshot = asyncio.run(load_dashboard(aggregator, top_n=5, recent_n=2))

        assert snapshot.total_page_views == 1
        assert snapshot.total_post_views == 1
        assert snapshot.total_affiliate_clicks == 1
        assert snapshot.top_posts[0].clicks == 1
        assert len(snapshot.recent_activity) == 2
        assert snapshot.recent_activity[0].type == "affiliate_click"
