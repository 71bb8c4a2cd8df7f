"""
Tests for analytics event recording and the per-tab session id.
"""

from __future__ import annotations

import random
import re
from datetime import UTC, datetime
from typing import Any

import pytest
from fastapi import Response

from src.adapters.clock import FixedClock
from src.adapters.memory_store import InMemoryDocumentStore
from src.adapters.session_storage import CookieSessionStorage, InMemorySessionStorage
from src.components.analytics import (
    SESSION_KEY,
    AnalyticsRecorder,
    RecordEventInput,
    generate_session_id,
    get_or_create_session_id,
    run_record,
)
from src.ports.store import StoreError

SESSION_ID_PATTERN = re.compile(r"^session_\d+_[0-9a-z]{9}$")

# --- Mock Store ---


class BrokenWriteStore(InMemoryDocumentStore):
    """Reads work, every insert fails."""

    def insert(self, collection: str, record: dict[str, Any]) -> str:
        raise StoreError("write refused")


# --- Fixtures ---


@pytest.fixture
def session_storage() -> InMemorySessionStorage:
    return InMemorySessionStorage()


@pytest.fixture
def recorder(
    store: InMemoryDocumentStore, clock: FixedClock, session_storage: InMemorySessionStorage
) -> AnalyticsRecorder:
    return AnalyticsRecorder(
        store, clock, session_storage, user_agent="pytest-agent", rng=random.Random(7)
    )


# --- Session Id ---


class TestSessionId:
    def test_format(self) -> None:
        now = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
        session_id = generate_session_id(now, random.Random(1))

        assert SESSION_ID_PATTERN.match(session_id)
        assert session_id.split("_")[1] == str(int(now.timestamp() * 1000))

    def test_created_once_then_reused(self, session_storage: InMemorySessionStorage) -> None:
        now = datetime(2025, 1, 15, tzinfo=UTC)
        first = get_or_create_session_id(session_storage, now)
        second = get_or_create_session_id(session_storage, now)

        assert first == second
        assert session_storage.get(SESSION_KEY) == first

    def test_existing_id_kept(self) -> None:
        storage = InMemorySessionStorage({SESSION_KEY: "session_1_abcdefghi"})
        now = datetime(2025, 1, 15, tzinfo=UTC)
        assert get_or_create_session_id(storage, now) == "session_1_abcdefghi"


# --- Recording ---


class TestRunRecord:
    def test_stamps_server_time(self, store: InMemoryDocumentStore, clock: FixedClock) -> None:
        out = run_record(
            RecordEventInput("search", {"searchTerm": "laptop"}, session_id="s1"),
            store=store,
            clock=clock,
        )

        assert out.success
        doc = store.get_record_by_id("analytics_events", out.event_id or "")
        assert doc is not None
        assert doc["eventType"] == "search"
        assert doc["timestamp"] == "2025-01-15T12:00:00.000000Z"
        assert doc["sessionId"] == "s1"
        assert doc["data"] == {"searchTerm": "laptop"}

    def test_unknown_type_rejected(self, store: InMemoryDocumentStore, clock: FixedClock) -> None:
        out = run_record(RecordEventInput("purchase", {}), store=store, clock=clock)

        assert not out.success
        assert store.get_collection("analytics_events") == []

    def test_store_failure_reported_not_raised(self, clock: FixedClock) -> None:
        out = run_record(
            RecordEventInput("page_view", {"pagePath": "/"}),
            store=BrokenWriteStore(),
            clock=clock,
        )
        assert not out.success
        assert out.errors


class TestAnalyticsRecorder:
    def test_events_share_session_and_agent(
        self, recorder: AnalyticsRecorder, store: InMemoryDocumentStore
    ) -> None:
        recorder.track_page_view("/", "Home")
        recorder.track_post_view("p1", "Aurora X2")
        recorder.track_affiliate_click("p1", "Aurora X2", "https://amazon.example/x2")

        docs = store.get_collection("analytics_events")
        assert len(docs) == 3
        assert len({d["sessionId"] for d in docs}) == 1
        assert SESSION_ID_PATTERN.match(docs[0]["sessionId"])
        assert {d["userAgent"] for d in docs} == {"pytest-agent"}

    def test_typed_payloads(
        self, recorder: AnalyticsRecorder, store: InMemoryDocumentStore
    ) -> None:
        click_id = recorder.track_affiliate_click("p1", "Aurora", "https://a.example")
        signup_id = recorder.track_newsletter_signup("reader@example.com")

        click = store.get_record_by_id("analytics_events", click_id or "")
        signup = store.get_record_by_id("analytics_events", signup_id or "")
        assert click is not None and signup is not None
        assert click["data"]["affiliateUrl"] == "https://a.example"
        assert signup["data"] == {"email": "reader@example.com"}

    def test_disabled_records_nothing(
        self, store: InMemoryDocumentStore, clock: FixedClock
    ) -> None:
        recorder = AnalyticsRecorder(store, clock, InMemorySessionStorage(), enabled=False)

        assert recorder.track_page_view("/", "Home") is None
        assert store.get_collection("analytics_events") == []

    def test_write_failure_swallowed(self, clock: FixedClock) -> None:
        recorder = AnalyticsRecorder(BrokenWriteStore(), clock, InMemorySessionStorage())
        assert recorder.track_search("tv") is None


# --- Cookie Session Storage ---


class TestCookieSessionStorage:
    def test_new_id_written_to_response(self) -> None:
        storage = CookieSessionStorage({})
        storage.set(SESSION_KEY, "session_1_abcdefghi")
        response = Response()

        storage.apply(response)

        header = response.headers["set-cookie"]
        assert f"{SESSION_KEY}=session_1_abcdefghi" in header
        assert "httponly" in header.lower()
        assert "max-age" not in header.lower()

    def test_existing_cookie_read_without_rewrite(self) -> None:
        storage = CookieSessionStorage({SESSION_KEY: "session_1_abcdefghi"})
        assert get_or_create_session_id(storage, datetime(2025, 1, 1, tzinfo=UTC)) == (
            "session_1_abcdefghi"
        )
        assert storage.pending == {}
