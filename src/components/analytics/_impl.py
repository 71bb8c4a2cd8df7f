"""
Analytics helpers: session identifiers, event parsing and descriptions.

Key behaviors:
- Session id format is session_<epoch millis>_<9 base-36 chars>
- A session id is generated once per tab session and reused afterwards
- Stored documents parse into the AnalyticsEvent tagged union; malformed
  documents are skipped by callers
"""

from __future__ import annotations

import logging
import random
import string
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from src.domain.entities import (
    AffiliateClickEvent,
    AnalyticsEvent,
    NewsletterSignupEvent,
    PageViewEvent,
    PostViewEvent,
    SearchEvent,
)

from .ports import SessionStoragePort

logger = logging.getLogger(__name__)

SESSION_KEY = "analytics_session_id"
BASE36 = string.digits + string.ascii_lowercase

EVENT_ADAPTER: TypeAdapter[AnalyticsEvent] = TypeAdapter(AnalyticsEvent)


def generate_session_id(now: datetime, rng: random.Random | None = None) -> str:
    millis = int(now.timestamp() * 1000)
    chooser = rng or random
    suffix = "".join(chooser.choice(BASE36) for _ in range(9))
    return f"session_{millis}_{suffix}"


def get_or_create_session_id(
    storage: SessionStoragePort,
    now: datetime,
    rng: random.Random | None = None,
) -> str:
    session_id = storage.get(SESSION_KEY)
    if not session_id:
        session_id = generate_session_id(now, rng)
        storage.set(SESSION_KEY, session_id)
    return session_id


def build_event(
    event_type: str,
    payload: dict[str, Any],
    timestamp: datetime,
    session_id: str | None,
    user_agent: str | None,
) -> AnalyticsEvent:
    """Raises pydantic.ValidationError for unknown types or bad payloads."""
    return EVENT_ADAPTER.validate_python(
        {
            "eventType": event_type,
            "timestamp": timestamp,
            "sessionId": session_id,
            "userAgent": user_agent,
            "data": payload,
        }
    )


def parse_event(doc: dict[str, Any]) -> AnalyticsEvent | None:
    try:
        return EVENT_ADAPTER.validate_python(doc)
    except ValidationError as e:
        logger.warning("Skipping malformed analytics event %s: %s", doc.get("id"), e)
        return None


def parse_events(docs: Iterable[dict[str, Any]]) -> list[AnalyticsEvent]:
    return [e for e in (parse_event(d) for d in docs) if e is not None]


def describe_event(event: AnalyticsEvent) -> str:
    if isinstance(event, PageViewEvent):
        return f"Page view: {event.data.page_title or 'Unknown page'}"
    if isinstance(event, PostViewEvent):
        return f"Post viewed: {event.data.post_title or 'Unknown post'}"
    if isinstance(event, AffiliateClickEvent):
        return f"Affiliate link clicked: {event.data.post_title or 'Unknown post'}"
    if isinstance(event, NewsletterSignupEvent):
        return "Newsletter signup"
    if isinstance(event, SearchEvent):
        return f"Search: {event.data.search_term or ''}"
    return ""
