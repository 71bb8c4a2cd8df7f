"""
Pages component - editable page content.

All pages live in one singleton document (`settings/pageContents`) mapping
page id to {id, title, content, lastUpdated}.

Key behaviors:
- The first admin load with no singleton writes every page's default
- Saving one page merges it into the singleton, leaving other pages alone
- Public reads never write; missing pages and read failures use defaults
- JSON page content that does not parse falls back to the page defaults
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from src.domain.entities import PageContent, iso_utc
from src.ports.clock import ClockPort
from src.ports.store import ContentStorePort, StoreError

from ._defaults import DATE_PLACEHOLDER, EDITABLE_PAGES, PUBLIC_FALLBACKS
from .models import (
    EditablePage,
    LoadPagesInput,
    LoadPagesOutput,
    PageSaveError,
    SavePageInput,
    SavePageOutput,
    UnknownPageError,
)

logger = logging.getLogger(__name__)

PAGE_CONTENTS_PATH = "settings/pageContents"

_PAGES_BY_ID = {p.id: p for p in EDITABLE_PAGES}


def get_editable_page(page_id: str) -> EditablePage:
    try:
        return _PAGES_BY_ID[page_id]
    except KeyError:
        raise UnknownPageError(page_id) from None


def default_content(page: EditablePage, today: datetime) -> str:
    return page.default_content.replace(DATE_PLACEHOLDER, f"{today:%m/%d/%Y}")


def default_page(page: EditablePage, now: datetime) -> PageContent:
    return PageContent(
        id=page.id,
        title=page.title,
        content=default_content(page, now),
        last_updated=iso_utc(now),
    )


def default_pages(now: datetime) -> dict[str, PageContent]:
    return {p.id: default_page(p, now) for p in EDITABLE_PAGES}


def _parse_pages(stored: dict[str, Any]) -> dict[str, PageContent]:
    pages: dict[str, PageContent] = {}
    for key, value in stored.items():
        if not isinstance(value, dict):
            continue
        try:
            pages[key] = PageContent.model_validate({"id": key, **value})
        except ValidationError as e:
            logger.warning("Ignoring malformed page content %s: %s", key, e)
    return pages


def json_page_fields(page_id: str, content: str | None) -> dict[str, str]:
    """
    Fields of a JSON-format page as the public site shows them.

    Empty or missing fields take the public fallback; unparsable content
    yields the fallbacks unchanged.
    """
    fallbacks = dict(PUBLIC_FALLBACKS.get(page_id, {}))
    if not content:
        return fallbacks
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("Error parsing %s content: %s", page_id, e)
        return fallbacks
    if not isinstance(parsed, dict):
        logger.error("Error parsing %s content: expected an object", page_id)
        return fallbacks
    for key in fallbacks:
        value = parsed.get(key)
        if value:
            fallbacks[key] = str(value)
    return fallbacks


# --- Reads ---


def load_page_contents(store: ContentStorePort, clock: ClockPort) -> LoadPagesOutput:
    """Admin load. Initialises the singleton with all defaults when absent."""
    now = clock.now()
    try:
        stored = store.get_singleton(PAGE_CONTENTS_PATH)
    except StoreError:
        logger.exception("Error loading page contents")
        return LoadPagesOutput(pages=default_pages(now))

    if stored is None:
        pages = default_pages(now)
        try:
            store.upsert_singleton(
                PAGE_CONTENTS_PATH,
                {pid: p.to_document() for pid, p in pages.items()},
                merge=False,
            )
            logger.info("Initialised page contents with defaults")
        except StoreError:
            logger.exception("Error initialising page contents")
            return LoadPagesOutput(pages=pages)
        return LoadPagesOutput(pages=pages, initialised=True)

    pages = _parse_pages(stored)
    for page in EDITABLE_PAGES:
        pages.setdefault(page.id, default_page(page, now))
    return LoadPagesOutput(pages=pages)


def get_page_content(store: ContentStorePort, clock: ClockPort, page_id: str) -> str:
    """Public read: stored content when non-empty, otherwise the page default."""
    page = get_editable_page(page_id)
    try:
        stored = store.get_singleton(PAGE_CONTENTS_PATH)
    except StoreError:
        logger.exception("Error loading page content for %s", page_id)
        stored = None
    entry = (stored or {}).get(page_id)
    if isinstance(entry, dict) and entry.get("content"):
        return str(entry["content"])
    return default_content(page, clock.now())


# --- Writes ---


def save_page_content(
    store: ContentStorePort, clock: ClockPort, page_id: str, content: str
) -> PageContent:
    """Merge one page into the singleton. Raises UnknownPageError, PageSaveError."""
    page = get_editable_page(page_id)
    updated = PageContent(
        id=page.id, title=page.title, content=content, last_updated=iso_utc(clock.now())
    )
    try:
        store.upsert_singleton(PAGE_CONTENTS_PATH, {page.id: updated.to_document()}, merge=True)
    except StoreError as e:
        logger.exception("Error saving content for %s", page_id)
        raise PageSaveError("Failed to save content") from e
    logger.info("Saved page content %s", page_id)
    return updated


# --- Component Entry Points ---


def run_load(inp: LoadPagesInput, *, store: ContentStorePort, clock: ClockPort) -> LoadPagesOutput:
    if inp.initialise:
        return load_page_contents(store, clock)
    try:
        stored = store.get_singleton(PAGE_CONTENTS_PATH)
    except StoreError:
        logger.exception("Error loading page contents")
        stored = None
    pages = _parse_pages(stored or {})
    now = clock.now()
    for page in EDITABLE_PAGES:
        pages.setdefault(page.id, default_page(page, now))
    return LoadPagesOutput(pages=pages)


def run_save(inp: SavePageInput, *, store: ContentStorePort, clock: ClockPort) -> SavePageOutput:
    try:
        page = save_page_content(store, clock, inp.page_id, inp.content)
    except UnknownPageError as e:
        return SavePageOutput(errors=[str(e)], success=False)
    except PageSaveError as e:
        return SavePageOutput(errors=[str(e)], success=False)
    return SavePageOutput(page=page)
