"""
Admin Pages API.

Editable page content: the home, reviews and contact pages hold JSON
fields; the about, sitemap and legal pages hold HTML.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from src.adapters.clock import SystemClock
from src.api.deps import get_clock, get_store, require_session
from src.api.schemas import PageUpdateRequest
from src.components.pages import (
    EDITABLE_PAGES,
    LoadPagesInput,
    PageSaveError,
    UnknownPageError,
    run_load,
    save_page_content,
)
from src.domain.entities import AuthSession
from src.ports.store import ContentStorePort

router = APIRouter()


@router.get("")
def list_pages(
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
) -> list[dict[str, Any]]:
    """Every editable page in menu order. The first load writes the defaults."""
    result = run_load(LoadPagesInput(initialise=True), store=store, clock=clock)
    return [
        {
            **result.pages[page.id].to_document(),
            "format": page.format,
            "publicPath": page.public_path,
        }
        for page in EDITABLE_PAGES
    ]


@router.put("/{page_id}")
def update_page(
    page_id: str,
    req: PageUpdateRequest,
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, Any]:
    try:
        page = save_page_content(store, clock, page_id, req.content)
    except UnknownPageError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except PageSaveError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return page.to_document()
