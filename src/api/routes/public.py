"""
Public JSON API.

Read-only post and settings data for the browser, plus the two write
endpoints visitors can reach: event tracking and the site rating.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from src.adapters.clock import SystemClock
from src.adapters.session_storage import CookieSessionStorage
from src.api.auth_utils import safe_redirect_path
from src.api.deps import (
    get_clock,
    get_price_brackets,
    get_recorder,
    get_rules,
    get_session_storage,
    get_store,
)
from src.api.schemas import RatingResponse, TrackRequest, TrackResponse
from src.components.analytics import AnalyticsRecorder
from src.components.catalog import FilterPostsInput, PriceBracket, resolve_category
from src.components.catalog import run as run_filter
from src.components.content import (
    GetPostInput,
    ListPostsInput,
    get_featured_posts,
    run_get,
    run_list,
)
from src.components.pages import UnknownPageError, get_page_content
from src.components.settings import get_settings
from src.domain.entities import Post
from src.ports.store import ContentStorePort
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()
track_router = APIRouter()

RATED_COOKIE = "siteRated"
USER_RATING_COOKIE = "userRating"


def public_post(post: Post) -> dict[str, Any]:
    return {"id": post.id, **post.to_document()}


@router.get("/posts")
def list_public_posts(
    q: str = "",
    category: str = "all",
    price: str = "all",
    custom_min: str = Query(default="", alias="min"),
    custom_max: str = Query(default="", alias="max"),
    store: ContentStorePort = Depends(get_store),
    brackets: tuple[PriceBracket, ...] = Depends(get_price_brackets),
) -> dict[str, Any]:
    """Posts newest first, filtered the same way as the reviews page."""
    selected_category = resolve_category(category)
    listing = run_list(ListPostsInput(), store=store)
    result = run_filter(
        FilterPostsInput(
            posts=listing.posts,
            query=q,
            category=selected_category,
            price_range=price,
            custom_min=custom_min,
            custom_max=custom_max,
        ),
        brackets=brackets,
    )
    return {
        "posts": [public_post(p) for p in result.posts],
        "count": result.count,
        "countLabel": result.count_label,
    }


@router.get("/posts/{slug}")
def get_public_post(
    slug: str,
    store: ContentStorePort = Depends(get_store),
) -> dict[str, Any]:
    result = run_get(GetPostInput(slug=slug), store=store)
    if not result.success or result.post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return public_post(result.post)


@router.get("/featured")
def get_public_featured(store: ContentStorePort = Depends(get_store)) -> list[dict[str, Any]]:
    """Featured posts, newest first, capped by the featured posts limit setting."""
    settings = get_settings(store)
    return [public_post(p) for p in get_featured_posts(store, settings.featured_posts_limit)]


@router.get("/settings")
def get_public_settings(store: ContentStorePort = Depends(get_store)) -> dict[str, Any]:
    return get_settings(store).model_dump(by_alias=True)


@router.get("/pages/{page_id}")
def get_public_page(
    page_id: str,
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, str]:
    try:
        content = get_page_content(store, clock, page_id)
    except UnknownPageError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"id": page_id, "content": content}


# --- Visitor writes ---


@track_router.post("/track", response_model=TrackResponse)
def track_event(
    req: TrackRequest,
    response: Response,
    recorder: AnalyticsRecorder = Depends(get_recorder),
    session_storage: CookieSessionStorage = Depends(get_session_storage),
) -> TrackResponse:
    """
    Record a browser-originated event.

    Recording failures are logged by the recorder; the visitor always gets ok.
    """
    if req.event_type == "page_view":
        recorder.track_page_view(req.page_path, req.page_title)
    elif req.event_type == "post_view":
        recorder.track_post_view(req.post_id, req.post_title)
    elif req.event_type == "affiliate_click":
        recorder.track_affiliate_click(req.post_id, req.post_title, req.affiliate_url)
    elif req.event_type == "newsletter_signup":
        recorder.track_newsletter_signup(req.email)
    else:
        recorder.track_search(req.search_term)
    session_storage.apply(response)
    return TrackResponse(ok=True)


@track_router.post("/rating", response_model=RatingResponse)
def rate_site(
    rating: Annotated[int, Form(ge=1, le=5)],
    next: Annotated[str | None, Form()] = None,
    rules: Rules = Depends(get_rules),
) -> Response:
    """
    Remember the visitor's site rating in durable cookies.

    The rating is not stored server-side; it only changes what the footer
    widget shows to this visitor.
    """
    response: Response
    if next:
        response = RedirectResponse(
            safe_redirect_path(next), status_code=status.HTTP_303_SEE_OTHER
        )
    else:
        response = JSONResponse(RatingResponse(rated=True, rating=rating).model_dump())
    max_age = rules.cookies.rating_max_age_days * 24 * 60 * 60
    for key, value in ((RATED_COOKIE, "true"), (USER_RATING_COOKIE, str(rating))):
        response.set_cookie(
            key=key,
            value=value,
            max_age=max_age,
            samesite=rules.cookies.same_site,
            secure=rules.cookies.secure,
        )
    return response
