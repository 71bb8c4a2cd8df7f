"""
Public SSR Routes - server-rendered pages for visitors and the admin shell.

Every page reads site settings for the shell, records its view through the
analytics recorder, and never shows a raw store error.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from src.adapters.auth.identity import LocalAuthGateway
from src.adapters.clock import SystemClock
from src.adapters.session_storage import CookieSessionStorage
from src.api.auth_utils import safe_redirect_path
from src.api.deps import (
    Settings,
    get_clock,
    get_gateway,
    get_price_brackets,
    get_recorder,
    get_rules,
    get_session_storage,
    get_settings,
    get_store,
)
from src.api.routes.admin_analytics import load_collection_counts
from src.api.routes.public import RATED_COOKIE, USER_RATING_COOKIE
from src.components.analytics import AnalyticsRecorder
from src.components.auth import LOGIN_FAILED_MESSAGE
from src.components.catalog import FilterPostsInput, PriceBracket, resolve_category
from src.components.catalog import run as run_filter
from src.components.content import (
    GetPostInput,
    ListPostsInput,
    get_featured_posts,
    run_get,
    run_list,
)
from src.components.pages import (
    EDITABLE_PAGES,
    EditablePage,
    get_page_content,
    json_page_fields,
)
from src.components.render import (
    DASHBOARD_SECTIONS,
    LayoutContext,
    PageMetadata,
    build_metadata,
    render_contact,
    render_dashboard,
    render_dashboard_section,
    render_home,
    render_html_page,
    render_login,
    render_not_found,
    render_page,
    render_product,
    render_reviews,
    render_sitemap_xml,
    sitemap_entries,
)
from src.components.settings import get_settings as load_site_settings
from src.domain.entities import AuthSession, SiteSettings
from src.ports.store import ContentStorePort
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()

THEME_COOKIE = "theme"
THEME_MAX_AGE = 365 * 24 * 60 * 60


# --- Helpers ---


def _user_rating(raw: str | None) -> int | None:
    try:
        value = int(raw) if raw else None
    except ValueError:
        return None
    return value if value is not None and 1 <= value <= 5 else None


def build_layout(request: Request, site: SiteSettings, settings: Settings) -> LayoutContext:
    """Shell state from the request: path, theme and rating cookies."""
    return LayoutContext(
        settings=site,
        path=request.url.path,
        theme="dark" if request.cookies.get(THEME_COOKIE) == "dark" else "light",
        rated=request.cookies.get(RATED_COOKIE) == "true",
        user_rating=_user_rating(request.cookies.get(USER_RATING_COOKIE)),
        measurement_id=settings.backend.measurement_id,
    )


def html_response(
    ctx: LayoutContext,
    metadata: PageMetadata,
    body: str,
    *,
    status_code: int = 200,
    session_storage: CookieSessionStorage | None = None,
) -> HTMLResponse:
    response = HTMLResponse(content=render_page(ctx, metadata, body), status_code=status_code)
    if session_storage is not None:
        session_storage.apply(response)
    return response


def _metadata(
    ctx: LayoutContext,
    *,
    title: str | None = None,
    description: str | None = None,
    og_image: str | None = None,
    og_type: str = "website",
    robots: str = "index, follow",
) -> PageMetadata:
    return build_metadata(
        ctx.settings,
        path=ctx.path,
        title=title,
        description=description,
        og_image=og_image,
        og_type=og_type,
        measurement_id=ctx.measurement_id,
        robots=robots,
    )


def not_found_response(ctx: LayoutContext) -> HTMLResponse:
    metadata = _metadata(ctx, title="Page Not Found", robots="noindex")
    return html_response(ctx, metadata, render_not_found(ctx.path), status_code=404)


# --- Public pages ---


@router.get("/", response_class=HTMLResponse, summary="Home page")
def home_page(
    request: Request,
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
    recorder: AnalyticsRecorder = Depends(get_recorder),
    session_storage: CookieSessionStorage = Depends(get_session_storage),
) -> HTMLResponse:
    """Hero from the editable home content, then the featured reviews."""
    site = load_site_settings(store)
    ctx = build_layout(request, site, settings)
    hero = json_page_fields("home", get_page_content(store, clock, "home"))
    featured = get_featured_posts(store, site.featured_posts_limit)
    recorder.track_page_view("/", "Home")
    return html_response(
        ctx, _metadata(ctx), render_home(site, hero, featured), session_storage=session_storage
    )


@router.get("/reviews", response_class=HTMLResponse, summary="Reviews listing")
def reviews_page(
    request: Request,
    q: str = "",
    category: str = "all",
    price: str = "all",
    custom_min: str = Query(default="", alias="min"),
    custom_max: str = Query(default="", alias="max"),
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
    brackets: tuple[PriceBracket, ...] = Depends(get_price_brackets),
    recorder: AnalyticsRecorder = Depends(get_recorder),
    session_storage: CookieSessionStorage = Depends(get_session_storage),
) -> HTMLResponse:
    site = load_site_settings(store)
    ctx = build_layout(request, site, settings)
    fields = json_page_fields("reviews", get_page_content(store, clock, "reviews"))
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
    body = render_reviews(
        site,
        fields,
        result.posts,
        result.count_label,
        brackets=brackets,
        query=q,
        category=selected_category,
        price_range=price,
        custom_min=custom_min,
        custom_max=custom_max,
    )
    recorder.track_page_view("/reviews", "Reviews")
    metadata = _metadata(
        ctx, title=fields.get("pageTitle"), description=fields.get("pageDescription")
    )
    return html_response(ctx, metadata, body, session_storage=session_storage)


@router.get("/product/{slug}", response_class=HTMLResponse, summary="Product review")
def product_page(
    request: Request,
    slug: str,
    store: ContentStorePort = Depends(get_store),
    settings: Settings = Depends(get_settings),
    recorder: AnalyticsRecorder = Depends(get_recorder),
    session_storage: CookieSessionStorage = Depends(get_session_storage),
) -> HTMLResponse:
    site = load_site_settings(store)
    ctx = build_layout(request, site, settings)
    result = run_get(GetPostInput(slug=slug), store=store)
    if not result.success or result.post is None:
        return not_found_response(ctx)

    post = result.post
    if post.id:
        recorder.track_post_view(post.id, post.title)
    metadata = _metadata(
        ctx,
        title=post.title,
        description=post.excerpt or None,
        og_image=post.cover_image or None,
        og_type="article",
    )
    return html_response(
        ctx, metadata, render_product(post, site), session_storage=session_storage
    )


@router.get("/contact", response_class=HTMLResponse, summary="Contact page")
def contact_page(
    request: Request,
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
    recorder: AnalyticsRecorder = Depends(get_recorder),
    session_storage: CookieSessionStorage = Depends(get_session_storage),
) -> HTMLResponse:
    site = load_site_settings(store)
    ctx = build_layout(request, site, settings)
    fields = json_page_fields("contact", get_page_content(store, clock, "contact"))
    recorder.track_page_view("/contact", "Contact")
    metadata = _metadata(
        ctx, title=fields.get("pageTitle"), description=fields.get("pageDescription")
    )
    return html_response(
        ctx, metadata, render_contact(site, fields), session_storage=session_storage
    )


def _html_page_handler(page: EditablePage) -> Callable[..., HTMLResponse]:
    def handler(
        request: Request,
        store: ContentStorePort = Depends(get_store),
        clock: SystemClock = Depends(get_clock),
        settings: Settings = Depends(get_settings),
        recorder: AnalyticsRecorder = Depends(get_recorder),
        session_storage: CookieSessionStorage = Depends(get_session_storage),
    ) -> HTMLResponse:
        site = load_site_settings(store)
        ctx = build_layout(request, site, settings)
        content = get_page_content(store, clock, page.id)
        recorder.track_page_view(page.public_path, page.title)
        return html_response(
            ctx,
            _metadata(ctx, title=page.title),
            render_html_page(content),
            session_storage=session_storage,
        )

    handler.__name__ = f"{page.id.replace('-', '_')}_page"
    return handler


for _page in EDITABLE_PAGES:
    if _page.format == "html":
        router.add_api_route(
            _page.public_path,
            _html_page_handler(_page),
            methods=["GET"],
            response_class=HTMLResponse,
            summary=f"{_page.title} page",
        )


@router.get("/sitemap.xml", summary="XML sitemap")
def sitemap_xml(request: Request, store: ContentStorePort = Depends(get_store)) -> Response:
    """Static pages plus one entry per post."""
    listing = run_list(ListPostsInput(), store=store)
    entries = sitemap_entries(listing.posts, [p.public_path for p in EDITABLE_PAGES])
    xml = render_sitemap_xml(str(request.base_url), entries)
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Cache-Control": "public, max-age=3600"},
    )


@router.post("/theme", summary="Toggle light/dark theme")
def toggle_theme(
    request: Request,
    next: Annotated[str | None, Form()] = None,
    rules: Rules = Depends(get_rules),
) -> RedirectResponse:
    current = request.cookies.get(THEME_COOKIE, "light")
    response = RedirectResponse(safe_redirect_path(next), status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=THEME_COOKIE,
        value="light" if current == "dark" else "dark",
        max_age=THEME_MAX_AGE,
        samesite=rules.cookies.same_site,
        secure=rules.cookies.secure,
    )
    return response


# --- Admin shell ---


def observed_session(gateway: LocalAuthGateway) -> AuthSession | None:
    """The session as an auth-state subscriber sees it; the subscription is closed on return."""
    seen: list[AuthSession | None] = []
    with gateway.subscribed(seen.append):
        pass
    return seen[-1] if seen else None


@router.get("/dashboard", response_class=HTMLResponse, summary="Admin dashboard")
async def dashboard(
    request: Request,
    error: str | None = None,
    store: ContentStorePort = Depends(get_store),
    settings: Settings = Depends(get_settings),
    gateway: LocalAuthGateway = Depends(get_gateway),
) -> HTMLResponse:
    """Login form when signed out; collection counts when signed in."""
    site = await asyncio.to_thread(load_site_settings, store)
    ctx = build_layout(request, site, settings)
    session = observed_session(gateway)
    if session is None:
        message = LOGIN_FAILED_MESSAGE if error == "login" else None
        metadata = _metadata(ctx, title="Admin Login", robots="noindex")
        return html_response(ctx, metadata, render_login(message))

    counts = await load_collection_counts(store)
    metadata = _metadata(ctx, title="Dashboard", robots="noindex")
    body = render_dashboard(session.display_name or session.email, counts)
    return html_response(ctx, metadata, body)


@router.get("/dashboard/{section}", response_class=HTMLResponse, summary="Admin section")
def dashboard_section(
    request: Request,
    section: str,
    store: ContentStorePort = Depends(get_store),
    settings: Settings = Depends(get_settings),
    gateway: LocalAuthGateway = Depends(get_gateway),
) -> Response:
    site = load_site_settings(store)
    ctx = build_layout(request, site, settings)
    if section not in DASHBOARD_SECTIONS:
        return not_found_response(ctx)
    if observed_session(gateway) is None:
        return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)
    metadata = _metadata(ctx, title=DASHBOARD_SECTIONS[section], robots="noindex")
    return html_response(ctx, metadata, render_dashboard_section(section))


# --- Fallback ---


@router.get("/{path:path}", include_in_schema=False)
def not_found_page(
    request: Request,
    path: str,
    store: ContentStorePort = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Unknown paths get the HTML 404 page; unknown API paths stay JSON."""
    if path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not Found")
    ctx = build_layout(request, load_site_settings(store), settings)
    return not_found_response(ctx)
