"""
Render component - server-rendered HTML for the public site and admin shell.

Pure functions: data in, markup out. Nothing here reads the store.

Key behaviors:
- One page shell (header nav, theme toggle, footer, rating widget)
- Metadata derived from site settings, overridden per page
- User-supplied text is escaped; admin HTML is sanitised; post bodies
  are rendered from markdown
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from urllib.parse import quote, urlencode

from src.domain.categories import CATEGORIES
from src.domain.entities import Post, SiteSettings

from ._impl import (
    escape_html,
    format_date,
    format_price,
    render_markdown,
    sanitize_html,
    truncate_description,
)
from .models import LayoutContext, MetaTag, NavLink, PageMetadata, SitemapEntry

NAV_LINKS: tuple[NavLink, ...] = (
    NavLink("Home", "/"),
    NavLink("Reviews", "/reviews"),
    NavLink("About", "/about"),
    NavLink("Contact", "/contact"),
)

LEGAL_LINKS: tuple[NavLink, ...] = (
    NavLink("Privacy Policy", "/privacy-policy"),
    NavLink("Terms of Service", "/terms-of-service"),
    NavLink("Sitemap", "/sitemap"),
    NavLink("Disclaimer", "/disclaimer"),
)

DASHBOARD_SECTIONS: dict[str, str] = {
    "users": "User Management",
    "posts": "Post Management",
    "pages": "Page Management",
    "settings": "Settings",
    "analytics": "Analytics",
}

FOOTER_CATEGORY_COUNT = 6
AFFILIATE_DISCLAIMER = (
    "Affiliate Disclaimer: We earn a commission if you make a purchase, "
    "at no extra cost to you."
)


# --- Metadata ---


def build_metadata(
    settings: SiteSettings,
    *,
    path: str = "/",
    title: str | None = None,
    description: str | None = None,
    og_image: str | None = None,
    og_type: str = "website",
    measurement_id: str = "",
    robots: str = "index, follow",
) -> PageMetadata:
    """
    Page metadata from settings.

    Without a title the SEO meta title is used; with one it is suffixed with
    the site name. The analytics id in settings wins over the deployment one.
    """
    full_title = f"{title} | {settings.site_name}" if title else settings.meta_title
    return PageMetadata(
        title=full_title,
        description=truncate_description(description or settings.meta_description),
        keywords=settings.meta_keywords,
        path=path,
        robots=robots,
        og_type=og_type,
        og_image=og_image or "",
        site_name=settings.site_name,
        site_verification=settings.google_site_verification,
        analytics_id=settings.google_analytics_id or measurement_id,
        favicon=settings.favicon or settings.site_icon,
    )


def render_meta_tags_html(metadata: PageMetadata) -> str:
    """Render PageMetadata to HTML meta tag string."""
    parts: list[str] = [f"<title>{escape_html(metadata.title)}</title>"]
    for tag in metadata.to_meta_tags():
        parts.append(_meta_tag(tag))
    if metadata.favicon:
        parts.append(f'<link rel="icon" href="{escape_html(metadata.favicon)}" />')
    if metadata.analytics_id:
        parts.append(_analytics_snippet(metadata.analytics_id))
    return "\n    ".join(parts)


def _meta_tag(tag: MetaTag) -> str:
    if tag.property:
        return (
            f'<meta property="{escape_html(tag.property)}" '
            f'content="{escape_html(tag.content)}" />'
        )
    return f'<meta name="{escape_html(tag.name)}" content="{escape_html(tag.content)}" />'


def _analytics_snippet(measurement_id: str) -> str:
    mid = escape_html(measurement_id)
    return (
        f'<script async src="https://www.googletagmanager.com/gtag/js?id={mid}"></script>\n'
        "    <script>window.dataLayer=window.dataLayer||[];"
        "function gtag(){dataLayer.push(arguments);}"
        f"gtag('js',new Date());gtag('config','{mid}');</script>"
    )


# --- Shell ---


def render_header(ctx: LayoutContext) -> str:
    settings = ctx.settings
    if settings.logo:
        brand = (
            f'<img src="{escape_html(settings.logo)}" alt="{escape_html(settings.site_name)}" '
            'class="logo" />'
        )
    else:
        brand = f'<span class="site-name">{escape_html(settings.site_name)}</span>'

    links = []
    for link in NAV_LINKS:
        active = _is_active(link.href, ctx.path)
        attr = ' aria-current="page" class="active"' if active else ""
        links.append(f'<a href="{link.href}"{attr}>{escape_html(link.label)}</a>')

    next_theme = "dark" if ctx.theme == "light" else "light"
    toggle = (
        '<form method="post" action="/theme" class="theme-toggle">'
        f'<input type="hidden" name="next" value="{escape_html(ctx.path)}" />'
        f'<button type="submit" aria-label="Switch to {next_theme} mode">'
        f"{'Dark' if next_theme == 'dark' else 'Light'} mode</button></form>"
    )
    return (
        '<header class="site-header">'
        f'<a href="/" class="brand">{brand}</a>'
        f'<nav>{"".join(links)}</nav>'
        f"{toggle}"
        "</header>"
    )


def _is_active(href: str, path: str) -> bool:
    if href == "/":
        return path == "/"
    return path == href or path.startswith(href + "/")


def render_rating_widget(ctx: LayoutContext) -> str:
    """Star rating form; after rating, the visitor's own score and a thank-you."""
    settings = ctx.settings
    summary = (
        '<p class="rating-summary">'
        f"<span>{escape_html(settings.rating_button_text)}</span> "
        f"<strong>{settings.site_rating:.1f}</strong> "
        f"<small>{escape_html(settings.rating_review_count)}</small></p>"
    )
    if ctx.rated:
        mine = f" ({ctx.user_rating}/5)" if ctx.user_rating else ""
        body = (
            '<p class="rating-thanks">'
            f"{escape_html(settings.rating_thank_you_message)}{mine}</p>"
        )
    else:
        stars = "".join(
            f'<button type="submit" name="rating" value="{n}" '
            f'aria-label="{n} star{"s" if n > 1 else ""}">&#9733;</button>'
            for n in range(1, 6)
        )
        body = (
            '<form method="post" action="/api/rating" class="rating-form">'
            f'<input type="hidden" name="next" value="{escape_html(ctx.path)}" />'
            f"<p><strong>{escape_html(settings.rating_title)}</strong></p>"
            f"<p>{escape_html(settings.rating_description)}</p>"
            f'<div class="stars">{stars}</div></form>'
        )
    return f'<section class="rating-widget">{body}{summary}</section>'


def render_footer(ctx: LayoutContext) -> str:
    settings = ctx.settings
    social = []
    for name, url in settings.social_links().model_dump().items():
        if url:
            social.append(
                f'<a href="{escape_html(url)}" target="_blank" rel="noopener noreferrer">'
                f"{escape_html(name.capitalize())}</a>"
            )

    quick_links = "".join(
        f'<li><a href="{link.href}">{escape_html(link.label)}</a></li>'
        for link in (*NAV_LINKS, *LEGAL_LINKS)
    )
    categories = "".join(
        f'<li><a href="/reviews?{urlencode({"category": c})}">{escape_html(c)}</a></li>'
        for c in CATEGORIES[:FOOTER_CATEGORY_COUNT]
    )
    legal = " ".join(
        f'<a href="{link.href}">{escape_html(link.label)}</a>' for link in LEGAL_LINKS
    )
    return (
        '<footer class="site-footer">'
        '<div class="footer-about">'
        f'<a href="/" class="brand">{escape_html(settings.site_name)}</a>'
        f"<p>{escape_html(settings.footer_description)}</p>"
        f'<div class="social">{"".join(social)}</div></div>'
        f'<ul class="quick-links">{quick_links}</ul>'
        f'<ul class="popular-categories">{categories}</ul>'
        f"{render_rating_widget(ctx)}"
        '<div class="footer-bottom">'
        f"<p>{escape_html(settings.copyright_text)}</p>"
        f"<nav>{legal}</nav></div>"
        "</footer>"
    )


def render_page(ctx: LayoutContext, metadata: PageMetadata, body_content: str = "") -> str:
    """Render a complete HTML document inside the site shell."""
    meta_html = render_meta_tags_html(metadata)
    theme = "dark" if ctx.theme == "dark" else "light"
    return f"""<!DOCTYPE html>
<html lang="en" class="{theme}">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    {meta_html}
</head>
<body>
    {render_header(ctx)}
    <main>
    {body_content}
    </main>
    {render_footer(ctx)}
</body>
</html>"""


# --- Public pages ---


def render_post_card(post: Post, settings: SiteSettings) -> str:
    href = f"/product/{quote(post.slug)}"
    if post.cover_image:
        cover = (
            f'<img src="{escape_html(post.cover_image)}" alt="{escape_html(post.title)}" '
            'loading="lazy" />'
        )
    else:
        cover = '<div class="cover-placeholder">&#128241;</div>'

    meta = []
    if settings.show_categories:
        meta.append(f'<span class="category">{escape_html(post.category)}</span>')
    if settings.show_reading_time:
        meta.append(f'<span class="reading-time">{post.reading_time} min read</span>')
    if post.product_price:
        meta.append(f'<span class="price">{format_price(post.product_price)}</span>')
    author = ""
    if settings.show_author:
        author = f'<p class="author">By {escape_html(post.author.name)}</p>'

    return (
        '<article class="post-card">'
        f'<a href="{href}">{cover}</a>'
        f'<div class="post-meta">{"".join(meta)}</div>'
        f'<h3><a href="{href}">{escape_html(post.title)}</a></h3>'
        f"<p>{escape_html(post.excerpt)}</p>"
        f"{author}"
        "</article>"
    )


def _post_grid(posts: Sequence[Post], settings: SiteSettings) -> str:
    cards = "".join(render_post_card(p, settings) for p in posts)
    return f'<div class="post-grid">{cards}</div>'


def render_home(settings: SiteSettings, hero: dict[str, str], featured: Sequence[Post]) -> str:
    """Hero block then the featured reviews."""
    featured_html = (
        _post_grid(featured, settings)
        if featured
        else '<p class="empty">No featured reviews yet.</p>'
    )
    return (
        '<section class="hero">'
        f'<span class="badge">{escape_html(hero.get("badgeText", ""))}</span>'
        f'<p class="hero-subtitle">{escape_html(hero.get("heroSubtitle", ""))}</p>'
        f'<h1>{escape_html(hero.get("heroTitle", ""))}</h1>'
        f'<p>{escape_html(hero.get("heroDescription", ""))}</p>'
        '<a href="/reviews" class="cta">Browse Reviews</a>'
        "</section>"
        '<section class="featured">'
        "<h2>Featured Reviews</h2>"
        "<p>Hand-picked reviews from our editors</p>"
        f"{featured_html}"
        "</section>"
    )


def _option(value: str, label: str, selected: str) -> str:
    attr = " selected" if value == selected else ""
    return f'<option value="{escape_html(value)}"{attr}>{escape_html(label)}</option>'


def render_reviews(
    settings: SiteSettings,
    fields: dict[str, str],
    posts: Sequence[Post],
    count_label: str,
    *,
    brackets: Iterable,
    query: str = "",
    category: str = "all",
    price_range: str = "all",
    custom_min: str = "",
    custom_max: str = "",
) -> str:
    """Listing page with the filter form. `posts` are already filtered."""
    category_options = _option("all", "All Categories", category) + "".join(
        _option(c, c, category) for c in CATEGORIES
    )
    price_options = (
        _option("all", "All Prices", price_range)
        + "".join(_option(b.name, b.label, price_range) for b in brackets)
        + _option("custom", "Custom Range", price_range)
    )
    custom = ""
    if price_range == "custom":
        custom = (
            f'<input type="number" name="min" placeholder="Min $" min="0" '
            f'value="{escape_html(custom_min)}" />'
            f'<input type="number" name="max" placeholder="Max $" min="0" '
            f'value="{escape_html(custom_max)}" />'
        )

    listing = (
        _post_grid(posts, settings)
        if posts
        else '<p class="empty">No reviews match your filters.</p>'
    )
    return (
        '<section class="page-header">'
        f'<h1>{escape_html(fields.get("pageTitle", ""))}</h1>'
        f'<p>{escape_html(fields.get("pageDescription", ""))}</p>'
        "</section>"
        '<form method="get" action="/reviews" class="filters">'
        f'<input type="search" name="q" value="{escape_html(query)}" '
        'placeholder="Search for products, brands, categories..." />'
        "<span>Filters:</span>"
        f'<select name="category">{category_options}</select>'
        f'<select name="price">{price_options}</select>'
        f"{custom}"
        '<button type="submit">Apply</button>'
        "</form>"
        f'<p class="result-count">{escape_html(count_label)}</p>'
        f"{listing}"
    )


def _affiliate_script(post: Post) -> str:
    # Click tracking must not delay navigation.
    post_id = escape_html(post.id or "")
    return (
        "<script>document.querySelectorAll('a.affiliate').forEach(function(a){"
        "a.addEventListener('click',function(){var body=JSON.stringify({"
        f"eventType:'affiliate_click',postId:'{post_id}',"
        "postTitle:a.dataset.title,affiliateUrl:a.href});"
        "navigator.sendBeacon('/api/track',new Blob([body],{type:'application/json'}));"
        "});});</script>"
    )


def render_product(post: Post, settings: SiteSettings) -> str:
    """Product review detail: header, cover, buy box, body, specs, pros and cons."""
    meta = [f'<span class="category">{escape_html(post.category)}</span>']
    if settings.show_reading_time:
        meta.append(f'<span class="reading-time">{post.reading_time} min read</span>')
    meta.append(f'<span class="date">{escape_html(format_date(post.date))}</span>')
    if settings.show_author:
        meta.append(f'<span class="author">By {escape_html(post.author.name)}</span>')

    if post.cover_image:
        cover = (
            f'<div class="cover"><img src="{escape_html(post.cover_image)}" '
            f'alt="{escape_html(post.title)}" /></div>'
        )
    else:
        cover = '<div class="cover cover-placeholder">&#128241;</div>'

    buy_box = ""
    if post.affiliate_url:
        price = (
            f'<p class="price">{format_price(post.product_price)}</p>'
            if post.product_price
            else ""
        )
        buy_box = (
            '<aside class="buy-box">'
            f"<h3>{escape_html(post.product_name or post.title)}</h3>{price}"
            f'<a href="{escape_html(post.affiliate_url)}" class="affiliate" target="_blank" '
            f'rel="sponsored nofollow noopener noreferrer" data-title="{escape_html(post.title)}">'
            "Buy on Amazon</a>"
            f'<p class="disclaimer">{AFFILIATE_DISCLAIMER}</p>'
            "</aside>"
        )

    specs = ""
    if post.specs:
        rows = "".join(
            f"<div><dt>{escape_html(k)}</dt><dd>{escape_html(v)}</dd></div>"
            for k, v in post.specs.items()
        )
        specs = f'<section class="specs"><h2>Technical Specifications</h2><dl>{rows}</dl></section>'

    verdict = ""
    if post.pros or post.cons:
        pros = "".join(f"<li>{escape_html(p)}</li>" for p in post.pros)
        cons = "".join(f"<li>{escape_html(c)}</li>" for c in post.cons)
        verdict = (
            '<section class="pros-cons">'
            f'<div class="pros"><h3>Pros</h3><ul>{pros}</ul></div>'
            f'<div class="cons"><h3>Cons</h3><ul>{cons}</ul></div>'
            "</section>"
        )

    tags = ""
    if post.tags:
        tags = '<p class="tags">' + " ".join(
            f'<span class="tag">#{escape_html(t)}</span>' for t in post.tags
        ) + "</p>"

    return (
        '<article class="product">'
        "<header>"
        f'<div class="post-meta">{"".join(meta)}</div>'
        f"<h1>{escape_html(post.title)}</h1>"
        f'<p class="excerpt">{escape_html(post.excerpt)}</p>'
        "</header>"
        f"{cover}{buy_box}"
        f'<div class="content">{render_markdown(post.content)}</div>'
        f"{specs}{verdict}{tags}"
        "</article>"
        f"{_affiliate_script(post) if post.affiliate_url else ''}"
    )


def render_html_page(content: str) -> str:
    return f'<article class="static-page">{sanitize_html(content)}</article>'


def render_contact(settings: SiteSettings, fields: dict[str, str]) -> str:
    social = "".join(
        f'<li><a href="{escape_html(url)}" target="_blank" rel="noopener noreferrer">'
        f"{escape_html(name.capitalize())}</a></li>"
        for name, url in settings.social_links().model_dump().items()
        if url
    )
    return (
        '<section class="page-header">'
        f'<h1>{escape_html(fields.get("pageTitle", ""))}</h1>'
        f'<p>{escape_html(fields.get("pageDescription", ""))}</p>'
        "</section>"
        f'<ul class="social">{social}</ul>'
    )


def render_not_found(path: str) -> str:
    return (
        '<section class="not-found">'
        "<h1>404</h1>"
        "<p>Page not found</p>"
        f"<p><code>{escape_html(path)}</code></p>"
        '<a href="/">Go back home</a>'
        "</section>"
    )


# --- Admin shell ---


def render_login(error: str | None = None) -> str:
    message = f'<p class="error" role="alert">{escape_html(error)}</p>' if error else ""
    return (
        '<section class="login">'
        "<h1>Admin Login</h1>"
        f"{message}"
        '<form method="post" action="/api/auth/login">'
        '<input type="hidden" name="next" value="/dashboard" />'
        '<label>Email <input type="email" name="username" required /></label>'
        '<label>Password <input type="password" name="password" required /></label>'
        '<button type="submit">Sign in</button>'
        "</form></section>"
    )


def _dashboard_nav() -> str:
    links = "".join(
        f'<a href="/dashboard/{key}">{escape_html(label)}</a>'
        for key, label in DASHBOARD_SECTIONS.items()
    )
    return (
        f'<nav class="dashboard-nav"><a href="/dashboard">Dashboard</a>{links}'
        '<form method="post" action="/api/auth/logout">'
        '<input type="hidden" name="next" value="/dashboard" />'
        '<button type="submit">Sign out</button></form></nav>'
    )


def render_dashboard(display_name: str, counts: dict[str, int]) -> str:
    """Signed-in landing: greeting and one card per collection count."""
    cards = "".join(
        f'<div class="stat"><h3>{escape_html(label.capitalize())}</h3>'
        f"<p>{value}</p></div>"
        for label, value in counts.items()
    )
    return (
        f"{_dashboard_nav()}"
        '<section class="dashboard">'
        f"<h1>Welcome, {escape_html(display_name)}</h1>"
        f'<div class="stats">{cards}</div>'
        "</section>"
    )


def render_dashboard_section(section: str) -> str:
    title = DASHBOARD_SECTIONS.get(section, section)
    return (
        f"{_dashboard_nav()}"
        f'<section class="dashboard-section" data-section="{escape_html(section)}">'
        f"<h1>{escape_html(title)}</h1>"
        f'<div id="app" data-api="/api/admin/{escape_html(section)}"></div>'
        "</section>"
    )


# --- Sitemap ---


def render_sitemap_xml(base_url: str, entries: Iterable[SitemapEntry]) -> str:
    base = base_url.rstrip("/")
    urls: list[str] = []
    for entry in entries:
        lastmod = f"\n    <lastmod>{escape_html(entry.lastmod)}</lastmod>" if entry.lastmod else ""
        urls.append(
            "  <url>\n"
            f"    <loc>{escape_html(base + entry.loc)}</loc>{lastmod}\n"
            f"    <changefreq>{entry.changefreq}</changefreq>\n"
            f"    <priority>{entry.priority}</priority>\n"
            "  </url>"
        )
    body = "\n".join(urls)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        f"{body}\n"
        "</urlset>"
    )


def sitemap_entries(posts: Iterable[Post], static_paths: Iterable[str]) -> list[SitemapEntry]:
    """Static pages first (home at top priority), then one entry per post."""
    entries = []
    for path in static_paths:
        frequent = path in ("/", "/reviews")
        entries.append(
            SitemapEntry(
                loc=path,
                priority="1.0" if path == "/" else "0.8",
                changefreq="daily" if frequent else "monthly",
            )
        )
    for post in posts:
        lastmod = post.date[:10] if post.date else None
        entries.append(SitemapEntry(loc=f"/product/{quote(post.slug)}", lastmod=lastmod))
    return entries
