"""
Render component - server-rendered HTML for the public site and admin shell.
"""

from ._impl import (
    escape_html,
    format_date,
    format_price,
    render_markdown,
    sanitize_html,
    truncate_description,
)
from .component import (
    DASHBOARD_SECTIONS,
    LEGAL_LINKS,
    NAV_LINKS,
    build_metadata,
    render_contact,
    render_dashboard,
    render_dashboard_section,
    render_footer,
    render_header,
    render_home,
    render_html_page,
    render_login,
    render_meta_tags_html,
    render_not_found,
    render_page,
    render_post_card,
    render_product,
    render_rating_widget,
    render_reviews,
    render_sitemap_xml,
    sitemap_entries,
)
from .models import LayoutContext, MetaTag, NavLink, PageMetadata, SitemapEntry

__all__ = [
    # Page shell
    "build_metadata",
    "render_page",
    "render_header",
    "render_footer",
    "render_rating_widget",
    "render_meta_tags_html",
    # Public pages
    "render_home",
    "render_reviews",
    "render_post_card",
    "render_product",
    "render_html_page",
    "render_contact",
    "render_not_found",
    # Admin shell
    "render_login",
    "render_dashboard",
    "render_dashboard_section",
    # Sitemap
    "render_sitemap_xml",
    "sitemap_entries",
    # Text helpers
    "escape_html",
    "format_date",
    "format_price",
    "render_markdown",
    "sanitize_html",
    "truncate_description",
    # Models
    "LayoutContext",
    "MetaTag",
    "NavLink",
    "PageMetadata",
    "SitemapEntry",
    # Constants
    "DASHBOARD_SECTIONS",
    "LEGAL_LINKS",
    "NAV_LINKS",
]
