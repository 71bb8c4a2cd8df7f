"""
Text rendering helpers - escaping, sanitising and markdown.

Key behaviors:
- Everything user-supplied is escaped before it reaches a template
- Post bodies are markdown; raw HTML inside them is shown as text
- Admin-edited HTML pages keep a safe tag subset; scripts and event
  handlers are stripped, javascript: and data: links removed
- Links to other sites get rel="noopener noreferrer"
"""

from __future__ import annotations

import html
import logging
from datetime import datetime

import bleach
import markdown
from bleach.linkifier import Linker

logger = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset(
    [
        "p",
        "br",
        "hr",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "blockquote",
        "ul",
        "ol",
        "li",
        "strong",
        "b",
        "em",
        "i",
        "u",
        "code",
        "pre",
        "a",
        "img",
        "table",
        "thead",
        "tbody",
        "tr",
        "th",
        "td",
        "div",
        "span",
        "section",
    ]
)

ALLOWED_ATTRS: dict[str, list[str]] = {
    "a": ["href", "title", "target", "rel"],
    "img": ["src", "alt", "title", "width", "height"],
    "th": ["colspan", "rowspan"],
    "td": ["colspan", "rowspan"],
}

ALLOWED_PROTOCOLS = frozenset(["http", "https", "mailto"])

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]


def escape_html(text: object) -> str:
    """Escape HTML special characters. None renders as an empty string."""
    if text is None:
        return ""
    return html.escape(str(text), quote=True)


def _add_rel(attrs: dict, new: bool = False) -> dict:
    href_key = (None, "href")
    href = attrs.get(href_key, "")
    if href.startswith(("http://", "https://")):
        attrs[(None, "rel")] = "noopener noreferrer"
    return attrs


_LINKER = Linker(callbacks=[_add_rel], skip_tags=["pre", "code"], parse_email=False)


def sanitize_html(content: str | None) -> str:
    """Clean admin-authored HTML down to the allowed tag subset."""
    if not content:
        return ""
    cleaned = bleach.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )
    return _LINKER.linkify(cleaned)


def escape_raw_html(text: str) -> str:
    """
    Neutralise HTML tags inside markdown source.

    '>' is left alone so blockquotes survive; with '<' escaped no tag can open.
    """
    return html.escape(text, quote=False).replace("&gt;", ">")


def render_markdown(text: str | None) -> str:
    """Markdown to HTML. Raw HTML in the source is displayed, not interpreted."""
    if not text:
        return ""
    rendered = markdown.markdown(escape_raw_html(text), extensions=MARKDOWN_EXTENSIONS)
    return sanitize_html(rendered)


def format_price(price: float | None) -> str:
    if price is None:
        return ""
    if float(price).is_integer():
        return f"${int(price):,}"
    return f"${price:,.2f}"


def format_date(value: str | None) -> str:
    """ISO timestamp to MM/DD/YYYY; unparsable input is shown as given."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparsable date %r", value)
        return value
    return f"{parsed:%m/%d/%Y}"


def truncate_description(text: str, max_length: int = 160) -> str:
    """
    Truncate description to fit meta description limits.

    Breaks at word boundary if possible.
    """
    if len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.6:
        truncated = truncated[:last_space]

    return truncated.rstrip() + "..."
