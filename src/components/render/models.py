"""
Render component models.

Plain dataclasses describing what a page needs before it becomes HTML.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.entities import SiteSettings


@dataclass(frozen=True)
class MetaTag:
    """HTML meta tag representation."""

    name: str | None = None
    property: str | None = None
    content: str = ""


@dataclass
class PageMetadata:
    """Everything that goes into <head>."""

    title: str
    description: str = ""
    keywords: str = ""
    path: str = "/"
    robots: str = "index, follow"
    og_type: str = "website"
    og_image: str = ""
    site_name: str = ""
    site_verification: str = ""
    analytics_id: str = ""
    favicon: str = ""
    extra_meta: list[MetaTag] = field(default_factory=list)

    def to_meta_tags(self) -> list[MetaTag]:
        tags = [
            MetaTag(name="description", content=self.description),
            MetaTag(name="robots", content=self.robots),
        ]
        if self.keywords:
            tags.append(MetaTag(name="keywords", content=self.keywords))
        if self.site_verification:
            tags.append(
                MetaTag(name="google-site-verification", content=self.site_verification)
            )

        tags.extend(
            [
                MetaTag(property="og:title", content=self.title),
                MetaTag(property="og:description", content=self.description),
                MetaTag(property="og:type", content=self.og_type),
            ]
        )
        if self.og_image:
            tags.append(MetaTag(property="og:image", content=self.og_image))
        if self.site_name:
            tags.append(MetaTag(property="og:site_name", content=self.site_name))

        tags.extend(self.extra_meta)
        return tags


@dataclass(frozen=True)
class NavLink:
    label: str
    href: str


@dataclass
class LayoutContext:
    """
    Per-request state the page shell needs.

    `rated` and `user_rating` come from the durable rating cookies.
    """

    settings: SiteSettings
    path: str = "/"
    theme: str = "light"
    rated: bool = False
    user_rating: int | None = None
    signed_in: bool = False
    measurement_id: str = ""


@dataclass(frozen=True)
class SitemapEntry:
    loc: str
    lastmod: str | None = None
    changefreq: str = "weekly"
    priority: str = "0.5"
