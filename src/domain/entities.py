from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

# --- Enums / Literals ---
EventType = Literal["page_view", "post_view", "affiliate_click", "newsletter_signup", "search"]
Theme = Literal["light", "dark"]


def iso_utc(dt: datetime) -> str:
    """Fixed-width UTC timestamp; stored strings sort chronologically."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class StoredModel(BaseModel):
    """Base for documents persisted with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"}, mode="json")


# --- Posts ---

class Author(StoredModel):
    name: str = "Admin"
    avatar: str | None = None


class Post(StoredModel):
    id: str | None = None
    slug: str
    title: str
    excerpt: str = ""
    content: str = ""
    cover_image: str = Field(default="", alias="coverImage")
    date: str = ""
    author: Author = Field(default_factory=Author)
    tags: list[str] = Field(default_factory=list)
    category: str = "Electronics"
    reading_time: int = Field(default=5, ge=1, alias="readingTime")
    product_name: str = Field(default="", alias="productName")
    product_price: float | None = Field(default=None, ge=0, alias="productPrice")
    affiliate_url: str = Field(default="", alias="affiliateUrl")
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    specs: dict[str, str] = Field(default_factory=dict)
    featured: bool = False


# --- Users ---

class AdminUser(StoredModel):
    uid: str
    email: str = ""
    display_name: str = Field(default="No Name", alias="displayName")
    created_at: str = Field(default="", alias="createdAt")


class Identity(BaseModel):
    """Identity service record; credentials never leave the gateway."""

    uid: str
    email: str
    display_name: str | None = None
    created_at: datetime


class AuthSession(BaseModel):
    uid: str
    email: str
    display_name: str | None = None
    token: str
    expires_at: datetime


# --- Analytics ---

class PageViewData(StoredModel):
    page_path: str = Field(default="", alias="pagePath")
    page_title: str | None = Field(default=None, alias="pageTitle")


class PostViewData(StoredModel):
    post_id: str = Field(default="", alias="postId")
    post_title: str | None = Field(default=None, alias="postTitle")


class AffiliateClickData(StoredModel):
    post_id: str = Field(default="", alias="postId")
    post_title: str | None = Field(default=None, alias="postTitle")
    affiliate_url: str = Field(default="", alias="affiliateUrl")


class NewsletterSignupData(StoredModel):
    email: str = ""


class SearchData(StoredModel):
    search_term: str = Field(default="", alias="searchTerm")


class _EventBase(StoredModel):
    id: str | None = None
    timestamp: datetime
    session_id: str | None = Field(default=None, alias="sessionId")
    user_agent: str | None = Field(default=None, alias="userAgent")

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return iso_utc(value)


class PageViewEvent(_EventBase):
    event_type: Literal["page_view"] = Field(default="page_view", alias="eventType")
    data: PageViewData = Field(default_factory=PageViewData)


class PostViewEvent(_EventBase):
    event_type: Literal["post_view"] = Field(default="post_view", alias="eventType")
    data: PostViewData = Field(default_factory=PostViewData)


class AffiliateClickEvent(_EventBase):
    event_type: Literal["affiliate_click"] = Field(default="affiliate_click", alias="eventType")
    data: AffiliateClickData = Field(default_factory=AffiliateClickData)


class NewsletterSignupEvent(_EventBase):
    event_type: Literal["newsletter_signup"] = Field(
        default="newsletter_signup", alias="eventType"
    )
    data: NewsletterSignupData = Field(default_factory=NewsletterSignupData)


class SearchEvent(_EventBase):
    event_type: Literal["search"] = Field(default="search", alias="eventType")
    data: SearchData = Field(default_factory=SearchData)


AnalyticsEvent = Annotated[
    PageViewEvent | PostViewEvent | AffiliateClickEvent | NewsletterSignupEvent | SearchEvent,
    Field(discriminator="event_type"),
]


# --- Config ---

class SocialLinks(StoredModel):
    facebook: str = ""
    twitter: str = ""
    instagram: str = ""
    youtube: str = ""
    linkedin: str = ""
    pinterest: str = ""


class SiteSettings(StoredModel):
    # General
    site_name: str = Field(default="TechReview", alias="siteName")
    site_description: str = Field(
        default="Honest reviews and expert opinions on the latest tech products",
        alias="siteDescription",
    )
    site_tagline: str = Field(default="The Best Product For You", alias="siteTagline")
    logo: str = ""
    favicon: str = ""
    site_icon: str = Field(default="", alias="siteIcon")
    site_rating: float = Field(default=4.8, ge=0, le=5, alias="siteRating")

    # Social
    facebook: str = ""
    twitter: str = ""
    instagram: str = ""
    youtube: str = ""
    linkedin: str = ""
    pinterest: str = ""

    # Display
    featured_posts_limit: int = Field(default=3, ge=1, alias="featuredPostsLimit")
    posts_per_page: int = Field(default=12, ge=1, alias="postsPerPage")
    show_author: bool = Field(default=True, alias="showAuthor")
    show_reading_time: bool = Field(default=True, alias="showReadingTime")
    show_categories: bool = Field(default=True, alias="showCategories")

    # SEO
    meta_title: str = Field(
        default="TechReview - Expert Product Reviews & Buying Guides", alias="metaTitle"
    )
    meta_description: str = Field(
        default=(
            "Get honest, in-depth reviews of the latest tech products to help you "
            "make informed buying decisions."
        ),
        alias="metaDescription",
    )
    meta_keywords: str = Field(
        default="tech reviews, product reviews, buying guides, gadgets", alias="metaKeywords"
    )
    google_analytics_id: str = Field(default="", alias="googleAnalyticsId")
    google_site_verification: str = Field(default="", alias="googleSiteVerification")

    # Footer
    copyright_text: str = Field(
        default="© 2024 TechReview. All rights reserved.", alias="copyrightText"
    )
    footer_description: str = Field(
        default="Your trusted source for honest product reviews and buying guides.",
        alias="footerDescription",
    )

    # Rating widget
    rating_title: str = Field(default="Rate Our Site", alias="ratingTitle")
    rating_description: str = Field(
        default="Click to rate your experience", alias="ratingDescription"
    )
    rating_button_text: str = Field(default="Site Rating", alias="ratingButtonText")
    rating_thank_you_message: str = Field(
        default="Thank you for rating!", alias="ratingThankYouMessage"
    )
    rating_review_count: str = Field(
        default="Based on 50,000+ reviews", alias="ratingReviewCount"
    )

    def social_links(self) -> SocialLinks:
        return SocialLinks.model_validate(self.model_dump())


class PageContent(StoredModel):
    id: str
    title: str
    content: str
    last_updated: str = Field(default="", alias="lastUpdated")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
