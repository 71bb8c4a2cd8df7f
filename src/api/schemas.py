from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import EventType


class _CamelModel(BaseModel):
    """Request bodies accept camelCase (as stored) or snake_case keys."""

    model_config = ConfigDict(populate_by_name=True)


# --- Posts ---
class AuthorModel(BaseModel):
    name: str = "Admin"
    avatar: str | None = None


class PostCreateRequest(_CamelModel):
    title: str
    slug: str = ""
    excerpt: str = ""
    content: str = ""
    cover_image: str = Field(default="", alias="coverImage")
    category: str = "Electronics"
    tags: list[str] = []
    reading_time: int = Field(default=5, ge=1, alias="readingTime")
    product_name: str = Field(default="", alias="productName")
    product_price: float | None = Field(default=None, ge=0, alias="productPrice")
    affiliate_url: str = Field(default="", alias="affiliateUrl")
    pros: list[str] = []
    cons: list[str] = []
    specs: dict[str, str] = {}
    featured: bool = False
    author: AuthorModel | None = None

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PostUpdateRequest(_CamelModel):
    title: str | None = None
    slug: str | None = None
    excerpt: str | None = None
    content: str | None = None
    cover_image: str | None = Field(default=None, alias="coverImage")
    category: str | None = None
    tags: list[str] | None = None
    reading_time: int | None = Field(default=None, ge=1, alias="readingTime")
    product_name: str | None = Field(default=None, alias="productName")
    product_price: float | None = Field(default=None, ge=0, alias="productPrice")
    affiliate_url: str | None = Field(default=None, alias="affiliateUrl")
    pros: list[str] | None = None
    cons: list[str] | None = None
    specs: dict[str, str] | None = None
    featured: bool | None = None
    author: AuthorModel | None = None

    def to_updates(self) -> dict[str, Any]:
        # Only fields the client sent; an explicit null price clears it.
        return self.model_dump(by_alias=True, exclude_unset=True)


# --- Pages ---
class PageUpdateRequest(BaseModel):
    content: str


# --- Users ---
class UserCreateRequest(_CamelModel):
    email: str
    password: str
    display_name: str = Field(default="", alias="displayName")


class UserUpdateRequest(_CamelModel):
    display_name: str = Field(alias="displayName")


class UserResponse(_CamelModel):
    uid: str
    email: str
    display_name: str = Field(alias="displayName")
    created_at: str = Field(alias="createdAt")


class SessionResponse(_CamelModel):
    uid: str
    email: str
    display_name: str | None = Field(default=None, alias="displayName")
    expires_at: datetime = Field(alias="expiresAt")


# --- Analytics ---
class TopPostResponse(BaseModel):
    id: str
    title: str
    views: int
    clicks: int


class ActivityResponse(BaseModel):
    type: EventType
    description: str
    timestamp: datetime


class DashboardResponse(_CamelModel):
    total_page_views: int = Field(alias="totalPageViews")
    total_post_views: int = Field(alias="totalPostViews")
    total_affiliate_clicks: int = Field(alias="totalAffiliateClicks")
    top_posts: list[TopPostResponse] = Field(alias="topPosts")
    recent_activity: list[ActivityResponse] = Field(alias="recentActivity")


class PeriodSummaryResponse(_CamelModel):
    page_views: int = Field(alias="pageViews")
    post_views: int = Field(alias="postViews")
    affiliate_clicks: int = Field(alias="affiliateClicks")
    total_events: int = Field(alias="totalEvents")


class StatsResponse(BaseModel):
    users: int
    posts: int
    pages: int
    settings: int


# --- Public ---
class TrackRequest(_CamelModel):
    event_type: EventType = Field(alias="eventType")
    page_path: str = Field(default="", alias="pagePath")
    page_title: str = Field(default="", alias="pageTitle")
    post_id: str = Field(default="", alias="postId")
    post_title: str = Field(default="", alias="postTitle")
    affiliate_url: str = Field(default="", alias="affiliateUrl")
    email: str = ""
    search_term: str = Field(default="", alias="searchTerm")


class TrackResponse(BaseModel):
    ok: bool = True


class RatingResponse(_CamelModel):
    rated: bool
    rating: int
