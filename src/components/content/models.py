"""
Content component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import Post

# --- Errors ---


class ContentError(Exception):
    """Post operation rejected."""


class DuplicateSlugError(ContentError):
    def __init__(self, slug: str) -> None:
        super().__init__("Post with this slug already exists")
        self.slug = slug


class PostNotFoundError(ContentError):
    def __init__(self, post_id: str) -> None:
        super().__init__(f"Post {post_id} not found")
        self.post_id = post_id


class PostValidationError(ContentError):
    def __init__(self, errors: list[ContentValidationError]) -> None:
        super().__init__("; ".join(e.message for e in errors))
        self.errors = errors


@dataclass(frozen=True)
class ContentValidationError:
    """Content validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreatePostInput:
    """Raw post fields from the admin form (camelCase or snake_case keys)."""

    data: dict[str, Any]


@dataclass(frozen=True)
class UpdatePostInput:
    post_id: str
    updates: dict[str, Any]


@dataclass(frozen=True)
class DeletePostInput:
    post_id: str


@dataclass(frozen=True)
class GetPostInput:
    """Lookup by id or by slug."""

    post_id: str | None = None
    slug: str | None = None


@dataclass(frozen=True)
class ListPostsInput:
    featured_only: bool = False
    limit: int | None = None


# --- Output Models ---


@dataclass(frozen=True)
class PostOutput:
    post: Post | None = None
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class PostListOutput:
    posts: list[Post] = field(default_factory=list)
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True
