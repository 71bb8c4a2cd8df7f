"""
Content component - review posts.

Key behaviors:
- Slug is derived from the title when not supplied
- Slug uniqueness is a check-then-insert against the store; the two steps
  are separate store calls and concurrent creators can both pass the check
- `date` is set to now on create and overwritten with now on every update
- Listing is newest first; featured listing sorts in memory
"""

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import ValidationError

from src.domain.categories import is_category
from src.domain.entities import Author, Post, iso_utc
from src.ports.store import RecordNotFoundError, StoreError

from .models import (
    ContentValidationError,
    CreatePostInput,
    DeletePostInput,
    DuplicateSlugError,
    GetPostInput,
    ListPostsInput,
    PostListOutput,
    PostNotFoundError,
    PostOutput,
    PostValidationError,
    UpdatePostInput,
)
from .ports import POSTS_COLLECTION, ClockPort, ContentStorePort

logger = logging.getLogger(__name__)

_NON_SLUG = re.compile(r"[^a-z0-9]+")


# --- Pure Functions ---


def slugify(title: str) -> str:
    return _NON_SLUG.sub("-", title.lower()).strip("-")


def _clean_list(items: Any) -> list[str]:
    if not items:
        return []
    return [s.strip() for s in items if isinstance(s, str) and s.strip()]


def to_alias_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Rename snake_case field names to their stored camelCase aliases."""
    out: dict[str, Any] = {}
    for key, value in data.items():
        info = Post.model_fields.get(key)
        out[info.alias if info is not None and info.alias else key] = value
    return out


def normalize_post_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Apply the admin form rules: derived slug, trimmed pros/cons, default author."""
    out = dict(data)
    if not out.get("slug"):
        out["slug"] = slugify(out.get("title") or "")
    for key in ("pros", "cons"):
        if key in out:
            out[key] = _clean_list(out[key])
    if not out.get("author"):
        out["author"] = Author().model_dump()
    return out


def _validate_post_fields(post: Post) -> list[ContentValidationError]:
    errors: list[ContentValidationError] = []
    if not post.title.strip():
        errors.append(ContentValidationError("required", "Title is required", "title"))
    if not post.slug:
        errors.append(ContentValidationError("required", "Slug is required", "slug"))
    if not is_category(post.category):
        errors.append(
            ContentValidationError(
                "invalid_category", f"Unknown category '{post.category}'", "category"
            )
        )
    return errors


def _pydantic_errors(exc: ValidationError) -> list[ContentValidationError]:
    return [
        ContentValidationError(
            code="invalid_value",
            message=str(err.get("msg", "Invalid value")),
            field=".".join(str(p) for p in err.get("loc", ())) or None,
        )
        for err in exc.errors()
    ]


def to_post(record: dict[str, Any]) -> Post | None:
    try:
        return Post.model_validate(record)
    except ValidationError as e:
        logger.warning("Skipping malformed post %s: %s", record.get("id"), e)
        return None


def _to_posts(records: list[dict[str, Any]]) -> list[Post]:
    return [p for p in (to_post(r) for r in records) if p is not None]


def _date_key(post: Post) -> str:
    return post.date or ""


# --- Store Operations ---


def list_posts(store: ContentStorePort) -> list[Post]:
    """All posts, newest first. Store errors propagate."""
    return _to_posts(store.get_collection(POSTS_COLLECTION, order_by="date", descending=True))


def get_post(store: ContentStorePort, post_id: str) -> Post | None:
    record = store.get_record_by_id(POSTS_COLLECTION, post_id)
    return to_post(record) if record else None


def get_post_by_slug(store: ContentStorePort, slug: str) -> Post | None:
    records = store.query(POSTS_COLLECTION, "slug", "==", slug, limit=1)
    return to_post(records[0]) if records else None


def get_featured_posts(store: ContentStorePort, limit: int = 3) -> list[Post]:
    """Featured posts, newest first. Returns [] when the store fails."""
    try:
        records = store.query(POSTS_COLLECTION, "featured", "==", True)
    except StoreError:
        logger.exception("Error fetching featured posts")
        return []
    posts = sorted(_to_posts(records), key=_date_key, reverse=True)
    return posts[: max(limit, 0)]


def slug_exists(store: ContentStorePort, slug: str) -> bool:
    return bool(store.query(POSTS_COLLECTION, "slug", "==", slug, limit=1))


def create_post(store: ContentStorePort, clock: ClockPort, post: Post) -> Post:
    """
    Insert a post after checking its slug is free.

    Raises DuplicateSlugError. The check and the insert are not atomic.
    """
    if slug_exists(store, post.slug):
        raise DuplicateSlugError(post.slug)
    stored = post.model_copy(update={"id": None, "date": iso_utc(clock.now())})
    post_id = store.insert(POSTS_COLLECTION, stored.to_document())
    logger.info("Created post %s (%s)", post_id, stored.slug)
    return stored.model_copy(update={"id": post_id})


def update_post(
    store: ContentStorePort, clock: ClockPort, post_id: str, updates: dict[str, Any]
) -> Post:
    """Merge updates into the stored post and stamp the date. Raises PostNotFoundError."""
    current = get_post(store, post_id)
    if current is None:
        raise PostNotFoundError(post_id)
    merged = current.model_dump(by_alias=True)
    merged.update(normalize_post_fields({**merged, **to_alias_keys(updates)}))
    merged["date"] = iso_utc(clock.now())
    try:
        post = Post.model_validate({**merged, "id": post_id})
    except ValidationError as e:
        raise PostValidationError(_pydantic_errors(e)) from e
    errors = _validate_post_fields(post)
    if errors:
        raise PostValidationError(errors)
    try:
        store.update(POSTS_COLLECTION, post_id, post.to_document())
    except RecordNotFoundError as e:
        raise PostNotFoundError(post_id) from e
    logger.info("Updated post %s", post_id)
    return post


def delete_post(store: ContentStorePort, post_id: str) -> None:
    store.delete(POSTS_COLLECTION, post_id)
    logger.info("Deleted post %s", post_id)


# --- Component Entry Points ---


def run_get(inp: GetPostInput, *, store: ContentStorePort) -> PostOutput:
    if inp.post_id is None and inp.slug is None:
        return PostOutput(
            errors=[ContentValidationError("invalid_input", "Either post_id or slug is required")],
            success=False,
        )
    try:
        if inp.post_id is not None:
            post = get_post(store, inp.post_id)
        else:
            post = get_post_by_slug(store, inp.slug or "")
    except StoreError:
        logger.exception("Error loading post")
        return PostOutput(
            errors=[ContentValidationError("store_error", "Failed to load post")], success=False
        )
    if post is None:
        return PostOutput(
            errors=[ContentValidationError("not_found", "Post not found")], success=False
        )
    return PostOutput(post=post)


def run_list(inp: ListPostsInput, *, store: ContentStorePort) -> PostListOutput:
    if inp.featured_only:
        return PostListOutput(posts=get_featured_posts(store, inp.limit or 3))
    try:
        posts = list_posts(store)
    except StoreError:
        logger.exception("Error loading posts")
        return PostListOutput(
            errors=[ContentValidationError("store_error", "Failed to load posts")], success=False
        )
    if inp.limit is not None:
        posts = posts[: inp.limit]
    return PostListOutput(posts=posts)


def run_create(
    inp: CreatePostInput,
    *,
    store: ContentStorePort,
    clock: ClockPort,
) -> PostOutput:
    fields = normalize_post_fields(inp.data)
    fields.pop("id", None)
    try:
        post = Post.model_validate(fields)
    except ValidationError as e:
        return PostOutput(errors=_pydantic_errors(e), success=False)

    errors = _validate_post_fields(post)
    if errors:
        return PostOutput(errors=errors, success=False)

    try:
        saved = create_post(store, clock, post)
    except DuplicateSlugError as e:
        return PostOutput(
            errors=[ContentValidationError("slug_exists", str(e), "slug")], success=False
        )
    except StoreError:
        logger.exception("Error creating post")
        return PostOutput(
            errors=[ContentValidationError("store_error", "Failed to save post")], success=False
        )
    return PostOutput(post=saved)


def run_update(
    inp: UpdatePostInput,
    *,
    store: ContentStorePort,
    clock: ClockPort,
) -> PostOutput:
    updates = {k: v for k, v in inp.updates.items() if k != "id"}
    try:
        post = update_post(store, clock, inp.post_id, updates)
    except PostNotFoundError:
        return PostOutput(
            errors=[ContentValidationError("not_found", "Post not found")], success=False
        )
    except PostValidationError as e:
        return PostOutput(errors=e.errors, success=False)
    except StoreError:
        logger.exception("Error updating post %s", inp.post_id)
        return PostOutput(
            errors=[ContentValidationError("store_error", "Failed to save post")], success=False
        )
    return PostOutput(post=post)


def run_delete(inp: DeletePostInput, *, store: ContentStorePort) -> PostOutput:
    try:
        delete_post(store, inp.post_id)
    except StoreError:
        logger.exception("Error deleting post %s", inp.post_id)
        return PostOutput(
            errors=[ContentValidationError("store_error", "Failed to delete post")],
            success=False,
        )
    return PostOutput()


def run(
    inp: GetPostInput | ListPostsInput | CreatePostInput | UpdatePostInput | DeletePostInput,
    *,
    store: ContentStorePort,
    clock: ClockPort | None = None,
) -> PostOutput | PostListOutput:
    """Dispatch to the handler for the input type."""
    if isinstance(inp, GetPostInput):
        return run_get(inp, store=store)
    elif isinstance(inp, ListPostsInput):
        return run_list(inp, store=store)
    elif isinstance(inp, DeletePostInput):
        return run_delete(inp, store=store)
    elif isinstance(inp, CreatePostInput | UpdatePostInput):
        if clock is None:
            raise ValueError("ClockPort is required for create/update operations")
        if isinstance(inp, CreatePostInput):
            return run_create(inp, store=store, clock=clock)
        return run_update(inp, store=store, clock=clock)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
