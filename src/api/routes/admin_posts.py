"""
Admin Posts API.

Create, list, update and delete product reviews.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.adapters.clock import SystemClock
from src.api.deps import get_clock, get_store, require_session
from src.api.schemas import PostCreateRequest, PostUpdateRequest
from src.components.content import (
    ContentValidationError,
    CreatePostInput,
    DeletePostInput,
    ListPostsInput,
    UpdatePostInput,
    run_create,
    run_delete,
    run_list,
    run_update,
)
from src.domain.entities import AuthSession, Post
from src.ports.store import ContentStorePort

router = APIRouter()

_STATUS_BY_CODE = {
    "slug_exists": status.HTTP_409_CONFLICT,
    "not_found": status.HTTP_404_NOT_FOUND,
    "store_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def post_to_response(post: Post) -> dict[str, Any]:
    return {"id": post.id, **post.to_document()}


def raise_for_errors(errors: list[ContentValidationError]) -> None:
    """Map the first error to an HTTP status; validation problems are 400s."""
    first = errors[0]
    code = _STATUS_BY_CODE.get(first.code, status.HTTP_400_BAD_REQUEST)
    if code == status.HTTP_400_BAD_REQUEST:
        raise HTTPException(
            status_code=code,
            detail=[{"field": e.field, "code": e.code, "message": e.message} for e in errors],
        )
    raise HTTPException(status_code=code, detail=first.message)


@router.get("")
def list_posts(
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
) -> list[dict[str, Any]]:
    """All posts, newest first."""
    result = run_list(ListPostsInput(), store=store)
    if not result.success:
        raise_for_errors(result.errors)
    return [post_to_response(p) for p in result.posts]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(
    req: PostCreateRequest,
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, Any]:
    """Create a post. The publish date is stamped with the current time."""
    result = run_create(CreatePostInput(data=req.to_fields()), store=store, clock=clock)
    if not result.success or result.post is None:
        raise_for_errors(result.errors)
    return post_to_response(result.post)


@router.put("/{post_id}")
def update_post(
    post_id: str,
    req: PostUpdateRequest,
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, Any]:
    """Apply a partial update. Saving also moves the publish date to now."""
    result = run_update(
        UpdatePostInput(post_id=post_id, updates=req.to_updates()), store=store, clock=clock
    )
    if not result.success or result.post is None:
        raise_for_errors(result.errors)
    return post_to_response(result.post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: str,
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
) -> Response:
    result = run_delete(DeletePostInput(post_id=post_id), store=store)
    if not result.success:
        raise_for_errors(result.errors)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
