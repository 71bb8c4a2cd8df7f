"""
Content component - review post management.
"""

from .component import (
    create_post,
    delete_post,
    get_featured_posts,
    get_post,
    get_post_by_slug,
    list_posts,
    normalize_post_fields,
    run,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_update,
    slug_exists,
    slugify,
    to_alias_keys,
    to_post,
    update_post,
)
from .models import (
    ContentError,
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
from .ports import POSTS_COLLECTION

__all__ = [
    # Component entry points
    "run",
    "run_get",
    "run_list",
    "run_create",
    "run_update",
    "run_delete",
    # Store operations
    "list_posts",
    "get_post",
    "get_post_by_slug",
    "get_featured_posts",
    "slug_exists",
    "create_post",
    "update_post",
    "delete_post",
    # Pure functions
    "slugify",
    "normalize_post_fields",
    "to_alias_keys",
    "to_post",
    # Models
    "CreatePostInput",
    "UpdatePostInput",
    "DeletePostInput",
    "GetPostInput",
    "ListPostsInput",
    "PostOutput",
    "PostListOutput",
    "ContentValidationError",
    # Errors
    "ContentError",
    "DuplicateSlugError",
    "PostNotFoundError",
    "PostValidationError",
    # Constants
    "POSTS_COLLECTION",
]
