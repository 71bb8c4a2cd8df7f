"""
Catalog component - filtering the reviews listing.
"""

from .component import (
    ALL_PRICES,
    CUSTOM_PRICE,
    DEFAULT_PRICE_BRACKETS,
    brackets_from_rules,
    filter_posts,
    matches_category,
    matches_price,
    matches_query,
    parse_bound,
    resolve_category,
    run,
)
from .models import FilterPostsInput, FilterPostsOutput, PriceBracket

__all__ = [
    # Component entry points
    "run",
    "filter_posts",
    # Predicates
    "matches_query",
    "matches_category",
    "matches_price",
    # Helpers
    "brackets_from_rules",
    "parse_bound",
    "resolve_category",
    # Models
    "FilterPostsInput",
    "FilterPostsOutput",
    "PriceBracket",
    # Constants
    "ALL_PRICES",
    "CUSTOM_PRICE",
    "DEFAULT_PRICE_BRACKETS",
]
