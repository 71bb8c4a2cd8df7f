"""
Catalog component - reviews listing filter.

Key behaviors:
- Three predicates (text, category, price) combined with AND
- Input order preserved; no sorting or pagination
- Posts without a price match every price filter
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from src.domain.categories import ALL_CATEGORIES, is_category
from src.domain.entities import Post
from src.rules.models import CatalogRules

from .models import FilterPostsInput, FilterPostsOutput, PriceBracket

ALL_PRICES = "all"
CUSTOM_PRICE = "custom"

DEFAULT_PRICE_BRACKETS: tuple[PriceBracket, ...] = (
    PriceBracket("under-50", "Under $50", max=50, max_inclusive=False),
    PriceBracket("50-100", "$50 - $100", min=50, max=100),
    PriceBracket("100-200", "$100 - $200", min=100, max=200),
    PriceBracket("200-500", "$200 - $500", min=200, max=500),
    PriceBracket("over-500", "Over $500", min=500, min_inclusive=False),
)


def brackets_from_rules(rules: CatalogRules) -> tuple[PriceBracket, ...]:
    return tuple(
        PriceBracket(
            name=b.name,
            label=b.label,
            min=b.min,
            max=b.max,
            min_inclusive=b.min_inclusive,
            max_inclusive=b.max_inclusive,
        )
        for b in rules.price_brackets
    )


def parse_bound(raw: str | None) -> float | None:
    """Custom range bound; blank or non-numeric input counts as unset."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return None if math.isnan(value) else value


def resolve_category(raw: str | None) -> str:
    """Category pre-selection from a query parameter."""
    if raw and is_category(raw):
        return raw
    return ALL_CATEGORIES


# --- Predicates ---


def matches_query(post: Post, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return needle in post.title.lower() or needle in post.excerpt.lower()


def matches_category(post: Post, category: str) -> bool:
    return category == ALL_CATEGORIES or post.category == category


def matches_price(
    post: Post,
    price_range: str,
    custom_min: str = "",
    custom_max: str = "",
    brackets: Iterable[PriceBracket] = DEFAULT_PRICE_BRACKETS,
) -> bool:
    price = post.product_price
    # Zero is treated like a missing price.
    if not price:
        return True

    if price_range == CUSTOM_PRICE:
        low = parse_bound(custom_min)
        high = parse_bound(custom_max)
        if low is None and high is None:
            return True
        low = 0.0 if low is None else low
        high = math.inf if high is None else high
        return low <= price <= high

    for bracket in brackets:
        if bracket.name == price_range:
            return bracket.contains(price)

    # "all" and unrecognised ranges
    return True


# --- Component Entry Points ---


def filter_posts(
    posts: Sequence[Post],
    query: str = "",
    category: str = ALL_CATEGORIES,
    price_range: str = ALL_PRICES,
    custom_min: str = "",
    custom_max: str = "",
    brackets: Iterable[PriceBracket] = DEFAULT_PRICE_BRACKETS,
) -> list[Post]:
    bracket_list = tuple(brackets)
    return [
        p
        for p in posts
        if matches_query(p, query)
        and matches_category(p, category)
        and matches_price(p, price_range, custom_min, custom_max, bracket_list)
    ]


def run(
    inp: FilterPostsInput,
    *,
    brackets: Iterable[PriceBracket] = DEFAULT_PRICE_BRACKETS,
) -> FilterPostsOutput:
    return FilterPostsOutput(
        posts=filter_posts(
            inp.posts,
            query=inp.query,
            category=inp.category,
            price_range=inp.price_range,
            custom_min=inp.custom_min,
            custom_max=inp.custom_max,
            brackets=brackets,
        )
    )
