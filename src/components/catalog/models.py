"""
Catalog component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.entities import Post


@dataclass(frozen=True)
class PriceBracket:
    """Named price range. A None bound is open."""

    name: str
    label: str
    min: float | None = None
    max: float | None = None
    min_inclusive: bool = True
    max_inclusive: bool = True

    def contains(self, price: float) -> bool:
        if self.min is not None:
            if price < self.min or (price == self.min and not self.min_inclusive):
                return False
        if self.max is not None:
            if price > self.max or (price == self.max and not self.max_inclusive):
                return False
        return True


@dataclass(frozen=True)
class FilterPostsInput:
    """Listing filter state as submitted by the reviews page."""

    posts: list[Post]
    query: str = ""
    category: str = "all"
    price_range: str = "all"
    custom_min: str = ""
    custom_max: str = ""


@dataclass(frozen=True)
class FilterPostsOutput:
    posts: list[Post] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.posts)

    @property
    def count_label(self) -> str:
        return f"{self.count} result" if self.count == 1 else f"{self.count} results"
