"""
Pages component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from src.domain.entities import PageContent

PageFormat = Literal["json", "html"]


class PageError(Exception):
    """Page content operation rejected."""


class UnknownPageError(PageError):
    def __init__(self, page_id: str) -> None:
        super().__init__(f"Unknown page: {page_id}")
        self.page_id = page_id


class PageSaveError(PageError):
    """Page content could not be written."""


@dataclass(frozen=True)
class EditablePage:
    id: str
    title: str
    format: PageFormat
    default_content: str
    public_path: str


@dataclass(frozen=True)
class LoadPagesInput:
    """Admin load; initialises the singleton when it does not exist."""

    initialise: bool = True


@dataclass(frozen=True)
class LoadPagesOutput:
    pages: dict[str, PageContent] = field(default_factory=dict)
    initialised: bool = False


@dataclass(frozen=True)
class SavePageInput:
    page_id: str
    content: str


@dataclass(frozen=True)
class SavePageOutput:
    page: PageContent | None = None
    errors: list[str] = field(default_factory=list)
    success: bool = True
