"""
Pages component - editable static page content.
"""

from ._defaults import EDITABLE_PAGES, PUBLIC_FALLBACKS
from .component import (
    PAGE_CONTENTS_PATH,
    default_content,
    default_pages,
    get_editable_page,
    get_page_content,
    json_page_fields,
    load_page_contents,
    run_load,
    run_save,
    save_page_content,
)
from .models import (
    EditablePage,
    LoadPagesInput,
    LoadPagesOutput,
    PageError,
    PageSaveError,
    SavePageInput,
    SavePageOutput,
    UnknownPageError,
)

__all__ = [
    # Component entry points
    "run_load",
    "run_save",
    # Functions
    "default_content",
    "default_pages",
    "get_editable_page",
    "get_page_content",
    "json_page_fields",
    "load_page_contents",
    "save_page_content",
    # Models
    "EditablePage",
    "LoadPagesInput",
    "LoadPagesOutput",
    "SavePageInput",
    "SavePageOutput",
    # Errors
    "PageError",
    "PageSaveError",
    "UnknownPageError",
    # Constants
    "EDITABLE_PAGES",
    "PAGE_CONTENTS_PATH",
    "PUBLIC_FALLBACKS",
]
