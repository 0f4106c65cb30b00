"""Page-tree merging for :mod:`pdfbind`."""

from __future__ import annotations

from .merger import append_document, blank_page_document, box_array, concatenate, enforce_page_size

__all__ = [
    "append_document",
    "blank_page_document",
    "box_array",
    "concatenate",
    "enforce_page_size",
]
