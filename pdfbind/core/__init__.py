"""Object graph, codec and geometry shared by every pdfbind component."""

from __future__ import annotations

from .codec import load_document, load_path, new_stream, save_document, write_document
from .exceptions import (
    ConfigurationError,
    ContentDecodeError,
    DocumentLoadError,
    GraphStructureError,
    LayoutError,
    PdfBindError,
    RenderError,
)
from .geometry import BindingConstants, BookLayout, BookParams, Rect, to_points
from .graph import ObjectGraph, ObjectId, new_document

__all__ = [
    "BindingConstants",
    "BookLayout",
    "BookParams",
    "ConfigurationError",
    "ContentDecodeError",
    "DocumentLoadError",
    "GraphStructureError",
    "LayoutError",
    "ObjectGraph",
    "ObjectId",
    "PdfBindError",
    "Rect",
    "RenderError",
    "load_document",
    "load_path",
    "new_document",
    "new_stream",
    "save_document",
    "to_points",
    "write_document",
]
