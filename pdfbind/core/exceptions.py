"""Custom exceptions shared across :mod:`pdfbind`."""

from __future__ import annotations


class PdfBindError(Exception):
    """Base class for every error raised by :mod:`pdfbind`."""


class GraphStructureError(PdfBindError):
    """Raised when the document object graph violates a structural invariant."""


class DocumentLoadError(PdfBindError):
    """Raised when an input document cannot be read."""


class ContentDecodeError(PdfBindError):
    """Raised when a content stream cannot be decoded into operators."""


class RenderError(PdfBindError):
    """Raised when a vector source cannot be converted into a page."""


class LayoutError(PdfBindError):
    """Raised when page geometry is degenerate."""


class ConfigurationError(PdfBindError):
    """Raised when binding options are invalid."""


__all__ = [
    "PdfBindError",
    "GraphStructureError",
    "DocumentLoadError",
    "ContentDecodeError",
    "RenderError",
    "LayoutError",
    "ConfigurationError",
]
