"""Assemble print-ready books from PDF front/back matter and SVG pages."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .core import (
    BookLayout,
    BookParams,
    ConfigurationError,
    ContentDecodeError,
    DocumentLoadError,
    GraphStructureError,
    LayoutError,
    ObjectGraph,
    PdfBindError,
    RenderError,
    load_document,
    load_path,
    save_document,
    write_document,
)
from .content import is_blank, reposition_to_safe_area, stamp_watermarks
from .merge import append_document, concatenate, enforce_page_size
from .options import BindOptions
from .pages import compact, delete_page, remove_blank_pages
from .pipeline import BindResult, assemble, bind_book, bind_materials, discover_materials
from .render import render_svg_to_page
from .tools import load_builtin_plugins
from .tools.common.interfaces import ConversionContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry

load_builtin_plugins()


def strip_blank_pages(input_path: str | Path, output_path: str | Path) -> list[int]:
    """Remove blank pages from *input_path*; return their 1-based positions."""

    context = ConversionContext(input_path=input_path, output_path=output_path)
    registry.create("strip-blanks", context).run()
    return context.resources["removed_pages"]


def watermark_document(input_path: str | Path, output_path: str | Path, text: str = "ARC") -> int:
    context = ConversionContext(input_path=input_path, output_path=output_path, config={"text": text})
    registry.create("watermark", context).run()
    return context.resources["stamped_pages"]


def fit_safe_area(
    input_path: str | Path,
    output_path: str | Path,
    options: BindOptions | None = None,
) -> int:
    """Move every page of *input_path* inside the book safe area."""

    context = ConversionContext(
        input_path=input_path,
        output_path=output_path,
        config={"options": options or BindOptions.book()},
    )
    registry.create("fit-safe-area", context).run()
    return context.resources["repositioned_pages"]


def bind(
    output_path: str | Path,
    *,
    materials: str | Path | None = None,
    front: str | Path | None = None,
    back: str | Path | None = None,
    vector_sources: Iterable[str | Path] | None = None,
    options: BindOptions | None = None,
) -> BindResult:
    """Bind a book through the plugin registry."""

    config = {
        "materials": materials,
        "front": front,
        "back": back,
        "vector_sources": list(vector_sources) if vector_sources is not None else None,
        "options": options,
    }
    context = ConversionContext(output_path=output_path, config=config)
    return registry.create("bind", context).run()


__all__ = [
    "BindOptions",
    "BindResult",
    "BookLayout",
    "BookParams",
    "ConfigurationError",
    "ContentDecodeError",
    "ConversionContext",
    "DocumentLoadError",
    "GraphStructureError",
    "LayoutError",
    "ObjectGraph",
    "PdfBindError",
    "RenderError",
    "ToolRegistry",
    "append_document",
    "assemble",
    "bind",
    "bind_book",
    "bind_materials",
    "compact",
    "concatenate",
    "delete_page",
    "discover_materials",
    "enforce_page_size",
    "fit_safe_area",
    "is_blank",
    "load_builtin_plugins",
    "load_document",
    "load_path",
    "register_tool",
    "registry",
    "remove_blank_pages",
    "render_svg_to_page",
    "reposition_to_safe_area",
    "save_document",
    "stamp_watermarks",
    "strip_blank_pages",
    "watermark_document",
    "write_document",
]
