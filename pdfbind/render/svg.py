"""Turn an SVG file into a single vector page.

``cairosvg`` converts the drawing into a PDF; its first page is wrapped as a
Form XObject and placed, uniformly scaled and centred, on a page of the
requested size.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from pypdf.generic import NameObject

from ..content.compositor import page_box, reposition_page
from ..content.placement import fit_with_anchor
from ..core.codec import load_document
from ..core.exceptions import DocumentLoadError, PdfBindError, RenderError
from ..core.geometry import Rect
from ..core.graph import ObjectGraph
from ..merge.merger import box_array
from ..pages.deletion import compact, delete_page

LOGGER = logging.getLogger("pdfbind.render")

SvgConverter = Callable[[bytes], bytes]


def cairosvg_converter(svg: bytes) -> bytes:
    """Convert SVG markup to PDF bytes with :func:`cairosvg.svg2pdf`."""

    import cairosvg

    return cairosvg.svg2pdf(bytestring=svg)


def render_svg_to_page(
    source: str | Path | bytes,
    width: float,
    height: float,
    *,
    converter: SvgConverter | None = None,
) -> ObjectGraph:
    """Return a one-page document of ``width × height`` points showing *source*."""

    if isinstance(source, bytes):
        svg, label = source, "<memory>"
    else:
        path = Path(source)
        try:
            svg = path.read_bytes()
        except OSError as exc:
            raise DocumentLoadError(f"Unable to read vector source: {path}") from exc
        label = str(path)

    convert = converter or cairosvg_converter
    try:
        pdf_bytes = convert(svg)
    except Exception as exc:
        raise RenderError(f"Failed to convert {label} to PDF: {exc}") from exc

    try:
        graph = load_document(pdf_bytes)
        page_ids = graph.page_ids()
    except PdfBindError as exc:
        raise RenderError(f"Converter produced an unusable PDF for {label}: {exc}") from exc
    if not page_ids:
        raise RenderError(f"Converter produced no pages for {label}")
    if len(page_ids) > 1:
        LOGGER.warning("%s rendered to %d pages; only the first is used", label, len(page_ids))
        graph = _first_page_only(graph)
        page_ids = graph.page_ids()

    page_id = page_ids[0]
    target = Rect(0.0, 0.0, width, height)
    placement = fit_with_anchor(page_box(graph, page_id), target)
    reposition_page(graph, page_id, placement)

    page = graph.get_dict(page_id)
    page[NameObject("/MediaBox")] = box_array(target)
    page[NameObject("/CropBox")] = box_array(target)
    graph.prune()
    LOGGER.debug("Rendered %s at scale %.4f", label, placement.scale)
    return graph


def _first_page_only(graph: ObjectGraph) -> ObjectGraph:
    for page_id in reversed(graph.page_ids()[1:]):
        delete_page(graph, page_id)
    compact(graph)
    return graph


__all__ = ["SvgConverter", "cairosvg_converter", "render_svg_to_page"]
