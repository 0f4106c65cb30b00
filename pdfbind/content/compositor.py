"""Wrap existing page content in Form XObjects and draw on top of it.

Two page rewrites share the wrapping step:

* :func:`stamp_watermarks` invokes the wrapped content unchanged and draws a
  rotated, translucent text stamp over it.
* :func:`reposition_to_safe_area` invokes the wrapped content under a
  scale-and-translate transform that moves it into the book safe area.

Original marks are never re-encoded; they are replayed by reference from the
wrapping form.  The replaced content streams become unreachable and are swept
at the end of each pass.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Mapping

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
)

from ..core.codec import new_stream
from ..core.exceptions import GraphStructureError
from ..core.geometry import BookLayout, Rect
from ..core.graph import ObjectGraph, ObjectId, clone_value, raw_get
from ..core.utils import format_number
from ..merge.merger import box_array
from .interpreter import effective_resources, page_content_bytes
from .metrics import text_width
from .placement import Placement, placement_for

LOGGER = logging.getLogger("pdfbind.compositor")

WRAPPED_FORM = "/ArcPage"
WATERMARK_FONT = "/FArc"
WATERMARK_STATE = "/GSArc"
SAFE_AREA_FORM = "/SafeArea"

WATERMARK_TEXT = "ARC"
WATERMARK_OPACITY = 0.18
WATERMARK_ANGLE = 45.0


@dataclass(frozen=True)
class WatermarkResources:
    """Font and graphics state created once per run and shared by every page."""

    font: IndirectObject
    state: IndirectObject


def create_watermark_resources(graph: ObjectGraph, *, opacity: float = WATERMARK_OPACITY) -> WatermarkResources:
    font = DictionaryObject()
    font[NameObject("/Type")] = NameObject("/Font")
    font[NameObject("/Subtype")] = NameObject("/Type1")
    font[NameObject("/BaseFont")] = NameObject("/Helvetica-Bold")
    state = DictionaryObject()
    state[NameObject("/Type")] = NameObject("/ExtGState")
    state[NameObject("/BM")] = NameObject("/Normal")
    state[NameObject("/ca")] = FloatObject(opacity)
    state[NameObject("/CA")] = FloatObject(opacity)
    return WatermarkResources(font=graph.add_object(font), state=graph.add_object(state))


def _box(graph: ObjectGraph, page_id: ObjectId, key: str, *, inherit: bool = True) -> Rect | None:
    if inherit:
        value = graph.inherited(page_id, key)
    else:
        value = graph.resolve(raw_get(graph.get_dict(page_id), key))
    if value is None:
        return None
    if not isinstance(value, ArrayObject):
        raise GraphStructureError(f"Page {page_id[0]} has a malformed {key}")
    return Rect.from_box([graph.resolve(item) for item in value])


def page_box(graph: ObjectGraph, page_id: ObjectId) -> Rect:
    """Return the effective ``/MediaBox`` of a page."""

    box = _box(graph, page_id, "/MediaBox")
    if box is None:
        raise GraphStructureError(f"Page {page_id[0]} has no MediaBox")
    return box


def ink_bounding_box(graph: ObjectGraph, page_id: ObjectId) -> Rect:
    """Approximate the inked area of a page by its visible box.

    The trim box is used when the page declares one, then the crop box, then
    the media box. Marks are not measured.
    """

    return (
        _box(graph, page_id, "/TrimBox", inherit=False)
        or _box(graph, page_id, "/CropBox")
        or page_box(graph, page_id)
    )


def wrap_page_content(graph: ObjectGraph, page_id: ObjectId) -> IndirectObject | None:
    """Package the page's content program as a Form XObject.

    The form takes the page box as ``/BBox`` and a copy of the effective
    resources. Returns ``None`` for a page without content streams.
    """

    data = page_content_bytes(graph, page_id)
    if data is None:
        return None
    form = new_stream(
        data,
        {
            "/Type": NameObject("/XObject"),
            "/Subtype": NameObject("/Form"),
            "/FormType": NumberObject(1),
            "/BBox": box_array(page_box(graph, page_id)),
        },
    )
    resources = effective_resources(graph, page_id)
    if resources is not None:
        form[NameObject("/Resources")] = clone_value(resources)
    return graph.add_object(form)


def _merge_resources(
    graph: ObjectGraph,
    base: DictionaryObject | None,
    entries: Mapping[str, Mapping[str, IndirectObject]],
) -> DictionaryObject:
    resources = clone_value(base) if base is not None else DictionaryObject()
    for category, names in entries.items():
        existing = graph.resolve(raw_get(resources, category))
        table = clone_value(existing) if isinstance(existing, DictionaryObject) else DictionaryObject()
        for name, reference in names.items():
            table[NameObject(name)] = reference
        resources[NameObject(category)] = table
    return resources


def _escape_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def watermark_program(box: Rect, text: str = WATERMARK_TEXT) -> bytes:
    """Content program drawing *text* rotated about the centre of *box*."""

    center_x, center_y = box.center
    font_size = 0.25 * min(box.width, box.height)
    width = text_width(text, font_size)
    theta = math.radians(WATERMARK_ANGLE)
    cos, sin = math.cos(theta), math.sin(theta)
    dx = -width / 2.0
    dy = -(font_size * 0.35)
    underline_dy = dy - font_size * 0.18

    n = format_number
    lines = [
        "q",
        f"{WATERMARK_STATE} gs",
        "1 0 0 rg 1 0 0 RG",
        f"{n(cos)} {n(sin)} {n(-sin)} {n(cos)} {n(center_x)} {n(center_y)} cm",
        "BT",
        f"{WATERMARK_FONT} {n(font_size)} Tf",
        f"{n(dx)} {n(dy)} Td",
        f"2 Tr {n(font_size * 0.06)} w",
        f"({_escape_text(text)}) Tj",
        "ET",
        f"1 0 0 1 {n(dx)} {n(underline_dy)} cm",
        f"{n(font_size * 0.05)} w",
        f"0 0 m {n(width)} 0 l S",
        "Q",
    ]
    return ("\n".join(lines) + "\n").encode("latin-1", "replace")


def stamp_page(
    graph: ObjectGraph,
    page_id: ObjectId,
    shared: WatermarkResources,
    text: str = WATERMARK_TEXT,
) -> None:
    """Replace a page's content with its original drawing plus the stamp."""

    box = page_box(graph, page_id)
    form = wrap_page_content(graph, page_id)
    entries: dict[str, dict[str, IndirectObject]] = {
        "/Font": {WATERMARK_FONT: shared.font},
        "/ExtGState": {WATERMARK_STATE: shared.state},
    }
    contents = ArrayObject()
    if form is not None:
        entries["/XObject"] = {WRAPPED_FORM: form}
        contents.append(graph.add_object(new_stream(f"q\n{WRAPPED_FORM} Do\nQ\n".encode("ascii"))))
    contents.append(graph.add_object(new_stream(watermark_program(box, text))))

    page = graph.get_dict(page_id)
    page[NameObject("/Resources")] = _merge_resources(graph, effective_resources(graph, page_id), entries)
    page[NameObject("/Contents")] = contents[0] if len(contents) == 1 else contents


def stamp_watermarks(graph: ObjectGraph, text: str = WATERMARK_TEXT) -> int:
    """Stamp every page of *graph* with *text*; return the number of pages."""

    shared = create_watermark_resources(graph)
    page_ids = graph.page_ids()
    for page_id in page_ids:
        LOGGER.debug("Stamping page object %d", page_id[0])
        stamp_page(graph, page_id, shared, text)
    graph.prune()
    LOGGER.info("Stamped %d page(s) with '%s'", len(page_ids), text)
    return len(page_ids)


def placement_program(placement: Placement, name: str = SAFE_AREA_FORM) -> bytes:
    matrix = " ".join(format_number(value) for value in placement.matrix())
    return f"q\n{matrix} cm\n{name} Do\nQ\n".encode("ascii")


def reposition_page(graph: ObjectGraph, page_id: ObjectId, placement: Placement) -> bool:
    """Redraw a page's content under *placement*; ``False`` if it has none."""

    form = wrap_page_content(graph, page_id)
    if form is None:
        return False
    xobjects = DictionaryObject()
    xobjects[NameObject(SAFE_AREA_FORM)] = form
    resources = DictionaryObject()
    resources[NameObject("/XObject")] = xobjects

    page = graph.get_dict(page_id)
    page[NameObject("/Resources")] = resources
    page[NameObject("/Contents")] = graph.add_object(new_stream(placement_program(placement)))
    return True


def reposition_to_safe_area(graph: ObjectGraph, verso: Rect, recto: Rect) -> int:
    """Fit every page into its safe rectangle.

    Pages are counted from 1; odd pages are rectos, even pages versos.
    Returns the number of pages that were rewritten.
    """

    rewritten = 0
    for index, page_id in enumerate(graph.page_ids(), start=1):
        safe = recto if index % 2 == 1 else verso
        ink = ink_bounding_box(graph, page_id)
        placement = placement_for(ink, safe)
        LOGGER.debug(
            "Page %d: scale %.4f translate (%.2f, %.2f)", index, placement.scale, placement.tx, placement.ty
        )
        if reposition_page(graph, page_id, placement):
            rewritten += 1
    graph.prune()
    LOGGER.info("Repositioned %d page(s) into the safe area", rewritten)
    return rewritten


def reposition_for_layout(graph: ObjectGraph, layout: BookLayout) -> int:
    return reposition_to_safe_area(
        graph,
        verso=layout.safe_area_points(is_left=True),
        recto=layout.safe_area_points(is_left=False),
    )


__all__ = [
    "SAFE_AREA_FORM",
    "WATERMARK_FONT",
    "WATERMARK_STATE",
    "WRAPPED_FORM",
    "WatermarkResources",
    "create_watermark_resources",
    "ink_bounding_box",
    "page_box",
    "placement_program",
    "reposition_for_layout",
    "reposition_page",
    "reposition_to_safe_area",
    "stamp_page",
    "stamp_watermarks",
    "watermark_program",
    "wrap_page_content",
]
