"""Splice independently numbered documents into a single page tree."""

from __future__ import annotations

import logging

from pypdf.generic import ArrayObject, DictionaryObject, FloatObject, NameObject, NumberObject

from ..core.codec import new_stream
from ..core.exceptions import GraphStructureError
from ..core.geometry import Rect
from ..core.graph import INHERITABLE_KEYS, ObjectGraph, ObjectId, clone_value, new_document, raw_get

LOGGER = logging.getLogger("pdfbind.merge")


def box_array(rect: Rect) -> ArrayObject:
    return ArrayObject(FloatObject(value) for value in rect.as_box())


def _pin_inherited_attributes(graph: ObjectGraph, page_ids: list[ObjectId]) -> None:
    """Copy attributes a leaf only inherits onto the leaf itself."""

    for page_id in page_ids:
        page = graph.get_dict(page_id)
        for key in INHERITABLE_KEYS:
            if key in page:
                continue
            value = graph.inherited(page_id, key, resolve=False)
            if value is not None:
                page[NameObject(key)] = clone_value(value)


def append_document(base: ObjectGraph, addition: ObjectGraph) -> ObjectGraph:
    """Append every page of *addition* after the pages of *base*.

    The objects of *addition* are shifted above ``base.max_id`` before they
    are moved, its leaves are re-parented to the page-tree root of *base* and
    the combined graph is renumbered densely afterwards. *addition* is
    consumed.

    Raises:
        GraphStructureError: If either document has no resolvable page-tree
            root.
    """

    base_root_id = base.pages_root_id
    base_page_count = base.page_count

    addition_pages = addition.page_ids()
    _pin_inherited_attributes(addition, addition_pages)

    mapping = addition.renumber(start=base.max_id + 1)
    addition_pages = [mapping[page_id] for page_id in addition_pages]
    for page_id in addition_pages:
        addition.get_dict(page_id)[NameObject("/Parent")] = base.ref(base_root_id)

    base.absorb(addition)

    root = base.get_dict(base_root_id)
    kids = base.resolve(raw_get(root, "/Kids"))
    if not isinstance(kids, ArrayObject):
        kids = ArrayObject()
        root[NameObject("/Kids")] = kids
    kids.extend(base.ref(page_id) for page_id in addition_pages)
    root[NameObject("/Count")] = NumberObject(base_page_count + len(addition_pages))

    base.renumber()
    LOGGER.debug(
        "Appended %d page(s) to a %d page document", len(addition_pages), base_page_count
    )
    return base


def enforce_page_size(graph: ObjectGraph, width: float, height: float) -> int:
    """Overwrite the visible boxes of every page with ``[0 0 width height]``."""

    rect = Rect(0.0, 0.0, width, height)
    page_ids = graph.page_ids()
    for page_id in page_ids:
        page = graph.get_dict(page_id)
        page[NameObject("/MediaBox")] = box_array(rect)
        page[NameObject("/CropBox")] = box_array(rect)
        if "/TrimBox" in page:
            page[NameObject("/TrimBox")] = box_array(rect)
    LOGGER.debug("Enforced %.2fx%.2f pt on %d page(s)", width, height, len(page_ids))
    return len(page_ids)


def blank_page_document(width: float, height: float) -> ObjectGraph:
    """Return a one-page document whose page draws nothing."""

    graph, pages_id = new_document("1.5")
    rect = Rect(0.0, 0.0, width, height)
    contents = graph.add_object(new_stream(b""))
    page = DictionaryObject()
    page.update(
        {
            NameObject("/Type"): NameObject("/Page"),
            NameObject("/Parent"): graph.ref(pages_id),
            NameObject("/MediaBox"): box_array(rect),
            NameObject("/CropBox"): box_array(rect),
            NameObject("/Resources"): DictionaryObject(),
            NameObject("/Contents"): contents,
        }
    )
    page_ref = graph.add_object(page)
    pages = graph.get_dict(pages_id)
    pages[NameObject("/Kids")] = ArrayObject([page_ref])
    pages[NameObject("/Count")] = NumberObject(1)
    return graph


def concatenate(documents: list[ObjectGraph]) -> ObjectGraph:
    """Fold :func:`append_document` over *documents*, first one as the base."""

    if not documents:
        raise GraphStructureError("No documents to concatenate")
    merged = documents[0]
    for document in documents[1:]:
        merged = append_document(merged, document)
    return merged


__all__ = [
    "append_document",
    "blank_page_document",
    "box_array",
    "concatenate",
    "enforce_page_size",
]
