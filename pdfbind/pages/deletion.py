"""Remove pages while keeping the page tree and the object arena consistent."""

from __future__ import annotations

import logging

from pypdf.generic import ArrayObject, IndirectObject, NameObject, NumberObject

from ..content.interpreter import content_stream_ids, is_blank
from ..core.exceptions import GraphStructureError
from ..core.graph import ObjectGraph, ObjectId, object_id, raw_get

LOGGER = logging.getLogger("pdfbind.pages")


def delete_page(graph: ObjectGraph, page_id: ObjectId) -> None:
    """Detach *page_id* from the page tree and drop it with its content streams.

    Every ancestor's ``/Count`` is decremented, not only the parent's.

    Raises:
        GraphStructureError: If the page has no ``/Parent``.
    """

    parent_id = graph.parent_id(page_id)
    if parent_id is None:
        raise GraphStructureError(f"Page {page_id[0]} {page_id[1]} R has no /Parent")

    parent = graph.get_dict(parent_id)
    kids = graph.resolve(raw_get(parent, "/Kids"))
    if isinstance(kids, ArrayObject):
        kids[:] = [
            kid for kid in kids if not (isinstance(kid, IndirectObject) and object_id(kid) == page_id)
        ]

    for ancestor_id in [parent_id, *graph.ancestors(parent_id)]:
        ancestor = graph.get_dict(ancestor_id)
        count = graph.resolve(raw_get(ancestor, "/Count"))
        if isinstance(count, int):
            ancestor[NameObject("/Count")] = NumberObject(int(count) - 1)

    stream_ids = content_stream_ids(graph, page_id)
    graph.remove_object(page_id)
    shared = _referenced_ids(graph) & set(stream_ids)
    for stream_id in stream_ids:
        if stream_id in shared:
            LOGGER.debug("Keeping content stream %d; another object still uses it", stream_id[0])
            continue
        graph.remove_object(stream_id)
    LOGGER.debug("Deleted page %d with %d content stream(s)", page_id[0], len(stream_ids) - len(shared))


def _referenced_ids(graph: ObjectGraph) -> set[ObjectId]:
    referenced: set[ObjectId] = set()
    for value in [graph.trailer, *graph.objects.values()]:
        referenced.update(object_id(reference) for reference in graph.iter_references(value))
    return referenced


def compact(graph: ObjectGraph) -> int:
    """Renumber densely, then drop unreachable objects; return how many."""

    graph.renumber()
    return len(graph.prune())


def remove_blank_pages(graph: ObjectGraph) -> list[int]:
    """Delete every page that draws nothing.

    All pages are classified before the first deletion; deletions then run
    from the last page backwards. Returns the 1-based positions of the
    removed pages.
    """

    page_ids = graph.page_ids()
    blank = [index for index, page_id in enumerate(page_ids, start=1) if is_blank(graph, page_id)]
    for index in reversed(blank):
        delete_page(graph, page_ids[index - 1])
    reclaimed = compact(graph)
    LOGGER.info(
        "Removed %d blank page(s) of %d; reclaimed %d object(s)", len(blank), len(page_ids), reclaimed
    )
    return blank


__all__ = ["compact", "delete_page", "remove_blank_pages"]
