"""Decide whether a page leaves any mark by walking its content program.

The walk is read-only: it decodes content streams with pypdf's
:class:`~pypdf.generic.ContentStream` and follows ``Do`` invocations into
Form XObjects, resolving names through the effective resource table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any
import zlib

from pypdf.generic import (
    ArrayObject,
    ContentStream,
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    IndirectObject,
    NameObject,
    StreamObject,
)

from ..core.exceptions import ContentDecodeError, GraphStructureError
from ..core.graph import ObjectGraph, ObjectId, object_id, raw_get

LOGGER = logging.getLogger("pdfbind.content")

Program = list[tuple[list[Any], bytes]]

TEXT_OPERATORS = frozenset({b"Tj", b"TJ", b"'", b'"'})
PAINT_OPERATORS = frozenset({b"S", b"s", b"f", b"F", b"f*", b"B", b"B*", b"b", b"b*"})
SHADING_OPERATORS = frozenset({b"sh"})
# pypdf reports a whole BI ... ID ... EI block as one "INLINE IMAGE" operation.
INLINE_IMAGE_OPERATORS = frozenset({b"BI", b"INLINE IMAGE"})
MARK_OPERATORS = TEXT_OPERATORS | PAINT_OPERATORS | SHADING_OPERATORS | INLINE_IMAGE_OPERATORS

MARKING_XOBJECTS = frozenset({"/Image", "/PS"})
MAX_FORM_DEPTH = 32
FLATE_FILTERS = frozenset({"/FlateDecode", "/Fl"})


def page_content_streams(graph: ObjectGraph, page_id: ObjectId) -> list[StreamObject]:
    """Return the content streams of *page_id* in drawing order."""

    page = graph.get_dict(page_id)
    contents = raw_get(page, "/Contents")
    if contents is None:
        return []
    resolved = graph.resolve(contents)
    items = resolved if isinstance(resolved, ArrayObject) else [resolved]
    streams: list[StreamObject] = []
    for item in items:
        stream = graph.resolve(item)
        if not isinstance(stream, StreamObject):
            raise GraphStructureError(f"Page {page_id[0]} has a non-stream /Contents entry")
        streams.append(stream)
    return streams


def content_stream_ids(graph: ObjectGraph, page_id: ObjectId) -> list[ObjectId]:
    """Return the identifiers of the indirect content streams of *page_id*."""

    contents = raw_get(graph.get_dict(page_id), "/Contents")
    if isinstance(contents, IndirectObject):
        target = graph.resolve(contents)
        if isinstance(target, ArrayObject):
            return [object_id(item) for item in target if isinstance(item, IndirectObject)]
        return [object_id(contents)]
    if isinstance(contents, ArrayObject):
        return [object_id(item) for item in contents if isinstance(item, IndirectObject)]
    return []


def _filters(graph: ObjectGraph, stream: StreamObject) -> list[Any]:
    value = graph.resolve(raw_get(stream, "/Filter"))
    if value is None:
        return []
    if isinstance(value, ArrayObject):
        return [graph.resolve(item) for item in value]
    return [value]


def stream_data(graph: ObjectGraph, stream: StreamObject, label: str) -> bytes:
    """Decode *stream*, raising :class:`ContentDecodeError` on corrupt data.

    pypdf recovers what it can from a damaged Flate payload and only logs a
    warning, so the compressed bytes are checked with :mod:`zlib` first.
    Truncated but otherwise valid data is accepted.
    """

    filters = _filters(graph, stream)
    if isinstance(stream, EncodedStreamObject) and filters and filters[0] in FLATE_FILTERS:
        try:
            zlib.decompressobj(zlib.MAX_WBITS | 32).decompress(stream._data)
        except zlib.error as exc:
            raise ContentDecodeError(f"Corrupt Flate data in {label}: {exc}") from exc
    try:
        return stream.get_data()
    except Exception as exc:
        raise ContentDecodeError(f"Cannot decode {label}: {exc}") from exc


def page_content_bytes(graph: ObjectGraph, page_id: ObjectId) -> bytes | None:
    """Concatenate the decoded content streams of a page, ``None`` if it has none."""

    streams = page_content_streams(graph, page_id)
    if not streams:
        return None
    label = f"content stream of page {page_id[0]}"
    return b"\n".join(stream_data(graph, stream, label) for stream in streams) + b"\n"


def effective_resources(graph: ObjectGraph, page_id: ObjectId) -> DictionaryObject | None:
    """Return the nearest resource table for *page_id*."""

    resources = graph.inherited(page_id, "/Resources")
    if resources is None:
        return None
    if not isinstance(resources, DictionaryObject):
        raise GraphStructureError(f"Page {page_id[0]} has a non-dictionary /Resources entry")
    return resources


def decode_program(graph: ObjectGraph, data: bytes) -> Program:
    """Decode raw content bytes into ``(operands, operator)`` pairs."""

    stream = DecodedStreamObject()
    stream.set_data(data)
    try:
        return list(ContentStream(stream, graph).operations)
    except Exception as exc:
        raise ContentDecodeError(f"Cannot decode content program: {exc}") from exc


def _lookup_xobject(graph: ObjectGraph, resources: DictionaryObject | None, name: Any) -> tuple[ObjectId | None, StreamObject | None]:
    if resources is None or not isinstance(name, NameObject):
        return None, None
    xobjects = graph.resolve(raw_get(resources, "/XObject"))
    if not isinstance(xobjects, DictionaryObject):
        return None, None
    entry = raw_get(xobjects, name)
    if entry is None:
        return None, None
    oid = object_id(entry) if isinstance(entry, IndirectObject) else None
    xobject = graph.resolve(entry)
    if not isinstance(xobject, StreamObject):
        raise GraphStructureError(f"XObject {name} is not a stream")
    return oid, xobject


@dataclass
class _Walk:
    """State shared by one page walk.

    ``memo`` holds the verdict of each Form already walked with a given
    resource table. A ``False`` verdict is only kept when no self-invocation
    was skipped beneath it, since a skipped call may hide marks reachable
    from another entry point.
    """

    memo: dict[tuple[ObjectId, int], bool] = field(default_factory=dict)
    cycles: int = 0


def draws(
    graph: ObjectGraph,
    program: Program,
    resources: DictionaryObject | None,
    *,
    _active: frozenset[ObjectId] = frozenset(),
    _depth: int = 0,
    _walk: _Walk | None = None,
) -> bool:
    """Return ``True`` as soon as *program* produces a visible mark."""

    walk = _walk if _walk is not None else _Walk()
    for operands, operator in program:
        if operator in MARK_OPERATORS:
            return True
        if operator != b"Do" or not operands:
            continue

        name = operands[0]
        oid, xobject = _lookup_xobject(graph, resources, name)
        if xobject is None:
            LOGGER.warning("XObject %s is not present in the resource table; ignoring", name)
            continue

        subtype = raw_get(xobject, "/Subtype")
        if subtype in MARKING_XOBJECTS:
            return True
        if subtype != "/Form":
            continue
        if oid is not None and oid in _active:
            LOGGER.warning("Form XObject %s invokes itself; skipping the nested call", name)
            walk.cycles += 1
            continue
        if _depth >= MAX_FORM_DEPTH:
            raise ContentDecodeError(f"Form XObjects nested deeper than {MAX_FORM_DEPTH} levels")

        form_resources = graph.resolve(raw_get(xobject, "/Resources"))
        if not isinstance(form_resources, DictionaryObject):
            form_resources = resources
        key = (oid, id(form_resources)) if oid is not None else None
        if key is not None and key in walk.memo:
            if walk.memo[key]:
                return True
            continue

        data = stream_data(graph, xobject, f"Form XObject {name}")
        active = _active | {oid} if oid is not None else _active
        cycles = walk.cycles
        marked = draws(
            graph, decode_program(graph, data), form_resources, _active=active, _depth=_depth + 1, _walk=walk
        )
        if key is not None and (marked or walk.cycles == cycles):
            walk.memo[key] = marked
        if marked:
            return True
    return False


def is_blank(graph: ObjectGraph, page_id: ObjectId) -> bool:
    """Return ``True`` when the page at *page_id* produces no marks."""

    data = page_content_bytes(graph, page_id)
    if data is None:
        return True
    program = decode_program(graph, data)
    return not draws(graph, program, effective_resources(graph, page_id))


__all__ = [
    "MARK_OPERATORS",
    "MAX_FORM_DEPTH",
    "content_stream_ids",
    "decode_program",
    "draws",
    "effective_resources",
    "is_blank",
    "page_content_bytes",
    "page_content_streams",
    "stream_data",
]
