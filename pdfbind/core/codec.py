"""Load PDF bytes into an :class:`ObjectGraph` and serialize graphs back.

Reading relies on :class:`pypdf.PdfReader`; every object reachable from the
trailer is pulled into the arena and its references are rebound to the graph.
Writing emits a classic cross-reference table using pypdf's generic object
serialization.
"""

from __future__ import annotations

from io import BytesIO
import logging
import os
from pathlib import Path
import tempfile

from pypdf import PdfReader
from pypdf.generic import (
    DecodedStreamObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    StreamObject,
)

from .exceptions import DocumentLoadError, GraphStructureError
from .graph import ObjectGraph, ObjectId, object_id, raw_get
from .utils import resolve_path

LOGGER = logging.getLogger("pdfbind.codec")

_BINARY_MARKER = b"%\xe2\xe3\xcf\xd3\n"
_TRAILER_KEYS = ("/Root", "/Info")


def _open_reader(data: bytes) -> PdfReader:
    try:
        reader = PdfReader(BytesIO(data))
    except Exception as exc:  # pragma: no cover - dependency exceptions vary
        raise DocumentLoadError(f"Unable to parse PDF data: {exc}") from exc
    if reader.is_encrypted:
        LOGGER.debug("Attempting to decrypt encrypted PDF input")
        try:
            reader.decrypt("")
        except Exception as exc:  # pragma: no cover - decrypt errors vary
            raise DocumentLoadError("Unable to decrypt encrypted PDF") from exc
    return reader


def _header_version(reader: PdfReader) -> str:
    header = getattr(reader, "pdf_header", "%PDF-1.7")
    if isinstance(header, bytes):
        header = header.decode("latin-1")
    version = header.replace("%PDF-", "").strip()
    return version or "1.7"


def load_document(data: bytes) -> ObjectGraph:
    """Parse *data* into a fresh :class:`ObjectGraph`."""

    reader = _open_reader(data)
    graph = ObjectGraph(_header_version(reader))
    pending: list[IndirectObject] = []
    queued: set[ObjectId] = set()

    def rebind(value):
        if isinstance(value, IndirectObject):
            oid = object_id(value)
            if oid not in queued:
                queued.add(oid)
                pending.append(value)
            return graph.ref(oid)
        if isinstance(value, DictionaryObject):
            for key in list(value.keys()):
                dict.__setitem__(value, key, rebind(dict.__getitem__(value, key)))
        elif isinstance(value, list):
            for index, item in enumerate(value):
                list.__setitem__(value, index, rebind(item))
        return value

    for key in _TRAILER_KEYS:
        value = raw_get(reader.trailer, key)
        if value is not None:
            graph.trailer[NameObject(key)] = rebind(value)

    try:
        while pending:
            reference = pending.pop()
            value = reader.get_object(reference)
            if value is None:
                value = NullObject()
            graph.set_object(object_id(reference), rebind(value))
    except DocumentLoadError:
        raise
    except Exception as exc:
        raise DocumentLoadError(f"Unable to read PDF objects: {exc}") from exc

    LOGGER.debug("Loaded %d objects (PDF %s)", len(graph), graph.version)
    return graph


def load_path(path: str | Path) -> ObjectGraph:
    """Read the PDF stored at *path* into an :class:`ObjectGraph`."""

    pdf_path = resolve_path(path)
    if not pdf_path.is_file():
        raise DocumentLoadError(f"PDF file not found: {pdf_path}")
    try:
        data = pdf_path.read_bytes()
    except OSError as exc:
        LOGGER.error("Failed to read PDF %s: %s", pdf_path, exc)
        raise DocumentLoadError(f"Unable to read PDF file: {pdf_path}") from exc
    LOGGER.debug("Loading PDF %s", pdf_path)
    return load_document(data)


def _compress_streams(graph: ObjectGraph) -> None:
    for oid, value in list(graph.objects.items()):
        if isinstance(value, DecodedStreamObject) and "/Filter" not in value:
            graph.objects[oid] = value.flate_encode()


def save_document(graph: ObjectGraph, *, compress: bool = False) -> bytes:
    """Serialize *graph* to PDF bytes.

    Every reference must resolve; otherwise :class:`GraphStructureError` is
    raised and nothing is produced.
    """

    if not isinstance(graph.catalog, DictionaryObject):
        raise GraphStructureError("Document catalog is not a dictionary")
    dangling = graph.dangling_references()
    if dangling:
        first = dangling[0]
        raise GraphStructureError(
            f"Document has {len(dangling)} dangling reference(s), first {first[0]} {first[1]} R"
        )
    if compress:
        _compress_streams(graph)

    buffer = BytesIO()
    buffer.write(f"%PDF-{graph.version}\n".encode("ascii"))
    buffer.write(_BINARY_MARKER)

    offsets: dict[int, tuple[int, int]] = {}
    for number, generation in graph.ids():
        value = graph.objects[(number, generation)]
        offsets[number] = (buffer.tell(), generation)
        buffer.write(f"{number} {generation} obj\n".encode("ascii"))
        value.write_to_stream(buffer)
        buffer.write(b"\nendobj\n")

    size = max(offsets, default=0) + 1
    xref_offset = buffer.tell()
    buffer.write(f"xref\n0 {size}\n".encode("ascii"))
    buffer.write(b"0000000000 65535 f \n")
    for number in range(1, size):
        if number in offsets:
            offset, generation = offsets[number]
            buffer.write(f"{offset:010d} {generation:05d} n \n".encode("ascii"))
        else:
            buffer.write(b"0000000000 00000 f \n")

    trailer = DictionaryObject()
    trailer[NameObject("/Size")] = NumberObject(size)
    for key in _TRAILER_KEYS:
        value = raw_get(graph.trailer, key)
        if value is not None:
            trailer[NameObject(key)] = value
    buffer.write(b"trailer\n")
    trailer.write_to_stream(buffer)
    buffer.write(f"\nstartxref\n{xref_offset}\n%%EOF\n".encode("ascii"))
    return buffer.getvalue()


def write_document(graph: ObjectGraph, output: str | Path, *, compress: bool = False) -> Path:
    """Serialize *graph* and move the bytes into *output* in one step."""

    output_path = resolve_path(output)
    data = save_document(graph, compress=compress)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    handle, temp_name = tempfile.mkstemp(suffix=".pdf", dir=output_path.parent)
    try:
        with os.fdopen(handle, "wb") as stream:
            stream.write(data)
        os.replace(temp_name, output_path)
    except OSError as exc:
        LOGGER.error("Failed to write PDF to %s: %s", output_path, exc)
        Path(temp_name).unlink(missing_ok=True)
        raise
    LOGGER.info("Wrote %d bytes to %s", len(data), output_path)
    return output_path


def new_stream(data: bytes, entries: dict[str, object] | None = None) -> StreamObject:
    """Return an unfiltered stream holding *data*."""

    stream = DecodedStreamObject()
    stream.set_data(data)
    for key, value in (entries or {}).items():
        stream[NameObject(key)] = value
    return stream


__all__ = ["load_document", "load_path", "new_stream", "save_document", "write_document"]
