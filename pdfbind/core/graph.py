"""In-memory PDF object graph used as the working memory of every pdfbind tool.

The graph is an arena of pypdf generic objects keyed by ``(number,
generation)``.  References stored inside values are
:class:`pypdf.generic.IndirectObject` instances whose ``pdf`` attribute is the
owning :class:`ObjectGraph`, so pypdf containers resolve them through
:meth:`ObjectGraph.get_object` exactly as they would against a reader.

Structural bookkeeping (renumbering, absorbing another graph, reachability
sweeps) always rewrites references in place; no operation leaves a reference
bound to a foreign graph.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Tuple

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NumberObject,
    PdfObject,
    StreamObject,
)

from .exceptions import GraphStructureError

LOGGER = logging.getLogger("pdfbind.graph")

ObjectId = Tuple[int, int]

INHERITABLE_KEYS = ("/Resources", "/MediaBox", "/CropBox", "/Rotate")


def raw_get(container: DictionaryObject, key: str, default: Any = None) -> Any:
    """Return the unresolved value stored under *key* in *container*."""

    try:
        return container.raw_get(key)
    except KeyError:
        return default


def object_id(reference: IndirectObject) -> ObjectId:
    return reference.idnum, reference.generation


def is_page_node(node: DictionaryObject) -> bool:
    """Return ``True`` for internal page-tree nodes."""

    node_type = raw_get(node, "/Type")
    return node_type == "/Pages" or "/Kids" in node


class ObjectGraph:
    """Mutable arena of PDF objects plus the trailer that anchors them."""

    def __init__(self, version: str = "1.7") -> None:
        self.version = version
        self.objects: dict[ObjectId, PdfObject] = {}
        self.trailer = DictionaryObject()
        self.max_id = 0

    # -- Arena access ----------------------------------------------------

    def __contains__(self, item: object) -> bool:
        if isinstance(item, IndirectObject):
            item = object_id(item)
        return item in self.objects

    def __len__(self) -> int:
        return len(self.objects)

    def ids(self) -> list[ObjectId]:
        return sorted(self.objects)

    def new_object_id(self) -> ObjectId:
        self.max_id += 1
        return self.max_id, 0

    def ref(self, oid: ObjectId) -> IndirectObject:
        return IndirectObject(oid[0], oid[1], self)

    def add_object(self, value: PdfObject) -> IndirectObject:
        oid = self.new_object_id()
        self.objects[oid] = value
        return self.ref(oid)

    def set_object(self, oid: ObjectId, value: PdfObject) -> None:
        self.objects[oid] = value
        self.max_id = max(self.max_id, oid[0])

    def get_object(self, reference: IndirectObject | ObjectId) -> PdfObject:
        """Dereference *reference*; a missing object is a structural error."""

        oid = object_id(reference) if isinstance(reference, IndirectObject) else reference
        try:
            return self.objects[oid]
        except KeyError as exc:
            raise GraphStructureError(f"Unresolvable reference {oid[0]} {oid[1]} R") from exc

    def resolve(self, value: Any) -> Any:
        """Follow *value* through any chain of references."""

        seen: set[ObjectId] = set()
        while isinstance(value, IndirectObject):
            oid = object_id(value)
            if oid in seen:
                raise GraphStructureError(f"Reference loop at {oid[0]} {oid[1]} R")
            seen.add(oid)
            value = self.get_object(oid)
        return value

    def remove_object(self, oid: ObjectId) -> PdfObject | None:
        return self.objects.pop(oid, None)

    def get_dict(self, oid: ObjectId) -> DictionaryObject:
        value = self.get_object(oid)
        if not isinstance(value, DictionaryObject):
            raise GraphStructureError(f"Object {oid[0]} {oid[1]} is not a dictionary")
        return value

    # -- Page tree -------------------------------------------------------

    @property
    def catalog(self) -> DictionaryObject:
        root = raw_get(self.trailer, "/Root")
        if not isinstance(root, IndirectObject):
            raise GraphStructureError("Document has no /Root catalog reference")
        catalog = self.resolve(root)
        if not isinstance(catalog, DictionaryObject):
            raise GraphStructureError("Document /Root is not a dictionary")
        return catalog

    @property
    def pages_root_id(self) -> ObjectId:
        pages = raw_get(self.catalog, "/Pages")
        if not isinstance(pages, IndirectObject):
            raise GraphStructureError("Catalog has no /Pages reference")
        oid = object_id(pages)
        if oid not in self.objects:
            raise GraphStructureError(f"Page tree root {oid[0]} {oid[1]} R is missing")
        return oid

    def page_ids(self) -> list[ObjectId]:
        """Return leaf page identifiers in document order."""

        pages: list[ObjectId] = []
        visited: set[ObjectId] = set()
        stack: list[ObjectId] = [self.pages_root_id]
        while stack:
            oid = stack.pop()
            if oid in visited:
                raise GraphStructureError(f"Page tree cycle through {oid[0]} {oid[1]} R")
            visited.add(oid)
            node = self.get_dict(oid)
            if is_page_node(node):
                kids = self.resolve(raw_get(node, "/Kids", ArrayObject()))
                children = [object_id(kid) for kid in kids if isinstance(kid, IndirectObject)]
                stack.extend(reversed(children))
            else:
                pages.append(oid)
        return pages

    @property
    def page_count(self) -> int:
        return len(self.page_ids())

    def parent_id(self, oid: ObjectId) -> ObjectId | None:
        parent = raw_get(self.get_dict(oid), "/Parent")
        if isinstance(parent, IndirectObject):
            return object_id(parent)
        return None

    def ancestors(self, oid: ObjectId) -> Iterator[ObjectId]:
        """Yield the parent chain of *oid*, nearest first."""

        seen = {oid}
        current = self.parent_id(oid)
        while current is not None:
            if current in seen:
                raise GraphStructureError(f"Parent cycle through {current[0]} {current[1]} R")
            seen.add(current)
            yield current
            current = self.parent_id(current)

    def inherited(self, page_id: ObjectId, key: str, *, resolve: bool = True) -> Any:
        """Return the value of *key* on the page or its nearest ancestor."""

        page = self.get_dict(page_id)
        if key in page:
            value = raw_get(page, key)
        else:
            value = None
            for ancestor in self.ancestors(page_id):
                node = self.get_dict(ancestor)
                if key in node:
                    value = raw_get(node, key)
                    break
        return self.resolve(value) if resolve else value

    # -- Reference rewriting ---------------------------------------------

    def iter_references(self, value: Any) -> Iterator[IndirectObject]:
        """Yield every reference contained (directly or nested) in *value*."""

        stack = [value]
        while stack:
            current = stack.pop()
            if isinstance(current, IndirectObject):
                yield current
            elif isinstance(current, DictionaryObject):
                stack.extend(dict.values(current))
            elif isinstance(current, ArrayObject):
                stack.extend(current)

    def _rebind(self, value: Any, mapping: dict[ObjectId, ObjectId] | None) -> Any:
        if isinstance(value, IndirectObject):
            oid = object_id(value)
            if mapping is not None:
                oid = mapping.get(oid, oid)
            return IndirectObject(oid[0], oid[1], self)
        if isinstance(value, DictionaryObject):
            for key in list(value.keys()):
                dict.__setitem__(value, key, self._rebind(dict.__getitem__(value, key), mapping))
        elif isinstance(value, ArrayObject):
            for index, item in enumerate(value):
                list.__setitem__(value, index, self._rebind(item, mapping))
        return value

    def renumber(self, start: int = 1) -> dict[ObjectId, ObjectId]:
        """Reassign identifiers densely from *start*; return the old→new map."""

        mapping: dict[ObjectId, ObjectId] = {}
        for offset, oid in enumerate(sorted(self.objects)):
            mapping[oid] = (start + offset, 0)

        renumbered: dict[ObjectId, PdfObject] = {}
        for oid, value in self.objects.items():
            renumbered[mapping[oid]] = self._rebind(value, mapping)
        self.objects = renumbered
        self._rebind(self.trailer, mapping)
        self.max_id = start + len(mapping) - 1 if mapping else start - 1
        LOGGER.debug("Renumbered %d objects starting at %d", len(mapping), start)
        return mapping

    def absorb(self, other: "ObjectGraph") -> None:
        """Move every object of *other* into this graph."""

        collisions = set(self.objects) & set(other.objects)
        if collisions:
            first = min(collisions)
            raise GraphStructureError(
                f"Cannot absorb graph: {len(collisions)} identifier collision(s), first {first[0]} {first[1]} R"
            )
        for oid, value in other.objects.items():
            self.set_object(oid, self._rebind(value, None))
        other.objects = {}

    # -- Reachability ----------------------------------------------------

    def reachable_ids(self) -> set[ObjectId]:
        marked: set[ObjectId] = set()
        stack = list(self.iter_references(self.trailer))
        while stack:
            oid = object_id(stack.pop())
            if oid in marked or oid not in self.objects:
                continue
            marked.add(oid)
            stack.extend(self.iter_references(self.objects[oid]))
        return marked

    def prune(self) -> list[ObjectId]:
        """Remove objects not reachable from the trailer; return their ids."""

        reachable = self.reachable_ids()
        orphans = sorted(oid for oid in self.objects if oid not in reachable)
        for oid in orphans:
            del self.objects[oid]
        if orphans:
            LOGGER.debug("Pruned %d unreachable objects", len(orphans))
        return orphans

    def dangling_references(self) -> list[ObjectId]:
        dangling: set[ObjectId] = set()
        for value in [self.trailer, *self.objects.values()]:
            for reference in self.iter_references(value):
                oid = object_id(reference)
                if oid not in self.objects:
                    dangling.add(oid)
        return sorted(dangling)


def clone_value(value: Any) -> Any:
    """Copy direct containers so they can be stored in a second place.

    References are kept as-is; they point at shared objects.
    """

    if isinstance(value, StreamObject):
        raise GraphStructureError("Streams must be referenced indirectly")
    if isinstance(value, DictionaryObject):
        copied = DictionaryObject()
        for key, item in dict.items(value):
            dict.__setitem__(copied, key, clone_value(item))
        return copied
    if isinstance(value, ArrayObject):
        return ArrayObject(clone_value(item) for item in value)
    return value


def new_document(version: str = "1.7") -> tuple[ObjectGraph, ObjectId]:
    """Create a graph holding a catalog and an empty page-tree root."""

    graph = ObjectGraph(version)
    pages_ref = graph.add_object(
        DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Pages"),
                NameObject("/Kids"): ArrayObject(),
                NameObject("/Count"): NumberObject(0),
            }
        )
    )
    catalog_ref = graph.add_object(
        DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Catalog"),
                NameObject("/Pages"): pages_ref,
            }
        )
    )
    graph.trailer[NameObject("/Root")] = catalog_ref
    return graph, object_id(pages_ref)


__all__ = [
    "INHERITABLE_KEYS",
    "ObjectGraph",
    "ObjectId",
    "clone_value",
    "is_page_node",
    "new_document",
    "object_id",
    "raw_get",
]
