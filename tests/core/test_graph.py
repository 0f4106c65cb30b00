from __future__ import annotations

import pytest
from pypdf.generic import ArrayObject, DictionaryObject, NameObject, NumberObject

from pdfbind.core.codec import new_stream
from pdfbind.core.exceptions import GraphStructureError
from pdfbind.core.graph import ObjectGraph, clone_value, new_document, object_id

from conftest import INK, build_document


def test_new_document_has_empty_page_tree() -> None:
    graph, pages_id = new_document()
    assert graph.pages_root_id == pages_id
    assert graph.page_count == 0
    assert graph.catalog["/Type"] == "/Catalog"
    assert graph.max_id == 2


def test_references_resolve_through_graph() -> None:
    graph = build_document([INK])
    page_id = graph.page_ids()[0]
    page = graph.get_dict(page_id)
    parent = page["/Parent"]
    assert isinstance(parent, DictionaryObject)
    assert parent["/Type"] == "/Pages"
    assert page["/Contents"].get_data() == INK


def test_missing_object_is_a_structure_error() -> None:
    graph = ObjectGraph()
    with pytest.raises(GraphStructureError):
        graph.get_object((7, 0))


def test_reference_loop_is_detected() -> None:
    graph = ObjectGraph()
    graph.set_object((1, 0), graph.ref((2, 0)))
    graph.set_object((2, 0), graph.ref((1, 0)))
    with pytest.raises(GraphStructureError):
        graph.resolve(graph.ref((1, 0)))


def test_page_ids_follow_nested_tree_order() -> None:
    graph = build_document([INK, INK, INK])
    root_id = graph.pages_root_id
    first, second, third = graph.page_ids()

    node = DictionaryObject()
    node[NameObject("/Type")] = NameObject("/Pages")
    node[NameObject("/Parent")] = graph.ref(root_id)
    node[NameObject("/Kids")] = ArrayObject([graph.ref(second), graph.ref(third)])
    node[NameObject("/Count")] = NumberObject(2)
    node_ref = graph.add_object(node)
    for page_id in (second, third):
        graph.get_dict(page_id)[NameObject("/Parent")] = node_ref
    graph.get_dict(root_id)[NameObject("/Kids")] = ArrayObject([node_ref, graph.ref(first)])

    assert graph.page_ids() == [second, third, first]
    assert list(graph.ancestors(second)) == [object_id(node_ref), root_id]


def test_page_tree_cycle_is_rejected() -> None:
    graph = build_document([INK])
    root_id = graph.pages_root_id
    graph.get_dict(root_id)["/Kids"].append(graph.ref(root_id))
    with pytest.raises(GraphStructureError):
        graph.page_ids()


def test_inherited_attribute_comes_from_nearest_ancestor() -> None:
    graph = build_document([INK])
    page_id = graph.page_ids()[0]
    graph.get_dict(graph.pages_root_id)[NameObject("/Rotate")] = NumberObject(90)
    assert graph.inherited(page_id, "/Rotate") == 90
    assert graph.inherited(page_id, "/CropBox") is None


def test_renumber_is_dense_and_rewrites_references() -> None:
    graph = build_document([INK, INK])
    orphan = graph.add_object(new_stream(b"unused"))
    graph.remove_object(graph.page_ids()[0])
    graph.get_dict(graph.pages_root_id)["/Kids"].pop(0)
    graph.add_object(new_stream(b"tail"))
    graph.remove_object(object_id(orphan))

    graph.renumber()

    assert graph.ids() == [(number, 0) for number in range(1, len(graph) + 1)]
    assert graph.max_id == len(graph)
    assert graph.dangling_references() == []
    page = graph.get_dict(graph.page_ids()[0])
    assert page["/Contents"].get_data() == INK


def test_absorb_rejects_identifier_collisions() -> None:
    base = build_document([INK])
    other = build_document([INK])
    with pytest.raises(GraphStructureError):
        base.absorb(other)


def test_absorb_rebinds_references_to_receiving_graph() -> None:
    base = build_document([INK])
    other = build_document([INK])
    other.renumber(start=base.max_id + 1)
    base.absorb(other)
    assert other.objects == {}
    for value in base.objects.values():
        for reference in base.iter_references(value):
            assert reference.pdf is base


def test_prune_removes_unreachable_objects() -> None:
    graph = build_document([INK])
    orphan = graph.add_object(new_stream(b"orphan"))
    removed = graph.prune()
    assert removed == [object_id(orphan)]
    assert object_id(orphan) not in graph


def test_clone_value_copies_containers_but_not_streams() -> None:
    graph = build_document([INK])
    box = graph.get_dict(graph.page_ids()[0])["/MediaBox"]
    copied = clone_value(box)
    assert copied == box
    assert copied is not box
    with pytest.raises(GraphStructureError):
        clone_value(new_stream(b""))
