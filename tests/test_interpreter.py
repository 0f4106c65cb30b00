from __future__ import annotations

import logging

import pytest
from pypdf.generic import ArrayObject, DictionaryObject, EncodedStreamObject, NameObject, NumberObject

from pdfbind.content import interpreter
from pdfbind.content.interpreter import MAX_FORM_DEPTH, decode_program, is_blank, page_content_streams
from pdfbind.core.codec import new_stream
from pdfbind.core.exceptions import ContentDecodeError
from pdfbind.core.graph import ObjectGraph

from conftest import EMPTY, INK, TEXT, build_document


def _single_page(program: bytes | None, resources: DictionaryObject | None = None) -> tuple[ObjectGraph, tuple[int, int]]:
    graph = build_document([program], resources=resources)
    return graph, graph.page_ids()[0]


def _xobjects(**entries) -> DictionaryObject:
    table = DictionaryObject()
    for name, reference in entries.items():
        table[NameObject(f"/{name}")] = reference
    resources = DictionaryObject()
    resources[NameObject("/XObject")] = table
    return resources


def _form(graph: ObjectGraph, program: bytes, resources: DictionaryObject | None = None):
    form = new_stream(
        program,
        {
            "/Type": NameObject("/XObject"),
            "/Subtype": NameObject("/Form"),
            "/BBox": ArrayObject(NumberObject(value) for value in (0, 0, 10, 10)),
        },
    )
    if resources is not None:
        form[NameObject("/Resources")] = resources
    return graph.add_object(form)


@pytest.mark.parametrize(
    "program",
    [
        EMPTY,
        None,
        b"q 1 0 0 1 10 10 cm 0.5 g Q",
        b"0 0 m 10 10 l n",
        b"BT /F1 12 Tf 10 10 Td ET",
        b"/P <</MCID 0>> BDC EMC",
    ],
)
def test_programs_without_marks_are_blank(program: bytes | None) -> None:
    graph, page_id = _single_page(program)
    assert is_blank(graph, page_id)


@pytest.mark.parametrize(
    "program",
    [
        INK,
        TEXT,
        b"BT /F1 12 Tf [(A) -120 (B)] TJ ET",
        b"0 0 10 10 re f",
        b"0 0 10 10 re B*",
        b"/Sh0 sh",
        b"BT /F1 12 Tf 14 TL (x) ' ET",
        b"BT /F1 12 Tf 1 2 (x) \" ET",
        b"0 0 m 10 0 l 10 10 l s",
        b"0 0 10 10 re F",
        b"0 0 10 10 re b",
        b"0 0 10 10 re b*",
        b"BI /W 1 /H 1 /CS /G /BPC 8 ID \x80 EI",
    ],
)
def test_marking_programs_are_not_blank(program: bytes) -> None:
    graph, page_id = _single_page(program)
    assert not is_blank(graph, page_id)


def test_mark_in_a_later_content_stream_counts() -> None:
    graph, page_id = _single_page(EMPTY)
    page = graph.get_dict(page_id)
    page[NameObject("/Contents")] = ArrayObject([page.raw_get("/Contents"), graph.add_object(new_stream(INK))])
    assert len(page_content_streams(graph, page_id)) == 2
    assert not is_blank(graph, page_id)


def test_image_xobject_is_a_mark() -> None:
    graph, page_id = _single_page(b"q 10 0 0 10 0 0 cm /Im0 Do Q")
    image = new_stream(
        b"\x00",
        {
            "/Type": NameObject("/XObject"),
            "/Subtype": NameObject("/Image"),
            "/Width": NumberObject(1),
            "/Height": NumberObject(1),
            "/ColorSpace": NameObject("/DeviceGray"),
            "/BitsPerComponent": NumberObject(8),
        },
    )
    graph.get_dict(page_id)[NameObject("/Resources")] = _xobjects(Im0=graph.add_object(image))
    assert not is_blank(graph, page_id)


def test_forms_are_followed_recursively() -> None:
    graph, page_id = _single_page(b"/Outer Do")
    inner = _form(graph, INK)
    outer = _form(graph, b"q /Inner Do Q", _xobjects(Inner=inner))
    graph.get_dict(page_id)[NameObject("/Resources")] = _xobjects(Outer=outer)
    assert not is_blank(graph, page_id)


def test_form_without_marks_is_blank() -> None:
    graph, page_id = _single_page(b"/Fm0 Do")
    graph.get_dict(page_id)[NameObject("/Resources")] = _xobjects(Fm0=_form(graph, b"q Q"))
    assert is_blank(graph, page_id)


def test_form_without_resources_uses_the_callers() -> None:
    graph, page_id = _single_page(b"/Fm0 Do")
    resources = _xobjects()
    resources["/XObject"][NameObject("/Fm0")] = _form(graph, b"/Fm1 Do")
    resources["/XObject"][NameObject("/Fm1")] = _form(graph, INK)
    graph.get_dict(page_id)[NameObject("/Resources")] = resources
    assert not is_blank(graph, page_id)


def test_missing_xobject_is_ignored_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    graph, page_id = _single_page(b"/Nowhere Do")
    with caplog.at_level(logging.WARNING, logger="pdfbind.content"):
        assert is_blank(graph, page_id)
    assert "Nowhere" in caplog.text


def test_self_invoking_form_terminates() -> None:
    graph, page_id = _single_page(b"/Loop Do")
    form = _form(graph, b"/Loop Do")
    form.get_object()[NameObject("/Resources")] = _xobjects(Loop=form)
    graph.get_dict(page_id)[NameObject("/Resources")] = _xobjects(Loop=form)
    assert is_blank(graph, page_id)


def test_resources_inherited_from_page_tree() -> None:
    graph, page_id = _single_page(b"/Fm0 Do")
    del graph.get_dict(page_id)["/Resources"]
    graph.get_dict(graph.pages_root_id)[NameObject("/Resources")] = _xobjects(Fm0=_form(graph, INK))
    assert not is_blank(graph, page_id)


def test_decode_program_yields_operators() -> None:
    graph, _ = _single_page(EMPTY)
    operations = decode_program(graph, b"q 1 0 0 1 5 5 cm Q")
    assert [operator for _, operator in operations] == [b"q", b"cm", b"Q"]


def _garbled_flate() -> EncodedStreamObject:
    stream = EncodedStreamObject()
    stream[NameObject("/Filter")] = NameObject("/FlateDecode")
    stream._data = b"\x00\x01garbage-that-is-not-zlib"
    return stream


def test_flate_encoded_content_is_decoded() -> None:
    graph, page_id = _single_page(EMPTY)
    page = graph.get_dict(page_id)
    page[NameObject("/Contents")] = graph.add_object(new_stream(INK).flate_encode())
    assert not is_blank(graph, page_id)


def test_corrupt_flate_content_raises() -> None:
    graph, page_id = _single_page(EMPTY)
    graph.get_dict(page_id)[NameObject("/Contents")] = graph.add_object(_garbled_flate())
    with pytest.raises(ContentDecodeError, match="Corrupt Flate data"):
        is_blank(graph, page_id)


def test_corrupt_flate_form_raises() -> None:
    graph, page_id = _single_page(b"/Fm0 Do")
    form = _garbled_flate()
    form[NameObject("/Subtype")] = NameObject("/Form")
    graph.get_dict(page_id)[NameObject("/Resources")] = _xobjects(Fm0=graph.add_object(form))
    with pytest.raises(ContentDecodeError, match="Fm0"):
        is_blank(graph, page_id)


def test_unsupported_filter_raises() -> None:
    graph, page_id = _single_page(EMPTY)
    stream = EncodedStreamObject()
    stream[NameObject("/Filter")] = NameObject("/NoSuchDecode")
    stream._data = INK
    graph.get_dict(page_id)[NameObject("/Contents")] = graph.add_object(stream)
    with pytest.raises(ContentDecodeError, match="Cannot decode content stream"):
        is_blank(graph, page_id)


def test_form_nesting_is_bounded() -> None:
    graph, page_id = _single_page(b"/Next Do")
    form = _form(graph, INK)
    for _ in range(MAX_FORM_DEPTH + 3):
        form = _form(graph, b"/Next Do", _xobjects(Next=form))
    graph.get_dict(page_id)[NameObject("/Resources")] = _xobjects(Next=form)
    with pytest.raises(ContentDecodeError, match="nested deeper"):
        is_blank(graph, page_id)


def test_shared_form_is_walked_once(monkeypatch: pytest.MonkeyPatch) -> None:
    decoded: list[str] = []
    original = interpreter.stream_data

    def counting(graph, stream, label):
        decoded.append(label)
        return original(graph, stream, label)

    monkeypatch.setattr(interpreter, "stream_data", counting)
    graph, page_id = _single_page(b"/Mid Do /Mid Do /Leaf Do")
    leaf = _form(graph, b"q Q")
    resources = _xobjects(Leaf=leaf)
    resources["/XObject"][NameObject("/Mid")] = _form(graph, b"/Leaf Do /Leaf Do")
    graph.get_dict(page_id)[NameObject("/Resources")] = resources

    assert is_blank(graph, page_id)
    forms = [label for label in decoded if label.startswith("Form XObject")]
    assert forms == ["Form XObject /Mid", "Form XObject /Leaf"]


def test_self_invoking_form_called_twice_stays_blank() -> None:
    graph, page_id = _single_page(b"/Loop Do /Loop Do")
    form = _form(graph, b"/Loop Do")
    form.get_object()[NameObject("/Resources")] = _xobjects(Loop=form)
    graph.get_dict(page_id)[NameObject("/Resources")] = _xobjects(Loop=form)
    assert is_blank(graph, page_id)
