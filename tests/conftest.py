from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from pypdf import PdfWriter
from pypdf.generic import ArrayObject, DictionaryObject, FloatObject, NameObject, NumberObject

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfbind.core.codec import new_stream, save_document, write_document  # noqa: E402
from pdfbind.core.graph import ObjectGraph, new_document  # noqa: E402

INK = b"0 0 m 100 100 l S"
TEXT = b"BT /F1 12 Tf 10 10 Td (Hello) Tj ET"
EMPTY = b""

Programs = Sequence[bytes | None]


def build_document(
    programs: Programs,
    size: tuple[float, float] = (200.0, 200.0),
    *,
    resources: DictionaryObject | None = None,
) -> ObjectGraph:
    """Return a flat document with one page per entry of *programs*.

    ``None`` produces a page without ``/Contents``.
    """

    graph, pages_id = new_document()
    kids = ArrayObject()
    for program in programs:
        page = DictionaryObject()
        page[NameObject("/Type")] = NameObject("/Page")
        page[NameObject("/Parent")] = graph.ref(pages_id)
        page[NameObject("/MediaBox")] = ArrayObject(
            [NumberObject(0), NumberObject(0), FloatObject(size[0]), FloatObject(size[1])]
        )
        page[NameObject("/Resources")] = resources if resources is not None else DictionaryObject()
        if program is not None:
            page[NameObject("/Contents")] = graph.add_object(new_stream(program))
        kids.append(graph.add_object(page))
    pages = graph.get_dict(pages_id)
    pages[NameObject("/Kids")] = kids
    pages[NameObject("/Count")] = NumberObject(len(kids))
    return graph


@pytest.fixture()
def document_factory() -> Callable[..., ObjectGraph]:
    return build_document


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, programs: Programs, size: tuple[float, float] = (200.0, 200.0)) -> Path:
        return write_document(build_document(programs, size), tmp_path / filename)

    return _create


@pytest.fixture()
def fake_converter() -> Callable[[bytes], bytes]:
    """Stand-in for cairosvg: every SVG becomes one 100x50 pt page with a stroke."""

    def _convert(svg: bytes) -> bytes:
        return save_document(build_document([INK], (100.0, 50.0)))

    return _convert


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    writer = PdfWriter()
    for _ in range(5):
        writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "pdfbind-tests", "/Title": "Sample"})
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def materials(tmp_path: Path, pdf_factory: Callable[..., Path]) -> Path:
    root = tmp_path / "materials"
    (root / "svg").mkdir(parents=True)
    pdf_factory("materials/front_matter.pdf", [INK, TEXT, INK], (300.0, 400.0))
    pdf_factory("materials/back_matter.pdf", [TEXT, INK])
    for name in ("b.svg", "a.svg"):
        (root / "svg" / name).write_text('<svg xmlns="http://www.w3.org/2000/svg"/>', encoding="utf-8")
    return root
