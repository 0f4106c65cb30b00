"""End-to-end book assembly: front matter, vector pages, back matter."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Callable, Iterable, Union

from .content.compositor import reposition_for_layout, stamp_watermarks
from .core.codec import load_path, write_document
from .core.exceptions import DocumentLoadError
from .core.graph import ObjectGraph
from .core.utils import resolve_path
from .merge.merger import append_document, blank_page_document, enforce_page_size
from .options import BindOptions
from .pages.deletion import remove_blank_pages
from .render.svg import render_svg_to_page

LOGGER = logging.getLogger("pdfbind.pipeline")

DocumentSource = Union[str, Path, ObjectGraph]
Renderer = Callable[[Path, float, float], ObjectGraph]

FRONT_MATTER_NAME = "front_matter.pdf"
BACK_MATTER_NAME = "back_matter.pdf"
VECTOR_DIRECTORY = "svg"


@dataclass(slots=True)
class Materials:
    front: Path
    back: Path
    vector_sources: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class BindResult:
    """Summary of a binding run."""

    output: Path | None
    page_count: int
    removed_pages: list[int] = field(default_factory=list)
    stamped_pages: int = 0
    repositioned_pages: int = 0


def discover_materials(directory: str | Path) -> Materials:
    """Locate front matter, back matter and sorted SVG pages under *directory*."""

    root = resolve_path(directory)
    front = root / FRONT_MATTER_NAME
    back = root / BACK_MATTER_NAME
    for required in (front, back):
        if not required.is_file():
            raise DocumentLoadError(f"Missing input document: {required}")
    vector_sources = sorted((root / VECTOR_DIRECTORY).glob("*.svg"))
    LOGGER.debug("Found %d vector source(s) in %s", len(vector_sources), root / VECTOR_DIRECTORY)
    return Materials(front=front, back=back, vector_sources=vector_sources)


def _as_graph(source: DocumentSource) -> ObjectGraph:
    if isinstance(source, ObjectGraph):
        return source
    return load_path(source)


def post_process_arc(graph: ObjectGraph) -> tuple[list[int], int]:
    """Drop blank pages, then stamp every remaining page."""

    removed = remove_blank_pages(graph)
    stamped = stamp_watermarks(graph)
    return removed, stamped


def assemble(
    front: DocumentSource,
    vector_sources: Iterable[str | Path],
    back: DocumentSource,
    options: BindOptions,
    *,
    renderer: Renderer = render_svg_to_page,
) -> ObjectGraph:
    """Merge the inputs into one uniformly sized page tree.

    Outside ARC mode a blank spacer follows every vector page.
    """

    width, height = options.page_size_points()

    merged = _as_graph(front)
    enforce_page_size(merged, width, height)
    if options.make_even and merged.page_count % 2 == 1:
        LOGGER.debug("Front matter has an odd page count; adding a blank page")
        merged = append_document(merged, blank_page_document(width, height))

    insert_spacers = not options.arc
    for source in vector_sources:
        LOGGER.debug("Rendering vector page %s", source)
        merged = append_document(merged, renderer(Path(source), width, height))
        if insert_spacers:
            merged = append_document(merged, blank_page_document(width, height))

    back_graph = _as_graph(back)
    enforce_page_size(back_graph, width, height)
    merged = append_document(merged, back_graph)

    enforce_page_size(merged, width, height)
    return merged


def bind_book(
    front: DocumentSource,
    vector_sources: Iterable[str | Path],
    back: DocumentSource,
    output: str | Path,
    options: BindOptions | None = None,
    *,
    renderer: Renderer = render_svg_to_page,
) -> BindResult:
    """Assemble, post-process and write a book; return a :class:`BindResult`.

    Nothing is written unless every step succeeds.
    """

    options = (options or BindOptions.book()).validate()
    merged = assemble(front, vector_sources, back, options, renderer=renderer)
    result = BindResult(output=None, page_count=0)

    if options.arc:
        result.removed_pages, result.stamped_pages = post_process_arc(merged)

    if options.fit_safe_area:
        layout = options.book_layout(merged.page_count)
        result.repositioned_pages = reposition_for_layout(merged, layout)

    merged.prune()
    result.page_count = merged.page_count
    result.output = write_document(merged, output, compress=options.compress)
    LOGGER.info("Bound %d page(s) into %s", result.page_count, result.output)
    return result


def bind_materials(
    directory: str | Path,
    output: str | Path,
    options: BindOptions | None = None,
    *,
    renderer: Renderer = render_svg_to_page,
) -> BindResult:
    materials = discover_materials(directory)
    return bind_book(
        materials.front,
        materials.vector_sources,
        materials.back,
        output,
        options,
        renderer=renderer,
    )


__all__ = [
    "BindResult",
    "Materials",
    "assemble",
    "bind_book",
    "bind_materials",
    "discover_materials",
    "post_process_arc",
]
