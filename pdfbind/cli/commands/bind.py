"""CLI helpers for binding a book."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ConversionContext
from ._options import add_geometry_arguments, geometry_config


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("bind", help="Bind front matter, SVG pages and back matter")
    parser.add_argument("output", help="Output PDF path")
    parser.add_argument(
        "--materials",
        default="./materials",
        help="Directory holding front_matter.pdf, back_matter.pdf and svg/*.svg",
    )
    parser.add_argument("--front", help="Front matter PDF (overrides --materials)")
    parser.add_argument("--back", help="Back matter PDF (overrides --materials)")
    parser.add_argument(
        "--svg",
        dest="vector_sources",
        action="append",
        help="SVG page, may be repeated (overrides --materials)",
    )
    parser.add_argument("--preset", choices=["book", "arc"], default="book", help="Start from a preset")
    add_geometry_arguments(parser)
    parser.add_argument(
        "--make-even",
        action="store_true",
        default=None,
        help="Pad odd front matter with a blank page",
    )
    parser.add_argument(
        "--arc",
        action="store_true",
        default=None,
        help="ARC copy: no spacer pages, drop blank pages, stamp every page",
    )
    parser.add_argument(
        "--fit-safe-area",
        action="store_true",
        default=None,
        help="Scale page content into the book safe area",
    )
    parser.set_defaults(tool_name="bind", build_context=_build_context)


def _build_context(args) -> ConversionContext:
    config = {
        "materials": args.materials,
        "front": args.front,
        "back": args.back,
        "vector_sources": args.vector_sources,
        "preset": args.preset,
        "make_even": args.make_even,
        "arc": args.arc,
        "fit_safe_area": args.fit_safe_area,
    }
    config.update(geometry_config(args))
    if args.front and args.back:
        config["materials"] = None
    return ConversionContext(output_path=args.output, config=config)
