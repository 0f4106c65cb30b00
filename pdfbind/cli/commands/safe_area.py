"""CLI helpers for fitting pages into the book safe area."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ConversionContext
from ._options import add_geometry_arguments, geometry_config


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("fit-safe-area", help="Move page content inside the gutter and margins")
    parser.add_argument("input", help="Input PDF path")
    parser.add_argument("output", help="Output PDF path")
    add_geometry_arguments(parser)
    parser.set_defaults(tool_name="fit-safe-area", build_context=_build_context)


def _build_context(args) -> ConversionContext:
    return ConversionContext(input_path=args.input, output_path=args.output, config=geometry_config(args))
