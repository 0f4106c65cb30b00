"""CLI helpers for removing blank pages."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ConversionContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("strip-blanks", help="Remove pages that draw nothing")
    parser.add_argument("input", help="Input PDF path")
    parser.add_argument("output", help="Output PDF path")
    parser.set_defaults(tool_name="strip-blanks", build_context=_build_context)


def _build_context(args) -> ConversionContext:
    return ConversionContext(input_path=args.input, output_path=args.output)
