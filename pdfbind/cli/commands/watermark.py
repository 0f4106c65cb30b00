"""CLI helpers for stamping a watermark."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ConversionContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("watermark", help="Stamp a diagonal watermark on every page")
    parser.add_argument("input", help="Input PDF path")
    parser.add_argument("output", help="Output PDF path")
    parser.add_argument("--text", default="ARC", help="Watermark text (default: ARC)")
    parser.set_defaults(tool_name="watermark", build_context=_build_context)


def _build_context(args) -> ConversionContext:
    return ConversionContext(input_path=args.input, output_path=args.output, config={"text": args.text})
