"""Command line interface for pdfbind."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from ..core.exceptions import PdfBindError
from ..tools import load_builtin_plugins
from ..tools.common.interfaces import ConversionContext
from ..tools.common.pipeline import registry
from .commands import bind, safe_area, strip_blanks, watermark

COMMAND_MODULES = [bind, strip_blanks, watermark, safe_area]


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pdfbind", description="Bind front matter, SVG pages and back matter into one PDF")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    for module in COMMAND_MODULES:
        module.configure_parser(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> object:
    load_builtin_plugins()
    parser = _create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    context: ConversionContext = args.build_context(args)
    tool = registry.create(args.tool_name, context)
    try:
        result = tool.run()
    except PdfBindError as exc:
        raise SystemExit(f"pdfbind {args.command}: {exc}") from exc
    return result


def run(argv: Sequence[str] | None = None) -> int:
    """Console-script entry point; ``main`` returns tool results, not exit codes."""

    main(argv)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run())
