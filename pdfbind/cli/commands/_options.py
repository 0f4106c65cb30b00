"""Arguments shared by commands that need page geometry."""

from __future__ import annotations

from argparse import ArgumentParser
from typing import Any


def add_geometry_arguments(parser: ArgumentParser) -> None:
    parser.add_argument("--width", type=float, help="Trim width (default: 8.5)")
    parser.add_argument("--height", type=float, help="Trim height (default: 8.5)")
    parser.add_argument("--unit", choices=["in", "cm"], help="Unit of --width/--height (default: in)")
    parser.add_argument("--paper", choices=["white", "cream"], help="Paper stock for binding constants")


def geometry_config(args) -> dict[str, Any]:
    return {
        "width": args.width,
        "height": args.height,
        "unit": args.unit,
        "paper": args.paper,
    }
