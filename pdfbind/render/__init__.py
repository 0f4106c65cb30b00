"""Vector-source rendering."""

from __future__ import annotations

from .svg import SvgConverter, cairosvg_converter, render_svg_to_page

__all__ = ["SvgConverter", "cairosvg_converter", "render_svg_to_page"]
