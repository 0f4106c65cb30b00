"""Content-stream interpretation and composition."""

from __future__ import annotations

from .compositor import (
    WatermarkResources,
    create_watermark_resources,
    ink_bounding_box,
    page_box,
    reposition_for_layout,
    reposition_page,
    reposition_to_safe_area,
    stamp_watermarks,
    watermark_program,
    wrap_page_content,
)
from .interpreter import decode_program, draws, effective_resources, is_blank, page_content_streams
from .metrics import text_width
from .placement import Anchor, FitMode, Placement, fit_with_anchor, placement_for

__all__ = [
    "Anchor",
    "FitMode",
    "Placement",
    "WatermarkResources",
    "create_watermark_resources",
    "decode_program",
    "draws",
    "effective_resources",
    "fit_with_anchor",
    "ink_bounding_box",
    "is_blank",
    "page_box",
    "page_content_streams",
    "placement_for",
    "reposition_for_layout",
    "reposition_page",
    "reposition_to_safe_area",
    "stamp_watermarks",
    "text_width",
    "watermark_program",
    "wrap_page_content",
]
