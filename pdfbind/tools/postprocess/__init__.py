"""Post-processing tools operating on finished documents."""

from __future__ import annotations

from .blanks import StripBlanksTool
from .safe_area import FitSafeAreaTool
from .watermark import WatermarkTool

__all__ = ["FitSafeAreaTool", "StripBlanksTool", "WatermarkTool"]
