"""Plugin stamping a diagonal watermark on every page."""

from __future__ import annotations

from pathlib import Path

from ...content.compositor import WATERMARK_TEXT, stamp_watermarks
from ...core.codec import write_document
from ...core.exceptions import ConfigurationError
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool


@register_tool("watermark")
class WatermarkTool(BaseTool):
    name = "watermark"

    def run(self) -> Path:
        context = self.context
        if context.output_path is None:
            raise ConfigurationError("watermark requires an output path")
        graph = context.ensure_graph()
        text = context.config.get("text") or WATERMARK_TEXT
        context.resources["stamped_pages"] = stamp_watermarks(graph, text)
        return write_document(graph, context.output_path, compress=context.config.get("compress", True))
