"""Plugin fitting page content into the safe area of a bound book."""

from __future__ import annotations

from pathlib import Path

from ...content.compositor import reposition_for_layout
from ...core.codec import write_document
from ...core.exceptions import ConfigurationError
from ...core.utils import get_logger
from ..binder.bind import options_from_config
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("pdfbind.tools.safe_area")


@register_tool("fit-safe-area")
class FitSafeAreaTool(BaseTool):
    name = "fit-safe-area"

    def run(self) -> Path:
        context = self.context
        if context.output_path is None:
            raise ConfigurationError("fit-safe-area requires an output path")
        options = options_from_config(context.config).validate()
        graph = context.ensure_graph()
        layout = options.book_layout(graph.page_count)
        LOGGER.debug("Safe areas: verso %s, recto %s", layout.safe_area(True), layout.safe_area(False))
        context.resources["repositioned_pages"] = reposition_for_layout(graph, layout)
        return write_document(graph, context.output_path, compress=options.compress)
