"""Plugin removing blank pages from an existing document."""

from __future__ import annotations

from pathlib import Path

from ...core.codec import write_document
from ...core.exceptions import ConfigurationError
from ...core.utils import get_logger
from ...pages.deletion import remove_blank_pages
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("pdfbind.tools.blanks")


@register_tool("strip-blanks")
class StripBlanksTool(BaseTool):
    name = "strip-blanks"

    def run(self) -> Path:
        context = self.context
        if context.output_path is None:
            raise ConfigurationError("strip-blanks requires an output path")
        graph = context.ensure_graph()
        removed = remove_blank_pages(graph)
        context.resources["removed_pages"] = removed
        LOGGER.debug("Removed pages %s", removed)
        return write_document(graph, context.output_path, compress=context.config.get("compress", True))
