"""Plugin exposing book binding through the registry."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ...core.exceptions import ConfigurationError
from ...core.utils import get_logger
from ...options import BindOptions
from ...pipeline import BindResult, bind_book, discover_materials
from ...render.svg import render_svg_to_page
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("pdfbind.tools.bind")

OPTION_KEYS = ("width", "height", "unit", "make_even", "arc", "fit_safe_area", "paper", "compress")


def options_from_config(config: dict[str, Any]) -> BindOptions:
    """Build :class:`BindOptions` from a preset plus explicit overrides."""

    options = config.get("options")
    if options is None:
        options = BindOptions.from_preset(config.get("preset") or "book")
    return options.with_updates({key: config.get(key) for key in OPTION_KEYS})


@register_tool("bind")
class BindTool(BaseTool):
    name = "bind"

    def run(self) -> BindResult:
        context = self.context
        config = context.config
        if context.output_path is None:
            raise ConfigurationError("Bind tool requires an output path")

        front = config.get("front")
        back = config.get("back")
        vector_sources = config.get("vector_sources")
        materials_dir = config.get("materials")
        if materials_dir is not None:
            materials = discover_materials(materials_dir)
            front = front or materials.front
            back = back or materials.back
            if vector_sources is None:
                vector_sources = materials.vector_sources
        if front is None or back is None:
            raise ConfigurationError("Bind tool requires front and back matter documents")

        sources = [Path(source) for source in vector_sources or []]
        options = options_from_config(config)
        LOGGER.debug("Binding %d vector page(s) into %s", len(sources), context.output_path)
        result = bind_book(
            front,
            sources,
            back,
            context.output_path,
            options,
            renderer=config.get("renderer") or render_svg_to_page,
        )
        context.resources["result"] = result
        return result
