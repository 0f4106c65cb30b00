"""Book binding tool."""

from __future__ import annotations

from .bind import BindTool, options_from_config

__all__ = ["BindTool", "options_from_config"]
