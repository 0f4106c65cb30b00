"""Shared plumbing for pdfbind tools."""

from __future__ import annotations

from .interfaces import BaseTool, ConversionContext
from .pipeline import ToolRegistry, register_tool, registry

__all__ = ["BaseTool", "ConversionContext", "ToolRegistry", "register_tool", "registry"]
