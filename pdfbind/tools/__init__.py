"""Namespace for pluggable pdfbind tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .binder import bind  # noqa: F401
    from .postprocess import blanks, safe_area, watermark  # noqa: F401


__all__ = ["registry", "load_builtin_plugins"]
