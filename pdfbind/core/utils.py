"""Utilities shared by pdfbind tools."""

from __future__ import annotations

import logging
from pathlib import Path


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def resolve_path(path: str | Path | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    resolved = Path(path).expanduser().resolve()
    return resolved


def format_number(value: float) -> str:
    """Render *value* compactly for use inside a content stream."""

    if abs(value - round(value)) < 1e-6:
        return str(int(round(value)))
    text = f"{value:.4f}"
    return text.rstrip("0").rstrip(".")
