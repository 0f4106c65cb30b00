"""Fixed text metrics for the watermark font."""

from __future__ import annotations

# Helvetica advance widths for WinAnsi 32..126, in 1/1000 em.
HELVETICA_WIDTHS = (
    278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 278, 278, 584, 584, 584, 556,
    1015, 667, 667, 722, 722, 667, 611, 778, 722, 278, 500, 667, 556, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 278, 278, 278, 469, 556,
    333, 556, 556, 500, 556, 556, 278, 556, 556, 222, 222, 500, 222, 833, 556, 556,
    556, 556, 333, 500, 278, 556, 500, 722, 500, 500, 500, 334, 260, 334, 584,
)
FIRST_CHAR = 32
LAST_CHAR = 126
FALLBACK_WIDTH = 600


def char_width(code: int) -> int:
    if FIRST_CHAR <= code <= LAST_CHAR:
        return HELVETICA_WIDTHS[code - FIRST_CHAR]
    return FALLBACK_WIDTH


def text_width(text: str, font_size: float) -> float:
    """Width of *text* in points when set at *font_size*."""

    units = sum(char_width(ord(char)) for char in text)
    return units * font_size / 1000.0


__all__ = ["FALLBACK_WIDTH", "HELVETICA_WIDTHS", "char_width", "text_width"]
