from __future__ import annotations

import pytest

from pdfbind.content.metrics import FALLBACK_WIDTH, char_width, text_width


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("A", 667.0),
        ("ARC", 667.0 + 722.0 + 722.0),
        ("", 0.0),
    ],
)
def test_text_width_uses_helvetica_advances(text: str, expected: float) -> None:
    assert text_width(text, 1000) == expected


def test_text_width_scales_with_font_size() -> None:
    assert text_width("A", 10) == pytest.approx(6.67)


def test_characters_outside_the_table_use_fallback_width() -> None:
    assert char_width(0x7F) == FALLBACK_WIDTH
    assert text_width("é", 1000) == float(FALLBACK_WIDTH)
    assert text_width("日", 1000) == float(FALLBACK_WIDTH)
    assert text_width("A日", 1000) == 667.0 + FALLBACK_WIDTH
