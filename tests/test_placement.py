from __future__ import annotations

import pytest

from pdfbind.content.placement import Anchor, FitMode, Placement, fit_with_anchor, placement_for
from pdfbind.core.exceptions import LayoutError
from pdfbind.core.geometry import Rect

SOURCE = Rect(0.0, 0.0, 100.0, 50.0)
TARGET = Rect(0.0, 0.0, 200.0, 200.0)


def test_contain_centres_the_scaled_source() -> None:
    placement = fit_with_anchor(SOURCE, TARGET)
    assert placement == Placement(2.0, 0.0, 50.0)
    assert placement.apply(SOURCE) == Rect(0.0, 50.0, 200.0, 100.0)


def test_cover_fills_the_target() -> None:
    placement = fit_with_anchor(SOURCE, TARGET, mode=FitMode.COVER)
    assert placement.scale == pytest.approx(4.0)
    assert placement.tx == pytest.approx(-100.0)
    assert placement.ty == pytest.approx(0.0)


@pytest.mark.parametrize(
    ("vertical", "expected_ty"),
    [(Anchor.START, 0.0), (Anchor.CENTER, 50.0), (Anchor.END, 100.0)],
)
def test_vertical_anchor_distributes_slack(vertical: Anchor, expected_ty: float) -> None:
    assert fit_with_anchor(SOURCE, TARGET, vertical=vertical).ty == pytest.approx(expected_ty)


def test_offset_source_is_moved_onto_target() -> None:
    source = Rect(10.0, 20.0, 50.0, 50.0)
    target = Rect(100.0, 100.0, 100.0, 100.0)
    result = fit_with_anchor(source, target).apply(source)
    assert result.x == pytest.approx(100.0)
    assert result.y == pytest.approx(100.0)
    assert result.width == pytest.approx(100.0)


def test_max_scale_caps_enlargement() -> None:
    placement = fit_with_anchor(SOURCE, TARGET, max_scale=1.0)
    assert placement == Placement(1.0, 50.0, 75.0)


def test_empty_rectangles_are_rejected() -> None:
    with pytest.raises(LayoutError):
        fit_with_anchor(Rect(0.0, 0.0, 0.0, 10.0), TARGET)
    with pytest.raises(LayoutError):
        fit_with_anchor(SOURCE, Rect(0.0, 0.0, 10.0, 0.0))


def test_sparse_ink_is_not_enlarged_and_sits_at_the_bottom() -> None:
    placement = placement_for(Rect(0.0, 0.0, 10.0, 10.0), TARGET)
    assert placement == Placement(1.0, 95.0, 0.0)


def test_dense_ink_is_contained_and_centred() -> None:
    safe = Rect(20.0, 10.0, 160.0, 180.0)
    placement = placement_for(TARGET, safe)
    assert placement.scale == pytest.approx(0.8)
    assert placement.tx == pytest.approx(20.0)
    assert placement.ty == pytest.approx(20.0)


def test_placement_matrix() -> None:
    assert Placement(0.5, 3.0, 4.0).matrix() == (0.5, 0.0, 0.0, 0.5, 3.0, 4.0)
