"""Uniform scale-and-translate placement of one rectangle inside another."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.exceptions import LayoutError
from ..core.geometry import Rect

SPARSE_THRESHOLD = 0.12


class Anchor(str, Enum):
    START = "start"
    CENTER = "center"
    END = "end"

    def offset(self, slack: float) -> float:
        if self is Anchor.START:
            return 0.0
        if self is Anchor.END:
            return slack
        return slack / 2.0


class FitMode(str, Enum):
    CONTAIN = "contain"
    COVER = "cover"


@dataclass(frozen=True)
class Placement:
    """Transform ``[scale 0 0 scale tx ty]`` mapping source into target space."""

    scale: float
    tx: float
    ty: float

    def apply(self, rect: Rect) -> Rect:
        return Rect(
            rect.x * self.scale + self.tx,
            rect.y * self.scale + self.ty,
            rect.width * self.scale,
            rect.height * self.scale,
        )

    def matrix(self) -> tuple[float, float, float, float, float, float]:
        return self.scale, 0.0, 0.0, self.scale, self.tx, self.ty


def fit_with_anchor(
    source: Rect,
    target: Rect,
    *,
    horizontal: Anchor = Anchor.CENTER,
    vertical: Anchor = Anchor.CENTER,
    mode: FitMode = FitMode.CONTAIN,
    max_scale: float | None = None,
) -> Placement:
    """Scale *source* uniformly into *target* and anchor it.

    ``contain`` picks the smaller of the two axis ratios, ``cover`` the larger.
    *max_scale* caps the result. Anchors pick where the slack goes: ``start``
    is left/bottom, ``end`` is right/top.
    """

    if source.width <= 0 or source.height <= 0:
        raise LayoutError(f"Cannot place an empty source rectangle {source}")
    if target.width <= 0 or target.height <= 0:
        raise LayoutError(f"Cannot place into an empty target rectangle {target}")

    ratio_x = target.width / source.width
    ratio_y = target.height / source.height
    scale = min(ratio_x, ratio_y) if mode is FitMode.CONTAIN else max(ratio_x, ratio_y)
    if max_scale is not None:
        scale = min(scale, max_scale)

    left = target.x + horizontal.offset(target.width - source.width * scale)
    bottom = target.y + vertical.offset(target.height - source.height * scale)
    return Placement(scale, left - source.x * scale, bottom - source.y * scale)


def placement_for(ink: Rect, safe: Rect) -> Placement:
    """Apply the sparse-content policy when fitting *ink* into *safe*."""

    if safe.area <= 0:
        raise LayoutError(f"Safe rectangle {safe} has no area")
    if ink.area / safe.area < SPARSE_THRESHOLD:
        return fit_with_anchor(ink, safe, horizontal=Anchor.CENTER, vertical=Anchor.START, max_scale=1.0)
    return fit_with_anchor(ink, safe)


__all__ = ["Anchor", "FitMode", "Placement", "SPARSE_THRESHOLD", "fit_with_anchor", "placement_for"]
