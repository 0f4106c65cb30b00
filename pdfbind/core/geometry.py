"""Book geometry: unit conversion, page rectangles and binding presets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .exceptions import ConfigurationError, LayoutError

POINTS_PER_INCH = 72.0
CM_PER_INCH = 2.54
SAFE_AREA_EPSILON = 0.001

_INCH_UNITS = {"in", "inch", "inches"}
_CM_UNITS = {"cm"}


def normalize_unit(unit: str) -> str:
    key = unit.strip().lower()
    if key in _INCH_UNITS:
        return "in"
    if key in _CM_UNITS:
        return "cm"
    raise ConfigurationError(f"Unsupported unit '{unit}' (expected 'in' or 'cm')")


def to_points(value: float, unit: str) -> float:
    """Convert *value* expressed in *unit* into PDF points."""

    if normalize_unit(unit) == "cm":
        return value / CM_PER_INCH * POINTS_PER_INCH
    return value * POINTS_PER_INCH


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its lower-left corner and size."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_box(cls, box: Sequence[float]) -> "Rect":
        """Build a rectangle from a PDF ``[llx lly urx ury]`` array."""

        if len(box) != 4:
            raise LayoutError(f"Bounding box must have four numbers, got {len(box)}")
        llx, lly, urx, ury = (float(value) for value in box)
        return cls(min(llx, urx), min(lly, ury), abs(urx - llx), abs(ury - lly))

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    def as_box(self) -> tuple[float, float, float, float]:
        return self.x, self.y, self.right, self.top

    def inset(self, amount: float) -> "Rect":
        return Rect(self.x + amount, self.y + amount, self.width - 2 * amount, self.height - 2 * amount)

    def scaled(self, factor: float) -> "Rect":
        return Rect(self.x * factor, self.y * factor, self.width * factor, self.height * factor)


@dataclass(frozen=True)
class BindingConstants:
    """Per-vendor binding constants, expressed in inches."""

    bleed_cover: float
    margin_cover: float
    thickness: float
    gutter: float
    margin_inner: float

    def in_unit(self, unit: str) -> "BindingConstants":
        if normalize_unit(unit) == "in":
            return self
        return BindingConstants(
            bleed_cover=self.bleed_cover * CM_PER_INCH,
            margin_cover=self.margin_cover * CM_PER_INCH,
            thickness=self.thickness * CM_PER_INCH,
            gutter=self.gutter * CM_PER_INCH,
            margin_inner=self.margin_inner * CM_PER_INCH,
        )


THICKNESS_WHITE = 0.002252
THICKNESS_CREAM = 0.0025

KDP_WHITE = BindingConstants(
    bleed_cover=0.125,
    margin_cover=0.125,
    thickness=THICKNESS_WHITE,
    gutter=0.375,
    margin_inner=0.25,
)

KDP_CREAM = BindingConstants(
    bleed_cover=0.125,
    margin_cover=0.125,
    thickness=THICKNESS_CREAM,
    gutter=0.375,
    margin_inner=0.25,
)

PAPER_PRESETS = {"white": KDP_WHITE, "cream": KDP_CREAM}


def binding_for_paper(paper: str) -> BindingConstants:
    try:
        return PAPER_PRESETS[paper.lower()]
    except KeyError as exc:
        raise ConfigurationError(
            f"Unknown paper '{paper}' (expected one of {', '.join(sorted(PAPER_PRESETS))})"
        ) from exc


@dataclass(frozen=True)
class BookParams:
    width: float
    height: float
    unit: str
    pages: int


@dataclass(frozen=True)
class BookLayout:
    """Cover and interior geometry for a bound book.

    All results are expressed in the unit of :attr:`params`; the binding
    constants are converted on the fly.
    """

    params: BookParams
    binding: BindingConstants = KDP_WHITE

    @property
    def _binding(self) -> BindingConstants:
        return self.binding.in_unit(self.params.unit)

    def spine_width(self) -> float:
        return self.params.pages * self._binding.thickness

    def cover_size(self) -> tuple[float, float]:
        binding = self._binding
        width = (
            2.0 * self.params.width
            + 2.0 * binding.bleed_cover
            + 2.0 * binding.margin_cover
            + self.spine_width()
        )
        height = self.params.height + 2.0 * binding.bleed_cover + 2.0 * binding.margin_cover
        return width, height

    def safe_area_size(self) -> tuple[float, float]:
        binding = self._binding
        width = self.params.width - (binding.gutter + binding.margin_inner)
        height = self.params.height - 2.0 * binding.margin_inner
        return width, height

    def safe_area(self, is_left: bool) -> Rect:
        """Safe rectangle of a verso (``is_left``) or recto page."""

        binding = self._binding
        width, height = self.safe_area_size()
        x = binding.margin_inner if is_left else binding.gutter
        return Rect(x, binding.margin_inner, width, height)

    def safe_area_points(self, is_left: bool, epsilon: float = SAFE_AREA_EPSILON) -> Rect:
        """Safe rectangle shrunk by *epsilon* and converted to points."""

        rect = self.safe_area(is_left).inset(epsilon)
        if rect.width <= 0 or rect.height <= 0:
            raise LayoutError("Safe area is empty for the configured page size")
        return rect.scaled(to_points(1.0, self.params.unit))


__all__ = [
    "BindingConstants",
    "BookLayout",
    "BookParams",
    "KDP_CREAM",
    "KDP_WHITE",
    "PAPER_PRESETS",
    "Rect",
    "SAFE_AREA_EPSILON",
    "binding_for_paper",
    "normalize_unit",
    "to_points",
]
