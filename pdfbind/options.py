"""Binding options and the ``book`` / ``arc`` presets."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

from .core.exceptions import ConfigurationError
from .core.geometry import BookLayout, BookParams, binding_for_paper, normalize_unit, to_points


@dataclass(frozen=True)
class BindOptions:
    """Settings for one binding run.

    ``width``/``height`` are given in ``unit`` (``in`` or ``cm``).
    ``make_even`` pads an odd front matter with one blank page. ``arc``
    switches to advance-reader-copy output: no spacer pages between vector
    pages, blank pages removed and every page stamped. ``fit_safe_area``
    moves every page's content into the book safe area for ``paper``.
    """

    width: float = 8.5
    height: float = 8.5
    unit: str = "in"
    make_even: bool = False
    arc: bool = False
    fit_safe_area: bool = False
    paper: str = "white"
    compress: bool = True

    @classmethod
    def book(cls) -> "BindOptions":
        return cls()

    @classmethod
    def arc_copy(cls) -> "BindOptions":
        return cls(arc=True)

    @classmethod
    def from_preset(cls, name: str) -> "BindOptions":
        presets = {"book": cls.book, "arc": cls.arc_copy}
        try:
            return presets[name.lower()]()
        except KeyError as exc:
            raise ConfigurationError(f"Unknown preset '{name}' (expected 'book' or 'arc')") from exc

    def with_updates(self, updates: Mapping[str, Any]) -> "BindOptions":
        """Return a copy with every non-``None`` entry of *updates* applied."""

        return replace(self, **{key: value for key, value in updates.items() if value is not None})

    def validate(self) -> "BindOptions":
        normalize_unit(self.unit)
        binding_for_paper(self.paper)
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(f"Page size must be positive, got {self.width}x{self.height}")
        return self

    def page_size_points(self) -> tuple[float, float]:
        return to_points(self.width, self.unit), to_points(self.height, self.unit)

    def book_layout(self, pages: int) -> BookLayout:
        params = BookParams(width=self.width, height=self.height, unit=normalize_unit(self.unit), pages=pages)
        return BookLayout(params, binding_for_paper(self.paper))


__all__ = ["BindOptions"]
