"""Page deletion and blank-page removal."""

from __future__ import annotations

from .deletion import compact, delete_page, remove_blank_pages

__all__ = ["compact", "delete_page", "remove_blank_pages"]
