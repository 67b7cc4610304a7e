from __future__ import annotations

from ..core.constants import DEFAULT_MAX_VISIBLE_PAGES


def page_numbers(current_page: int, total_pages: int, max_visible: int = DEFAULT_MAX_VISIBLE_PAGES) -> list[int]:
    """Sliding window of page links centred on the current page."""
    if total_pages <= max_visible:
        return list(range(1, total_pages + 1))
    half = max_visible // 2
    if current_page <= half + 1:
        return list(range(1, max_visible + 1))
    if current_page >= total_pages - half:
        return list(range(total_pages - max_visible + 1, total_pages + 1))
    return list(range(current_page - half, current_page + half + 1))
