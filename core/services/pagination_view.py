"""Display helpers for pagination controls and result counters."""

from __future__ import annotations

from core.models import PaginationState

ELLIPSIS = "..."
MAX_PLAIN_PAGES = 7


def page_numbers(current_page: int, total_pages: int) -> list[int | str]:
    """Page strip with ELLIPSIS markers, e.g. [1, "...", 4, 5, 6, "...", 10].

    The first and last page are always present; up to one neighbour on each
    side of `current_page` is shown in between.
    """
    if total_pages <= MAX_PLAIN_PAGES:
        return list(range(1, total_pages + 1))

    pages: list[int | str] = [1]
    if current_page > 3:
        pages.append(ELLIPSIS)
    start = max(2, current_page - 1)
    end = min(total_pages - 1, current_page + 1)
    pages.extend(range(start, end + 1))
    if current_page < total_pages - 2:
        pages.append(ELLIPSIS)
    pages.append(total_pages)
    return pages


def pagination_summary(state: PaginationState) -> str:
    if state.total_pages <= 1:
        return f"{state.total_photos} photos"
    return f"Page {state.current_page} of {state.total_pages} ({state.total_photos} photos)"


def showing_summary(filtered_count: int, materialized_count: int) -> str:
    return f"Showing {filtered_count} of {materialized_count} photos"
