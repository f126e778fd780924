"""Pure helper functions for keeping the current queue row in view."""

from typing import Sequence, TypeVar

T = TypeVar("T")


def centered_index(display_height: int, total: int, focus: int) -> int:
    """Calculate the first visible row so that ``focus`` sits mid-viewport.

    Near either end of the list the window is pinned flush against that end
    instead of leaving blank space.

    Args:
        display_height: Number of rows in the viewport
        total: Total number of rows in the list
        focus: Index of the row to keep centered (0-based)

    Returns:
        Index of the first visible row

    Examples:
        >>> centered_index(display_height=10, total=5, focus=3)
        0  # Everything fits
        >>> centered_index(display_height=3, total=5, focus=4)
        2  # Flush against the end
        >>> centered_index(display_height=5, total=20, focus=10)
        8  # Centered
    """
    if total <= display_height or display_height <= 0:
        return 0

    half = (display_height - 1) // 2
    head = focus - half
    if display_height % 2 == 0:
        tail = focus + half + 1
    else:
        tail = focus + half

    # Focus too near the start
    if head < 0:
        return 0
    # Focus too near the end
    if tail >= total:
        return total - display_height
    return head


def crop_window(rows: Sequence[T], display_height: int, focus: int) -> list[T]:
    """Return the ``display_height`` rows of ``rows`` centered on ``focus``.

    A negative height is treated as zero.
    """
    display_height = max(0, display_height)
    head = centered_index(display_height, len(rows), focus)
    tail = min(len(rows), head + display_height)
    return list(rows[head:tail])
