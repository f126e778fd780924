"""Queue rendering: one row per song, windowed around the current song.

Wrapping changes both the row count and where the current song lands, so the
window is taken twice: once over unwrapped rows to bound the wrapping work,
then again over the wrapped rows.
"""

from typing import Optional

from blessed import Terminal

from mpc_display.core.config import DisplayConfig
from mpc_display.domain.server.models import Song

from ..helpers.scrolling import crop_window
from ..helpers.terminal import wrap_lines
from ..state import Snapshot
from ..styles.formatting import UNKNOWN, index_width
from ..styles.palette import style

CURRENT_MARKER = ">"
TAG_SEPARATOR = "  *  "


def format_song(
    term: Terminal,
    song: Song,
    index: int,
    padding: int,
    is_current: bool,
    data: Snapshot,
    options: DisplayConfig,
) -> str:
    """Format one queue row: marker, right-aligned 1-based index, tag values."""
    tags = []
    for i, tag in enumerate(data.format):
        suppressed = i < len(data.verbose_tags) and data.verbose_tags[i]
        if suppressed and not options.verbose:
            continue
        value = song.get_tag(tag)
        tags.append(value if value is not None else UNKNOWN)

    marker = CURRENT_MARKER if is_current else " "
    row = f"{marker} {index:>{padding}}  {TAG_SEPARATOR.join(tags)}"
    if is_current:
        return style(term, "current")(row)
    return row


def current_head(index: int, padding: int) -> str:
    """Start of the current song's row: marker and right-aligned 1-based index."""
    return f"{CURRENT_MARKER} {index:>{padding}}"


def find_marker(term: Terminal, rows: list[str], head: str = CURRENT_MARKER) -> int:
    """Index of the row that starts the current song, 0 if none does.

    A row matches when it begins with ``head``, bare or behind the
    reverse-video sequence. Wrapped continuation lines can begin with
    ``>`` too, so callers pass the full marker-and-index head.
    """
    current_seq = style(term, "current")
    for i, row in enumerate(rows):
        if row.startswith(head) or (current_seq and row.startswith(current_seq + head)):
            return i
    return 0


def render_queue(
    term: Terminal,
    data: Snapshot,
    options: DisplayConfig,
    height: int,
    width: int,
    current: Optional[int] = None,
) -> list[str]:
    """
    Render the visible part of the queue.

    Args:
        term: blessed Terminal instance
        data: Snapshot to render
        options: Display options
        height: Rows available below the header (negative is treated as 0)
        width: Terminal width in columns
        current: Queue index of the current song (default: the song's position;
            no row is marked when there is none)

    Returns:
        Exactly ``max(0, height)`` lines, padded with blank lines
    """
    height = max(0, height)
    if current is None:
        current = data.song.pos

    padding = index_width(len(data.queue))
    rows = [
        format_song(term, song, i + 1, padding, i == current, data, options)
        for i, song in enumerate(data.queue)
    ]

    # First pass: unwrapped rows, current song by queue index
    rows = crop_window(rows, height, current if current is not None else 0)

    # Second pass: wrapped rows, current song by marker
    wrapped = wrap_lines(term, rows, width) if rows else []
    head = current_head(current + 1, padding) if current is not None else CURRENT_MARKER
    focus = find_marker(term, wrapped, head)
    visible = crop_window(wrapped, height, focus)

    return visible + [""] * (height - len(visible))
