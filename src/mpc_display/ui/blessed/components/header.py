"""Header rendering functions."""

from typing import Optional

from blessed import Terminal

from mpc_display.core.config import DisplayConfig
from mpc_display.domain.server.models import PlayState

from ..state import Snapshot
from ..styles.formatting import (
    UNKNOWN,
    format_percent,
    format_time,
    format_toggles,
)
from ..styles.palette import STATE_GLYPHS, state_style, style

# Rating units: full, half, empty. Five units cover the 0-10 scale.
RATING_UNITS = ("<3", "< ", " .")
RATING_MAX = 10
NO_RATING = " ? ? ? ? ?"

# Letter grades indexed by the 0-10 rating
GRADES = ["🦃", "💣", " ✂️", "😐", "⭐", "⭐ ⭐", "⭐ ⭐ ⭐", "B+", "A-", "A", "A+"]

PROGRESS_BAR_WIDTH = 40


def format_rating(rating: Optional[str]) -> str:
    """Render a 0-10 rating sticker as five heart units.

    A missing sticker shows question marks; anything that isn't a whole
    number from 0 to 10 is shown verbatim as ``rating: <value>``.

    Examples:
        >>> format_rating("7")
        '<3<3<3<  .'
    """
    if rating is None:
        return NO_RATING

    if not (rating.isascii() and rating.isdigit()) or int(rating) > RATING_MAX:
        return f"rating: {rating}"

    full, half = divmod(int(rating), 2)
    empty = max(0, 5 - full - half)
    return RATING_UNITS[0] * full + RATING_UNITS[1] * half + RATING_UNITS[2] * empty


def format_grade(term: Terminal, rating: Optional[str]) -> str:
    """Render the rating as a letter grade on a black background."""
    try:
        value = int(rating or 0)
    except ValueError:
        value = 0
    grade = GRADES[max(0, min(value, len(GRADES) - 1))]
    return style(term, "grade")(f" {grade} ")


def create_progress_bar(term: Terminal, data: Snapshot, width: int) -> str:
    """Create a colored progress bar sized to the terminal."""
    bar_width = max(1, min(PROGRESS_BAR_WIDTH, width))
    if not data.duration or data.elapsed is None:
        return term.white("─" * bar_width)

    percentage = min(data.elapsed / data.duration, 1.0)
    filled = int(bar_width * percentage)
    return state_style(term, data.state)("█" * filled) + term.white("░" * (bar_width - filled))


def render_header(term: Terminal, data: Snapshot, options: DisplayConfig, width: int) -> list[str]:
    """
    Render the header lines: now playing, album, position, options.

    Args:
        term: blessed Terminal instance
        data: Snapshot to render
        options: Display options
        width: Terminal width, used by the progress bar

    Returns:
        Unwrapped header lines
    """
    artist = data.artist if data.artist is not None else UNKNOWN
    title = data.display_title
    album_track = str(data.album_track) if data.album_track is not None else UNKNOWN
    album_total = str(data.album_total) if data.album_total is not None else UNKNOWN
    album = data.album if data.album is not None else UNKNOWN
    date = data.date if data.date is not None else UNKNOWN

    queue_pos = str(data.queue_pos + 1) if data.queue_pos is not None else UNKNOWN
    queue_total = str(data.queue_total) if data.queue_total is not None else UNKNOWN
    elapsed = format_time(data.elapsed)
    duration = format_time(data.duration)
    percent = format_percent(data.elapsed, data.duration)

    if options.grades:
        rating = format_grade(term, data.rating)
    elif options.ratings:
        rating = style(term, "rating")(format_rating(data.rating))
    else:
        rating = ""

    crossfade = f" (x: {data.crossfade})" if data.crossfade is not None else ""
    col_state = state_style(term, data.state)
    glyph = STATE_GLYPHS.get(data.state, STATE_GLYPHS[PlayState.STOP])

    lines = [
        style(term, "artist")(artist) + " * " + style(term, "title")(title),
        "("
        + style(term, "track")(f"#{album_track}/{album_total}")
        + ") "
        + style(term, "album")(album)
        + " "
        + style(term, "date")(f"({date})"),
        col_state(f"{glyph} {queue_pos}/{queue_total}: {elapsed}/{duration}, {percent}%")
        + ("  " + rating if rating else ""),
        col_state(f"{format_toggles(data.toggle_opts)}, {data.volume}%{crossfade}"),
    ]

    if options.progress:
        lines.append(create_progress_bar(term, data, width))

    return lines
