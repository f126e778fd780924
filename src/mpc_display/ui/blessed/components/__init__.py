"""Display components."""

from .header import format_rating, render_header
from .help import render_help
from .layout import render_screen
from .queue import format_song, render_queue

__all__ = [
    "format_rating",
    "format_song",
    "render_header",
    "render_help",
    "render_queue",
    "render_screen",
]
