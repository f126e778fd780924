"""Terminal output utilities."""

import os
import sys
from typing import Iterable

from blessed import Terminal

DEFAULT_HEIGHT = 24
DEFAULT_WIDTH = 80


def viewport_size(term: Terminal) -> tuple[int, int]:
    """Return (height, width) of the terminal, or 24x80 when it can't be queried."""
    try:
        size = os.get_terminal_size(term.stream.fileno())
    except (AttributeError, OSError, ValueError):
        return DEFAULT_HEIGHT, DEFAULT_WIDTH
    if size.lines <= 0 or size.columns <= 0:
        return DEFAULT_HEIGHT, DEFAULT_WIDTH
    return size.lines, size.columns


def wrap_lines(term: Terminal, lines: Iterable[str], width: int) -> list[str]:
    """Wrap each line to ``width`` columns, ignoring escape sequences when measuring.

    Blank lines are kept as a single empty row.
    """
    width = max(1, width)
    wrapped: list[str] = []
    for line in lines:
        wrapped.extend(term.wrap(line, width) or [""])
    return wrapped


def frame(term: Terminal, content: str) -> str:
    """Wrap ``content`` for a full redraw: clear, draw, park the cursor at home."""
    return term.clear + content + term.home


def write_frame(term: Terminal, content: str) -> None:
    stream = term.stream if term.stream is not None else sys.stdout
    stream.write(frame(term, content))
    stream.flush()
