"""Full-screen layout: header on top, queue filling the rest."""

from blessed import Terminal

from mpc_display.core.config import DisplayConfig

from ..helpers.terminal import wrap_lines
from ..state import Snapshot
from .header import render_header
from .queue import render_queue


def render_screen(
    term: Terminal,
    data: Snapshot,
    options: DisplayConfig,
    height: int,
    width: int,
) -> str:
    """Render header and queue, padded to ``height`` rows.

    The header is wrapped first; the queue gets whatever rows remain.
    """
    header = wrap_lines(term, render_header(term, data, options, width), width)
    body = render_queue(term, data, options, height - len(header), width)
    return "\n".join(header + body)
