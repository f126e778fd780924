"""Color roles for the display, resolved against a blessed Terminal."""

from blessed import Terminal

from mpc_display.domain.server.models import PlayState

# Role -> blessed formatting attribute
COLORS = {
    "artist": "bold_cyan",
    "title": "bold_blue",
    "track": "green",
    "album": "cyan",
    "date": "yellow",
    "rating": "bold_magenta",
    "playing": "green",
    "paused": "red",
    "current": "reverse",
    "grade": "on_black",
}

STATE_GLYPHS = {
    PlayState.PLAY: "|>",
    PlayState.PAUSE: "[]",
    PlayState.STOP: "><",
}


def style(term: Terminal, role: str):
    """Return the blessed formatter for a color role."""
    return getattr(term, COLORS[role])


def state_style(term: Terminal, state: PlayState):
    """Green while playing, red when paused or stopped."""
    return style(term, "playing" if state == PlayState.PLAY else "paused")
