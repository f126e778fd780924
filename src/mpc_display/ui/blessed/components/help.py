"""Help overlay listing the key bindings."""

from blessed import Terminal

# (keys, description)
KEY_BINDINGS: list[tuple[str, str]] = [
    ("h, ?", "show help text"),
    ("space", "pause/play"),
    ("pk, nj", "prev/next track"),
    ("H, L", "seek back/ahead"),
    ("+0, -9", "volume up/down"),
    ("ERSC", "repeat, random, single, consume"),
    ("F", "shuffle (reorders queue in-place)"),
    ("{, }", "adjust current track rating"),
    ("M", "stops playback"),
    ("x, X", "crossfade up/down"),
    ("q", "quit"),
]

KEY_COLUMN = 10


def render_help(term: Terminal) -> list[str]:
    """Render the key binding list, keys in bold with dotted leaders."""
    lines = [""]
    for keys, description in KEY_BINDINGS:
        leader = "." * max(1, KEY_COLUMN - len(keys))
        lines.append(f"  {term.bold(keys)} {leader}{description}")
    lines.append("")
    lines.append("  " + term.bold_magenta("press h or ? to close"))
    return lines
