"""Formatting helper functions."""

from typing import Optional

UNKNOWN = "?"


def format_time(seconds: Optional[float]) -> str:
    """
    Format seconds as M:SS.

    Args:
        seconds: Time in seconds, or None when unknown

    Returns:
        Formatted time string, "?" when unknown
    """
    if seconds is None:
        return UNKNOWN
    total = int(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def format_percent(elapsed: Optional[float], duration: Optional[float]) -> str:
    """Whole-number percentage of the track played."""
    if elapsed is None or duration is None or int(duration) <= 0:
        return UNKNOWN
    return str(100 * int(elapsed) // int(duration))


def format_toggles(toggle_opts: list[bool]) -> str:
    """Render repeat/random/single/consume as "ersc", uppercase when enabled."""
    letters = []
    for i, letter in enumerate("ersc"):
        enabled = toggle_opts[i] if i < len(toggle_opts) else False
        letters.append(letter.upper() if enabled else letter)
    return "".join(letters)


def index_width(total: int) -> int:
    """Digit count of ``total`` (at least 1), used to right-align row numbers."""
    return len(str(total)) if total > 0 else 1
