"""Blessed UI helper functions."""

from .scrolling import centered_index, crop_window
from .terminal import frame, viewport_size, wrap_lines, write_frame

__all__ = [
    "centered_index",
    "crop_window",
    "frame",
    "viewport_size",
    "wrap_lines",
    "write_frame",
]
