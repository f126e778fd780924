"""Keyboard event handling."""

from .keyboard import KeyHandler

__all__ = ["KeyHandler"]
