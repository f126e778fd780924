"""Blessed-based display and keyboard remote."""

from .app import Display, ExitCode
from .cache import StateCache
from .events.keyboard import KeyHandler
from .projector import ElapsedProjector
from .signals import SessionChannels, Signal, SignalCoordinator, SignalSender
from .state import Snapshot

__all__ = [
    "Display",
    "ElapsedProjector",
    "ExitCode",
    "KeyHandler",
    "SessionChannels",
    "Signal",
    "SignalCoordinator",
    "SignalSender",
    "Snapshot",
    "StateCache",
]
