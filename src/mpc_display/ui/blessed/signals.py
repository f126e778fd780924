"""
Help/quit signaling between the display and the input side.

The two sides hold separate server connections and may live in separate
processes, so they share nothing locally. The input side subscribes to
per-session channels on the server; the display side sees a "subscription"
change from idle, lists the channels and derives its Signal from them.
"""

import uuid
from enum import Enum
from typing import Iterable, Optional

from loguru import logger

from mpc_display.domain.server.client import ServerClient
from mpc_display.domain.server.exceptions import TRANSPORT_ERRORS


class Signal(Enum):
    NORMAL = "normal"
    HELP = "help"
    QUIT = "quit"


def new_session_token() -> str:
    return uuid.uuid4().hex


class SessionChannels:
    """Channel names for one display/input session."""

    def __init__(self, token: str):
        self.token = token
        self.help = f"help_{token}"
        self.quit = f"quit_{token}"
        # Subscribed and dropped again only to wake the display's idle
        self.refresh = f"refresh_{token}"


class SignalCoordinator:
    """Display-side state machine: NORMAL, HELP, QUIT (terminal)."""

    def __init__(self, channels: SessionChannels, signal: Signal = Signal.NORMAL):
        self.channels = channels
        self.signal = signal

    def evaluate(self, subscribed: Iterable[str]) -> Signal:
        """Derive the next Signal from the server's current channel list."""
        if self.signal == Signal.QUIT:
            return self.signal

        subscribed = set(subscribed)
        previous = self.signal
        if self.channels.help in subscribed:
            self.signal = Signal.HELP
        elif previous == Signal.HELP:
            # Help was just closed
            self.signal = Signal.NORMAL
        elif self.channels.quit in subscribed:
            self.signal = Signal.QUIT

        if self.signal != previous:
            logger.debug(f"Signal {previous.value} -> {self.signal.value}")
        return self.signal

    def refresh(self, client: ServerClient) -> Signal:
        """List channels on ``client`` and evaluate; unchanged on transport errors."""
        try:
            subscribed = client.channels()
        except TRANSPORT_ERRORS as e:
            logger.warning(f"channels failed: {e}")
            return self.signal

        previous = self.signal
        signal = self.evaluate(subscribed)
        if previous == Signal.HELP and signal == Signal.NORMAL:
            # Quit from help can land in the same idle wakeup as help closing
            signal = self.evaluate(subscribed)
        return signal


class SignalSender:
    """Input-side half: turns help/quit keystrokes into channel (un)subscriptions.

    Every channel operation is fire-and-forget. A lost signal is no worse
    than the key not having been pressed, so the user can simply press it again.
    """

    def __init__(self, client: ServerClient, channels: SessionChannels):
        self.client = client
        self.channels = channels
        self.help_active = False
        self.quit_requested = False

    def _send(self, action: str, channel: str) -> bool:
        try:
            getattr(self.client, action)(channel)
        except TRANSPORT_ERRORS as e:
            logger.debug(f"{action} {channel} failed: {e}")
            return False
        return True

    def toggle_help(self) -> bool:
        """Open or close the help overlay; return whether help is now active."""
        if not self.help_active:
            self._send("subscribe", self.channels.help)
            self.help_active = True
        else:
            self._send("unsubscribe", self.channels.help)
            # Dropping our own subscription doesn't always wake the display
            # promptly, a throwaway subscribe/unsubscribe does
            self._send("subscribe", self.channels.refresh)
            self._send("unsubscribe", self.channels.refresh)
            self.help_active = False
        return self.help_active

    def request_quit(self) -> None:
        if self.help_active:
            self._send("unsubscribe", self.channels.help)
            self.help_active = False
        self._send("subscribe", self.channels.quit)
        self.quit_requested = True


def session_channels(token: Optional[str] = None) -> SessionChannels:
    return SessionChannels(token or new_session_token())
