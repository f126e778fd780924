"""Keystroke handling for the input side.

Maps single keys to server commands. Runs on its own connection, shared only
with the keepalive thread through the client's lock.
"""

import threading
from typing import Callable, Optional

from blessed import Terminal
from loguru import logger

from mpc_display.domain.server.client import ServerClient
from mpc_display.domain.server.exceptions import TRANSPORT_ERRORS
from mpc_display.domain.server.models import PlayState, Status

from ..signals import SessionChannels, SignalSender

KEEPALIVE_SECONDS = 60
VOLUME_STEP = 5
SEEK_STEP = 10
RATING_MIN = -1
RATING_MAX = 10
RATING_STICKER = "rating"

HELP_KEYS = frozenset("h?")
QUIT_KEYS = frozenset("q")


class KeyHandler:
    """Input-side loop: read a key, act on it, repeat until quit."""

    def __init__(
        self,
        client: ServerClient,
        channels: SessionChannels,
        keepalive_interval: float = KEEPALIVE_SECONDS,
    ):
        self.client = client
        self.signals = SignalSender(client, channels)
        self.keepalive_interval = keepalive_interval
        self._stop = threading.Event()
        self._actions: dict[str, Callable[[], None]] = {}
        self._bind(" ", self.toggle_pause)
        self._bind("pk", self.client.previous)
        self._bind("nj", self.client.next)
        self._bind("=+0)", lambda: self.change_volume(VOLUME_STEP))
        self._bind("-_9(", lambda: self.change_volume(-VOLUME_STEP))
        self._bind("H", lambda: self.seek(-SEEK_STEP))
        self._bind("L", lambda: self.seek(SEEK_STEP))
        self._bind("[{", lambda: self.change_rating(-1))
        self._bind("]}", lambda: self.change_rating(1))
        self._bind("E", lambda: self.client.set_repeat(not self._status().repeat))
        self._bind("R", lambda: self.client.set_random(not self._status().random))
        self._bind("S", lambda: self.client.set_single(not self._status().single))
        self._bind("C", lambda: self.client.set_consume(not self._status().consume))
        self._bind("F", self.client.shuffle)
        self._bind("x", lambda: self.change_crossfade(1))
        self._bind("X", lambda: self.change_crossfade(-1))
        self._bind("M", self.client.stop)

    def _bind(self, keys: str, action: Callable[[], None]) -> None:
        for key in keys:
            self._actions[key] = action

    # Main loop

    def run(self, term: Terminal) -> None:
        """Read keys until quit. The caller owns the terminal modes."""
        self.start_keepalive()
        try:
            with term.cbreak():
                while not self._stop.is_set():
                    key = term.inkey(timeout=0.5)
                    if not key or key.is_sequence:
                        continue
                    if not self.handle_keystroke(str(key)):
                        break
        finally:
            self._stop.set()

    def start_keepalive(self) -> threading.Thread:
        thread = threading.Thread(target=self._keepalive, daemon=True, name="Keepalive")
        thread.start()
        return thread

    def _keepalive(self) -> None:
        """Ping with a no-op status so the server doesn't drop an idle connection."""
        while not self._stop.wait(self.keepalive_interval):
            try:
                self.client.status()
            except TRANSPORT_ERRORS as e:
                logger.warning(f"Keepalive failed: {e}")

    def stop(self) -> None:
        self._stop.set()

    # Keys

    def handle_keystroke(self, ch: str) -> bool:
        """Act on one key. Returns False when the input loop should end."""
        if ch in QUIT_KEYS:
            logger.info("Quit requested")
            self.signals.request_quit()
            return False

        if ch in HELP_KEYS:
            self.signals.toggle_help()
            return True

        # Help overlay is modal: playback keys wait until it's closed
        if self.signals.help_active:
            return True

        action = self._actions.get(ch)
        if action is None:
            logger.debug(f"Unbound key: {ch!r}")
            return True

        try:
            action()
        except TRANSPORT_ERRORS as e:
            logger.warning(f"Command for key {ch!r} failed: {e}")
        return True

    # Commands

    def _status(self) -> Status:
        try:
            return self.client.status()
        except TRANSPORT_ERRORS as e:
            logger.warning(f"status failed: {e}")
            return Status()

    def toggle_pause(self) -> None:
        if self._status().state == PlayState.PLAY:
            self.client.pause(True)
        else:
            self.client.play()

    def change_volume(self, delta: int) -> None:
        volume = self._status().volume
        self.client.set_volume(max(0, min(100, volume + delta)))

    def seek(self, delta: int) -> None:
        elapsed = self._status().elapsed or 0.0
        self.client.seek_to(max(0.0, elapsed + delta))

    def change_crossfade(self, delta: int) -> None:
        crossfade = self._status().crossfade or 0
        if crossfade + delta < 0:
            return
        self.client.set_crossfade(crossfade + delta)

    def change_rating(self, delta: int) -> None:
        """Step the current song's rating; dropping below 0 removes it."""
        uri = self.client.current_song().file
        if not uri:
            return
        rating = _parse_rating(self.client.get_sticker(uri, RATING_STICKER))
        rating = max(RATING_MIN, min(RATING_MAX, rating + delta))
        if rating == RATING_MIN:
            self.client.delete_sticker(uri, RATING_STICKER)
        else:
            self.client.set_sticker(uri, RATING_STICKER, str(rating))


def _parse_rating(value: Optional[str]) -> int:
    try:
        return int(value) if value is not None else RATING_MIN
    except ValueError:
        return RATING_MIN
