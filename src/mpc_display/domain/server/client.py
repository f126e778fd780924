"""
MPD connection wrapper with explicit ownership

Each component (display, input) owns exactly one ServerClient. Requests on a
client are serialized by its lock so a background thread (the input keepalive)
and the owning loop never interleave on the wire.
"""

import socket
import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from loguru import logger
from mpd import CommandError, MPDClient

from .exceptions import TRANSPORT_ERRORS, ServerConnectionError
from .models import Song, Status

# Search window large enough to mean "every match"
SEARCH_WINDOW = (0, 65535)

STICKER_TYPE = "song"

IDLE_SUBSYSTEMS = (
    "player",
    "mixer",
    "options",
    "playlist",
    "subscription",
    "sticker",
)


class ServerClient:
    """One MPD connection behind a scoped lock."""

    def __init__(self, client: Optional[MPDClient] = None, address: str = ""):
        self._client = client if client is not None else MPDClient()
        self._lock = threading.Lock()
        self.address = address

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        password: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> "ServerClient":
        """Open a new connection.

        Raises:
            ServerConnectionError: If the server can't be reached or rejects the password
        """
        address = f"{host}:{port}"
        client = MPDClient()
        client.timeout = timeout
        # idle blocks until the server reports a change, however long that takes
        client.idletimeout = None

        logger.info(f"Connecting to MPD at {address}")
        try:
            client.connect(host, port)
            if password:
                client.password(password)
        except TRANSPORT_ERRORS as e:
            logger.error(f"Connection to {address} failed: {e}")
            raise ServerConnectionError(address, str(e)) from e

        logger.info(f"Connected to MPD {client.mpd_version} at {address}")
        return cls(client, address)

    @contextmanager
    def locked(self) -> Iterator[MPDClient]:
        """Hold the connection for a sequence of requests."""
        with self._lock:
            yield self._client

    def close(self) -> None:
        with self._lock:
            try:
                self._client.close()
                self._client.disconnect()
            except TRANSPORT_ERRORS:
                pass  # Already gone

    def abort(self) -> None:
        """Drop the connection without taking the lock.

        A request blocked in ``idle`` holds the lock for as long as the server
        stays quiet. Shutting the socket down makes that request fail with a
        connection error instead.
        """
        sock = getattr(self._client, "_sock", None)
        try:
            if sock is not None:
                sock.shutdown(socket.SHUT_RDWR)
            self._client.disconnect()
        except TRANSPORT_ERRORS as e:
            logger.debug(f"Abort of {self.address} connection: {e}")

    # Queries

    def status(self) -> Status:
        with self.locked() as conn:
            return Status.from_mpd(conn.status())

    def current_song(self) -> Song:
        with self.locked() as conn:
            return Song.from_mpd(conn.currentsong())

    def queue(self) -> list[Song]:
        with self.locked() as conn:
            return [Song.from_mpd(entry) for entry in conn.playlistinfo()]

    def wait_for_change(self, subsystems: Iterable[str] = IDLE_SUBSYSTEMS) -> list[str]:
        """Block until one of ``subsystems`` changes; return the changed names."""
        with self.locked() as conn:
            return list(conn.idle(*subsystems))

    def search(self, tag: str, value: str, window: tuple[int, int] = SEARCH_WINDOW) -> list[Song]:
        """Case-insensitive substring search on ``tag``, limited to ``window``."""
        with self.locked() as conn:
            results = conn.search(tag, value, "window", f"{window[0]}:{window[1]}")
        return [Song.from_mpd(entry) for entry in results]

    # Stickers

    def get_sticker(self, uri: str, key: str) -> Optional[str]:
        """Return a sticker value, or None when the song has no such sticker."""
        with self.locked() as conn:
            try:
                return conn.sticker_get(STICKER_TYPE, uri, key)
            except CommandError:
                return None

    def set_sticker(self, uri: str, key: str, value: str) -> None:
        with self.locked() as conn:
            conn.sticker_set(STICKER_TYPE, uri, key, value)

    def delete_sticker(self, uri: str, key: str) -> None:
        with self.locked() as conn:
            conn.sticker_delete(STICKER_TYPE, uri, key)

    # Client-to-client channels

    def subscribe(self, channel: str) -> None:
        with self.locked() as conn:
            conn.subscribe(channel)

    def unsubscribe(self, channel: str) -> None:
        with self.locked() as conn:
            conn.unsubscribe(channel)

    def channels(self) -> list[str]:
        with self.locked() as conn:
            return list(conn.channels())

    # Playback control

    def play(self) -> None:
        with self.locked() as conn:
            conn.play()

    def pause(self, paused: bool) -> None:
        with self.locked() as conn:
            conn.pause(1 if paused else 0)

    def previous(self) -> None:
        with self.locked() as conn:
            conn.previous()

    def next(self) -> None:
        with self.locked() as conn:
            conn.next()

    def stop(self) -> None:
        with self.locked() as conn:
            conn.stop()

    def set_volume(self, volume: int) -> None:
        with self.locked() as conn:
            conn.setvol(volume)

    def seek_to(self, seconds: float) -> None:
        with self.locked() as conn:
            conn.seekcur(seconds)

    def set_repeat(self, enabled: bool) -> None:
        with self.locked() as conn:
            conn.repeat(1 if enabled else 0)

    def set_random(self, enabled: bool) -> None:
        with self.locked() as conn:
            conn.random(1 if enabled else 0)

    def set_single(self, enabled: bool) -> None:
        with self.locked() as conn:
            conn.single(1 if enabled else 0)

    def set_consume(self, enabled: bool) -> None:
        with self.locked() as conn:
            conn.consume(1 if enabled else 0)

    def shuffle(self) -> None:
        with self.locked() as conn:
            conn.shuffle()

    def set_crossfade(self, seconds: int) -> None:
        with self.locked() as conn:
            conn.crossfade(seconds)
