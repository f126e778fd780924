"""
State cache: keeps the Snapshot in step with the server.

Each sync method refreshes only the fields tied to one kind of server change.
Sync methods never raise on transport errors; the affected fields fall back
to empty defaults and the next idle cycle tries again.
"""

import copy
from typing import Callable, Iterable, Optional, TypeVar

from blessed import Terminal
from loguru import logger

from mpc_display.core.config import DisplayConfig
from mpc_display.domain.server.client import ServerClient
from mpc_display.domain.server.exceptions import TRANSPORT_ERRORS
from mpc_display.domain.server.models import Song, Status

from .components.layout import render_screen
from .helpers.terminal import frame, viewport_size, write_frame
from .state import Snapshot

T = TypeVar("T")

RATING_STICKER = "rating"

# Subsystem -> sync methods, run after the unconditional status refresh
SYNC_TABLE: dict[str, tuple[str, ...]] = {
    "player": ("sync_song", "sync_rating"),
    "mixer": (),
    "options": (),
    "queue": ("sync_queue", "sync_song", "sync_rating"),
    "playlist": ("sync_queue", "sync_song", "sync_rating"),
    "sticker": ("sync_rating",),
}


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class StateCache:
    """Owns the Snapshot and renders it."""

    def __init__(
        self,
        client: Optional[ServerClient],
        term: Terminal,
        options: DisplayConfig,
        data: Optional[Snapshot] = None,
    ):
        self.client = client
        self.term = term
        self.options = options
        self.data = data if data is not None else Snapshot(format=list(options.format))

    def _query(self, what: str, fetch: Callable[[], T], default: T) -> T:
        """Run one server query, substituting ``default`` on transport errors."""
        if self.client is None:
            return default
        try:
            return fetch()
        except TRANSPORT_ERRORS as e:
            logger.warning(f"{what} failed: {e}")
            return default

    # Syncs

    def sync_all(self) -> None:
        """Initial full sync."""
        self.sync_status()
        self.sync_song()
        self.sync_queue()
        self.sync_rating()

    def sync_status(self) -> None:
        status = self._query("status", lambda: self.client.status(), Status())
        data = self.data
        data.queue_pos = status.queue_pos
        data.queue_total = status.queue_len or None
        data.elapsed = status.elapsed
        data.duration = status.duration
        data.state = status.state
        data.volume = status.volume
        data.toggle_opts = status.toggle_opts
        data.crossfade = status.crossfade

    def sync_song(self) -> None:
        song = self._query("currentsong", lambda: self.client.current_song(), Song())
        data = self.data

        album = song.get_tag("album")
        album_track = _parse_int(song.get_tag("track"))

        # One-entry cache: only search when the album changed
        if album == data.prev_album:
            album_total = data.prev_album_total
        else:
            album_total = self.album_size(album)
        data.prev_album = album
        data.prev_album_total = album_total

        data.song = song
        data.artist = song.artist
        data.title = song.title
        data.album = album
        data.date = song.get_tag("date")
        data.album_track = album_track
        data.album_total = album_total

    def sync_queue(self) -> None:
        queue = self._query("playlistinfo", lambda: self.client.queue(), [])
        data = self.data

        if self.options.verbose:
            data.verbose_tags = []
        else:
            data.verbose_tags = [self._is_repeated(tag, queue) for tag in data.format]
        data.queue = queue

    sync_playlist = sync_queue

    @staticmethod
    def _is_repeated(tag: str, queue: list[Song]) -> bool:
        """True when every row shares the first row's value for ``tag``."""
        # Hiding titles would leave rows with nothing to tell them apart
        if tag == "title":
            return False
        first = queue[0].get_tag(tag) if queue else ""
        for song in queue:
            if song.get_tag(tag) != first:
                return False
        return True

    def sync_rating(self) -> None:
        uri = self.data.song.file
        if not uri:
            self.data.rating = None
            return
        self.data.rating = self._query(
            "sticker get",
            lambda: self.client.get_sticker(uri, RATING_STICKER),
            None,
        )

    def album_size(self, album: Optional[str]) -> Optional[int]:
        """Number of songs tagged with ``album``, None if unknown."""
        if not album:
            return None
        results = self._query("search", lambda: self.client.search("album", album), None)
        return len(results) if results is not None else None

    def apply_changes(self, subsystems: Iterable[str]) -> None:
        """Refresh whatever the changed subsystems affect.

        ``subscription`` is handled by the signal coordinator, not here.
        """
        for subsystem in subsystems:
            # The projector needs fresh status every cycle
            self.sync_status()
            for method in SYNC_TABLE.get(subsystem, ()):
                getattr(self, method)()

    # Projection

    def increment_elapsed(self, seconds: float) -> None:
        if self.data.elapsed is not None:
            self.data.elapsed += seconds

    def detached_copy(self) -> "StateCache":
        """Copy with its own Snapshot and no connection, for the projector."""
        return StateCache(None, self.term, self.options, copy.deepcopy(self.data))

    # Rendering

    def render(self, height: Optional[int] = None, width: Optional[int] = None) -> str:
        if height is None or width is None:
            term_height, term_width = viewport_size(self.term)
            height = term_height if height is None else height
            width = term_width if width is None else width
        return render_screen(self.term, self.data, self.options, height, width)

    def frame(self) -> str:
        """Full-redraw text for the current Snapshot."""
        return frame(self.term, self.render())

    def draw(self) -> None:
        """Redraw the whole screen from the Snapshot."""
        write_frame(self.term, self.render())
