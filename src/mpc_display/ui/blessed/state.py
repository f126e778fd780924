"""Display state - the local mirror of server state."""

from dataclasses import dataclass, field
from typing import Optional

from mpc_display.domain.server.models import PlayState, Song


@dataclass
class Snapshot:
    """Everything the renderer needs, owned by the StateCache.

    The elapsed-time projector receives a deep copy, never this instance.
    """

    # Non-music data
    format: list[str] = field(default_factory=list)
    verbose_tags: list[bool] = field(default_factory=list)
    prev_album: Optional[str] = None
    prev_album_total: Optional[int] = None

    # Music data
    song: Song = field(default_factory=Song)
    queue: list[Song] = field(default_factory=list)
    artist: Optional[str] = None
    title: Optional[str] = None
    album: Optional[str] = None
    date: Optional[str] = None
    album_track: Optional[int] = None
    album_total: Optional[int] = None
    queue_pos: Optional[int] = None
    queue_total: Optional[int] = None
    elapsed: Optional[float] = None
    duration: Optional[float] = None
    state: PlayState = PlayState.STOP
    volume: int = 0
    toggle_opts: list[bool] = field(default_factory=lambda: [False] * 4)
    crossfade: Optional[int] = None
    rating: Optional[str] = None

    @property
    def display_title(self) -> str:
        """Title tag, or the file name when the song has no title."""
        if self.title is not None:
            return self.title
        return self.song.filename or "?"
