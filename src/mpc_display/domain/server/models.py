"""Typed views over MPD reply dictionaries."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class PlayState(str, Enum):
    """Playback state as reported by ``status``."""

    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"


def _join(value: Any) -> str:
    """Flatten multi-valued tags (python-mpd2 returns a list) into one string."""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _to_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_bool(value: Any) -> bool:
    # single can be "oneshot"
    return str(value) not in ("", "0")


@dataclass
class Song:
    """A track in the queue or the current song."""

    file: str = ""
    title: Optional[str] = None
    artist: Optional[str] = None
    tags: dict[str, str] = field(default_factory=dict)
    pos: Optional[int] = None

    @classmethod
    def from_mpd(cls, data: Optional[dict]) -> "Song":
        """Build a Song from a ``currentsong`` / ``playlistinfo`` entry."""
        if not data:
            return cls()

        tags = {str(k): _join(v) for k, v in data.items()}
        song = cls(file=tags.get("file", ""), tags=tags, pos=_to_int(data.get("pos")))
        song.title = song.get_tag("title")
        song.artist = song.get_tag("artist")
        return song

    def get_tag(self, tag: str) -> Optional[str]:
        """Look up a tag by name, ignoring case."""
        if tag == "title" and self.title is not None:
            return self.title
        if tag == "artist" and self.artist is not None:
            return self.artist

        wanted = tag.lower()
        value = None
        for key, tag_value in self.tags.items():
            if key.lower() == wanted:
                value = tag_value
        return value

    @property
    def filename(self) -> str:
        """Last path component of the file, used when the title tag is missing."""
        return self.file.rsplit("/", 1)[-1]


@dataclass
class Status:
    """Parsed ``status`` reply."""

    state: PlayState = PlayState.STOP
    volume: int = 0
    repeat: bool = False
    random: bool = False
    single: bool = False
    consume: bool = False
    queue_pos: Optional[int] = None
    queue_len: int = 0
    elapsed: Optional[float] = None
    duration: Optional[float] = None
    crossfade: Optional[int] = None

    @classmethod
    def from_mpd(cls, data: Optional[dict]) -> "Status":
        if not data:
            return cls()

        try:
            state = PlayState(data.get("state", "stop"))
        except ValueError:
            state = PlayState.STOP

        elapsed = _to_float(data.get("elapsed"))
        duration = _to_float(data.get("duration"))
        # Older servers only report "time: <elapsed>:<total>"
        if "time" in data and (elapsed is None or duration is None):
            parts = str(data["time"]).split(":")
            if len(parts) == 2:
                if elapsed is None:
                    elapsed = _to_float(parts[0])
                if duration is None:
                    duration = _to_float(parts[1])

        volume = _to_int(data.get("volume"))

        return cls(
            state=state,
            volume=volume if volume is not None else 0,
            repeat=_to_bool(data.get("repeat", "0")),
            random=_to_bool(data.get("random", "0")),
            single=_to_bool(data.get("single", "0")),
            consume=_to_bool(data.get("consume", "0")),
            queue_pos=_to_int(data.get("song")),
            queue_len=_to_int(data.get("playlistlength")) or 0,
            elapsed=elapsed,
            duration=duration,
            crossfade=_to_int(data.get("xfade")),
        )

    @property
    def toggle_opts(self) -> list[bool]:
        """Repeat, random, single, consume, in that order."""
        return [self.repeat, self.random, self.single, self.consume]
