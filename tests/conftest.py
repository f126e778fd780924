"""Shared fixtures: an in-memory MPD stand-in and an unstyled terminal."""

import io
from collections import Counter
from typing import Optional

import pytest
from blessed import Terminal
from mpd import ConnectionError as MPDConnectionError

from mpc_display.core.config import DisplayConfig
from mpc_display.domain.server.models import Song, Status
from mpc_display.ui.blessed.cache import StateCache


def make_song(
    title: Optional[str] = "Song",
    artist: Optional[str] = "Artist",
    album: Optional[str] = "Album",
    file: str = "music/song.flac",
    pos: Optional[int] = None,
    **extra: str,
) -> Song:
    data = {"file": file}
    if title is not None:
        data["title"] = title
    if artist is not None:
        data["artist"] = artist
    if album is not None:
        data["album"] = album
    if pos is not None:
        data["pos"] = str(pos)
    data.update(extra)
    return Song.from_mpd(data)


class FakeServer:
    """Implements the ServerClient surface in memory and counts calls."""

    def __init__(self):
        self.calls: Counter = Counter()
        self.failing: set[str] = set()
        self.status_value = Status()
        self.song = Song()
        self.songs: list[Song] = []
        self.library: list[Song] = []
        self.stickers: dict[tuple[str, str], str] = {}
        self.subscribed: list[str] = []
        self.changes: list[list[str]] = []
        self.commands: list[tuple] = []

    def _call(self, name: str) -> None:
        self.calls[name] += 1
        if name in self.failing:
            raise MPDConnectionError(f"{name}: connection lost")

    def status(self) -> Status:
        self._call("status")
        return self.status_value

    def current_song(self) -> Song:
        self._call("current_song")
        return self.song

    def queue(self) -> list[Song]:
        self._call("queue")
        return list(self.songs)

    def wait_for_change(self, subsystems=()) -> list[str]:
        self._call("wait_for_change")
        return self.changes.pop(0) if self.changes else []

    def search(self, tag: str, value: str, window=(0, 65535)) -> list[Song]:
        self._call("search")
        return [s for s in self.library if s.get_tag(tag) == value][window[0]:window[1]]

    def get_sticker(self, uri: str, key: str) -> Optional[str]:
        self._call("get_sticker")
        return self.stickers.get((uri, key))

    def set_sticker(self, uri: str, key: str, value: str) -> None:
        self._call("set_sticker")
        self.stickers[(uri, key)] = value

    def delete_sticker(self, uri: str, key: str) -> None:
        self._call("delete_sticker")
        self.stickers.pop((uri, key), None)

    def subscribe(self, channel: str) -> None:
        self._call("subscribe")
        self.commands.append(("subscribe", channel))
        if channel not in self.subscribed:
            self.subscribed.append(channel)

    def unsubscribe(self, channel: str) -> None:
        self._call("unsubscribe")
        self.commands.append(("unsubscribe", channel))
        if channel in self.subscribed:
            self.subscribed.remove(channel)

    def channels(self) -> list[str]:
        self._call("channels")
        return list(self.subscribed)

    def close(self) -> None:
        self.calls["close"] += 1

    def abort(self) -> None:
        self.calls["abort"] += 1

    def __getattr__(self, name: str):
        # Playback verbs just get recorded
        if name in {
            "play", "pause", "previous", "next", "stop", "set_volume", "seek_to",
            "set_repeat", "set_random", "set_single", "set_consume", "shuffle",
            "set_crossfade",
        }:
            def command(*args):
                self._call(name)
                self.commands.append((name, *args))
            return command
        raise AttributeError(name)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def term() -> Terminal:
    """Terminal that emits no escape sequences, so output is plain text."""
    return Terminal(stream=io.StringIO(), force_styling=None)


@pytest.fixture
def options() -> DisplayConfig:
    return DisplayConfig()


@pytest.fixture
def cache(server: FakeServer, term: Terminal, options: DisplayConfig) -> StateCache:
    return StateCache(server, term, options)
