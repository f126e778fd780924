"""Tests for StateCache incremental syncs."""

import pytest

from conftest import make_song
from mpc_display.core.config import DisplayConfig
from mpc_display.domain.server.models import PlayState, Status
from mpc_display.ui.blessed.cache import StateCache


@pytest.fixture
def album_server(server):
    """Server playing track 2 of a three-track album."""
    album = [
        make_song(f"Song {i}", "Band", "Record", file=f"band/record/{i}.flac", pos=i, track=str(i + 1), date="2001")
        for i in range(3)
    ]
    server.library = album + [make_song("Other", "Else", "Different", file="else/x.flac")]
    server.songs = list(album)
    server.song = album[1]
    server.status_value = Status(
        state=PlayState.PLAY, volume=55, repeat=True, queue_pos=1, queue_len=3,
        elapsed=10.0, duration=180.0, crossfade=3,
    )
    return server


class TestSyncStatus:
    """Test status field mapping."""

    def test_copies_status_fields(self, cache, album_server):
        cache.sync_status()
        data = cache.data
        assert data.state == PlayState.PLAY
        assert data.queue_pos == 1
        assert data.queue_total == 3
        assert data.elapsed == 10.0
        assert data.duration == 180.0
        assert data.volume == 55
        assert data.toggle_opts == [True, False, False, False]
        assert data.crossfade == 3

    def test_empty_queue_total_is_none(self, cache, server):
        server.status_value = Status(queue_len=0)
        cache.sync_status()
        assert cache.data.queue_total is None

    def test_transport_error_leaves_defaults(self, cache, album_server):
        cache.sync_status()
        album_server.failing.add("status")
        cache.sync_status()
        assert cache.data.state == PlayState.STOP
        assert cache.data.elapsed is None
        assert cache.data.queue_total is None


class TestSyncSong:
    """Test current song resolution and the album size cache."""

    def test_resolves_display_fields(self, cache, album_server):
        cache.sync_song()
        data = cache.data
        assert data.title == "Song 1"
        assert data.artist == "Band"
        assert data.album == "Record"
        assert data.date == "2001"
        assert data.album_track == 2
        assert data.album_total == 3

    def test_tag_lookup_ignores_case(self, cache, server):
        server.song = make_song("x", album=None, file="x.flac", Album="Loud Record", Track="4")
        cache.sync_song()
        assert cache.data.album == "Loud Record"
        assert cache.data.album_track == 4

    def test_same_album_searches_once(self, cache, album_server):
        cache.sync_song()
        album_server.song = album_server.songs[2]
        cache.sync_song()
        assert album_server.calls["search"] == 1
        assert cache.data.album_total == 3
        assert cache.data.album_track == 3

    def test_album_change_searches_again(self, cache, album_server):
        cache.sync_song()
        album_server.song = album_server.library[3]
        cache.sync_song()
        assert album_server.calls["search"] == 2
        assert cache.data.album_total == 1

    def test_no_album_skips_search(self, cache, server):
        server.song = make_song("x", album=None)
        cache.sync_song()
        assert server.calls["search"] == 0
        assert cache.data.album_total is None

    def test_search_failure_gives_unknown_total(self, cache, album_server):
        album_server.failing.add("search")
        cache.sync_song()
        assert cache.data.album_total is None
        assert cache.data.title == "Song 1"


class TestSyncQueue:
    """Test repeated-tag suppression."""

    def test_shared_album_is_suppressed(self, server, term):
        cache = StateCache(server, term, DisplayConfig(format=["title", "artist", "album"]))
        server.songs = [
            make_song(f"T{i}", f"Artist {i}", "Same Album", pos=i) for i in range(4)
        ]
        cache.sync_queue()
        assert cache.data.verbose_tags == [False, False, True]
        assert len(cache.data.queue) == 4

    def test_title_never_suppressed(self, server, term):
        cache = StateCache(server, term, DisplayConfig(format=["title", "artist"]))
        server.songs = [make_song("Same", "Same", pos=i) for i in range(3)]
        cache.sync_queue()
        assert cache.data.verbose_tags == [False, True]

    def test_verbose_mode_clears_flags(self, server, term):
        cache = StateCache(server, term, DisplayConfig(format=["title", "album"], verbose=True))
        server.songs = [make_song(pos=i) for i in range(3)]
        cache.sync_queue()
        assert cache.data.verbose_tags == []

    def test_empty_queue(self, cache, server):
        cache.sync_queue()
        assert cache.data.queue == []
        assert len(cache.data.verbose_tags) == len(cache.data.format)


class TestSyncRating:
    def test_reads_rating_sticker(self, cache, album_server):
        album_server.stickers[("band/record/1.flac", "rating")] = "8"
        cache.sync_song()
        cache.sync_rating()
        assert cache.data.rating == "8"

    def test_missing_sticker_is_no_rating(self, cache, album_server):
        cache.sync_song()
        cache.sync_rating()
        assert cache.data.rating is None

    def test_no_current_song(self, cache, server):
        cache.sync_rating()
        assert cache.data.rating is None
        assert server.calls["get_sticker"] == 0


class TestApplyChanges:
    """Test the subsystem -> sync dispatch table."""

    def test_player_change(self, cache, album_server):
        cache.apply_changes(["player"])
        assert album_server.calls["status"] == 1
        assert album_server.calls["current_song"] == 1
        assert album_server.calls["get_sticker"] == 1
        assert album_server.calls["queue"] == 0

    @pytest.mark.parametrize("subsystem", ["mixer", "options", "subscription", "database"])
    def test_status_only_changes(self, cache, album_server, subsystem):
        cache.apply_changes([subsystem])
        assert album_server.calls["status"] == 1
        assert album_server.calls["current_song"] == 0
        assert album_server.calls["queue"] == 0

    @pytest.mark.parametrize("subsystem", ["queue", "playlist"])
    def test_queue_change(self, cache, album_server, subsystem):
        cache.apply_changes([subsystem])
        assert album_server.calls["queue"] == 1
        assert album_server.calls["current_song"] == 1
        assert album_server.calls["get_sticker"] == 1

    def test_sticker_change(self, cache, album_server):
        cache.sync_song()
        album_server.stickers[("band/record/1.flac", "rating")] = "3"
        cache.apply_changes(["sticker"])
        assert cache.data.rating == "3"
        assert album_server.calls["current_song"] == 1

    def test_status_refreshed_per_subsystem(self, cache, album_server):
        cache.apply_changes(["mixer", "options"])
        assert album_server.calls["status"] == 2


class TestProjectionCopy:
    def test_increment_elapsed(self, cache, album_server):
        cache.sync_status()
        cache.increment_elapsed(5)
        assert cache.data.elapsed == 15.0

    def test_increment_without_elapsed_is_noop(self, cache):
        cache.increment_elapsed(5)
        assert cache.data.elapsed is None

    def test_detached_copy_is_independent(self, cache, album_server):
        cache.sync_all()
        copy = cache.detached_copy()
        copy.increment_elapsed(1)
        copy.data.queue.clear()
        assert cache.data.elapsed == 10.0
        assert len(cache.data.queue) == 3
        assert copy.client is None


class TestRender:
    def test_render_uses_given_size(self, cache, album_server):
        cache.sync_all()
        lines = cache.render(height=8, width=80).split("\n")
        assert len(lines) == 8
        assert lines[0] == "Band * Song 1"
        assert lines[5].startswith("> 2  Song 1")

    def test_render_falls_back_to_default_size(self, cache):
        # The test terminal writes to a StringIO, which has no size
        assert len(cache.render().split("\n")) == 24

    def test_frame_wraps_render(self, cache):
        text = cache.frame()
        assert text.startswith(cache.term.clear)
        assert text.endswith(cache.term.home)
        assert len(text.split("\n")) == 24
