"""Tests for the playback engine state machine (fake audio backend)."""

import os
import time

import pytest

from bz_player import notifications
from bz_player.domain.library.exceptions import SongAccessError
from bz_player.domain.library.models import Playlist
from bz_player.domain.playback.exceptions import EmptyQueue, IndexOutOfBounds, LastSong
from bz_player.domain.playback.player import SinkState


def wait_for_finish(channel, timeout=2.0):
    """Return the next TRACK_FINISHED notification, or None on timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        notification = channel.get(timeout=0.05)
        if notification and notification.kind == notifications.TRACK_FINISHED:
            return notification
    return None


@pytest.fixture
def abc(engine, make_track):
    """Engine playing A with B and C queued behind it."""
    tracks = [make_track(name) for name in ("A", "B", "C")]
    for track in tracks:
        engine.add_track(track)
    return tracks


class TestAddTrack:
    def test_first_track_starts_playing(self, engine, backend, make_track):
        track = make_track("A")
        assert engine.add_track(track) == 1
        assert backend.loads == [track.path]
        assert engine.state() is SinkState.PLAYING
        assert engine.current_position() == 1

    def test_later_tracks_only_queue(self, engine, backend, abc):
        assert backend.loads == [abc[0].path]
        assert engine.queue_names() == ["A", "B", "C"]
        assert engine.current_track() is abc[0]

    def test_add_after_queue_ran_out_plays_new_track(self, engine, backend, make_track):
        engine.add_track(make_track("A"))
        backend.finish()
        late = make_track("Late")

        assert engine.add_track(late) == 2
        assert backend.loaded == late.path
        assert engine.current_position() == 2

    def test_add_playlist(self, engine, backend, make_track):
        playlist = Playlist(id=1, name="Chill", songs=[make_track("A"), make_track("B")])
        assert engine.add_playlist(playlist) == 2
        assert backend.loads == [playlist.songs[0].path]

    def test_add_playlist_to_running_queue(self, engine, backend, abc, make_track):
        playlist = Playlist(id=1, name="More", songs=[make_track("D")])
        assert engine.add_playlist(playlist) == 4
        assert backend.loads == [abc[0].path]

    def test_add_empty_playlist(self, engine, backend):
        assert engine.add_playlist(Playlist(id=1, name="Empty")) == 0
        assert backend.loads == []


class TestTransport:
    def test_play_empty_queue(self, engine):
        with pytest.raises(EmptyQueue):
            engine.play()
        with pytest.raises(EmptyQueue):
            engine.play(forced=True)

    def test_resume_does_not_reload(self, engine, backend, abc):
        engine.pause()
        assert engine.state() is SinkState.PAUSED
        engine.play()
        assert engine.state() is SinkState.PLAYING
        assert len(backend.loads) == 1

    def test_resume_when_playing_is_noop(self, engine, backend, abc):
        engine.play()
        assert engine.state() is SinkState.PLAYING
        assert len(backend.loads) == 1

    def test_forced_play_reloads_current(self, engine, backend, abc):
        engine.play(forced=True)
        assert backend.loads == [abc[0].path, abc[0].path]

    def test_pause_when_empty_is_noop(self, engine, backend):
        engine.pause()
        assert engine.state() is SinkState.EMPTY
        assert not backend.paused

    def test_toggle(self, engine, abc):
        assert engine.toggle() is SinkState.PAUSED
        assert engine.toggle() is SinkState.PLAYING

    def test_toggle_empty_sink_starts_queue(self, engine, backend, abc):
        backend.finish()
        assert engine.toggle() is SinkState.PLAYING
        assert backend.loaded == abc[0].path

    def test_next_track_until_last(self, engine, backend, abc):
        """[A, B, C] at A: two skips reach C, a third fails and stays on C."""
        assert engine.next_track() is abc[1]
        assert engine.next_track() is abc[2]
        assert engine.queue.cursor == 2

        with pytest.raises(IndexOutOfBounds):
            engine.next_track()

        assert engine.queue.cursor == 2
        assert backend.loaded == abc[2].path

    def test_prev_track(self, engine, backend, abc):
        engine.jump_track(3)
        assert engine.prev_track() is abc[1]
        assert backend.loaded == abc[1].path

    def test_prev_at_first(self, engine, abc):
        with pytest.raises(IndexOutOfBounds):
            engine.prev_track()

    @pytest.mark.parametrize("position", [1, 2, 3])
    def test_jump_reloads(self, engine, backend, abc, position):
        assert engine.jump_track(position) is abc[position - 1]
        assert backend.loads[-1] == abc[position - 1].path
        assert len(backend.loads) == 2

    @pytest.mark.parametrize("position", [0, 4, -2])
    def test_jump_out_of_bounds(self, engine, backend, abc, position):
        with pytest.raises(IndexOutOfBounds):
            engine.jump_track(position)
        assert len(backend.loads) == 1

    def test_unreadable_file_raises_song_access_error(self, engine, make_track):
        track = make_track("A")
        os.remove(track.path)
        with pytest.raises(SongAccessError):
            engine.add_track(track)

    def test_missing_next_file_keeps_cursor(self, engine, backend, abc):
        os.remove(abc[1].path)
        with pytest.raises(SongAccessError):
            engine.next_track()

        assert engine.queue.cursor == 0
        assert engine.current_position() == 1
        assert backend.loaded == abc[0].path

    def test_missing_jump_target_keeps_cursor(self, engine, backend, abc):
        os.remove(abc[2].path)
        with pytest.raises(SongAccessError):
            engine.jump_track(3)

        assert engine.current_track() is abc[0]
        assert backend.loads == [abc[0].path]

    def test_refused_load_is_not_announced(self, engine, backend, channel, make_track):
        backend.refuse = True
        with pytest.raises(SongAccessError):
            engine.add_track(make_track("A"))

        assert engine.queue.cursor is None
        assert [n.message for n in channel.drain()] == []
        assert wait_for_finish(channel, timeout=0.2) is None

    def test_refused_next_stops_playback(self, engine, backend, abc):
        generation = engine.generation
        backend.refuse = True
        with pytest.raises(SongAccessError):
            engine.next_track()

        assert engine.queue.cursor == 0
        assert engine.state() is SinkState.EMPTY
        assert engine.handle_track_finished(generation) is None

    def test_every_load_bumps_generation(self, engine, abc):
        start = engine.generation
        engine.next_track()
        engine.jump_track(1)
        assert engine.generation == start + 2


class TestRemoveTrack:
    def test_remove_only_entry_empties_sink(self, engine, backend, make_track):
        track = make_track("A")
        engine.add_track(track)

        outcome = engine.remove_track(1)

        assert outcome.removed is track
        assert outcome.queue_empty
        assert outcome.now_playing is None
        assert engine.state() is SinkState.EMPTY

    def test_remove_all_entries(self, engine, abc):
        outcomes = [engine.remove_track(1) for _ in abc]
        assert [o.queue_empty for o in outcomes] == [False, False, True]
        assert engine.state() is SinkState.EMPTY
        assert engine.queue_names() == []

    def test_remove_current_loads_next(self, engine, backend, abc):
        outcome = engine.remove_track(1)
        assert outcome.now_playing is abc[1]
        assert backend.loaded == abc[1].path
        assert engine.current_position() == 1

    def test_remove_before_cursor_keeps_playing(self, engine, backend, abc):
        engine.jump_track(3)
        outcome = engine.remove_track(1)
        assert outcome.now_playing is None
        assert engine.current_track() is abc[2]
        assert engine.current_position() == 2
        assert backend.loaded == abc[2].path

    def test_remove_current_last_stops(self, engine, abc):
        engine.jump_track(3)
        outcome = engine.remove_track(3)
        assert not outcome.queue_empty
        assert engine.state() is SinkState.EMPTY
        assert engine.current_track() is abc[1]

    def test_remove_out_of_bounds(self, engine, abc):
        with pytest.raises(IndexOutOfBounds):
            engine.remove_track(4)

    def test_clear_tracks(self, engine, abc):
        engine.clear_tracks()
        assert engine.queue_names() == []
        assert engine.state() is SinkState.EMPTY
        assert engine.current_position() is None


class TestTrackFinished:
    def test_stale_generation_is_ignored(self, engine, abc):
        stale = engine.generation
        engine.next_track()
        assert engine.handle_track_finished(stale) is None
        assert engine.current_track() is abc[1]

    def test_current_generation_advances(self, engine, backend, abc):
        assert engine.handle_track_finished(engine.generation) is abc[1]
        assert backend.loaded == abc[1].path

    def test_last_song(self, engine, abc):
        engine.jump_track(3)
        with pytest.raises(LastSong):
            engine.handle_track_finished(engine.generation)

    def test_natural_end_reaches_control_loop(self, engine, backend, channel, abc):
        """The watcher reports the end; the engine then plays the next track."""
        backend.finish()
        notification = wait_for_finish(channel)

        assert notification is not None
        assert notification.generation == engine.generation
        assert engine.handle_track_finished(notification.generation) is abc[1]

    def test_stop_reports_stale_finish(self, engine, channel, abc):
        """Emptying the sink on purpose does not advance the queue."""
        engine.clear_tracks()
        notification = wait_for_finish(channel)
        assert notification is not None
        assert engine.handle_track_finished(notification.generation) is None


class TestQueries:
    def test_song_detail(self, engine, abc):
        assert engine.song_detail(2) is abc[1]
        with pytest.raises(IndexOutOfBounds):
            engine.song_detail(9)

    def test_queue_ids_and_is_last(self, engine, abc):
        assert engine.queue_ids() == [t.id for t in abc]
        assert not engine.is_last()
        engine.jump_track(3)
        assert engine.is_last()

    def test_shutdown_closes_backend(self, engine, backend):
        engine.shutdown()
        assert backend.closed
        assert not engine.watcher.is_alive()
