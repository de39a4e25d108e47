"""Tests for the completion watcher thread."""

import time

import pytest

from bz_player import notifications
from bz_player.domain.playback.player import AudioSink
from bz_player.domain.playback.watcher import CompletionWatcher

POLL = 0.01


@pytest.fixture
def sink(backend):
    return AudioSink(backend)


@pytest.fixture
def watcher(sink, channel):
    completion = CompletionWatcher(sink, channel, poll_interval=POLL)
    completion.start()
    yield completion
    completion.stop()


def finished(channel, wait=0.2):
    """Collect TRACK_FINISHED notifications arriving within wait seconds."""
    time.sleep(wait)
    return [n for n in channel.drain() if n.kind == notifications.TRACK_FINISHED]


class TestCompletionWatcher:
    def test_parked_until_a_track_loads(self, watcher, channel):
        """An empty sink is not a completion before anything was loaded."""
        assert finished(channel) == []

    def test_single_notification_per_completion(self, watcher, backend, channel):
        backend.load("a.mp3")
        watcher.track_loaded(1)
        time.sleep(POLL * 5)
        backend.finish()

        events = finished(channel)

        assert len(events) == 1
        assert events[0].generation == 1
        assert events[0].source == notifications.WATCHER

    def test_detected_within_poll_interval(self, watcher, backend, channel):
        backend.load("a.mp3")
        watcher.track_loaded(1)
        time.sleep(POLL * 3)

        started = time.monotonic()
        backend.finish()
        notification = channel.get(timeout=1.0)
        elapsed = time.monotonic() - started

        assert notification.kind == notifications.TRACK_FINISHED
        # Generous bound for slow CI machines
        assert elapsed < POLL * 20

    def test_reload_before_end_reports_newest_generation(self, watcher, backend, channel):
        backend.load("a.mp3")
        watcher.track_loaded(1)
        time.sleep(POLL * 3)
        backend.load("b.mp3")
        watcher.track_loaded(2)
        time.sleep(POLL * 3)
        backend.finish()

        assert [n.generation for n in finished(channel)] == [2]

    def test_rearms_for_the_next_track(self, watcher, backend, channel):
        for generation in (1, 2):
            backend.load(f"{generation}.mp3")
            watcher.track_loaded(generation)
            time.sleep(POLL * 3)
            backend.finish()
            assert [n.generation for n in finished(channel)] == [generation]

    def test_never_touches_the_backend(self, watcher, backend, channel):
        backend.load("a.mp3")
        watcher.track_loaded(1)
        backend.finish()
        finished(channel)
        assert backend.loads == ["a.mp3"]

    def test_stop(self, sink, channel):
        completion = CompletionWatcher(sink, channel, poll_interval=POLL)
        completion.start()
        assert completion.is_alive()
        completion.stop()
        assert not completion.is_alive()
