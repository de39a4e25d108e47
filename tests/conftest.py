"""Shared fixtures: temporary catalogs, placeholder songs and a fake audio backend."""

from pathlib import Path

import pytest

from bz_player.domain.library.catalog import CatalogStore
from bz_player.domain.library.models import Track
from bz_player.domain.playback.engine import PlaybackEngine
from bz_player.domain.playback.player import AudioSink
from bz_player.notifications import NotificationChannel


class FakeBackend:
    """In-memory stand-in for mpv.

    A loaded path means the sink holds a stream; finish() simulates the
    stream reaching its natural end.
    """

    def __init__(self):
        self.loaded = None
        self.paused = False
        self.closed = False
        self.refuse = False  # Simulates mpv rejecting loadfile
        self.loads = []

    def load(self, path):
        if self.refuse:
            return False
        self.loaded = path
        self.paused = False
        self.loads.append(path)
        return True

    def stop(self):
        self.loaded = None
        return True

    def set_paused(self, paused):
        self.paused = paused
        return True

    def is_idle(self):
        return self.loaded is None

    def is_paused(self):
        return self.paused

    def close(self):
        self.closed = True

    def finish(self):
        self.loaded = None


def make_song(folder: Path, filename: str) -> Path:
    """Create an empty placeholder file (contents are never decoded)."""
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / filename
    path.write_bytes(b"")
    return path


@pytest.fixture
def channel():
    return NotificationChannel()


@pytest.fixture
def catalog(tmp_path, channel):
    store = CatalogStore(tmp_path / "song.db", channel)
    yield store
    store.close()


@pytest.fixture
def music_dir(tmp_path):
    folder = tmp_path / "music"
    folder.mkdir()
    return folder


@pytest.fixture
def make_track(music_dir):
    """Factory for valid tracks backed by placeholder files."""
    counter = iter(range(1, 10_000))

    def _make(name: str, extension: str = "mp3") -> Track:
        path = make_song(music_dir, f"{name}.{extension}")
        return Track(name, str(path), next(counter))

    return _make


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def engine(backend, channel, monkeypatch):
    """Engine over the fake backend with a fast watcher.

    Metadata probing is stubbed out: the placeholder files are not audio.
    """
    monkeypatch.setattr(
        "bz_player.domain.library.metadata.probe_audio", lambda path: (None, None)
    )
    playback_engine = PlaybackEngine(AudioSink(backend), channel, poll_interval=0.01)
    yield playback_engine
    playback_engine.shutdown()


@pytest.fixture
def song_file():
    """The make_song helper, for tests that need files outside music_dir."""
    return make_song
