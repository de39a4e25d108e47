"""Tests for Track validation and playlist models."""

import pytest

from bz_player.domain.library.exceptions import InvalidSongFormat, InvalidSongPath
from bz_player.domain.library.models import (
    Playlist,
    Track,
    is_valid_song_path,
    song_extension,
)


class TestTrack:
    """Tests for Track construction."""

    @pytest.mark.parametrize("filename", ["missing.mp3", "missing.txt", "missing"])
    def test_missing_file_is_invalid_path(self, tmp_path, filename):
        """A path that does not exist fails before the extension is checked."""
        with pytest.raises(InvalidSongPath):
            Track("missing", str(tmp_path / filename))

    @pytest.mark.parametrize("filename", ["notes.txt", "cover.jpg", "noext", "song.flac"])
    def test_unsupported_extension(self, tmp_path, filename):
        path = tmp_path / filename
        path.write_bytes(b"")
        with pytest.raises(InvalidSongFormat):
            Track(filename, str(path))

    @pytest.mark.parametrize("filename", ["a.mp3", "b.ogg", "c.wav", "D.MP3", "e.Wav"])
    def test_supported_extensions_case_insensitive(self, tmp_path, filename):
        path = tmp_path / filename
        path.write_bytes(b"")
        track = Track(filename, str(path), 7)
        assert track.id == 7
        assert track.get_path() == path

    def test_directory_is_not_a_song_path(self, tmp_path):
        """Directories pass the existence check but are never scanned as songs."""
        folder = tmp_path / "album.mp3"
        folder.mkdir()
        assert not is_valid_song_path(folder)

    def test_track_is_immutable(self, tmp_path):
        path = tmp_path / "a.mp3"
        path.write_bytes(b"")
        track = Track("a", str(path))
        with pytest.raises(AttributeError):
            track.name = "b"

    def test_id_defaults_to_none(self, tmp_path):
        path = tmp_path / "a.ogg"
        path.write_bytes(b"")
        assert Track("a", str(path)).id is None


class TestPathHelpers:
    def test_song_extension(self):
        assert song_extension("/x/y/Song.MP3") == "mp3"
        assert song_extension("/x/y/song") == ""

    def test_is_valid_song_path(self, tmp_path):
        good = tmp_path / "a.wav"
        good.write_bytes(b"")
        bad = tmp_path / "a.txt"
        bad.write_bytes(b"")
        assert is_valid_song_path(good)
        assert not is_valid_song_path(bad)
        assert not is_valid_song_path(tmp_path / "missing.mp3")


class TestPlaylist:
    def test_add_song_keeps_order(self, make_track):
        playlist = Playlist(id=1, name="Chill")
        first, second = make_track("one"), make_track("two")
        playlist.add_song(first)
        playlist.add_song(second)
        assert playlist.songs == [first, second]
        assert len(playlist) == 2
