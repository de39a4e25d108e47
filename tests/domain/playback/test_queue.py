"""Tests for the playback queue and its cursor."""

import pytest

from bz_player.domain.playback.exceptions import IndexOutOfBounds
from bz_player.domain.playback.queue import PlaybackQueue


@pytest.fixture
def abc(make_track):
    queue = PlaybackQueue()
    for name in ("A", "B", "C"):
        queue.append(make_track(name))
    return queue


class TestAppend:
    def test_returns_new_length(self, make_track):
        queue = PlaybackQueue()
        assert queue.append(make_track("A")) == 1
        assert queue.append(make_track("B")) == 2
        assert queue.cursor is None

    def test_extend(self, make_track):
        queue = PlaybackQueue()
        assert queue.extend([make_track("A"), make_track("B")]) == 2
        assert queue.names() == ["A", "B"]


class TestCursor:
    def test_advance_through_last_entry(self, abc):
        """The last entry is reachable; one past it is not."""
        abc.jump(1)
        assert abc.advance().name == "B"
        assert abc.advance().name == "C"
        assert abc.is_last()
        with pytest.raises(IndexOutOfBounds):
            abc.advance()
        assert abc.cursor == 2

    def test_advance_from_unstarted_queue_starts_at_first(self, abc):
        assert abc.advance().name == "A"
        assert abc.position == 1

    def test_retreat(self, abc):
        abc.jump(2)
        assert abc.retreat().name == "A"
        with pytest.raises(IndexOutOfBounds):
            abc.retreat()

    def test_retreat_unstarted(self, abc):
        with pytest.raises(IndexOutOfBounds):
            abc.retreat()

    def test_neighbour_lookups_leave_cursor_alone(self, abc):
        assert abc.next_index() == 0
        abc.jump(2)
        assert abc.next_index() == 2
        assert abc.prev_index() == 0
        assert abc.index(3) == 2
        assert abc.cursor == 1

    def test_next_index_at_last_entry(self, abc):
        abc.jump(3)
        with pytest.raises(IndexOutOfBounds):
            abc.next_index()
        assert abc.cursor == 2

    @pytest.mark.parametrize("position", [1, 2, 3])
    def test_jump_in_bounds(self, abc, position):
        assert abc.jump(position) is abc.entries[position - 1]
        assert abc.cursor == position - 1

    @pytest.mark.parametrize("position", [-1, 0, 4, 100])
    def test_jump_out_of_bounds(self, abc, position):
        abc.jump(2)
        with pytest.raises(IndexOutOfBounds):
            abc.jump(position)
        assert abc.cursor == 1

    def test_empty_queue_is_last(self):
        assert PlaybackQueue().is_last()
        assert PlaybackQueue().current() is None


class TestRemove:
    @pytest.mark.parametrize("position", [0, 4])
    def test_out_of_bounds(self, abc, position):
        with pytest.raises(IndexOutOfBounds):
            abc.remove(position)

    def test_before_cursor_keeps_same_track(self, abc):
        abc.jump(3)
        removed, was_current = abc.remove(1)
        assert removed.name == "A"
        assert not was_current
        assert abc.current().name == "C"
        assert abc.cursor == 1

    def test_after_cursor(self, abc):
        abc.jump(1)
        abc.remove(3)
        assert abc.current().name == "A"

    def test_current_slides_next_into_place(self, abc):
        abc.jump(2)
        removed, was_current = abc.remove(2)
        assert removed.name == "B"
        assert was_current
        assert abc.current().name == "C"

    def test_current_last_moves_cursor_to_new_last(self, abc):
        abc.jump(3)
        _, was_current = abc.remove(3)
        assert was_current
        assert abc.cursor == 1
        assert abc.current().name == "B"

    def test_removing_everything(self, abc):
        abc.jump(1)
        for _ in range(3):
            abc.remove(1)
        assert len(abc) == 0
        assert abc.cursor is None

    def test_unstarted_queue_cursor_stays_unset(self, abc):
        abc.remove(1)
        assert abc.cursor is None


class TestQueries:
    def test_ids_and_get(self, abc):
        assert abc.ids() == [track.id for track in abc.entries]
        assert abc.get(2).name == "B"
        with pytest.raises(IndexOutOfBounds):
            abc.get(4)

    def test_clear(self, abc):
        abc.jump(2)
        abc.clear()
        assert len(abc) == 0
        assert abc.position is None
