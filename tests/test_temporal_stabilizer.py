"""Tests for direction rate limiting and the mouth-closed debounce."""

from helpers import make_candidate
from depth_tongue_tracker.config import StabilizerSettings
from depth_tongue_tracker.direction import DirectionSymbol
from depth_tongue_tracker.temporal_stabilizer import StabilizerState, TemporalStabilizer

NORTH_WEST = make_candidate(0.1, 0.1)
EAST = make_candidate(0.9, 0.5)


def feed(stabilizer, mouth_open, candidate, frames):
    return [stabilizer.update(mouth_open, candidate) for _ in range(frames)]


def open_and_emit(stabilizer, candidate=NORTH_WEST):
    """Run exactly one rate-limit cycle so a direction is emitted."""
    updates = feed(stabilizer, True, candidate, stabilizer.settings.update_interval_frames + 1)
    assert updates[-1].emitted
    return updates


class TestRateLimiter:

    def test_first_direction_on_fifth_open_frame(self):
        stabilizer = TemporalStabilizer()
        updates = feed(stabilizer, True, NORTH_WEST, 5)

        assert [u.emitted for u in updates] == [False, False, False, False, True]
        assert all(u.direction is None for u in updates[:4])
        assert updates[4].direction == DirectionSymbol.NORTH_WEST
        assert updates[4].position == (0.1, 0.1)
        assert updates[4].state == StabilizerState.OPEN_TRACKING

    def test_direction_held_between_updates(self):
        stabilizer = TemporalStabilizer()
        open_and_emit(stabilizer)

        waiting = feed(stabilizer, True, EAST, 4)
        assert all(u.direction == DirectionSymbol.NORTH_WEST for u in waiting)
        assert all(u.state == StabilizerState.OPEN_WAITING for u in waiting)

        update = stabilizer.update(True, EAST)
        assert update.emitted
        assert update.direction == DirectionSymbol.EAST

    def test_zero_interval_emits_every_frame(self):
        stabilizer = TemporalStabilizer(StabilizerSettings(update_interval_frames=0))
        assert stabilizer.update(True, NORTH_WEST).direction == DirectionSymbol.NORTH_WEST
        assert stabilizer.update(True, EAST).direction == DirectionSymbol.EAST

    def test_custom_thresholds_are_used(self):
        settings = StabilizerSettings(update_interval_frames=0, low_threshold=0.05, high_threshold=0.95)
        stabilizer = TemporalStabilizer(settings)
        assert stabilizer.update(True, NORTH_WEST).direction == DirectionSymbol.CENTER


class TestClosedDebounce:

    def test_closed_after_five_frames(self):
        stabilizer = TemporalStabilizer()
        open_and_emit(stabilizer)

        updates = feed(stabilizer, False, NORTH_WEST, 5)
        assert all(u.direction == DirectionSymbol.NORTH_WEST for u in updates[:4])
        assert all(u.state != StabilizerState.CLOSED for u in updates[:4])
        assert updates[4].direction == DirectionSymbol.CLOSED
        assert updates[4].state == StabilizerState.CLOSED
        assert updates[4].emitted

    def test_closed_emitted_once(self):
        stabilizer = TemporalStabilizer()
        updates = feed(stabilizer, False, NORTH_WEST, 8)
        assert [u.emitted for u in updates] == [False] * 4 + [True] + [False] * 3
        assert updates[-1].direction == DirectionSymbol.CLOSED

    def test_single_open_frame_resets_closed_streak(self):
        stabilizer = TemporalStabilizer()
        open_and_emit(stabilizer)

        feed(stabilizer, False, NORTH_WEST, 3)
        stabilizer.update(True, NORTH_WEST)
        assert stabilizer.closed_count == 0

        updates = feed(stabilizer, False, NORTH_WEST, 4)
        assert all(u.direction != DirectionSymbol.CLOSED for u in updates)
        assert stabilizer.update(False, NORTH_WEST).direction == DirectionSymbol.CLOSED

    def test_open_frame_leaves_closed_state_immediately(self):
        stabilizer = TemporalStabilizer()
        feed(stabilizer, False, NORTH_WEST, 5)
        assert stabilizer.state == StabilizerState.CLOSED

        update = stabilizer.update(True, EAST)
        assert update.state == StabilizerState.OPEN_WAITING
        # Glyph changes at the next rate-limited emission
        assert update.direction == DirectionSymbol.CLOSED

    def test_closed_frames_do_not_advance_rate_limiter(self):
        stabilizer = TemporalStabilizer()
        feed(stabilizer, True, NORTH_WEST, 2)
        feed(stabilizer, False, NORTH_WEST, 3)
        assert stabilizer.update_count == 2


class TestMissingCandidate:

    def test_frame_without_candidate_changes_nothing(self):
        stabilizer = TemporalStabilizer()
        open_and_emit(stabilizer)
        feed(stabilizer, False, NORTH_WEST, 2)

        for _ in range(10):
            update = stabilizer.update(False, None)
            assert not update.emitted
            assert update.direction == DirectionSymbol.NORTH_WEST
        assert stabilizer.closed_count == 2

        feed(stabilizer, True, None, 10)
        assert stabilizer.update_count == 0


def test_reset():
    stabilizer = TemporalStabilizer()
    open_and_emit(stabilizer)
    stabilizer.reset()

    assert stabilizer.direction is None
    assert stabilizer.position is None
    assert stabilizer.update_count == 0
    assert stabilizer.closed_count == 0
