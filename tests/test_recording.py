"""Tests for capture session recording and replay."""

import numpy as np
import pytest

from helpers import make_session_arrays
from depth_tongue_tracker.face_input import DetectionResult
from depth_tongue_tracker.mouth_region import Point2D
from depth_tongue_tracker.recording import RecordingError, RecordingPlayer, save_recording


@pytest.fixture
def session_path(tmp_path):
    return save_recording(tmp_path / "session.npz", **make_session_arrays())


class TestSaveRecording:

    def test_suffix_added(self, tmp_path):
        path = save_recording(tmp_path / "session", **make_session_arrays(ticks=2))
        assert path.name == "session.npz"
        assert path.is_file()


class TestRecordingPlayer:

    def test_open_reports_shape(self, session_path):
        with RecordingPlayer(session_path) as player:
            assert player.is_open
            assert player.tick_count == 10
            assert player.frame_size == (64, 48)
        assert not player.is_open

    def test_ticks(self, session_path):
        with RecordingPlayer(session_path) as player:
            ticks = list(player)

        assert [t.index for t in ticks] == list(range(10))
        first = ticks[0]
        assert first.depth.width == 64
        assert first.depth.height == 48
        assert first.depth.is_consistent()
        assert first.depth.min_reliable_depth == 500
        assert first.depth.max_reliable_depth == 4500
        assert first.face.left_corner == Point2D(20.0, 30.0)
        assert first.face.right_corner == Point2D(40.0, 30.0)
        assert first.face.mouth_open == DetectionResult.YES
        assert all(t.face is None for t in ticks[1:])

    def test_end_of_recording(self, session_path):
        player = RecordingPlayer(session_path)
        player.open()
        for _ in range(10):
            assert player.read_tick() is not None
        assert player.read_tick() is None
        player.close()

    def test_realtime_pacing(self, session_path):
        player = RecordingPlayer(session_path, fps=1000)
        player.open()
        assert player.read_tick(realtime=True).index == 0
        player.close()

    def test_read_before_open(self, session_path):
        with pytest.raises(RecordingError, match="not open"):
            RecordingPlayer(session_path).read_tick()

    def test_unknown_mouth_state(self, tmp_path):
        arrays = make_session_arrays(ticks=1)
        arrays["mouth_open"][0] = 9
        path = save_recording(tmp_path / "odd.npz", **arrays)

        with RecordingPlayer(path) as player:
            assert player.read_tick().face.mouth_open == DetectionResult.UNKNOWN


class TestMalformedRecordings:

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordingError, match="not found"):
            RecordingPlayer(tmp_path / "missing.npz").open()

    def test_not_an_archive(self, tmp_path):
        path = tmp_path / "garbage.npz"
        path.write_bytes(b"definitely not a zip archive")
        with pytest.raises(RecordingError):
            RecordingPlayer(path).open()

    def test_missing_arrays(self, tmp_path):
        path = tmp_path / "partial.npz"
        np.savez(path, depth=np.zeros((1, 4, 4), dtype=np.uint16))
        with pytest.raises(RecordingError, match="missing arrays"):
            RecordingPlayer(path).open()

    def test_mismatched_lengths(self, tmp_path):
        arrays = make_session_arrays(ticks=3)
        arrays["min_reliable"] = np.zeros(2, dtype=np.uint16)
        path = save_recording(tmp_path / "short.npz", **arrays)
        with pytest.raises(RecordingError, match="min_reliable"):
            RecordingPlayer(path).open()

    def test_depth_must_be_three_dimensional(self, tmp_path):
        arrays = make_session_arrays(ticks=2)
        arrays["depth"] = np.zeros((2, 16), dtype=np.uint16)
        path = save_recording(tmp_path / "flat.npz", **arrays)
        with pytest.raises(RecordingError, match="T, H, W"):
            RecordingPlayer(path).open()
