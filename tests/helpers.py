"""Synthetic depth frames and face observations for the test suite."""

import numpy as np

from depth_tongue_tracker.config import DEPTH_HEIGHT, DEPTH_WIDTH
from depth_tongue_tracker.depth_frame import DepthFrame
from depth_tongue_tracker.depth_scanner import TongueTipCandidate
from depth_tongue_tracker.face_input import DetectionResult, FaceObservation
from depth_tongue_tracker.mouth_region import MouthRegion, Point2D, pixel_to_index

KINECT_WIDTH = DEPTH_WIDTH
KINECT_HEIGHT = DEPTH_HEIGHT

# Region from the reference scenario and the corners that produce it
REFERENCE_REGION = MouthRegion(left=100, top=50, width=40, height=20)
REFERENCE_LEFT_CORNER = Point2D(100.0, 60.0)
REFERENCE_RIGHT_CORNER = Point2D(140.0, 60.0)
REFERENCE_TIP = (110, 55)


def make_frame(
    width: int,
    height: int,
    fill: int = 2000,
    points: dict[tuple[int, int], int] | None = None,
    min_reliable: int = 500,
    max_reliable: int = 4000
) -> DepthFrame:
    """Uniform depth frame with individual pixels overridden (1-based index convention)."""
    samples = np.full(width * height, fill, dtype=np.uint16)
    for (x, y), depth in (points or {}).items():
        samples[pixel_to_index(x, y, width)] = depth
    return DepthFrame(
        width=width,
        height=height,
        samples=samples,
        min_reliable_depth=min_reliable,
        max_reliable_depth=max_reliable,
    )


def make_candidate(nx: float, ny: float) -> TongueTipCandidate:
    return TongueTipCandidate(index=0, x=0, y=0, depth=500, nx=nx, ny=ny)


def reference_face(mouth_open: DetectionResult = DetectionResult.YES, tracking_id=None) -> FaceObservation:
    return FaceObservation(
        left_corner=REFERENCE_LEFT_CORNER,
        right_corner=REFERENCE_RIGHT_CORNER,
        mouth_open=mouth_open,
        tracking_id=tracking_id,
    )


def make_session_arrays(ticks: int = 10, width: int = 64, height: int = 48) -> dict:
    """
    Arrays for a short capture session.

    The mouth is reported open on tick 0 only, with corners (20, 30) and
    (40, 30); every depth frame has its nearest in-mouth point at (24, 27).
    """
    depth = np.full((ticks, height, width), 2000, dtype=np.uint16)
    tip_index = pixel_to_index(24, 27, width)
    depth.reshape(ticks, -1)[:, tip_index] = 600

    face_valid = np.zeros(ticks, dtype=bool)
    face_valid[0] = True
    mouth_corners = np.zeros((ticks, 2, 2), dtype=np.float32)
    mouth_corners[0] = [[20.0, 30.0], [40.0, 30.0]]
    mouth_open = np.zeros(ticks, dtype=np.uint8)
    mouth_open[0] = int(DetectionResult.YES)

    return {
        "depth": depth,
        "min_reliable": np.full(ticks, 500, dtype=np.uint16),
        "max_reliable": np.full(ticks, 4500, dtype=np.uint16),
        "face_valid": face_valid,
        "mouth_corners": mouth_corners,
        "mouth_open": mouth_open,
    }


def make_mouth_closing_session(ticks: int = 10, open_ticks: int = 5) -> dict:
    """Session with a face update on every tick: open for open_ticks, then closed."""
    arrays = make_session_arrays(ticks=ticks)
    arrays["face_valid"][:] = True
    arrays["mouth_corners"][:] = [[20.0, 30.0], [40.0, 30.0]]
    arrays["mouth_open"][:open_ticks] = int(DetectionResult.YES)
    arrays["mouth_open"][open_ticks:] = int(DetectionResult.NO)
    return arrays
