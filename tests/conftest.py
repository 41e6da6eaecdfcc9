"""Shared fixtures for the DepthTongueTracker test suite."""

import pytest

from helpers import KINECT_HEIGHT, KINECT_WIDTH, REFERENCE_TIP, make_frame
from depth_tongue_tracker.depth_frame import DepthFrame


@pytest.fixture
def reference_frame() -> DepthFrame:
    """Kinect-sized frame at 2000 mm with the tongue tip at 500 mm."""
    return make_frame(KINECT_WIDTH, KINECT_HEIGHT, points={REFERENCE_TIP: 500})
