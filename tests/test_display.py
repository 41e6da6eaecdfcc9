"""Tests for the OpenCV debug view."""

import numpy as np
import pytest

cv2 = pytest.importorskip("cv2")

from helpers import REFERENCE_REGION, reference_face  # noqa: E402
from depth_tongue_tracker.display import render_debug_view, sensor_status_text  # noqa: E402
from depth_tongue_tracker.pipeline import TongueTrackingPipeline  # noqa: E402


def test_status_text():
    assert sensor_status_text(True) == "Depth Tongue Tracker - Running"
    assert sensor_status_text(False) == "Depth Tongue Tracker - Sensor Not Available"


def test_render_scales_and_converts(reference_frame):
    pipeline = TongueTrackingPipeline()
    pipeline.on_face_observation(reference_face())
    result = pipeline.process_depth_frame(reference_frame)

    image = render_debug_view(result, fps=30.0, scale=1.5)

    assert image.dtype == np.uint8
    assert image.shape == (636, 768, 3)


def test_render_without_scaling_keeps_region_white(reference_frame):
    pipeline = TongueTrackingPipeline()
    pipeline.on_face_observation(reference_face())
    result = pipeline.process_depth_frame(reference_frame)

    image = render_debug_view(result, scale=1.0)

    assert image.shape == (reference_frame.height, reference_frame.width, 3)
    # A pixel deep inside the region, away from the overlays
    y = REFERENCE_REGION.top + 15
    x = REFERENCE_REGION.left + 30
    assert tuple(image[y, x]) == (255, 255, 255)


def test_render_before_first_face(reference_frame):
    result = TongueTrackingPipeline().process_depth_frame(reference_frame)
    image = render_debug_view(result, scale=1.0)
    assert image.shape == (reference_frame.height, reference_frame.width, 3)
