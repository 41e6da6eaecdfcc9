"""
Debug display for DepthTongueTracker.

Renders the grayscale depth visualization with the current direction,
the normalized tongue-tip position and FPS overlaid, using OpenCV.
"""

from typing import Optional

import cv2
import numpy as np

from .config import DISPLAY_SCALE, DISPLAY_WINDOW_NAME, STATUS_TITLE
from .pipeline import FrameResult


def sensor_status_text(available: bool) -> str:
    """Window title text for the sensor availability state."""
    return f"{STATUS_TITLE} - " + ("Running" if available else "Sensor Not Available")


def render_debug_view(
    result: FrameResult,
    fps: Optional[float] = None,
    scale: float = DISPLAY_SCALE
) -> np.ndarray:
    """
    Build a BGR debug image for one frame result.

    Args:
        result: Pipeline output for the frame.
        fps: Processing rate to show, if known.
        scale: Resize factor applied to the depth image.

    Returns:
        BGR image (uint8).
    """
    gray = result.image()
    display = cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)
    if scale != 1.0:
        display = cv2.resize(
            display, None, fx=scale, fy=scale, interpolation=cv2.INTER_NEAREST
        )

    # Hershey fonts can't draw the arrow glyphs, use ASCII labels
    direction_text = result.direction.label if result.direction else "NONE"
    cv2.putText(
        display, f"Direction: {direction_text}", (10, 30),
        cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 255, 0), 2
    )
    cv2.putText(
        display, f"Tongue: {result.position_text}", (10, 60),
        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 255), 2
    )

    if result.candidate is not None:
        cx = int(result.candidate.x * scale)
        cy = int(result.candidate.y * scale)
        cv2.circle(display, (cx, cy), max(3, int(3 * scale)), (0, 0, 255), 1)

    if fps is not None:
        cv2.putText(
            display, f"FPS: {fps:.1f}", (10, 90),
            cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1
        )

    return display


def show_debug_view(
    result: FrameResult,
    fps: Optional[float] = None,
    window_name: str = DISPLAY_WINDOW_NAME
) -> int:
    """
    Show the debug view and poll the keyboard.

    Returns:
        Key code pressed (-1 / 255 if none).
    """
    cv2.imshow(window_name, render_debug_view(result, fps))
    return cv2.waitKey(1) & 0xFF


def close_debug_view() -> None:
    cv2.destroyAllWindows()
