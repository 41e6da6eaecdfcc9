"""
Configuration constants for DepthTongueTracker.

This module contains all tunable parameters for depth visualization,
tongue-tip scanning, direction classification and temporal stabilization.
"""

from dataclasses import dataclass
from typing import Final


# Depth sensor configuration (Kinect v2 depth stream)
DEPTH_WIDTH: Final[int] = 512
DEPTH_HEIGHT: Final[int] = 424
DEPTH_FPS: Final[int] = 30
DEPTH_MAX_VALUE: Final[int] = 65535  # uint16 ceiling, used for far-field display

# Depth to byte mapping
# The reliable depth span (mm) is squeezed into 0-255 by integer division.
DEPTH_SPAN: Final[int] = 8000
DEPTH_TO_BYTE_DIVISOR: Final[int] = DEPTH_SPAN // 256  # 31

# Visualization bytes
REGION_FILL_BYTE: Final[int] = 255  # Search area rendered white
TONGUE_TIP_BYTE: Final[int] = 0  # Tongue tip rendered black
NO_DATA_BYTE: Final[int] = 0  # Out-of-range depth rendered black

# Tongue-tip scan
# Running minimum starts here; only samples strictly below can win.
CLOSEST_DEPTH_SENTINEL: Final[int] = 10000
REGION_MASK_CACHE_SIZE: Final[int] = 8

# Direction classification (normalized mouth coordinates)
DIRECTION_LOW_THRESHOLD: Final[float] = 0.3
DIRECTION_HIGH_THRESHOLD: Final[float] = 0.6

# Temporal stabilization
UPDATE_INTERVAL_FRAMES: Final[int] = 4  # Direction emitted once the counter exceeds this
MOUTH_CLOSED_FRAMES: Final[int] = 5  # Consecutive closed frames before "X"

# Face input
ACCEPT_MAYBE_MOUTH_OPEN: Final[bool] = False  # Only a YES detection counts as open

# Frame channels
DEPTH_QUEUE_SIZE: Final[int] = 2
WORKER_POLL_TIMEOUT: Final[float] = 0.1  # seconds
WORKER_JOIN_TIMEOUT: Final[float] = 2.0  # seconds

# Debug display
DISPLAY_WINDOW_NAME: Final[str] = "Depth Tongue Tracker"
DISPLAY_SCALE: Final[float] = 1.5
STATUS_TITLE: Final[str] = "Depth Tongue Tracker"

# Logging
LOG_FILENAME: Final[str] = "depth_tongue_tracker.log"
LOG_MAX_BYTES: Final[int] = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT: Final[int] = 3
LOG_DIR_ENV: Final[str] = "DEPTH_TONGUE_TRACKER_LOG_DIR"  # Overrides the log directory
LOG_THROTTLE_INTERVAL: Final[int] = 100  # Repeating per-frame warnings: first, then every Nth

# Exit codes
EXIT_SUCCESS: Final[int] = 0
EXIT_PROFILE_ERROR: Final[int] = 1
EXIT_RECORDING_ERROR: Final[int] = 2
EXIT_RUNTIME_ERROR: Final[int] = 3


@dataclass(frozen=True)
class ScanSettings:
    """Container for depth visualization and tongue-tip scan settings."""

    depth_span: int = DEPTH_SPAN
    closest_depth_sentinel: int = CLOSEST_DEPTH_SENTINEL
    show_far_field: bool = False  # Ignore the reliable maximum, display up to 65535

    @property
    def divisor(self) -> int:
        """Integer divisor mapping depth values onto the byte range."""
        return max(1, self.depth_span // 256)


@dataclass(frozen=True)
class StabilizerSettings:
    """Container for direction rate limiting and mouth-closed debounce."""

    update_interval_frames: int = UPDATE_INTERVAL_FRAMES
    mouth_closed_frames: int = MOUTH_CLOSED_FRAMES
    low_threshold: float = DIRECTION_LOW_THRESHOLD
    high_threshold: float = DIRECTION_HIGH_THRESHOLD
