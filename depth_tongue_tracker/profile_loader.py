"""
Profile loader for DepthTongueTracker.

Loads and validates JSON tracker profiles. Profile properties use
camelCase, for example:

    {
        "id": "default",
        "name": "Default",
        "updateIntervalFrames": 4,
        "mouthClosedFrames": 5,
        "directionThresholds": {"low": 0.3, "high": 0.6},
        "depthSpan": 8000,
        "showFarField": false,
        "acceptMaybeMouthOpen": false
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import (
    ACCEPT_MAYBE_MOUTH_OPEN,
    DEPTH_SPAN,
    DIRECTION_HIGH_THRESHOLD,
    DIRECTION_LOW_THRESHOLD,
    MOUTH_CLOSED_FRAMES,
    UPDATE_INTERVAL_FRAMES,
    ScanSettings,
    StabilizerSettings,
)
from .logger import get_logger

logger = get_logger("ProfileLoader")

# Accepted ranges; values outside are replaced by defaults
MAX_UPDATE_INTERVAL_FRAMES = 300
MAX_MOUTH_CLOSED_FRAMES = 300
MIN_DEPTH_SPAN = 256
MAX_DEPTH_SPAN = 65535


@dataclass
class TrackerProfile:
    """
    Profile configuration loaded from JSON.

    Attributes:
        id: Unique identifier.
        name: Profile display name.
        scan: Depth display and scan settings.
        stabilizer: Direction rate limit, closed debounce and thresholds.
        accept_maybe_mouth_open: Treat a MAYBE mouth-open detection as open.
    """

    id: str
    name: str
    scan: ScanSettings = field(default_factory=ScanSettings)
    stabilizer: StabilizerSettings = field(default_factory=StabilizerSettings)
    accept_maybe_mouth_open: bool = ACCEPT_MAYBE_MOUTH_OPEN


class ProfileLoadError(Exception):
    """Raised when profile loading or validation fails."""
    pass


def load_profile(profile_path: str | Path) -> TrackerProfile:
    """
    Load and validate a profile from a JSON file.

    Args:
        profile_path: Path to the JSON profile file.

    Returns:
        Validated TrackerProfile instance.

    Raises:
        ProfileLoadError: If file cannot be read or validation fails.
    """
    path = Path(profile_path)
    logger.info(f"Loading profile from: {path}")

    if not path.exists():
        raise ProfileLoadError(f"Profile file not found: {path}")

    if not path.is_file():
        raise ProfileLoadError(f"Profile path is not a file: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ProfileLoadError(f"Invalid JSON in profile: {e}")
    except OSError as e:
        raise ProfileLoadError(f"Cannot read profile file: {e}")

    if not isinstance(data, dict):
        raise ProfileLoadError("Profile must be a JSON object")

    return parse_profile(data)


def _int_setting(data: dict[str, Any], key: str, default: int, low: int, high: int) -> int:
    value = data.get(key, default)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        logger.warning(f"Invalid {key}={value!r}, using default: {default}")
        return default
    return value


def _bool_setting(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        logger.warning(f"Invalid {key}={value!r}, using default: {default}")
        return default
    return value


def _parse_thresholds(data: dict[str, Any]) -> tuple[float, float]:
    defaults = (DIRECTION_LOW_THRESHOLD, DIRECTION_HIGH_THRESHOLD)
    thresholds = data.get("directionThresholds")
    if thresholds is None:
        return defaults
    if not isinstance(thresholds, dict):
        logger.warning("Invalid directionThresholds, using defaults")
        return defaults

    low = thresholds.get("low", DIRECTION_LOW_THRESHOLD)
    high = thresholds.get("high", DIRECTION_HIGH_THRESHOLD)
    numeric = all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (low, high))
    if not numeric or not 0.0 < low < high < 1.0:
        logger.warning(f"Invalid directionThresholds low={low!r} high={high!r}, using defaults")
        return defaults
    return float(low), float(high)


def parse_profile(data: dict[str, Any]) -> TrackerProfile:
    """
    Parse and validate profile data from a dictionary.

    Args:
        data: Dictionary with camelCase profile properties.

    Returns:
        Validated TrackerProfile instance.

    Raises:
        ProfileLoadError: If required fields are missing.
    """
    if "id" not in data:
        raise ProfileLoadError("Profile missing required field: id")

    if "name" not in data:
        raise ProfileLoadError("Profile missing required field: name")

    update_interval = _int_setting(
        data, "updateIntervalFrames", UPDATE_INTERVAL_FRAMES, 0, MAX_UPDATE_INTERVAL_FRAMES
    )
    closed_frames = _int_setting(
        data, "mouthClosedFrames", MOUTH_CLOSED_FRAMES, 1, MAX_MOUTH_CLOSED_FRAMES
    )
    depth_span = _int_setting(data, "depthSpan", DEPTH_SPAN, MIN_DEPTH_SPAN, MAX_DEPTH_SPAN)
    low, high = _parse_thresholds(data)

    profile = TrackerProfile(
        id=str(data["id"]),
        name=str(data["name"]),
        scan=ScanSettings(
            depth_span=depth_span,
            show_far_field=_bool_setting(data, "showFarField", False),
        ),
        stabilizer=StabilizerSettings(
            update_interval_frames=update_interval,
            mouth_closed_frames=closed_frames,
            low_threshold=low,
            high_threshold=high,
        ),
        accept_maybe_mouth_open=_bool_setting(
            data, "acceptMaybeMouthOpen", ACCEPT_MAYBE_MOUTH_OPEN
        ),
    )

    logger.info(f"Loaded profile: {profile.name} (id={profile.id})")
    logger.debug(f"  Update interval: {profile.stabilizer.update_interval_frames} frames")
    logger.debug(f"  Mouth closed after: {profile.stabilizer.mouth_closed_frames} frames")
    logger.debug(f"  Thresholds: {profile.stabilizer.low_threshold}/{profile.stabilizer.high_threshold}")
    logger.debug(f"  Depth span: {profile.scan.depth_span} (far field: {profile.scan.show_far_field})")

    return profile


def create_default_profile() -> TrackerProfile:
    """Create a profile with the built-in defaults."""
    return TrackerProfile(id="default", name="Default")
