"""
Recorded capture sessions for DepthTongueTracker.

Stands in for the live depth sensor: a session is an .npz archive with
one entry per sensor tick.

    depth          (T, H, W) uint16  depth samples
    min_reliable   (T,)      uint16  per-frame minimum reliable depth
    max_reliable   (T,)      uint16  per-frame maximum reliable depth
    face_valid     (T,)      bool    a face update arrived on this tick
    mouth_corners  (T, 2, 2) float32 [left (x, y), right (x, y)] in depth pixels
    mouth_open     (T,)      uint8   DetectionResult of the mouth-open property
"""

import time
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import numpy as np

from .config import DEPTH_FPS
from .depth_frame import DepthFrame
from .face_input import DetectionResult, FaceObservation
from .logger import get_logger
from .mouth_region import Point2D

logger = get_logger("Recording")

REQUIRED_KEYS = ("depth", "min_reliable", "max_reliable", "face_valid", "mouth_corners", "mouth_open")


class RecordingError(Exception):
    """Raised when a recording cannot be read or is malformed."""
    pass


@dataclass
class SensorTick:
    """Inputs delivered by the sensor on one tick."""
    index: int
    depth: DepthFrame
    face: Optional[FaceObservation]


def save_recording(
    path: str | Path,
    depth: np.ndarray,
    min_reliable: np.ndarray,
    max_reliable: np.ndarray,
    face_valid: np.ndarray,
    mouth_corners: np.ndarray,
    mouth_open: np.ndarray
) -> Path:
    """Write a capture session in the layout documented above."""
    path = Path(path)
    np.savez_compressed(
        path,
        depth=np.asarray(depth, dtype=np.uint16),
        min_reliable=np.asarray(min_reliable, dtype=np.uint16),
        max_reliable=np.asarray(max_reliable, dtype=np.uint16),
        face_valid=np.asarray(face_valid, dtype=bool),
        mouth_corners=np.asarray(mouth_corners, dtype=np.float32),
        mouth_open=np.asarray(mouth_open, dtype=np.uint8),
    )
    # np.savez appends .npz when missing
    if path.suffix != ".npz":
        path = path.with_name(path.name + ".npz")
    logger.debug(f"Saved recording with {len(depth)} ticks to {path}")
    return path


class RecordingPlayer:
    """
    Replays a capture session tick by tick.

    Attributes:
        path: Recording file.
        fps: Playback rate used when pacing in real time.
    """

    def __init__(self, path: str | Path, fps: int = DEPTH_FPS):
        self.path = Path(path)
        self.fps = fps

        self._data: Optional[dict[str, np.ndarray]] = None
        self._position = 0
        self._last_tick_time = 0.0

    @property
    def is_open(self) -> bool:
        return self._data is not None

    @property
    def tick_count(self) -> int:
        if self._data is None:
            return 0
        return int(self._data["depth"].shape[0])

    @property
    def frame_size(self) -> tuple[int, int]:
        """(width, height) of the recorded depth frames."""
        if self._data is None:
            return 0, 0
        _, height, width = self._data["depth"].shape
        return int(width), int(height)

    def open(self) -> None:
        """
        Load the recording.

        Raises:
            RecordingError: If the file is missing or malformed.
        """
        if not self.path.is_file():
            raise RecordingError(f"Recording not found: {self.path}")

        logger.info(f"Opening recording {self.path}...")
        try:
            with np.load(self.path, allow_pickle=False) as archive:
                data = {key: archive[key] for key in archive.files}
        except (OSError, ValueError, EOFError, zipfile.BadZipFile) as e:
            raise RecordingError(f"Cannot read recording: {e}")

        missing = [key for key in REQUIRED_KEYS if key not in data]
        if missing:
            raise RecordingError(f"Recording missing arrays: {', '.join(missing)}")

        depth = data["depth"]
        if depth.ndim != 3:
            raise RecordingError(f"Depth array must be (T, H, W), got {depth.shape}")

        ticks = depth.shape[0]
        expected_shapes = {
            "min_reliable": (ticks,),
            "max_reliable": (ticks,),
            "face_valid": (ticks,),
            "mouth_corners": (ticks, 2, 2),
            "mouth_open": (ticks,),
        }
        for key, shape in expected_shapes.items():
            if data[key].shape != shape:
                raise RecordingError(f"{key} has shape {data[key].shape}, expected {shape}")

        self._data = data
        self._position = 0
        self._last_tick_time = time.perf_counter()
        width, height = self.frame_size
        logger.info(f"Recording opened: {ticks} ticks of {width}x{height} depth")

    def close(self) -> None:
        """Release the loaded arrays."""
        if self._data is not None:
            logger.info("Closing recording")
        self._data = None
        self._position = 0

    def _tick_at(self, index: int) -> SensorTick:
        data = self._data
        frame = DepthFrame.from_array(
            data["depth"][index],
            int(data["min_reliable"][index]),
            int(data["max_reliable"][index]),
        )

        face = None
        if bool(data["face_valid"][index]):
            (lx, ly), (rx, ry) = data["mouth_corners"][index]
            raw_open = int(data["mouth_open"][index])
            try:
                mouth_open = DetectionResult(raw_open)
            except ValueError:
                logger.warning(f"Tick {index}: unknown mouth_open value {raw_open}")
                mouth_open = DetectionResult.UNKNOWN
            face = FaceObservation(
                left_corner=Point2D(float(lx), float(ly)),
                right_corner=Point2D(float(rx), float(ry)),
                mouth_open=mouth_open,
            )
        return SensorTick(index=index, depth=frame, face=face)

    def read_tick(self, realtime: bool = False) -> Optional[SensorTick]:
        """
        Read the next tick.

        Args:
            realtime: Sleep so ticks are delivered at the recording fps.

        Returns:
            SensorTick, or None at the end of the recording.

        Raises:
            RecordingError: If the recording is not open.
        """
        if self._data is None:
            raise RecordingError("Recording is not open")

        if self._position >= self.tick_count:
            return None

        if realtime and self.fps > 0:
            delay = (1.0 / self.fps) - (time.perf_counter() - self._last_tick_time)
            if delay > 0:
                time.sleep(delay)
        self._last_tick_time = time.perf_counter()

        tick = self._tick_at(self._position)
        self._position += 1
        return tick

    def __iter__(self) -> Iterator[SensorTick]:
        while True:
            tick = self.read_tick()
            if tick is None:
                return
            yield tick

    def __enter__(self) -> "RecordingPlayer":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
