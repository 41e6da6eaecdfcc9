"""
Per-frame tongue tracking pipeline for DepthTongueTracker.

All mutable tracking data (mouth region, mouth-open flag, followed body,
stabilizer counters) lives in one TrackingState. process_depth_frame()
takes that state explicitly, which keeps it testable without a sensor;
TongueTrackingPipeline owns a state and serializes access to it, since
depth, face and body callbacks may arrive on different threads.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from .config import ACCEPT_MAYBE_MOUTH_OPEN, ScanSettings, StabilizerSettings
from .depth_frame import DepthFrame
from .depth_scanner import TongueTipCandidate, scan_depth_frame
from .direction import DirectionSymbol, format_position
from .face_input import BodyObservation, FaceObservation, TrackingIdSelector, is_mouth_open
from .logger import get_logger, log_throttled
from .mouth_region import EMPTY_REGION, MouthRegion, map_mouth_region
from .temporal_stabilizer import StabilizerState, TemporalStabilizer

logger = get_logger("Pipeline")


@dataclass
class TrackingState:
    """Everything the pipeline carries from one frame to the next."""
    region: MouthRegion = EMPTY_REGION
    mouth_open: bool = False
    stabilizer: TemporalStabilizer = field(default_factory=TemporalStabilizer)
    selector: TrackingIdSelector = field(default_factory=TrackingIdSelector)
    frames_processed: int = 0
    frames_skipped: int = 0


@dataclass
class FrameResult:
    """
    Display output for one depth frame.

    Attributes:
        pixels: Flat uint8 grayscale buffer, same size as the depth frame.
        width: Frame width.
        height: Frame height.
        candidate: Tongue-tip candidate found this frame, if any.
        direction: Direction to display (last emitted, None before the first).
        position: Normalized position behind the displayed direction.
        emitted: A new direction was produced on this frame.
        state: Stabilizer state after this frame.
    """
    pixels: np.ndarray
    width: int
    height: int
    candidate: Optional[TongueTipCandidate]
    direction: Optional[DirectionSymbol]
    position: Optional[tuple[float, float]]
    emitted: bool
    state: StabilizerState

    def image(self) -> np.ndarray:
        """Display buffer as a (height, width) image."""
        return self.pixels.reshape(self.height, self.width)

    @property
    def position_text(self) -> str:
        if self.position is None:
            return "-"
        return format_position(*self.position)


def apply_face_observation(
    state: TrackingState,
    observation: FaceObservation,
    accept_maybe: bool = ACCEPT_MAYBE_MOUTH_OPEN
) -> bool:
    """
    Update region and mouth flag from a face observation.

    Returns:
        False if the observation belongs to a body that isn't followed.
    """
    if not state.selector.accepts(observation):
        logger.debug(f"Ignoring face of body {observation.tracking_id}")
        return False

    state.mouth_open = is_mouth_open(observation.mouth_open, accept_maybe)
    state.region = map_mouth_region(observation.left_corner, observation.right_corner)
    return True


def process_depth_frame(
    state: TrackingState,
    frame: DepthFrame,
    scan_settings: Optional[ScanSettings] = None
) -> Optional[FrameResult]:
    """
    Run one depth frame through scan, classification and stabilization.

    The most recently known region and mouth flag are used even if they
    are older than this frame.

    Args:
        state: Tracking state, updated in place.
        frame: Depth frame to process.
        scan_settings: Depth display and scan settings.

    Returns:
        FrameResult, or None if the frame is malformed and was skipped.
    """
    if not frame.is_consistent():
        state.frames_skipped += 1
        log_throttled(
            logger,
            logging.WARNING,
            state.frames_skipped,
            f"Skipping depth frame: {frame.samples.size} samples for "
            f"{frame.width}x{frame.height}",
        )
        return None

    scan = scan_depth_frame(frame, state.region, scan_settings)
    update = state.stabilizer.update(state.mouth_open, scan.candidate)
    state.frames_processed += 1

    return FrameResult(
        pixels=scan.pixels,
        width=frame.width,
        height=frame.height,
        candidate=scan.candidate,
        direction=update.direction,
        position=update.position,
        emitted=update.emitted,
        state=update.state,
    )


class TongueTrackingPipeline:
    """
    Thread-safe owner of a TrackingState.

    Face, body and depth callbacks can be wired straight to the
    on_* / process methods; a single lock guards the state.
    """

    def __init__(
        self,
        scan_settings: Optional[ScanSettings] = None,
        stabilizer_settings: Optional[StabilizerSettings] = None,
        accept_maybe: bool = ACCEPT_MAYBE_MOUTH_OPEN
    ):
        """
        Initialize pipeline.

        Args:
            scan_settings: Depth display and scan settings.
            stabilizer_settings: Rate limit, closed debounce, direction thresholds.
            accept_maybe: Treat a MAYBE mouth-open detection as open.
        """
        self.scan_settings = scan_settings or ScanSettings()
        self.stabilizer_settings = stabilizer_settings or StabilizerSettings()
        self.accept_maybe = accept_maybe

        self._lock = threading.Lock()
        self._state = TrackingState(stabilizer=TemporalStabilizer(self.stabilizer_settings))

    @property
    def region(self) -> MouthRegion:
        with self._lock:
            return self._state.region

    @property
    def mouth_open(self) -> bool:
        with self._lock:
            return self._state.mouth_open

    @property
    def direction(self) -> Optional[DirectionSymbol]:
        with self._lock:
            return self._state.stabilizer.direction

    @property
    def tracking_id(self) -> Optional[int]:
        with self._lock:
            return self._state.selector.tracking_id

    @property
    def frames_processed(self) -> int:
        with self._lock:
            return self._state.frames_processed

    @property
    def frames_skipped(self) -> int:
        with self._lock:
            return self._state.frames_skipped

    def on_face_observation(self, observation: FaceObservation) -> MouthRegion:
        """Apply new face data and return the region now in use."""
        with self._lock:
            apply_face_observation(self._state, observation, self.accept_maybe)
            return self._state.region

    def on_body_observation(self, bodies: Iterable[BodyObservation]) -> Optional[int]:
        """Acquire a tracking id from body data when none is active."""
        with self._lock:
            return self._state.selector.update(bodies)

    def on_tracking_lost(self) -> None:
        """Drop the followed body; keep the last region and direction."""
        with self._lock:
            self._state.selector.release()

    def process_depth_frame(self, frame: DepthFrame) -> Optional[FrameResult]:
        """Process one depth frame against the latest face data."""
        with self._lock:
            return process_depth_frame(self._state, frame, self.scan_settings)

    def reset(self) -> None:
        """Forget region, mouth flag, followed body and stabilizer state."""
        with self._lock:
            self._state = TrackingState(stabilizer=TemporalStabilizer(self.stabilizer_settings))
        logger.info("Tracking state reset")
