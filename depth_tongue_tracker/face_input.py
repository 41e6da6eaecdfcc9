"""
Face and body tracking inputs for DepthTongueTracker.

Face and body tracking run outside this package; these types carry what
the tongue tracker needs from them: the mouth corners and mouth-open
detection result from face tracking, and which bodies are tracked so a
face tracking id can be (re)acquired.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional

from .config import ACCEPT_MAYBE_MOUTH_OPEN
from .logger import get_logger
from .mouth_region import Point2D

logger = get_logger("FaceInput")


class DetectionResult(IntEnum):
    """Face property detection result as reported by the face tracker."""
    UNKNOWN = 0
    NO = 1
    MAYBE = 2
    YES = 3


def is_mouth_open(result: DetectionResult, accept_maybe: bool = ACCEPT_MAYBE_MOUTH_OPEN) -> bool:
    """Only YES counts as open unless MAYBE is explicitly accepted."""
    if result == DetectionResult.YES:
        return True
    return accept_maybe and result == DetectionResult.MAYBE


@dataclass(frozen=True)
class FaceObservation:
    """
    One face tracking result in depth pixel space.

    Attributes:
        left_corner: Left mouth corner.
        right_corner: Right mouth corner.
        mouth_open: Mouth-open detection result.
        tracking_id: Body tracking id the face belongs to (None if unknown).
    """
    left_corner: Point2D
    right_corner: Point2D
    mouth_open: DetectionResult = DetectionResult.UNKNOWN
    tracking_id: Optional[int] = None


@dataclass(frozen=True)
class BodyObservation:
    """Tracking status of one body slot."""
    tracking_id: int
    is_tracked: bool


class TrackingIdSelector:
    """
    Picks the body whose face is followed.

    A new id is only chosen while no id is active; the last tracked body
    in the slot list wins.
    """

    def __init__(self) -> None:
        self._tracking_id: Optional[int] = None

    @property
    def tracking_id(self) -> Optional[int]:
        return self._tracking_id

    @property
    def is_tracking(self) -> bool:
        return self._tracking_id is not None

    def update(self, bodies: Iterable[BodyObservation]) -> Optional[int]:
        """
        Acquire a tracking id from body data if none is active.

        Returns:
            The active tracking id, or None if nobody is tracked.
        """
        if self._tracking_id is not None:
            return self._tracking_id

        selected: Optional[int] = None
        for body in bodies:
            if body.is_tracked:
                selected = body.tracking_id

        if selected is not None:
            logger.info(f"Tracking body {selected}")
            self._tracking_id = selected
        return self._tracking_id

    def release(self) -> None:
        """Forget the active id so the next body update can pick a new one."""
        if self._tracking_id is not None:
            logger.info(f"Lost body {self._tracking_id}")
        self._tracking_id = None

    def accepts(self, observation: FaceObservation) -> bool:
        """Check whether a face observation belongs to the followed body."""
        if observation.tracking_id is None or self._tracking_id is None:
            return True
        return observation.tracking_id == self._tracking_id
