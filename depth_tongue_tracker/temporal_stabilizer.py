"""
Temporal stabilizer for DepthTongueTracker.

Turns the noisy per-frame tongue-tip candidate into a direction that a
person can read:
- Direction updates are rate limited to one per UPDATE_INTERVAL_FRAMES + 1
  open frames, so the symbol doesn't change at sensor frame rate.
- "Mouth closed" is only shown after MOUTH_CLOSED_FRAMES consecutive closed
  observations, while a single open observation leaves the closed state.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .config import StabilizerSettings
from .depth_scanner import TongueTipCandidate
from .direction import DirectionSymbol, classify_direction
from .logger import get_logger

logger = get_logger("TemporalStabilizer")


class StabilizerState(Enum):
    """State of the direction stabilizer."""
    OPEN_TRACKING = auto()  # Mouth open, direction just emitted
    OPEN_WAITING = auto()   # Mouth open, waiting for the next update slot
    CLOSED = auto()         # Mouth confirmed closed, "X" shown


@dataclass
class StabilizerUpdate:
    """Outcome of feeding one frame to the stabilizer."""
    state: StabilizerState
    direction: Optional[DirectionSymbol]
    position: Optional[tuple[float, float]]
    emitted: bool = False  # A new direction was produced this frame


class TemporalStabilizer:
    """
    Rate limiter and mouth-closed debounce for the displayed direction.

    Only frames where the scan found a candidate drive the stabilizer;
    other frames leave every counter untouched.
    """

    def __init__(self, settings: Optional[StabilizerSettings] = None):
        """
        Initialize stabilizer.

        Args:
            settings: Update interval, closed debounce and direction thresholds.
        """
        self.settings = settings or StabilizerSettings()

        self.state = StabilizerState.OPEN_WAITING
        self._update_count = 0
        self._closed_count = 0
        self._direction: Optional[DirectionSymbol] = None
        self._position: Optional[tuple[float, float]] = None

    @property
    def direction(self) -> Optional[DirectionSymbol]:
        """Last emitted direction, None before the first emission."""
        return self._direction

    @property
    def position(self) -> Optional[tuple[float, float]]:
        """Normalized position behind the last emitted direction."""
        return self._position

    @property
    def update_count(self) -> int:
        return self._update_count

    @property
    def closed_count(self) -> int:
        return self._closed_count

    def update(
        self,
        mouth_open: bool,
        candidate: Optional[TongueTipCandidate]
    ) -> StabilizerUpdate:
        """
        Feed one frame.

        Args:
            mouth_open: Latest mouth-open flag from face tracking.
            candidate: Tongue-tip candidate for this frame, or None.

        Returns:
            StabilizerUpdate with the direction to display.
        """
        if candidate is None:
            return self._snapshot(emitted=False)

        if mouth_open:
            return self._update_open(candidate)
        return self._update_closed()

    def _update_open(self, candidate: TongueTipCandidate) -> StabilizerUpdate:
        self._closed_count = 0

        self._update_count += 1
        if self._update_count <= self.settings.update_interval_frames:
            self.state = StabilizerState.OPEN_WAITING
            return self._snapshot(emitted=False)

        self._update_count = 0
        direction = classify_direction(
            candidate.nx,
            candidate.ny,
            self.settings.low_threshold,
            self.settings.high_threshold,
        )
        if direction != self._direction:
            logger.debug(
                f"Direction {direction.name} at ({candidate.nx:.2f}, {candidate.ny:.2f})"
            )
        self._direction = direction
        self._position = candidate.position
        self.state = StabilizerState.OPEN_TRACKING
        return self._snapshot(emitted=True)

    def _update_closed(self) -> StabilizerUpdate:
        self._closed_count += 1
        if self._closed_count < self.settings.mouth_closed_frames:
            return self._snapshot(emitted=False)

        emitted = self.state != StabilizerState.CLOSED
        if emitted:
            logger.debug(f"Mouth closed after {self._closed_count} frames")
        self._direction = DirectionSymbol.CLOSED
        self.state = StabilizerState.CLOSED
        return self._snapshot(emitted=emitted)

    def _snapshot(self, emitted: bool) -> StabilizerUpdate:
        return StabilizerUpdate(
            state=self.state,
            direction=self._direction,
            position=self._position,
            emitted=emitted,
        )

    def reset(self) -> None:
        """Reset counters and forget the displayed direction."""
        self.state = StabilizerState.OPEN_WAITING
        self._update_count = 0
        self._closed_count = 0
        self._direction = None
        self._position = None
