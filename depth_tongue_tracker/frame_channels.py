"""
Producer channels and consumer thread for DepthTongueTracker.

Depth, face and body data arrive from the sensor at independent rates
and on arbitrary threads. Producers publish into FrameChannels:
- face and body updates overwrite a latest-value slot,
- depth frames go into a small queue that drops the oldest frame when
  the consumer falls behind.

A single TrackingWorker thread drains depth frames and, before each
one, applies whatever face/body data is newest. It never waits for the
inputs to line up; a stale region is used as is.

A face update can also travel with its depth frame in the queue. Replay
uses this, because the player runs ahead of the worker and the latest
face slot would otherwise hold a face from a later tick.
"""

import logging
import threading
from dataclasses import dataclass
from queue import Queue, Empty, Full
from typing import Callable, Generic, Optional, Sequence, TypeVar

from .config import DEPTH_QUEUE_SIZE, WORKER_JOIN_TIMEOUT, WORKER_POLL_TIMEOUT
from .depth_frame import DepthFrame
from .face_input import BodyObservation, FaceObservation
from .logger import get_logger, log_throttled
from .pipeline import FrameResult, TongueTrackingPipeline

logger = get_logger("FrameChannels")

T = TypeVar("T")


class LatestValue(Generic[T]):
    """Thread-safe slot that keeps only the most recent value."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self._fresh = False

    def publish(self, value: T) -> None:
        with self._lock:
            self._value = value
            self._fresh = True

    def take(self) -> Optional[T]:
        """Return the value if it changed since the last take, else None."""
        with self._lock:
            if not self._fresh:
                return None
            self._fresh = False
            return self._value

    def peek(self) -> Optional[T]:
        """Return the latest value without consuming it."""
        with self._lock:
            return self._value


@dataclass
class DepthPacket:
    """Queued depth frame with the face update delivered on the same tick."""
    frame: DepthFrame
    face: Optional[FaceObservation] = None


class FrameChannels:
    """Input channels shared between sensor callbacks and the worker."""

    def __init__(self, depth_queue_size: int = DEPTH_QUEUE_SIZE):
        self.depth: Queue[DepthPacket] = Queue(maxsize=depth_queue_size)
        self.face: LatestValue[FaceObservation] = LatestValue()
        self.bodies: LatestValue[Sequence[BodyObservation]] = LatestValue()
        self._dropped = 0
        self._drop_lock = threading.Lock()

    @property
    def frames_dropped(self) -> int:
        with self._drop_lock:
            return self._dropped

    def publish_face(self, observation: FaceObservation) -> None:
        self.face.publish(observation)

    def publish_bodies(self, bodies: Sequence[BodyObservation]) -> None:
        self.bodies.publish(list(bodies))

    def publish_depth(
        self,
        frame: DepthFrame,
        block: bool = False,
        face: Optional[FaceObservation] = None
    ) -> None:
        """
        Queue a depth frame.

        Args:
            frame: Depth frame from the sensor.
            block: Wait for room instead of dropping the oldest frame
                   (used when replaying recordings).
            face: Face update from the same tick, applied right before
                  this frame. Dropped together with the frame.
        """
        packet = DepthPacket(frame=frame, face=face)
        if block:
            self.depth.put(packet)
            return

        while True:
            try:
                self.depth.put_nowait(packet)
                return
            except Full:
                try:
                    self.depth.get_nowait()
                    self.depth.task_done()
                except Empty:
                    continue
                with self._drop_lock:
                    self._dropped += 1
                    dropped = self._dropped
                log_throttled(logger, logging.DEBUG, dropped, "Depth queue full, dropped oldest frame")

    def wait_until_drained(self) -> None:
        """Block until every queued depth frame has been processed."""
        self.depth.join()


class TrackingWorker:
    """
    Consumer thread feeding FrameChannels into a TongueTrackingPipeline.

    Results are kept in a latest-value slot for the display and can also
    be pushed to an optional callback (called on the worker thread).
    """

    def __init__(
        self,
        pipeline: TongueTrackingPipeline,
        channels: FrameChannels,
        on_result: Optional[Callable[[FrameResult], None]] = None,
        poll_timeout: float = WORKER_POLL_TIMEOUT
    ):
        self.pipeline = pipeline
        self.channels = channels
        self.on_result = on_result
        self.poll_timeout = poll_timeout

        self.latest_result: LatestValue[FrameResult] = LatestValue()
        self._running = False
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the worker thread."""
        if self._running:
            logger.warning("Tracking worker already running")
            return

        self._running = True
        self._thread = threading.Thread(target=self._run, name="TrackingWorker", daemon=True)
        self._thread.start()
        logger.info("Tracking worker started")

    def stop(self) -> None:
        """Stop the worker thread."""
        if not self._running:
            return

        self._running = False
        if self._thread:
            self._thread.join(timeout=WORKER_JOIN_TIMEOUT)
            self._thread = None
        logger.info(
            f"Tracking worker stopped. Processed: {self.pipeline.frames_processed}, "
            f"Dropped: {self.channels.frames_dropped}"
        )

    def _apply_latest_inputs(self, packet: DepthPacket) -> None:
        bodies = self.channels.bodies.take()
        if bodies is not None:
            self.pipeline.on_body_observation(bodies)

        face = self.channels.face.take()
        if face is not None:
            self.pipeline.on_face_observation(face)

        # Same-tick face wins over the shared slot
        if packet.face is not None:
            self.pipeline.on_face_observation(packet.face)

    def process_next(self, timeout: Optional[float] = None) -> Optional[FrameResult]:
        """
        Process one queued depth frame.

        Returns:
            The frame's result, or None if no frame arrived in time or the
            frame was skipped.
        """
        try:
            packet = self.channels.depth.get(timeout=timeout if timeout is not None else self.poll_timeout)
        except Empty:
            return None

        try:
            self._apply_latest_inputs(packet)
            result = self.pipeline.process_depth_frame(packet.frame)
            if result is not None:
                self.latest_result.publish(result)
                if self.on_result:
                    self.on_result(result)
            return result
        finally:
            self.channels.depth.task_done()

    def _run(self) -> None:
        while self._running:
            try:
                self.process_next()
            except Exception as e:
                logger.exception(f"Error processing depth frame: {e}")
