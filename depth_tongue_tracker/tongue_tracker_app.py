#!/usr/bin/env python3
"""
Depth Tongue Tracker

Main entry point for DepthTongueTracker. Replays a recorded depth
capture through the tracking pipeline and reports the tongue direction.

Usage:
    depth-tongue-tracker --recording <file.npz> [--profile <path>] [--debug]

Exit Codes:
    0 - Success
    1 - Profile error
    2 - Recording error
    3 - Runtime error
"""

import argparse
import signal
import sys
import time
from typing import Optional, Sequence

from .config import (
    EXIT_SUCCESS,
    EXIT_PROFILE_ERROR,
    EXIT_RECORDING_ERROR,
    EXIT_RUNTIME_ERROR,
)
from .direction import DirectionSymbol
from .display import close_debug_view, sensor_status_text, show_debug_view
from .frame_channels import FrameChannels, TrackingWorker
from .logger import setup_logging, get_logger
from .pipeline import FrameResult, TongueTrackingPipeline
from .profile_loader import (
    ProfileLoadError,
    TrackerProfile,
    create_default_profile,
    load_profile,
)
from .recording import RecordingError, RecordingPlayer


class TongueTrackerApp:
    """
    Replay application for the tongue tracker.

    The main thread plays the sensor role: it publishes each recorded
    tick into the frame channels. A TrackingWorker thread runs the
    pipeline, and in debug mode the main thread shows the latest result.
    """

    def __init__(
        self,
        profile: TrackerProfile,
        recording_path: str,
        debug: bool = False,
        realtime: bool = False
    ):
        """
        Initialize application.

        Args:
            profile: Loaded profile configuration.
            recording_path: Capture session to replay.
            debug: Show the debug visualization window.
            realtime: Pace playback at the recording frame rate.
        """
        self.profile = profile
        self.recording_path = recording_path
        self.debug = debug
        self.realtime = realtime

        self._logger = get_logger("App")
        self._running = False

        self._player: Optional[RecordingPlayer] = None
        self._pipeline: Optional[TongueTrackingPipeline] = None
        self._channels: Optional[FrameChannels] = None
        self._worker: Optional[TrackingWorker] = None

        # Stats
        self._tick_count = 0
        self._start_time = 0.0
        self._last_fps_time = 0.0
        self._fps = 0.0
        self.emitted_directions: list[DirectionSymbol] = []

    @property
    def pipeline(self) -> Optional[TongueTrackingPipeline]:
        return self._pipeline

    def initialize(self) -> None:
        """
        Initialize all components.

        Raises:
            RecordingError: If the recording cannot be opened.
        """
        self._logger.info("Initializing tongue tracker...")

        self._player = RecordingPlayer(self.recording_path)
        self._player.open()

        self._pipeline = TongueTrackingPipeline(
            scan_settings=self.profile.scan,
            stabilizer_settings=self.profile.stabilizer,
            accept_maybe=self.profile.accept_maybe_mouth_open,
        )
        self._channels = FrameChannels()
        self._worker = TrackingWorker(
            self._pipeline,
            self._channels,
            on_result=self._on_result,
        )

        self._logger.info(sensor_status_text(True))

    def _on_result(self, result: FrameResult) -> None:
        """Log direction changes (called on the worker thread)."""
        if not result.emitted or result.direction is None:
            return
        previous = self.emitted_directions[-1] if self.emitted_directions else None
        self.emitted_directions.append(result.direction)
        if result.direction != previous:
            self._logger.info(
                f"Direction: {result.direction.glyph} ({result.direction.label}) "
                f"at {result.position_text}"
            )

    def run(self) -> None:
        """Replay the recording through the pipeline."""
        if self._player is None or self._channels is None or self._worker is None:
            raise RuntimeError("initialize() must be called before run()")

        self._running = True
        self._start_time = time.perf_counter()
        self._last_fps_time = self._start_time
        self._worker.start()

        self._logger.info("Starting replay...")

        try:
            while self._running:
                tick = self._player.read_tick(realtime=self.realtime)
                if tick is None:
                    self._logger.info("End of recording")
                    break

                if self.realtime:
                    # Live pacing: face goes to the latest-value slot like a sensor callback
                    if tick.face is not None:
                        self._channels.publish_face(tick.face)
                    self._channels.publish_depth(tick.depth)
                else:
                    # The player runs ahead of the worker; keep the face with its frame
                    self._channels.publish_depth(tick.depth, block=True, face=tick.face)
                self._tick_count += 1
                self._update_fps()

                if self.debug and self._show_latest():
                    self._logger.info("Quit key pressed")
                    break

            self._channels.wait_until_drained()
        except KeyboardInterrupt:
            self._logger.info("Interrupted by user")
        finally:
            self.stop()

    def _show_latest(self) -> bool:
        """Show the newest result; return True when quit was requested."""
        result = self._worker.latest_result.peek() if self._worker else None
        if result is None:
            return False
        key = show_debug_view(result, self._fps)
        return key == ord('q') or key == 27  # q or ESC

    def _update_fps(self) -> None:
        current_time = time.perf_counter()
        if current_time - self._last_fps_time >= 1.0:
            self._fps = self._tick_count / (current_time - self._start_time)
            self._last_fps_time = current_time

    def request_stop(self) -> None:
        """Ask the replay loop to finish after the current tick."""
        self._running = False

    def stop(self) -> None:
        """Stop replay and release resources."""
        if not self._running and self._worker is None and self._player is None:
            return
        self._running = False
        self._logger.info("Stopping tongue tracker...")

        if self._worker:
            self._worker.stop()
            self._worker = None

        if self._player:
            self._player.close()
            self._player = None

        if self.debug:
            close_debug_view()

        if self._tick_count > 0:
            elapsed = time.perf_counter() - self._start_time
            avg_fps = self._tick_count / elapsed if elapsed > 0 else 0
            self._logger.info(
                f"Replay stopped. Published {self._tick_count} ticks "
                f"in {elapsed:.1f}s ({avg_fps:.1f} FPS average)"
            )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Depth Tongue Tracker - tongue direction from depth captures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0  Success
  1  Profile error (file not found, invalid JSON)
  2  Recording error (file not found, malformed capture)
  3  Runtime error (unexpected error)

Examples:
  depth-tongue-tracker --recording session.npz
  depth-tongue-tracker --recording session.npz --profile tracker.json
  depth-tongue-tracker --recording session.npz --debug --realtime
"""
    )

    parser.add_argument(
        "--recording", "-r",
        required=True,
        help="Path to a recorded capture session (.npz)"
    )

    parser.add_argument(
        "--profile", "-p",
        default=None,
        help="Path to JSON profile file (default: built-in settings)"
    )

    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging and the visualization window"
    )

    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Replay at the recording frame rate instead of as fast as possible"
    )

    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to the console only"
    )

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code.
    """
    args = parse_args(argv)

    logger = setup_logging(debug=args.debug, log_to_file=not args.no_log_file)
    logger.info("Depth Tongue Tracker starting...")

    try:
        profile = load_profile(args.profile) if args.profile else create_default_profile()
    except ProfileLoadError as e:
        logger.error(f"Failed to load profile: {e}")
        return EXIT_PROFILE_ERROR

    app: Optional[TongueTrackerApp] = None
    previous_handlers: dict[int, object] = {}

    try:
        app = TongueTrackerApp(
            profile=profile,
            recording_path=args.recording,
            debug=args.debug,
            realtime=args.realtime
        )

        def signal_handler(sig, frame):
            logger.info("Received shutdown signal")
            if app:
                app.request_stop()

        shutdown_signals = [signal.SIGINT]
        # SIGTERM is not available on Windows
        if sys.platform != 'win32':
            shutdown_signals.append(signal.SIGTERM)
        for sig in shutdown_signals:
            previous_handlers[sig] = signal.getsignal(sig)
            signal.signal(sig, signal_handler)

        app.initialize()
        app.run()

        return EXIT_SUCCESS

    except RecordingError as e:
        logger.error(f"Recording error: {e}")
        logger.error(sensor_status_text(False))
        return EXIT_RECORDING_ERROR
    except Exception as e:
        logger.exception(f"Runtime error: {e}")
        return EXIT_RUNTIME_ERROR
    finally:
        if app:
            app.stop()
        for sig, handler in previous_handlers.items():
            if handler is None:
                continue
            signal.signal(sig, handler)


if __name__ == "__main__":
    sys.exit(main())
