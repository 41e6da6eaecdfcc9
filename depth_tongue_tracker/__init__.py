"""
DepthTongueTracker - tongue-tip direction tracking from depth captures.

Finds the point nearest to the camera inside the tracked user's mouth on
every depth frame and turns it into a stable direction symbol.
"""

__version__ = "1.0.0"

from .config import ScanSettings, StabilizerSettings
from .depth_frame import DepthFrame
from .mouth_region import MouthRegion, Point2D, map_mouth_region
from .depth_scanner import ScanResult, TongueTipCandidate, scan_depth_frame
from .direction import DirectionSymbol, classify_direction
from .temporal_stabilizer import StabilizerState, StabilizerUpdate, TemporalStabilizer
from .face_input import BodyObservation, DetectionResult, FaceObservation
from .pipeline import FrameResult, TrackingState, TongueTrackingPipeline
from .frame_channels import FrameChannels, TrackingWorker
from .profile_loader import TrackerProfile, ProfileLoadError, load_profile

__all__ = [
    "ScanSettings",
    "StabilizerSettings",
    "DepthFrame",
    "MouthRegion",
    "Point2D",
    "map_mouth_region",
    "ScanResult",
    "TongueTipCandidate",
    "scan_depth_frame",
    "DirectionSymbol",
    "classify_direction",
    "StabilizerState",
    "StabilizerUpdate",
    "TemporalStabilizer",
    "BodyObservation",
    "DetectionResult",
    "FaceObservation",
    "FrameResult",
    "TrackingState",
    "TongueTrackingPipeline",
    "FrameChannels",
    "TrackingWorker",
    "TrackerProfile",
    "ProfileLoadError",
    "load_profile",
]
