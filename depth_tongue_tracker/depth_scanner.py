"""
Depth visualization and tongue-tip scan for DepthTongueTracker.

One pass over the depth samples produces both the 8-bit display buffer
and the tongue-tip candidate:

- Pixels inside the mouth region are painted white and searched for the
  sample nearest to the camera (smallest depth, first index on ties).
- Pixels outside the region map their depth onto the byte range, with
  out-of-range samples rendered black.
- The winning pixel is finally painted black so the tip is visible.

The scan runs on every depth frame (30 Hz, 512x424 samples on Kinect v2),
so it is vectorized with numpy and the region membership is cached per
region: the region only changes when face data arrives.
"""

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import Optional

import numpy as np

from .config import (
    DEPTH_MAX_VALUE,
    NO_DATA_BYTE,
    REGION_FILL_BYTE,
    REGION_MASK_CACHE_SIZE,
    TONGUE_TIP_BYTE,
    ScanSettings,
)
from .depth_frame import DepthFrame
from .mouth_region import MouthRegion, index_to_pixel, in_region


class PixelClass(IntEnum):
    """Which branch of the scan handles a pixel."""
    OUTSIDE_REGION = 0
    INSIDE_REGION = 1


@dataclass(frozen=True)
class TongueTipCandidate:
    """
    Nearest-to-camera pixel inside the mouth region for one frame.

    Attributes:
        index: Flat depth index.
        x: Pixel x (1-based index convention).
        y: Pixel y (1-based index convention).
        depth: Raw depth sample.
        nx: X relative to the region, 0 = left edge, 1 = right edge.
        ny: Y relative to the region, 0 = top edge, 1 = bottom edge.
    """
    index: int
    x: int
    y: int
    depth: int
    nx: float
    ny: float

    @property
    def position(self) -> tuple[float, float]:
        return self.nx, self.ny


@dataclass
class ScanResult:
    """Output of one fused scan."""
    pixels: np.ndarray  # Flat uint8 display buffer
    candidate: Optional[TongueTipCandidate]


def pixel_class(index: int, region: MouthRegion, width: int) -> PixelClass:
    """Classify a single flat index against the region."""
    if in_region(index, region, width):
        return PixelClass.INSIDE_REGION
    return PixelClass.OUTSIDE_REGION


@lru_cache(maxsize=REGION_MASK_CACHE_SIZE)
def region_indices(region: MouthRegion, width: int, height: int) -> np.ndarray:
    """
    Flat indices strictly inside the region, in scan order.

    The returned array is shared through the cache and is read-only.
    """
    if region.is_empty or width <= 0 or height <= 0:
        indices = np.empty(0, dtype=np.intp)
    else:
        shifted = np.arange(1, width * height + 1, dtype=np.int64)
        py = shifted // width
        px = shifted % width
        inside = (
            (py > region.top) & (py < region.bottom)
            & (px > region.left) & (px < region.right)
        )
        indices = np.flatnonzero(inside)
    indices.setflags(write=False)
    return indices


def region_mask(region: MouthRegion, width: int, height: int) -> np.ndarray:
    """Boolean mask over all flat indices, True inside the region."""
    mask = np.zeros(width * height, dtype=bool)
    mask[region_indices(region, width, height)] = True
    return mask


def map_depth_to_byte(
    depth: np.ndarray,
    min_depth: int,
    max_depth: int,
    divisor: int
) -> np.ndarray:
    """
    Map depth samples onto display bytes.

    Samples within [min_depth, max_depth] become depth // divisor truncated
    to 8 bits; everything else becomes NO_DATA_BYTE.
    """
    samples = np.asarray(depth, dtype=np.uint16)
    in_range = (samples >= min_depth) & (samples <= max_depth)
    mapped = samples // np.uint16(divisor)
    return np.where(in_range, mapped, NO_DATA_BYTE).astype(np.uint8)


def scan_depth_frame(
    frame: DepthFrame,
    region: MouthRegion,
    settings: Optional[ScanSettings] = None
) -> ScanResult:
    """
    Build the display buffer and find the tongue-tip candidate.

    Args:
        frame: Depth frame to scan (not modified).
        region: Current mouth region; an empty region yields no candidate.
        settings: Scan settings (depth span, sentinel, far-field display).

    Returns:
        ScanResult with a fresh uint8 buffer and the candidate, if any.
    """
    settings = settings or ScanSettings()
    samples = frame.samples

    max_depth = DEPTH_MAX_VALUE if settings.show_far_field else frame.max_reliable_depth
    pixels = map_depth_to_byte(samples, frame.min_reliable_depth, max_depth, settings.divisor)

    inside = region_indices(region, frame.width, frame.height)
    if inside.size == 0:
        return ScanResult(pixels=pixels, candidate=None)

    pixels[inside] = REGION_FILL_BYTE

    # argmin keeps the first minimum, so ties resolve to the lowest index
    inside_depths = samples[inside]
    best = int(np.argmin(inside_depths))
    closest_depth = int(inside_depths[best])
    if closest_depth >= settings.closest_depth_sentinel:
        return ScanResult(pixels=pixels, candidate=None)

    index = int(inside[best])
    pixels[index] = TONGUE_TIP_BYTE

    x, y = index_to_pixel(index, frame.width)
    nx, ny = region.normalize(x, y)
    candidate = TongueTipCandidate(index=index, x=x, y=y, depth=closest_depth, nx=nx, ny=ny)
    return ScanResult(pixels=pixels, candidate=candidate)
