"""
Depth frame container for DepthTongueTracker.

A DepthFrame is one sensor capture: a row-major grid of uint16
distance-from-camera samples plus the reliable depth bounds the sensor
reported for that capture.
"""

from dataclasses import dataclass

import numpy as np

from .config import DEPTH_MAX_VALUE


@dataclass
class DepthFrame:
    """
    Single depth capture.

    Attributes:
        width: Frame width in pixels.
        height: Frame height in pixels.
        samples: Flat row-major uint16 depth samples, one per pixel.
        min_reliable_depth: Smallest depth the sensor trusts (inclusive).
        max_reliable_depth: Largest depth the sensor trusts (inclusive).
    """
    width: int
    height: int
    samples: np.ndarray
    min_reliable_depth: int
    max_reliable_depth: int

    @classmethod
    def from_array(
        cls,
        depth: np.ndarray,
        min_reliable_depth: int,
        max_reliable_depth: int
    ) -> "DepthFrame":
        """Build a frame from a (height, width) depth image."""
        image = np.asarray(depth, dtype=np.uint16)
        if image.ndim != 2:
            raise ValueError(f"Depth image must be 2-D, got shape {image.shape}")
        height, width = image.shape
        return cls(
            width=int(width),
            height=int(height),
            samples=image.reshape(-1),
            min_reliable_depth=int(min_reliable_depth),
            max_reliable_depth=int(max_reliable_depth),
        )

    @classmethod
    def from_buffer(
        cls,
        buffer: bytes,
        width: int,
        height: int,
        min_reliable_depth: int,
        max_reliable_depth: int = DEPTH_MAX_VALUE
    ) -> "DepthFrame":
        """
        Wrap a raw little-endian 16-bit sensor buffer without copying.

        The buffer length is not checked here; use is_consistent() before
        processing, as the sensor can hand over truncated buffers.
        """
        samples = np.frombuffer(buffer, dtype="<u2")
        return cls(
            width=width,
            height=height,
            samples=samples,
            min_reliable_depth=min_reliable_depth,
            max_reliable_depth=max_reliable_depth,
        )

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def is_consistent(self) -> bool:
        """Check that the sample count matches the declared dimensions."""
        return (
            self.width > 0
            and self.height > 0
            and self.samples.ndim == 1
            and self.samples.size == self.pixel_count
        )

    def as_image(self) -> np.ndarray:
        """Return the samples as a (height, width) view."""
        return self.samples.reshape(self.height, self.width)
