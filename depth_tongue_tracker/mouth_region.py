"""
Mouth region mapping for DepthTongueTracker.

Derives the rectangular search area for the tongue tip from the two
mouth corner points reported by the face tracker, and provides the
pixel-index helpers the depth scan uses.

Pixel coordinates are derived from flat depth indices with a 1-based
adjustment: x = (index + 1) % width, y = (index + 1) // width.
"""

from dataclasses import dataclass

from .logger import get_logger

logger = get_logger("MouthRegion")


@dataclass(frozen=True)
class Point2D:
    """Point in depth-frame pixel space."""
    x: float
    y: float


@dataclass(frozen=True)
class MouthRegion:
    """
    Axis-aligned mouth search rectangle in depth pixel coordinates.

    Attributes:
        left: X of the top-left corner.
        top: Y of the top-left corner.
        width: Horizontal extent in pixels.
        height: Vertical extent in pixels (always width // 2 when mapped).
    """
    left: int = 0
    top: int = 0
    width: int = 0
    height: int = 0

    @property
    def is_empty(self) -> bool:
        """A region without positive extent disables the scan."""
        return self.width <= 0 or self.height <= 0

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def contains(self, x: int, y: int) -> bool:
        """Strict interior test: boundary pixels are outside."""
        return self.top < y < self.bottom and self.left < x < self.right

    def normalize(self, x: int, y: int) -> tuple[float, float]:
        """
        Express a pixel position relative to the region on each axis.

        Returns:
            (nx, ny), in [0, 1] for pixels inside the region.

        Raises:
            ValueError: If the region is empty.
        """
        if self.is_empty:
            raise ValueError("Cannot normalize against an empty mouth region")
        return (x - self.left) / float(self.width), (y - self.top) / float(self.height)


EMPTY_REGION = MouthRegion()


def map_mouth_region(left_corner: Point2D, right_corner: Point2D) -> MouthRegion:
    """
    Build the mouth search region from the mouth corners.

    The region spans the corners horizontally and is half as tall as it
    is wide, centered on the corners' mean height. Swapped corners give
    an empty region rather than an error.

    Args:
        left_corner: Left mouth corner in depth pixel space.
        right_corner: Right mouth corner in depth pixel space.

    Returns:
        MouthRegion, possibly empty.
    """
    # int() truncates toward zero, matching the sensor SDK's float casts
    center_y = int((left_corner.y + right_corner.y) / 2.0)
    left = int(left_corner.x)
    width = int(right_corner.x - left_corner.x)
    if width < 0:
        logger.debug(f"Mouth corners swapped (width={width}), region disabled")
        width = 0
    height = width // 2
    top = center_y - height // 2
    return MouthRegion(left=left, top=top, width=width, height=height)


def index_to_pixel(index: int, width: int) -> tuple[int, int]:
    """Convert a flat depth index to (x, y) under the 1-based convention."""
    return (index + 1) % width, (index + 1) // width


def pixel_to_index(x: int, y: int, width: int) -> int:
    """Inverse of index_to_pixel for 0 <= x < width."""
    return y * width + x - 1


def in_region(index: int, region: MouthRegion, width: int) -> bool:
    """Check whether a flat depth index lies strictly inside the region."""
    x, y = index_to_pixel(index, width)
    return region.contains(x, y)
