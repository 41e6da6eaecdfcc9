"""
Tongue direction classification for DepthTongueTracker.

Splits the normalized mouth area into a 3x3 grid and names the cell the
tongue tip falls into.
"""

from enum import Enum

from .config import DIRECTION_LOW_THRESHOLD, DIRECTION_HIGH_THRESHOLD


class DirectionSymbol(Enum):
    """Displayed tongue direction. Values are the glyphs shown to the user."""
    NORTH_WEST = "↖"
    WEST = "←"
    SOUTH_WEST = "↙"
    NORTH = "↑"
    CENTER = "o"
    SOUTH = "↓"
    NORTH_EAST = "↗"
    EAST = "→"
    SOUTH_EAST = "↘"
    CLOSED = "X"

    @property
    def glyph(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """ASCII label for surfaces that cannot render the arrow glyphs."""
        return DIRECTION_LABELS[self]


DIRECTION_LABELS: dict[DirectionSymbol, str] = {
    DirectionSymbol.NORTH_WEST: "NW",
    DirectionSymbol.WEST: "W",
    DirectionSymbol.SOUTH_WEST: "SW",
    DirectionSymbol.NORTH: "N",
    DirectionSymbol.CENTER: "CENTER",
    DirectionSymbol.SOUTH: "S",
    DirectionSymbol.NORTH_EAST: "NE",
    DirectionSymbol.EAST: "E",
    DirectionSymbol.SOUTH_EAST: "SE",
    DirectionSymbol.CLOSED: "CLOSED",
}

# Columns are x buckets (west, center, east), rows are y buckets (north, center, south)
_DIRECTION_GRID: tuple[tuple[DirectionSymbol, ...], ...] = (
    (DirectionSymbol.NORTH_WEST, DirectionSymbol.WEST, DirectionSymbol.SOUTH_WEST),
    (DirectionSymbol.NORTH, DirectionSymbol.CENTER, DirectionSymbol.SOUTH),
    (DirectionSymbol.NORTH_EAST, DirectionSymbol.EAST, DirectionSymbol.SOUTH_EAST),
)


def _bucket(value: float, low: float, high: float) -> int:
    # NaN fails both comparisons and lands in the last bucket
    if value < low:
        return 0
    if value < high:
        return 1
    return 2


def classify_direction(
    nx: float,
    ny: float,
    low: float = DIRECTION_LOW_THRESHOLD,
    high: float = DIRECTION_HIGH_THRESHOLD
) -> DirectionSymbol:
    """
    Classify a normalized tongue-tip position.

    Values exactly on a threshold belong to the greater bucket. Positions
    outside [0, 1] fall into the outer buckets.

    Args:
        nx: Horizontal position, 0 = left mouth corner.
        ny: Vertical position, 0 = top of the mouth region.
        low: Upper bound of the west/north bucket.
        high: Upper bound of the center bucket.

    Returns:
        One of the nine directional symbols (never CLOSED).
    """
    return _DIRECTION_GRID[_bucket(nx, low, high)][_bucket(ny, low, high)]


def format_position(nx: float, ny: float) -> str:
    """Diagnostic text for a normalized position, e.g. '0.42, 0.57'."""
    return f"{nx:.2f}, {ny:.2f}"
