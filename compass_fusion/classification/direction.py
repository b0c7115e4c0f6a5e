"""8-point compass labels from azimuth.

The table partitions [0, 360) into half-open intervals [lower, upper).
A value on a boundary belongs to the interval it opens, so 22.5 is NE
and 337.5 is N.
"""

from bisect import bisect_right
from typing import Tuple

from ..core.angles import normalize_azimuth
from ..core.types import CompassDirection

DIRECTION_TABLE: Tuple[Tuple[float, float, CompassDirection], ...] = (
    (0.0, 22.5, CompassDirection.N),
    (22.5, 67.5, CompassDirection.NE),
    (67.5, 112.5, CompassDirection.E),
    (112.5, 157.5, CompassDirection.SE),
    (157.5, 202.5, CompassDirection.S),
    (202.5, 247.5, CompassDirection.SW),
    (247.5, 292.5, CompassDirection.W),
    (292.5, 337.5, CompassDirection.NW),
    (337.5, 360.0, CompassDirection.N),
)

_LOWER_BOUNDS = [lower for lower, _, _ in DIRECTION_TABLE]


def classify_direction(azimuth_deg: float) -> CompassDirection:
    """Map an azimuth to its compass label.

    Args:
        azimuth_deg: Heading in degrees. Values outside [0, 360) are
            wrapped first.

    Returns:
        Exactly one of the 8 compass directions.

    Raises:
        ValueError: If the azimuth is NaN or infinite.
    """
    azimuth = normalize_azimuth(azimuth_deg)
    index = bisect_right(_LOWER_BOUNDS, azimuth) - 1
    return DIRECTION_TABLE[index][2]


def direction_intervals(direction: CompassDirection) -> Tuple[Tuple[float, float], ...]:
    """Half-open intervals covered by ``direction``."""
    return tuple((lower, upper) for lower, upper, label in DIRECTION_TABLE
                 if label is direction)
