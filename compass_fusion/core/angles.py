"""Angle normalization and smoothing utilities."""

from typing import Optional
import numpy as np


def normalize_azimuth(angle_deg: float) -> float:
    """Wrap an angle into the half-open range [0, 360).

    Args:
        angle_deg: Finite angle in degrees.

    Returns:
        Equivalent angle in [0, 360).

    Raises:
        ValueError: If the angle is NaN or infinite.
    """
    if not np.isfinite(angle_deg):
        raise ValueError(f"Non-finite angle: {angle_deg}")

    wrapped = float(angle_deg) % 360.0
    # Tiny negative inputs round up to exactly 360.0
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped


def angular_difference(a_deg: float, b_deg: float) -> float:
    """Signed shortest difference a - b in degrees, in [-180, 180)."""
    return (a_deg - b_deg + 180.0) % 360.0 - 180.0


def _check_alpha(alpha: float) -> float:
    if not 0.0 < alpha <= 1.0:
        raise ValueError(f"Smoothing factor must be in (0, 1], got {alpha}")
    return float(alpha)


class CircularEma:
    """Exponential moving average of a heading on the unit circle.

    Averages (cos, sin) and converts back with atan2 so that a sequence
    crossing 359 -> 0 does not pull the result towards 180.
    """

    def __init__(self, alpha: float):
        """Initialize filter.

        Args:
            alpha: Weight of the newest sample, in (0, 1]. 1.0 disables
                smoothing.
        """
        self.alpha = _check_alpha(alpha)
        self._cos: Optional[float] = None
        self._sin: Optional[float] = None

    def update(self, angle_deg: float) -> float:
        """Add a sample and return the smoothed heading in [0, 360)."""
        rad = np.deg2rad(angle_deg)
        c, s = float(np.cos(rad)), float(np.sin(rad))

        if self._cos is None or self._sin is None:
            self._cos, self._sin = c, s
        else:
            self._cos += self.alpha * (c - self._cos)
            self._sin += self.alpha * (s - self._sin)

        return self.value

    @property
    def value(self) -> Optional[float]:
        """Smoothed heading, or None before the first sample."""
        if self._cos is None or self._sin is None:
            return None
        return normalize_azimuth(np.rad2deg(np.arctan2(self._sin, self._cos)))

    @property
    def is_seeded(self) -> bool:
        return self._cos is not None

    def reset(self) -> None:
        """Forget the accumulated heading."""
        self._cos = None
        self._sin = None


class LinearEma:
    """Plain exponential moving average for angles that do not wrap."""

    def __init__(self, alpha: float):
        self.alpha = _check_alpha(alpha)
        self._value: Optional[float] = None

    def update(self, sample: float) -> float:
        if self._value is None:
            self._value = float(sample)
        else:
            self._value = (1 - self.alpha) * self._value + self.alpha * sample
        return self._value

    @property
    def value(self) -> Optional[float]:
        return self._value

    def reset(self) -> None:
        self._value = None
