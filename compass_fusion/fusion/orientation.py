"""Orientation estimation from gravity and magnetic field vectors.

Axis convention (device frame): x points to the right edge of the screen,
y to the top edge, z out of the screen. The accelerometer reads +g on the
axis pointing up, so a device lying flat, screen up, reports (0, 0, 9.81).

The rotation matrix has rows [east, north, gravity], each expressed in the
device frame:

    azimuth = atan2(R[0][1], R[1][1])   heading of the device y axis
    pitch   = asin(-R[2][1])
    roll    = atan2(-R[2][0], R[2][2])
"""

import logging
from collections import Counter
from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray

from ..core.angles import CircularEma, LinearEma, normalize_azimuth
from ..core.config import Config
from ..core.types import (
    OrientationState,
    OrientationStatus,
    SensorStream,
)
from .sample_buffer import SampleBuffer

logger = logging.getLogger(__name__)

# Below this |m x g| (unit vectors) the field is parallel to gravity
# and carries no heading.
MIN_HORIZONTAL_FIELD = 1e-6


def compute_rotation_matrix(
    gravity: NDArray[np.float64],
    geomagnetic: NDArray[np.float64],
    epsilon: float = 1e-3
) -> Optional[NDArray[np.float64]]:
    """Build the device-to-world rotation matrix.

    Args:
        gravity: Accelerometer vector [ax, ay, az] in m/s^2.
        geomagnetic: Magnetometer vector [mx, my, mz] in uT.
        epsilon: Minimum magnitude of either input vector.

    Returns:
        3x3 matrix with rows [east, north, gravity], or None when either
        vector is degenerate or the field is parallel to gravity.
    """
    g = np.asarray(gravity, dtype=np.float64)
    m = np.asarray(geomagnetic, dtype=np.float64)

    if not (np.isfinite(g).all() and np.isfinite(m).all()):
        return None

    g_norm = np.linalg.norm(g)
    m_norm = np.linalg.norm(m)
    if g_norm < epsilon or m_norm < epsilon:
        return None

    g = g / g_norm
    m = m / m_norm

    east = np.cross(m, g)
    east_norm = np.linalg.norm(east)
    if east_norm < MIN_HORIZONTAL_FIELD:
        return None
    east = east / east_norm

    north = np.cross(g, east)

    return np.vstack((east, north, g))


def orientation_from_matrix(R: NDArray[np.float64]) -> Tuple[float, float, float]:
    """Extract (azimuth, pitch, roll) in degrees from a rotation matrix.

    Args:
        R: Matrix from compute_rotation_matrix.

    Returns:
        Azimuth in [0, 360), pitch in [-90, 90], roll in [-180, 180].
    """
    azimuth = normalize_azimuth(np.rad2deg(np.arctan2(R[0, 1], R[1, 1])))
    pitch = float(np.rad2deg(np.arcsin(np.clip(-R[2, 1], -1.0, 1.0))))
    roll = float(np.rad2deg(np.arctan2(-R[2, 0], R[2, 2])))
    return azimuth, pitch, roll


class OrientationEstimator:
    """Smoothed azimuth/pitch/roll from the latest sample pair.

    Azimuth is averaged on the unit circle, pitch and roll directly.
    Invalid inputs produce an INVALID state and leave the smoothing
    accumulators untouched.

    Usage:
        estimator = OrientationEstimator(config)
        buffer.update_accelerometer(acc, t_ms)
        state = estimator.update(buffer, t_ms)
    """

    def __init__(self, config: Config):
        """Initialize estimator.

        Args:
            config: System configuration with sensor and smoothing settings.
        """
        self._config = config
        self._acc_cfg = config.sensor.accelerometer
        smoothing = config.estimator.smoothing

        self._azimuth_ema = CircularEma(smoothing.azimuth_alpha)
        self._pitch_ema = LinearEma(smoothing.tilt_alpha)
        self._roll_ema = LinearEma(smoothing.tilt_alpha)

        self._state = OrientationState.invalid()
        self._status_counts: Counter = Counter()
        self._invalid_reasons: Counter = Counter()

    def update(self, buffer: SampleBuffer, now_ms: Optional[int] = None) -> OrientationState:
        """Recompute orientation from the buffer contents.

        Safe to call on every sample or from a fixed-rate tick.

        Args:
            buffer: Sample buffer holding the latest pair.
            now_ms: Evaluation time for the staleness check. Defaults to
                the most recent sample timestamp.

        Returns:
            New orientation state (also available as ``state``).
        """
        acc = buffer.accelerometer
        mag = buffer.magnetometer

        if acc is None or mag is None:
            return self._invalidate("missing_sample", now_ms)

        if now_ms is None:
            now_ms = max(acc.timestamp_ms, mag.timestamp_ms)

        if not acc.valid:
            return self._invalidate("invalid_accelerometer", now_ms)
        if not mag.valid:
            return self._invalidate("invalid_magnetometer", now_ms)

        for stream in SensorStream:
            if buffer.is_stale(stream, now_ms):
                return self._invalidate(f"stale_{stream.value}", now_ms)

        R = compute_rotation_matrix(acc.vector, mag.vector,
                                    self._config.sensor.degenerate_epsilon)
        if R is None:
            return self._invalidate("degenerate_geometry", now_ms)

        azimuth, pitch, roll = orientation_from_matrix(R)

        status = OrientationStatus.VALID
        if abs(acc.magnitude - self._acc_cfg.gravity_nominal) > self._acc_cfg.gravity_tolerance:
            status = OrientationStatus.UNRELIABLE

        state = OrientationState(
            azimuth_deg=self._azimuth_ema.update(azimuth),
            pitch_deg=self._pitch_ema.update(pitch),
            roll_deg=self._roll_ema.update(roll),
            status=status,
            timestamp_ms=now_ms,
        )
        return self._commit(state)

    def _invalidate(self, reason: str, now_ms: Optional[int]) -> OrientationState:
        """Publish an INVALID state carrying the last smoothed angles."""
        self._invalid_reasons[reason] += 1
        if self._state.status is not OrientationStatus.INVALID:
            logger.warning("Orientation invalid: %s", reason)

        state = OrientationState.invalid(
            azimuth_deg=self._azimuth_ema.value or 0.0,
            pitch_deg=self._pitch_ema.value or 0.0,
            roll_deg=self._roll_ema.value or 0.0,
            timestamp_ms=now_ms,
        )
        return self._commit(state)

    def _commit(self, state: OrientationState) -> OrientationState:
        previous = self._state.status
        if state.status is not previous and state.status is not OrientationStatus.INVALID:
            logger.info("Orientation status %s -> %s", previous.value, state.status.value)

        self._status_counts[state.status] += 1
        self._state = state
        return state

    @property
    def state(self) -> OrientationState:
        """Most recent orientation state."""
        return self._state

    @property
    def smoothed_azimuth(self) -> Optional[float]:
        """Smoothed azimuth accumulator, None before the first valid pair."""
        return self._azimuth_ema.value

    def get_stats(self) -> dict:
        """Get estimator statistics."""
        return {
            "updates": sum(self._status_counts.values()),
            "valid": self._status_counts[OrientationStatus.VALID],
            "unreliable": self._status_counts[OrientationStatus.UNRELIABLE],
            "invalid": self._status_counts[OrientationStatus.INVALID],
            "invalid_reasons": dict(self._invalid_reasons),
        }

    def reset(self) -> None:
        """Reset smoothing accumulators and state."""
        self._azimuth_ema.reset()
        self._pitch_ema.reset()
        self._roll_ema.reset()
        self._state = OrientationState.invalid()
        self._status_counts.clear()
        self._invalid_reasons.clear()
