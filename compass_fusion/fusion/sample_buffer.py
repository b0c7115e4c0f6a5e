"""Latest-sample slots for the accelerometer and magnetometer streams.

Each stream owns exactly one slot. An update replaces the slot's
SensorSample reference in a single assignment, so a reader always sees
either the previous or the new sample, never a partially written one.
"""

import logging
from typing import Dict, Optional
import numpy as np

from ..core.config import Config
from ..core.types import SensorSample, SensorStream
from ..core.validation import SampleValidator

logger = logging.getLogger(__name__)


class SampleBuffer:
    """Single-slot-per-stream store of the most recent sensor samples.

    Also tracks the observed inter-arrival interval of every stream so
    that the staleness window follows the actual delivery rate.
    """

    def __init__(self, config: Config, validator: Optional[SampleValidator] = None):
        """Initialize buffer.

        Args:
            config: System configuration with sensor and staleness settings.
            validator: Vector validator. Built from config if None.
        """
        self._config = config
        self._stale_cfg = config.sensor.staleness
        self._validator = validator or SampleValidator(config)

        self._slots: Dict[SensorStream, Optional[SensorSample]] = {
            stream: None for stream in SensorStream
        }
        self._interval_ms: Dict[SensorStream, float] = {}
        self._update_counts: Dict[SensorStream, int] = {}
        self._invalid_counts: Dict[SensorStream, int] = {}
        self._warned: Dict[SensorStream, bool] = {}
        self._reset_rates()

    def _reset_rates(self) -> None:
        sensor_cfg = self._config.sensor
        nominal_hz = {
            SensorStream.ACCELEROMETER: sensor_cfg.accelerometer.nominal_rate_hz,
            SensorStream.MAGNETOMETER: sensor_cfg.magnetometer.nominal_rate_hz,
        }
        for stream in SensorStream:
            self._interval_ms[stream] = 1000.0 / nominal_hz[stream]
            self._update_counts[stream] = 0
            self._invalid_counts[stream] = 0
            self._warned[stream] = False

    def update(self, stream: SensorStream, vector, timestamp_ms: int) -> SensorSample:
        """Replace the slot of ``stream`` with a new sample.

        Invalid vectors (non-finite, degenerate) are stored with
        ``valid=False`` so the estimator reports INVALID instead of reusing
        an older good sample.

        Args:
            stream: Stream that produced the reading.
            vector: Three components in sensor units.
            timestamp_ms: Sample time in milliseconds.

        Returns:
            The stored sample.
        """
        validation = self._validator.validate_vector(stream, vector)

        try:
            arr = np.array(vector, dtype=np.float64)
        except (TypeError, ValueError):
            arr = np.full(3, np.nan)
        if arr.shape != (3,):
            arr = np.full(3, np.nan)
        arr.setflags(write=False)

        previous = self._slots[stream]
        if previous is not None:
            self._observe_interval(stream, timestamp_ms - previous.timestamp_ms)

        sample = SensorSample(vector=arr, timestamp_ms=int(timestamp_ms),
                              valid=validation.is_valid)
        self._slots[stream] = sample

        self._update_counts[stream] += 1
        if not validation.is_valid:
            self._invalid_counts[stream] += 1
            logger.debug("Invalid %s sample: %s", stream.value, "; ".join(validation.errors))
        elif validation.warnings:
            logger.debug("%s sample: %s", stream.value, "; ".join(validation.warnings))
        self._track_warnings(stream, validation)

        return sample

    def _track_warnings(self, stream: SensorStream, validation) -> None:
        """Log when a stream starts or stops producing suspicious samples."""
        if not validation.is_valid:
            return

        warned = bool(validation.warnings)
        if warned and not self._warned[stream]:
            logger.warning("%s out of range: %s", stream.value, "; ".join(validation.warnings))
        elif not warned and self._warned[stream]:
            logger.info("%s back in range", stream.value)
        self._warned[stream] = warned

    def update_accelerometer(self, vector, timestamp_ms: int) -> SensorSample:
        """Store a new accelerometer sample."""
        return self.update(SensorStream.ACCELEROMETER, vector, timestamp_ms)

    def update_magnetometer(self, vector, timestamp_ms: int) -> SensorSample:
        """Store a new magnetometer sample."""
        return self.update(SensorStream.MAGNETOMETER, vector, timestamp_ms)

    def _observe_interval(self, stream: SensorStream, dt_ms: float) -> None:
        """Track mean inter-arrival time with a low-pass filter."""
        if dt_ms <= 0:
            logger.debug("Non-monotonic %s timestamp: dt=%s ms", stream.value, dt_ms)
            return

        # A gap longer than the window is an outage, not a rate change.
        dt_ms = min(dt_ms, self.staleness_window_ms(stream))

        alpha = self._stale_cfg.rate_smoothing
        self._interval_ms[stream] = (
            (1 - alpha) * self._interval_ms[stream] + alpha * dt_ms
        )

    def get(self, stream: SensorStream) -> Optional[SensorSample]:
        """Latest sample of ``stream``, or None if nothing arrived yet."""
        return self._slots[stream]

    @property
    def accelerometer(self) -> Optional[SensorSample]:
        return self._slots[SensorStream.ACCELEROMETER]

    @property
    def magnetometer(self) -> Optional[SensorSample]:
        return self._slots[SensorStream.MAGNETOMETER]

    def mean_interval_ms(self, stream: SensorStream) -> float:
        """Observed mean sample interval, seeded from the nominal rate."""
        return self._interval_ms[stream]

    def staleness_window_ms(self, stream: SensorStream) -> float:
        """Maximum sample age before ``stream`` counts as stale."""
        cfg = self._stale_cfg
        window = cfg.interval_factor * self._interval_ms[stream]
        return float(min(max(window, cfg.min_window_ms), cfg.max_window_ms))

    def is_stale(self, stream: SensorStream, now_ms: int) -> bool:
        """Whether the latest sample of ``stream`` is missing or too old."""
        sample = self._slots[stream]
        if sample is None:
            return True
        return now_ms - sample.timestamp_ms > self.staleness_window_ms(stream)

    @property
    def latest_timestamp_ms(self) -> Optional[int]:
        """Most recent timestamp across both streams."""
        stamps = [s.timestamp_ms for s in self._slots.values() if s is not None]
        return max(stamps) if stamps else None

    def get_stats(self) -> dict:
        """Get buffer statistics."""
        return {
            stream.value: {
                "updates": self._update_counts[stream],
                "invalid": self._invalid_counts[stream],
                "mean_interval_ms": self._interval_ms[stream],
                "staleness_window_ms": self.staleness_window_ms(stream),
            }
            for stream in SensorStream
        }

    def reset(self) -> None:
        """Drop both samples and forget observed rates."""
        for stream in SensorStream:
            self._slots[stream] = None
        self._reset_rates()
