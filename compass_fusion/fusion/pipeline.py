"""Compass pipeline.

Main interface combining:
- SampleBuffer for the latest accelerometer/magnetometer pair
- OrientationEstimator for smoothed azimuth, pitch and roll
- classify_direction and LevelClassifier for the display labels
- CalibrationMonitor for the calibration hint

Provides a single API for sensor callbacks and display collaborators.
"""

import logging
from typing import Optional

from ..classification.direction import classify_direction
from ..classification.level import LevelClassifier
from ..core.config import Config, UPDATE_MODES
from ..core.types import (
    CalibrationState,
    CompassDirection,
    CompassReading,
    LevelState,
    OrientationState,
    SensorAccuracy,
    SensorStream,
)
from ..monitoring.calibration import CalibrationMonitor
from .orientation import OrientationEstimator
from .sample_buffer import SampleBuffer

logger = logging.getLogger(__name__)


class CompassPipeline:
    """Ingests sensor samples and exposes heading, level and calibration.

    In ``event`` mode every sample triggers a recomputation. In ``tick``
    mode samples are only stored and the host calls ``tick()`` at
    ``tick_rate_hz``. Estimator semantics are the same in both modes.

    Usage:
        pipeline = CompassPipeline(load_config())
        pipeline.on_accelerometer(acc, t_ms, SensorAccuracy.HIGH)
        pipeline.on_magnetometer(mag, t_ms, SensorAccuracy.MEDIUM)
        reading = pipeline.reading
    """

    def __init__(self, config: Optional[Config] = None):
        """Initialize pipeline.

        Args:
            config: System configuration. Defaults are used if None.

        Raises:
            ValueError: If the configured update mode is unknown.
        """
        if config is None:
            config = Config()

        mode = config.estimator.update_mode
        if mode not in UPDATE_MODES:
            raise ValueError(f"Unknown update mode {mode!r}, expected one of {UPDATE_MODES}")

        self._config = config
        self.update_mode = mode

        self.buffer = SampleBuffer(config)
        self.estimator = OrientationEstimator(config)
        self.level_classifier = LevelClassifier.from_config(config.level)
        self.calibration_monitor = CalibrationMonitor.from_config(config.calibration)

        self._direction: Optional[CompassDirection] = None

    def on_sample(
        self,
        stream: SensorStream,
        vector,
        timestamp_ms: int,
        accuracy: Optional[SensorAccuracy] = None
    ) -> Optional[OrientationState]:
        """Handle one sensor callback.

        Args:
            stream: Stream that produced the sample.
            vector: Three components in sensor units.
            timestamp_ms: Sample time in milliseconds.
            accuracy: Accuracy tier reported with the sample, if any.

        Returns:
            New orientation state in event mode, None in tick mode.
        """
        self.buffer.update(stream, vector, timestamp_ms)
        if accuracy is not None:
            self.calibration_monitor.report(stream, accuracy)

        if self.update_mode == "event":
            return self._recompute(timestamp_ms)
        return None

    def on_accelerometer(self, vector, timestamp_ms: int,
                         accuracy: Optional[SensorAccuracy] = None) -> Optional[OrientationState]:
        """Handle an accelerometer callback."""
        return self.on_sample(SensorStream.ACCELEROMETER, vector, timestamp_ms, accuracy)

    def on_magnetometer(self, vector, timestamp_ms: int,
                        accuracy: Optional[SensorAccuracy] = None) -> Optional[OrientationState]:
        """Handle a magnetometer callback."""
        return self.on_sample(SensorStream.MAGNETOMETER, vector, timestamp_ms, accuracy)

    def tick(self, now_ms: int) -> OrientationState:
        """Recompute at a fixed-rate tick.

        Also usable in event mode to notice that a stream went silent.
        """
        return self._recompute(now_ms)

    def _recompute(self, now_ms: int) -> OrientationState:
        state = self.estimator.update(self.buffer, now_ms)

        if state.is_valid:
            self._direction = classify_direction(state.azimuth_deg)
            self.level_classifier.update(state.pitch_deg, state.roll_deg)
        else:
            self._direction = None

        return state

    @property
    def tick_interval_ms(self) -> float:
        """Period between ticks in tick mode."""
        return 1000.0 / self._config.estimator.tick_rate_hz

    @property
    def orientation(self) -> OrientationState:
        return self.estimator.state

    @property
    def direction(self) -> Optional[CompassDirection]:
        """Compass label, None while the orientation is INVALID."""
        return self._direction

    @property
    def level(self) -> LevelState:
        return self.level_classifier.state

    @property
    def calibration(self) -> CalibrationState:
        return self.calibration_monitor.state

    @property
    def reading(self) -> CompassReading:
        """Snapshot of everything a display needs."""
        return CompassReading(
            orientation=self.orientation,
            direction=self._direction,
            level=self.level,
            calibration=self.calibration,
        )

    def get_stats(self) -> dict:
        """Get statistics of every component."""
        return {
            "buffer": self.buffer.get_stats(),
            "estimator": self.estimator.get_stats(),
            "calibration": self.calibration_monitor.get_stats(),
        }

    def reset(self) -> None:
        """Reset all components to their initial state."""
        self.buffer.reset()
        self.estimator.reset()
        self.level_classifier.reset()
        self.calibration_monitor.reset()
        self._direction = None
        logger.info("Compass pipeline reset")
