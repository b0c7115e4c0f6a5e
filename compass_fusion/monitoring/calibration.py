"""Debounced calibration-quality signal from per-sensor accuracy reports."""

import logging
from typing import Dict, Optional

from ..core.config import CalibrationConfig
from ..core.types import CalibrationState, SensorAccuracy, SensorStream

logger = logging.getLogger(__name__)


class CalibrationMonitor:
    """Tracks sensor accuracy tiers and debounces calibration state.

    The aggregate accuracy is the worst of the latest report of each
    stream. GOOD flips to NEEDS_CALIBRATION after ``debounce_count``
    consecutive reports at LOW or worse; the reverse needs the same
    number of consecutive reports with the aggregate at MEDIUM or better.
    A stored LOW tier is counted once, when it is reported, so a faster
    stream cannot replay a slower stream's single bad report.
    """

    def __init__(self, debounce_count: int = 3):
        """Initialize monitor.

        Args:
            debounce_count: Consecutive reports required for a transition.
        """
        if debounce_count < 1:
            raise ValueError(f"debounce_count must be >= 1, got {debounce_count}")

        self.debounce_count = debounce_count
        self._latest: Dict[SensorStream, SensorAccuracy] = {}
        self._state = CalibrationState.GOOD
        self._bad_streak = 0
        self._good_streak = 0
        self._total_reports = 0
        self._transitions = 0

    @classmethod
    def from_config(cls, config: CalibrationConfig) -> "CalibrationMonitor":
        return cls(config.debounce_count)

    def report(self, stream: SensorStream, accuracy) -> CalibrationState:
        """Record the accuracy tier reported with a sample.

        Args:
            stream: Stream that reported.
            accuracy: SensorAccuracy (or its integer value).

        Returns:
            Calibration state after this report.
        """
        fresh = SensorAccuracy(accuracy)
        self._latest[stream] = fresh
        self._total_reports += 1

        # Only a fresh LOW advances the bad streak; a good report while the
        # other stream's last tier is still LOW advances neither streak.
        aggregate = self.aggregate_accuracy
        if fresh <= SensorAccuracy.LOW:
            self._bad_streak += 1
            self._good_streak = 0
        elif aggregate >= SensorAccuracy.MEDIUM:
            self._good_streak += 1
            self._bad_streak = 0

        if (self._state is CalibrationState.GOOD
                and self._bad_streak >= self.debounce_count):
            self._transition(CalibrationState.NEEDS_CALIBRATION, aggregate)
        elif (self._state is CalibrationState.NEEDS_CALIBRATION
                and self._good_streak >= self.debounce_count):
            self._transition(CalibrationState.GOOD, aggregate)

        return self._state

    def _transition(self, new_state: CalibrationState, aggregate: SensorAccuracy) -> None:
        if new_state is CalibrationState.NEEDS_CALIBRATION:
            logger.warning("Sensor accuracy %s: calibration needed", aggregate.name)
        else:
            logger.info("Sensor accuracy %s: calibration recovered", aggregate.name)

        self._state = new_state
        self._bad_streak = 0
        self._good_streak = 0
        self._transitions += 1

    @property
    def aggregate_accuracy(self) -> Optional[SensorAccuracy]:
        """Worst latest accuracy across reporting streams."""
        if not self._latest:
            return None
        return min(self._latest.values())

    def latest(self, stream: SensorStream) -> Optional[SensorAccuracy]:
        return self._latest.get(stream)

    @property
    def state(self) -> CalibrationState:
        return self._state

    @property
    def needs_calibration(self) -> bool:
        return self._state is CalibrationState.NEEDS_CALIBRATION

    def get_stats(self) -> dict:
        """Get monitor statistics."""
        aggregate = self.aggregate_accuracy
        return {
            "state": self._state.value,
            "aggregate_accuracy": aggregate.name if aggregate is not None else None,
            "bad_streak": self._bad_streak,
            "good_streak": self._good_streak,
            "total_reports": self._total_reports,
            "transitions": self._transitions,
        }

    def reset(self) -> None:
        """Forget reports and return to GOOD."""
        self._latest.clear()
        self._state = CalibrationState.GOOD
        self._bad_streak = 0
        self._good_streak = 0
        self._total_reports = 0
        self._transitions = 0
