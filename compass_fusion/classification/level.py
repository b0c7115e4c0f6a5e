"""Level/tilt classification with hysteresis."""

import logging
import numpy as np

from ..core.config import LevelConfig
from ..core.types import LevelState

logger = logging.getLogger(__name__)


def classify_level(
    previous: LevelState,
    pitch_deg: float,
    roll_deg: float,
    enter_threshold_deg: float = 5.0,
    exit_threshold_deg: float = 3.0
) -> LevelState:
    """Classify tilt given the previous state.

    Enters TILTED when |pitch| or |roll| exceeds the enter threshold.
    Returns to FLAT only when both drop below the exit threshold.

    Args:
        previous: Level state of the previous reading.
        pitch_deg: Pitch angle in degrees.
        roll_deg: Roll angle in degrees.
        enter_threshold_deg: Tilt above which the device becomes TILTED.
        exit_threshold_deg: Tilt below which it becomes FLAT again.

    Returns:
        New level state.
    """
    _check_thresholds(enter_threshold_deg, exit_threshold_deg)

    pitch, roll = abs(pitch_deg), abs(roll_deg)

    if previous is LevelState.FLAT:
        if pitch > enter_threshold_deg or roll > enter_threshold_deg:
            return LevelState.TILTED
        return LevelState.FLAT

    if pitch < exit_threshold_deg and roll < exit_threshold_deg:
        return LevelState.FLAT
    return LevelState.TILTED


def _check_thresholds(enter_deg: float, exit_deg: float) -> None:
    if not exit_deg < enter_deg:
        raise ValueError(
            f"Exit threshold ({exit_deg}) must be lower than enter threshold ({enter_deg})"
        )
    if exit_deg < 0:
        raise ValueError(f"Exit threshold must be non-negative, got {exit_deg}")


class LevelClassifier:
    """Stateful wrapper around classify_level."""

    def __init__(self, enter_threshold_deg: float = 5.0, exit_threshold_deg: float = 3.0):
        _check_thresholds(enter_threshold_deg, exit_threshold_deg)
        self.enter_threshold_deg = enter_threshold_deg
        self.exit_threshold_deg = exit_threshold_deg
        self._state = LevelState.FLAT

    @classmethod
    def from_config(cls, config: LevelConfig) -> "LevelClassifier":
        return cls(config.enter_threshold_deg, config.exit_threshold_deg)

    def update(self, pitch_deg: float, roll_deg: float) -> LevelState:
        """Classify a new reading; non-finite angles keep the last state."""
        if not (np.isfinite(pitch_deg) and np.isfinite(roll_deg)):
            logger.warning("Ignoring non-finite tilt: pitch=%s roll=%s", pitch_deg, roll_deg)
            return self._state

        new_state = classify_level(self._state, pitch_deg, roll_deg,
                                   self.enter_threshold_deg, self.exit_threshold_deg)
        if new_state is not self._state:
            logger.info("Level %s -> %s (pitch %.1f, roll %.1f)",
                        self._state.value, new_state.value, pitch_deg, roll_deg)
        self._state = new_state
        return new_state

    @property
    def state(self) -> LevelState:
        return self._state

    def reset(self) -> None:
        self._state = LevelState.FLAT
