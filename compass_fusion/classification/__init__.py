"""Compass direction and level classification."""

from .direction import DIRECTION_TABLE, classify_direction, direction_intervals
from .level import LevelClassifier, classify_level

__all__ = [
    "DIRECTION_TABLE",
    "classify_direction",
    "direction_intervals",
    "LevelClassifier",
    "classify_level",
]
