"""Core module for compass heading estimation."""

from .types import (
    Vector3,
    SensorStream,
    SensorAccuracy,
    SensorSample,
    OrientationStatus,
    OrientationState,
    CompassDirection,
    LevelState,
    CalibrationState,
    Location,
    CompassReading,
    ValidationResult,
)
from .validation import SampleValidator
from .angles import normalize_azimuth, angular_difference, CircularEma, LinearEma
from .config import Config, load_config

__all__ = [
    "Vector3",
    "SensorStream",
    "SensorAccuracy",
    "SensorSample",
    "OrientationStatus",
    "OrientationState",
    "CompassDirection",
    "LevelState",
    "CalibrationState",
    "Location",
    "CompassReading",
    "ValidationResult",
    "SampleValidator",
    "normalize_azimuth",
    "angular_difference",
    "CircularEma",
    "LinearEma",
    "Config",
    "load_config",
]
