"""Compass heading, level and calibration estimation from accelerometer
and magnetometer samples."""

from .core import (
    CalibrationState,
    CompassDirection,
    CompassReading,
    Config,
    LevelState,
    Location,
    OrientationState,
    OrientationStatus,
    SensorAccuracy,
    SensorStream,
    load_config,
)
from .classification import LevelClassifier, classify_direction, classify_level
from .fusion import CompassPipeline, OrientationEstimator, SampleBuffer
from .monitoring import CalibrationMonitor
from .display import compose_share_message, format_heading, format_level

__version__ = "0.1.0"

__all__ = [
    "CalibrationState",
    "CompassDirection",
    "CompassReading",
    "Config",
    "LevelState",
    "Location",
    "OrientationState",
    "OrientationStatus",
    "SensorAccuracy",
    "SensorStream",
    "load_config",
    "LevelClassifier",
    "classify_direction",
    "classify_level",
    "CompassPipeline",
    "OrientationEstimator",
    "SampleBuffer",
    "CalibrationMonitor",
    "compose_share_message",
    "format_heading",
    "format_level",
]
