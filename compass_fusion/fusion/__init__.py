"""Sensor fusion module for compass heading estimation."""

from .sample_buffer import SampleBuffer
from .orientation import (
    OrientationEstimator,
    compute_rotation_matrix,
    orientation_from_matrix,
)
from .pipeline import CompassPipeline

__all__ = [
    "SampleBuffer",
    "OrientationEstimator",
    "compute_rotation_matrix",
    "orientation_from_matrix",
    "CompassPipeline",
]
