"""Calibration monitoring module for compass heading estimation."""

from .calibration import CalibrationMonitor

__all__ = ["CalibrationMonitor"]
