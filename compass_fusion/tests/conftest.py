"""Pytest fixtures for compass heading estimation tests."""

import sys
from pathlib import Path
import pytest
import numpy as np
from numpy.typing import NDArray

repo_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(repo_root))

from compass_fusion.core.config import Config
from compass_fusion.fusion.orientation import OrientationEstimator
from compass_fusion.fusion.pipeline import CompassPipeline
from compass_fusion.fusion.sample_buffer import SampleBuffer

GRAVITY = 9.8
HORIZONTAL_FIELD_UT = 20.0
VERTICAL_FIELD_UT = -40.0


def field_for_heading(heading_deg: float) -> NDArray[np.float64]:
    """Magnetometer reading of a flat device whose top edge points at
    ``heading_deg`` (clockwise from magnetic north)."""
    h = np.deg2rad(heading_deg)
    return np.array([
        -HORIZONTAL_FIELD_UT * np.sin(h),
        HORIZONTAL_FIELD_UT * np.cos(h),
        VERTICAL_FIELD_UT,
    ])


@pytest.fixture
def config() -> Config:
    """Create default configuration for tests."""
    return Config()


@pytest.fixture
def unsmoothed_config() -> Config:
    """Configuration with smoothing disabled."""
    cfg = Config()
    cfg.estimator.smoothing.azimuth_alpha = 1.0
    cfg.estimator.smoothing.tilt_alpha = 1.0
    return cfg


@pytest.fixture
def buffer(config) -> SampleBuffer:
    return SampleBuffer(config)


@pytest.fixture
def estimator(config) -> OrientationEstimator:
    return OrientationEstimator(config)


@pytest.fixture
def pipeline(config) -> CompassPipeline:
    return CompassPipeline(config)


@pytest.fixture
def flat_gravity() -> NDArray[np.float64]:
    """Accelerometer of a device lying flat, screen up."""
    return np.array([0.0, 0.0, GRAVITY])


@pytest.fixture
def north_field() -> NDArray[np.float64]:
    """Magnetometer of a flat device pointing at magnetic north."""
    return np.array([0.0, HORIZONTAL_FIELD_UT, VERTICAL_FIELD_UT])
