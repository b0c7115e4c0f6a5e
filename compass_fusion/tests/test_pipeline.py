"""Integration tests for the compass pipeline."""

import pytest
import numpy as np

from compass_fusion.core.config import Config
from compass_fusion.core.types import (
    CalibrationState,
    CompassDirection,
    LevelState,
    OrientationStatus,
    SensorAccuracy,
)
from compass_fusion.fusion.pipeline import CompassPipeline

from conftest import GRAVITY, field_for_heading


def tilted_gravity(pitch_deg: float) -> np.ndarray:
    """Accelerometer with the top edge raised by ``pitch_deg``."""
    theta = np.deg2rad(pitch_deg)
    return GRAVITY * np.array([0.0, np.sin(theta), np.cos(theta)])


class TestEventMode:
    """End-to-end behaviour with recomputation on every sample."""

    def test_nothing_before_both_streams(self, pipeline, flat_gravity):
        state = pipeline.on_accelerometer(flat_gravity, 0)

        assert state.status is OrientationStatus.INVALID
        assert pipeline.direction is None

    def test_heading_and_direction(self, pipeline, flat_gravity):
        pipeline.on_accelerometer(flat_gravity, 0, SensorAccuracy.HIGH)
        state = pipeline.on_magnetometer(field_for_heading(90.0), 0, SensorAccuracy.HIGH)

        assert state.status is OrientationStatus.VALID
        assert state.azimuth_deg == pytest.approx(90.0)
        assert pipeline.direction is CompassDirection.E
        assert pipeline.level is LevelState.FLAT
        assert pipeline.calibration is CalibrationState.GOOD

    def test_tilt_detected(self, unsmoothed_config, north_field):
        pipeline = CompassPipeline(unsmoothed_config)
        t = 0
        for pitch in [0.0, 6.0, 4.0, 2.0]:
            t += 20
            pipeline.on_magnetometer(north_field, t)
            pipeline.on_accelerometer(tilted_gravity(pitch), t)
            if pitch == 6.0:
                assert pipeline.level is LevelState.TILTED
            if pitch == 4.0:
                assert pipeline.level is LevelState.TILTED

        assert pipeline.level is LevelState.FLAT

    def test_invalid_clears_direction_keeps_level(self, unsmoothed_config, north_field):
        pipeline = CompassPipeline(unsmoothed_config)
        pipeline.on_magnetometer(north_field, 0)
        pipeline.on_accelerometer(tilted_gravity(10.0), 0)
        assert pipeline.level is LevelState.TILTED

        pipeline.on_accelerometer([0.0, 0.0, 0.0], 20)

        assert pipeline.orientation.status is OrientationStatus.INVALID
        assert pipeline.direction is None
        assert pipeline.level is LevelState.TILTED

    def test_calibration_signal(self, pipeline, flat_gravity, north_field):
        for t in (0, 20, 40):
            pipeline.on_accelerometer(flat_gravity, t, SensorAccuracy.HIGH)
            pipeline.on_magnetometer(north_field, t, SensorAccuracy.LOW)

        assert pipeline.calibration is CalibrationState.NEEDS_CALIBRATION
        assert pipeline.orientation.status is OrientationStatus.VALID

    def test_silent_stream_detected_by_tick(self, pipeline, flat_gravity, north_field):
        pipeline.on_accelerometer(flat_gravity, 0)
        pipeline.on_magnetometer(north_field, 0)

        state = pipeline.tick(5000)

        assert state.status is OrientationStatus.INVALID
        assert pipeline.direction is None

    def test_ragged_sample_is_invalid(self, pipeline, flat_gravity):
        pipeline.on_accelerometer(flat_gravity, 0)
        state = pipeline.on_magnetometer([1.0, [2.0, 3.0]], 0)

        assert state.status is OrientationStatus.INVALID
        assert pipeline.direction is None

    def test_silent_again_after_outage(self, pipeline, flat_gravity, north_field):
        """After a long magnetometer outage, a second short silence is still caught."""
        for t in range(0, 1000, 20):
            pipeline.on_accelerometer(flat_gravity, t)
            pipeline.on_magnetometer(north_field, t)
        resume = 980 + 3000
        for t in range(resume, resume + 100, 20):
            pipeline.on_accelerometer(flat_gravity, t)
            pipeline.on_magnetometer(north_field, t)
        last_mag = resume + 80

        assert pipeline.orientation.status is OrientationStatus.VALID

        for t in range(last_mag + 20, last_mag + 820, 20):
            pipeline.on_accelerometer(flat_gravity, t)

        assert pipeline.orientation.status is OrientationStatus.INVALID
        assert pipeline.tick(last_mag + 800).status is OrientationStatus.INVALID

    def test_reading_snapshot(self, pipeline, flat_gravity, north_field):
        pipeline.on_accelerometer(flat_gravity, 0)
        pipeline.on_magnetometer(north_field, 0)
        data = pipeline.reading.to_dict()

        assert data["status"] == "valid"
        assert data["direction"] == "N"
        assert data["level"] == "flat"
        assert data["calibration"] == "good"
        assert data["azimuth_deg"] == pytest.approx(0.0, abs=1e-9)

    def test_invalid_snapshot_hides_angles(self, pipeline):
        data = pipeline.reading.to_dict()

        assert data["status"] == "invalid"
        assert data["azimuth_deg"] is None
        assert data["direction"] is None

    def test_stats_and_reset(self, pipeline, flat_gravity, north_field):
        pipeline.on_accelerometer(flat_gravity, 0)
        pipeline.on_magnetometer(north_field, 0)
        stats = pipeline.get_stats()
        assert stats["estimator"]["valid"] == 1
        assert stats["buffer"]["magnetometer"]["updates"] == 1

        pipeline.reset()
        assert pipeline.orientation.status is OrientationStatus.INVALID
        assert pipeline.direction is None


class TestTickMode:
    """Fixed-rate recomputation."""

    @pytest.fixture
    def tick_pipeline(self) -> CompassPipeline:
        config = Config()
        config.estimator.update_mode = "tick"
        config.estimator.tick_rate_hz = 25.0
        return CompassPipeline(config)

    def test_samples_do_not_recompute(self, tick_pipeline, flat_gravity, north_field):
        assert tick_pipeline.on_accelerometer(flat_gravity, 0) is None
        assert tick_pipeline.on_magnetometer(north_field, 0) is None
        assert tick_pipeline.orientation.status is OrientationStatus.INVALID

    def test_tick_computes_same_result(self, tick_pipeline, flat_gravity):
        tick_pipeline.on_accelerometer(flat_gravity, 0)
        tick_pipeline.on_magnetometer(np.array([20.0, 0.0, -40.0]), 0)

        state = tick_pipeline.tick(10)

        assert state.status is OrientationStatus.VALID
        assert state.azimuth_deg == pytest.approx(270.0)
        assert tick_pipeline.direction is CompassDirection.W

    def test_tick_interval(self, tick_pipeline):
        assert tick_pipeline.tick_interval_ms == pytest.approx(40.0)


class TestConfiguration:

    def test_unknown_update_mode(self):
        config = Config()
        config.estimator.update_mode = "polling"
        with pytest.raises(ValueError):
            CompassPipeline(config)

    def test_default_config(self):
        pipeline = CompassPipeline()
        assert pipeline.update_mode == "event"
