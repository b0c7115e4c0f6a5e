"""Configuration management for compass heading estimation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import os

import yaml

UPDATE_MODES = ("event", "tick")


@dataclass
class AccelerometerConfig:
    """Accelerometer stream configuration."""
    nominal_rate_hz: float = 50.0
    gravity_nominal: float = 9.80665
    gravity_tolerance: float = 1.0


@dataclass
class MagnetometerSensorConfig:
    """Magnetometer stream configuration."""
    nominal_rate_hz: float = 50.0
    min_field_ut: float = 20.0
    max_field_ut: float = 100.0


@dataclass
class StalenessConfig:
    """Rate-derived staleness window configuration."""
    interval_factor: float = 5.0
    min_window_ms: int = 100
    max_window_ms: int = 2000
    rate_smoothing: float = 0.1


@dataclass
class SensorConfig:
    """Sensor configuration."""
    degenerate_epsilon: float = 1e-3
    accelerometer: AccelerometerConfig = field(default_factory=AccelerometerConfig)
    magnetometer: MagnetometerSensorConfig = field(default_factory=MagnetometerSensorConfig)
    staleness: StalenessConfig = field(default_factory=StalenessConfig)


@dataclass
class SmoothingConfig:
    """Exponential moving average factors (1.0 disables smoothing)."""
    azimuth_alpha: float = 0.2
    tilt_alpha: float = 0.2


@dataclass
class EstimatorConfig:
    """Orientation estimator configuration."""
    update_mode: str = "event"
    tick_rate_hz: float = 20.0
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)


@dataclass
class LevelConfig:
    """Level classifier hysteresis thresholds."""
    enter_threshold_deg: float = 5.0
    exit_threshold_deg: float = 3.0


@dataclass
class CalibrationConfig:
    """Calibration monitor debounce configuration."""
    debounce_count: int = 3


@dataclass
class Config:
    """Complete configuration for compass heading estimation."""
    sensor: SensorConfig = field(default_factory=SensorConfig)
    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    level: LevelConfig = field(default_factory=LevelConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file. If None, uses
            COMPASS_CONFIG_PATH or the packaged default.

    Returns:
        Configuration object with all settings.

    Raises:
        FileNotFoundError: If specified config file doesn't exist.
    """
    if config_path is None:
        env_path = os.environ.get("COMPASS_CONFIG_PATH")
        if env_path:
            config_path = env_path
        else:
            default_path = Path(__file__).parent.parent / "config" / "default.yaml"
            if default_path.exists():
                config_path = str(default_path)
            else:
                return Config()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()

    return _build_config(data)


def _build_config(data: dict) -> Config:
    """Build Config object from dictionary."""
    sensor_data = data.get("sensor", {})
    sensor = SensorConfig(
        degenerate_epsilon=sensor_data.get("degenerate_epsilon", 1e-3),
        accelerometer=AccelerometerConfig(**sensor_data.get("accelerometer", {})),
        magnetometer=MagnetometerSensorConfig(**sensor_data.get("magnetometer", {})),
        staleness=StalenessConfig(**sensor_data.get("staleness", {})),
    )

    est_data = data.get("estimator", {})
    estimator = EstimatorConfig(
        update_mode=est_data.get("update_mode", "event"),
        tick_rate_hz=est_data.get("tick_rate_hz", 20.0),
        smoothing=SmoothingConfig(**est_data.get("smoothing", {})),
    )

    level = LevelConfig(**data.get("level", {}))
    calibration = CalibrationConfig(**data.get("calibration", {}))

    return Config(
        sensor=sensor,
        estimator=estimator,
        level=level,
        calibration=calibration,
    )
