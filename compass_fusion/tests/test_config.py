"""Tests for configuration loading."""

import pytest

from compass_fusion.core.config import Config, load_config


class TestLoadConfig:
    """Tests for load_config."""

    def test_packaged_default_matches_dataclass_defaults(self, monkeypatch):
        """The shipped default.yaml mirrors the built-in defaults."""
        monkeypatch.delenv("COMPASS_CONFIG_PATH", raising=False)
        assert load_config() == Config()

    def test_partial_override(self, tmp_path):
        path = tmp_path / "compass.yaml"
        path.write_text(
            "level:\n"
            "  enter_threshold_deg: 8.0\n"
            "estimator:\n"
            "  update_mode: tick\n"
            "  smoothing:\n"
            "    azimuth_alpha: 0.5\n"
            "sensor:\n"
            "  staleness:\n"
            "    max_window_ms: 500\n",
            encoding="utf-8",
        )
        config = load_config(str(path))

        assert config.level.enter_threshold_deg == 8.0
        assert config.level.exit_threshold_deg == 3.0
        assert config.estimator.update_mode == "tick"
        assert config.estimator.smoothing.azimuth_alpha == 0.5
        assert config.estimator.smoothing.tilt_alpha == 0.2
        assert config.sensor.staleness.max_window_ms == 500
        assert config.calibration.debounce_count == 3

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("calibration:\n  debounce_count: 7\n", encoding="utf-8")
        monkeypatch.setenv("COMPASS_CONFIG_PATH", str(path))

        assert load_config().calibration.debounce_count == 7

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(str(path)) == Config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("level:\n  threshold: 4.0\n", encoding="utf-8")

        with pytest.raises(TypeError):
            load_config(str(path))
