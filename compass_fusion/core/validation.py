"""Input validation for raw sensor vectors."""

import numpy as np

from .types import SensorStream, ValidationResult
from .config import Config


class SampleValidator:
    """Validates accelerometer and magnetometer vectors for plausibility."""

    def __init__(self, config: Config):
        """Initialize validator with configuration.

        Args:
            config: System configuration with sensor thresholds.
        """
        self._config = config

    def validate_vector(self, stream: SensorStream, vector) -> ValidationResult:
        """Validate a raw tri-axis reading.

        Errors make the sample invalid (it will yield an INVALID
        orientation). Warnings flag physically suspicious but usable data.

        Args:
            stream: Stream that produced the vector.
            vector: Sequence of three components.

        Returns:
            ValidationResult with validation status and any errors/warnings.
        """
        result = ValidationResult(is_valid=True)

        try:
            arr = np.asarray(vector, dtype=np.float64)
        except (TypeError, ValueError) as e:
            result.add_error(f"Malformed vector: {e}")
            return result

        if arr.shape != (3,):
            result.add_error(f"Expected 3 components, got shape {arr.shape}")
            return result

        self._check_finite(arr, result)
        if not result.is_valid:
            return result

        self._check_magnitude(arr, result)
        if not result.is_valid:
            return result

        if stream is SensorStream.ACCELEROMETER:
            self._check_accelerometer(arr, result)
        else:
            self._check_magnetometer(arr, result)

        return result

    def _check_finite(self, arr: np.ndarray, result: ValidationResult) -> None:
        """Check all values are finite (not NaN or Inf)."""
        for i, val in enumerate(arr):
            if not np.isfinite(val):
                result.add_error(f"Non-finite value at index {i}: {val}")

    def _check_magnitude(self, arr: np.ndarray, result: ValidationResult) -> None:
        """Reject near-zero vectors that carry no direction."""
        eps = self._config.sensor.degenerate_epsilon
        magnitude = float(np.linalg.norm(arr))
        if magnitude < eps:
            result.add_error(f"Degenerate vector: magnitude {magnitude:.3g} < {eps:.3g}")

    def _check_accelerometer(self, arr: np.ndarray, result: ValidationResult) -> None:
        """Flag accelerations that do not look like gravity alone."""
        cfg = self._config.sensor.accelerometer
        acc_mag = float(np.linalg.norm(arr))

        if abs(acc_mag - cfg.gravity_nominal) > cfg.gravity_tolerance:
            result.add_warning(
                f"Acceleration magnitude {acc_mag:.2f} deviates from "
                f"expected {cfg.gravity_nominal:.2f} +/- {cfg.gravity_tolerance:.2f} m/s^2"
            )

    def _check_magnetometer(self, arr: np.ndarray, result: ValidationResult) -> None:
        """Flag fields outside the Earth field range."""
        cfg = self._config.sensor.magnetometer
        mag_mag = float(np.linalg.norm(arr))

        if mag_mag < cfg.min_field_ut:
            result.add_warning(f"Magnetic field too weak: {mag_mag:.1f} uT")
        elif mag_mag > cfg.max_field_ut:
            result.add_warning(f"Magnetic field too strong: {mag_mag:.1f} uT")
