"""Data types for compass heading and tilt estimation."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional
import numpy as np
from numpy.typing import NDArray

Vector3 = NDArray[np.float64]


class SensorStream(Enum):
    """Sensor streams feeding the estimator."""
    ACCELEROMETER = "accelerometer"
    MAGNETOMETER = "magnetometer"


class SensorAccuracy(IntEnum):
    """Accuracy tier reported by the platform with every sample.

    Ordered so that ``min()`` yields the worst tier.
    """
    UNRELIABLE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class OrientationStatus(Enum):
    """Quality of an orientation estimate."""
    VALID = "valid"
    INVALID = "invalid"
    UNRELIABLE = "unreliable"


class CompassDirection(Enum):
    """8-point compass label."""
    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"


class LevelState(Enum):
    """Level classification of the device."""
    FLAT = "flat"
    TILTED = "tilted"


class CalibrationState(Enum):
    """Debounced calibration quality signal."""
    GOOD = "good"
    NEEDS_CALIBRATION = "needs_calibration"


@dataclass(frozen=True)
class SensorSample:
    """Latest reading of one sensor stream.

    Units:
    - Accelerometer: m/s^2
    - Magnetometer: uT (microtesla)
    """
    vector: Vector3
    timestamp_ms: int
    valid: bool

    @property
    def magnitude(self) -> float:
        """Euclidean norm of the sample vector."""
        return float(np.linalg.norm(self.vector))


@dataclass(frozen=True)
class OrientationState:
    """Orientation estimate in degrees.

    Convention: rotation matrix rows are [east, north, gravity] expressed
    in the device frame (x right, y top edge, z out of the screen).

    The angle fields must not be read when ``status`` is INVALID.
    """
    azimuth_deg: float
    pitch_deg: float
    roll_deg: float
    status: OrientationStatus
    timestamp_ms: Optional[int] = None

    @classmethod
    def invalid(cls, azimuth_deg: float = 0.0, pitch_deg: float = 0.0,
                roll_deg: float = 0.0,
                timestamp_ms: Optional[int] = None) -> "OrientationState":
        """Return an INVALID state carrying placeholder angles."""
        return cls(azimuth_deg=azimuth_deg, pitch_deg=pitch_deg,
                   roll_deg=roll_deg, status=OrientationStatus.INVALID,
                   timestamp_ms=timestamp_ms)

    @property
    def is_valid(self) -> bool:
        """Whether the angles may be consumed (VALID or UNRELIABLE)."""
        return self.status is not OrientationStatus.INVALID

    @property
    def is_reliable(self) -> bool:
        """Whether the estimate is VALID."""
        return self.status is OrientationStatus.VALID


@dataclass(frozen=True)
class Location:
    """Location fix from the platform location service."""
    latitude: float
    longitude: float
    accuracy_m: Optional[float] = None


@dataclass(frozen=True)
class CompassReading:
    """Snapshot exposed to display and share collaborators."""
    orientation: OrientationState
    direction: Optional[CompassDirection]
    level: LevelState
    calibration: CalibrationState

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        valid = self.orientation.is_valid
        return {
            "azimuth_deg": self.orientation.azimuth_deg if valid else None,
            "pitch_deg": self.orientation.pitch_deg if valid else None,
            "roll_deg": self.orientation.roll_deg if valid else None,
            "status": self.orientation.status.value,
            "timestamp_ms": self.orientation.timestamp_ms,
            "direction": self.direction.value if self.direction else None,
            "level": self.level.value,
            "calibration": self.calibration.value,
        }


@dataclass
class ValidationResult:
    """Result of sensor data validation."""
    is_valid: bool
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.is_valid = False
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)
