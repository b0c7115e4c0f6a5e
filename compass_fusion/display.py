"""Text rendering of compass readings for display and sharing."""

from typing import Optional

from .core.types import (
    CalibrationState,
    CompassReading,
    LevelState,
    Location,
)

UNKNOWN_HEADING = "--"


def format_heading(reading: CompassReading) -> str:
    """Heading as ``"123° SE"``, ``"--"`` when the orientation is invalid."""
    orientation = reading.orientation
    if not orientation.is_valid or reading.direction is None:
        return UNKNOWN_HEADING

    degrees = int(round(orientation.azimuth_deg)) % 360
    text = f"{degrees}° {reading.direction.value}"
    if not orientation.is_reliable:
        text += " (unreliable)"
    return text


def format_level(reading: CompassReading) -> str:
    if reading.level is LevelState.FLAT:
        return "Level"
    if not reading.orientation.is_valid:
        return "Tilted"
    return (f"Tilted (pitch {reading.orientation.pitch_deg:.1f}°, "
            f"roll {reading.orientation.roll_deg:.1f}°)")


def format_location(location: Location) -> str:
    text = f"{location.latitude:.5f}, {location.longitude:.5f}"
    if location.accuracy_m is not None:
        text += f" (±{location.accuracy_m:.0f} m)"
    return text


def compose_share_message(reading: CompassReading,
                          location: Optional[Location] = None) -> str:
    """Compose the text shared from the compass screen.

    Args:
        reading: Current pipeline snapshot.
        location: Optional fix from the platform location service.

    Returns:
        Multi-line message.
    """
    lines = [
        f"Heading: {format_heading(reading)}",
        f"Level: {format_level(reading)}",
    ]
    if reading.calibration is CalibrationState.NEEDS_CALIBRATION:
        lines.append("Compass needs calibration: move the device in a figure 8.")
    if location is not None:
        lines.append(f"Location: {format_location(location)}")
    return "\n".join(lines)
