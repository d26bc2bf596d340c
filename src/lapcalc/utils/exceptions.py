"""Custom exceptions for lap calculation."""


class LapCalcError(Exception):
    """Base exception for lap calculation errors."""


class ConfigurationError(LapCalcError):
    """Raised when tracking configuration or lookup tables are invalid."""


class TrackDataError(LapCalcError):
    """Raised when track data cannot be parsed or validated."""


class DegenerateTrackError(TrackDataError):
    """Raised when a track definition cannot form valid segments."""


class TelemetryDataError(LapCalcError):
    """Raised when telemetry samples cannot be parsed or are out of order."""
