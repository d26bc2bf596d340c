"""Telemetry ingestion: coordinate projection and CSV reading."""

from lapcalc.telemetry.coordinates import (
    PROJECTION_NAMES,
    CoordinateProjection,
    EquirectangularProjection,
    UtmProjection,
    build_projection,
)
from lapcalc.telemetry.reader import TelemetryLog, TelemetrySample, read_telemetry_csv

__all__ = [
    "PROJECTION_NAMES",
    "CoordinateProjection",
    "EquirectangularProjection",
    "TelemetryLog",
    "TelemetrySample",
    "UtmProjection",
    "build_projection",
    "read_telemetry_csv",
]
