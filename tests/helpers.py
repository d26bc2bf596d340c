"""Shared test helpers."""

from __future__ import annotations

import csv
import math
from pathlib import Path

import numpy as np

from lapcalc.telemetry.coordinates import EquirectangularProjection
from lapcalc.utils.constants import METERS_PER_DEGREE

REFERENCE_LAT = 36.5841
REFERENCE_LON = -121.7534


def square_lap_samples() -> list[tuple[np.ndarray, float]]:
    """Return one lap around the open 10 m square, bracketed by seam crossings.

    The walk starts just before the seam near ``(0, 10)``, crosses onto
    segment 0 near the origin, goes around, and crosses again. Both
    crossings are interpolated half-way between samples, at 0.5 s and 4.5 s.

    Returns:
        ``(point, timestamp)`` pairs at ``t = 0 .. 5`` s.
    """
    points = [
        (0.5, 9.8),
        (0.5, 0.2),
        (10.2, 5.0),
        (5.0, 10.2),
        (0.5, 9.8),
        (0.5, 0.2),
    ]
    return [(np.array(point, dtype=float), float(t)) for t, point in enumerate(points)]


def circle_drive(
    radius: float = 50.0,
    lap_time: float = 60.0,
    dt: float = 0.5,
    duration: float = 200.0,
    start_deg: float = -10.5,
    offset: float = 0.0,
) -> list[tuple[np.ndarray, float]]:
    """Drive counter-clockwise around a circle at constant speed.

    Args:
        radius: Centerline radius [m].
        lap_time: Time per revolution [s].
        dt: Sample interval [s].
        duration: Total drive time [s].
        start_deg: Starting angle, measured from the start vertex [deg].
        offset: Radial offset from the centerline, positive outward [m].

    Returns:
        ``(point, timestamp)`` pairs.
    """
    samples: list[tuple[np.ndarray, float]] = []
    steps = int(round(duration / dt))
    for step in range(steps + 1):
        t = step * dt
        angle = math.radians(start_deg) + 2.0 * math.pi * t / lap_time
        r = radius + offset
        samples.append((np.array([r * math.cos(angle), r * math.sin(angle)]), t))
    return samples


def to_geographic(
    point: np.ndarray,
    reference_lat: float = REFERENCE_LAT,
    reference_lon: float = REFERENCE_LON,
) -> tuple[float, float]:
    """Invert the equirectangular projection for test fixtures.

    Args:
        point: Local ``(x, y)`` position [m].
        reference_lat: Projection reference latitude [deg].
        reference_lon: Projection reference longitude [deg].

    Returns:
        Latitude and longitude [deg].
    """
    projection = EquirectangularProjection(reference_lat, reference_lon)
    lat = reference_lat + float(point[1]) / METERS_PER_DEGREE
    lon = reference_lon + float(point[0]) / projection.meters_per_lon_degree
    return lat, lon


def write_track_definition(folder: Path, points: np.ndarray) -> None:
    """Write ``track.txt`` and ``points.csv`` for local centerline points.

    Args:
        folder: Destination directory.
        points: Local centerline points, shape ``(N, 2)`` [m].
    """
    folder.mkdir(parents=True, exist_ok=True)
    (folder / "track.txt").write_text(f"{REFERENCE_LAT},{REFERENCE_LON}\n", encoding="utf-8")
    with (folder / "points.csv").open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        for point in points:
            lat, lon = to_geographic(point)
            writer.writerow([repr(lat), repr(lon)])


def write_interval_telemetry(path: Path, samples: list[tuple[np.ndarray, float]]) -> None:
    """Write a RaceCapture-style CSV with an ``Interval`` column in ms.

    Args:
        path: Destination file.
        samples: Local ``(point, timestamp)`` pairs.
    """
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["Interval", "Latitude", "Longitude", "Speed"])
        for point, t in samples:
            lat, lon = to_geographic(point)
            writer.writerow([int(round(t * 1000.0)), repr(lat), repr(lon), 100.0])
