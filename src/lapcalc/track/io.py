"""Track definition loading from CSV files."""

from __future__ import annotations

import csv
from pathlib import Path

import numpy as np

from lapcalc.telemetry.coordinates import DEFAULT_PROJECTION, CoordinateProjection, build_projection
from lapcalc.track.geometry import build_track_model
from lapcalc.track.models import TrackModel
from lapcalc.utils.exceptions import TrackDataError

REQUIRED_COLUMNS = ("x", "y")
REFERENCE_FILE_NAME = "track.txt"
POINTS_FILE_NAME = "points.csv"


def load_track_csv(path: str | Path) -> TrackModel:
    """Load a planar track CSV into a ``TrackModel``.

    Args:
        path: Path to a CSV containing ``x`` and ``y`` columns in a local
            metric frame.

    Returns:
        Track model built from the rows in file order.

    Raises:
        lapcalc.utils.exceptions.TrackDataError: If the file does not exist,
            has an invalid schema, or yields a degenerate track.
    """
    file_path = Path(path)
    if not file_path.exists():
        msg = f"Track file not found: {file_path}"
        raise TrackDataError(msg)

    points: list[tuple[float, float]] = []
    with file_path.open("r", newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is None:
            msg = f"CSV has no header: {file_path}"
            raise TrackDataError(msg)

        missing = [col for col in REQUIRED_COLUMNS if col not in reader.fieldnames]
        if missing:
            msg = f"Track CSV missing required columns: {missing}"
            raise TrackDataError(msg)

        for row in reader:
            try:
                points.append((float(row["x"]), float(row["y"])))
            except (TypeError, ValueError) as exc:
                msg = f"Track CSV has a non-numeric row: {row}"
                raise TrackDataError(msg) from exc

    return build_track_model(np.asarray(points, dtype=float).reshape(-1, 2))


def _read_lat_lon(text: str, source: Path) -> tuple[float, float]:
    """Parse one ``lat,lon`` pair.

    Args:
        text: Comma-separated latitude and longitude.
        source: File the text came from, used in error messages.

    Returns:
        Latitude and longitude [deg].

    Raises:
        lapcalc.utils.exceptions.TrackDataError: If the text is not two
            numbers.
    """
    parts = [part.strip() for part in text.split(",")]
    if len(parts) < 2:
        msg = f"Expected 'lat,lon' in {source}, got {text!r}"
        raise TrackDataError(msg)
    try:
        return float(parts[0]), float(parts[1])
    except ValueError as exc:
        msg = f"Expected numeric 'lat,lon' in {source}, got {text!r}"
        raise TrackDataError(msg) from exc


def load_track_definition(
    folder: str | Path,
    projection: str = DEFAULT_PROJECTION,
) -> tuple[TrackModel, CoordinateProjection]:
    """Load a geographic track definition folder.

    The folder holds ``track.txt`` with one ``lat,lon`` reference point and
    ``points.csv`` with one headerless ``lat,lon`` row per centerline point.
    Points are projected into a local metric frame anchored at the reference.

    Args:
        folder: Track definition directory.
        projection: Name of the geographic projection, ``"equirectangular"``
            or ``"utm"``.

    Returns:
        Tuple of the track model and the projection used, so that telemetry
        can be converted into the same frame.

    Raises:
        lapcalc.utils.exceptions.TrackDataError: If files are missing,
            malformed, or yield a degenerate track.
        lapcalc.utils.exceptions.ConfigurationError: If ``projection`` is
            not a known projection name.
    """
    root = Path(folder)
    reference_path = root / REFERENCE_FILE_NAME
    points_path = root / POINTS_FILE_NAME
    for required in (reference_path, points_path):
        if not required.exists():
            msg = f"Track definition file not found: {required}"
            raise TrackDataError(msg)

    reference_lat, reference_lon = _read_lat_lon(
        reference_path.read_text(encoding="utf-8").strip(), reference_path
    )
    converter = build_projection(projection, reference_lat, reference_lon)

    coordinates: list[tuple[float, float]] = []
    with points_path.open("r", encoding="utf-8") as handle:
        for line in handle:
            if line.strip():
                coordinates.append(_read_lat_lon(line, points_path))

    if not coordinates:
        msg = f"Track definition has no points: {points_path}"
        raise TrackDataError(msg)

    geographic = np.asarray(coordinates, dtype=float)
    local = converter.to_local_array(geographic[:, 0], geographic[:, 1])
    return build_track_model(local), converter
