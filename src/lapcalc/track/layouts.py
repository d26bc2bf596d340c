"""Synthetic track layout builders for test and example scenarios."""

from __future__ import annotations

import numpy as np

from lapcalc.track.geometry import build_track_model
from lapcalc.track.models import TrackModel
from lapcalc.utils.exceptions import TrackDataError

DEFAULT_SQUARE_SIDE = 10.0
DEFAULT_POLYGON_RADIUS = 100.0
DEFAULT_CIRCLE_RADIUS = 50.0
DEFAULT_CIRCLE_SAMPLE_COUNT = 360
MIN_POLYGON_SIDES = 3


def _validate_positive(name: str, value: float) -> None:
    """Validate that a scalar parameter is strictly positive.

    Args:
        name: Parameter name used in error messages.
        value: Parameter value to validate.

    Raises:
        lapcalc.utils.exceptions.TrackDataError: If ``value`` is not
            strictly positive.
    """
    if value <= 0.0:
        msg = f"{name} must be positive"
        raise TrackDataError(msg)


def _closed_loop(points: np.ndarray) -> np.ndarray:
    """Append the first point to the end to create a closed loop.

    Args:
        points: Point array of shape ``(N, 2)``.

    Returns:
        Closed-loop point array with repeated start point at the end.
    """
    return np.concatenate([points, points[:1]])


def polygon_vertices(sides: int, radius: float, clockwise: bool = False) -> np.ndarray:
    """Return the vertices of a regular polygon centered at the origin.

    Args:
        sides: Number of polygon sides.
        radius: Circumradius [m].
        clockwise: Whether to order the vertices clockwise.

    Returns:
        Vertex array of shape ``(sides, 2)``, starting at ``(radius, 0)``.
    """
    angle = np.linspace(0.0, 2.0 * np.pi, int(sides), endpoint=False, dtype=float)
    if clockwise:
        angle = -angle
    return np.column_stack([radius * np.cos(angle), radius * np.sin(angle)])


def build_square_track(side: float = DEFAULT_SQUARE_SIDE) -> TrackModel:
    """Build the open square ``(0,0), (s,0), (s,s), (0,s)``.

    The loop is closed by wrap-around adjacency only, so the track has three
    segments and a seam gap of ``side`` between ``(0, s)`` and the origin.

    Args:
        side: Square side length [m].

    Returns:
        Three-segment track model.

    Raises:
        lapcalc.utils.exceptions.TrackDataError: If ``side`` is not positive.
    """
    _validate_positive("side", side)
    points = np.array(
        [[0.0, 0.0], [side, 0.0], [side, side], [0.0, side]],
        dtype=float,
    )
    return build_track_model(points)


def build_polygon_track(
    sides: int,
    radius: float = DEFAULT_POLYGON_RADIUS,
    clockwise: bool = False,
    closed: bool = True,
) -> TrackModel:
    """Build a track from the vertices of a regular polygon.

    Args:
        sides: Number of polygon sides.
        radius: Circumradius [m].
        clockwise: Whether to traverse the polygon clockwise.
        closed: Whether to repeat the first vertex so that every side,
            including the last, is a real segment.

    Returns:
        Track model with ``sides`` segments when closed, ``sides - 1``
        otherwise.

    Raises:
        lapcalc.utils.exceptions.TrackDataError: If ``sides`` or ``radius``
            is out of bounds.
    """
    _validate_positive("radius", radius)
    if sides < MIN_POLYGON_SIDES:
        msg = f"sides must be at least {MIN_POLYGON_SIDES}"
        raise TrackDataError(msg)

    vertices = polygon_vertices(sides, radius, clockwise=clockwise)
    if closed:
        vertices = _closed_loop(vertices)
    return build_track_model(vertices)


def build_circular_track(
    radius: float = DEFAULT_CIRCLE_RADIUS,
    sample_count: int = DEFAULT_CIRCLE_SAMPLE_COUNT,
    clockwise: bool = False,
) -> TrackModel:
    """Build a finely sampled closed circular track.

    Args:
        radius: Circle radius [m].
        sample_count: Number of unique samples around the circle.
        clockwise: Whether to traverse the circle clockwise.

    Returns:
        Closed track model approximating a circle.

    Raises:
        lapcalc.utils.exceptions.TrackDataError: If geometric input values are
            outside valid bounds.
    """
    return build_polygon_track(
        sides=sample_count,
        radius=radius,
        clockwise=clockwise,
        closed=True,
    )
