"""Track construction and point-to-segment projection."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from lapcalc.track.models import MIN_TRACK_POINT_COUNT, Segment, TrackModel
from lapcalc.utils.constants import SMALL_EPS
from lapcalc.utils.exceptions import DegenerateTrackError

FloatArray = npt.NDArray[np.float64]

DEFAULT_MIN_ARC_ANGLE = math.radians(3.0)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentProjection:
    """Segment-local position of a query point.

    Args:
        distance_along: Progress along the segment from ``first`` [m].
        fraction_along: ``distance_along / length``; extrapolates outside
            ``[0, 1]`` before and after the segment.
        cross_track: Signed lateral offset, positive left of travel [m].
        is_arc: Whether the corner-arc approximation was used.
    """

    distance_along: float
    fraction_along: float
    cross_track: float
    is_arc: bool = False


def cross2d(a: FloatArray, b: FloatArray) -> float:
    """Return the z-component of the planar cross product ``a x b``.

    Args:
        a: First planar vector.
        b: Second planar vector.

    Returns:
        Signed area of the parallelogram spanned by ``a`` and ``b``.
    """
    return float(a[0] * b[1] - a[1] * b[0])


def rotate_clockwise(vector: FloatArray) -> FloatArray:
    """Rotate a planar vector by 90 degrees clockwise.

    Args:
        vector: Planar vector ``(x, y)``.

    Returns:
        Rotated vector ``(y, -x)``.
    """
    return np.array([vector[1], -vector[0]], dtype=np.float64)


def signed_angle(a: FloatArray, b: FloatArray) -> float:
    """Return the signed angle from ``a`` to ``b``.

    Args:
        a: Reference planar vector.
        b: Target planar vector.

    Returns:
        Counter-clockwise angle in ``(-pi, pi]``; zero when either vector
        vanishes [rad].
    """
    return math.atan2(cross2d(a, b), float(np.dot(a, b)))


def boundary_bisector(
    incoming: FloatArray,
    outgoing: FloatArray,
    fallback: FloatArray,
) -> tuple[FloatArray, bool]:
    """Compute the right-pointing normal of the boundary between two segments.

    Args:
        incoming: Unit direction of the segment ending at the boundary.
        outgoing: Unit direction of the segment starting at the boundary.
        fallback: Unit direction whose normal is used when the two directions
            cancel out (the course reverses onto itself).

    Returns:
        Tuple of the unit bisector and a flag that is ``True`` when the
        fallback normal was used.
    """
    summed = incoming + outgoing
    norm = float(np.hypot(summed[0], summed[1]))
    if norm < SMALL_EPS:
        return rotate_clockwise(fallback), True
    return rotate_clockwise(summed / norm), False


def build_track_model(points: npt.ArrayLike) -> TrackModel:
    """Build a closed-loop ``TrackModel`` from ordered planar points.

    Consecutive points are paired into segments. Adjacency always wraps from
    the last segment back to the first, even when the last point does not
    coincide with the first; such open definitions are accepted but logged.

    Args:
        points: Ordered course-definition points, shape ``(N, 2)`` [m].

    Returns:
        Validated, immutable track model with ``N - 1`` segments.

    Raises:
        lapcalc.utils.exceptions.DegenerateTrackError: If fewer than two
            points are given, coordinates are non-finite, or two consecutive
            points coincide.
    """
    coords = np.asarray(points, dtype=np.float64)
    if coords.ndim != 2 or coords.shape[1] != 2:
        msg = f"Track points must have shape (N, 2), got {coords.shape}"
        raise DegenerateTrackError(msg)
    if coords.shape[0] < MIN_TRACK_POINT_COUNT:
        msg = f"Track must contain at least {MIN_TRACK_POINT_COUNT} points"
        raise DegenerateTrackError(msg)
    if np.any(~np.isfinite(coords)):
        msg = "Track points contain non-finite values"
        raise DegenerateTrackError(msg)

    relative = np.diff(coords, axis=0)
    lengths = np.hypot(relative[:, 0], relative[:, 1])
    zero_length = np.flatnonzero(lengths <= 0.0)
    if zero_length.size:
        msg = (
            "Consecutive track points must be distinct; "
            f"points {int(zero_length[0])} and {int(zero_length[0]) + 1} coincide"
        )
        raise DegenerateTrackError(msg)

    directions = relative / lengths[:, np.newaxis]
    start_distances = np.zeros(lengths.shape[0], dtype=np.float64)
    start_distances[1:] = np.cumsum(lengths)[:-1]
    count = lengths.shape[0]

    segments: list[Segment] = []
    for index in range(count):
        previous_id = (index - 1 + count) % count
        next_id = (index + 1) % count
        direction = directions[index]
        entry, entry_degenerate = boundary_bisector(
            directions[previous_id], direction, direction
        )
        exit_, exit_degenerate = boundary_bisector(
            direction, directions[next_id], direction
        )
        segments.append(
            Segment(
                id=index,
                first=coords[index].copy(),
                second=coords[index + 1].copy(),
                relative=relative[index].copy(),
                direction=direction.copy(),
                length=float(lengths[index]),
                start_distance=float(start_distances[index]),
                previous_id=previous_id,
                next_id=next_id,
                entry_bisector=entry,
                exit_bisector=exit_,
                degenerate_corner=entry_degenerate or exit_degenerate,
            )
        )

    track = TrackModel(
        points=coords.copy(),
        segments=tuple(segments),
        total_length=float(np.sum(lengths)),
    )
    track.validate()

    if not track.is_closed:
        logger.warning(
            "Track definition is not closed: wrap-around from the last point to "
            "the first spans %.2f m without a segment",
            track.seam_gap,
        )
    return track


def project_straight(segment: Segment, point: FloatArray) -> SegmentProjection:
    """Project a point onto a segment treated as a straight chord.

    Args:
        segment: Segment to project onto.
        point: Query point in the local planar frame [m].

    Returns:
        Straight-section projection of ``point``.
    """
    start_to_point = np.asarray(point, dtype=np.float64) - segment.first
    theta = signed_angle(segment.relative, start_to_point)
    distance_from_start = float(np.hypot(start_to_point[0], start_to_point[1]))
    distance_along = distance_from_start * math.cos(theta)
    cross_track = distance_from_start * math.sin(theta)
    return SegmentProjection(
        distance_along=distance_along,
        fraction_along=distance_along / segment.length,
        cross_track=cross_track,
    )


def arc_center(
    segment: Segment,
    min_arc_angle: float = DEFAULT_MIN_ARC_ANGLE,
) -> FloatArray | None:
    """Estimate the instant center of the corner a segment belongs to.

    The center is the intersection of the entry boundary line through
    ``first`` and the exit boundary line through ``second``.

    Args:
        segment: Segment whose corner is approximated.
        min_arc_angle: Smallest angle between the two bisectors for which an
            arc is fitted [rad].

    Returns:
        Center point, or ``None`` when the segment should be treated as
        straight.
    """
    if segment.degenerate_corner:
        return None
    b1 = segment.entry_bisector
    b2 = segment.exit_bisector
    denominator = cross2d(b1, b2)
    bisector_angle = math.atan2(abs(denominator), float(np.dot(b1, b2)))
    if bisector_angle < min_arc_angle or abs(denominator) < SMALL_EPS:
        return None
    t = cross2d(segment.relative, b2) / denominator
    return segment.first + t * b1


def project_arc(segment: Segment, point: FloatArray, center: FloatArray) -> SegmentProjection:
    """Project a point onto the circular arc fitted through a segment's ends.

    Args:
        segment: Segment to project onto.
        point: Query point in the local planar frame [m].
        center: Instant center returned by :func:`arc_center`.

    Returns:
        Arc projection of ``point``, or the straight projection when the arc
        spans no angle.
    """
    to_first = segment.first - center
    to_second = segment.second - center
    to_point = np.asarray(point, dtype=np.float64) - center

    span = signed_angle(to_first, to_second)
    if abs(span) < SMALL_EPS:
        return project_straight(segment, point)

    radial = float(np.hypot(to_point[0], to_point[1]) - np.hypot(to_second[0], to_second[1]))
    # Center on the left of travel: moving outward means moving right.
    if cross2d(to_second, segment.direction) > 0.0:
        radial = -radial

    fraction_along = signed_angle(to_first, to_point) / span
    return SegmentProjection(
        distance_along=segment.length * fraction_along,
        fraction_along=fraction_along,
        cross_track=radial,
        is_arc=True,
    )


def project_onto_segment(
    segment: Segment,
    point: FloatArray,
    min_arc_angle: float = DEFAULT_MIN_ARC_ANGLE,
) -> SegmentProjection:
    """Project a point onto a segment, fitting an arc through sharp corners.

    Args:
        segment: Segment to project onto. Its bisectors encode the
            neighbouring segments' directions.
        point: Query point in the local planar frame [m].
        min_arc_angle: Angle between the segment's boundary bisectors above
            which the corner-arc approximation is used [rad].

    Returns:
        Segment-local projection of ``point``.
    """
    center = arc_center(segment, min_arc_angle)
    if center is None:
        return project_straight(segment, point)
    return project_arc(segment, point, center)


def reconstruct_point(segment: Segment, projection: SegmentProjection) -> FloatArray:
    """Map a straight-section projection back to planar coordinates.

    Args:
        segment: Segment the projection refers to.
        projection: Straight projection returned by :func:`project_straight`.

    Returns:
        Planar point at ``distance_along`` and ``cross_track`` [m].
    """
    left_normal = -rotate_clockwise(segment.direction)
    return (
        segment.first
        + projection.distance_along * segment.direction
        + projection.cross_track * left_normal
    )
