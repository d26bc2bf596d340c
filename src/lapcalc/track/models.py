"""Track data models."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from lapcalc.utils.exceptions import DegenerateTrackError

MIN_TRACK_POINT_COUNT = 2


@dataclass(frozen=True)
class Segment:
    """Directed centerline edge between two consecutive course points.

    Args:
        id: Build index of the segment.
        first: Start point in the local planar frame [m].
        second: End point in the local planar frame [m].
        relative: Vector ``second - first`` [m].
        direction: Unit vector along ``relative``.
        length: Segment length [m].
        start_distance: Summed length of all preceding segments [m].
        previous_id: Index of the preceding segment in circular order.
        next_id: Index of the following segment in circular order.
        entry_bisector: Right-pointing unit normal of the boundary shared
            with the previous segment.
        exit_bisector: Right-pointing unit normal of the boundary shared
            with the next segment.
        degenerate_corner: ``True`` when either adjacent segment reverses
            onto this one and a bisector had to fall back to this segment's
            own normal.
    """

    id: int
    first: np.ndarray
    second: np.ndarray
    relative: np.ndarray
    direction: np.ndarray
    length: float
    start_distance: float
    previous_id: int
    next_id: int
    entry_bisector: np.ndarray
    exit_bisector: np.ndarray
    degenerate_corner: bool = False

    @property
    def end_distance(self) -> float:
        """Distance from the start line to this segment's end point [m].

        Returns:
            ``start_distance + length`` [m].
        """
        return self.start_distance + self.length


@dataclass(frozen=True)
class TrackModel:
    """Closed-loop sequence of centerline segments.

    Args:
        points: Ordered course-definition points, shape ``(N, 2)`` [m].
        segments: ``N - 1`` segments in build order.
        total_length: Sum of all segment lengths [m].
    """

    points: np.ndarray
    segments: tuple[Segment, ...]
    total_length: float

    @property
    def segment_count(self) -> int:
        """Number of segments in the loop.

        Returns:
            Segment count.
        """
        return len(self.segments)

    @property
    def seam_gap(self) -> float:
        """Distance between the last definition point and the first [m].

        Returns:
            Straight-line gap spanned by the wrap-around adjacency [m].
        """
        return float(np.hypot(*(self.points[0] - self.points[-1])))

    @property
    def is_closed(self) -> bool:
        """Whether the definition's last point coincides with its first.

        Returns:
            ``True`` when the wrap-around joins two identical points.
        """
        return bool(np.array_equal(self.points[0], self.points[-1]))

    def segment(self, segment_id: int) -> Segment:
        """Return the segment with the given build index.

        Args:
            segment_id: Segment index, taken modulo ``segment_count``.

        Returns:
            Requested segment.
        """
        return self.segments[segment_id % self.segment_count]

    def next_segment(self, segment: Segment) -> Segment:
        """Return the segment following ``segment`` in circular order.

        Args:
            segment: Segment of this track.

        Returns:
            Next segment, wrapping from the last to the first.
        """
        return self.segments[segment.next_id]

    def previous_segment(self, segment: Segment) -> Segment:
        """Return the segment preceding ``segment`` in circular order.

        Args:
            segment: Segment of this track.

        Returns:
            Previous segment, wrapping from the first to the last.
        """
        return self.segments[segment.previous_id]

    def validate(self) -> None:
        """Validate segment bookkeeping against the definition points.

        Raises:
            lapcalc.utils.exceptions.DegenerateTrackError: If the segment
                count, lengths, or cumulative distances are inconsistent.
        """
        if self.points.shape[0] < MIN_TRACK_POINT_COUNT:
            msg = f"Track must contain at least {MIN_TRACK_POINT_COUNT} points"
            raise DegenerateTrackError(msg)
        if self.segment_count != self.points.shape[0] - 1:
            msg = "Track must contain exactly one segment per consecutive point pair"
            raise DegenerateTrackError(msg)
        if any(segment.length <= 0.0 for segment in self.segments):
            msg = "Track segments must have strictly positive length"
            raise DegenerateTrackError(msg)
        expected_total = sum(segment.length for segment in self.segments)
        if not np.isclose(expected_total, self.total_length):
            msg = "Track total length does not match summed segment lengths"
            raise DegenerateTrackError(msg)
