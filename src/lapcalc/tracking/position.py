"""Locating query points on the track with a seeded bounded search."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, TypeAlias

import numpy as np
import numpy.typing as npt

from lapcalc.track.geometry import SegmentProjection, cross2d, project_onto_segment
from lapcalc.track.models import Segment, TrackModel
from lapcalc.tracking.config import SearchConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    """Track-global position of a located point.

    Args:
        track_fraction: ``distance_from_start / total_length``.
        distance_from_start: Distance along the track from the start of
            segment 0 [m]. May extrapolate slightly past either end.
        cross_track: Signed lateral offset, positive left of travel [m].
        segment_id: Segment that accepted the point.
        fraction_along: Segment-local fraction of the point.
    """

    track_fraction: float
    distance_from_start: float
    cross_track: float
    segment_id: int
    fraction_along: float


class NotFound:
    """Marker result for points that no segment accepts."""

    _instance: NotFound | None = None

    def __new__(cls) -> NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND: Final = NotFound()

PositionResult: TypeAlias = Found | NotFound


@dataclass(frozen=True)
class TrackCursor:
    """Search seed carried between consecutive queries.

    Args:
        segment_id: Last accepted segment, or ``None`` to seed from segment 0.
    """

    segment_id: int | None = None

    @property
    def start_id(self) -> int:
        """Segment index the next search starts from.

        Returns:
            Last accepted segment, or 0 for an empty cursor.
        """
        return 0 if self.segment_id is None else self.segment_id


def _within_gate(projection: SegmentProjection, search: SearchConfig) -> bool:
    """Return whether a projection passes the coarse distance gate."""
    return (
        abs(projection.cross_track) <= search.max_cross_track
        and search.min_fraction <= projection.fraction_along <= search.max_fraction
    )


def _between_boundaries(segment: Segment, point: np.ndarray) -> bool:
    """Return whether a point lies after the entry and before the exit boundary."""
    after_entry = cross2d(point - segment.first, segment.entry_bisector) < 0.0
    before_exit = cross2d(point - segment.second, segment.exit_bisector) > 0.0
    return after_entry and before_exit


def _compose(track: TrackModel, segment: Segment, projection: SegmentProjection) -> Found:
    """Convert a segment-local projection into a track-global position."""
    distance = segment.start_distance + projection.fraction_along * segment.length
    return Found(
        track_fraction=distance / track.total_length,
        distance_from_start=distance,
        cross_track=projection.cross_track,
        segment_id=segment.id,
        fraction_along=projection.fraction_along,
    )


def locate(
    track: TrackModel,
    point: npt.ArrayLike,
    cursor: TrackCursor | None = None,
    search: SearchConfig | None = None,
) -> tuple[PositionResult, TrackCursor]:
    """Find the segment containing a point and its track-global position.

    The scan starts at the cursor's segment and walks forward through the
    loop for at most ``segment_count + search_slack`` iterations.

    Args:
        track: Track to search.
        point: Query point in the track's local frame [m].
        cursor: Seed from the previous query. ``None`` or an empty cursor
            seeds from segment 0.
        search: Search gates; defaults to :class:`SearchConfig`.

    Returns:
        Tuple of the position result and the cursor for the next query. The
        cursor is empty when the result is ``NOT_FOUND``.
    """
    search = search or SearchConfig()
    query = np.asarray(point, dtype=np.float64)
    current = track.segment((cursor or TrackCursor()).start_id)

    for _ in range(track.segment_count + search.search_slack):
        projection = project_onto_segment(current, query, search.min_arc_angle)
        if not _within_gate(projection, search):
            current = track.next_segment(current)
            continue

        if projection.fraction_along == 0.0:
            return _compose(track, current, projection), TrackCursor(current.id)

        if _between_boundaries(current, query):
            return _compose(track, current, projection), TrackCursor(current.id)

        current = track.next_segment(current)

    logger.debug("Point (%.2f, %.2f) is off track; search cursor reset", query[0], query[1])
    return NOT_FOUND, TrackCursor()


class PositionTracker:
    """Stateful wrapper around :func:`locate` for one sample stream.

    Args:
        track: Track shared read-only with other trackers.
        search: Search gates; defaults to :class:`SearchConfig`.
    """

    def __init__(self, track: TrackModel, search: SearchConfig | None = None) -> None:
        self.track = track
        self.search = search or SearchConfig()
        self.cursor = TrackCursor()

    def locate(self, point: npt.ArrayLike) -> PositionResult:
        """Locate a point, seeding from and updating the tracker's cursor.

        Args:
            point: Query point in the track's local frame [m].

        Returns:
            ``Found`` position or ``NOT_FOUND``.
        """
        result, self.cursor = locate(self.track, point, self.cursor, self.search)
        return result

    def reset(self) -> None:
        """Forget the last accepted segment."""
        self.cursor = TrackCursor()
