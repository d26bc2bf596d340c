"""Track geometry, loading, synthetic layouts, and section labelling."""

from lapcalc.track.corners import EXAMPLE_CORNER_TABLE, CornerTable, load_corner_table_json
from lapcalc.track.geometry import SegmentProjection, build_track_model, project_onto_segment
from lapcalc.track.io import load_track_csv, load_track_definition
from lapcalc.track.layouts import (
    build_circular_track,
    build_polygon_track,
    build_square_track,
)
from lapcalc.track.models import Segment, TrackModel

__all__ = [
    "CornerTable",
    "EXAMPLE_CORNER_TABLE",
    "Segment",
    "SegmentProjection",
    "TrackModel",
    "build_circular_track",
    "build_polygon_track",
    "build_square_track",
    "build_track_model",
    "load_corner_table_json",
    "load_track_csv",
    "load_track_definition",
    "project_onto_segment",
]
