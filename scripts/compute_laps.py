"""Compute track position and lap times for a GPS telemetry log.

Usage:
    python scripts/compute_laps.py TRACK_DIR TELEMETRY_CSV OUTPUT_CSV

``TRACK_DIR`` holds ``track.txt`` (reference ``lat,lon``) and ``points.csv``
(centerline ``lat,lon`` rows). Each output line is the source telemetry line
followed by distance from start, cross track, local x/y, lap number, lap
elapsed time, last lap time, and corner label.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from lapcalc.analysis import export_lap_summary_json, export_records_csv, export_standard_plots
from lapcalc.telemetry import PROJECTION_NAMES, read_telemetry_csv
from lapcalc.track import EXAMPLE_CORNER_TABLE, CornerTable, load_corner_table_json
from lapcalc.track.io import load_track_definition
from lapcalc.tracking import build_tracking_config, process_session
from lapcalc.tracking.lap_clock import format_lap_time
from lapcalc.utils import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Args:
        argv: Argument list; ``None`` reads ``sys.argv``.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("track_dir", type=Path)
    parser.add_argument("telemetry", type=Path)
    parser.add_argument("output", type=Path)
    parser.add_argument(
        "--corners",
        type=Path,
        default=None,
        help="JSON corner table; defaults to the bundled example table.",
    )
    parser.add_argument("--summary", type=Path, default=None, help="Write a lap summary JSON.")
    parser.add_argument("--plots", type=Path, default=None, help="Write diagnostic plots here.")
    parser.add_argument(
        "--projection",
        choices=PROJECTION_NAMES,
        default="equirectangular",
        help="Geographic to local projection for track and telemetry.",
    )
    parser.add_argument("--max-cross-track", type=float, default=20.0)
    parser.add_argument("--min-arc-angle-deg", type=float, default=3.0)
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Process one telemetry log against one track definition.

    Args:
        argv: Argument list; ``None`` reads ``sys.argv``.
    """
    args = _parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    logger = logging.getLogger("compute_laps")

    track, projection = load_track_definition(args.track_dir, args.projection)
    logger.info(
        "Loaded track with %d segments, %.1f m long",
        track.segment_count,
        track.total_length,
    )

    corners: CornerTable = (
        load_corner_table_json(args.corners) if args.corners is not None else EXAMPLE_CORNER_TABLE
    )
    config = build_tracking_config(
        max_cross_track=args.max_cross_track,
        min_arc_angle_deg=args.min_arc_angle_deg,
    )

    log = read_telemetry_csv(args.telemetry, projection)
    result = process_session(track, log.samples, corners=corners, config=config)
    export_records_csv(result.records, args.output)

    if args.summary is not None:
        export_lap_summary_json(result, args.summary)
    if args.plots is not None:
        export_standard_plots(track, result, args.plots)

    logger.info(
        "Processed %d samples (%d off track), %d laps completed",
        len(result.records),
        result.off_track_count,
        result.lap_count,
    )
    if result.best_lap_time is not None:
        logger.info("Best lap: %s", format_lap_time(result.best_lap_time))


if __name__ == "__main__":
    main()
