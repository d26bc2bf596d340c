"""Time a simulated car on synthetic layouts and export the session artifacts."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from lapcalc.analysis import export_lap_summary_json, export_records_csv, export_standard_plots
from lapcalc.telemetry import TelemetrySample
from lapcalc.track import CornerTable, build_circular_track, build_polygon_track
from lapcalc.track.models import TrackModel
from lapcalc.tracking import process_session
from lapcalc.tracking.lap_clock import format_lap_time
from lapcalc.utils import configure_logging

CIRCLE_RADIUS = 50.0
SAMPLE_RATE_HZ = 10.0
LAP_TIMES = (62.0, 60.5, 59.8, 61.2)
GPS_NOISE_STD = 0.8
RNG_SEED = 42


def _simulated_drive(radius: float, lap_times: tuple[float, ...]) -> list[TelemetrySample]:
    """Drive counter-clockwise laps of varying pace with GPS noise.

    The drive starts a quarter lap before the start line so that the first
    crossing is observed.

    Args:
        radius: Driving-line radius [m].
        lap_times: Duration of each revolution [s].

    Returns:
        Telemetry samples with synthetic raw lines.
    """
    rng = np.random.default_rng(RNG_SEED)
    dt = 1.0 / SAMPLE_RATE_HZ
    samples: list[TelemetrySample] = []
    angle = -0.5 * np.pi
    t = 0.0
    for lap_time in lap_times:
        omega = 2.0 * np.pi / lap_time
        for _ in range(int(round(lap_time * SAMPLE_RATE_HZ))):
            point = radius * np.array([np.cos(angle), np.sin(angle)])
            point = point + rng.normal(0.0, GPS_NOISE_STD, size=2)
            raw_line = f"{t:.1f},{point[0]:.3f},{point[1]:.3f}"
            samples.append(TelemetrySample(raw_line=raw_line, point=point, timestamp=t))
            angle += omega * dt
            t += dt
    return samples


def main() -> None:
    """Process the simulated drive on two layouts and write CSV, JSON and plots."""
    configure_logging(logging.INFO)
    logger = logging.getLogger("synthetic_circle_session")

    project_root = Path(__file__).resolve().parents[1]
    output_dir = project_root / "examples" / "output" / "synthetic_sessions"
    output_dir.mkdir(parents=True, exist_ok=True)

    corners = CornerTable.from_pairs(
        [(0.25 * np.pi * CIRCLE_RADIUS, "Q1"), (np.pi * CIRCLE_RADIUS, "Q2")],
        final_label="Back",
    )
    tracks: dict[str, TrackModel] = {
        "circle_r50": build_circular_track(radius=CIRCLE_RADIUS),
        "octagon_r50": build_polygon_track(sides=8, radius=CIRCLE_RADIUS),
    }
    samples = _simulated_drive(CIRCLE_RADIUS, LAP_TIMES)

    for name, track in tracks.items():
        result = process_session(track, samples, corners=corners)
        scenario_dir = output_dir / name

        export_records_csv(result.records, scenario_dir / "laps.csv")
        export_lap_summary_json(result, scenario_dir / "summary.json")
        export_standard_plots(track, result, scenario_dir)

        laps = ", ".join(format_lap_time(lap_time) for lap_time in result.lap_times)
        logger.info(
            "%s: %d laps [%s], %d off track",
            name,
            result.lap_count,
            laps,
            result.off_track_count,
        )

    logger.info("Synthetic session artifacts written to %s", output_dir)


if __name__ == "__main__":
    main()
