"""Export helpers for session outputs."""

from __future__ import annotations

import json
from pathlib import Path

from lapcalc.tracking.lap_clock import format_lap_time
from lapcalc.tracking.runner import SampleRecord, SessionResult

OUTPUT_FIELDS = (
    "distance_from_start",
    "cross_track",
    "x",
    "y",
    "lap_number",
    "lap_elapsed",
    "last_lap_time",
    "corner_label",
)


def _format_value(value: object) -> str:
    """Render one output field, leaving absent values empty."""
    if value is None:
        return ""
    return str(value)


def format_record(record: SampleRecord) -> str:
    """Render one record as its source line followed by the output fields.

    Args:
        record: Processed sample.

    Returns:
        Comma-joined line. Off-track records keep the source line and leave
        every output field empty.
    """
    if record.on_track:
        values = [_format_value(getattr(record, name)) for name in OUTPUT_FIELDS]
    else:
        values = [""] * len(OUTPUT_FIELDS)
    return ",".join([record.raw_line, *values])


def export_records_csv(records: tuple[SampleRecord, ...], path: str | Path) -> None:
    """Persist processed samples, one line per record.

    Args:
        records: Records returned by
            :func:`lapcalc.tracking.runner.process_session`.
        path: Output file path.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8", newline="") as handle:
        for record in records:
            handle.write(format_record(record) + "\n")


def export_lap_summary_json(result: SessionResult, path: str | Path) -> None:
    """Persist lap count and lap times as JSON.

    Args:
        result: Session result to summarize.
        path: Output file path for the JSON document.
    """
    summary = {
        "lap_count": result.lap_count,
        "lap_times_s": list(result.lap_times),
        "lap_times": [format_lap_time(lap_time) for lap_time in result.lap_times],
        "best_lap_time_s": result.best_lap_time,
        "sample_count": len(result.records),
        "off_track_count": result.off_track_count,
    }
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(summary, indent=2), encoding="utf-8")
