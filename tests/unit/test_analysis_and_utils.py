"""Tests for analysis export and utility helpers."""

from __future__ import annotations

import importlib.util
import json
import logging
import tempfile
import unittest
from pathlib import Path

import numpy as np

from lapcalc.analysis import export_lap_summary_json, export_records_csv, export_standard_plots
from lapcalc.analysis.export import OUTPUT_FIELDS, format_record
from lapcalc.telemetry import TelemetrySample
from lapcalc.track import EXAMPLE_CORNER_TABLE, build_square_track
from lapcalc.tracking import process_session
from lapcalc.utils.logging import configure_logging
from tests.helpers import square_lap_samples

PANDAS_AVAILABLE = importlib.util.find_spec("pandas") is not None


def _square_session_samples() -> list[TelemetrySample]:
    """Wrap the square lap, plus one far-away sample, as telemetry rows.

    Returns:
        Telemetry samples whose raw lines carry the sample index.
    """
    pairs = square_lap_samples()
    pairs.insert(3, (np.array([500.0, 500.0]), 2.5))
    return [
        TelemetrySample(raw_line=f"row{index},{t}", point=point, timestamp=t)
        for index, (point, t) in enumerate(pairs)
    ]


class AnalysisAndUtilsTests(unittest.TestCase):
    """Coverage tests for plotting, export and logging helpers."""

    @classmethod
    def setUpClass(cls) -> None:
        """Process one short session shared by all export tests."""
        cls.track = build_square_track(side=10.0)
        cls.result = process_session(
            cls.track,
            _square_session_samples(),
            corners=EXAMPLE_CORNER_TABLE,
        )

    def test_record_line_appends_output_fields(self) -> None:
        """Append eight output fields to the source line of on-track records."""
        record = self.result.records[-1]
        fields = format_record(record).split(",")

        self.assertEqual(fields[:2], ["row6", "5.0"])
        self.assertEqual(len(fields), 2 + len(OUTPUT_FIELDS))
        self.assertAlmostEqual(float(fields[2]), 0.5, places=9)
        self.assertEqual(fields[6], "1")
        self.assertEqual(fields[9], "1")

    def test_off_track_line_leaves_output_fields_empty(self) -> None:
        """Keep the source line and emit empty fields for off-track records."""
        record = self.result.records[3]

        self.assertFalse(record.on_track)
        self.assertEqual(format_record(record), "row3,2.5" + "," * len(OUTPUT_FIELDS))

    def test_csv_json_and_plot_exports_are_created(self) -> None:
        """Write the record CSV, lap summary JSON, and standard plots."""
        with tempfile.TemporaryDirectory() as tmp:
            out_dir = Path(tmp)
            export_records_csv(self.result.records, out_dir / "laps.csv")
            export_lap_summary_json(self.result, out_dir / "summary.json")
            export_standard_plots(self.track, self.result, out_dir / "plots")

            lines = (out_dir / "laps.csv").read_text(encoding="utf-8").splitlines()
            self.assertEqual(len(lines), len(self.result.records))
            self.assertTrue(lines[0].startswith("row0,0.0,"))

            data = json.loads((out_dir / "summary.json").read_text(encoding="utf-8"))
            self.assertEqual(data["lap_count"], 1)
            self.assertEqual(data["lap_times"], ["0:04.000"])
            self.assertEqual(data["off_track_count"], 1)
            self.assertEqual(data["sample_count"], 7)
            self.assertAlmostEqual(data["best_lap_time_s"], 4.0, places=9)

            for name in ("track_map.png", "track_map.pdf", "cross_track.png", "cross_track.pdf"):
                self.assertTrue((out_dir / "plots" / name).exists(), msg=f"missing {name}")

    @unittest.skipUnless(PANDAS_AVAILABLE, "pandas is not installed")
    def test_session_result_to_dataframe(self) -> None:
        """Tabulate one row per record with one column per record field."""
        frame = self.result.to_dataframe()

        self.assertEqual(len(frame), len(self.result.records))
        self.assertIn("cross_track", frame.columns)
        self.assertEqual(int(frame["track_fraction"].isna().sum()), 1)

    def test_logging_helper_runs(self) -> None:
        """Smoke-test logging helper configuration."""
        configure_logging(logging.INFO)
        logger = logging.getLogger("lapcalc_test")
        logger.info("smoke")


if __name__ == "__main__":
    unittest.main()
