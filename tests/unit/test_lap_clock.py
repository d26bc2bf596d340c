"""Unit tests for start/finish crossing detection."""

from __future__ import annotations

import unittest

from lapcalc.tracking import LapClock, LapClockConfig, LapClockState, advance_lap_clock
from lapcalc.tracking.lap_clock import format_lap_time, interpolate_crossing_time
from lapcalc.utils.exceptions import TelemetryDataError


class LapClockTests(unittest.TestCase):
    """Crossing detection, interpolation, and lap bookkeeping."""

    def test_first_crossing_starts_timing_without_counting_a_lap(self) -> None:
        """Start the first lap at the interpolated crossing instant."""
        clock = LapClock()

        before = clock.process(0.95, 0.0)
        self.assertEqual(before.lap_elapsed, 0.0)
        self.assertIsNone(before.crossing_time)

        after = clock.process(0.05, 1.0)
        self.assertAlmostEqual(after.crossing_time, 0.5, places=12)
        self.assertFalse(after.lap_completed)
        self.assertEqual(after.lap_number, 0)
        self.assertAlmostEqual(after.lap_elapsed, 0.5, places=12)
        self.assertTrue(clock.state.has_started)

    def test_second_crossing_completes_a_lap(self) -> None:
        """Count one lap per wrap with the crossing between the two samples."""
        clock = LapClock()
        for fraction, t in [(0.95, 0.0), (0.05, 1.0), (0.5, 5.0), (0.95, 10.0)]:
            clock.process(fraction, t)

        timing = clock.process(0.05, 11.0)
        self.assertTrue(timing.lap_completed)
        self.assertEqual(timing.lap_number, 1)
        self.assertGreater(timing.crossing_time, 10.0)
        self.assertLess(timing.crossing_time, 11.0)
        self.assertAlmostEqual(timing.last_lap_time, 10.0, places=12)
        self.assertAlmostEqual(timing.lap_elapsed, 0.5, places=12)

    def test_crossing_interpolation_weights_by_fraction_residuals(self) -> None:
        """Weight the earlier timestamp by its share of the spanned fraction."""
        crossing = interpolate_crossing_time(0.98, 10.0, 0.06, 11.0)

        self.assertAlmostEqual(crossing, 10.75, places=12)
        self.assertAlmostEqual(interpolate_crossing_time(0.95, 0.0, 0.05, 1.0), 0.5, places=12)

    def test_crossing_past_the_seam_stays_between_samples(self) -> None:
        """Clip fractions beyond the seam so the crossing stays in the bracket."""
        for last_fraction, fraction in [(1.00009, 0.0009), (0.99927, -0.00035), (1.02, -0.01)]:
            crossing = interpolate_crossing_time(last_fraction, 1.0, fraction, 2.0)
            self.assertGreaterEqual(crossing, 1.0)
            self.assertLessEqual(crossing, 2.0)

        self.assertEqual(interpolate_crossing_time(1.00009, 1.0, 0.0009, 2.0), 2.0)
        self.assertEqual(interpolate_crossing_time(0.99927, 1.0, -0.00035, 2.0), 1.0)

    def test_both_samples_on_the_line_cross_at_the_later_sample(self) -> None:
        """Use the current timestamp when the spanned fraction is zero."""
        self.assertEqual(interpolate_crossing_time(1.0, 3.0, 0.0, 4.0), 4.0)

        state = LapClockState(last_fraction=1.0625, last_sample_time=0.0, sample_count=1)
        updated, timing = advance_lap_clock(state, 0.0625, 1.0)
        self.assertEqual(timing.crossing_time, 1.0)
        self.assertEqual(timing.lap_elapsed, 0.0)
        self.assertTrue(updated.has_started)

    def test_lap_elapsed_is_never_negative_after_a_seam_crossing(self) -> None:
        """Keep lap time and elapsed time non-negative for fractions past the seam."""
        clock = LapClock()
        clock.process(1.00009, 1.0)
        first = clock.process(0.0009, 2.0)
        self.assertGreaterEqual(first.lap_elapsed, 0.0)

        clock.process(0.99927, 61.0)
        second = clock.process(-0.00035, 62.0)
        self.assertTrue(second.lap_completed)
        self.assertAlmostEqual(second.last_lap_time, 59.0, places=12)
        self.assertAlmostEqual(second.lap_elapsed, 1.0, places=12)

    def test_jumps_outside_the_crossing_window_do_not_trigger(self) -> None:
        """Ignore wraps whose samples are not both near the line."""
        clock = LapClock()
        clock.process(0.85, 0.0)
        self.assertIsNone(clock.process(0.05, 1.0).crossing_time)

        clock.reset()
        clock.process(0.95, 0.0)
        self.assertIsNone(clock.process(0.15, 1.0).crossing_time)
        self.assertFalse(clock.state.has_started)

    def test_backward_travel_over_the_line_does_not_trigger(self) -> None:
        """Ignore a 0 to 1 wrap in the reverse direction."""
        clock = LapClock()
        clock.process(0.05, 0.0)

        timing = clock.process(0.95, 1.0)
        self.assertIsNone(timing.crossing_time)
        self.assertFalse(clock.state.has_started)

    def test_decreasing_timestamp_is_rejected(self) -> None:
        """Reject samples that go back in time."""
        clock = LapClock()
        clock.process(0.2, 5.0)

        with self.assertRaises(TelemetryDataError):
            clock.process(0.3, 4.0)

    def test_negative_first_timestamp_is_accepted(self) -> None:
        """Accept any timestamp for the very first sample."""
        state, timing = advance_lap_clock(LapClockState(), 0.4, -3.0)

        self.assertEqual(state.sample_count, 1)
        self.assertEqual(state.last_sample_time, -3.0)
        self.assertEqual(timing.lap_number, 0)

    def test_advance_is_pure(self) -> None:
        """Leave the input state untouched."""
        state = LapClockState(last_fraction=0.95, last_sample_time=0.0, sample_count=1)

        updated, _ = advance_lap_clock(state, 0.05, 1.0)
        self.assertFalse(state.has_started)
        self.assertTrue(updated.has_started)

    def test_custom_crossing_bounds(self) -> None:
        """Honour a wider crossing window."""
        config = LapClockConfig(crossing_low=0.2, crossing_high=0.8)
        clock = LapClock(config)
        clock.process(0.85, 0.0)

        self.assertIsNotNone(clock.process(0.15, 1.0).crossing_time)

    def test_reset_restores_initial_state(self) -> None:
        """Forget laps and timestamps on reset."""
        clock = LapClock()
        clock.process(0.95, 10.0)
        clock.process(0.05, 11.0)

        clock.reset()
        self.assertEqual(clock.state, LapClockState())
        clock.process(0.5, 0.0)

    def test_lap_crossing_is_logged(self) -> None:
        """Log each completed lap with its formatted time."""
        clock = LapClock()
        clock.process(0.95, 0.0)
        clock.process(0.05, 1.0)
        clock.process(0.95, 60.0)

        with self.assertLogs("lapcalc.tracking.lap_clock", level="INFO") as logs:
            clock.process(0.05, 61.0)
        self.assertIn("LAP 1 1:00.000", logs.output[0])

    def test_format_lap_time(self) -> None:
        """Render minutes and zero-padded seconds with millisecond precision."""
        self.assertEqual(format_lap_time(0.0), "0:00.000")
        self.assertEqual(format_lap_time(4.0), "0:04.000")
        self.assertEqual(format_lap_time(95.1234), "1:35.123")


if __name__ == "__main__":
    unittest.main()
