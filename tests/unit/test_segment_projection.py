"""Unit tests for straight and arc segment projection."""

from __future__ import annotations

import math
import unittest

import numpy as np

from lapcalc.track import build_polygon_track, build_square_track, build_track_model
from lapcalc.track.geometry import (
    arc_center,
    project_onto_segment,
    project_straight,
    reconstruct_point,
)

SQRT2 = math.sqrt(2.0)


class StraightProjectionTests(unittest.TestCase):
    """Chord projection of points near a single segment."""

    def setUp(self) -> None:
        self.track = build_track_model([[0.0, 0.0], [10.0, 0.0]])
        self.segment = self.track.segments[0]

    def test_left_offset_is_positive(self) -> None:
        """Report positive cross track for points left of travel."""
        left = project_onto_segment(self.segment, np.array([3.0, 2.0]))
        right = project_onto_segment(self.segment, np.array([3.0, -2.0]))

        self.assertFalse(left.is_arc)
        self.assertAlmostEqual(left.distance_along, 3.0, places=12)
        self.assertAlmostEqual(left.fraction_along, 0.3, places=12)
        self.assertAlmostEqual(left.cross_track, 2.0, places=12)
        self.assertAlmostEqual(right.cross_track, -2.0, places=12)

    def test_fraction_extrapolates_outside_segment(self) -> None:
        """Extrapolate the fraction before and after the segment ends."""
        before = project_onto_segment(self.segment, np.array([-5.0, 1.0]))
        after = project_onto_segment(self.segment, np.array([15.0, 1.0]))

        self.assertAlmostEqual(before.fraction_along, -0.5, places=12)
        self.assertAlmostEqual(after.fraction_along, 1.5, places=12)

    def test_start_point_projects_to_exact_zero(self) -> None:
        """Return exactly zero fraction for the segment's first point."""
        projection = project_onto_segment(self.segment, np.array([0.0, 0.0]))

        self.assertEqual(projection.fraction_along, 0.0)
        self.assertEqual(projection.cross_track, 0.0)

    def test_interior_points_reconstruct_within_tolerance(self) -> None:
        """Keep interior fractions in (0, 1) and invert back to the point."""
        track = build_track_model([[3.0, -4.0], [21.0, 9.0]])
        segment = track.segments[0]
        rng = np.random.default_rng(7)

        for _ in range(200):
            along = rng.uniform(0.01, 0.99) * segment.length
            lateral = rng.uniform(-15.0, 15.0)
            left_normal = np.array([-segment.direction[1], segment.direction[0]])
            point = segment.first + along * segment.direction + lateral * left_normal

            projection = project_straight(segment, point)
            self.assertGreater(projection.fraction_along, 0.0)
            self.assertLess(projection.fraction_along, 1.0)
            self.assertAlmostEqual(projection.cross_track, lateral, places=9)
            np.testing.assert_allclose(reconstruct_point(segment, projection), point, atol=1e-9)


class ArcProjectionTests(unittest.TestCase):
    """Corner-arc projection through instant centers."""

    def test_square_corner_center_is_square_center(self) -> None:
        """Intersect the boundary bisectors at the middle of the square."""
        track = build_square_track(side=10.0)

        center = arc_center(track.segments[1])
        self.assertIsNotNone(center)
        np.testing.assert_allclose(center, [5.0, 5.0], atol=1e-12)
        self.assertIsNone(arc_center(track.segments[0]))
        self.assertIsNone(arc_center(track.segments[2]))

    def test_left_turn_chord_midpoint_lies_left_of_arc(self) -> None:
        """Measure chord midpoints as inside, i.e. left of, a left-hand arc."""
        segment = build_square_track(side=10.0).segments[1]

        projection = project_onto_segment(segment, np.array([10.0, 5.0]))
        self.assertTrue(projection.is_arc)
        self.assertAlmostEqual(projection.fraction_along, 0.5, places=12)
        self.assertAlmostEqual(projection.distance_along, 5.0, places=12)
        self.assertAlmostEqual(projection.cross_track, 5.0 * SQRT2 - 5.0, places=12)

        on_arc = project_onto_segment(segment, np.array([5.0 + 5.0 * SQRT2, 5.0]))
        self.assertAlmostEqual(on_arc.cross_track, 0.0, places=12)
        self.assertAlmostEqual(on_arc.fraction_along, 0.5, places=12)

    def test_arc_endpoints_map_to_zero_and_one(self) -> None:
        """Map the segment's end points onto the ends of the fitted arc."""
        segment = build_square_track(side=10.0).segments[1]

        start = project_onto_segment(segment, segment.first)
        end = project_onto_segment(segment, segment.second)
        self.assertAlmostEqual(start.fraction_along, 0.0, places=12)
        self.assertAlmostEqual(end.fraction_along, 1.0, places=12)
        self.assertAlmostEqual(start.cross_track, 0.0, places=12)

    def test_right_turn_sign_convention_matches_straight_mode(self) -> None:
        """Flip the radial sign so positive still means left on right turns."""
        track = build_track_model([[0.0, 0.0], [10.0, 0.0], [10.0, -10.0], [0.0, -10.0]])
        segment = track.segments[1]

        np.testing.assert_allclose(arc_center(segment), [5.0, -5.0], atol=1e-12)
        inside = project_onto_segment(segment, np.array([10.0, -5.0]))
        outside = project_onto_segment(segment, np.array([14.0, -5.0]))

        self.assertAlmostEqual(inside.fraction_along, 0.5, places=12)
        self.assertAlmostEqual(inside.cross_track, 5.0 - 5.0 * SQRT2, places=12)
        self.assertGreater(outside.cross_track, 0.0)

    def test_points_before_segment_get_negative_fraction(self) -> None:
        """Use signed angles so points behind the arc start extrapolate."""
        segment = build_square_track(side=10.0).segments[1]

        projection = project_onto_segment(segment, np.array([10.0, -1.0]))
        self.assertLess(projection.fraction_along, 0.0)

    def test_shallow_corners_fall_back_to_straight_mode(self) -> None:
        """Use the chord when the bisectors are within the angle threshold."""
        track = build_polygon_track(sides=180, radius=100.0)
        segment = track.segments[10]
        midpoint = 0.5 * (segment.first + segment.second)

        self.assertIsNone(arc_center(segment))
        projection = project_onto_segment(segment, midpoint)
        self.assertFalse(projection.is_arc)
        self.assertAlmostEqual(projection.cross_track, 0.0, places=9)

        forced = project_onto_segment(segment, midpoint, min_arc_angle=math.radians(1.0))
        self.assertTrue(forced.is_arc)

    def test_regular_polygon_arc_follows_circumcircle(self) -> None:
        """Fit each side of a regular polygon with its circumscribed circle."""
        radius = 40.0
        sides = 12
        track = build_polygon_track(sides=sides, radius=radius)
        apothem = radius * math.cos(math.pi / sides)

        for segment in track.segments:
            np.testing.assert_allclose(arc_center(segment), [0.0, 0.0], atol=1e-9)
            midpoint = 0.5 * (segment.first + segment.second)
            projection = project_onto_segment(segment, midpoint)
            self.assertAlmostEqual(projection.fraction_along, 0.5, places=9)
            self.assertAlmostEqual(projection.cross_track, radius - apothem, places=9)


if __name__ == "__main__":
    unittest.main()
