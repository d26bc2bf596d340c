"""Tracking configuration dataclasses."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from lapcalc.track.geometry import DEFAULT_MIN_ARC_ANGLE
from lapcalc.utils.exceptions import ConfigurationError

DEFAULT_MAX_CROSS_TRACK = 20.0
DEFAULT_MIN_FRACTION = -1.0
DEFAULT_MAX_FRACTION = 2.0
DEFAULT_SEARCH_SLACK = 5
DEFAULT_CROSSING_LOW = 0.1
DEFAULT_CROSSING_HIGH = 0.9


@dataclass(frozen=True)
class SearchConfig:
    """Gates and bounds for the segment search.

    Args:
        max_cross_track: Largest lateral offset for which a segment is
            considered at all [m].
        min_fraction: Smallest segment-local fraction considered.
        max_fraction: Largest segment-local fraction considered.
        search_slack: Extra iterations beyond one full lap of segments.
        min_arc_angle: Angle between a segment's boundary bisectors above
            which projection fits a corner arc [rad].
    """

    max_cross_track: float = DEFAULT_MAX_CROSS_TRACK
    min_fraction: float = DEFAULT_MIN_FRACTION
    max_fraction: float = DEFAULT_MAX_FRACTION
    search_slack: int = DEFAULT_SEARCH_SLACK
    min_arc_angle: float = DEFAULT_MIN_ARC_ANGLE

    def validate(self) -> None:
        """Validate search settings.

        Raises:
            lapcalc.utils.exceptions.ConfigurationError: If any search value
                violates its bound.
        """
        if self.max_cross_track <= 0.0:
            msg = "max_cross_track must be positive"
            raise ConfigurationError(msg)
        if self.min_fraction >= self.max_fraction:
            msg = "min_fraction must be smaller than max_fraction"
            raise ConfigurationError(msg)
        if self.search_slack < 0:
            msg = "search_slack must be non-negative"
            raise ConfigurationError(msg)
        if not 0.0 <= self.min_arc_angle <= math.pi:
            msg = "min_arc_angle must be within [0, pi]"
            raise ConfigurationError(msg)


@dataclass(frozen=True)
class LapClockConfig:
    """Start/finish crossing bounds in track-fraction units.

    Args:
        crossing_low: The current sample must be below this fraction.
        crossing_high: The previous sample must be above this fraction.
    """

    crossing_low: float = DEFAULT_CROSSING_LOW
    crossing_high: float = DEFAULT_CROSSING_HIGH

    def validate(self) -> None:
        """Validate crossing bounds.

        Raises:
            lapcalc.utils.exceptions.ConfigurationError: If the bounds are not
                ordered within ``(0, 1)``.
        """
        if not 0.0 < self.crossing_low < self.crossing_high < 1.0:
            msg = "crossing bounds must satisfy 0 < crossing_low < crossing_high < 1"
            raise ConfigurationError(msg)


@dataclass(frozen=True)
class TrackingConfig:
    """Top-level tracking config composed of search and lap-clock settings.

    Args:
        search: Segment search gates and bounds.
        lap_clock: Start/finish crossing bounds.
    """

    search: SearchConfig = field(default_factory=SearchConfig)
    lap_clock: LapClockConfig = field(default_factory=LapClockConfig)

    def validate(self) -> None:
        """Validate combined tracking settings.

        Raises:
            lapcalc.utils.exceptions.ConfigurationError: If search or
                lap-clock values violate their bounds.
        """
        self.search.validate()
        self.lap_clock.validate()


def build_tracking_config(
    max_cross_track: float = DEFAULT_MAX_CROSS_TRACK,
    min_fraction: float = DEFAULT_MIN_FRACTION,
    max_fraction: float = DEFAULT_MAX_FRACTION,
    search_slack: int = DEFAULT_SEARCH_SLACK,
    min_arc_angle_deg: float = math.degrees(DEFAULT_MIN_ARC_ANGLE),
    crossing_low: float = DEFAULT_CROSSING_LOW,
    crossing_high: float = DEFAULT_CROSSING_HIGH,
) -> TrackingConfig:
    """Build a validated tracking config.

    Args:
        max_cross_track: Search gate on lateral offset [m].
        min_fraction: Lower search gate on segment-local fraction.
        max_fraction: Upper search gate on segment-local fraction.
        search_slack: Extra search iterations beyond one lap of segments.
        min_arc_angle_deg: Bisector angle above which corners are fitted with
            an arc [deg].
        crossing_low: Upper fraction bound for the sample after the line.
        crossing_high: Lower fraction bound for the sample before the line.

    Returns:
        Validated tracking configuration.

    Raises:
        lapcalc.utils.exceptions.ConfigurationError: If any value violates its
            bound.
    """
    config = TrackingConfig(
        search=SearchConfig(
            max_cross_track=max_cross_track,
            min_fraction=min_fraction,
            max_fraction=max_fraction,
            search_slack=search_slack,
            min_arc_angle=math.radians(min_arc_angle_deg),
        ),
        lap_clock=LapClockConfig(
            crossing_low=crossing_low,
            crossing_high=crossing_high,
        ),
    )
    config.validate()
    return config
