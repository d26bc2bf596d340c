"""Start/finish crossing detection and lap timing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from lapcalc.tracking.config import LapClockConfig
from lapcalc.utils.exceptions import TelemetryDataError

SECONDS_PER_MINUTE = 60.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LapClockState:
    """Lap bookkeeping carried from one sample to the next.

    Args:
        lap_start_time: Interpolated time the current lap started [s].
        lap_number: Completed laps since the first crossing.
        last_fraction: Track fraction of the previous sample.
        last_sample_time: Timestamp of the previous sample [s].
        has_started: Whether the start/finish line has been crossed once.
        last_lap_time: Duration of the most recently completed lap [s].
        sample_count: Number of samples processed so far.
    """

    lap_start_time: float = 0.0
    lap_number: int = 0
    last_fraction: float = 0.0
    last_sample_time: float = 0.0
    has_started: bool = False
    last_lap_time: float = 0.0
    sample_count: int = 0


@dataclass(frozen=True)
class LapTiming:
    """Running lap snapshot emitted for every sample.

    Args:
        lap_elapsed: Time since the current lap started, 0 before the first
            crossing [s].
        lap_number: Completed laps since the first crossing.
        last_lap_time: Duration of the most recently completed lap [s].
        crossing_time: Interpolated crossing instant if this sample crossed
            the line, else ``None`` [s].
        lap_completed: Whether this sample completed a lap.
    """

    lap_elapsed: float
    lap_number: int
    last_lap_time: float
    crossing_time: float | None = None
    lap_completed: bool = False


def format_lap_time(seconds: float) -> str:
    """Format a duration as ``m:ss.sss``.

    Args:
        seconds: Duration [s].

    Returns:
        Minutes and zero-padded seconds with millisecond precision.
    """
    minutes = int(seconds // SECONDS_PER_MINUTE)
    return f"{minutes}:{seconds - minutes * SECONDS_PER_MINUTE:06.3f}"


def interpolate_crossing_time(
    last_fraction: float,
    last_time: float,
    track_fraction: float,
    timestamp: float,
) -> float:
    """Interpolate the instant the track fraction wrapped through 1 to 0.

    Fractions slightly past the seam (``last_fraction > 1`` or a negative
    ``track_fraction``) count as zero distance to the line, so the result
    always lies in ``[last_time, timestamp]``.

    Args:
        last_fraction: Track fraction of the sample before the line.
        last_time: Timestamp of the sample before the line [s].
        track_fraction: Track fraction of the sample after the line.
        timestamp: Timestamp of the sample after the line [s].

    Returns:
        Crossing time, weighted by each sample's fractional distance to the
        line [s]. ``timestamp`` when both samples sit on the line.
    """
    residual = max(1.0 - last_fraction, 0.0)
    interval = residual + max(track_fraction, 0.0)
    if interval <= 0.0:
        return timestamp
    weight = min(max(residual / interval, 0.0), 1.0)
    return last_time * weight + timestamp * (1.0 - weight)


def advance_lap_clock(
    state: LapClockState,
    track_fraction: float,
    timestamp: float,
    config: LapClockConfig | None = None,
) -> tuple[LapClockState, LapTiming]:
    """Process one on-track sample.

    Args:
        state: Clock state after the previous sample.
        track_fraction: Track fraction of this sample.
        timestamp: Timestamp of this sample [s].
        config: Crossing bounds; defaults to :class:`LapClockConfig`.

    Returns:
        Tuple of the updated state and the lap snapshot for this sample.

    Raises:
        lapcalc.utils.exceptions.TelemetryDataError: If ``timestamp`` is
            earlier than the previous sample's.
    """
    config = config or LapClockConfig()
    if state.sample_count and timestamp < state.last_sample_time:
        msg = (
            f"Samples must have non-decreasing timestamps, got {timestamp} "
            f"after {state.last_sample_time}"
        )
        raise TelemetryDataError(msg)

    crossing_time: float | None = None
    lap_completed = False
    if track_fraction < config.crossing_low and state.last_fraction > config.crossing_high:
        crossing_time = interpolate_crossing_time(
            state.last_fraction, state.last_sample_time, track_fraction, timestamp
        )
        if state.has_started:
            lap_time = crossing_time - state.lap_start_time
            state = replace(
                state,
                lap_number=state.lap_number + 1,
                last_lap_time=lap_time,
                lap_start_time=crossing_time,
            )
            lap_completed = True
            logger.info("LAP %d %s", state.lap_number, format_lap_time(lap_time))
        else:
            state = replace(
                state,
                has_started=True,
                lap_number=0,
                lap_start_time=crossing_time,
            )
            logger.info("First lap started at %.3f s", crossing_time)

    state = replace(
        state,
        last_fraction=track_fraction,
        last_sample_time=timestamp,
        sample_count=state.sample_count + 1,
    )
    lap_elapsed = timestamp - state.lap_start_time if state.has_started else 0.0
    timing = LapTiming(
        lap_elapsed=lap_elapsed,
        lap_number=state.lap_number,
        last_lap_time=state.last_lap_time,
        crossing_time=crossing_time,
        lap_completed=lap_completed,
    )
    return state, timing


class LapClock:
    """Stateful wrapper around :func:`advance_lap_clock` for one session.

    Args:
        config: Crossing bounds; defaults to :class:`LapClockConfig`.
    """

    def __init__(self, config: LapClockConfig | None = None) -> None:
        self.config = config or LapClockConfig()
        self.state = LapClockState()

    def process(self, track_fraction: float, timestamp: float) -> LapTiming:
        """Advance the clock by one on-track sample.

        Args:
            track_fraction: Track fraction of this sample.
            timestamp: Timestamp of this sample [s].

        Returns:
            Lap snapshot for this sample.
        """
        self.state, timing = advance_lap_clock(self.state, track_fraction, timestamp, self.config)
        return timing

    def reset(self) -> None:
        """Re-initialize for a new session."""
        self.state = LapClockState()
