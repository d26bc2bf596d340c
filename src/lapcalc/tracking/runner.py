"""Per-sample processing and single-pass session orchestration."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np
import numpy.typing as npt

from lapcalc.telemetry.reader import TelemetrySample
from lapcalc.track.corners import CornerTable
from lapcalc.track.models import TrackModel
from lapcalc.tracking.config import TrackingConfig
from lapcalc.tracking.lap_clock import LapClockState, advance_lap_clock
from lapcalc.tracking.position import Found, TrackCursor, locate
from lapcalc.utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class SampleRecord:
    """Combined output of one processing step.

    Position, lap, and corner fields are ``None`` for off-track samples; the
    raw line and local coordinates are always passed through.

    Args:
        raw_line: Source telemetry line, empty for synthetic samples.
        x: Local x-coordinate of the sample [m].
        y: Local y-coordinate of the sample [m].
        timestamp: Sample time [s].
        track_fraction: Fractional progress around the lap.
        distance_from_start: Distance along the track [m].
        cross_track: Signed lateral offset, positive left of travel [m].
        lap_number: Completed laps since the first crossing.
        lap_elapsed: Time into the current lap [s].
        last_lap_time: Duration of the most recently completed lap [s].
        corner_label: Track-section label, ``None`` without a corner table.
    """

    raw_line: str
    x: float
    y: float
    timestamp: float
    track_fraction: float | None = None
    distance_from_start: float | None = None
    cross_track: float | None = None
    lap_number: int | None = None
    lap_elapsed: float | None = None
    last_lap_time: float | None = None
    corner_label: str | None = None

    @property
    def on_track(self) -> bool:
        """Whether the sample was located on the track.

        Returns:
            ``True`` when position fields are populated.
        """
        return self.track_fraction is not None


@dataclass(frozen=True)
class SessionResult:
    """Output of one pass over a sample stream.

    Args:
        records: One record per input sample, in input order.
        lap_times: Durations of all completed laps, in order [s].
        off_track_count: Number of samples no segment accepted.
    """

    records: tuple[SampleRecord, ...]
    lap_times: tuple[float, ...]
    off_track_count: int

    @property
    def lap_count(self) -> int:
        """Number of completed laps.

        Returns:
            Count of entries in ``lap_times``.
        """
        return len(self.lap_times)

    @property
    def best_lap_time(self) -> float | None:
        """Shortest completed lap.

        Returns:
            Best lap time, ``None`` when no lap was completed [s].
        """
        return min(self.lap_times) if self.lap_times else None

    def to_dataframe(self) -> Any:
        """Return the records as a table.

        Returns:
            Pandas DataFrame with one row per record.

        Raises:
            lapcalc.utils.exceptions.ConfigurationError: If pandas is not
                installed in the active environment.
        """
        try:
            import pandas as pd  # type: ignore[import-untyped]
        except ModuleNotFoundError as exc:
            msg = (
                "SessionResult.to_dataframe requires pandas. "
                "Install with `pip install pandas`."
            )
            raise ConfigurationError(msg) from exc

        return pd.DataFrame([asdict(record) for record in self.records])


def process_sample(
    track: TrackModel,
    point: npt.ArrayLike,
    timestamp: float,
    cursor: TrackCursor,
    clock: LapClockState,
    config: TrackingConfig,
    corners: CornerTable | None = None,
    raw_line: str = "",
) -> tuple[SampleRecord, TrackCursor, LapClockState, bool]:
    """Run one processing step: locate, time, and label a sample.

    Off-track samples skip the lap clock and corner lookup entirely.

    Args:
        track: Track shared read-only across sessions.
        point: Sample position in the track's local frame [m].
        timestamp: Sample time [s].
        cursor: Search cursor from the previous step.
        clock: Lap-clock state from the previous step.
        config: Tracking configuration.
        corners: Optional section-label table.
        raw_line: Source line passed through to the record.

    Returns:
        Tuple of the record, the next cursor, the next clock state, and a
        flag that is ``True`` when this sample completed a lap.
    """
    query = np.asarray(point, dtype=np.float64)
    result, cursor = locate(track, query, cursor, config.search)
    if not isinstance(result, Found):
        record = SampleRecord(
            raw_line=raw_line,
            x=float(query[0]),
            y=float(query[1]),
            timestamp=float(timestamp),
        )
        return record, cursor, clock, False

    clock, timing = advance_lap_clock(clock, result.track_fraction, timestamp, config.lap_clock)
    label = corners.label_for(result.distance_from_start) if corners is not None else None
    record = SampleRecord(
        raw_line=raw_line,
        x=float(query[0]),
        y=float(query[1]),
        timestamp=float(timestamp),
        track_fraction=result.track_fraction,
        distance_from_start=result.distance_from_start,
        cross_track=result.cross_track,
        lap_number=timing.lap_number,
        lap_elapsed=timing.lap_elapsed,
        last_lap_time=timing.last_lap_time,
        corner_label=label,
    )
    return record, cursor, clock, timing.lap_completed


def _unpack(
    sample: TelemetrySample | tuple[npt.ArrayLike, float],
) -> tuple[str, npt.ArrayLike, float]:
    """Return ``(raw_line, point, timestamp)`` for a sample or a plain pair."""
    if isinstance(sample, TelemetrySample):
        return sample.raw_line, sample.point, sample.timestamp
    point, timestamp = sample
    return "", point, float(timestamp)


def process_session(
    track: TrackModel,
    samples: Iterable[TelemetrySample | tuple[npt.ArrayLike, float]],
    corners: CornerTable | None = None,
    config: TrackingConfig | None = None,
) -> SessionResult:
    """Process one ordered sample stream in a single pass.

    Args:
        track: Track to locate samples on.
        samples: ``TelemetrySample`` objects or ``(point, timestamp)`` pairs
            with non-decreasing timestamps.
        corners: Optional section-label table.
        config: Tracking configuration; defaults to :class:`TrackingConfig`.

    Returns:
        Records for every sample plus completed lap times.

    Raises:
        lapcalc.utils.exceptions.ConfigurationError: If ``config`` is
            invalid.
        lapcalc.utils.exceptions.TelemetryDataError: If on-track timestamps
            decrease.
    """
    config = config or TrackingConfig()
    config.validate()

    cursor = TrackCursor()
    clock = LapClockState()
    records: list[SampleRecord] = []
    lap_times: list[float] = []
    off_track = 0
    for sample in samples:
        raw_line, point, timestamp = _unpack(sample)
        record, cursor, clock, completed = process_sample(
            track, point, timestamp, cursor, clock, config, corners, raw_line
        )
        records.append(record)
        if not record.on_track:
            off_track += 1
        if completed:
            lap_times.append(clock.last_lap_time)

    return SessionResult(
        records=tuple(records),
        lap_times=tuple(lap_times),
        off_track_count=off_track,
    )
