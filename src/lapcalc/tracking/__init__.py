"""Position tracking, lap timing, and session processing."""

from lapcalc.tracking.config import (
    LapClockConfig,
    SearchConfig,
    TrackingConfig,
    build_tracking_config,
)
from lapcalc.tracking.lap_clock import LapClock, LapClockState, LapTiming, advance_lap_clock
from lapcalc.tracking.position import (
    NOT_FOUND,
    Found,
    NotFound,
    PositionResult,
    PositionTracker,
    TrackCursor,
    locate,
)
from lapcalc.tracking.runner import SampleRecord, SessionResult, process_sample, process_session

__all__ = [
    "Found",
    "LapClock",
    "LapClockConfig",
    "LapClockState",
    "LapTiming",
    "NOT_FOUND",
    "NotFound",
    "PositionResult",
    "PositionTracker",
    "SampleRecord",
    "SearchConfig",
    "SessionResult",
    "TrackCursor",
    "TrackingConfig",
    "advance_lap_clock",
    "build_tracking_config",
    "locate",
    "process_sample",
    "process_session",
]
