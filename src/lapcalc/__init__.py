"""GPS lap timing and track positioning package."""

from lapcalc.track import build_track_model
from lapcalc.tracking import SessionResult, process_session

__all__ = [
    "SessionResult",
    "build_track_model",
    "process_session",
]
