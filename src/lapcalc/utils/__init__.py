"""Utility helpers."""

from lapcalc.utils.constants import EARTH_CIRCUMFERENCE, SMALL_EPS
from lapcalc.utils.logging import configure_logging

__all__ = ["EARTH_CIRCUMFERENCE", "SMALL_EPS", "configure_logging"]
