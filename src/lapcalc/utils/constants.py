"""Numerical and geodetic constants used across the library."""

SMALL_EPS: float = 1e-9
EARTH_CIRCUMFERENCE: float = 40_075_017.0
METERS_PER_DEGREE: float = EARTH_CIRCUMFERENCE / 360.0
