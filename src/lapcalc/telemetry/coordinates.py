"""Geographic to local planar coordinate conversion."""

from __future__ import annotations

import math
from typing import Protocol

import numpy as np
import numpy.typing as npt
from pyproj import Transformer

from lapcalc.utils.constants import METERS_PER_DEGREE
from lapcalc.utils.exceptions import ConfigurationError

FloatArray = npt.NDArray[np.float64]

GEOGRAPHIC_CRS = "EPSG:4326"
UTM_NORTH_EPSG_BASE = 32600
UTM_SOUTH_EPSG_BASE = 32700
UTM_ZONE_WIDTH_DEG = 6.0
UTM_ZONE_COUNT = 60
PROJECTION_NAMES = ("equirectangular", "utm")
DEFAULT_PROJECTION = "equirectangular"


class CoordinateProjection(Protocol):
    """Converter from latitude/longitude into a local metric frame."""

    def to_local(self, lat: float, lon: float) -> FloatArray:
        """Project one geographic coordinate into the local frame.

        Args:
            lat: Latitude [deg].
            lon: Longitude [deg].

        Returns:
            Local ``(x, y)`` position [m].
        """

    def to_local_array(self, lat: npt.ArrayLike, lon: npt.ArrayLike) -> FloatArray:
        """Project coordinate arrays into the local frame.

        Args:
            lat: Latitude samples [deg].
            lon: Longitude samples [deg].

        Returns:
            Local positions of shape ``(N, 2)`` [m].
        """


class EquirectangularProjection:
    """Flat-earth projection anchored at a reference point.

    Longitude degrees are scaled by the cosine of the reference latitude, which
    is accurate enough over the extent of a single circuit.

    Args:
        reference_lat: Latitude of the local origin [deg].
        reference_lon: Longitude of the local origin [deg].
    """

    def __init__(self, reference_lat: float, reference_lon: float) -> None:
        self.reference_lat = float(reference_lat)
        self.reference_lon = float(reference_lon)
        self.meters_per_lon_degree = METERS_PER_DEGREE * math.cos(math.radians(self.reference_lat))

    def to_local(self, lat: float, lon: float) -> FloatArray:
        """Project one coordinate pair.

        Args:
            lat: Latitude [deg].
            lon: Longitude [deg].

        Returns:
            Local ``(x, y)`` position, x east and y north [m].
        """
        return np.array(
            [
                self.meters_per_lon_degree * (float(lon) - self.reference_lon),
                METERS_PER_DEGREE * (float(lat) - self.reference_lat),
            ],
            dtype=np.float64,
        )

    def to_local_array(self, lat: npt.ArrayLike, lon: npt.ArrayLike) -> FloatArray:
        """Project coordinate arrays.

        Args:
            lat: Latitude samples [deg].
            lon: Longitude samples [deg].

        Returns:
            Local positions of shape ``(N, 2)`` [m].
        """
        lat_arr = np.asarray(lat, dtype=np.float64)
        lon_arr = np.asarray(lon, dtype=np.float64)
        x = self.meters_per_lon_degree * (lon_arr - self.reference_lon)
        y = METERS_PER_DEGREE * (lat_arr - self.reference_lat)
        return np.column_stack([x, y])


def utm_zone(lon: float) -> int:
    """Return the standard 6-degree UTM zone number for a longitude.

    Args:
        lon: Longitude [deg].

    Returns:
        Zone number in ``1..60``.
    """
    return int((float(lon) + 180.0) // UTM_ZONE_WIDTH_DEG) % UTM_ZONE_COUNT + 1


class UtmProjection:
    """WGS84 UTM projection shifted so that a reference point is the origin.

    The zone is taken from the reference longitude unless given, and the
    hemisphere from the sign of the reference latitude.

    Args:
        reference_lat: Latitude of the local origin [deg].
        reference_lon: Longitude of the local origin [deg].
        zone: UTM zone number override.
    """

    def __init__(self, reference_lat: float, reference_lon: float, zone: int | None = None) -> None:
        self.reference_lat = float(reference_lat)
        self.reference_lon = float(reference_lon)
        self.zone = utm_zone(self.reference_lon) if zone is None else int(zone)
        if not 1 <= self.zone <= UTM_ZONE_COUNT:
            msg = f"UTM zone must be in 1..{UTM_ZONE_COUNT}, got {self.zone}"
            raise ConfigurationError(msg)

        base = UTM_NORTH_EPSG_BASE if self.reference_lat >= 0.0 else UTM_SOUTH_EPSG_BASE
        self.crs = f"EPSG:{base + self.zone}"
        self._transformer = Transformer.from_crs(GEOGRAPHIC_CRS, self.crs, always_xy=True)
        origin_x, origin_y = self._transformer.transform(self.reference_lon, self.reference_lat)
        self.origin = np.array([origin_x, origin_y], dtype=np.float64)

    def to_local(self, lat: float, lon: float) -> FloatArray:
        """Project one coordinate pair.

        Args:
            lat: Latitude [deg].
            lon: Longitude [deg].

        Returns:
            Local ``(x, y)`` position, x easting and y northing [m].
        """
        x, y = self._transformer.transform(float(lon), float(lat))
        return np.array([x, y], dtype=np.float64) - self.origin

    def to_local_array(self, lat: npt.ArrayLike, lon: npt.ArrayLike) -> FloatArray:
        """Project coordinate arrays.

        Args:
            lat: Latitude samples [deg].
            lon: Longitude samples [deg].

        Returns:
            Local positions of shape ``(N, 2)`` [m].
        """
        lat_arr = np.asarray(lat, dtype=np.float64)
        lon_arr = np.asarray(lon, dtype=np.float64)
        x, y = self._transformer.transform(lon_arr, lat_arr)
        return np.column_stack([np.asarray(x), np.asarray(y)]) - self.origin


def build_projection(
    name: str,
    reference_lat: float,
    reference_lon: float,
) -> CoordinateProjection:
    """Build a named projection anchored at a reference point.

    Args:
        name: One of ``PROJECTION_NAMES``.
        reference_lat: Latitude of the local origin [deg].
        reference_lon: Longitude of the local origin [deg].

    Returns:
        Projection instance.

    Raises:
        lapcalc.utils.exceptions.ConfigurationError: If ``name`` is unknown.
    """
    if name == "equirectangular":
        return EquirectangularProjection(reference_lat, reference_lon)
    if name == "utm":
        return UtmProjection(reference_lat, reference_lon)
    msg = f"Unknown projection {name!r}, expected one of {PROJECTION_NAMES}"
    raise ConfigurationError(msg)
