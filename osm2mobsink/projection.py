"""Map geographic (lat, lon) pairs onto the MobSink network plane.

The MobSink plane has its origin in the top-left corner, x growing east and
y growing south, and spans ``[0, width] x [0, height]``.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from pyproj import Geod
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import box
from shapely.prepared import prep

from .config import (
    DEFAULT_NETWORK_HEIGHT,
    DEFAULT_NETWORK_WIDTH,
    DEFAULT_SPEED_LIMIT,
    DEGREE_MULTIPLIER,
    METERS_PER_DEGREE_LAT,
    METERS_PER_DEGREE_LON,
    DimensionPolicy,
)
from .errors import DegenerateBoundsError
from .geometry import Point

WGS84 = Geod(ellps="WGS84")


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def __post_init__(self):
        # lon/lat order, as shapely expects x/y
        area = box(self.min_lon, self.min_lat, self.max_lon, self.max_lat)
        object.__setattr__(self, "_area", prep(area))

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lon_span(self) -> float:
        return self.max_lon - self.min_lon

    def contains(self, lat: float, lon: float) -> bool:
        """Closed-box test: nodes lying on the edge are inside."""
        return self._area.covers(ShapelyPoint(lon, lat))

    def require_area(self) -> None:
        if self.lat_span <= 0 or self.lon_span <= 0:
            raise DegenerateBoundsError(
                f"Bounding box has no area: lat span {self.lat_span}, lon span {self.lon_span}"
            )


@dataclass(frozen=True)
class NetworkDimensions:
    width: int
    height: int
    speed_limit: int


# ================================================================
# NETWORK SIZE RESOLUTION
# ================================================================

def _to_units(value: float) -> int:
    return max(1, int(round(value)))


def natural_size(bounds: BoundingBox, policy: DimensionPolicy) -> Tuple[float, float]:
    """Width and height the bounding box maps to under ``policy``.

    Only meaningful for the policies that do not depend on caller overrides
    (FIXED, METERS, GEODESIC, DEGREES).
    """
    if policy is DimensionPolicy.FIXED:
        return float(DEFAULT_NETWORK_WIDTH), float(DEFAULT_NETWORK_HEIGHT)

    if policy is DimensionPolicy.METERS:
        avg_lat = math.radians((bounds.min_lat + bounds.max_lat) / 2.0)
        width_m = math.cos(avg_lat) * bounds.lon_span * METERS_PER_DEGREE_LON
        height_m = bounds.lat_span * METERS_PER_DEGREE_LAT
        return width_m, height_m

    if policy is DimensionPolicy.GEODESIC:
        mid_lat = (bounds.min_lat + bounds.max_lat) / 2.0
        mid_lon = (bounds.min_lon + bounds.max_lon) / 2.0
        _, _, width_m = WGS84.inv(bounds.min_lon, mid_lat, bounds.max_lon, mid_lat)
        _, _, height_m = WGS84.inv(mid_lon, bounds.min_lat, mid_lon, bounds.max_lat)
        return width_m, height_m

    if policy is DimensionPolicy.DEGREES:
        return bounds.lon_span * DEGREE_MULTIPLIER, bounds.lat_span * DEGREE_MULTIPLIER

    raise ValueError(f"Policy {policy.value} has no natural size")


def resolve_dimensions(
    bounds: BoundingBox,
    width: Optional[int] = None,
    height: Optional[int] = None,
    speed_limit: Optional[int] = None,
    policy: DimensionPolicy = DimensionPolicy.ASPECT,
) -> NetworkDimensions:
    """Resolve the network size once per run.

    Supplied overrides are always used unchanged; only missing values are
    derived, according to ``policy``.

    Raises:
        DegenerateBoundsError: If the bounding box has no area
    """
    bounds.require_area()

    if speed_limit is None:
        speed_limit = DEFAULT_SPEED_LIMIT

    if width is None or height is None:
        if policy is DimensionPolicy.ASPECT:
            if width is None and height is None:
                width = DEFAULT_NETWORK_WIDTH
            if height is None:
                height = _to_units(width * bounds.lat_span / bounds.lon_span)
            else:
                width = _to_units(height * bounds.lon_span / bounds.lat_span)
        else:
            natural_width, natural_height = natural_size(bounds, policy)
            if width is None:
                width = _to_units(natural_width)
            if height is None:
                height = _to_units(natural_height)

    return NetworkDimensions(int(width), int(height), int(speed_limit))


# ================================================================
# PROJECTION
# ================================================================

class CoordinateProjector:
    """Projects raw coordinates with one bounding box as origin and scale."""

    def __init__(self, bounds: BoundingBox, dimensions: NetworkDimensions):
        bounds.require_area()
        self.bounds = bounds
        self.dimensions = dimensions

    def project(self, lat: float, lon: float) -> Point:
        lat_offset = lat - self.bounds.min_lat
        lon_offset = lon - self.bounds.min_lon

        # Flip the vertical axis (in MobSink, y starts from the top)
        lat_offset = self.bounds.lat_span - lat_offset

        # Ratio first so that in-bounds input never exceeds the network size
        y = self.dimensions.height * (lat_offset / self.bounds.lat_span)
        x = self.dimensions.width * (lon_offset / self.bounds.lon_span)
        return Point(x, y)
