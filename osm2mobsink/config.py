from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

# Network size configuration (MobSink units)
DEFAULT_NETWORK_WIDTH = 1000
DEFAULT_NETWORK_HEIGHT = 1000
DEFAULT_SPEED_LIMIT = 50

# Old converter scaled degrees by a fixed multiplier (higher = less precision)
DEGREE_MULTIPLIER = 100000

# Flat meters-per-degree approximation
METERS_PER_DEGREE_LON = 111320
METERS_PER_DEGREE_LAT = 110574


class DimensionPolicy(Enum):
    """How a network width/height that was not supplied gets derived."""

    ASPECT = "aspect"
    FIXED = "fixed"
    METERS = "meters"
    GEODESIC = "geodesic"
    DEGREES = "degrees"


class GapPolicy(Enum):
    """What happens to a way's chain at a reference to an unknown node."""

    BRIDGE = "bridge"
    SPLIT = "split"


@dataclass(frozen=True)
class ConversionConfig:
    dimension_policy: DimensionPolicy = DimensionPolicy.ASPECT
    gap_policy: GapPolicy = GapPolicy.BRIDGE
    # None accepts every highway=* value
    highway_types: Optional[FrozenSet[str]] = None

    def is_road(self, highway: Optional[str]) -> bool:
        if highway is None:
            return False
        if self.highway_types is None:
            return True
        return highway in self.highway_types
