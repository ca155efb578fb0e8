"""OpenStreetMap to MobSink road network converter."""

from .config import ConversionConfig, DimensionPolicy, GapPolicy
from .converter import ConversionResult, Network, build_network, convert
from .errors import (
    ConversionError,
    DegenerateBoundsError,
    Diagnostics,
    MalformedInputError,
    OutputWriteError,
)
from .geometry import Flow, PathSegment, Point, TrafficControl

__all__ = [
    "ConversionConfig",
    "ConversionError",
    "ConversionResult",
    "DegenerateBoundsError",
    "Diagnostics",
    "DimensionPolicy",
    "Flow",
    "GapPolicy",
    "MalformedInputError",
    "Network",
    "OutputWriteError",
    "PathSegment",
    "Point",
    "TrafficControl",
    "build_network",
    "convert",
]
