"""Failure types and per-run diagnostics for the OSM -> MobSink conversion."""

from dataclasses import dataclass, field
from typing import List


class ConversionError(Exception):
    """Base class for failures that abort a whole conversion run."""

    kind = "conversion_error"


class MalformedInputError(ConversionError):
    """The input is not XML, its root is not <osm>, or it has no <bounds>."""

    kind = "malformed_input"


class DegenerateBoundsError(ConversionError):
    """The bounding box has zero (or negative) latitude or longitude span."""

    kind = "degenerate_bounds"


class OutputWriteError(ConversionError, OSError):
    """The MobSink document could not be written to its destination."""

    kind = "write_failure"


@dataclass
class Diagnostics:
    """Counters and warnings collected while converting one document."""

    nodes_read: int = 0
    nodes_out_of_bounds: int = 0
    ways_read: int = 0
    ways_discarded: int = 0
    missing_references: int = 0
    segments_written: int = 0
    warnings: List[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
