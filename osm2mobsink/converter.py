"""One-shot OSM -> MobSink conversion: load, project, filter, serialize."""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import ConversionConfig
from .errors import ConversionError, Diagnostics
from .geometry import PathSegment
from .mobsink_writer import OutputSink, write_network
from .osm_parser import OsmSource, build_segments, load_document, read_bounds
from .projection import CoordinateProjector, NetworkDimensions, resolve_dimensions


@dataclass
class Network:
    dimensions: NetworkDimensions
    segments: List[PathSegment] = field(default_factory=list)


@dataclass
class ConversionResult:
    success: bool
    diagnostics: Diagnostics
    network: Optional[Network] = None
    error: Optional[ConversionError] = None

    @property
    def failure(self) -> Optional[str]:
        """Failure kind ("malformed_input", "write_failure", ...) or None."""
        if self.error is None:
            return None
        return self.error.kind


def build_network(
    source: OsmSource,
    width: Optional[int] = None,
    height: Optional[int] = None,
    speed_limit: Optional[int] = None,
    config: Optional[ConversionConfig] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> Network:
    """Parse ``source`` into an in-memory network without writing anything.

    Raises:
        MalformedInputError: If the document is unreadable or not OSM
        DegenerateBoundsError: If the bounding box has no area
    """
    if config is None:
        config = ConversionConfig()
    if diagnostics is None:
        diagnostics = Diagnostics()

    root = load_document(source)
    bounds = read_bounds(root, diagnostics)
    dimensions = resolve_dimensions(bounds, width, height, speed_limit, config.dimension_policy)
    projector = CoordinateProjector(bounds, dimensions)
    segments = build_segments(root, projector, config, diagnostics)
    return Network(dimensions, segments)


def convert(
    source: OsmSource,
    sink: OutputSink,
    width: Optional[int] = None,
    height: Optional[int] = None,
    speed_limit: Optional[int] = None,
    config: Optional[ConversionConfig] = None,
) -> ConversionResult:
    """Convert one OSM document and write the MobSink network to ``sink``.

    Never raises a ConversionError: any failure aborts the run before the
    output is touched (or, for write failures, leaves no partial file) and
    is reported through the returned result. A stream ``sink`` must be
    binary; a text stream is reported as a write failure.
    """
    diagnostics = Diagnostics()
    try:
        network = build_network(source, width, height, speed_limit, config, diagnostics)
        write_network(network.dimensions, network.segments, sink)
    except ConversionError as exc:
        return ConversionResult(False, diagnostics, error=exc)

    diagnostics.segments_written = len(network.segments)
    return ConversionResult(True, diagnostics, network=network)
