"""Read an OSM XML document and turn its roads into MobSink path segments."""

import math
import re
import xml.etree.ElementTree as ET
from typing import BinaryIO, Dict, List, Optional, Union

from .config import ConversionConfig, GapPolicy
from .errors import Diagnostics, MalformedInputError
from .geometry import Flow, PathSegment, Point
from .projection import BoundingBox, CoordinateProjector

OsmSource = Union[str, bytes, BinaryIO]

# Leading numeric prefix, as C atof/atoi would read it
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


# ---------------------------------------------------------------------------
# Permissive attribute parsing
# ---------------------------------------------------------------------------

def parse_float(text: Optional[str], what: str, diagnostics: Diagnostics) -> float:
    """Parse ``text`` as a float; fall back to its numeric prefix, then 0.

    Every lossy parse is recorded as a warning, never raised.
    """
    if text is not None:
        try:
            value = float(text)
            if math.isfinite(value):
                return value
        except ValueError:
            pass
        match = _FLOAT_PREFIX.match(text)
    else:
        match = None

    value = float(match.group(1)) if match else 0.0
    if not math.isfinite(value):
        value = 0.0
    diagnostics.warn(f"{what}: cannot parse {text!r}, using {value:g}")
    return value


def parse_int(text: Optional[str], what: str, diagnostics: Diagnostics) -> int:
    if text is not None:
        try:
            return int(text)
        except ValueError:
            pass
        match = _INT_PREFIX.match(text)
    else:
        match = None

    value = int(match.group(1)) if match else 0
    diagnostics.warn(f"{what}: cannot parse {text!r}, using {value}")
    return value


# ---------------------------------------------------------------------------
# Document level
# ---------------------------------------------------------------------------

def load_document(source: OsmSource) -> ET.Element:
    """Parse OSM XML from a path, a binary stream or raw bytes.

    Raises:
        MalformedInputError: If the document cannot be opened or parsed,
            or its root element is not <osm>
    """
    try:
        if isinstance(source, (bytes, bytearray)):
            root = ET.fromstring(bytes(source))
        else:
            root = ET.parse(source).getroot()
    except (ET.ParseError, LookupError) as exc:
        # LookupError: unknown encoding in the XML declaration
        raise MalformedInputError(f"Input is not well-formed XML: {exc}") from exc
    except (OSError, ValueError) as exc:
        raise MalformedInputError(f"Cannot open input: {exc}") from exc

    if root.tag != "osm":
        raise MalformedInputError(f"Root element is <{root.tag}>, expected <osm>")
    return root


def read_bounds(root: ET.Element, diagnostics: Optional[Diagnostics] = None) -> BoundingBox:
    """Read the first <bounds> child, wherever it sits among the children."""
    if diagnostics is None:
        diagnostics = Diagnostics()

    element = root.find("bounds")
    if element is None:
        raise MalformedInputError("Document has no <bounds> element")

    values = {
        key: parse_float(element.get(key), f"bounds {key}", diagnostics)
        for key in ("minlat", "maxlat", "minlon", "maxlon")
    }
    return BoundingBox(
        min_lat=values["minlat"],
        max_lat=values["maxlat"],
        min_lon=values["minlon"],
        max_lon=values["maxlon"],
    )


# ---------------------------------------------------------------------------
# Topology
# ---------------------------------------------------------------------------

def _read_node(
    element: ET.Element,
    projector: CoordinateProjector,
    nodes: Dict[int, Point],
    diagnostics: Diagnostics,
) -> None:
    diagnostics.nodes_read += 1
    node_id = parse_int(element.get("id"), "node id", diagnostics)
    lat = parse_float(element.get("lat"), f"node {node_id} lat", diagnostics)
    lon = parse_float(element.get("lon"), f"node {node_id} lon", diagnostics)

    if not projector.bounds.contains(lat, lon):
        diagnostics.nodes_out_of_bounds += 1
        return

    nodes[node_id] = projector.project(lat, lon)


def _resolve_chains(
    refs: List[Optional[str]],
    nodes: Dict[int, Point],
    gap_policy: GapPolicy,
    diagnostics: Diagnostics,
) -> List[List[Point]]:
    chains: List[List[Point]] = [[]]
    for ref in refs:
        point = nodes.get(parse_int(ref, "nd ref", diagnostics))
        if point is None:
            diagnostics.missing_references += 1
            if gap_policy is GapPolicy.SPLIT and chains[-1]:
                chains.append([])
            continue
        chains[-1].append(point)
    return chains


def _read_way(
    element: ET.Element,
    nodes: Dict[int, Point],
    config: ConversionConfig,
    diagnostics: Diagnostics,
) -> List[PathSegment]:
    diagnostics.ways_read += 1

    refs = []
    highway = None
    flow = Flow.BIDIRECTIONAL
    speed_limit = 0.0
    name = ""

    # Tags apply to the whole way, wherever they appear among the <nd>s
    for child in element:
        if child.tag == "nd":
            refs.append(child.get("ref"))
        elif child.tag == "tag":
            key = child.get("k")
            value = child.get("v", "")
            if key == "highway":
                highway = value
            elif key == "oneway" and value == "yes":
                flow = Flow.A_TO_B
            elif key == "maxspeed":
                way_id = element.get("id", "?")
                speed_limit = parse_float(value, f"way {way_id} maxspeed", diagnostics)
            elif key == "name":
                name = value

    if not config.is_road(highway):
        diagnostics.ways_discarded += 1
        return []

    segments = []
    for chain in _resolve_chains(refs, nodes, config.gap_policy, diagnostics):
        for a, b in zip(chain, chain[1:]):
            segment = PathSegment(a, b, name=name, flow=flow)
            if speed_limit > 0:
                segment.set_speed_limit(speed_limit)
            segments.append(segment)
    return segments


def build_segments(
    root: ET.Element,
    projector: CoordinateProjector,
    config: Optional[ConversionConfig] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> List[PathSegment]:
    """Walk the <osm> children once and return the road segments in order.

    A way only sees the nodes that precede it in the document. References
    to unknown or out-of-bounds nodes are skipped and counted in
    ``diagnostics``.
    """
    if config is None:
        config = ConversionConfig()
    if diagnostics is None:
        diagnostics = Diagnostics()

    nodes: Dict[int, Point] = {}
    segments: List[PathSegment] = []

    for child in root:
        if child.tag == "node":
            _read_node(child, projector, nodes, diagnostics)
        elif child.tag == "way":
            segments.extend(_read_way(child, nodes, config, diagnostics))

    return segments
