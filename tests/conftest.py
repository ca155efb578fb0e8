import xml.etree.ElementTree as ET

import pytest


def make_osm(nodes=(), ways=(), bounds=(0.0, 10.0, 0.0, 10.0), bounds_last=False):
    """Build OSM XML bytes.

    nodes: iterable of (id, lat, lon)
    ways:  iterable of (node_refs, tags) or (node_refs, tags, way_id)
    """
    root = ET.Element("osm", version="0.6")

    def add_bounds():
        minlat, maxlat, minlon, maxlon = bounds
        ET.SubElement(root, "bounds", {
            "minlat": str(minlat), "maxlat": str(maxlat),
            "minlon": str(minlon), "maxlon": str(maxlon),
        })

    if bounds is not None and not bounds_last:
        add_bounds()

    for nid, lat, lon in nodes:
        ET.SubElement(root, "node", {"id": str(nid), "lat": str(lat), "lon": str(lon)})

    for i, way in enumerate(ways):
        refs, tags = way[0], way[1]
        way_id = way[2] if len(way) > 2 else 100 + i
        way_el = ET.SubElement(root, "way", {"id": str(way_id)})
        for ref in refs:
            ET.SubElement(way_el, "nd", {"ref": str(ref)})
        for k, v in tags.items():
            ET.SubElement(way_el, "tag", {"k": k, "v": v})

    if bounds is not None and bounds_last:
        add_bounds()

    return ET.tostring(root, encoding="utf-8")


def parse_output(data):
    return ET.fromstring(data)


@pytest.fixture
def square_osm():
    """Scenario A input: one residential road corner to corner."""
    return make_osm(
        nodes=[(1, 0, 0), (2, 10, 10)],
        ways=[([1, 2], {"highway": "residential"})],
    )
