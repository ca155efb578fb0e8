import io

from conftest import make_osm, parse_output
from osm2mobsink import ConversionConfig, DimensionPolicy, MalformedInputError, convert
from osm2mobsink.converter import build_network
from osm2mobsink.errors import DegenerateBoundsError


def run(data, **kwargs):
    buf = io.BytesIO()
    result = convert(data, buf, **kwargs)
    return result, buf.getvalue()


def test_scenario_a_single_residential_road(square_osm):
    result, out = run(square_osm)
    assert result.success
    assert result.failure is None

    root = parse_output(out)
    assert root.attrib == {"width": "1000", "height": "1000", "speedlimit": "50"}
    (path,) = root.findall("path")
    assert (path.get("xa"), path.get("ya")) == ("0.000000", "1000.000000")
    assert (path.get("xb"), path.get("yb")) == ("1000.000000", "0.000000")
    assert path.get("flow") is None
    assert path.find("traffic") is None


def test_scenario_b_oneway_with_maxspeed():
    data = make_osm(
        nodes=[(1, 0, 0), (2, 10, 10)],
        ways=[([1, 2], {"highway": "residential", "oneway": "yes", "maxspeed": "60"})],
    )
    result, out = run(data)
    assert result.success
    (path,) = parse_output(out).findall("path")
    assert path.get("flow") == "ab"
    assert path.find("traffic").get("speedlimit") == "60"


def test_scenario_c_missing_node_reference():
    data = make_osm(nodes=[(1, 0, 0)], ways=[([1, 2], {"highway": "residential"})])
    result, out = run(data)
    assert result.success
    assert result.diagnostics.missing_references == 1
    assert parse_output(out).findall("path") == []


def test_scenario_d_wrong_root_writes_nothing(tmp_path):
    out = tmp_path / "network.xml"
    result = convert(b"<foo/>", str(out))
    assert not result.success
    assert isinstance(result.error, MalformedInputError)
    assert result.failure == "malformed_input"
    assert not out.exists()


def test_degenerate_bounds_fail_run():
    data = make_osm(nodes=[(1, 5, 5)], bounds=(5.0, 5.0, 0.0, 10.0))
    result, out = run(data)
    assert not result.success
    assert isinstance(result.error, DegenerateBoundsError)
    assert out == b""


def test_write_failure_reported(tmp_path, square_osm):
    result = convert(square_osm, str(tmp_path / "no" / "such" / "dir.xml"))
    assert not result.success
    assert result.failure == "write_failure"


def test_overrides_and_policy():
    data = make_osm(
        nodes=[(1, 0, 0), (2, 1, 2)],
        ways=[([1, 2], {"highway": "primary"})],
        bounds=(0.0, 1.0, 0.0, 2.0),
    )
    _, out = run(data, width=400, speed_limit=30)
    assert parse_output(out).attrib == {"width": "400", "height": "200", "speedlimit": "30"}

    config = ConversionConfig(dimension_policy=DimensionPolicy.FIXED)
    _, out = run(data, config=config)
    root = parse_output(out)
    assert (root.get("width"), root.get("height")) == ("1000", "1000")
    assert root.find("path").get("xb") == "1000.000000"


def test_coordinates_within_network():
    nodes = [(i, 38.70 + 0.001 * i, -9.15 + 0.0015 * i) for i in range(1, 12)]
    data = make_osm(
        nodes=nodes,
        ways=[(list(range(1, 12)), {"highway": "tertiary"})],
        bounds=(38.70, 38.71, -9.15, -9.135),
    )
    result, out = run(data, height=333)
    assert result.success
    root = parse_output(out)
    width, height = float(root.get("width")), float(root.get("height"))
    paths = root.findall("path")
    assert paths
    for path in paths:
        for x_key, y_key in (("xa", "ya"), ("xb", "yb")):
            assert 0.0 <= float(path.get(x_key)) <= width
            assert 0.0 <= float(path.get(y_key)) <= height


def test_output_is_byte_identical_across_runs():
    data = make_osm(
        nodes=[(1, 0, 0), (2, 5, 5), (3, 10, 10), (4, 10, 0)],
        ways=[
            ([1, 2, 3], {"highway": "primary", "name": "A", "maxspeed": "70"}),
            ([3, 4], {"waterway": "river"}),
            ([4, 2], {"highway": "service", "oneway": "yes"}),
        ],
    )
    _, first = run(data)
    _, second = run(data)
    assert first == second
    assert [p.get("name") for p in parse_output(first).findall("path")] == ["A", "A", ""]


def test_build_network_without_writing(square_osm):
    network = build_network(square_osm, width=10, height=10)
    assert len(network.segments) == 1
    assert network.dimensions.width == 10


def test_unknown_encoding_is_malformed_input():
    result, out = run(b'<?xml version="1.0" encoding="bogus"?><osm/>')
    assert not result.success
    assert result.failure == "malformed_input"
    assert out == b""


def test_path_with_nul_byte_is_malformed_input(tmp_path):
    result = convert("map\0.osm", str(tmp_path / "network.xml"))
    assert result.failure == "malformed_input"


def test_text_sink_reported_as_write_failure(square_osm):
    result = convert(square_osm, io.StringIO())
    assert not result.success
    assert result.failure == "write_failure"
