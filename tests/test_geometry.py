from osm2mobsink.geometry import STATIC_CONTROL_SLOT, Flow, PathSegment, Point, TrafficControl


def test_point_equality_by_value():
    assert Point(1.0, 2.0) == Point(1.0, 2.0)
    assert Point(1.0, 2.0) != Point(2.0, 1.0)
    assert len({Point(0.5, 0.5), Point(0.5, 0.5)}) == 1


def test_segment_defaults():
    seg = PathSegment(Point(0, 0), Point(1, 1))
    assert seg.name == ""
    assert seg.flow is Flow.BIDIRECTIONAL
    assert seg.controls == {}
    assert seg.speed_limit is None


def test_speed_limit_lives_in_static_slot():
    seg = PathSegment(Point(0, 0), Point(1, 1))
    seg.set_speed_limit(60.0)
    assert seg.controls == {STATIC_CONTROL_SLOT: TrafficControl(60.0)}
    assert seg.speed_limit == 60.0


def test_segments_do_not_share_controls():
    first = PathSegment(Point(0, 0), Point(1, 1))
    second = PathSegment(Point(1, 1), Point(2, 2))
    first.set_speed_limit(30.0)
    assert second.controls == {}
