import io

import pytest

from rndfio import RndfReader
from rndfio.models.road import FEET_TO_METERS


def _round_trip(network):
    stream = io.StringIO()
    network.write(stream)
    return stream.getvalue(), RndfReader().read_lines(stream.getvalue().splitlines())


def test_sample_round_trip(sample_network):
    text, reread = _round_trip(sample_network)
    assert text.startswith("RNDF_name sample1\nnum_segments 2\nnum_zones 1\n")
    assert text.endswith("end_file\n")

    assert reread.is_valid()
    assert (reread.name, reread.version, reread.creation_date) == ("sample1", "1.0", "2017-03-01")
    assert reread.segments == sample_network.segments
    assert reread.zones == sample_network.zones

    for original, copy in zip(sample_network.segments, reread.segments):
        assert copy.name == original.name
        for lane, lane_copy in zip(original.lanes, copy.lanes):
            assert lane_copy.width == pytest.approx(lane.width)
            assert lane_copy.left_boundary is lane.left_boundary
            assert lane_copy.right_boundary is lane.right_boundary
            assert lane_copy.stops == lane.stops
            assert lane_copy.exits == lane.exits
            assert [cp.waypoint_id for cp in lane_copy.checkpoints] == [cp.waypoint_id for cp in lane.checkpoints]
            assert [wp.location for wp in lane_copy.waypoints] == [wp.location for wp in lane.waypoints]

    zone, zone_copy = sample_network.zones[0], reread.zones[0]
    assert zone_copy.name == zone.name
    assert zone_copy.perimeter == zone.perimeter
    assert [p.is_exit for p in zone_copy.perimeter.points] == [p.is_exit for p in zone.perimeter.points]
    assert zone_copy.spots[0].width == pytest.approx(zone.spots[0].width)
    assert zone_copy.spots[0].checkpoint.waypoint_id == zone.spots[0].checkpoint.waypoint_id


def test_exit_cache_survives_round_trip(sample_network):
    _, reread = _round_trip(sample_network)
    assert [(e.exit_id, e.entry_id) for e in reread.exit_cache] == [
        (e.exit_id, e.entry_id) for e in sample_network.exit_cache
    ]


def test_optional_lines_are_omitted(minimal_lines):
    network = RndfReader().read_lines(minimal_lines)
    text, _ = _round_trip(network)
    assert "format_version" not in text
    assert "creation_date" not in text
    assert "lane_width" not in text
    assert "segment_name" not in text
    assert "boundary" not in text


def test_nested_blocks_are_indented(sample_network):
    text, _ = _round_trip(sample_network)
    assert "\n    lane 1.1\n" in text
    assert "\n    perimeter 3.0\n" in text
    assert "\nsegment 2\n" in text


@pytest.mark.parametrize("meters, feet", [(0.1, 1), (0.3048, 1), (3.7, 12), (1e9, 32768)])
def test_widths_stay_readable(sample_network, meters, feet):
    assert sample_network.zones[0].spots[0].set_width(meters)
    assert sample_network.segment(1).lane(1).set_width(meters)
    text, reread = _round_trip(sample_network)
    assert f"spot_width {feet}\n" in text
    assert f"lane_width {feet}\n" in text
    assert reread.zones[0].spots[0].width == pytest.approx(feet * FEET_TO_METERS)
    assert reread.segment(1).lane(1).width == pytest.approx(feet * FEET_TO_METERS)
