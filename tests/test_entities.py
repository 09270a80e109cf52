import pytest

from rndfio.models.network import RoadNetwork
from rndfio.models.road import (
    Checkpoint,
    Exit,
    GeodeticPoint,
    Lane,
    Marking,
    ParkingSpot,
    Perimeter,
    Segment,
    Waypoint,
    Zone,
)
from rndfio.models.unique_id import CompoundId


def _waypoints(count: int) -> list[Waypoint]:
    return [Waypoint(i, GeodeticPoint.from_degrees(10.0 + i, 20.0)) for i in range(1, count + 1)]


def _lane(lane_id: int, count: int = 2) -> Lane:
    return Lane(id=lane_id, waypoints=_waypoints(count))


def _spot(spot_id: int) -> ParkingSpot:
    return ParkingSpot(id=spot_id, waypoints=_waypoints(2))


def _zone(zone_id: int, spots: int = 1) -> Zone:
    return Zone(
        id=zone_id,
        perimeter=Perimeter(points=_waypoints(3)),
        spots=[_spot(i) for i in range(1, spots + 1)],
    )


class TestMarking:
    def test_from_keyword(self):
        assert Marking.from_keyword("broken_white") is Marking.BROKEN_WHITE
        assert Marking.from_keyword("undefined") is None
        assert Marking.from_keyword("purple") is None


class TestWaypoint:
    def test_equality_by_id_only(self):
        a = Waypoint(1, GeodeticPoint(1.0, 2.0))
        b = Waypoint(1, GeodeticPoint(3.0, 4.0))
        c = Waypoint(2, GeodeticPoint(1.0, 2.0))
        assert a == b
        assert a != c

    def test_invalid_id_becomes_sentinel(self):
        waypoint = Waypoint(0)
        assert waypoint.id == -1
        assert not waypoint.is_valid()

    def test_set_id(self):
        waypoint = Waypoint()
        assert not waypoint.set_id(0)
        assert waypoint.set_id(3)
        assert waypoint.id == 3


class TestCheckpointAndExit:
    def test_checkpoint_equality_by_checkpoint_id(self):
        assert Checkpoint(1, 5) == Checkpoint(1, 7)
        assert Checkpoint(1, 5) != Checkpoint(2, 5)

    def test_checkpoint_validity(self):
        assert Checkpoint(1, 1).is_valid()
        assert not Checkpoint(0, 1).is_valid()
        checkpoint = Checkpoint(1, 1)
        assert not checkpoint.set_waypoint_id(-2)
        assert checkpoint.set_checkpoint_id(9)
        assert checkpoint.checkpoint_id == 9

    def test_exit_equality_uses_both_ids(self):
        exit_ = Exit(CompoundId(1, 1, 2), CompoundId(2, 1, 1))
        assert exit_ == Exit(CompoundId(1, 1, 2), CompoundId(2, 1, 1))
        assert exit_ != Exit(CompoundId(1, 1, 2), CompoundId(2, 1, 2))

    def test_exit_validity_is_local(self):
        assert Exit(CompoundId(1, 1, 2), CompoundId(999, 1, 1)).is_valid()
        assert not Exit(CompoundId(1, 1, 2), CompoundId()).is_valid()


class TestLane:
    def test_valid(self):
        assert _lane(1, 3).is_valid()

    def test_requires_waypoints(self):
        assert not Lane(id=1).is_valid()

    def test_contiguity(self):
        lane = Lane(id=1, waypoints=[Waypoint(1), Waypoint(3)])
        assert not lane.is_valid()

    def test_waypoint_mutators(self):
        lane = _lane(1, 2)
        assert not lane.add_waypoint(Waypoint(2))
        assert not lane.add_waypoint(Waypoint())
        assert lane.add_waypoint(Waypoint(3))
        assert lane.is_valid()

        moved = Waypoint(2, GeodeticPoint(50.0, 60.0))
        assert lane.update_waypoint(moved)
        assert lane.waypoint(2).location == GeodeticPoint(50.0, 60.0)
        assert not lane.update_waypoint(Waypoint(9))

        assert lane.remove_waypoint(2)
        assert not lane.remove_waypoint(2)
        assert lane.waypoint(2) is None
        assert not lane.is_valid()

    def test_header_mutators(self):
        lane = _lane(1)
        assert lane.add_checkpoint(Checkpoint(1, 2))
        assert not lane.add_checkpoint(Checkpoint(1, 1))
        assert lane.update_checkpoint(Checkpoint(1, 1))
        assert lane.checkpoint(1).waypoint_id == 1
        assert lane.remove_checkpoint(1)

        assert lane.add_stop(2)
        assert not lane.add_stop(2)
        assert not lane.add_stop(0)
        assert lane.remove_stop(2)

        exit_ = Exit(CompoundId(1, 1, 2), CompoundId(2, 1, 1))
        assert lane.add_exit(exit_)
        assert not lane.add_exit(exit_)
        assert not lane.add_exit(Exit())
        assert lane.remove_exit(exit_)
        assert lane.exits == []

    def test_width(self):
        lane = _lane(1)
        assert lane.set_width(0.0)
        assert lane.set_width(3.5)
        assert not lane.set_width(-1.0)
        assert lane.width == 3.5

    def test_equality_by_id_only(self):
        assert _lane(1, 2) == _lane(1, 5)
        assert _lane(1) != _lane(2)


class TestSegment:
    def test_lane_mutators(self):
        segment = Segment(id=1, lanes=[_lane(1)])
        assert not segment.add_lane(Lane(id=2))
        assert not segment.add_lane(_lane(1))
        assert segment.add_lane(_lane(2))
        assert segment.lane(2) is not None
        assert segment.update_lane(_lane(2, 4))
        assert len(segment.lane(2).waypoints) == 4
        assert segment.remove_lane(1)
        assert not segment.is_valid()

    def test_validity(self):
        assert Segment(id=1, lanes=[_lane(1), _lane(2)]).is_valid()
        assert not Segment(id=1).is_valid()
        assert not Segment(id=1, lanes=[_lane(2)]).is_valid()
        assert not Segment(id=0, lanes=[_lane(1)]).is_valid()


class TestParkingSpot:
    def test_at_most_two_waypoints(self):
        spot = ParkingSpot(id=1)
        assert spot.add_waypoint(Waypoint(1))
        assert not spot.is_valid()
        assert spot.add_waypoint(Waypoint(2))
        assert spot.is_valid()
        assert not spot.add_waypoint(Waypoint(3))

    def test_width_must_be_positive(self):
        spot = _spot(1)
        assert not spot.set_width(0.0)
        assert spot.set_width(2.5)

    def test_contiguity(self):
        assert not ParkingSpot(id=1, waypoints=[Waypoint(2), Waypoint(1)]).is_valid()


class TestPerimeter:
    def test_structural_equality(self):
        exit_ = Exit(CompoundId(3, 0, 1), CompoundId(1, 1, 1))
        a = Perimeter(points=_waypoints(2), exits=[exit_])
        b = Perimeter(points=list(reversed(_waypoints(2))), exits=[exit_])
        assert a == b
        assert a != Perimeter(points=_waypoints(2))
        assert a != Perimeter(points=_waypoints(3), exits=[exit_])

    def test_mutators(self):
        perimeter = Perimeter()
        assert not perimeter.is_valid()
        assert perimeter.add_point(Waypoint(1))
        assert not perimeter.add_point(Waypoint(1))
        assert perimeter.is_valid()
        assert perimeter.update_point(Waypoint(1, GeodeticPoint(5.0, 5.0)))
        assert perimeter.point(1).location.latitude == 5.0
        assert perimeter.remove_point(1)
        assert perimeter.point(1) is None


class TestZone:
    def test_validity(self):
        assert _zone(3, spots=2).is_valid()
        assert _zone(3, spots=0).is_valid()
        assert not Zone(id=3).is_valid()

    def test_spot_mutators(self):
        zone = _zone(3, spots=1)
        assert zone.add_spot(_spot(2))
        assert not zone.add_spot(_spot(2))
        assert not zone.add_spot(ParkingSpot(id=3))
        assert zone.remove_spot(1)
        assert not zone.is_valid()


class TestRoadNetwork:
    def _network(self) -> RoadNetwork:
        return RoadNetwork(
            name="hand_built",
            segments=[Segment(id=1, lanes=[_lane(1)]), Segment(id=2, lanes=[_lane(1)])],
            zones=[_zone(3)],
        )

    def test_valid(self):
        network = self._network()
        assert network.is_valid()
        assert network.is_valid()

    def test_requires_name_and_segments(self):
        network = self._network()
        network.name = ""
        assert not network.is_valid()
        assert not RoadNetwork(name="empty").is_valid()

    def test_zones_continue_segment_ids(self):
        network = self._network()
        network.zones = [_zone(4)]
        assert not network.is_valid()

    def test_segment_contiguity(self):
        network = self._network()
        assert network.remove_segment(1)
        assert not network.is_valid()

    def test_mutators(self):
        network = self._network()
        assert not network.add_segment(Segment(id=1, lanes=[_lane(1)]))
        assert network.segment(2) is not None
        assert network.update_segment(Segment(id=2, lanes=[_lane(1), _lane(2)]))
        assert len(network.segment(2).lanes) == 2
        assert not network.add_zone(_zone(3))
        assert network.add_zone(_zone(4))
        assert network.zone(4) is not None
        assert network.remove_zone(4)
        assert network.is_valid()
        assert network.update_zone(_zone(3, spots=2))
        assert len(network.zone(3).spots) == 2

    @pytest.mark.parametrize("remove", ["segment", "zone"])
    def test_remove_unknown(self, remove):
        network = self._network()
        assert not getattr(network, f"remove_{remove}")(42)
