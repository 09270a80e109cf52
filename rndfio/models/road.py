"""Defines the in-memory model of a road network.

Provides the leaf entities (waypoints, checkpoints, exits) and the
composite blocks (lanes, segments, parking spots, perimeters, zones) that
an RNDF document is made of. Every composite answers ``is_valid()`` by
recomputing its invariants over the whole subtree, and exposes boolean
add/update/remove mutators that leave the collection untouched on failure.

Equality is deliberately not uniform: waypoints, checkpoints, lanes,
segments, parking spots and zones compare by id only, so that a key
carrying just the id can find or replace the stored entity. Exits and
perimeters compare by content.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, TextIO, TypeVar

from .unique_id import MAX_ID, CompoundId

__all__ = [
    "FEET_TO_METERS",
    "Marking",
    "GeodeticPoint",
    "Waypoint",
    "Checkpoint",
    "Exit",
    "Lane",
    "Segment",
    "ParkingSpot",
    "Perimeter",
    "Zone",
]

logger = logging.getLogger(__name__)

FEET_TO_METERS = 0.3048

_T = TypeVar("_T")


def _to_feet(meters: float) -> int:
    """Converts a positive width to the whole-foot count the reader accepts."""
    return min(max(1, round(meters / FEET_TO_METERS)), MAX_ID)


class Marking(Enum):
    """Lane boundary marking, keyed by its RNDF keyword."""

    DOUBLE_YELLOW = "double_yellow"
    SOLID_YELLOW = "solid_yellow"
    SOLID_WHITE = "solid_white"
    BROKEN_WHITE = "broken_white"
    UNDEFINED = "undefined"

    @classmethod
    def from_keyword(cls, keyword: str) -> "Marking | None":
        """
        Maps an RNDF boundary keyword to its marking.

        :param keyword: One of ``double_yellow``, ``solid_yellow``,
                        ``solid_white`` or ``broken_white``.
        :return: The marking, or None for any other text (including
                 ``undefined``, which never appears in a file).
        """
        if keyword == cls.UNDEFINED.value:
            return None
        try:
            return cls(keyword)
        except ValueError:
            return None


@dataclass(slots=True, frozen=True)
class GeodeticPoint:
    """
    Latitude/longitude pair in decimal degrees (WGS-84).

    :param latitude: Degrees north.
    :param longitude: Degrees east.
    """

    latitude: float = 0.0
    longitude: float = 0.0

    @classmethod
    def from_degrees(cls, latitude: float, longitude: float) -> "GeodeticPoint":
        return cls(float(latitude), float(longitude))


class _WritableMixin:
    """Helpers for emitting RNDF text."""

    @staticmethod
    def _format_with_indent(indent: int, value: str):
        return f"{' ' * indent * 4}{value}"

    def _write_line(self, stream: TextIO, indent: int, value: str) -> None:
        stream.write(self._format_with_indent(indent=indent, value=value) + "\n")


def _find(items: list[_T], predicate: Callable[[_T], bool]) -> _T | None:
    return next((item for item in items if predicate(item)), None)


def _update(items: list[_T], new_item: _T) -> bool:
    for index, item in enumerate(items):
        if item == new_item:
            items[index] = new_item
            return True
    return False


def _remove(items: list[_T], key: _T) -> bool:
    remaining = [item for item in items if item != key]
    removed = len(remaining) != len(items)
    items[:] = remaining
    return removed


def _add_unique(items: list[_T], new_item: _T, owner: str) -> bool:
    if new_item in items:
        logger.debug("%s: rejecting existing %s", owner, new_item)
        return False
    items.append(new_item)
    return True


def _consecutive(items: list, id_of: Callable[[object], int]) -> bool:
    """All items valid and numbered 1..N in order."""
    return all(item.is_valid() and id_of(item) == position for position, item in enumerate(items, start=1))


@dataclass(slots=True, eq=False)
class Waypoint:
    """
    A single surveyed point.

    Equality is by id only: two waypoints with the same id and different
    locations are equal.

    :param id: 1-based position within the owning lane, spot or perimeter.
    :param location: Geodetic location.
    :param is_entry: True when some exit enters the road network here.
    :param is_exit: True when an exit leaves from this point.
    """

    id: int = -1
    location: GeodeticPoint = field(default_factory=GeodeticPoint)
    is_entry: bool = False
    is_exit: bool = False

    def __post_init__(self):
        if self.id <= 0:
            self.id = -1

    def set_id(self, new_id: int) -> bool:
        if new_id <= 0:
            return False
        self.id = new_id
        return True

    def is_valid(self) -> bool:
        return self.id > 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, Waypoint):
            return NotImplemented
        return self.id == other.id

    def to_line(self, x: int, y: int) -> str:
        """
        Formats the waypoint as an RNDF waypoint line.

        :param x: Segment or zone id.
        :param y: Lane or spot id, 0 for a perimeter point.
        """
        return f"{x}.{y}.{self.id} {self.location.latitude} {self.location.longitude}"


@dataclass(slots=True, eq=False)
class Checkpoint:
    """
    Marks a waypoint as lettered checkpoint ``checkpoint_id``.

    Equality is by checkpoint id only.
    """

    checkpoint_id: int = -1
    waypoint_id: int = -1

    def __post_init__(self):
        if self.checkpoint_id <= 0 or self.waypoint_id <= 0:
            self.checkpoint_id = -1
            self.waypoint_id = -1

    def set_checkpoint_id(self, new_id: int) -> bool:
        if new_id <= 0:
            return False
        self.checkpoint_id = new_id
        return True

    def set_waypoint_id(self, new_id: int) -> bool:
        if new_id <= 0:
            return False
        self.waypoint_id = new_id
        return True

    def is_valid(self) -> bool:
        return self.checkpoint_id > 0 and self.waypoint_id > 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, Checkpoint):
            return NotImplemented
        return self.checkpoint_id == other.checkpoint_id

    def to_line(self, x: int, y: int) -> str:
        return f"checkpoint {x}.{y}.{self.waypoint_id} {self.checkpoint_id}"


@dataclass(slots=True, frozen=True)
class Exit:
    """
    Directed link from an exit waypoint to an entry waypoint.

    Local validity only checks both ids; whether the entry exists in the
    document is the resolver's concern.
    """

    exit_id: CompoundId = field(default_factory=CompoundId)
    entry_id: CompoundId = field(default_factory=CompoundId)

    def is_valid(self) -> bool:
        return self.exit_id.is_valid() and self.entry_id.is_valid()

    def to_line(self) -> str:
        return f"exit {self.exit_id} {self.entry_id}"


@dataclass(slots=True, eq=False)
class Lane(_WritableMixin):
    """
    An ordered run of waypoints inside a segment, plus its header options.

    :param id: Lane id, the ``y`` component of its waypoints' ids.
    :param waypoints: Waypoints numbered 1..N.
    :param width: Width in meters (non-negative).
    :param left_boundary: Marking on the left edge.
    :param right_boundary: Marking on the right edge.
    :param checkpoints: Checkpoints, unique by checkpoint id.
    :param stops: Waypoint ids carrying a stop sign, unique.
    :param exits: Exits leaving this lane, unique.
    """

    id: int = -1
    waypoints: list[Waypoint] = field(default_factory=list)
    width: float = 0.0
    left_boundary: Marking = Marking.UNDEFINED
    right_boundary: Marking = Marking.UNDEFINED
    checkpoints: list[Checkpoint] = field(default_factory=list)
    stops: list[int] = field(default_factory=list)
    exits: list[Exit] = field(default_factory=list)

    def __post_init__(self):
        if self.id <= 0:
            self.id = -1
        if self.width < 0:
            self.width = 0.0

    def set_id(self, new_id: int) -> bool:
        if new_id <= 0:
            return False
        self.id = new_id
        return True

    def set_width(self, width: float) -> bool:
        if width < 0:
            logger.debug("Lane %s: invalid width [%s]", self.id, width)
            return False
        self.width = width
        return True

    def waypoint(self, waypoint_id: int) -> Waypoint | None:
        return _find(self.waypoints, lambda wp: wp.id == waypoint_id)

    def add_waypoint(self, waypoint: Waypoint) -> bool:
        if not waypoint.is_valid():
            return False
        return _add_unique(self.waypoints, waypoint, f"Lane {self.id}")

    def update_waypoint(self, waypoint: Waypoint) -> bool:
        return _update(self.waypoints, waypoint)

    def remove_waypoint(self, waypoint_id: int) -> bool:
        return _remove(self.waypoints, Waypoint(waypoint_id))

    def checkpoint(self, checkpoint_id: int) -> Checkpoint | None:
        return _find(self.checkpoints, lambda cp: cp.checkpoint_id == checkpoint_id)

    def add_checkpoint(self, checkpoint: Checkpoint) -> bool:
        if not checkpoint.is_valid():
            return False
        return _add_unique(self.checkpoints, checkpoint, f"Lane {self.id}")

    def update_checkpoint(self, checkpoint: Checkpoint) -> bool:
        return _update(self.checkpoints, checkpoint)

    def remove_checkpoint(self, checkpoint_id: int) -> bool:
        return _remove(self.checkpoints, Checkpoint(checkpoint_id, 1))

    def add_stop(self, waypoint_id: int) -> bool:
        if waypoint_id <= 0:
            return False
        return _add_unique(self.stops, waypoint_id, f"Lane {self.id}")

    def remove_stop(self, waypoint_id: int) -> bool:
        return _remove(self.stops, waypoint_id)

    def add_exit(self, exit_: Exit) -> bool:
        if not exit_.is_valid():
            return False
        return _add_unique(self.exits, exit_, f"Lane {self.id}")

    def remove_exit(self, exit_: Exit) -> bool:
        return _remove(self.exits, exit_)

    def is_valid(self) -> bool:
        if self.id <= 0 or not self.waypoints:
            return False
        if not _consecutive(self.waypoints, lambda wp: wp.id):
            return False
        return (
            all(cp.is_valid() for cp in self.checkpoints)
            and all(stop > 0 for stop in self.stops)
            and all(exit_.is_valid() for exit_ in self.exits)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Lane):
            return NotImplemented
        return self.id == other.id

    def write(self, stream: TextIO, segment_id: int, indent: int = 0):
        self._write_line(stream, indent, f"lane {segment_id}.{self.id}")
        self._write_line(stream, indent, f"num_waypoints {len(self.waypoints)}")
        if self.width > 0:
            self._write_line(stream, indent, f"lane_width {_to_feet(self.width)}")
        if self.left_boundary is not Marking.UNDEFINED:
            self._write_line(stream, indent, f"left_boundary {self.left_boundary.value}")
        if self.right_boundary is not Marking.UNDEFINED:
            self._write_line(stream, indent, f"right_boundary {self.right_boundary.value}")
        for checkpoint in self.checkpoints:
            self._write_line(stream, indent, checkpoint.to_line(segment_id, self.id))
        for stop in self.stops:
            self._write_line(stream, indent, f"stop {segment_id}.{self.id}.{stop}")
        for exit_ in self.exits:
            self._write_line(stream, indent, exit_.to_line())
        for waypoint in self.waypoints:
            self._write_line(stream, indent, waypoint.to_line(segment_id, self.id))
        self._write_line(stream, indent, "end_lane")


@dataclass(slots=True, eq=False)
class Segment(_WritableMixin):
    """
    A named group of lanes.

    :param id: Segment id, 1..S across the document.
    :param lanes: Lanes numbered 1..N.
    :param name: Optional display name.
    """

    id: int = -1
    lanes: list[Lane] = field(default_factory=list)
    name: str = ""

    def __post_init__(self):
        if self.id <= 0:
            self.id = -1

    def set_id(self, new_id: int) -> bool:
        if new_id <= 0:
            return False
        self.id = new_id
        return True

    def lane(self, lane_id: int) -> Lane | None:
        return _find(self.lanes, lambda lane: lane.id == lane_id)

    def add_lane(self, lane: Lane) -> bool:
        if not lane.is_valid():
            return False
        return _add_unique(self.lanes, lane, f"Segment {self.id}")

    def update_lane(self, lane: Lane) -> bool:
        return _update(self.lanes, lane)

    def remove_lane(self, lane_id: int) -> bool:
        return _remove(self.lanes, Lane(lane_id))

    def is_valid(self) -> bool:
        return self.id > 0 and bool(self.lanes) and _consecutive(self.lanes, lambda lane: lane.id)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.id == other.id

    def write(self, stream: TextIO, indent: int = 0):
        self._write_line(stream, indent, f"segment {self.id}")
        self._write_line(stream, indent, f"num_lanes {len(self.lanes)}")
        if self.name:
            self._write_line(stream, indent, f"segment_name {self.name}")
        for lane in self.lanes:
            lane.write(stream, self.id, indent=indent + 1)
        self._write_line(stream, indent, "end_segment")


@dataclass(slots=True, eq=False)
class ParkingSpot(_WritableMixin):
    """
    A parking spot inside a zone, defined by exactly two waypoints.

    :param id: Spot id, the ``y`` component of its waypoints' ids.
    :param waypoints: Entry waypoint (1) and far waypoint (2).
    :param width: Width in meters.
    :param checkpoint: Optional checkpoint on one of the two waypoints.
    """

    id: int = -1
    waypoints: list[Waypoint] = field(default_factory=list)
    width: float = 0.0
    checkpoint: Checkpoint | None = None

    def __post_init__(self):
        if self.id <= 0:
            self.id = -1

    def set_id(self, new_id: int) -> bool:
        if new_id <= 0:
            return False
        self.id = new_id
        return True

    def set_width(self, width: float) -> bool:
        if width <= 0:
            return False
        self.width = width
        return True

    def waypoint(self, waypoint_id: int) -> Waypoint | None:
        return _find(self.waypoints, lambda wp: wp.id == waypoint_id)

    def add_waypoint(self, waypoint: Waypoint) -> bool:
        if not waypoint.is_valid():
            return False
        if len(self.waypoints) >= 2:
            logger.debug("ParkingSpot %s: already holds two waypoints", self.id)
            return False
        return _add_unique(self.waypoints, waypoint, f"ParkingSpot {self.id}")

    def update_waypoint(self, waypoint: Waypoint) -> bool:
        return _update(self.waypoints, waypoint)

    def remove_waypoint(self, waypoint_id: int) -> bool:
        return _remove(self.waypoints, Waypoint(waypoint_id))

    def is_valid(self) -> bool:
        if self.id <= 0 or len(self.waypoints) != 2:
            return False
        return _consecutive(self.waypoints, lambda wp: wp.id)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ParkingSpot):
            return NotImplemented
        return self.id == other.id

    def write(self, stream: TextIO, zone_id: int, indent: int = 0):
        self._write_line(stream, indent, f"spot {zone_id}.{self.id}")
        if self.width > 0:
            self._write_line(stream, indent, f"spot_width {_to_feet(self.width)}")
        if self.checkpoint is not None and self.checkpoint.is_valid():
            self._write_line(stream, indent, self.checkpoint.to_line(zone_id, self.id))
        for waypoint in self.waypoints:
            self._write_line(stream, indent, waypoint.to_line(zone_id, self.id))
        self._write_line(stream, indent, "end_spot")


@dataclass(slots=True, eq=False)
class Perimeter(_WritableMixin):
    """
    The boundary of a zone: perimeter points ``x.0.z`` plus its exits.

    Two perimeters are equal when they hold the same number of points and
    exits and every element of one is found in the other.
    """

    points: list[Waypoint] = field(default_factory=list)
    exits: list[Exit] = field(default_factory=list)

    def point(self, point_id: int) -> Waypoint | None:
        return _find(self.points, lambda wp: wp.id == point_id)

    def add_point(self, point: Waypoint) -> bool:
        if not point.is_valid():
            return False
        return _add_unique(self.points, point, "Perimeter")

    def update_point(self, point: Waypoint) -> bool:
        return _update(self.points, point)

    def remove_point(self, point_id: int) -> bool:
        return _remove(self.points, Waypoint(point_id))

    def add_exit(self, exit_: Exit) -> bool:
        if not exit_.is_valid():
            return False
        return _add_unique(self.exits, exit_, "Perimeter")

    def remove_exit(self, exit_: Exit) -> bool:
        return _remove(self.exits, exit_)

    def is_valid(self) -> bool:
        if not self.points:
            return False
        return _consecutive(self.points, lambda wp: wp.id) and all(exit_.is_valid() for exit_ in self.exits)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Perimeter):
            return NotImplemented
        if len(self.points) != len(other.points) or len(self.exits) != len(other.exits):
            return False
        return all(point in other.points for point in self.points) and all(
            exit_ in other.exits for exit_ in self.exits
        )

    def write(self, stream: TextIO, zone_id: int, indent: int = 0):
        self._write_line(stream, indent, f"perimeter {zone_id}.0")
        self._write_line(stream, indent, f"num_perimeterpoints {len(self.points)}")
        for exit_ in self.exits:
            self._write_line(stream, indent, exit_.to_line())
        for point in self.points:
            self._write_line(stream, indent, point.to_line(zone_id, 0))
        self._write_line(stream, indent, "end_perimeter")


@dataclass(slots=True, eq=False)
class Zone(_WritableMixin):
    """
    An open area (e.g. a parking lot) bounded by a perimeter.

    :param id: Zone id; zones continue the segment id space.
    :param name: Optional display name.
    :param perimeter: The zone boundary.
    :param spots: Parking spots numbered 1..N.
    """

    id: int = -1
    name: str = ""
    perimeter: Perimeter = field(default_factory=Perimeter)
    spots: list[ParkingSpot] = field(default_factory=list)

    def __post_init__(self):
        if self.id <= 0:
            self.id = -1

    def set_id(self, new_id: int) -> bool:
        if new_id <= 0:
            return False
        self.id = new_id
        return True

    def spot(self, spot_id: int) -> ParkingSpot | None:
        return _find(self.spots, lambda spot: spot.id == spot_id)

    def add_spot(self, spot: ParkingSpot) -> bool:
        if not spot.is_valid():
            return False
        return _add_unique(self.spots, spot, f"Zone {self.id}")

    def update_spot(self, spot: ParkingSpot) -> bool:
        return _update(self.spots, spot)

    def remove_spot(self, spot_id: int) -> bool:
        return _remove(self.spots, ParkingSpot(spot_id))

    def is_valid(self) -> bool:
        if self.id <= 0 or not self.perimeter.is_valid():
            return False
        return _consecutive(self.spots, lambda spot: spot.id)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Zone):
            return NotImplemented
        return self.id == other.id

    def write(self, stream: TextIO, indent: int = 0):
        self._write_line(stream, indent, f"zone {self.id}")
        self._write_line(stream, indent, f"num_spots {len(self.spots)}")
        if self.name:
            self._write_line(stream, indent, f"zone_name {self.name}")
        self.perimeter.write(stream, self.id, indent=indent + 1)
        for spot in self.spots:
            spot.write(stream, self.id, indent=indent + 1)
        self._write_line(stream, indent, "end_zone")
