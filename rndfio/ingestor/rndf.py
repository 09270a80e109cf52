"""
Defines RNDF-specific block readers.

Each reader consumes exactly one block from the shared cursor and
returns the populated model. Readers are created per block with the
parent ids and the expected 1-based position of the block; a block whose
declared id differs from that position is rejected at its opening line.
"""

import logging
from dataclasses import dataclass, field

from rndfio.models.network import RoadNetwork
from rndfio.models.road import (
    FEET_TO_METERS,
    Checkpoint,
    Exit,
    Lane,
    Marking,
    ParkingSpot,
    Perimeter,
    Segment,
    Waypoint,
    Zone,
)
from rndfio.models.unique_id import CompoundId, parse_int

from .lexical import (
    parse_boundary,
    parse_checkpoint_line,
    parse_exit_line,
    parse_labeled_non_negative,
    parse_labeled_positive,
    parse_labeled_string,
    parse_stop_line,
    parse_waypoint_line,
    split,
)
from .parser import BlockReader, ReadContext

__all__ = [
    "WaypointReader",
    "LaneReader",
    "ParkingSpotReader",
    "PerimeterReader",
    "SegmentReader",
    "ZoneReader",
    "RndfDocumentParser",
]

logger = logging.getLogger(__name__)

SPOT_WAYPOINTS = 2


@dataclass(slots=True)
class _LaneHeader:
    lane_id: int
    width: float | None = None
    left_boundary: Marking | None = None
    right_boundary: Marking | None = None
    checkpoints: list[Checkpoint] = field(default_factory=list)
    stops: list[int] = field(default_factory=list)
    exits: list[Exit] = field(default_factory=list)


@dataclass(slots=True)
class _SpotHeader:
    spot_id: int
    width: float | None = None
    checkpoint: Checkpoint | None = None


@dataclass(slots=True)
class _PerimeterHeader:
    exits: list[Exit] = field(default_factory=list)


@dataclass(slots=True)
class _NameHeader:
    name: str | None = None


@dataclass(slots=True)
class _DocumentHeader:
    version: str | None = None
    creation_date: str | None = None


class WaypointReader(BlockReader[Waypoint]):
    """Reads one ``x.y.z lat lon`` line at a given position."""

    def __init__(self, context: ReadContext, x: int, y: int, expected_id: int):
        super().__init__(context)
        self.x = x
        self.y = y
        self.expected_id = expected_id

    def read(self) -> Waypoint:
        line = self.cursor.require_line("waypoint")
        waypoint = parse_waypoint_line(line, self.x, self.y)
        if waypoint is None:
            self.lexical_error("waypoint element")
        if waypoint.id != self.expected_id:
            self.sequence_error("waypoint", waypoint.id, self.expected_id)
        return waypoint


def _read_waypoints(context: ReadContext, x: int, y: int, count: int) -> list[Waypoint]:
    return [WaypointReader(context, x, y, position).read() for position in range(1, count + 1)]


class _ChildBlockReader(BlockReader):
    """Reader for blocks opened by ``<keyword> <parent>.<id>``."""

    keyword: str = ""

    def __init__(self, context: ReadContext, parent_id: int, expected_id: int):
        super().__init__(context)
        self.parent_id = parent_id
        self.expected_id = expected_id

    def read_opening(self) -> int:
        line = self.cursor.require_line(self.keyword)
        tokens = split(line)
        if len(tokens) != 2 or tokens[0] != self.keyword:
            self.lexical_error(f"{self.keyword} element")
        id_tokens = split(tokens[1], ".")
        if len(id_tokens) != 2 or id_tokens[0] != str(self.parent_id):
            self.lexical_error(f"{self.keyword} element")
        block_id = parse_int(id_tokens[1], 1)
        if block_id is None:
            self.lexical_error(f"{self.keyword} Id")
        if block_id != self.expected_id:
            self.sequence_error(self.keyword, block_id, self.expected_id)
        return block_id


class LaneReader(_ChildBlockReader):
    """
    Reads a ``lane`` block.

    Header options: ``lane_width``, ``left_boundary`` and
    ``right_boundary`` at most once; ``checkpoint``, ``stop`` and ``exit``
    any number of times.
    """

    keyword = "lane"
    options = frozenset({"lane_width", "left_boundary", "right_boundary", "checkpoint", "stop", "exit"})

    def read(self) -> Lane:
        lane_id = self.read_opening()
        num_waypoints = self.expect_positive("num_waypoints")

        header = _LaneHeader(lane_id)
        self.scan_header(header)

        waypoints = _read_waypoints(self.context, self.parent_id, lane_id, num_waypoints)
        self.expect_terminator("end_lane")

        return Lane(
            id=lane_id,
            waypoints=waypoints,
            width=header.width or 0.0,
            left_boundary=header.left_boundary or Marking.UNDEFINED,
            right_boundary=header.right_boundary or Marking.UNDEFINED,
            checkpoints=header.checkpoints,
            stops=header.stops,
            exits=header.exits,
        )

    def read_option(self, keyword: str, line: str, header: _LaneHeader) -> None:
        match keyword:
            case "lane_width":
                width = parse_labeled_non_negative(line, keyword)
                if width is None:
                    self.lexical_error("lane width element")
                self.set_once(header, "width", width * FEET_TO_METERS)
            case "left_boundary" | "right_boundary":
                boundary = parse_boundary(line)
                if boundary is None:
                    self.lexical_error("lane boundary element")
                self.set_once(header, keyword, boundary[1])
            case "checkpoint":
                checkpoint = parse_checkpoint_line(line, self.parent_id, header.lane_id)
                if checkpoint is None:
                    self.lexical_error("lane checkpoint element")
                self.add_repeatable(header.checkpoints, checkpoint)
            case "stop":
                stop = parse_stop_line(line, self.parent_id, header.lane_id)
                if stop is None:
                    self.lexical_error("lane stop element")
                self.add_repeatable(header.stops, stop)
            case "exit":
                exit_ = parse_exit_line(line, self.parent_id, header.lane_id)
                if exit_ is None:
                    self.lexical_error("lane exit element")
                if self.add_repeatable(header.exits, exit_):
                    self.cache_exit(exit_)


class ParkingSpotReader(_ChildBlockReader):
    """
    Reads a ``spot`` block: optional ``spot_width`` and ``checkpoint``,
    then exactly two waypoints.
    """

    keyword = "spot"
    options = frozenset({"spot_width", "checkpoint"})
    max_header_lines = 2

    def read(self) -> ParkingSpot:
        spot_id = self.read_opening()

        header = _SpotHeader(spot_id)
        self.scan_header(header)

        waypoints = _read_waypoints(self.context, self.parent_id, spot_id, SPOT_WAYPOINTS)
        self.expect_terminator("end_spot")

        return ParkingSpot(id=spot_id, waypoints=waypoints, width=header.width or 0.0, checkpoint=header.checkpoint)

    def read_option(self, keyword: str, line: str, header: _SpotHeader) -> None:
        match keyword:
            case "spot_width":
                width = parse_labeled_positive(line, keyword)
                if width is None:
                    self.lexical_error("spot width element")
                self.set_once(header, "width", width * FEET_TO_METERS)
            case "checkpoint":
                checkpoint = parse_checkpoint_line(line, self.parent_id, header.spot_id)
                if checkpoint is None:
                    self.lexical_error("spot checkpoint element")
                self.set_once(header, "checkpoint", checkpoint)


class PerimeterReader(BlockReader[Perimeter]):
    """
    Reads a ``perimeter Z.0`` block.

    Perimeter points whose id is the exit id of a header exit are flagged
    with ``is_exit``.
    """

    options = frozenset({"exit"})

    def __init__(self, context: ReadContext, zone_id: int):
        super().__init__(context)
        self.zone_id = zone_id

    def read(self) -> Perimeter:
        line = self.cursor.require_line("perimeter")
        if line != f"perimeter {self.zone_id}.0":
            self.lexical_error("perimeter element")
        num_points = self.expect_positive("num_perimeterpoints")

        header = _PerimeterHeader()
        self.scan_header(header)

        points = _read_waypoints(self.context, self.zone_id, 0, num_points)
        exit_ids = {exit_.exit_id for exit_ in header.exits}
        for point in points:
            if CompoundId(self.zone_id, 0, point.id) in exit_ids:
                point.is_exit = True
        self.expect_terminator("end_perimeter")

        return Perimeter(points=points, exits=header.exits)

    def read_option(self, keyword: str, line: str, header: _PerimeterHeader) -> None:
        exit_ = parse_exit_line(line, self.zone_id, 0)
        if exit_ is None:
            self.lexical_error("perimeter exit element")
        if self.add_repeatable(header.exits, exit_):
            self.cache_exit(exit_)


class _TopBlockReader(BlockReader):
    """Reader for blocks opened by ``<keyword> <id>``."""

    keyword: str = ""
    name_option: str = ""

    def __init__(self, context: ReadContext, expected_id: int):
        super().__init__(context)
        self.expected_id = expected_id
        self.options = frozenset({self.name_option})

    def read_opening(self) -> int:
        line = self.cursor.require_line(self.keyword)
        tokens = split(line)
        if len(tokens) != 2 or tokens[0] != self.keyword:
            self.lexical_error(f"{self.keyword} element")
        block_id = parse_int(tokens[1], 1)
        if block_id is None:
            self.lexical_error(f"{self.keyword} Id")
        if block_id != self.expected_id:
            self.sequence_error(self.keyword, block_id, self.expected_id)
        return block_id

    def read_name(self) -> str:
        header = _NameHeader()
        self.scan_header(header)
        return header.name or ""

    def read_option(self, keyword: str, line: str, header: _NameHeader) -> None:
        name = parse_labeled_string(line, keyword)
        if name is None:
            self.lexical_error(f"{keyword} element")
        self.set_once(header, "name", name)


class SegmentReader(_TopBlockReader):
    """Reads a ``segment`` block with its lanes."""

    keyword = "segment"
    name_option = "segment_name"

    def read(self) -> Segment:
        segment_id = self.read_opening()
        num_lanes = self.expect_positive("num_lanes")
        name = self.read_name()
        lanes = [LaneReader(self.context, segment_id, position).read() for position in range(1, num_lanes + 1)]
        self.expect_terminator("end_segment")
        logger.debug("Read segment %d with %d lanes", segment_id, len(lanes))
        return Segment(id=segment_id, lanes=lanes, name=name)


class ZoneReader(_TopBlockReader):
    """Reads a ``zone`` block: its perimeter, then its parking spots."""

    keyword = "zone"
    name_option = "zone_name"

    def read(self) -> Zone:
        zone_id = self.read_opening()
        num_spots = self.expect_non_negative("num_spots")
        name = self.read_name()
        perimeter = PerimeterReader(self.context, zone_id).read()
        spots = [ParkingSpotReader(self.context, zone_id, position).read() for position in range(1, num_spots + 1)]
        self.expect_terminator("end_zone")
        logger.debug("Read zone %d with %d spots", zone_id, len(spots))
        return Zone(id=zone_id, name=name, perimeter=perimeter, spots=spots)


class RndfDocumentParser(BlockReader[RoadNetwork]):
    """
    Reads a whole RNDF document.

    Segments are numbered 1..S and zones continue at S+1. The optional
    ``format_version`` and ``creation_date`` lines may come in either
    order, each at most once.
    """

    options = frozenset({"format_version", "creation_date"})
    max_header_lines = 2

    def read(self) -> RoadNetwork:
        name = self.expect_string("RNDF_name")
        num_segments = self.expect_positive("num_segments")
        num_zones = self.expect_non_negative("num_zones")

        header = _DocumentHeader()
        self.scan_header(header)

        segments = [SegmentReader(self.context, position).read() for position in range(1, num_segments + 1)]
        zones = [
            ZoneReader(self.context, num_segments + position).read() for position in range(1, num_zones + 1)
        ]
        self.expect_terminator("end_file")

        return RoadNetwork(
            name=name,
            version=header.version or "",
            creation_date=header.creation_date or "",
            segments=segments,
            zones=zones,
            exit_cache=self.context.exit_cache,
        )

    def read_option(self, keyword: str, line: str, header: _DocumentHeader) -> None:
        tokens = split(line)
        if len(tokens) != 2:
            self.lexical_error("file header element")
        self.set_once(header, "version" if keyword == "format_version" else "creation_date", tokens[1])
