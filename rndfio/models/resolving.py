"""
Defines cross-reference infrastructure for waypoint resolution.

Provides the index entries produced by the resolver, which locate the
owning segment/lane or zone/spot of every waypoint, and the result
container that bundles the index with the connectivity graph.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import networkx as nx

from .road import Exit, Lane, ParkingSpot, Segment, Waypoint, Zone
from .unique_id import CompoundId

if TYPE_CHECKING:
    from .network import RoadNetwork

__all__ = ["StaleEntryError", "CrossRefEntry", "ResolveResult"]


class StaleEntryError(LookupError):
    """Raised when an index entry no longer matches the network it was built from."""


@dataclass(slots=True, frozen=True)
class CrossRefEntry:
    """
    Locates one waypoint inside a road network.

    The entry stores positions, not objects; the owning entities are looked
    up on access. Exactly one of ``segment_index`` / ``zone_index`` is set.
    A perimeter point has a zone index and no spot index.

    :param network: The network the index was built from.
    :param unique_id: Compound id of the waypoint.
    :param waypoint_index: Position of the waypoint in its container.
    :param segment_index: Position of the owning segment, if any.
    :param lane_index: Position of the owning lane, if any.
    :param zone_index: Position of the owning zone, if any.
    :param spot_index: Position of the owning parking spot, if any.
    """

    network: "RoadNetwork" = field(repr=False, compare=False)
    unique_id: CompoundId
    waypoint_index: int
    segment_index: int | None = None
    lane_index: int | None = None
    zone_index: int | None = None
    spot_index: int | None = None

    @property
    def is_perimeter(self) -> bool:
        return self.zone_index is not None and self.spot_index is None

    @property
    def segment(self) -> Segment | None:
        if self.segment_index is None:
            return None
        return _checked(self.network.segments, self.segment_index, self.unique_id.x, self.unique_id)

    @property
    def lane(self) -> Lane | None:
        segment = self.segment
        if segment is None or self.lane_index is None:
            return None
        return _checked(segment.lanes, self.lane_index, self.unique_id.y, self.unique_id)

    @property
    def zone(self) -> Zone | None:
        if self.zone_index is None:
            return None
        return _checked(self.network.zones, self.zone_index, self.unique_id.x, self.unique_id)

    @property
    def spot(self) -> ParkingSpot | None:
        zone = self.zone
        if zone is None or self.spot_index is None:
            return None
        return _checked(zone.spots, self.spot_index, self.unique_id.y, self.unique_id)

    @property
    def waypoint(self) -> Waypoint:
        if (lane := self.lane) is not None:
            waypoints = lane.waypoints
        elif (spot := self.spot) is not None:
            waypoints = spot.waypoints
        elif (zone := self.zone) is not None:
            waypoints = zone.perimeter.points
        else:
            raise StaleEntryError(f"No container left for {self.unique_id}")
        return _checked(waypoints, self.waypoint_index, self.unique_id.z, self.unique_id)


def _checked(items: list, index: int, expected_id: int, unique_id: CompoundId):
    if index >= len(items) or items[index].id != expected_id:
        raise StaleEntryError(f"Index entry for {unique_id} is stale; rebuild the index")
    return items[index]


@dataclass(slots=True)
class ResolveResult:
    """
    Encapsulates the result of a resolution pass.

    :param index: Compound-id string to entry, one per waypoint.
    :param graph: Directed waypoint graph; lane order and exit edges.
    :param dangling_exits: Exits whose entry id names no waypoint.
    """

    index: dict[str, CrossRefEntry] = field(default_factory=dict)
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)
    dangling_exits: list[Exit] = field(default_factory=list)
