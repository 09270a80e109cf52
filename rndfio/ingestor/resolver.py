"""
Builds the cross-reference index and waypoint graph of a road network.

Walks every segment/lane/waypoint and every zone perimeter point and
parking-spot waypoint, indexes each by its compound id, and links them in
a directed graph: consecutive lane waypoints follow each other, and every
exit adds an edge from its exit waypoint to its entry waypoint.
"""

import logging

import networkx as nx

from rndfio.models.network import RoadNetwork
from rndfio.models.resolving import CrossRefEntry, ResolveResult
from rndfio.models.road import Exit
from rndfio.models.unique_id import CompoundId

__all__ = ["resolve"]

logger = logging.getLogger(__name__)


def resolve(network: RoadNetwork) -> ResolveResult:
    """
    Indexes all waypoints of ``network`` and links its exits.

    Exits whose entry id names no waypoint are reported in
    ``dangling_exits``; they are not an error at this level.

    :param network: A parsed (or hand-built) road network.
    :return: ResolveResult with the index, the graph and the dangling exits.
    """
    index = _build_index(network)
    graph = _build_graph(network, index)
    dangling_exits = [exit_ for exit_ in _all_exits(network) if str(exit_.entry_id) not in index]
    for exit_ in dangling_exits:
        logger.debug("Exit %s leads to unknown entry %s", exit_.exit_id, exit_.entry_id)
    logger.debug("Indexed %d waypoints, %d dangling exits", len(index), len(dangling_exits))
    return ResolveResult(index=index, graph=graph, dangling_exits=dangling_exits)


def _build_index(network: RoadNetwork) -> dict[str, CrossRefEntry]:
    """
    Builds the compound-id index over every waypoint.

    :param network: Network to index.
    :return: Dictionary mapping ``"x.y.z"`` strings to entries.
    """
    index: dict[str, CrossRefEntry] = {}
    for segment_index, segment in enumerate(network.segments):
        for lane_index, lane in enumerate(segment.lanes):
            for waypoint_index, waypoint in enumerate(lane.waypoints):
                unique_id = CompoundId(segment.id, lane.id, waypoint.id)
                index[str(unique_id)] = CrossRefEntry(
                    network=network,
                    unique_id=unique_id,
                    waypoint_index=waypoint_index,
                    segment_index=segment_index,
                    lane_index=lane_index,
                )
    for zone_index, zone in enumerate(network.zones):
        for waypoint_index, point in enumerate(zone.perimeter.points):
            unique_id = CompoundId(zone.id, 0, point.id)
            index[str(unique_id)] = CrossRefEntry(
                network=network, unique_id=unique_id, waypoint_index=waypoint_index, zone_index=zone_index
            )
        for spot_index, spot in enumerate(zone.spots):
            for waypoint_index, waypoint in enumerate(spot.waypoints):
                unique_id = CompoundId(zone.id, spot.id, waypoint.id)
                index[str(unique_id)] = CrossRefEntry(
                    network=network,
                    unique_id=unique_id,
                    waypoint_index=waypoint_index,
                    zone_index=zone_index,
                    spot_index=spot_index,
                )
    return index


def _build_graph(network: RoadNetwork, index: dict[str, CrossRefEntry]) -> nx.DiGraph:
    """
    Builds the directed waypoint graph.

    Nodes are compound-id strings. Dangling exits still add their entry
    node, flagged with ``resolved=False``.
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(index, resolved=True)
    for segment in network.segments:
        for lane in segment.lanes:
            ids = [str(CompoundId(segment.id, lane.id, waypoint.id)) for waypoint in lane.waypoints]
            graph.add_edges_from(zip(ids, ids[1:]), kind="lane")
    for exit_ in _all_exits(network):
        entry = str(exit_.entry_id)
        if entry not in graph:
            graph.add_node(entry, resolved=False)
        graph.add_edge(str(exit_.exit_id), entry, kind="exit")
    return graph


def _all_exits(network: RoadNetwork) -> list[Exit]:
    exits = [exit_ for segment in network.segments for lane in segment.lanes for exit_ in lane.exits]
    exits.extend(exit_ for zone in network.zones for exit_ in zone.perimeter.exits)
    return exits
