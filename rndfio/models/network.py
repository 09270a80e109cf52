"""
Defines the road network document, the root of the model tree.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from .parsing import ExitCacheEntry, ParseError, RndfSyntaxError
from .road import Segment, Zone, _WritableMixin, _add_unique, _consecutive, _find, _remove, _update
from .unique_id import CompoundId

if TYPE_CHECKING:
    from rndfio.ingestor.reader import ReaderOptions

    from .resolving import CrossRefEntry, ResolveResult

__all__ = ["RoadNetwork"]

logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class RoadNetwork(_WritableMixin):
    """
    A complete RNDF document.

    :param name: Value of ``RNDF_name``.
    :param version: Value of ``format_version``, empty if absent.
    :param creation_date: Value of ``creation_date``, empty if absent.
    :param segments: Segments numbered 1..S.
    :param zones: Zones numbered S+1..S+Z.
    :param exit_cache: Every exit read from the source, in file order.
    :param last_error: The error that made the last ``load()`` fail.
    """

    name: str = ""
    version: str = ""
    creation_date: str = ""
    segments: list[Segment] = field(default_factory=list)
    zones: list[Zone] = field(default_factory=list)
    exit_cache: list[ExitCacheEntry] = field(default_factory=list)
    last_error: ParseError | None = None
    _resolved: "ResolveResult | None" = field(default=None, repr=False)

    def load(self, filepath: str | Path, options: "ReaderOptions | None" = None) -> bool:
        """
        Replaces this network with the document stored in ``filepath``.

        On failure the network keeps its previous content, the error is
        logged and stored in ``last_error``.

        :param filepath: Path to an RNDF file.
        :param options: Reader options, defaults when omitted.
        :return: True if the whole document was read.
        """
        from rndfio.ingestor.reader import read_rndf

        try:
            loaded = read_rndf(filepath, options)
        except RndfSyntaxError as exc:
            logger.error("File [%s] is invalid: %s", filepath, exc)
            self.last_error = exc.error
            return False
        except OSError as exc:
            logger.error("Unable to read [%s]: %s", filepath, exc)
            self.last_error = None
            return False

        self.name = loaded.name
        self.version = loaded.version
        self.creation_date = loaded.creation_date
        self.segments = loaded.segments
        self.zones = loaded.zones
        self.exit_cache = loaded.exit_cache
        self.last_error = None
        self.rebuild_index()
        return True

    def segment(self, segment_id: int) -> Segment | None:
        return _find(self.segments, lambda segment: segment.id == segment_id)

    def add_segment(self, segment: Segment) -> bool:
        if not segment.is_valid():
            return False
        return _add_unique(self.segments, segment, "RoadNetwork")

    def update_segment(self, segment: Segment) -> bool:
        return _update(self.segments, segment)

    def remove_segment(self, segment_id: int) -> bool:
        return _remove(self.segments, Segment(segment_id))

    def zone(self, zone_id: int) -> Zone | None:
        return _find(self.zones, lambda zone: zone.id == zone_id)

    def add_zone(self, zone: Zone) -> bool:
        if not zone.is_valid():
            return False
        return _add_unique(self.zones, zone, "RoadNetwork")

    def update_zone(self, zone: Zone) -> bool:
        return _update(self.zones, zone)

    def remove_zone(self, zone_id: int) -> bool:
        return _remove(self.zones, Zone(zone_id))

    def is_valid(self) -> bool:
        if not self.name or not self.segments:
            return False
        if not _consecutive(self.segments, lambda segment: segment.id):
            return False
        first_zone_id = len(self.segments) + 1
        return all(
            zone.is_valid() and zone.id == zone_id for zone_id, zone in enumerate(self.zones, start=first_zone_id)
        )

    @property
    def resolved(self) -> "ResolveResult":
        """Result of the last resolution pass, computed on first use."""
        if self._resolved is None:
            self.rebuild_index()
        return self._resolved

    def rebuild_index(self) -> "ResolveResult":
        """
        Recomputes the cross-reference index and the waypoint graph.

        Mutating the network does not refresh the index; call this after
        structural changes.
        """
        from rndfio.ingestor.resolver import resolve

        self._resolved = resolve(self)
        return self._resolved

    def info(self, unique_id: CompoundId | str) -> "CrossRefEntry | None":
        """
        Finds where a waypoint lives.

        :param unique_id: Compound id, or its ``"x.y.z"`` string form.
        :return: The index entry, or None if no waypoint has that id.
        """
        if isinstance(unique_id, str):
            unique_id = CompoundId.parse(unique_id)
        if not unique_id.is_valid():
            return None
        return self.resolved.index.get(str(unique_id))

    lookup = info

    def write(self, stream: TextIO, indent: int = 0):
        self._write_line(stream, indent, f"RNDF_name {self.name}")
        self._write_line(stream, indent, f"num_segments {len(self.segments)}")
        self._write_line(stream, indent, f"num_zones {len(self.zones)}")
        if self.version:
            self._write_line(stream, indent, f"format_version {self.version}")
        if self.creation_date:
            self._write_line(stream, indent, f"creation_date {self.creation_date}")
        for segment in self.segments:
            segment.write(stream, indent=indent)
        for zone in self.zones:
            zone.write(stream, indent=indent)
        self._write_line(stream, indent, "end_file")
