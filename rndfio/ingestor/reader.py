"""
Orchestration layer for reading RNDF documents.

Composes file access, the block readers and the resolver into a single
pipeline:

1. Read the physical lines of the file
2. Parse the document (RndfDocumentParser)
3. Resolve waypoint references (resolver)
4. Optionally reject exits whose entry is unknown
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from rndfio.ingestor.common import read_lines
from rndfio.ingestor.cursor import LineCursor
from rndfio.ingestor.parser import ReadContext
from rndfio.ingestor.rndf import RndfDocumentParser
from rndfio.models.network import RoadNetwork
from rndfio.models.parsing import ExitCacheEntry, ParseError, ParseErrorKind, RndfSyntaxError

__all__ = ["ReaderOptions", "RndfReader", "read_rndf"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReaderOptions:
    """
    Reader configuration.

    :param strict_exits: Fail the read when an exit leads to no waypoint.
    :param encoding: Text encoding of the input; bad bytes are replaced.
    """

    strict_exits: bool = False
    encoding: str = "utf-8"


class RndfReader:
    """Orchestrator for reading RNDF files."""

    def __init__(self, options: ReaderOptions | None = None):
        self.options = options or ReaderOptions()

    def read(self, filepath: str | Path) -> RoadNetwork:
        """
        Reads an RNDF file and returns a resolved RoadNetwork.

        :param filepath: Path to the RNDF file.
        :return: The parsed network, its index already built.
        :raises RndfSyntaxError: On the first structural violation.
        :raises OSError: If the file cannot be read.
        """
        lines = read_lines(filepath, self.options.encoding)
        return self.read_lines(lines)

    def read_lines(self, lines: list[str]) -> RoadNetwork:
        """Parses an in-memory document, see ``read``."""
        context = ReadContext(cursor=LineCursor(lines))
        network = RndfDocumentParser(context).read()
        logger.debug(
            "Parsed [%s]: %d segments, %d zones, %d exits",
            network.name,
            len(network.segments),
            len(network.zones),
            len(network.exit_cache),
        )

        result = network.rebuild_index()
        if self.options.strict_exits:
            self._check_exits(network.exit_cache, result.index)
        return network

    @staticmethod
    def _check_exits(exit_cache: list[ExitCacheEntry], index) -> None:
        """Fails at the first exit, in file order, whose entry is not indexed."""
        for entry in exit_cache:
            if entry.entry_id not in index:
                raise RndfSyntaxError(
                    ParseError(
                        kind=ParseErrorKind.UNRESOLVED_EXIT,
                        line_number=entry.line_number,
                        message=f"Exit [{entry.exit_id}] leads to unknown entry [{entry.entry_id}]",
                        line_content=entry.line,
                    )
                )


def read_rndf(filepath: str | Path, options: ReaderOptions | None = None) -> RoadNetwork:
    """
    Reads an RNDF file.

    :param filepath: Path to the RNDF file.
    :param options: Reader options, defaults when omitted.
    :return: The parsed and resolved network.
    :raises RndfSyntaxError: On the first structural violation.
    """
    return RndfReader(options).read(filepath)
