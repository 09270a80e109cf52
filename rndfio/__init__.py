"""
rndfio: RNDF road network parser.

Reads Route Network Definition Files into a validated, cross-referenced
model of segments, lanes, zones, parking spots and waypoints.
"""

from rndfio.ingestor.reader import ReaderOptions, RndfReader, read_rndf
from rndfio.models.network import RoadNetwork
from rndfio.models.parsing import ParseError, ParseErrorKind, RndfSyntaxError
from rndfio.models.unique_id import CompoundId

__all__ = [
    "ReaderOptions",
    "RndfReader",
    "read_rndf",
    "RoadNetwork",
    "ParseError",
    "ParseErrorKind",
    "RndfSyntaxError",
    "CompoundId",
]
