"""
Pytest configuration and shared fixtures for rndfio tests.
"""

from pathlib import Path

import pytest

from rndfio.ingestor.cursor import LineCursor
from rndfio.ingestor.parser import ReadContext
from rndfio.ingestor.reader import read_rndf

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def sample_path() -> Path:
    """Path to a complete document with two segments and one zone."""
    return DATA_DIR / "sample1.rndf"


@pytest.fixture
def sample_network(sample_path):
    return read_rndf(sample_path)


@pytest.fixture
def write_rndf(tmp_path):
    """Factory writing a list of lines to a temporary ``.rndf`` file."""

    def _write(lines: list[str], name: str = "doc.rndf") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write


@pytest.fixture
def make_context():
    """Factory building a read context over in-memory lines."""

    def _make(lines: list[str]) -> ReadContext:
        return ReadContext(cursor=LineCursor(lines))

    return _make


@pytest.fixture
def minimal_lines() -> list[str]:
    """One segment, one lane, one waypoint, no zones."""
    return [
        "RNDF_name roadA",
        "num_segments 1",
        "num_zones 0",
        "segment 1",
        "num_lanes 1",
        "lane 1.1",
        "num_waypoints 1",
        "1.1.1 10.0 20.0",
        "end_lane",
        "end_segment",
        "end_file",
    ]
