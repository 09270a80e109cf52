"""
Shared utilities for reader components.

Provides memory-mapped file access and the decoding of a mapped file into
physical lines.
"""

import contextlib
import mmap
from pathlib import Path
from typing import Iterator

__all__ = ["open_mmap", "read_lines"]


@contextlib.contextmanager
def open_mmap(filepath: str | Path) -> Iterator[mmap.mmap]:
    with open(filepath, "rb") as f, mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as mm:
        yield mm


def read_lines(filepath: str | Path, encoding: str = "utf-8") -> list[str]:
    """
    Reads a text file into its physical lines.

    :param filepath: File to read.
    :param encoding: Text encoding; undecodable bytes are replaced.
    :return: Lines without their terminators. An empty file has no lines.
    """
    if Path(filepath).stat().st_size == 0:
        # mmap refuses zero-length mappings
        return []
    with open_mmap(filepath) as mm:
        text = mm[:].decode(encoding, errors="replace")
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines
