"""
Defines the block reading engine and abstractions.

Every RNDF block (lane, spot, perimeter, segment, zone and the document
itself) has the same shape: an opening line, mandatory counts, an
unordered header of optional directives, a counted body and an ``end_*``
terminator. ``BlockReader`` implements the shared parts; subclasses
supply the opening line and the option handlers.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from typing import Generic, NoReturn, TypeVar

from rndfio.models.parsing import ExitCacheEntry, ParseErrorKind
from rndfio.models.road import Exit

from .cursor import LineCursor
from .lexical import (
    first_word,
    parse_exact_line,
    parse_labeled_non_negative,
    parse_labeled_positive,
    parse_labeled_string,
)

__all__ = ["ReadContext", "BlockReader"]

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


@dataclass(slots=True)
class ReadContext:
    """
    State shared by all readers of one document.

    :param cursor: Line cursor over the document.
    :param exit_cache: Every exit read so far, in file order.
    """

    cursor: LineCursor
    exit_cache: list[ExitCacheEntry] = field(default_factory=list)


class BlockReader(abc.ABC, Generic[_T]):
    """
    Abstract base class for readers of one RNDF block.

    Subclasses declare the header keywords they accept in ``options`` and
    handle each in ``read_option``. ``max_header_lines`` bounds the header
    scan; None means unbounded.
    """

    options: frozenset[str] = frozenset()
    max_header_lines: int | None = None

    def __init__(self, context: ReadContext):
        self.context = context
        self.cursor = context.cursor

    @abc.abstractmethod
    def read(self) -> _T:
        """
        Reads the whole block, terminator included.

        :return: The populated entity.
        :raises RndfSyntaxError: On the first violation.
        """

    def read_option(self, keyword: str, line: str, header) -> None:
        """
        Parses one recognized header line into the header accumulator.

        :param keyword: First word of the line, one of ``options``.
        :param line: The whole trimmed line.
        :param header: Block-specific accumulator record.
        :raises RndfSyntaxError: Unless a subclass handles the keyword.
        """
        self.lexical_error(f"{keyword} element")

    def scan_header(self, header) -> None:
        """
        Consumes optional header directives in any order.

        Stops at the first line whose keyword is not in ``options``, and
        pushes that line back for the body reader.
        """
        lines_read = 0
        while self.max_header_lines is None or lines_read < self.max_header_lines:
            line = self.cursor.next_line()
            if line is None:
                self.cursor.unget()
                return
            keyword = first_word(line)
            if keyword not in self.options:
                self.cursor.unget()
                return
            self.read_option(keyword, line, header)
            lines_read += 1

    def set_once(self, header, name: str, value) -> None:
        """Stores a once-only option, failing if it was already set."""
        if getattr(header, name) is not None:
            keyword = first_word(self.cursor.current_line)
            self.cursor.fail(ParseErrorKind.DUPLICATE_OPTION, f"Repeated header element [{keyword}]")
        setattr(header, name, value)

    def add_repeatable(self, items: list, item) -> bool:
        """Collects a repeatable option, dropping exact repeats."""
        if item in items:
            logger.warning(
                "[Line %d]: Ignoring repeated element \"%s\"", self.cursor.line_number, self.cursor.current_line
            )
            return False
        items.append(item)
        return True

    def cache_exit(self, exit_: Exit) -> None:
        self.context.exit_cache.append(
            ExitCacheEntry(
                exit_id=str(exit_.exit_id),
                entry_id=str(exit_.entry_id),
                line_number=self.cursor.line_number,
                line=self.cursor.current_line,
            )
        )

    def lexical_error(self, what: str) -> NoReturn:
        self.cursor.fail(ParseErrorKind.LEXICAL_MISMATCH, f"Unable to parse {what}")

    def sequence_error(self, what: str, found: int, expected: int) -> NoReturn:
        self.cursor.fail(
            ParseErrorKind.SEQUENCE_GAP, f"Found non-consecutive {what} Id [{found}], expected [{expected}]"
        )

    def expect_positive(self, label: str) -> int:
        value = parse_labeled_positive(self.cursor.require_line(label), label)
        if value is None:
            self.lexical_error(f"{label} as a positive number")
        return value

    def expect_non_negative(self, label: str) -> int:
        value = parse_labeled_non_negative(self.cursor.require_line(label), label)
        if value is None:
            self.lexical_error(f"{label} as a non-negative number")
        return value

    def expect_string(self, label: str) -> str:
        value = parse_labeled_string(self.cursor.require_line(label), label)
        if value is None:
            self.lexical_error(f"{label} element")
        return value

    def expect_terminator(self, literal: str) -> None:
        line = self.cursor.require_line(literal)
        if not parse_exact_line(line, literal):
            self.cursor.fail(ParseErrorKind.TERMINATOR_MISMATCH, f"Unable to parse delimiter [{literal}]")
