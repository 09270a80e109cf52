"""
Defines parsing infrastructure for RNDF ingestion.

Provides error kinds, error records, the exception raised by the readers,
and the exit cache entries collected while a document is read.
"""

from dataclasses import dataclass
from enum import Enum, auto

__all__ = ["ParseErrorKind", "ParseError", "RndfSyntaxError", "ExitCacheEntry"]


class ParseErrorKind(Enum):
    """
    Enumeration of parse failure categories.

    LEXICAL_MISMATCH: Wrong keyword, arity, number format or range.
    SEQUENCE_GAP: A block or waypoint id differs from its 1-based position.
    UNEXPECTED_EOF: Input ended while a mandatory line was expected.
    DUPLICATE_OPTION: A once-only header option appeared twice.
    TERMINATOR_MISMATCH: The expected ``end_*`` line is missing.
    UNRESOLVED_EXIT: An exit's entry id names no waypoint (strict mode only).
    """

    LEXICAL_MISMATCH = auto()
    SEQUENCE_GAP = auto()
    UNEXPECTED_EOF = auto()
    DUPLICATE_OPTION = auto()
    TERMINATOR_MISMATCH = auto()
    UNRESOLVED_EXIT = auto()


@dataclass(slots=True)
class ParseError:
    """
    Records a single parsing error with source context.

    :param kind: Category of the failure.
    :param line_number: 1-indexed line number where the error occurred.
    :param message: Human-readable error description.
    :param line_content: Optional trimmed line content for debugging.
    """

    kind: ParseErrorKind
    line_number: int
    message: str
    line_content: str | None = None

    def __str__(self) -> str:
        text = f"[Line {self.line_number}]: {self.message}"
        if self.line_content is not None:
            text += f'\n "{self.line_content}"'
        return text


class RndfSyntaxError(Exception):
    """Raised on the first structural violation; aborts the whole parse."""

    def __init__(self, error: ParseError):
        self.error = error
        super().__init__(str(error))

    @property
    def kind(self) -> ParseErrorKind:
        return self.error.kind

    @property
    def line_number(self) -> int:
        return self.error.line_number


@dataclass(slots=True, frozen=True)
class ExitCacheEntry:
    """
    An exit as it was read from the source file.

    :param exit_id: String form of the exit waypoint id.
    :param entry_id: String form of the entry waypoint id.
    :param line_number: Line holding the ``exit`` directive.
    :param line: Trimmed content of that line.
    """

    exit_id: str
    entry_id: str
    line_number: int
    line: str
