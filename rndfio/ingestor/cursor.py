"""
Defines the line cursor shared by all RNDF readers.

The cursor walks the physical lines of a document, hands out trimmed
non-blank lines and keeps the 1-based number of the last physical line
it consumed. A single line can be pushed back, which is how header scans
stop at the first line they do not recognize.
"""

from typing import NoReturn

from rndfio.models.parsing import ParseError, ParseErrorKind, RndfSyntaxError

from .lexical import trim

__all__ = ["LineCursor"]


class LineCursor:
    """
    Forward-only cursor over the lines of one document with one-line pushback.

    :param lines: Physical lines, without terminators.
    """

    def __init__(self, lines: list[str]):
        self._lines = lines
        self._position = 0
        self.line_number = 0
        self.current_line: str | None = None
        self._saved: tuple[int, int, str | None] | None = None

    def next_line(self) -> str | None:
        """
        Returns the next non-blank trimmed line.

        Every physical line consumed, blank or not, advances
        ``line_number``.

        :return: The line, or None at end of input.
        """
        self._saved = (self._position, self.line_number, self.current_line)
        while self._position < len(self._lines):
            raw = self._lines[self._position]
            self._position += 1
            self.line_number += 1
            line = trim(raw)
            if line:
                self.current_line = line
                return line
        self.current_line = None
        return None

    def unget(self) -> None:
        """Pushes the last line returned by ``next_line`` back."""
        if self._saved is None:
            raise RuntimeError("Nothing to push back")
        self._position, self.line_number, self.current_line = self._saved
        self._saved = None

    def require_line(self, what: str) -> str:
        """
        Returns the next non-blank line, or fails with UNEXPECTED_EOF.

        :param what: Description of the expected content, for the message.
        """
        line = self.next_line()
        if line is None:
            self.fail(ParseErrorKind.UNEXPECTED_EOF, f"Unexpected end of file, expected {what}")
        return line

    def fail(self, kind: ParseErrorKind, message: str) -> NoReturn:
        """Raises a syntax error located at the current line."""
        raise RndfSyntaxError(
            ParseError(
                kind=kind,
                line_number=self.line_number,
                message=message,
                line_content=self.current_line,
            )
        )
