"""
Defines RNDF lexical helpers.

Every helper works on a single line that has already been read and
trimmed. Helpers never raise: a line that does not have the expected
shape yields None (or False), and the calling reader decides which error
to report.

Identifier prefixes are compared textually against the expected parent
ids, so ``060.1.1`` does not belong to segment ``60``.
"""

import re

from rndfio.models.road import Checkpoint, Exit, GeodeticPoint, Marking, Waypoint
from rndfio.models.unique_id import CompoundId, parse_int

__all__ = [
    "MAX_STRING_LENGTH",
    "trim",
    "split",
    "first_word",
    "parse_labeled_string",
    "parse_labeled_positive",
    "parse_labeled_non_negative",
    "parse_exact_line",
    "parse_boundary",
    "parse_checkpoint_line",
    "parse_stop_line",
    "parse_exit_line",
    "parse_waypoint_line",
]

MAX_STRING_LENGTH = 128

_COMMENT_START = "/*"
_COMMENT_END = "*/"
_FORBIDDEN_STRING_CHARS = ("*", "\\")
_BOUNDARY_LABELS = ("left_boundary", "right_boundary")
RE_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def trim(line: str) -> str:
    """
    Strips a ``/* ... */`` comment and normalizes whitespace.

    The comment runs from the first ``/*`` to the last ``*/``. An
    unterminated comment is left in place.
    """
    start = line.find(_COMMENT_START)
    if start != -1:
        end = line.rfind(_COMMENT_END)
        if end >= start + len(_COMMENT_START):
            line = line[:start] + line[end + len(_COMMENT_END) :]
    return " ".join(line.split())


def split(text: str, delimiters: str = " ") -> list[str]:
    """
    Tokenizes on any of ``delimiters``, dropping empty tokens.

    :param text: Text to tokenize.
    :param delimiters: Set of single-character delimiters.
    :return: Non-empty tokens in order.
    """
    if not delimiters:
        return [text] if text else []
    pattern = "[" + re.escape(delimiters) + "]+"
    return [token for token in re.split(pattern, text) if token]


def first_word(line: str) -> str:
    tokens = split(line)
    return tokens[0] if tokens else ""


def parse_labeled_string(line: str, label: str) -> str | None:
    """
    Parses ``<label> <value>``.

    :return: The value, or None if the line has another label or arity, or
             the value is too long or contains ``*`` or a backslash.
    """
    tokens = split(line)
    if len(tokens) != 2 or tokens[0] != label:
        return None
    value = tokens[1]
    if len(value) > MAX_STRING_LENGTH or any(char in value for char in _FORBIDDEN_STRING_CHARS):
        return None
    return value


def _parse_labeled_int(line: str, label: str, minimum: int) -> int | None:
    prefix = label + " "
    if not line.startswith(prefix):
        return None
    return parse_int(line[len(prefix) :], minimum)


def parse_labeled_positive(line: str, label: str) -> int | None:
    """Parses ``<label> N`` with N in [1, 32768]."""
    return _parse_labeled_int(line, label, 1)


def parse_labeled_non_negative(line: str, label: str) -> int | None:
    """Parses ``<label> N`` with N in [0, 32768]."""
    return _parse_labeled_int(line, label, 0)


def parse_exact_line(line: str, literal: str) -> bool:
    return line == literal


def parse_boundary(line: str) -> tuple[str, Marking] | None:
    """
    Parses ``left_boundary <marking>`` or ``right_boundary <marking>``.

    :return: The label and the marking, or None.
    """
    tokens = split(line)
    if len(tokens) != 2 or tokens[0] not in _BOUNDARY_LABELS:
        return None
    marking = Marking.from_keyword(tokens[1])
    if marking is None:
        return None
    return tokens[0], marking


def _waypoint_id_in(token: str, x: int, y: int) -> int | None:
    """Returns ``z`` if ``token`` is ``x.y.z`` for the given prefix."""
    parts = split(token, ".")
    if len(parts) != 3 or parts[0] != str(x) or parts[1] != str(y):
        return None
    return parse_int(parts[2], 1)


def parse_checkpoint_line(line: str, x: int, y: int) -> Checkpoint | None:
    """
    Parses ``checkpoint x.y.z N``.

    :param x: Expected segment or zone id.
    :param y: Expected lane or spot id.
    """
    tokens = split(line)
    if len(tokens) != 3 or tokens[0] != "checkpoint":
        return None
    waypoint_id = _waypoint_id_in(tokens[1], x, y)
    checkpoint_id = parse_int(tokens[2], 1)
    if waypoint_id is None or checkpoint_id is None:
        return None
    return Checkpoint(checkpoint_id, waypoint_id)


def parse_stop_line(line: str, x: int, y: int) -> int | None:
    """Parses ``stop x.y.z`` and returns ``z``."""
    tokens = split(line)
    if len(tokens) != 2 or tokens[0] != "stop":
        return None
    return _waypoint_id_in(tokens[1], x, y)


def parse_exit_line(line: str, x: int, y: int) -> Exit | None:
    """
    Parses ``exit x.y.z a.b.c``.

    The exit id must carry the expected prefix; the entry id may point
    anywhere but must be in range.
    """
    tokens = split(line)
    if len(tokens) != 3 or tokens[0] != "exit":
        return None
    exit_waypoint = _waypoint_id_in(tokens[1], x, y)
    if exit_waypoint is None:
        return None
    entry_parts = split(tokens[2], ".")
    if len(entry_parts) != 3:
        return None
    a = parse_int(entry_parts[0], 1)
    b = parse_int(entry_parts[1], 0)
    c = parse_int(entry_parts[2], 1)
    if a is None or b is None or c is None:
        return None
    return Exit(CompoundId(x, y, exit_waypoint), CompoundId(a, b, c))


def parse_waypoint_line(line: str, x: int, y: int) -> Waypoint | None:
    """
    Parses ``x.y.z latitude longitude``.

    The returned waypoint carries whatever ``z`` the line declares;
    checking it against the expected position is up to the caller.
    """
    tokens = split(line)
    if len(tokens) != 3:
        return None
    waypoint_id = _waypoint_id_in(tokens[0], x, y)
    if waypoint_id is None:
        return None
    if not (RE_FLOAT.fullmatch(tokens[1]) and RE_FLOAT.fullmatch(tokens[2])):
        return None
    location = GeodeticPoint.from_degrees(float(tokens[1]), float(tokens[2]))
    return Waypoint(waypoint_id, location)
