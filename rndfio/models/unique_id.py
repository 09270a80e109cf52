"""
Defines the compound identifier used to address waypoints.

A compound identifier is the ``x.y.z`` triple that names every waypoint,
perimeter point and parking-spot waypoint of a road network: ``x`` is the
segment or zone id, ``y`` the lane or spot id (``0`` for a perimeter) and
``z`` the waypoint id.
"""

import re
from dataclasses import dataclass

__all__ = ["MAX_ID", "CompoundId", "parse_int"]

MAX_ID = 32768

_RE_INT = re.compile(r"([+-]?)0*([0-9]{1,5})")


def parse_int(token: str, minimum: int, maximum: int = MAX_ID) -> int | None:
    """
    Strictly converts a token to an integer within ``[minimum, maximum]``.

    :param token: Candidate token; the whole token must be numeric.
    :param minimum: Smallest accepted value.
    :param maximum: Largest accepted value.
    :return: The integer, or None if the token is not numeric or out of range.
    """
    match = _RE_INT.fullmatch(token)
    if match is None:
        return None
    value = int(match.group(1) + match.group(2))
    if value < minimum or value > maximum:
        return None
    return value


@dataclass(slots=True, frozen=True)
class CompoundId:
    """
    Immutable ``x.y.z`` identifier.

    Out-of-range components never raise: the instance collapses to the
    sentinel ``(-1, -1, -1)`` and ``is_valid()`` reports False.

    :param x: Segment or zone id, in [1, 32768].
    :param y: Lane or spot id in [0, 32768]; 0 marks a perimeter point.
    :param z: Waypoint id, in [1, 32768].
    """

    x: int = -1
    y: int = -1
    z: int = -1

    def __post_init__(self):
        if not _in_range(self.x, self.y, self.z):
            object.__setattr__(self, "x", -1)
            object.__setattr__(self, "y", -1)
            object.__setattr__(self, "z", -1)

    @classmethod
    def parse(cls, text: str) -> "CompoundId":
        """
        Parses an ``"x.y.z"`` string.

        :param text: Exactly three dot-separated integer tokens.
        :return: The parsed id, or the invalid sentinel on any mismatch.
        """
        tokens = [token for token in text.split(".") if token]
        if len(tokens) != 3 or text.count(".") != 2:
            return cls()
        x = parse_int(tokens[0], 1)
        y = parse_int(tokens[1], 0)
        z = parse_int(tokens[2], 1)
        if x is None or y is None or z is None:
            return cls()
        return cls(x, y, z)

    def is_valid(self) -> bool:
        return _in_range(self.x, self.y, self.z)

    @property
    def is_perimeter(self) -> bool:
        """True when the id addresses a perimeter point (``y == 0``)."""
        return self.is_valid() and self.y == 0

    def __str__(self) -> str:
        return f"{self.x}.{self.y}.{self.z}"


def _in_range(x: int, y: int, z: int) -> bool:
    return 0 < x <= MAX_ID and 0 <= y <= MAX_ID and 0 < z <= MAX_ID
