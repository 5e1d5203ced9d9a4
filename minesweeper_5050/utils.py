"""Utility functions for coordinates and board adjacency."""

import re
from typing import Any, Dict, List, Tuple

from .errors import MalformedKeyError

Coord = Tuple[int, int]

# Version of the "<row>,<col>" key encoding shared with the upstream producer.
KEY_FORMAT_VERSION = 1

_KEY_RE = re.compile(r"(0|[1-9][0-9]*),(0|[1-9][0-9]*)", re.ASCII)

# 8-connected offsets (drow, dcol) in row-major order.
NEIGHBOR_OFFSETS: Tuple[Coord, ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)


def parse_coordinate(key: Any) -> Coord:
    """
    Parse a "<row>,<col>" key into a (row, col) coordinate.

    Args:
        key: Key as supplied by the upstream producer.

    Returns:
        The (row, col) pair of non-negative integers.

    Raises:
        MalformedKeyError: If the key is not a string in the canonical encoding
            (ASCII digits, comma separator, no whitespace, no leading zeros).
    """
    if not isinstance(key, str):
        raise MalformedKeyError(
            f"Coordinate key must be a string, got {type(key).__name__}.", key=key
        )
    match = _KEY_RE.fullmatch(key)
    if match is None:
        raise MalformedKeyError(
            f"Coordinate key {key!r} does not match '<row>,<col>'.", key=key
        )
    return int(match.group(1)), int(match.group(2))


def format_coordinate(coord: Coord) -> str:
    """Serialize a (row, col) coordinate using the canonical key encoding."""
    row, col = coord
    if row < 0 or col < 0:
        raise ValueError("Coordinates must be non-negative.")
    return f"{row},{col}"


def adjacent_coordinates(coord: Coord) -> Tuple[Coord, ...]:
    """Return the in-bounds (non-negative) 8-neighbors of a cell, row-major."""
    row, col = coord
    return tuple(
        (row + dr, col + dc)
        for dr, dc in NEIGHBOR_OFFSETS
        if row + dr >= 0 and col + dc >= 0
    )


def reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    """
    `object_pairs_hook` for json.load that refuses repeated object keys.

    Raises:
        MalformedKeyError: If a key occurs more than once in one object.
    """
    obj: Dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise MalformedKeyError(f"Coordinate key {key!r} appears more than once.", key=key)
        obj[key] = value
    return obj
