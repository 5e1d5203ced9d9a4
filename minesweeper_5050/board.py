"""Immutable, validated view of one board's per-cell mine probabilities."""

import math
from numbers import Real
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import OutOfRangeError
from .utils import Coord, adjacent_coordinates, format_coordinate, parse_coordinate

# Largest rows x cols extent materialized by to_grid and the renderers.
MAX_GRID_CELLS = 1_000_000


def _validate_probability(key: Any, value: Any) -> float:
    """Return `value` as a float, or raise OutOfRangeError if it is not in [0, 1]."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise OutOfRangeError(
            f"Probability for {key!r} must be a real number, got {type(value).__name__}.",
            key=key,
            value=value,
        )
    p = float(value)
    if math.isnan(p) or p < 0.0 or p > 1.0:
        raise OutOfRangeError(
            f"Probability for {key!r} is {p}, outside [0, 1].", key=key, value=value
        )
    return p


class BoardSnapshot:
    """
    Read-only mapping from (row, col) coordinates to mine probabilities.

    Snapshots are built once per detection call with `build` (or `from_grid`)
    and expose adjacency queries restricted to the cells they contain.
    Coordinates absent from the snapshot are opened cells or outside the board.
    """

    def __init__(self, probabilities: Mapping[Coord, float]) -> None:
        """
        Wrap already-validated probabilities.

        Prefer `BoardSnapshot.build` for untrusted input; this constructor
        performs no format validation.
        """
        self._probabilities: Mapping[Coord, float] = MappingProxyType(
            dict(probabilities)
        )
        self._coordinates: Tuple[Coord, ...] = tuple(sorted(self._probabilities))

        # (row, col) -> present neighbors in row-major order
        self._neighbors: Dict[Coord, Tuple[Coord, ...]] = {
            coord: tuple(
                nbr for nbr in adjacent_coordinates(coord) if nbr in self._probabilities
            )
            for coord in self._coordinates
        }

        if self._coordinates:
            self._rows: int = max(r for r, _ in self._coordinates) + 1
            self._cols: int = max(c for _, c in self._coordinates) + 1
        else:
            self._rows = 0
            self._cols = 0

    @property
    def rows(self) -> int:
        """Number of rows spanned by the snapshot (0 if empty)."""
        return self._rows

    @property
    def cols(self) -> int:
        """Number of columns spanned by the snapshot (0 if empty)."""
        return self._cols

    def check_grid_size(self, max_cells: int = MAX_GRID_CELLS) -> None:
        """
        Raise ValueError if a dense rows x cols view would exceed `max_cells`.

        Detection is sparse; only dense exports and renderings are capped.
        """
        if self._rows * self._cols > max_cells:
            raise ValueError(
                f"Board extent {self._rows}x{self._cols} exceeds {max_cells} cells; "
                "too large for a dense grid."
            )

    @classmethod
    def build(cls, raw: Mapping[str, Any]) -> "BoardSnapshot":
        """
        Parse and validate a raw "<row>,<col>" -> probability mapping.

        Args:
            raw: Mapping produced by the upstream probability solver.

        Returns:
            A new snapshot.

        Raises:
            MalformedKeyError: If a key does not parse as a coordinate.
            OutOfRangeError: If a value is not a real number in [0, 1].
        """
        probabilities: Dict[Coord, float] = {}
        for key, value in raw.items():
            coord = parse_coordinate(key)
            probabilities[coord] = _validate_probability(key, value)
        return cls(probabilities)

    @classmethod
    def from_grid(
        cls, grid: Union[np.ndarray, Sequence[Sequence[Optional[float]]]]
    ) -> "BoardSnapshot":
        """
        Build a snapshot from a dense 2-D grid indexed [row][col].

        NaN (or None in nested lists) marks a cell that is not part of the
        snapshot, such as an already opened cell.

        Raises:
            ValueError: If the grid is not two-dimensional.
            OutOfRangeError: If a present value lies outside [0, 1].
        """
        arr = np.asarray(grid, dtype=float)
        if arr.ndim != 2:
            raise ValueError(f"Expected a 2-D grid, got {arr.ndim} dimension(s).")

        probabilities: Dict[Coord, float] = {}
        for (row, col), value in np.ndenumerate(arr):
            if np.isnan(value):
                continue
            coord = (int(row), int(col))
            probabilities[coord] = _validate_probability(
                format_coordinate(coord), float(value)
            )
        return cls(probabilities)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def probability_of(self, coord: Coord) -> Optional[float]:
        """Return the probability of a cell, or None if it is not in the snapshot."""
        return self._probabilities.get(coord)

    def neighbors_of(self, coord: Coord) -> Tuple[Coord, ...]:
        """Return the up-to-8 adjacent cells that are also in the snapshot."""
        cached = self._neighbors.get(coord)
        if cached is not None:
            return cached
        return tuple(
            nbr for nbr in adjacent_coordinates(coord) if nbr in self._probabilities
        )

    def all_coordinates(self) -> Tuple[Coord, ...]:
        """Return every coordinate sorted by row, then column."""
        return self._coordinates

    def __len__(self) -> int:
        return len(self._coordinates)

    def __contains__(self, coord: object) -> bool:
        return coord in self._probabilities

    def __iter__(self) -> Iterator[Coord]:
        return iter(self._coordinates)

    def __repr__(self) -> str:
        return f"BoardSnapshot(cells={len(self)}, rows={self.rows}, cols={self.cols})"

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, float]:
        """Return the snapshot in the "<row>,<col>" key encoding accepted by `build`."""
        return {format_coordinate(c): self._probabilities[c] for c in self._coordinates}

    def to_grid(self) -> np.ndarray:
        """
        Return a rows x cols float array with NaN for cells not in the snapshot.

        Raises:
            ValueError: If the extent exceeds MAX_GRID_CELLS.
        """
        self.check_grid_size()
        grid = np.full((self.rows, self.cols), np.nan)
        for (row, col), p in self._probabilities.items():
            grid[row, col] = p
        return grid

    def items(self) -> List[Tuple[Coord, float]]:
        """Return (coordinate, probability) pairs in sorted coordinate order."""
        return [(c, self._probabilities[c]) for c in self._coordinates]
