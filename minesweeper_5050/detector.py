"""Detection of forced 50/50 guesses from per-cell mine probabilities."""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List, Mapping, Optional, Set, Tuple

from .board import BoardSnapshot
from .utils import Coord

logger = logging.getLogger(__name__)

CellGroup = Tuple[Coord, ...]

DEFAULT_EPSILON = 1e-6
MAX_EPSILON = 1e-3
DEFAULT_MAX_GROUP_SIZE = 8


class CellOutcome(str, Enum):
    """How the detector classified one cell of the snapshot."""

    CERTAIN = "certain"  # probability within epsilon of 0 or 1
    UNCERTAIN = "uncertain"  # not an even split of any supported group size
    ISOLATED = "isolated"  # even-split candidate with no matching neighbor
    REJECTED = "rejected"  # member of a component that failed validation
    GROUPED = "grouped"


@dataclass(frozen=True)
class DetectorConfig:
    """
    Tolerances for the pattern detector.

    Attributes:
        epsilon: Absolute tolerance for "equals 1/k" and equality between
            cells. Must lie in (0, 1e-3].
        max_group_size: Largest symmetric group recognized. 2 restricts
            detection to 50/50 pairs.
    """

    epsilon: float = DEFAULT_EPSILON
    max_group_size: int = DEFAULT_MAX_GROUP_SIZE

    def __post_init__(self) -> None:
        if isinstance(self.epsilon, bool) or not isinstance(self.epsilon, (int, float)):
            raise TypeError("epsilon must be a number.")
        if not 0.0 < self.epsilon <= MAX_EPSILON:
            raise ValueError(f"epsilon must be in (0, {MAX_EPSILON}].")
        if isinstance(self.max_group_size, bool) or not isinstance(
            self.max_group_size, int
        ):
            raise TypeError("max_group_size must be an integer.")
        if self.max_group_size < 2:
            raise ValueError("max_group_size must be at least 2.")

        # Levels 1/(m-1) and 1/m must stay distinguishable under the tolerance.
        m = self.max_group_size
        if m > 2 and 1.0 / (m * (m - 1)) <= 2.0 * self.epsilon:
            raise ValueError(
                f"max_group_size={m} is too large for epsilon={self.epsilon}: "
                "probability levels 1/k would overlap."
            )


@dataclass
class DetectionReport:
    """Groups found in one snapshot plus the classification of every cell."""

    groups: List[CellGroup]
    outcomes: Dict[Coord, CellOutcome]
    rejected_components: List[CellGroup] = field(default_factory=list)

    def to_list(self) -> List[List[List[int]]]:
        """Serialize groups as nested [row, col] integer lists."""
        return [[[row, col] for row, col in group] for group in self.groups]

    def cells_with(self, outcome: CellOutcome) -> List[Coord]:
        """Return the cells classified as `outcome`, sorted."""
        return sorted(c for c, o in self.outcomes.items() if o is outcome)


class PatternDetector:
    """
    Find groups of cells that form an irreducible, evenly split guess.

    A canonical 50/50 is two adjacent cells at probability 0.5 with no other
    0.5 cell touching them. More generally, a connected cluster of N cells
    each at probability 1/N is reported as one group. Detection is a pure
    function of the snapshot; a detector instance can be shared across
    threads.
    """

    def __init__(self, config: Optional[DetectorConfig] = None) -> None:
        self.config: DetectorConfig = config if config is not None else DetectorConfig()

    def _level(self, p: float) -> Optional[int]:
        """
        Return k if p is within epsilon of 1/k for a supported group size k.

        Returns 0 for certain cells and None for any other probability.
        """
        eps = self.config.epsilon
        if p <= eps or p >= 1.0 - eps:
            return 0
        k = int(round(1.0 / p))
        if 2 <= k <= self.config.max_group_size and abs(p - 1.0 / k) <= eps:
            return k
        return None

    def _component(
        self,
        snapshot: BoardSnapshot,
        start: Coord,
        levels: Dict[Coord, int],
        visited: Set[Coord],
    ) -> List[Coord]:
        """Breadth-first collection of same-level candidates connected to `start`."""
        level = levels[start]
        component: List[Coord] = []
        queue: Deque[Coord] = deque([start])
        visited.add(start)

        while queue:
            cell = queue.popleft()
            component.append(cell)
            for nbr in snapshot.neighbors_of(cell):
                if nbr in visited or levels.get(nbr) != level:
                    continue
                visited.add(nbr)
                queue.append(nbr)

        return component

    def _is_valid_group(
        self, snapshot: BoardSnapshot, component: List[Coord], level: int
    ) -> bool:
        """Decide whether a connected component is one symmetric forced guess."""
        size = len(component)
        if size < 2:
            return False
        if size == 2:
            return level == 2

        eps = self.config.epsilon
        probabilities = [snapshot.probability_of(c) for c in component]
        values = [p for p in probabilities if p is not None]
        if any(abs(p - 1.0 / size) > eps for p in values):
            return False
        return max(values) - min(values) <= eps

    def report(self, snapshot: BoardSnapshot) -> DetectionReport:
        """
        Classify every cell of the snapshot and collect the forced-guess groups.

        Args:
            snapshot: Validated board snapshot.

        Returns:
            A DetectionReport whose groups are ordered by their lowest member
            and whose members are sorted by row, then column.
        """
        outcomes: Dict[Coord, CellOutcome] = {}
        levels: Dict[Coord, int] = {}

        # 1) Candidate filtering
        for coord in snapshot.all_coordinates():
            p = snapshot.probability_of(coord)
            level = self._level(p) if p is not None else None
            if level == 0:
                outcomes[coord] = CellOutcome.CERTAIN
            elif level is None:
                outcomes[coord] = CellOutcome.UNCERTAIN
            else:
                levels[coord] = level

        # 2) Adjacency grouping and 3) validation, in sorted traversal order
        groups: List[CellGroup] = []
        rejected: List[CellGroup] = []
        visited: Set[Coord] = set()

        for coord in snapshot.all_coordinates():
            if coord not in levels or coord in visited:
                continue

            level = levels[coord]
            component = self._component(snapshot, coord, levels, visited)
            members: CellGroup = tuple(sorted(component))

            if len(members) == 1:
                outcomes[coord] = CellOutcome.ISOLATED
            elif self._is_valid_group(snapshot, component, level):
                groups.append(members)
                for cell in members:
                    outcomes[cell] = CellOutcome.GROUPED
            else:
                logger.debug(
                    "Rejected component of %d cell(s) at level 1/%d starting at %s.",
                    len(members),
                    level,
                    members[0],
                )
                rejected.append(members)
                for cell in members:
                    outcomes[cell] = CellOutcome.REJECTED

        grouped_cells = [cell for group in groups for cell in group]
        assert len(grouped_cells) == len(set(grouped_cells)), "groups overlap"
        assert len(outcomes) == len(snapshot), "unclassified cells"

        logger.debug(
            "Detected %d group(s) among %d cell(s).", len(groups), len(snapshot)
        )
        return DetectionReport(groups=groups, outcomes=outcomes, rejected_components=rejected)

    def detect(self, snapshot: BoardSnapshot) -> List[CellGroup]:
        """Return the forced-guess groups of a snapshot, in deterministic order."""
        return self.report(snapshot).groups


def detect_5050_groups(
    raw: Mapping[str, Any], config: Optional[DetectorConfig] = None
) -> List[List[List[int]]]:
    """
    Validate a raw probability map and return its forced-guess groups.

    Args:
        raw: Mapping from "<row>,<col>" keys to mine probabilities.
        config: Detector tolerances; defaults to DetectorConfig().

    Returns:
        Groups as nested [row, col] lists. An empty list means no forced
        guess was found.

    Raises:
        FormatError: If the mapping violates the input contract. No partial
            result is returned.
    """
    snapshot = BoardSnapshot.build(raw)
    return PatternDetector(config).report(snapshot).to_list()


def find_5050_situations_from_dict(
    raw: Mapping[str, Any], config: Optional[DetectorConfig] = None
) -> List[List[int]]:
    """
    Flat variant of `detect_5050_groups`: every grouped cell as [row, col].

    Cells are listed group by group, in emission order.
    """
    return [cell for group in detect_5050_groups(raw, config) for cell in group]
