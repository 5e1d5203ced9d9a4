"""Rendering, summary and benchmarking tools for the 50/50 detector."""

import string
from typing import Dict, List, Optional, Sequence, Set, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.patches import Rectangle

from .board import BoardSnapshot
from .detector import (
    DEFAULT_EPSILON,
    CellGroup,
    CellOutcome,
    DetectionReport,
    DetectorConfig,
    PatternDetector,
)
from .utils import Coord, adjacent_coordinates

_GROUP_LABELS = string.ascii_uppercase + string.ascii_lowercase


def format_probability_map(
    snapshot: BoardSnapshot,
    groups: Sequence[CellGroup] = (),
    *,
    show_coords: bool = True,
    epsilon: float = DEFAULT_EPSILON,
) -> str:
    """
    Format a snapshot (and optionally detected groups) as a text grid.

    Args:
        snapshot: Snapshot to display.
        groups: Groups to label; members are shown as the group's letter.
        show_coords: If True, include column and row labels.
        epsilon: Tolerance used to display certain cells.

    Returns:
        A text grid where absent cells are '.', certain mines 'M', certain
        safe cells 'S', and other cells their probability in percent.

    Raises:
        ValueError: If the board extent is too large to render densely.
    """
    snapshot.check_grid_size()

    labels: Dict[Coord, str] = {}
    for i, group in enumerate(groups):
        for cell in group:
            labels[cell] = _GROUP_LABELS[i % len(_GROUP_LABELS)]

    def cell_str(row: int, col: int) -> str:
        coord = (row, col)
        if coord in labels:
            return f" {labels[coord]}"
        p = snapshot.probability_of(coord)
        if p is None:
            return " ."
        if p >= 1.0 - epsilon:
            return " M"
        if p <= epsilon:
            return " S"
        return f"{min(99, int(round(p * 100))):2d}"

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{c:2d}" for c in range(snapshot.cols))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * snapshot.cols - 1))

    for r in range(snapshot.rows):
        row = " ".join(cell_str(r, c) for c in range(snapshot.cols))
        lines.append(f"{r:2d} |" + row if show_coords else row)

    return "\n".join(lines)


def summarize_detection(report: DetectionReport) -> Dict[str, int]:
    """
    Count cells per outcome and groups per size.

    Returns:
        Dict with one key per CellOutcome value plus "cells", "groups",
        "pairs", "larger_groups" and "rejected_components".
    """
    counts: Dict[str, int] = {outcome.value: 0 for outcome in CellOutcome}
    for outcome in report.outcomes.values():
        counts[outcome.value] += 1

    counts["cells"] = len(report.outcomes)
    counts["groups"] = len(report.groups)
    counts["pairs"] = sum(1 for g in report.groups if len(g) == 2)
    counts["larger_groups"] = counts["groups"] - counts["pairs"]
    counts["rejected_components"] = len(report.rejected_components)
    return counts


def plot_probability_map(
    snapshot: BoardSnapshot,
    groups: Sequence[CellGroup] = (),
    *,
    ax: Optional[Axes] = None,
    title: str = "Mine probabilities",
) -> Axes:
    """
    Draw the snapshot as a heatmap and outline each detected group.

    Absent cells are left blank. Returns the Axes drawn on.

    Raises:
        ValueError: If the board extent is too large to render densely.
    """
    grid = np.ma.masked_invalid(snapshot.to_grid())

    if ax is None:
        _, ax = plt.subplots()  # type: ignore[misc]

    image = ax.imshow(grid, cmap="RdYlGn_r", vmin=0.0, vmax=1.0)  # type: ignore[misc]
    ax.figure.colorbar(image, ax=ax, label="P(mine)")  # type: ignore[misc]

    colors = plt.rcParams["axes.prop_cycle"].by_key()["color"]
    for i, group in enumerate(groups):
        color = colors[i % len(colors)]
        for row, col in group:
            ax.add_patch(
                Rectangle(
                    (col - 0.5, row - 0.5),
                    1.0,
                    1.0,
                    fill=False,
                    edgecolor=color,
                    linewidth=2.5,
                )
            )

    ax.set_title(title)
    ax.set_xlabel("column")
    ax.set_ylabel("row")
    return ax


def generate_probability_map(
    rows: int,
    cols: int,
    pairs: int,
    *,
    opened_fraction: float = 0.3,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[BoardSnapshot, List[CellGroup]]:
    """
    Build a random snapshot with planted, non-touching 50/50 pairs.

    Background cells are opened (absent), certain, or drawn from (0.55, 0.95),
    which never matches a 1/k level, so only planted pairs are detectable.

    Args:
        rows: Board height, must be > 0.
        cols: Board width, must be > 0.
        pairs: Number of pairs to try to plant, must be >= 0.
        opened_fraction: Fraction of cells left out of the snapshot.
        rng: Random generator (numpy.random.default_rng() if None).

    Returns:
        The snapshot and the planted groups (sorted). Fewer than `pairs`
        groups are planted when the board runs out of room.

    Raises:
        ValueError: If dimensions or counts are invalid.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError("rows and cols must be positive.")
    if pairs < 0:
        raise ValueError("pairs must be non-negative.")
    if not 0.0 <= opened_fraction < 1.0:
        raise ValueError("opened_fraction must be in [0, 1).")

    rng = rng if rng is not None else np.random.default_rng()

    grid = rng.uniform(0.55, 0.95, size=(rows, cols))
    certain = rng.random((rows, cols)) < 0.2
    grid[certain] = rng.integers(0, 2, size=int(certain.sum()))
    grid[rng.random((rows, cols)) < opened_fraction] = np.nan

    planted: List[CellGroup] = []
    blocked: Set[Coord] = set()
    attempts = 0
    while len(planted) < pairs and attempts < 50 * max(pairs, 1):
        attempts += 1
        r = int(rng.integers(0, rows))
        c = int(rng.integers(0, cols))
        dr, dc = ((0, 1), (1, 0))[int(rng.integers(0, 2))]
        first, second = (r, c), (r + dr, c + dc)
        if second[0] >= rows or second[1] >= cols:
            continue
        if first in blocked or second in blocked:
            continue

        grid[first] = 0.5
        grid[second] = 0.5
        planted.append((first, second))
        for cell in (first, second):
            blocked.add(cell)
            blocked.update(adjacent_coordinates(cell))

    return BoardSnapshot.from_grid(grid), sorted(planted)


def run_detection_benchmark(
    rows: int,
    cols: int,
    pairs: int,
    runs: int,
    *,
    config: Optional[DetectorConfig] = None,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Plant random pairs many times and measure how well the detector finds them.

    Returns:
        Dict with keys:
        - avg_planted, avg_detected: average group counts per run
        - recall: fraction of planted groups detected
        - precision: fraction of detected groups that were planted
        - false_positives: total detected groups that were not planted
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = np.random.default_rng(seed)
    detector = PatternDetector(config)

    total_planted = 0
    total_detected = 0
    true_positives = 0

    for _ in range(runs):
        snapshot, planted = generate_probability_map(rows, cols, pairs, rng=rng)
        detected = detector.detect(snapshot)

        planted_set = set(planted)
        total_planted += len(planted)
        total_detected += len(detected)
        true_positives += sum(1 for g in detected if g in planted_set)

    return {
        "avg_planted": total_planted / runs,
        "avg_detected": total_detected / runs,
        "recall": (true_positives / total_planted) if total_planted > 0 else 1.0,
        "precision": (true_positives / total_detected) if total_detected > 0 else 1.0,
        "false_positives": float(total_detected - true_positives),
    }
