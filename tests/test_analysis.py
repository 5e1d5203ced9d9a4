import matplotlib.pyplot as plt
import numpy as np
import pytest

from minesweeper_5050 import (
    BoardSnapshot,
    PatternDetector,
    format_probability_map,
    generate_probability_map,
    plot_probability_map,
    run_detection_benchmark,
    summarize_detection,
)


def make_snapshot() -> BoardSnapshot:
    return BoardSnapshot.build({
        "0,0": 0.5, "0,1": 0.5, "0,2": 0.0,
        "1,0": 1.0, "1,2": 0.25,
    })


def test_format_probability_map_labels_groups() -> None:
    snapshot = make_snapshot()
    groups = PatternDetector().detect(snapshot)

    text = format_probability_map(snapshot, groups, show_coords=False)

    assert text.splitlines() == [
        " A  A  S",
        " M  . 25",
    ]


def test_format_probability_map_with_coords() -> None:
    lines = format_probability_map(make_snapshot()).splitlines()

    assert lines[0] == "    0  1  2"
    assert lines[1] == "   " + "-" * 8
    assert lines[2] == " 0 |50 50  S"
    assert lines[3] == " 1 | M  . 25"


def test_summarize_detection_counts_outcomes() -> None:
    raw = {
        "0,0": 0.5, "0,1": 0.5,
        "2,0": 0.5,
        "4,0": 0.5, "4,1": 0.5, "4,2": 0.5,
        "6,0": 1 / 3, "6,1": 1 / 3, "7,0": 1 / 3,
        "9,9": 0.0, "9,8": 0.7,
    }
    report = PatternDetector().report(BoardSnapshot.build(raw))

    assert summarize_detection(report) == {
        "certain": 1,
        "uncertain": 1,
        "isolated": 1,
        "rejected": 3,
        "grouped": 5,
        "cells": 11,
        "groups": 2,
        "pairs": 1,
        "larger_groups": 1,
        "rejected_components": 1,
    }


def test_plot_probability_map_outlines_group_cells() -> None:
    snapshot = make_snapshot()
    groups = PatternDetector().detect(snapshot)

    fig, ax = plt.subplots()
    returned = plot_probability_map(snapshot, groups, ax=ax)

    assert returned is ax
    assert len(ax.patches) == 2
    assert ax.get_title() == "Mine probabilities"
    plt.close(fig)


def test_plot_probability_map_creates_axes() -> None:
    ax = plot_probability_map(make_snapshot())
    assert len(ax.images) == 1
    plt.close(ax.figure)


def test_generate_probability_map_plants_detectable_pairs() -> None:
    rng = np.random.default_rng(7)
    snapshot, planted = generate_probability_map(10, 12, 4, rng=rng)

    assert 0 < len(planted) <= 4
    for group in planted:
        for cell in group:
            assert snapshot.probability_of(cell) == 0.5
    assert PatternDetector().detect(snapshot) == planted


def test_generate_probability_map_validates_arguments() -> None:
    with pytest.raises(ValueError):
        generate_probability_map(0, 5, 1)
    with pytest.raises(ValueError):
        generate_probability_map(5, 5, -1)
    with pytest.raises(ValueError):
        generate_probability_map(5, 5, 1, opened_fraction=1.0)


def test_run_detection_benchmark_is_exact_on_planted_maps() -> None:
    results = run_detection_benchmark(9, 9, 3, 20, seed=1)

    assert results["recall"] == 1.0
    assert results["precision"] == 1.0
    assert results["false_positives"] == 0.0
    assert results["avg_planted"] == results["avg_detected"]


def test_run_detection_benchmark_requires_runs() -> None:
    with pytest.raises(ValueError):
        run_detection_benchmark(9, 9, 3, 0)


def test_renderers_refuse_oversized_boards() -> None:
    snapshot = BoardSnapshot.build({"0,0": 0.5, "0,1": 0.5, "5000,5000": 0.9})

    with pytest.raises(ValueError):
        format_probability_map(snapshot)
    with pytest.raises(ValueError):
        plot_probability_map(snapshot)
    # Detection itself does not depend on the extent.
    assert PatternDetector().detect(snapshot) == [((0, 0), (0, 1))]
