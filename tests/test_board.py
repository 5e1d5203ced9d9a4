import json
import math

import numpy as np
import pytest

from minesweeper_5050 import (
    BoardSnapshot,
    FormatError,
    FormatErrorKind,
    MalformedKeyError,
    OutOfRangeError,
    format_coordinate,
    parse_coordinate,
    reject_duplicate_keys,
)


def test_parse_coordinate_accepts_canonical_keys() -> None:
    assert parse_coordinate("0,0") == (0, 0)
    assert parse_coordinate("12,305") == (12, 305)


@pytest.mark.parametrize(
    "key",
    ["abc", "", "1", "1,2,3", " 1,2", "1, 2", "1;2", "-1,2", "+1,2", "01,2", "1,02", "1.0,2", "١,٢"],
)
def test_parse_coordinate_rejects_malformed_keys(key: str) -> None:
    with pytest.raises(MalformedKeyError) as exc_info:
        parse_coordinate(key)
    assert exc_info.value.kind is FormatErrorKind.MALFORMED_KEY
    assert exc_info.value.key == key


def test_parse_coordinate_rejects_non_string_key() -> None:
    with pytest.raises(MalformedKeyError):
        parse_coordinate((0, 1))


def test_format_coordinate_matches_parse() -> None:
    assert format_coordinate((3, 14)) == "3,14"
    assert parse_coordinate(format_coordinate((7, 0))) == (7, 0)
    with pytest.raises(ValueError):
        format_coordinate((-1, 0))


def test_build_exposes_sorted_coordinates_and_probabilities() -> None:
    snapshot = BoardSnapshot.build({"2,0": 0.1, "0,1": 0.5, "0,0": 1.0, "1,5": 0})

    assert snapshot.all_coordinates() == ((0, 0), (0, 1), (1, 5), (2, 0))
    assert list(snapshot) == list(snapshot.all_coordinates())
    assert len(snapshot) == 4
    assert snapshot.probability_of((0, 1)) == 0.5
    assert snapshot.probability_of((1, 5)) == 0.0
    assert snapshot.probability_of((9, 9)) is None
    assert (2, 0) in snapshot
    assert (2, 1) not in snapshot
    assert (snapshot.rows, snapshot.cols) == (3, 6)


def test_neighbors_of_only_returns_present_cells_in_row_major_order() -> None:
    raw = {f"{r},{c}": 0.3 for r in range(3) for c in range(3)}
    del raw["0,1"]
    snapshot = BoardSnapshot.build(raw)

    assert snapshot.neighbors_of((1, 1)) == (
        (0, 0), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1), (2, 2)
    )
    assert snapshot.neighbors_of((0, 0)) == ((1, 0), (1, 1))
    # Queries for absent cells still see their present neighbors.
    assert snapshot.neighbors_of((0, 1)) == ((0, 0), (0, 2), (1, 0), (1, 1), (1, 2))


def test_empty_snapshot() -> None:
    snapshot = BoardSnapshot.build({})

    assert len(snapshot) == 0
    assert snapshot.all_coordinates() == ()
    assert (snapshot.rows, snapshot.cols) == (0, 0)
    assert snapshot.to_grid().shape == (0, 0)


@pytest.mark.parametrize("value", [-0.1, 1.2, float("nan"), float("inf"), "0.5", None, True])
def test_build_rejects_out_of_range_values(value: object) -> None:
    with pytest.raises(OutOfRangeError) as exc_info:
        BoardSnapshot.build({"0,0": 0.5, "0,1": value})
    err = exc_info.value
    assert err.kind is FormatErrorKind.OUT_OF_RANGE
    assert err.key == "0,1"


def test_build_accepts_bounds_and_numpy_scalars() -> None:
    snapshot = BoardSnapshot.build({"0,0": 0, "0,1": 1, "0,2": np.float32(0.5)})
    assert snapshot.probability_of((0, 2)) == 0.5


def test_build_rejects_malformed_key() -> None:
    with pytest.raises(MalformedKeyError):
        BoardSnapshot.build({"0,0": 0.5, "abc": 0.5})


def test_format_errors_are_value_errors_with_serializable_details() -> None:
    with pytest.raises(FormatError) as exc_info:
        BoardSnapshot.build({"abc": 0.5})

    assert isinstance(exc_info.value, ValueError)
    details = exc_info.value.to_dict()
    assert details["kind"] == "MALFORMED_KEY"
    assert details["key"] == "abc"
    assert "abc" in details["message"]


def test_snapshot_is_read_only() -> None:
    raw = {"0,0": 0.5}
    snapshot = BoardSnapshot.build(raw)
    raw["0,0"] = 0.9

    assert snapshot.probability_of((0, 0)) == 0.5
    with pytest.raises(TypeError):
        snapshot._probabilities[(0, 0)] = 0.1  # type: ignore[index]


def test_from_grid_skips_nan_cells() -> None:
    grid = np.array([[0.5, np.nan], [np.nan, 0.25]])
    snapshot = BoardSnapshot.from_grid(grid)

    assert snapshot.all_coordinates() == ((0, 0), (1, 1))
    assert snapshot.probability_of((1, 1)) == 0.25


def test_from_grid_accepts_nested_lists_with_none() -> None:
    snapshot = BoardSnapshot.from_grid([[None, 1.0], [0.0, None]])
    assert snapshot.all_coordinates() == ((0, 1), (1, 0))


def test_from_grid_validates_shape_and_range() -> None:
    with pytest.raises(ValueError):
        BoardSnapshot.from_grid([0.5, 0.5])
    with pytest.raises(OutOfRangeError) as exc_info:
        BoardSnapshot.from_grid([[0.5, 1.5]])
    assert exc_info.value.key == "0,1"


def test_to_grid_and_to_dict_round_trip() -> None:
    raw = {"0,0": 0.5, "1,2": 0.75}
    snapshot = BoardSnapshot.build(raw)

    grid = snapshot.to_grid()
    assert grid.shape == (2, 3)
    assert grid[0, 0] == 0.5
    assert grid[1, 2] == 0.75
    assert math.isnan(grid[0, 1])

    assert snapshot.to_dict() == raw
    assert BoardSnapshot.build(snapshot.to_dict()).items() == snapshot.items()
    assert BoardSnapshot.from_grid(grid).items() == snapshot.items()


def test_extent_is_read_only() -> None:
    snapshot = BoardSnapshot.build({"2,3": 0.5})

    with pytest.raises(AttributeError):
        snapshot.rows = 10  # type: ignore[misc]
    with pytest.raises(AttributeError):
        snapshot.cols = 10  # type: ignore[misc]
    assert (snapshot.rows, snapshot.cols) == (3, 4)


def test_dense_grid_is_capped_for_far_away_keys() -> None:
    snapshot = BoardSnapshot.build({"0,0": 0.5, "100000,100000": 0.5})

    with pytest.raises(ValueError):
        snapshot.check_grid_size()
    with pytest.raises(ValueError):
        snapshot.to_grid()
    assert snapshot.to_dict() == {"0,0": 0.5, "100000,100000": 0.5}


def test_reject_duplicate_keys_hook() -> None:
    assert json.loads('{"0,0": 0.5, "0,1": 0.25}', object_pairs_hook=reject_duplicate_keys) == {
        "0,0": 0.5,
        "0,1": 0.25,
    }
    with pytest.raises(MalformedKeyError) as exc_info:
        json.loads('{"0,0": 0.5, "0,0": 0.5}', object_pairs_hook=reject_duplicate_keys)
    assert exc_info.value.key == "0,0"
