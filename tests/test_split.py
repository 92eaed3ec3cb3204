import numpy as np
import pytest

from forest_survey.data import split_indices, subset


@pytest.mark.parametrize("n_rows", [10, 97, 500])
def test_partition_is_disjoint_and_exhaustive(n_rows):
    train_idx, test_idx = split_indices(n_rows, 0.7, seed=123)
    assert len(np.intersect1d(train_idx, test_idx)) == 0
    assert np.array_equal(np.sort(np.concatenate([train_idx, test_idx])), np.arange(n_rows))
    assert len(train_idx) == int(np.floor(0.7 * n_rows + 0.5))


def test_same_seed_same_partition():
    first = split_indices(250, 0.7, seed=123)
    second = split_indices(250, 0.7, seed=123)
    assert np.array_equal(first[0], second[0])
    assert np.array_equal(first[1], second[1])


def test_seed_changes_partition():
    a, _ = split_indices(250, 0.7, seed=123)
    b, _ = split_indices(250, 0.7, seed=124)
    assert not np.array_equal(a, b)


def test_half_rounds_up():
    train_idx, test_idx = split_indices(10, 0.75, seed=1)
    assert len(train_idx) == 8
    assert len(test_idx) == 2


@pytest.mark.parametrize("fraction", [0.0, 1.0, 0.01])
def test_empty_side_rejected(fraction):
    with pytest.raises(ValueError):
        split_indices(10, fraction)


def test_views_split_row_for_row(views, split):
    train_idx, test_idx = split
    v4, v8 = views["4-class"], views["8-class"]
    assert subset(v4, test_idx).index.equals(subset(v8, test_idx).index)
    assert subset(v4, train_idx)["Gradient"].equals(subset(v8, train_idx)["Gradient"])
