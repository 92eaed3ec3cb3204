import numpy as np
import pandas as pd
import pytest

from forest_survey.config import *
from forest_survey.errors import LabelMismatchError
from forest_survey.evaluate import accuracy, confusion_matrix, evaluate
from forest_survey.models import ModelKind, train


def test_confusion_matrix_is_predicted_by_actual():
    predicted = ["1", "1", "0", "0", "1"]
    actual = ["1", "0", "0", "1", "1"]
    cm = confusion_matrix(predicted, actual)

    assert cm.index.name == "Predicted"
    assert cm.columns.name == "Actual"
    assert cm.loc["1", "1"] == 2
    assert cm.loc["1", "0"] == 1
    assert cm.loc["0", "0"] == 1
    assert cm.loc["0", "1"] == 1
    assert cm.to_numpy().sum() == len(actual)
    assert accuracy(cm) == pytest.approx(0.6)


def test_perfect_predictions():
    labels = np.array(["0", "1", "1", "0"])
    assert accuracy(confusion_matrix(labels, labels)) == 1.0

    off_by_one = labels.copy()
    off_by_one[0] = "1"
    assert accuracy(confusion_matrix(off_by_one, labels)) < 1.0


def test_unknown_predicted_label():
    with pytest.raises(LabelMismatchError, match="Predicted"):
        confusion_matrix(["0", "yes"], ["0", "1"])


def test_unknown_true_label():
    with pytest.raises(LabelMismatchError, match="True"):
        confusion_matrix(["0", "1"], ["0", "2"])


def test_empty_matrix_has_no_accuracy():
    empty = pd.DataFrame(np.zeros((2, 2), dtype=int), index=["0", "1"], columns=["0", "1"])
    with pytest.raises(ValueError):
        accuracy(empty)


def test_view_with_narrower_label_domain(views, split):
    train_idx, _ = split
    model = train(views["4-class"], ModelKind.TREE, train_idx, view_name="4-class")

    view = views["4-class"]
    absent = view[view[COL_FOREST].astype(str) == NEGATIVE_LABEL].reset_index(drop=True)
    absent[COL_FOREST] = pd.Categorical(absent[COL_FOREST].astype(str), categories=[NEGATIVE_LABEL])

    with pytest.raises(LabelMismatchError, match="label domain"):
        evaluate(model, absent, np.arange(len(absent)), view_name="4-class")
