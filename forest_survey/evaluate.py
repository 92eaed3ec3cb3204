# forest_survey/evaluate.py
from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.api as sm
from sklearn.metrics import confusion_matrix as sk_confusion_matrix

from .config import *
from .data import feature_domain, label_levels, subset
from .errors import FeatureMismatchError, LabelMismatchError
from .models import ModelKind, design_matrix


@dataclass
class Evaluation:
    kind: ModelKind
    view_name: str
    predicted: np.ndarray
    actual: np.ndarray
    confusion: pd.DataFrame  # rows = predicted, columns = actual
    accuracy: float
    scores: np.ndarray = None  # P(Forest present) for the logistic model


# ==========================================
# CONFUSION MATRIX / ACCURACY
# ==========================================
def confusion_matrix(predicted, actual, labels=LABELS):
    """
    2x2 (predicted x actual) table of counts over the given label domain.

    Any predicted or actual value outside ``labels`` raises
    LabelMismatchError instead of being dropped from the count.
    """
    labels = [str(label) for label in labels]
    predicted = np.asarray(predicted).astype(str)
    actual = np.asarray(actual).astype(str)

    unknown = sorted(set(predicted) - set(labels))
    if unknown:
        raise LabelMismatchError(f"Predicted label(s) {unknown} are not in the label domain {labels}")
    unknown = sorted(set(actual) - set(labels))
    if unknown:
        raise LabelMismatchError(f"True label(s) {unknown} are not in the label domain {labels}")

    # sklearn counts actual x predicted
    counts = sk_confusion_matrix(actual, predicted, labels=labels).T
    return pd.DataFrame(
        counts,
        index=pd.Index(labels, name="Predicted"),
        columns=pd.Index(labels, name="Actual"),
    )


def accuracy(confusion):
    total = confusion.to_numpy().sum()
    if total == 0:
        raise ValueError("Accuracy of an empty confusion matrix is undefined")
    return float(np.trace(confusion.to_numpy()) / total)


# ==========================================
# PREDICTION (one routine per model kind)
# ==========================================
def _predict_logistic(model, X, threshold):
    X = sm.add_constant(X, has_constant='add')
    probs = np.asarray(model.estimator.predict(X[model.design_columns]), dtype=float)
    labels = np.where(probs > threshold, POSITIVE_LABEL, NEGATIVE_LABEL)
    return labels, probs


def _predict_tree(model, X, threshold):
    return np.asarray(model.estimator.predict(X[model.design_columns])).astype(str), None


def _majority_vote(forest, values):
    # Member trees predict class indices; ties go to the first class
    votes = np.zeros((len(values), len(forest.classes_)), dtype=int)
    rows = np.arange(len(values))
    for member in forest.estimators_:
        votes[rows, member.predict(values).astype(int)] += 1
    return forest.classes_[np.argmax(votes, axis=1)]


def _predict_forest(model, X, threshold):
    values = X[model.design_columns].to_numpy(dtype=float)
    return np.asarray(_majority_vote(model.estimator, values)).astype(str), None


_PREDICTORS = {
    ModelKind.LOGISTIC: _predict_logistic,
    ModelKind.TREE: _predict_tree,
    ModelKind.FOREST: _predict_forest,
}


def check_view(model, view, view_name=None):
    """
    Refuses a view whose columns or nominal levels differ from the model's
    training view (FeatureMismatchError), or whose Forest levels differ from
    the labels the model predicts (LabelMismatchError).
    """
    missing = [c for c in VIEW_COLUMNS if c not in view.columns]
    if missing:
        raise FeatureMismatchError(f"View is missing column(s) {missing}")

    if view_name is not None and model.view_name is not None and view_name != model.view_name:
        raise FeatureMismatchError(
            f"{model.name} was trained on the {model.view_name} view, not the {view_name} view"
        )

    domain = feature_domain(view)
    for col, levels in model.domain.items():
        if domain.get(col) != levels:
            raise FeatureMismatchError(
                f"{model.name} ({model.view_name}) expects '{col}' levels {levels}, "
                f"view has {domain.get(col)}"
            )

    labels = label_levels(view)
    if labels != model.labels:
        raise LabelMismatchError(
            f"{model.name} predicts labels {model.labels}, view's label domain is {labels}"
        )


def predict(model, rows, threshold=DECISION_THRESHOLD):
    """Labels (and logistic probabilities) for already-validated rows."""
    drop_first = model.kind is ModelKind.LOGISTIC
    X = design_matrix(rows, model.domain, drop_first=drop_first)
    expected = [c for c in model.design_columns if c != 'const']
    if list(X.columns) != expected:
        raise FeatureMismatchError(f"Design columns {list(X.columns)} differ from {expected}")
    return _PREDICTORS[model.kind](model, X, threshold)


def evaluate(model, view, test_idx, threshold=DECISION_THRESHOLD, view_name=None):
    """
    Scores a trained model on the held-out rows of its own view.

    The logistic model's probability is turned into a label with
    ``p > threshold`` -> "1" (Forest present); tree and forest models emit
    labels directly.
    """
    check_view(model, view, view_name)
    rows = subset(view, test_idx)

    predicted, scores = predict(model, rows, threshold)
    actual = rows[COL_FOREST].astype(str).to_numpy()

    cm = confusion_matrix(predicted, actual, labels=label_levels(view))
    return Evaluation(
        kind=model.kind,
        view_name=model.view_name,
        predicted=predicted,
        actual=actual,
        confusion=cm,
        accuracy=accuracy(cm),
        scores=scores,
    )
