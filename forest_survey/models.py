# forest_survey/models.py
import os
import warnings
from dataclasses import dataclass
from enum import Enum

import joblib
import numpy as np
import pandas as pd
import statsmodels.api as sm
from sklearn.ensemble import RandomForestClassifier
from sklearn.tree import DecisionTreeClassifier
from statsmodels.tools.sm_exceptions import PerfectSeparationError, PerfectSeparationWarning

from .config import *
from .data import feature_domain, label_levels, subset
from .errors import FitError


class ModelKind(Enum):
    LOGISTIC = "logistic"
    TREE = "tree"
    FOREST = "forest"


MODEL_NAMES = {
    ModelKind.LOGISTIC: "Logistic GLM",
    ModelKind.TREE: "Classification Tree",
    ModelKind.FOREST: "Random Forest",
}


@dataclass
class TrainedModel:
    kind: ModelKind
    view_name: str
    estimator: object
    domain: dict             # nominal predictor -> levels seen by the view
    design_columns: list
    labels: list             # Forest levels of the training view
    n_train: int

    @property
    def name(self):
        return MODEL_NAMES[self.kind]


def design_matrix(frame, domain, drop_first):
    """
    Expands the nominal predictors into 0/1 columns.

    Every level of the categorical dtype gets a column whether or not it
    occurs in ``frame``, so train and test rows of one view always produce
    the same columns. With ``drop_first`` the first level is the reference.
    """
    return pd.get_dummies(frame[PREDICTORS], columns=list(domain), drop_first=drop_first, dtype=float)


def _check_training_rows(rows, domain):
    present = set(rows[COL_FOREST].astype(str))
    if len(present) < 2:
        raise FitError(f"Training rows hold only label(s) {sorted(present)}; both classes are needed")

    for col, levels in domain.items():
        seen = set(rows[col].astype(str))
        absent = [level for level in levels if level not in seen]
        if absent:
            raise FitError(f"Level(s) {absent} of '{col}' do not occur in the training rows")


# ==========================================
# FITTING ROUTINES
# ==========================================
def fit_glm(y, X, what="Logistic GLM", maxiter=100):
    """
    Binomial GLM fit that raises FitError instead of returning an
    unidentified model.

    statsmodels only warns on perfect separation, so the warning is turned
    into an error for the duration of the fit.
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", PerfectSeparationWarning)
            result = sm.GLM(y, X, family=sm.families.Binomial()).fit(maxiter=maxiter)
    except PerfectSeparationWarning as e:
        raise FitError(f"{what} could not be fitted: perfect separation ({e})") from e
    except (np.linalg.LinAlgError, PerfectSeparationError, ValueError) as e:
        raise FitError(f"{what} could not be fitted: {e}") from e

    if not getattr(result, 'converged', True):
        raise FitError(f"{what} did not converge")
    return result


def tree_ccp_alpha(y, cp=TREE_CP):
    """
    Maps a recursive-partitioning complexity parameter onto scikit-learn's
    ``ccp_alpha``: cp is relative to the root node, so it is scaled by the
    Gini impurity of the training labels.
    """
    _, counts = np.unique(np.asarray(y), return_counts=True)
    p = counts / counts.sum()
    return float(cp * (1.0 - np.sum(p ** 2)))


def _fit_logistic(rows, domain, params):
    X = sm.add_constant(design_matrix(rows, domain, drop_first=True), has_constant='add')
    y = (rows[COL_FOREST].astype(str) == POSITIVE_LABEL).astype(int)

    result = fit_glm(y, X, maxiter=params.get('maxiter', 100))
    return result, list(X.columns)


def _fit_tree(rows, domain, params):
    X = design_matrix(rows, domain, drop_first=False)
    y = rows[COL_FOREST].astype(str).to_numpy()

    tree = DecisionTreeClassifier(
        min_samples_split=params.get('min_samples_split', TREE_MIN_SAMPLES_SPLIT),
        min_samples_leaf=params.get('min_samples_leaf', TREE_MIN_SAMPLES_LEAF),
        max_depth=params.get('max_depth', TREE_MAX_DEPTH),
        ccp_alpha=tree_ccp_alpha(y, params.get('cp', TREE_CP)),
        random_state=params.get('seed', RANDOM_STATE),
    )
    tree.fit(X, y)
    return tree, list(X.columns)


def _fit_forest(rows, domain, params):
    X = design_matrix(rows, domain, drop_first=False)
    y = rows[COL_FOREST].astype(str).to_numpy()

    forest = RandomForestClassifier(
        n_estimators=params.get('n_estimators', N_ESTIMATORS),
        max_features='sqrt',
        bootstrap=True,
        oob_score=True,
        random_state=params.get('seed', RANDOM_STATE),
    )
    forest.fit(X, y)
    return forest, list(X.columns)


_FITTERS = {
    ModelKind.LOGISTIC: _fit_logistic,
    ModelKind.TREE: _fit_tree,
    ModelKind.FOREST: _fit_forest,
}


def train(view, kind, train_idx=None, view_name=None, **params):
    """
    Fits one model kind to a typed view.

    With ``train_idx=None`` the whole view is used (explanatory fit),
    otherwise only the training rows (predictive fit). Recognised params:
    ``seed``, ``n_estimators``, ``min_samples_split``, ``min_samples_leaf``,
    ``max_depth``, ``cp``, ``maxiter``.
    """
    kind = ModelKind(kind)
    domain = feature_domain(view)
    labels = label_levels(view)
    rows = view if train_idx is None else subset(view, train_idx)

    _check_training_rows(rows, domain)
    estimator, columns = _FITTERS[kind](rows, domain, params)

    return TrainedModel(
        kind=kind,
        view_name=view_name,
        estimator=estimator,
        domain=domain,
        design_columns=columns,
        labels=labels,
        n_train=len(rows),
    )


# ==========================================
# ARTIFACTS
# ==========================================
def model_filename(model):
    view = (model.view_name or "view").replace(" ", "_")
    return MODEL_FILENAME.format(kind=model.kind.value, view=view)


def save_models(models, directory=MODEL_DIR):
    os.makedirs(directory, exist_ok=True)
    paths = []
    for model in models:
        path = os.path.join(directory, model_filename(model))
        joblib.dump(model, path)
        paths.append(path)
    return paths


def load_model(path):
    return joblib.load(path)
