# forest_survey/pipeline.py
from contextlib import contextmanager
from dataclasses import dataclass, field

import pandas as pd

from .config import *
from .data import build_view, load_survey, set_nominal, split_indices
from .errors import SurveyError
from .evaluate import evaluate
from .models import MODEL_NAMES, ModelKind, train
from .selection import best_subsets


@dataclass
class SurveyResults:
    raw: pd.DataFrame
    views: dict
    train_idx: object
    test_idx: object
    settings: dict
    explanatory: dict = field(default_factory=dict)   # (kind, view) -> full-view model
    predictive: dict = field(default_factory=dict)    # (kind, view) -> training-rows model
    evaluations: dict = field(default_factory=dict)   # (kind, view) -> Evaluation
    subsets: dict = field(default_factory=dict)       # view -> best-subset table


@contextmanager
def _step(name):
    # Tags the failing step on the error and lets it propagate
    try:
        yield
    except SurveyError as e:
        if e.step is None:
            e.step = name
        raise


def run_pipeline(csv_path=DATA_FILENAME, train_fraction=TRAIN_FRACTION, seed=RANDOM_STATE,
                 n_estimators=N_ESTIMATORS, threshold=DECISION_THRESHOLD, kinds=tuple(ModelKind),
                 explanatory=True, selection=True, raw=None):
    """
    Loader -> Typer -> Splitter -> (Trainer -> Evaluator) for every model kind
    and view -> best-subset search.

    Pass ``raw`` to skip reading ``csv_path``. Any SurveyError aborts the run
    with ``err.step`` naming the step that failed.
    """
    settings = {
        'csv_path': csv_path if raw is None else None,
        'train_fraction': train_fraction,
        'seed': seed,
        'n_estimators': n_estimators,
        'threshold': threshold,
    }

    with _step("load"):
        if raw is None:
            raw = load_survey(csv_path)

    with _step("type"):
        views = {name: set_nominal(build_view(raw, name)) for name in VIEWS}

    with _step("split"):
        train_idx, test_idx = split_indices(len(raw), train_fraction, seed)

    results = SurveyResults(raw=raw, views=views, train_idx=train_idx, test_idx=test_idx, settings=settings)
    params = {'seed': seed, 'n_estimators': n_estimators}

    for view_name, view in views.items():
        for kind in kinds:
            kind = ModelKind(kind)
            key = (kind, view_name)

            if explanatory:
                with _step(f"train {kind.value} on the full {view_name} view"):
                    results.explanatory[key] = train(view, kind, view_name=view_name, **params)

            with _step(f"train {kind.value} on the {view_name} training rows"):
                model = train(view, kind, train_idx, view_name=view_name, **params)
                results.predictive[key] = model

            with _step(f"evaluate {kind.value} on the {view_name} test rows"):
                results.evaluations[key] = evaluate(model, view, test_idx, threshold, view_name)

        if selection:
            with _step(f"best subsets on the {view_name} view"):
                results.subsets[view_name] = best_subsets(view, max_rows=None)

    return results


def accuracy_table(evaluations):
    rows = []
    for (kind, view_name), ev in evaluations.items():
        rows.append({
            'Model': MODEL_NAMES[kind],
            'View': view_name,
            'Accuracy': ev.accuracy,
            'Test Rows': len(ev.actual),
        })
    return pd.DataFrame(rows)
