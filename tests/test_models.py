import numpy as np
import pytest

from forest_survey.config import *
from forest_survey.data import set_nominal
from forest_survey.errors import DataFormatError, FeatureMismatchError, FitError
from forest_survey.evaluate import evaluate
from forest_survey.models import ModelKind, load_model, save_models, train, tree_ccp_alpha
from forest_survey.selection import best_subsets


@pytest.fixture(scope="module")
def trained(views, split):
    train_idx, _ = split
    return {
        (kind, name): train(view, kind, train_idx, view_name=name, n_estimators=100)
        for name, view in views.items()
        for kind in ModelKind
    }


@pytest.mark.parametrize("kind", list(ModelKind))
@pytest.mark.parametrize("view_name", list(VIEWS))
def test_train_and_evaluate(trained, views, split, kind, view_name):
    _, test_idx = split
    model = trained[(kind, view_name)]
    ev = evaluate(model, views[view_name], test_idx, view_name=view_name)

    assert model.n_train == len(split[0])
    assert ev.confusion.shape == (2, 2)
    assert ev.confusion.to_numpy().sum() == len(test_idx)
    assert 0.0 <= ev.accuracy <= 1.0
    assert set(ev.predicted) <= set(LABELS)
    # The example survey carries a strong signal
    assert ev.accuracy > 0.6


def test_logistic_threshold(trained, views, split):
    _, test_idx = split
    model = trained[(ModelKind.LOGISTIC, "4-class")]

    ev = evaluate(model, views["4-class"], test_idx)
    assert ev.scores is not None
    assert np.array_equal(ev.predicted == POSITIVE_LABEL, ev.scores > DECISION_THRESHOLD)

    everything = evaluate(model, views["4-class"], test_idx, threshold=0.0)
    assert set(everything.predicted) == {POSITIVE_LABEL}


def test_model_not_applied_to_other_view(trained, views, split):
    _, test_idx = split
    model = trained[(ModelKind.TREE, "8-class")]
    with pytest.raises(FeatureMismatchError):
        evaluate(model, views["4-class"], test_idx)
    with pytest.raises(FeatureMismatchError):
        evaluate(trained[(ModelKind.FOREST, "4-class")], views["4-class"], test_idx, view_name="8-class")


def test_level_absent_from_training_rows(views):
    view = views["4-class"].copy()
    view[COL_TPI] = view[COL_TPI].astype(str)
    view.loc[0, COL_TPI] = "99"
    view = set_nominal(view)

    with pytest.raises(FitError, match="TPI"):
        train(view, ModelKind.LOGISTIC, np.arange(1, len(view)), view_name="4-class")


def test_single_class_training_rows(views):
    view = views["4-class"]
    present = np.flatnonzero(view[COL_FOREST].astype(str).to_numpy() == POSITIVE_LABEL)
    with pytest.raises(FitError, match="both classes"):
        train(view, ModelKind.TREE, present)


def test_untyped_view(views):
    view = views["4-class"].astype({COL_TPI: str})
    with pytest.raises(DataFormatError):
        train(view, ModelKind.FOREST)


def test_explanatory_fit_uses_every_row(views):
    model = train(views["8-class"], ModelKind.LOGISTIC, view_name="8-class")
    assert model.n_train == len(views["8-class"])
    assert model.design_columns[0] == 'const'


def test_saved_model_predicts_the_same(trained, views, split, tmp_path):
    _, test_idx = split
    model = trained[(ModelKind.FOREST, "8-class")]
    (path,) = save_models([model], str(tmp_path))

    reloaded = load_model(path)
    assert reloaded.kind is ModelKind.FOREST
    before = evaluate(model, views["8-class"], test_idx)
    after = evaluate(reloaded, views["8-class"], test_idx)
    assert np.array_equal(before.predicted, after.predicted)


def test_tree_is_pruned_by_complexity(views, split):
    train_idx, _ = split
    view = views["4-class"]
    pruned = train(view, ModelKind.TREE, train_idx, view_name="4-class")
    grown = train(view, ModelKind.TREE, train_idx, view_name="4-class", cp=0.0)

    y = view[COL_FOREST].astype(str).to_numpy()[train_idx]
    p = np.mean(y == POSITIVE_LABEL)
    assert pruned.estimator.ccp_alpha == pytest.approx(TREE_CP * 2 * p * (1 - p))
    assert grown.estimator.ccp_alpha == 0.0
    assert pruned.estimator.get_n_leaves() < grown.estimator.get_n_leaves()


def test_tree_ccp_alpha_of_a_pure_node():
    assert tree_ccp_alpha(["1", "1", "1"]) == 0.0
    assert tree_ccp_alpha(["0", "1"], cp=0.01) == pytest.approx(0.005)


def test_perfect_separation_is_a_fit_error(views):
    view = views["4-class"].copy()
    view[COL_FOREST] = np.where(view[COL_GRADIENT] > 20, POSITIVE_LABEL, NEGATIVE_LABEL)
    view = set_nominal(view)

    with pytest.raises(FitError):
        train(view, ModelKind.LOGISTIC, view_name="4-class")
    with pytest.raises(FitError):
        best_subsets(view)
