import numpy as np
import pytest

from forest_survey.config import *
from forest_survey.data import load_survey
from forest_survey.diagnostics import (coefficient_table, correlation_matrix, half_normal_residuals,
                                       importance_table, summary_statistics, tree_text)
from forest_survey.models import ModelKind, train
from forest_survey.selection import best_per_size, best_subsets


@pytest.fixture(scope="module")
def logistic(views):
    return train(views["4-class"], ModelKind.LOGISTIC, view_name="4-class")


def test_best_subsets_ranks_every_subset(views):
    table = best_subsets(views["4-class"], max_rows=None)
    assert len(table) == 2 ** len(PREDICTORS) - 1
    assert table.index.tolist() == list(range(1, len(table) + 1))
    assert table['BIC'].is_monotonic_increasing
    assert COL_GRADIENT in table.iloc[0]['Predictors']

    per_size = best_per_size(table)
    assert per_size['Size'].tolist() == [1, 2, 3, 4, 5]

    assert len(best_subsets(views["4-class"], max_rows=5)) == 5


def test_coefficients_follow_the_signal(logistic):
    table = coefficient_table(logistic)
    assert table.index[0] == 'const'
    assert table.loc[COL_GRADIENT, 'Estimate'] > 0
    assert table.loc[COL_WIND, 'Estimate'] < 0
    assert np.allclose(table['Odds Ratio'], np.exp(table['Estimate']))


def test_half_normal_residuals(logistic, views):
    table = half_normal_residuals(logistic)
    assert len(table) == len(views["4-class"])
    assert table['Quantile'].is_monotonic_increasing
    assert table['Abs. Residual'].is_monotonic_increasing
    assert (table['Abs. Residual'] >= 0).all()


def test_coefficients_need_a_logistic_model(views):
    tree = train(views["4-class"], ModelKind.TREE, view_name="4-class")
    with pytest.raises(ValueError):
        coefficient_table(tree)
    assert "class:" in tree_text(tree)


def test_importance_by_predictor(views):
    forest = train(views["8-class"], ModelKind.FOREST, view_name="8-class", n_estimators=50)
    table = importance_table(forest, by_predictor=True)
    assert set(table['Feature']) <= set(PREDICTORS)
    assert table['Importance'].sum() == pytest.approx(1.0)
    assert len(importance_table(forest)) == len(forest.design_columns)


def test_summary_and_correlation(survey_csv, views):
    numeric, levels = summary_statistics(views["8-class"])
    assert numeric.index.tolist() == NUMERIC_COLUMNS
    assert set(levels['Field']) == set(NOMINAL_COLUMNS)
    assert levels.groupby('Field')['Count'].sum().eq(len(views["8-class"])).all()

    corr = correlation_matrix(load_survey(survey_csv))
    assert corr.shape == (len(RAW_COLUMNS), len(RAW_COLUMNS))
    assert np.allclose(np.diag(corr.values), 1.0)
