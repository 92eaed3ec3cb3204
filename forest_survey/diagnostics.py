# forest_survey/diagnostics.py
import numpy as np
import pandas as pd
from scipy.stats import norm
from sklearn.tree import export_text

from .config import *
from .models import ModelKind


def summary_statistics(view):
    """Returns (numeric describe table, level counts of the nominal fields)."""
    numeric = view[NUMERIC_COLUMNS].describe().T

    counts = []
    for c in NOMINAL_COLUMNS:
        vc = view[c].value_counts(sort=False)
        counts.append(pd.DataFrame({'Field': c, 'Level': vc.index.astype(str), 'Count': vc.values}))
    levels = pd.concat(counts, ignore_index=True)
    return numeric, levels


def correlation_matrix(raw):
    """Pearson correlation of the raw columns, categorical codes taken as numbers."""
    return raw[RAW_COLUMNS].apply(pd.to_numeric, errors='coerce').corr()


def _require(model, *kinds):
    if model.kind not in kinds:
        names = ', '.join(k.value for k in kinds)
        raise ValueError(f"Expected a {names} model, got {model.kind.value}")


def coefficient_table(model):
    _require(model, ModelKind.LOGISTIC)
    res = model.estimator
    table = pd.DataFrame({
        'Estimate': res.params,
        'Std. Error': res.bse,
        'z value': res.tvalues,
        'Pr(>|z|)': res.pvalues,
        'Odds Ratio': np.exp(res.params),
    })
    table.index.name = 'Term'
    return table


def fit_summary(model):
    """One-row description of how well an explanatory model fits its own rows."""
    est = model.estimator
    row = {'Model': model.name, 'View': model.view_name, 'Rows': model.n_train}
    if model.kind is ModelKind.LOGISTIC:
        row.update({
            'Deviance': est.deviance,
            'Null Deviance': est.null_deviance,
            'AIC': est.aic,
            'BIC': est.bic_llf,
        })
    elif model.kind is ModelKind.TREE:
        row.update({'Leaves': est.get_n_leaves(), 'Depth': est.get_depth()})
    else:
        row.update({'Trees': len(est.estimators_), 'OOB Accuracy': est.oob_score_})
    return row


def half_normal_residuals(model):
    """
    Absolute deviance residuals of a logistic model, sorted ascending and
    paired with the half-normal quantiles norm.ppf((n + i) / (2n + 1)).
    """
    _require(model, ModelKind.LOGISTIC)
    resid = pd.Series(model.estimator.resid_deviance).abs()
    resid = resid.sort_values(kind='mergesort')
    n = len(resid)
    quantiles = norm.ppf((n + np.arange(1, n + 1)) / (2 * n + 1))
    return pd.DataFrame({
        'Quantile': quantiles,
        'Abs. Residual': resid.values,
        'Row': resid.index.values,
    })


def _predictor_of(column):
    return column if column in PREDICTORS else column.split('_')[0]


def importance_table(model, by_predictor=False):
    """Impurity importances of a tree or forest, optionally summed over dummy columns."""
    _require(model, ModelKind.TREE, ModelKind.FOREST)
    table = pd.DataFrame({
        'Feature': model.design_columns,
        'Importance': model.estimator.feature_importances_,
    })
    if by_predictor:
        table['Feature'] = table['Feature'].map(_predictor_of)
        table = table.groupby('Feature', as_index=False)['Importance'].sum()
    return table.sort_values('Importance', ascending=False, kind='mergesort').reset_index(drop=True)


def tree_text(model):
    _require(model, ModelKind.TREE)
    return export_text(model.estimator, feature_names=list(model.design_columns), show_weights=True)
