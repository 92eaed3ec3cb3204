# forest_survey/selection.py
from itertools import combinations

import pandas as pd
import statsmodels.api as sm

from .config import *
from .data import feature_domain
from .models import fit_glm


def best_subsets(view, max_rows=BEST_SUBSET_ROWS):
    """
    Exhaustive search over every non-empty subset of the predictors.

    Each subset is fitted as a binomial GLM on the full view and the table is
    ranked by BIC (lower is better). Nominal predictors enter as dummy blocks,
    so a subset either holds all levels of a factor or none.
    """
    domain = feature_domain(view)
    y = (view[COL_FOREST].astype(str) == POSITIVE_LABEL).astype(int)

    records = []
    for size in range(1, len(PREDICTORS) + 1):
        for combo in combinations(PREDICTORS, size):
            nominal = [c for c in combo if c in domain]
            X = pd.get_dummies(view[list(combo)], columns=nominal, drop_first=True, dtype=float)
            X = sm.add_constant(X, has_constant='add')
            res = fit_glm(y, X, what=f"Subset {combo}")

            records.append({
                'Predictors': ' + '.join(combo),
                'Size': size,
                'Parameters': len(X.columns),
                'Deviance': res.deviance,
                'AIC': res.aic,
                'BIC': res.bic_llf,
            })

    table = pd.DataFrame(records).sort_values('BIC', kind='mergesort').reset_index(drop=True)
    table.index = pd.RangeIndex(1, len(table) + 1, name='Rank')
    if max_rows:
        table = table.head(max_rows)
    return table


def best_per_size(table):
    """Lowest-BIC subset for each number of predictors."""
    best = table.loc[table.groupby('Size')['BIC'].idxmin()]
    return best.sort_values('Size')
