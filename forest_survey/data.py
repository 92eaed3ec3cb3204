# forest_survey/data.py
import os

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from .config import *
from .errors import DataFormatError


# ==========================================
# LOADER
# ==========================================
def _read_raw(csv_path):
    try:
        return pd.read_csv(csv_path, dtype=str, encoding='utf-8-sig')
    except UnicodeDecodeError:
        return pd.read_csv(csv_path, dtype=str, encoding='latin1')


def load_survey(csv_path=DATA_FILENAME):
    """
    Reads the survey CSV and renames its eight columns by position.

    Categorical codes are kept as stripped strings ("4", not 4.0) and the
    numeric fields are parsed to floats. The file must be complete: no rows
    are dropped and nothing is imputed.
    """
    if not os.path.isfile(csv_path):
        raise DataFormatError(f"Survey file not found: {csv_path}")

    try:
        df = _read_raw(csv_path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DataFormatError(f"Could not parse {csv_path}: {e}") from e

    return parse_survey(df, source=csv_path)


def parse_survey(df, source="survey table"):
    """Validates an eight-column table of raw values and returns the renamed, typed copy."""
    if len(df.columns) != len(RAW_COLUMNS):
        raise DataFormatError(
            f"Expected {len(RAW_COLUMNS)} columns in {source}, found {len(df.columns)}"
        )
    if df.empty:
        raise DataFormatError(f"No rows in {source}")

    df = df.copy()
    df.columns = RAW_COLUMNS

    # Text Cleaning
    for c in RAW_COLUMNS:
        df[c] = df[c].where(df[c].isna(), df[c].astype(str).str.strip())

    missing = df.isna() | (df == "")
    if missing.any().any():
        cols = missing.columns[missing.any()].tolist()
        raise DataFormatError(f"Missing values in column(s) {cols} of {source}")

    # Numeric Cleaning
    for c in NUMERIC_COLUMNS:
        values = pd.to_numeric(df[c], errors='coerce')
        bad = values.isna()
        if bad.any():
            examples = sorted(df.loc[bad, c].unique().tolist())[:5]
            raise DataFormatError(f"Unparseable numeric values in '{c}': {examples}")
        df[c] = values.astype(float)

    # Codes written as floats ("4.0") collapse onto their integer spelling
    for c in [COL_TPI, COL_ASPECT4, COL_ASPECT5, COL_ASPECT8, COL_FOREST]:
        df[c] = df[c].str.replace(r"^(-?\d+)\.0+$", r"\1", regex=True)

    bad_labels = ~df[COL_FOREST].isin(LABELS)
    if bad_labels.any():
        examples = sorted(df.loc[bad_labels, COL_FOREST].unique().tolist())[:5]
        raise DataFormatError(f"'{COL_FOREST}' must be one of {LABELS}, found {examples}")

    return df


def build_view(df, view_name):
    """Projects the raw rows onto one aspect encoding, renamed to 'Aspect'."""
    if view_name not in VIEWS:
        raise ValueError(f"Unknown view '{view_name}', expected one of {list(VIEWS)}")

    aspect_col = VIEWS[view_name]
    cols = [COL_TPI, COL_GRADIENT, aspect_col, COL_WIND, COL_BUFFER, COL_FOREST]
    view = df[cols].rename(columns={aspect_col: COL_ASPECT})
    return view.reset_index(drop=True)


def build_views(df):
    return {name: build_view(df, name) for name in VIEWS}


def load_views(csv_path=DATA_FILENAME):
    """Loader + Typer in one call: {view_name: typed view}."""
    df = load_survey(csv_path)
    return {name: set_nominal(view) for name, view in build_views(df).items()}


# ==========================================
# TYPER
# ==========================================
def _level_key(code):
    # Integer codes sort by value ("10" after "9"), anything else alphabetically after them
    try:
        return (0, int(code), code)
    except ValueError:
        return (1, 0, code)


def set_nominal(view):
    """
    Marks TPI, Aspect and Forest as unordered categoricals.

    Level sets come from the full view, so any row subset taken afterwards
    carries the same categories as its siblings. Forest always gets both
    labels as levels.
    """
    typed = view.copy()
    for c in NOMINAL_COLUMNS:
        if isinstance(typed[c].dtype, pd.CategoricalDtype):
            continue
        codes = typed[c].astype(str)
        if c == COL_FOREST:
            levels = list(LABELS)
        else:
            levels = sorted(codes.unique(), key=_level_key)
        typed[c] = pd.Categorical(codes, categories=levels, ordered=False)
    return typed


def label_levels(view):
    """Levels of the Forest label, the true-label domain of a typed view."""
    if COL_FOREST not in view.columns:
        raise DataFormatError(f"View has no '{COL_FOREST}' column")
    if not isinstance(view[COL_FOREST].dtype, pd.CategoricalDtype):
        raise DataFormatError(f"'{COL_FOREST}' is not nominal; run set_nominal on the view first")
    return [str(level) for level in view[COL_FOREST].cat.categories]


def feature_domain(view):
    """Level sets of the nominal predictors, e.g. {'TPI': [...], 'Aspect': [...]}."""
    domain = {}
    for c in NOMINAL_COLUMNS:
        if c == COL_FOREST:
            continue
        if c not in view.columns:
            raise DataFormatError(f"View has no '{c}' column")
        if not isinstance(view[c].dtype, pd.CategoricalDtype):
            raise DataFormatError(f"'{c}' is not nominal; run set_nominal on the view first")
        domain[c] = [str(level) for level in view[c].cat.categories]
    return domain


# ==========================================
# SPLITTER
# ==========================================
def split_indices(n_rows, train_fraction=TRAIN_FRACTION, seed=RANDOM_STATE):
    """
    Seeded random partition of 0..n_rows-1 into (train_idx, test_idx).

    The training side holds round(train_fraction * n_rows) rows (halves round
    up). Both arrays are sorted. The partition depends only on n_rows, the
    fraction and the seed, so every view of the same rows splits identically.
    """
    n_train = int(np.floor(train_fraction * n_rows + 0.5))
    if n_train < 1 or n_train >= n_rows:
        raise ValueError(
            f"train_fraction={train_fraction} leaves an empty side for {n_rows} rows"
        )

    train_idx, test_idx = train_test_split(
        np.arange(n_rows), train_size=n_train, random_state=seed, shuffle=True
    )
    return np.sort(train_idx), np.sort(test_idx)


def subset(view, idx):
    return view.iloc[idx]
