# forest_survey/utils.py
import numpy as np
import pandas as pd
import streamlit as st

from .config import *
from .data import parse_survey
from .errors import SurveyError
from .pipeline import run_pipeline

# Header of the example file; the loader renames by position so these never leak into views
EXAMPLE_HEADER = ['tpi', 'gradient', 'aspect_4', 'aspect_5', 'aspect_8', 'wind', 'buffer', 'forest']


def make_example_survey(n_rows=500, seed=RANDOM_STATE):
    """
    Synthetic survey in the raw eight-column layout.

    Forest presence follows a logistic model: steeper, sheltered, upper-slope
    and south-facing sites are more likely to carry forest. Aspect-8 codes
    run clockwise from north, Aspect-4 merges neighbouring pairs and Aspect-5
    adds a 'flat' class for gradients under 2 degrees.
    """
    rng = np.random.default_rng(seed)

    tpi = rng.integers(1, 7, n_rows)
    gradient = rng.uniform(0, 40, n_rows).round(2)
    aspect8 = rng.integers(1, 9, n_rows)
    aspect4 = (aspect8 + 1) // 2
    aspect5 = np.where(gradient < 2, 5, aspect4)
    wind = rng.uniform(0, 1, n_rows).round(3)
    buffer = rng.uniform(0, 2000, n_rows).round(1)

    tpi_effect = np.array([-1.5, -0.75, 0.0, 0.75, 1.5, 2.25])[tpi - 1]
    aspect_effect = np.array([-1.2, -0.9, 0.3, 1.2, 1.5, 1.2, 0.3, -0.9])[aspect8 - 1]
    logit = -2.5 + 0.18 * gradient - 3.5 * wind + tpi_effect + aspect_effect + 0.0005 * buffer
    forest = (rng.uniform(size=n_rows) < 1 / (1 + np.exp(-logit))).astype(int)

    return pd.DataFrame(
        np.column_stack([tpi, gradient, aspect4, aspect5, aspect8, wind, buffer, forest]),
        columns=EXAMPLE_HEADER,
    ).astype({'tpi': int, 'aspect_4': int, 'aspect_5': int, 'aspect_8': int, 'forest': int})


def write_example_survey(path=DATA_FILENAME, n_rows=500, seed=RANDOM_STATE):
    make_example_survey(n_rows, seed).to_csv(path, index=False)
    return path


def add_run_arguments(ap):
    """Command-line overrides for the configuration knobs shared by the scripts."""
    ap.add_argument("--data", default=DATA_FILENAME, help="Survey CSV to read.")
    ap.add_argument("--example", action="store_true",
                    help="Use the generated example survey instead of --data.")
    ap.add_argument("--train-fraction", type=float, default=TRAIN_FRACTION)
    ap.add_argument("--seed", type=int, default=RANDOM_STATE)
    ap.add_argument("--n-estimators", type=int, default=N_ESTIMATORS)
    ap.add_argument("--threshold", type=float, default=DECISION_THRESHOLD)
    return ap


@st.cache_resource(show_spinner=True)
def load_survey_results(csv_path, train_fraction=TRAIN_FRACTION, seed=RANDOM_STATE,
                        n_estimators=N_ESTIMATORS, threshold=DECISION_THRESHOLD, example=False):
    try:
        raw = parse_survey(make_example_survey()) if example else None
        return run_pipeline(csv_path, train_fraction=train_fraction, seed=seed,
                            n_estimators=n_estimators, threshold=threshold, raw=raw)
    except SurveyError as e:
        st.error(f"Survey run failed at step '{e.step}': {e}")
        return None
