# tests/conftest.py
# Ensure project root is importable (scripts live next to the package) during pytest runs
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from forest_survey.data import load_views, split_indices
from forest_survey.utils import write_example_survey


@pytest.fixture(scope="session")
def survey_csv(tmp_path_factory):
    path = tmp_path_factory.mktemp("survey") / "forest_survey.csv"
    write_example_survey(str(path))
    return str(path)


@pytest.fixture(scope="session")
def views(survey_csv):
    return load_views(survey_csv)


@pytest.fixture(scope="session")
def split(views):
    n_rows = len(next(iter(views.values())))
    return split_indices(n_rows)
