import os

import pytest

import build_report
import compare_model
import train_model
from forest_survey.config import *
from forest_survey.data import load_survey
from forest_survey.errors import DataFormatError
from forest_survey.models import ModelKind
from forest_survey.pipeline import accuracy_table, run_pipeline
from forest_survey.report import render_report


@pytest.fixture(scope="module")
def results(survey_csv):
    return run_pipeline(survey_csv, n_estimators=60)


def test_every_kind_on_every_view(results):
    assert set(results.evaluations) == {(k, v) for k in ModelKind for v in VIEWS}
    for (kind, view_name), ev in results.evaluations.items():
        assert ev.view_name == view_name
        assert results.predictive[(kind, view_name)].view_name == view_name
        assert ev.confusion.to_numpy().sum() == len(results.test_idx)

    acc = accuracy_table(results.evaluations)
    assert len(acc) == 6
    assert acc['Accuracy'].between(0, 1).all()


def test_explanatory_and_predictive_fits_differ(results):
    for key, model in results.explanatory.items():
        assert model.n_train == len(results.raw)
        assert results.predictive[key].n_train == len(results.train_idx)


def test_failing_step_is_reported(tmp_path):
    with pytest.raises(DataFormatError) as info:
        run_pipeline(str(tmp_path / "missing.csv"))
    assert info.value.step == "load"


def test_in_memory_table(survey_csv):
    raw = load_survey(survey_csv)
    out = run_pipeline(raw=raw, n_estimators=20, explanatory=False, selection=False,
                       kinds=[ModelKind.FOREST])
    assert list(out.evaluations) == [(ModelKind.FOREST, v) for v in VIEWS]
    assert out.explanatory == {}
    assert out.settings['csv_path'] is None


def test_render_report(results, tmp_path):
    path = render_report(results, str(tmp_path))
    assert os.path.exists(path)

    with open(path, encoding='utf-8') as f:
        doc = f.read()
    for heading in ["Survey data", "Best-subset selection", "Explanatory models", "Out-of-sample accuracy"]:
        assert heading in doc

    for name in ["correlation.png", "accuracy.png", "halfnormal_logistic_4-class.png",
                 "tree_tree_8-class_detailed.png", "tree_tree_8-class_compact.png"]:
        assert os.path.exists(tmp_path / name)
        assert name in doc


def test_scripts(tmp_path, capsys):
    assert compare_model.main(["--example", "--n-estimators", "30"]) == 0
    assert "Evaluation Complete" in capsys.readouterr().out

    assert train_model.main(["--example", "--n-estimators", "30", "--out-dir", str(tmp_path / "models")]) == 0
    assert len(os.listdir(tmp_path / "models")) == 6

    assert build_report.main(["--example", "--n-estimators", "30", "--out-dir", str(tmp_path / "report")]) == 0
    assert os.path.exists(tmp_path / "report" / REPORT_FILENAME)

    assert compare_model.main(["--data", str(tmp_path / "missing.csv")]) == 1
