# build_report.py
import argparse
import sys
import warnings

from forest_survey.config import *
from forest_survey.data import parse_survey
from forest_survey.errors import SurveyError
from forest_survey.pipeline import run_pipeline
from forest_survey.report import render_report
from forest_survey.utils import add_run_arguments, make_example_survey

warnings.filterwarnings("ignore")


def main(argv=None):
    ap = add_run_arguments(argparse.ArgumentParser(
        description="Render the full survey report (HTML + figures)."))
    ap.add_argument("--out-dir", default=REPORT_DIR)
    args = ap.parse_args(argv)

    print(f"📄 Building report from: {'example survey' if args.example else args.data}")
    try:
        raw = parse_survey(make_example_survey()) if args.example else None
        results = run_pipeline(
            args.data, train_fraction=args.train_fraction, seed=args.seed,
            n_estimators=args.n_estimators, threshold=args.threshold, raw=raw,
        )
    except SurveyError as e:
        print(f"\n❌ Report aborted at step '{e.step}': {e}")
        return 1

    path = render_report(results, args.out_dir)
    print(f"✅ Report written to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
