# compare_model.py
import argparse
import sys
import warnings

from forest_survey.config import *
from forest_survey.data import parse_survey
from forest_survey.errors import SurveyError
from forest_survey.models import MODEL_NAMES
from forest_survey.pipeline import run_pipeline
from forest_survey.utils import add_run_arguments, make_example_survey

warnings.filterwarnings("ignore")


def main(argv=None):
    ap = add_run_arguments(argparse.ArgumentParser(
        description="Out-of-sample accuracy of every model kind on both aspect views."))
    args = ap.parse_args(argv)

    print("🏁 Starting Model Evaluation Tournament...")
    print(f"   Dataset: {'example survey' if args.example else args.data}")

    # ==========================================
    # 1. PREPARE DATA / 2. TRAIN & SCORE
    # ==========================================
    try:
        raw = parse_survey(make_example_survey()) if args.example else None
        results = run_pipeline(
            args.data, train_fraction=args.train_fraction, seed=args.seed,
            n_estimators=args.n_estimators, threshold=args.threshold,
            explanatory=False, selection=False, raw=raw,
        )
    except SurveyError as e:
        print(f"\n❌ Failed at step '{e.step}': {e}")
        return 1

    print(f"   Split: {len(results.train_idx)} training / {len(results.test_idx)} held-out sites "
          f"(seed {args.seed}).\n")

    # ==========================================
    # 3. RESULTS
    # ==========================================
    print(f"{'Model':<22} | {'View':<8} | {'Accuracy':<8}")
    print("-" * 46)
    for (kind, view_name), ev in results.evaluations.items():
        print(f"{MODEL_NAMES[kind]:<22} | {view_name:<8} | {ev.accuracy:.4f}")
    print("-" * 46)

    print("\n   Confusion matrices (rows = predicted, columns = actual):")
    for (kind, view_name), ev in results.evaluations.items():
        print(f"\n   {MODEL_NAMES[kind]} / {view_name}")
        print(ev.confusion.to_string())

    print("\n✅ Evaluation Complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
