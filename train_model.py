# train_model.py
import argparse
import os
import sys
import warnings

from forest_survey.config import *
from forest_survey.data import build_view, load_survey, parse_survey, set_nominal
from forest_survey.diagnostics import coefficient_table, fit_summary, importance_table
from forest_survey.errors import SurveyError
from forest_survey.models import ModelKind, save_models, train
from forest_survey.utils import add_run_arguments, make_example_survey

warnings.filterwarnings("ignore")


def main(argv=None):
    ap = add_run_arguments(argparse.ArgumentParser(
        description="Fit the explanatory models on every site and save them."))
    ap.add_argument("--out-dir", default=MODEL_DIR)
    args = ap.parse_args(argv)

    print(f"🌲 Training Explanatory Models on: {'example survey' if args.example else args.data}")

    try:
        # ==========================================
        # 1. LOAD & TYPE
        # ==========================================
        raw = parse_survey(make_example_survey()) if args.example else load_survey(args.data)
        views = {name: set_nominal(build_view(raw, name)) for name in VIEWS}
        print(f"   {len(raw)} sites, views: {', '.join(views)}")

        # ==========================================
        # 2. TRAIN (full data)
        # ==========================================
        models = []
        for view_name, view in views.items():
            for kind in ModelKind:
                model = train(view, kind, view_name=view_name,
                              seed=args.seed, n_estimators=args.n_estimators)
                models.append(model)

                print(f"\n📈 {model.name} ({view_name})")
                for key, value in fit_summary(model).items():
                    if key in ('Model', 'View'):
                        continue
                    print(f"   - {key}: {value:.4f}" if isinstance(value, float) else f"   - {key}: {value}")

                if kind is ModelKind.LOGISTIC:
                    print(coefficient_table(model).round(4).to_string())
                else:
                    print("   Feature Importance:")
                    for _, row in importance_table(model, by_predictor=True).iterrows():
                        print(f"   - {row['Feature']}: {row['Importance']:.4f}")
    except SurveyError as e:
        print(f"\n❌ Training failed: {e}")
        return 1

    # ==========================================
    # 3. SAVE
    # ==========================================
    paths = save_models(models, args.out_dir)
    print(f"\n✅ {len(paths)} models saved to {os.path.abspath(args.out_dir)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
