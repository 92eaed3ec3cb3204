# forest_survey/report.py
import html
import os

import pandas as pd

from .config import *
from .diagnostics import (coefficient_table, correlation_matrix, fit_summary, half_normal_residuals,
                          importance_table, summary_statistics, tree_text)
from .models import MODEL_NAMES, ModelKind
from .pipeline import accuracy_table
from .plots import (plot_accuracy, plot_correlation, plot_half_normal, plot_tree_diagram,
                    save_figure)
from .selection import best_per_size

_STYLE = """
body { font-family: 'Segoe UI', sans-serif; margin: 40px; color: #222; max-width: 1100px; }
h1 { border-bottom: 2px solid #2e7d32; padding-bottom: 6px; }
h2 { color: #2e7d32; margin-top: 40px; }
table { border-collapse: collapse; margin: 12px 0; font-size: 13px; }
th, td { border: 1px solid #ddd; padding: 4px 8px; text-align: right; }
th { background: #f1f8e9; }
pre { background: #f7f7f7; padding: 10px; font-size: 12px; overflow-x: auto; }
img { max-width: 100%; margin: 10px 0; }
.note { color: #555; font-size: 13px; }
"""


def _table(df, digits=4):
    return df.to_html(float_format=lambda v: f"{v:.{digits}f}", border=0)


def _figure(fig, out_dir, name):
    save_figure(fig, os.path.join(out_dir, name))
    return f'<img src="{name}" alt="{html.escape(name)}">'


def _section(title, *parts):
    return f"<h2>{html.escape(title)}</h2>\n" + "\n".join(parts)


def _p(text):
    return f'<p class="note">{html.escape(text)}</p>'


def render_report(results, out_dir=REPORT_DIR, filename=REPORT_FILENAME):
    """
    Writes the HTML report and its PNG figures into ``out_dir``.

    Explanatory sections need the full-view models and the best-subset
    tables, so the results must come from run_pipeline with
    ``explanatory=True`` and ``selection=True``. Returns the HTML path.
    """
    os.makedirs(out_dir, exist_ok=True)
    settings = results.settings
    sections = []

    # --- 1. DATA ---
    first_view = next(iter(results.views.values()))
    numeric, levels = summary_statistics(first_view)
    corr = correlation_matrix(results.raw)
    sections.append(_section(
        "1. Survey data",
        _p(f"{len(results.raw)} sites read from {settings['csv_path'] or 'an in-memory table'}. "
           f"Views: {', '.join(results.views)} (identical rows, different Aspect encodings)."),
        "<h3>Numeric fields</h3>", _table(numeric, 2),
        "<h3>Nominal fields</h3>", _table(levels.set_index(['Field', 'Level']), 0),
        "<h3>Correlation matrix</h3>", _table(corr, 3),
        _figure(plot_correlation(corr), out_dir, "correlation.png"),
    ))

    # --- 2. BEST SUBSETS ---
    parts = []
    for view_name, table in results.subsets.items():
        parts += [
            f"<h3>{html.escape(view_name)} view: top subsets by BIC</h3>",
            _table(table.head(BEST_SUBSET_ROWS), 2),
            "<h3>Best subset per size</h3>",
            _table(best_per_size(table).reset_index(), 2),
        ]
    sections.append(_section("2. Best-subset selection", *parts))

    # --- 3. EXPLANATORY MODELS ---
    parts = [_p("Models fitted to every row of each view.")]
    fits = [fit_summary(m) for m in results.explanatory.values()]
    if fits:
        parts.append(_table(pd.DataFrame(fits).set_index(['Model', 'View'])))

    for (kind, view_name), model in results.explanatory.items():
        stub = f"{kind.value}_{view_name.replace(' ', '_')}"
        parts.append(f"<h3>{html.escape(model.name)}: {html.escape(view_name)} view</h3>")

        if kind is ModelKind.LOGISTIC:
            parts.append(_table(coefficient_table(model)))
            hn = half_normal_residuals(model)
            parts.append(_figure(plot_half_normal(hn, f"Half-normal plot ({view_name})"),
                                 out_dir, f"halfnormal_{stub}.png"))
        elif kind is ModelKind.TREE:
            parts.append(_figure(plot_tree_diagram(model, "detailed"), out_dir, f"tree_{stub}_detailed.png"))
            parts.append(_figure(plot_tree_diagram(model, "compact"), out_dir, f"tree_{stub}_compact.png"))
            parts.append(f"<pre>{html.escape(tree_text(model))}</pre>")
            parts.append(_table(importance_table(model, by_predictor=True)))
        else:
            parts.append(_table(importance_table(model, by_predictor=True)))
    sections.append(_section("3. Explanatory models", *parts))

    # --- 4. PREDICTIVE ACCURACY ---
    acc = accuracy_table(results.evaluations)
    parts = [
        _p(f"Models refitted on {len(results.train_idx)} training rows "
           f"({settings['train_fraction']:.0%}, seed {settings['seed']}) and scored on the same "
           f"{len(results.test_idx)} held-out rows for both views. Logistic probabilities above "
           f"{settings['threshold']} are labelled Forest = {POSITIVE_LABEL} (present)."),
        _table(acc.set_index(['Model', 'View'])),
        _figure(plot_accuracy(acc), out_dir, "accuracy.png"),
    ]
    for (kind, view_name), ev in results.evaluations.items():
        parts.append(f"<h3>{html.escape(MODEL_NAMES[kind])}: {html.escape(view_name)} view "
                     f"(accuracy {ev.accuracy:.3f})</h3>")
        parts.append(_table(ev.confusion, 0))
    sections.append(_section("4. Out-of-sample accuracy", *parts))

    body = "\n".join(sections)
    doc = (
        "<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\">"
        "<title>Forest presence survey</title>"
        f"<style>{_STYLE}</style></head><body>\n"
        "<h1>Forest presence survey: model comparison</h1>\n"
        f"{body}\n</body></html>\n"
    )

    path = os.path.join(out_dir, filename)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(doc)
    return path
