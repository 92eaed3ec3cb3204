# forest_survey/plots.py
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from sklearn.tree import plot_tree

from .models import ModelKind


def save_figure(fig, filename):
    fig.savefig(filename, bbox_inches='tight')
    plt.close(fig)
    return filename


def plot_correlation(corr, title="Correlation matrix"):
    fig, ax = plt.subplots(figsize=(7, 6))
    im = ax.imshow(corr.values, cmap='RdBu_r', vmin=-1, vmax=1)
    ax.set_xticks(range(len(corr.columns)))
    ax.set_xticklabels(corr.columns, rotation=45, ha='right')
    ax.set_yticks(range(len(corr.index)))
    ax.set_yticklabels(corr.index)

    for i in range(corr.shape[0]):
        for j in range(corr.shape[1]):
            value = corr.values[i, j]
            if np.isfinite(value):
                ax.text(j, i, f"{value:.2f}", ha='center', va='center', fontsize=8,
                        color='white' if abs(value) > 0.6 else 'black')

    fig.colorbar(im, ax=ax, shrink=0.8)
    ax.set_title(title)
    fig.tight_layout()
    return fig


def plot_half_normal(table, title="Half-normal plot", n_labels=2):
    """Ordered absolute residuals against half-normal quantiles, largest points labelled."""
    fig, ax = plt.subplots(figsize=(6, 5))
    ax.scatter(table['Quantile'], table['Abs. Residual'], s=12, color='tab:green')

    for _, row in table.tail(n_labels).iterrows():
        ax.annotate(str(row['Row']), (row['Quantile'], row['Abs. Residual']),
                    textcoords='offset points', xytext=(-12, 0), ha='right', fontsize=8)

    ax.set_xlabel("Half-normal quantiles")
    ax.set_ylabel("Sorted |deviance residual|")
    ax.set_title(title)
    fig.tight_layout()
    return fig


def plot_tree_diagram(model, style="detailed", title=None):
    """
    Two renderings of a fitted tree: 'detailed' (filled nodes with impurity
    and counts) and 'compact' (class proportions only, no impurity).
    """
    if model.kind is not ModelKind.TREE:
        raise ValueError(f"Expected a tree model, got {model.kind.value}")

    est = model.estimator
    n_leaves = est.get_n_leaves()
    fig, ax = plt.subplots(figsize=(max(10, n_leaves * 1.2), max(6, est.get_depth() * 1.5)))

    if style == "detailed":
        plot_tree(est, feature_names=list(model.design_columns), class_names=list(est.classes_),
                  filled=True, rounded=True, impurity=True, fontsize=7, ax=ax)
    elif style == "compact":
        plot_tree(est, feature_names=list(model.design_columns), class_names=list(est.classes_),
                  filled=False, impurity=False, proportion=True, label='root', fontsize=7, ax=ax)
    else:
        raise ValueError(f"Unknown tree style '{style}'")

    ax.set_title(title or f"{model.name} ({model.view_name}, {style})")
    return fig


def plot_accuracy(table, title="Test accuracy"):
    """Grouped bars of accuracy per model kind, one bar per view."""
    pivot = table.pivot(index='Model', columns='View', values='Accuracy')
    fig, ax = plt.subplots(figsize=(7, 4))
    pivot.plot.bar(ax=ax, rot=0)
    ax.set_ylim(0, 1)
    ax.set_ylabel("Accuracy")
    ax.set_title(title)
    ax.legend(title="View")
    fig.tight_layout()
    return fig
