"""
Plotting module for the breast cancer model comparison.

Renders overlay charts comparing the models: ROC curves, cumulative gain
charts, confusion matrix heatmaps, and random forest feature importances.
Every function owns its figure and closes it before returning, whether
rendering succeeded or not.
"""
import pandas as pd
import numpy as np
import logging
import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path
from typing import Dict, Optional, Tuple

from breast_cancer_eval import config

logger = logging.getLogger(__name__)


def _model_label(key: str) -> str:
    return config.MODEL_NAMES.get(key, key)


def _model_color(key: str) -> Optional[str]:
    return config.MODEL_COLORS.get(key)


def _finish_figure(fig: plt.Figure, save_path: Optional[Path], show: bool) -> None:
    fig.tight_layout()

    if save_path:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=config.PLOT_DPI, bbox_inches='tight')
        logger.info(f"Plot saved to: {save_path}")

    if show:
        plt.show()


def plot_roc_curves(
    curves: Dict[str, pd.DataFrame],
    aucs: Optional[Dict[str, float]] = None,
    title: str = "ROC Curves",
    figsize: Tuple[int, int] = None,
    save_path: Optional[Path] = None,
    show: bool = False
) -> None:
    """
    Overlay ROC curves with the random-guess diagonal.

    Args:
        curves: Model key -> ROC DataFrame with 'fpr' and 'tpr' columns.
        aucs: Model key -> AUC, appended to the legend labels.
        title: Plot title.
        figsize: Figure size (width, height). If None, uses config.PLOT_FIG_SIZE.
        save_path: If provided, save plot to this path.
        show: Display the figure interactively before closing it.

    Example:
        >>> plot_roc_curves({'random_forest': rf_roc, 'svm': svm_roc},
        ...                 {'random_forest': 0.99, 'svm': 0.98},
        ...                 save_path='outputs/roc_curves.png')
    """
    if figsize is None:
        figsize = config.PLOT_FIG_SIZE
    if aucs is None:
        aucs = {}

    fig, ax = plt.subplots(figsize=figsize)
    try:
        for key, roc in curves.items():
            label = _model_label(key)
            if key in aucs:
                label = f"{label} (AUC = {aucs[key]:.3f})"
            ax.plot(roc['fpr'], roc['tpr'], color=_model_color(key), linewidth=2, label=label)

        ax.plot([0, 1], [0, 1], linestyle='--', color='gray', label='Random guess')
        ax.set_xlim(-0.01, 1.01)
        ax.set_ylim(-0.01, 1.01)
        ax.set_xlabel('False Positive Rate (1 - Specificity)', fontsize=12)
        ax.set_ylabel('True Positive Rate (Sensitivity)', fontsize=12)
        ax.set_title(title, fontsize=14)
        ax.legend(loc='lower right')
        ax.grid(True, alpha=0.3)

        _finish_figure(fig, save_path, show)
    finally:
        plt.close(fig)


def plot_gain_charts(
    tables: Dict[str, pd.DataFrame],
    title: str = "Cumulative Gain Charts",
    figsize: Tuple[int, int] = None,
    save_path: Optional[Path] = None,
    show: bool = False
) -> None:
    """
    Overlay cumulative gain curves with the random-targeting baseline.

    Args:
        tables: Model key -> gain table with 'population_pct', 'gain_pct'
            and 'baseline_pct' columns.
        title: Plot title.
        figsize: Figure size (width, height). If None, uses config.PLOT_FIG_SIZE.
        save_path: If provided, save plot to this path.
        show: Display the figure interactively before closing it.
    """
    if figsize is None:
        figsize = config.PLOT_FIG_SIZE

    fig, ax = plt.subplots(figsize=figsize)
    try:
        for key, gains in tables.items():
            ax.plot(
                gains['population_pct'], gains['gain_pct'],
                color=_model_color(key), linewidth=2, label=_model_label(key)
            )

        if tables:
            baseline = next(iter(tables.values()))
            ax.plot(
                baseline['population_pct'], baseline['baseline_pct'],
                linestyle='--', color='gray', label='Random targeting'
            )

        ax.set_xlim(0, 100)
        ax.set_ylim(0, 101)
        ax.set_xlabel('% of population targeted (by score, high → low)', fontsize=12)
        ax.set_ylabel('% of positives captured', fontsize=12)
        ax.set_title(title, fontsize=14)
        ax.legend(loc='lower right')
        ax.grid(True, alpha=0.3)

        _finish_figure(fig, save_path, show)
    finally:
        plt.close(fig)


def plot_confusion_matrices(
    metrics: Dict[str, Dict[str, float]],
    positive_class: str = None,
    negative_class: str = None,
    figsize: Tuple[int, int] = None,
    save_path: Optional[Path] = None,
    show: bool = False
) -> None:
    """
    Plot one confusion matrix heatmap per model, side by side.

    Args:
        metrics: Model key -> confusion statistics with 'tp', 'fp', 'tn', 'fn'.
        positive_class: Positive label. If None, uses config.POSITIVE_CLASS.
        negative_class: Negative label. If None, the other config.VALID_LABELS entry.
        figsize: Figure size (width, height). If None, uses config.PLOT_FIG_SIZE_CONFUSION.
        save_path: If provided, save plot to this path.
        show: Display the figure interactively before closing it.
    """
    if positive_class is None:
        positive_class = config.POSITIVE_CLASS
    if negative_class is None:
        negative_class = next(c for c in config.VALID_LABELS if c != positive_class)
    if figsize is None:
        figsize = config.PLOT_FIG_SIZE_CONFUSION

    labels = [negative_class, positive_class]
    fig, axes = plt.subplots(1, max(len(metrics), 1), figsize=figsize, squeeze=False)
    try:
        for ax, (key, stats) in zip(axes[0], metrics.items()):
            # Rows = actual, columns = predicted
            counts = np.array([
                [stats['tn'], stats['fp']],
                [stats['fn'], stats['tp']],
            ])
            sns.heatmap(
                counts, annot=True, fmt='d', cmap='Blues', cbar=False,
                xticklabels=labels, yticklabels=labels, ax=ax
            )
            ax.set_xlabel('Predicted')
            ax.set_ylabel('Actual')
            ax.set_title(_model_label(key))

        _finish_figure(fig, save_path, show)
    finally:
        plt.close(fig)


def plot_feature_importance(
    importance_df: pd.DataFrame,
    title: str = "Random Forest Feature Importances",
    figsize: Tuple[int, int] = (10, 8),
    save_path: Optional[Path] = None,
    show: bool = False
) -> None:
    """
    Plot feature importance bar chart.

    Args:
        importance_df: DataFrame with 'feature' and 'importance' columns.
        title: Plot title.
        figsize: Figure size (width, height).
        save_path: If provided, save plot to this path.
        show: Display the figure interactively before closing it.

    Example:
        >>> plot_feature_importance(importance_df, save_path='feature_importance.png')
    """
    fig, ax = plt.subplots(figsize=figsize)
    try:
        colors = plt.cm.Blues(np.linspace(0.4, 0.8, len(importance_df)))

        ax.barh(
            range(len(importance_df)),
            importance_df['importance'].values,
            color=colors
        )
        ax.set_yticks(range(len(importance_df)))
        ax.set_yticklabels(importance_df['feature'].values)
        ax.invert_yaxis()
        ax.set_xlabel('Mean Decrease in Impurity', fontsize=12)
        ax.set_title(title, fontsize=14)
        ax.grid(True, alpha=0.3, axis='x')

        _finish_figure(fig, save_path, show)
    finally:
        plt.close(fig)
