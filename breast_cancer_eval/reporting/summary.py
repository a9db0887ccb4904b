"""
Text summaries of model evaluations.
"""
import pandas as pd
from typing import Any, Dict

from breast_cancer_eval import config

REPORT_METRICS = [
    ('accuracy', 'Accuracy'),
    ('kappa', 'Kappa'),
    ('sensitivity', 'Sensitivity (Recall)'),
    ('specificity', 'Specificity'),
    ('precision', 'Pos Pred Value (Precision)'),
    ('npv', 'Neg Pred Value'),
    ('f1_score', 'F1'),
    ('prevalence', 'Prevalence'),
    ('detection_rate', 'Detection Rate'),
    ('detection_prevalence', 'Detection Prevalence'),
    ('balanced_accuracy', 'Balanced Accuracy'),
    ('auc', 'AUC'),
]


def format_evaluation_report(
    model_name: str,
    evaluation: Dict[str, Any],
    positive_class: str = None
) -> str:
    """
    Render confusion matrix statistics and AUC for one model.

    Args:
        model_name: Display name of the model.
        evaluation: Output of evaluate_model().
        positive_class: Positive label. If None, uses config.POSITIVE_CLASS.

    Returns:
        Multi-line report string.
    """
    if positive_class is None:
        positive_class = config.POSITIVE_CLASS

    metrics = evaluation['metrics']
    lines = [
        f"{model_name} - confusion matrix (positive class: '{positive_class}')",
        f"  {'':>12s} {'pred -':>8s} {'pred +':>8s}",
        f"  {'actual -':>12s} {metrics['tn']:>8d} {metrics['fp']:>8d}",
        f"  {'actual +':>12s} {metrics['fn']:>8d} {metrics['tp']:>8d}",
        "",
    ]
    for key, label in REPORT_METRICS:
        lines.append(f"  {label:28s}: {metrics[key]:.4f}")

    return "\n".join(lines)


def build_comparison_table(evaluations: Dict[str, Dict[str, Any]]) -> pd.DataFrame:
    """
    One row per model with the headline metrics, indexed by display name.

    Example:
        >>> table = build_comparison_table({'random_forest': rf_eval, 'svm': svm_eval})
        >>> print(table[['accuracy', 'auc']])
    """
    rows = {
        config.MODEL_NAMES.get(key, key): {k: evaluation['metrics'][k] for k, _ in REPORT_METRICS}
        for key, evaluation in evaluations.items()
    }
    return pd.DataFrame.from_dict(rows, orient='index')
