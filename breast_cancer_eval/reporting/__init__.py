"""
Reporting for the model comparison: charts and text summaries.
"""
from breast_cancer_eval.reporting.plots import (
    plot_roc_curves,
    plot_gain_charts,
    plot_confusion_matrices,
    plot_feature_importance
)
from breast_cancer_eval.reporting.summary import (
    format_evaluation_report,
    build_comparison_table
)

__all__ = [
    'plot_roc_curves',
    'plot_gain_charts',
    'plot_confusion_matrices',
    'plot_feature_importance',
    'format_evaluation_report',
    'build_comparison_table',
]
