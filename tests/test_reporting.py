"""
Chart and text report tests.

Run with: pytest tests/test_reporting.py -v
"""
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from breast_cancer_eval.reporting import (
    build_comparison_table,
    format_evaluation_report,
    plot_confusion_matrices,
    plot_feature_importance,
    plot_gain_charts,
    plot_roc_curves
)
from breast_cancer_eval.reporting.summary import REPORT_METRICS


def _metrics(tp, fp, tn, fn):
    metrics = {key: 0.5 for key, _ in REPORT_METRICS}
    metrics.update({'tp': tp, 'fp': fp, 'tn': tn, 'fn': fn})
    return metrics


@pytest.fixture
def evaluations():
    """Minimal evaluation bundles for two models."""
    roc = pd.DataFrame({'fpr': [0.0, 0.2, 1.0], 'tpr': [0.0, 0.8, 1.0], 'threshold': [np.inf, 0.5, 0.1]})
    population = np.arange(11) * 10.0
    gains = pd.DataFrame({
        'population_pct': population,
        'gain_pct': np.minimum(population * 2, 100.0),
        'baseline_pct': population,
    })
    return {
        'random_forest': {'metrics': _metrics(40, 2, 68, 4), 'roc_curve': roc, 'auc': 0.9, 'gain_table': gains},
        'svm': {'metrics': _metrics(41, 1, 69, 3), 'roc_curve': roc, 'auc': 0.92, 'gain_table': gains},
    }


@pytest.fixture(autouse=True)
def close_figures():
    plt.close('all')
    yield
    plt.close('all')


class TestPlots:
    """Test suite for chart rendering and figure cleanup."""

    def test_roc_curves_saved(self, evaluations, tmp_path):
        """Test that the ROC overlay is written and its figure closed."""
        path = tmp_path / "charts" / "roc.png"

        plot_roc_curves(
            {k: ev['roc_curve'] for k, ev in evaluations.items()},
            {k: ev['auc'] for k, ev in evaluations.items()},
            save_path=path
        )

        assert path.exists() and path.stat().st_size > 0
        assert plt.get_fignums() == [], "Figure should be closed after saving"

    def test_gain_charts_saved(self, evaluations, tmp_path):
        """Test that the gain overlay is written and its figure closed."""
        path = tmp_path / "gain.png"

        plot_gain_charts({k: ev['gain_table'] for k, ev in evaluations.items()}, save_path=path)

        assert path.exists()
        assert plt.get_fignums() == []

    def test_confusion_matrices_saved(self, evaluations, tmp_path):
        """Test that the confusion heatmaps are written."""
        path = tmp_path / "confusion.png"

        plot_confusion_matrices(
            {k: ev['metrics'] for k, ev in evaluations.items()},
            positive_class="M", negative_class="B", save_path=path
        )

        assert path.exists()
        assert plt.get_fignums() == []

    def test_feature_importance_saved(self, tmp_path):
        """Test that the importance bar chart is written."""
        path = tmp_path / "importance.png"
        importance_df = pd.DataFrame({'feature': ['radius_mean', 'area_mean'], 'importance': [0.7, 0.3]})

        plot_feature_importance(importance_df, save_path=path)

        assert path.exists()
        assert plt.get_fignums() == []

    def test_figure_closed_on_error(self, tmp_path):
        """Test that a failing plot still releases its figure."""
        bad_curve = pd.DataFrame({'x': [0.0, 1.0]})

        with pytest.raises(KeyError):
            plot_roc_curves({'svm': bad_curve}, save_path=tmp_path / "never.png")

        assert plt.get_fignums() == [], "Figure must be closed on the error path"
        assert not (tmp_path / "never.png").exists()


class TestSummary:
    """Test suite for the text report and comparison table."""

    def test_report_lists_counts_and_metrics(self, evaluations):
        """Test that the report carries the confusion counts and every metric label."""
        report = format_evaluation_report("Random Forest", evaluations['random_forest'], positive_class="M")

        assert "Random Forest" in report
        assert "positive class: 'M'" in report
        assert "68" in report and "40" in report
        for _, label in REPORT_METRICS:
            assert label in report

    def test_comparison_table(self, evaluations):
        """Test that the comparison has one row per model, by display name."""
        table = build_comparison_table(evaluations)

        assert table.index.tolist() == ["Random Forest", "SVM (RBF)"]
        assert table.columns.tolist() == [key for key, _ in REPORT_METRICS]


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
