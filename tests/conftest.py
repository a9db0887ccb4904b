"""
Shared fixtures for the breast cancer pipeline tests.

Synthetic data only: a WDBC-shaped CSV writer, a separable balanced dataset,
and a label-independent noise dataset.
"""
import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from breast_cancer_eval import config

WDBC_FEATURES = ["radius_mean", "texture_mean", "perimeter_mean", "area_mean"]


def _categorical_labels(labels, index=None) -> pd.Series:
    return pd.Series(
        pd.Categorical(labels, categories=config.VALID_LABELS),
        index=index,
        name=config.TARGET_COLUMN
    )


@pytest.fixture
def write_wdbc_csv(tmp_path):
    """
    Factory writing a WDBC-shaped CSV and returning its path.

    Rows end with a trailing comma, like the public file, so pandas reads an
    extra all-empty column.
    """
    def _write(n_rows: int = 60, labels=None, filename: str = "breast-cancer.csv"):
        rng = np.random.default_rng(0)
        if labels is None:
            labels = ["M" if i % 2 == 0 else "B" for i in range(n_rows)]

        lines = [",".join([config.ID_COLUMN, config.TARGET_COLUMN] + WDBC_FEATURES) + ","]
        for i, label in enumerate(labels):
            shift = 5.0 if label == "M" else 0.0
            values = [f"{v:.3f}" for v in rng.normal(10.0 + shift, 1.0, len(WDBC_FEATURES))]
            lines.append(",".join([str(842300 + i), str(label)] + values) + ",")

        path = tmp_path / filename
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write


@pytest.fixture
def separable_data():
    """
    100 records, 50 per class, with one feature perfectly separating the labels.

    'signal' sits near 10 for malignant and near 0 for benign; 'noise' is
    unrelated to the label.
    """
    rng = np.random.default_rng(42)
    labels = np.array(["M"] * 50 + ["B"] * 50)
    signal = np.where(labels == "M", 10.0, 0.0) + rng.uniform(-0.5, 0.5, len(labels))

    X = pd.DataFrame({
        "signal": signal,
        "noise": rng.normal(0.0, 1.0, len(labels)),
    })
    y = _categorical_labels(labels, index=X.index)
    return X, y


@pytest.fixture
def make_noise_data():
    """Factory for datasets whose features are independent of the label."""
    def _make(n_rows: int = 2000, n_features: int = 5, seed: int = 0):
        rng = np.random.default_rng(seed)
        X = pd.DataFrame(
            rng.normal(0.0, 1.0, (n_rows, n_features)),
            columns=[f"feature_{i}" for i in range(n_features)]
        )
        labels = np.where(np.arange(n_rows) % 2 == 0, "M", "B")
        rng.shuffle(labels)
        y = _categorical_labels(labels, index=X.index)
        return X, y

    return _make
