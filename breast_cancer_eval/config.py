"""
Configuration module for the breast cancer model comparison pipeline.

Contains all constants, file paths, column names, and search grids used
throughout loading, training, evaluation, and plotting.
"""
from pathlib import Path
from typing import List, Tuple

# ============================================================================
# FILE PATHS
# ============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
RAW_DATA_PATH = PROJECT_ROOT / "data" / "breast-cancer.csv"

# Rendered charts
OUTPUT_DIR = PROJECT_ROOT / "outputs"
ROC_PLOT_FILENAME = "roc_curves.png"
GAIN_PLOT_FILENAME = "gain_charts.png"
CONFUSION_PLOT_FILENAME = "confusion_matrices.png"
FEATURE_IMPORTANCE_PLOT_FILENAME = "feature_importance.png"

# ============================================================================
# DATA DEFINITION
# ============================================================================
# Identifier column is not predictive and is dropped right after loading
ID_COLUMN = "id"

TARGET_COLUMN = "diagnosis"
VALID_LABELS: List[str] = ["B", "M"]  # B=Benign, M=Malignant

# Defines confusion-matrix polarity, ROC orientation and the gain-chart target
POSITIVE_CLASS = "M"

# ============================================================================
# SPLITTING
# ============================================================================
RANDOM_STATE = 42
TRAIN_SIZE = 0.8

# ============================================================================
# RANDOM FOREST GRID SEARCH
# ============================================================================
RF_N_ESTIMATORS = 500

# Grid order matters: ties in OOB error resolve to the first combination,
# iterating max_features (outer), then min_samples_leaf, then max_samples.
GRID_MAX_FEATURES: List[int] = [3, 5, 7]
GRID_MIN_SAMPLES_LEAF: List[int] = [1, 3, 5]
GRID_MAX_SAMPLES: List[int] = [100, 200, 300]

# ============================================================================
# SVM
# ============================================================================
SVM_KERNEL = "rbf"
SVM_C = 1.0
SVM_GAMMA = "scale"

# ============================================================================
# EVALUATION & PLOTTING
# ============================================================================
# Population step of the cumulative gain table (0.01 = 1% increments)
GAIN_RESOLUTION = 0.01
FEATURE_IMPORTANCE_TOP_N = 15

MODEL_NAMES = {
    "random_forest": "Random Forest",
    "svm": "SVM (RBF)",
}
MODEL_COLORS = {
    "random_forest": "#1f77b4",
    "svm": "#d62728",
}

PLOT_FIG_SIZE: Tuple[int, int] = (8, 6)
PLOT_FIG_SIZE_CONFUSION: Tuple[int, int] = (10, 4)
PLOT_DPI = 150
