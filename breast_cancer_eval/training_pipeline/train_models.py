"""
Model training module for the breast cancer pipeline.

Splits the dataset into stratified train/test partitions and trains the two
compared classifiers: a bagged random forest and an RBF-kernel SVM.
"""
import pandas as pd
import logging
from sklearn.ensemble import RandomForestClassifier
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVC
from typing import Dict, Tuple

from breast_cancer_eval import config
from breast_cancer_eval.exceptions import TrainingError

logger = logging.getLogger(__name__)


def split_train_test(
    X: pd.DataFrame,
    y: pd.Series,
    train_size: float = None,
    random_state: int = None
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.Series, pd.Series]:
    """
    Perform stratified train/test split.

    The same random_state always reproduces the same partitions. Row index
    labels are preserved so partitions can be traced back to the dataset.

    Args:
        X: Feature matrix.
        y: Target vector.
        train_size: Fraction of data for training. If None, uses config.TRAIN_SIZE.
        random_state: Random seed. If None, uses config.RANDOM_STATE.

    Returns:
        Tuple of (X_train, X_test, y_train, y_test).

    Raises:
        ValueError: If train_size is not strictly between 0 and 1.
        TrainingError: If a class has fewer than two records, only one class
            is present, or a partition would be too small to hold both classes.

    Example:
        >>> X_train, X_test, y_train, y_test = split_train_test(X, y)
        >>> print(X_train.shape)
        (455, 30)
    """
    if train_size is None:
        train_size = config.TRAIN_SIZE
    if random_state is None:
        random_state = config.RANDOM_STATE

    if not 0 < train_size < 1:
        raise ValueError(f"train_size must be between 0 and 1, got {train_size}")

    class_counts = pd.Series(y).value_counts()
    class_counts = class_counts[class_counts > 0]
    if len(class_counts) < 2 or class_counts.min() < 2:
        raise TrainingError(
            f"Stratified split needs at least two records of each of two classes, "
            f"got {class_counts.to_dict()}"
        )

    try:
        X_train, X_test, y_train, y_test = train_test_split(
            X, y,
            train_size=train_size,
            random_state=random_state,
            stratify=y  # Maintain class distribution
        )
    except ValueError as e:
        raise TrainingError(f"Stratified split failed: {e}") from e

    logger.info(f"Train/test split complete (seed={random_state}):")
    logger.info(f"  Train: {X_train.shape[0]:,} samples")
    logger.info(f"  Test: {X_test.shape[0]:,} samples")
    logger.info(f"  Train class distribution: {y_train.value_counts(sort=False).to_dict()}")
    logger.info(f"  Test class distribution: {y_test.value_counts(sort=False).to_dict()}")

    return X_train, X_test, y_train, y_test


def check_training_partition(X_train: pd.DataFrame, y_train: pd.Series) -> None:
    """
    Reject partitions that admit no decision boundary.

    Raises:
        TrainingError: If the partition is empty, X and y disagree in length,
            or only one class is present.
    """
    if len(y_train) == 0 or len(X_train) == 0:
        raise TrainingError("Training partition is empty")

    if len(X_train) != len(y_train):
        raise TrainingError(
            f"Feature rows ({len(X_train)}) and labels ({len(y_train)}) differ in length"
        )

    observed = pd.Series(y_train).dropna().unique()
    if len(observed) < 2:
        raise TrainingError(
            f"Training partition contains a single class {list(observed)}; "
            f"no decision boundary exists"
        )


def train_random_forest(
    X_train: pd.DataFrame,
    y_train: pd.Series,
    params: Dict[str, int] = None,
    random_state: int = None,
    n_estimators: int = None
) -> RandomForestClassifier:
    """
    Train random forest with bootstrap aggregation and OOB scoring.

    Args:
        X_train: Training features.
        y_train: Training target.
        params: Forest hyperparameters, typically the grid search winner
            (max_features, min_samples_leaf, max_samples). If None, sklearn defaults.
        random_state: Random seed. If None, uses config.RANDOM_STATE.
        n_estimators: Number of trees. If None, uses config.RF_N_ESTIMATORS.

    Returns:
        Fitted RandomForestClassifier with oob_score_ populated.

    Raises:
        TrainingError: If the partition is empty or single-class.

    Example:
        >>> model = train_random_forest(X_train, y_train, {'max_features': 5})
        >>> print(f"OOB error: {oob_error(model):.4f}")
    """
    if params is None:
        params = {}
    if random_state is None:
        random_state = config.RANDOM_STATE
    if n_estimators is None:
        n_estimators = config.RF_N_ESTIMATORS

    check_training_partition(X_train, y_train)

    logger.debug(f"Training random forest with {params}")

    model = RandomForestClassifier(
        **params,
        n_estimators=n_estimators,
        bootstrap=True,
        oob_score=True,
        random_state=random_state
    )

    model.fit(X_train, y_train)

    return model


def oob_error(model: RandomForestClassifier) -> float:
    """Out-of-bag misclassification rate of a fitted forest."""
    return 1.0 - model.oob_score_


def train_svm(
    X_train: pd.DataFrame,
    y_train: pd.Series,
    random_state: int = None
) -> Pipeline:
    """
    Train RBF-kernel SVM with feature scaling and probability calibration.

    Features are standardised inside the pipeline so the test partition is
    scaled with training statistics only.

    Args:
        X_train: Training features.
        y_train: Training target.
        random_state: Random seed for the probability calibration folds.
            If None, uses config.RANDOM_STATE.

    Returns:
        Fitted Pipeline(StandardScaler, SVC) exposing predict/predict_proba.

    Raises:
        TrainingError: If the partition is empty or single-class.
    """
    if random_state is None:
        random_state = config.RANDOM_STATE

    check_training_partition(X_train, y_train)

    logger.info("Training SVM (RBF kernel)...")

    model = Pipeline([
        ('scaler', StandardScaler()),
        ('svc', SVC(
            kernel=config.SVM_KERNEL,
            C=config.SVM_C,
            gamma=config.SVM_GAMMA,
            probability=True,
            random_state=random_state
        ))
    ])

    model.fit(X_train, y_train)

    logger.info(
        f"✓ SVM trained: {int(model.named_steps['svc'].n_support_.sum())} support vectors"
    )

    return model
