"""
Model evaluation module for the breast cancer classifiers.

Provides the metrics used to compare the random forest and the SVM:
- Confusion matrix statistics (accuracy, kappa, sensitivity, specificity, ...)
- ROC curve and trapezoidal AUC
- Cumulative gain table with lift against random targeting
- Feature importance for tree ensembles
"""
import pandas as pd
import numpy as np
import logging
from sklearn.metrics import auc, cohen_kappa_score, confusion_matrix, roc_curve
from typing import Any, Dict, Sequence

from breast_cancer_eval import config
from breast_cancer_eval.exceptions import EvaluationError

logger = logging.getLogger(__name__)


def _check_inputs(y_true: Sequence, y_other: Sequence, other_name: str) -> None:
    """Raise EvaluationError for empty or mismatched label / prediction vectors."""
    if len(y_true) == 0:
        raise EvaluationError("Cannot evaluate on an empty test partition")
    if len(y_true) != len(y_other):
        raise EvaluationError(
            f"Label vector ({len(y_true)}) and {other_name} ({len(y_other)}) differ in length"
        )


def _check_both_classes(is_positive: np.ndarray, positive_class: Any) -> None:
    n_positive = int(is_positive.sum())
    if n_positive == 0 or n_positive == len(is_positive):
        raise EvaluationError(
            f"Test labels contain a single class ({n_positive} of {len(is_positive)} are "
            f"'{positive_class}'); ROC, AUC and gain are undefined"
        )


def _ratio(numerator: float, denominator: float, name: str) -> float:
    if denominator == 0:
        logger.warning(f"{name} is undefined (zero denominator); reported as NaN")
        return float('nan')
    return float(numerator / denominator)


def positive_class_probabilities(
    model: Any,
    X: pd.DataFrame,
    positive_class: Any = None
) -> np.ndarray:
    """
    Return the predicted probability of the positive class.

    The probability column is looked up from model.classes_ rather than
    assumed, since column order follows the sorted class labels and differs
    between label encodings.

    Args:
        model: Fitted classifier with classes_ and predict_proba().
        X: Features to score.
        positive_class: Positive label. If None, uses config.POSITIVE_CLASS.

    Returns:
        1-D array of positive-class probabilities.

    Raises:
        EvaluationError: If the model was not trained on positive_class.
    """
    if positive_class is None:
        positive_class = config.POSITIVE_CLASS

    classes = list(model.classes_)
    if positive_class not in classes:
        raise EvaluationError(
            f"Positive class '{positive_class}' not among model classes {classes}"
        )

    return model.predict_proba(X)[:, classes.index(positive_class)]


def compute_confusion_statistics(
    y_true: Sequence,
    y_pred: Sequence,
    positive_class: Any = None
) -> Dict[str, float]:
    """
    Calculate 2×2 confusion matrix counts and derived rates.

    Metrics calculated:
    - tp, fp, tn, fn: Counts against the positive class
    - accuracy: (TP + TN) / N
    - kappa: Cohen's kappa (agreement beyond chance)
    - sensitivity / recall: TP / (TP + FN)
    - specificity: TN / (TN + FP)
    - precision: TP / (TP + FP), positive predictive value
    - npv: TN / (TN + FN), negative predictive value
    - f1_score: Harmonic mean of precision and recall
    - prevalence: (TP + FN) / N
    - detection_rate: TP / N
    - detection_prevalence: (TP + FP) / N
    - balanced_accuracy: (sensitivity + specificity) / 2

    Undefined ratios are NaN.

    Args:
        y_true: True labels.
        y_pred: Predicted labels.
        positive_class: Positive label. If None, uses config.POSITIVE_CLASS.

    Returns:
        Dictionary of metric names and values.

    Raises:
        EvaluationError: If inputs are empty or differ in length.

    Example:
        >>> stats = compute_confusion_statistics(y_test, model.predict(X_test))
        >>> print(f"Sensitivity: {stats['sensitivity']:.4f}")
        Sensitivity: 0.9524
    """
    if positive_class is None:
        positive_class = config.POSITIVE_CLASS

    _check_inputs(y_true, y_pred, "predictions")

    y_true = np.asarray(y_true, dtype=object)
    y_pred = np.asarray(y_pred, dtype=object)

    is_true_pos = y_true == positive_class
    is_pred_pos = y_pred == positive_class

    # Binarise so any label other than the positive class counts as negative
    cm = confusion_matrix(is_true_pos, is_pred_pos, labels=[False, True])
    tn, fp, fn, tp = (int(v) for v in cm.ravel())
    n = tn + fp + fn + tp

    sensitivity = _ratio(tp, tp + fn, "sensitivity")
    specificity = _ratio(tn, tn + fp, "specificity")
    precision = _ratio(tp, tp + fp, "precision")

    if np.isnan(precision) or np.isnan(sensitivity):
        f1 = float('nan')
    else:
        f1 = _ratio(2 * precision * sensitivity, precision + sensitivity, "f1_score")

    return {
        'tp': tp,
        'fp': fp,
        'tn': tn,
        'fn': fn,
        'accuracy': (tp + tn) / n,
        'kappa': float(cohen_kappa_score(is_true_pos, is_pred_pos, labels=[False, True])),
        'sensitivity': sensitivity,
        'recall': sensitivity,
        'specificity': specificity,
        'precision': precision,
        'npv': _ratio(tn, tn + fn, "npv"),
        'f1_score': f1,
        'prevalence': (tp + fn) / n,
        'detection_rate': tp / n,
        'detection_prevalence': (tp + fp) / n,
        'balanced_accuracy': (sensitivity + specificity) / 2,
    }


def compute_roc_curve(
    y_true: Sequence,
    y_score: Sequence,
    positive_class: Any = None
) -> pd.DataFrame:
    """
    Sweep the decision threshold and return the ROC curve.

    Tied scores share one threshold, so the curve moves diagonally through
    ties and stays monotone non-decreasing. The first point is (0, 0) at an
    infinite threshold and the last point is (1, 1).

    Args:
        y_true: True labels.
        y_score: Positive-class probabilities.
        positive_class: Positive label. If None, uses config.POSITIVE_CLASS.

    Returns:
        DataFrame with columns fpr (1 - specificity), tpr (sensitivity), threshold.

    Raises:
        EvaluationError: If inputs are empty, differ in length, or the test
            labels contain a single class.
    """
    if positive_class is None:
        positive_class = config.POSITIVE_CLASS

    _check_inputs(y_true, y_score, "scores")

    is_positive = np.asarray(y_true, dtype=object) == positive_class
    _check_both_classes(is_positive, positive_class)

    fpr, tpr, thresholds = roc_curve(
        is_positive.astype(int),
        np.asarray(y_score, dtype=float),
        pos_label=1,
        drop_intermediate=False
    )

    return pd.DataFrame({'fpr': fpr, 'tpr': tpr, 'threshold': thresholds})


def compute_auc(roc: pd.DataFrame) -> float:
    """Area under an ROC curve by trapezoidal integration."""
    return float(auc(roc['fpr'].values, roc['tpr'].values))


def compute_gain_table(
    y_true: Sequence,
    y_score: Sequence,
    positive_class: Any = None,
    resolution: float = None
) -> pd.DataFrame:
    """
    Create cumulative gain table at fixed population resolution.

    Records are ranked by descending positive-class probability. At each
    population cutoff the table reports the share of all positives captured
    by targeting the top-ranked records, next to the random-targeting
    baseline. Records with tied scores are one block whose positives are
    spread evenly across it, so the result does not depend on input order.

    Args:
        y_true: True labels.
        y_score: Positive-class probabilities.
        positive_class: Positive label. If None, uses config.POSITIVE_CLASS.
        resolution: Population step as a fraction. If None, uses config.GAIN_RESOLUTION.
            Cutoffs are exact multiples of it, with 100% appended as the last
            cutoff when it does not divide 100% evenly.

    Returns:
        DataFrame with columns:
        - population_pct: Share of population targeted (0-100)
        - gain_pct: Share of positives captured (0-100)
        - baseline_pct: Share captured by random targeting (equals population_pct)
        - lift: gain_pct / population_pct (NaN at 0%)

    Raises:
        EvaluationError: If inputs are empty, differ in length, or the test
            labels contain a single class.
        ValueError: If resolution is not in (0, 1].

    Example:
        >>> gains = compute_gain_table(y_test, y_prob)
        >>> print(gains.loc[gains['population_pct'] == 40, 'gain_pct'])
    """
    if positive_class is None:
        positive_class = config.POSITIVE_CLASS
    if resolution is None:
        resolution = config.GAIN_RESOLUTION

    if not 0 < resolution <= 1:
        raise ValueError(f"resolution must be in (0, 1], got {resolution}")

    _check_inputs(y_true, y_score, "scores")

    is_positive = np.asarray(y_true, dtype=object) == positive_class
    _check_both_classes(is_positive, positive_class)

    scores = np.asarray(y_score, dtype=float)
    order = np.argsort(-scores, kind='mergesort')
    sorted_scores = scores[order]
    sorted_positive = is_positive[order].astype(int)

    n = len(sorted_scores)
    total_positive = sorted_positive.sum()

    # Knots at the end of each block of tied scores; interpolating linearly
    # between knots spreads a block's positives evenly across its ranks.
    block_ends = np.append(np.flatnonzero(np.diff(sorted_scores) != 0) + 1, n)
    cum_positive = np.cumsum(sorted_positive)
    knot_x = np.concatenate(([0], block_ends))
    knot_y = np.concatenate(([0], cum_positive[block_ends - 1]))

    # Cutoffs sit at whole multiples of the resolution; 100% is appended
    # when the resolution does not divide it evenly.
    n_steps = int(np.floor(1 / resolution + 1e-6))
    if abs(n_steps * resolution - 1) < 1e-6:
        population = np.arange(n_steps + 1) / n_steps
    else:
        population = np.append(np.arange(n_steps + 1) * resolution, 1.0)
    captured = np.interp(population * n, knot_x, knot_y)

    gain_table = pd.DataFrame({
        'population_pct': population * 100,
        'gain_pct': captured / total_positive * 100,
        'baseline_pct': population * 100,
    })
    with np.errstate(divide='ignore', invalid='ignore'):
        gain_table['lift'] = np.where(
            population > 0,
            gain_table['gain_pct'] / gain_table['population_pct'],
            np.nan
        )

    logger.info(f"Gain table created with {len(gain_table)} cutoffs (step = {resolution * 100:g}%)")

    return gain_table


def evaluate_model(
    model: Any,
    X_test: pd.DataFrame,
    y_test: pd.Series,
    positive_class: Any = None,
    gain_resolution: float = None
) -> Dict[str, Any]:
    """
    Evaluate model on the test partition.

    Args:
        model: Trained model with classes_, predict() and predict_proba().
        X_test: Test features.
        y_test: Test target.
        positive_class: Positive label. If None, uses config.POSITIVE_CLASS.
        gain_resolution: Gain table step. If None, uses config.GAIN_RESOLUTION.

    Returns:
        Dictionary with:
        - metrics: Confusion statistics plus 'auc'
        - roc_curve: ROC DataFrame
        - auc: Area under the ROC curve
        - gain_table: Cumulative gain DataFrame
        - predictions: DataFrame of actual, predicted, probability per test record

    Example:
        >>> evaluation = evaluate_model(model, X_test, y_test)
        >>> print(f"ROC-AUC: {evaluation['auc']:.4f}")
        ROC-AUC: 0.9937
    """
    if positive_class is None:
        positive_class = config.POSITIVE_CLASS

    logger.info("Evaluating model...")

    _check_inputs(y_test, X_test, "feature rows")

    # Get predictions
    y_pred = model.predict(X_test)
    y_prob = positive_class_probabilities(model, X_test, positive_class)

    metrics = compute_confusion_statistics(y_test, y_pred, positive_class)
    roc = compute_roc_curve(y_test, y_prob, positive_class)
    roc_auc = compute_auc(roc)
    metrics['auc'] = roc_auc
    gain_table = compute_gain_table(y_test, y_prob, positive_class, gain_resolution)

    predictions = pd.DataFrame({
        'actual': np.asarray(y_test, dtype=object),
        'predicted': np.asarray(y_pred, dtype=object),
        'probability': y_prob
    }, index=y_test.index)

    logger.info("Evaluation metrics:")
    for metric, value in metrics.items():
        logger.info(f"  {metric:20s}: {value:.4f}")

    return {
        'metrics': metrics,
        'roc_curve': roc,
        'auc': roc_auc,
        'gain_table': gain_table,
        'predictions': predictions,
    }


def get_feature_importance(
    model: Any,
    feature_names: list,
    top_n: int = None
) -> pd.DataFrame:
    """
    Extract and rank feature importances from model.

    Args:
        model: Trained model with feature_importances_ attribute.
        feature_names: List of feature names.
        top_n: Number of top features to return. If None, uses config.FEATURE_IMPORTANCE_TOP_N.

    Returns:
        DataFrame with features and their importance scores, sorted descending.
        Empty if the model has no feature_importances_ (e.g. the SVM).

    Example:
        >>> importance_df = get_feature_importance(rf_model, X_train.columns, top_n=10)
        >>> print(importance_df.head())
    """
    if top_n is None:
        top_n = config.FEATURE_IMPORTANCE_TOP_N

    if not hasattr(model, 'feature_importances_'):
        logger.warning("Model does not have feature_importances_ attribute")
        return pd.DataFrame(columns=['feature', 'importance'])

    importance_df = pd.DataFrame({
        'feature': list(feature_names),
        'importance': model.feature_importances_
    }).sort_values('importance', ascending=False).head(top_n).reset_index(drop=True)

    logger.info(f"Top {len(importance_df)} feature importances extracted")

    return importance_df
