"""
Hyperparameter grid search module for the random forest.

Exhaustively evaluates every combination of max_features, min_samples_leaf
and max_samples, scoring each forest by its out-of-bag error so no separate
validation split is needed.
"""
import itertools
import pandas as pd
import logging
from typing import Dict, List, Sequence, Tuple

from breast_cancer_eval import config
from breast_cancer_eval.training_pipeline.train_models import (
    check_training_partition,
    oob_error,
    train_random_forest
)

logger = logging.getLogger(__name__)

GRID_PARAMETERS = ('max_features', 'min_samples_leaf', 'max_samples')


def build_grid(
    max_features: Sequence[int],
    min_samples_leaf: Sequence[int],
    max_samples: Sequence[int]
) -> List[Dict[str, int]]:
    """
    Expand candidate lists into the ordered Cartesian product.

    Order: max_features is the outer loop, then min_samples_leaf, then
    max_samples. Tie-breaking in run_grid_search depends on this order.

    Example:
        >>> build_grid([3, 5], [1], [100])
        [{'max_features': 3, 'min_samples_leaf': 1, 'max_samples': 100},
         {'max_features': 5, 'min_samples_leaf': 1, 'max_samples': 100}]
    """
    return [
        dict(zip(GRID_PARAMETERS, combination))
        for combination in itertools.product(max_features, min_samples_leaf, max_samples)
    ]


def validate_grid(
    max_features: Sequence[int],
    min_samples_leaf: Sequence[int],
    max_samples: Sequence[int],
    n_samples: int,
    n_features: int
) -> None:
    """
    Reject candidate values the forest cannot be trained with.

    Raises:
        ValueError: If a candidate list is empty, a value is not a positive
            integer, max_samples exceeds the training size, or max_features
            exceeds the feature count.
    """
    for name, candidates in zip(GRID_PARAMETERS, (max_features, min_samples_leaf, max_samples)):
        if len(candidates) == 0:
            raise ValueError(f"Candidate list for '{name}' is empty")
        invalid = [v for v in candidates if int(v) != v or v < 1]
        if invalid:
            raise ValueError(f"Candidates for '{name}' must be positive integers, got {invalid}")

    too_many_samples = [v for v in max_samples if v > n_samples]
    if too_many_samples:
        raise ValueError(
            f"max_samples candidates {too_many_samples} exceed training size {n_samples}"
        )

    too_many_features = [v for v in max_features if v > n_features]
    if too_many_features:
        raise ValueError(
            f"max_features candidates {too_many_features} exceed feature count {n_features}"
        )


def run_grid_search(
    X_train: pd.DataFrame,
    y_train: pd.Series,
    max_features: Sequence[int] = None,
    min_samples_leaf: Sequence[int] = None,
    max_samples: Sequence[int] = None,
    random_state: int = None,
    n_estimators: int = None
) -> Tuple[Dict[str, int], float, pd.DataFrame]:
    """
    Run exhaustive grid search minimising random forest OOB error.

    Every grid point is trained with the same random_state so errors are
    comparable. The winner is the first combination (in grid order) with the
    strictly lowest error.

    Args:
        X_train: Training features.
        y_train: Training target.
        max_features: Feature-sample count candidates. If None, uses config.GRID_MAX_FEATURES.
        min_samples_leaf: Minimum leaf size candidates. If None, uses config.GRID_MIN_SAMPLES_LEAF.
        max_samples: Bootstrap sample size candidates. If None, uses config.GRID_MAX_SAMPLES.
        random_state: Random seed. If None, uses config.RANDOM_STATE.
        n_estimators: Trees per forest. If None, uses config.RF_N_ESTIMATORS.

    Returns:
        Tuple of (best_params, best_error, results) where results holds one
        row per grid point, in grid order, with columns
        max_features, min_samples_leaf, max_samples, oob_error.

    Raises:
        TrainingError: If the partition is empty or single-class.
        ValueError: If the grid contains values the forest cannot use.

    Example:
        >>> best_params, best_error, results = run_grid_search(X_train, y_train)
        >>> print(f"Best OOB error: {best_error:.4f} with {best_params}")
    """
    if max_features is None:
        max_features = config.GRID_MAX_FEATURES
    if min_samples_leaf is None:
        min_samples_leaf = config.GRID_MIN_SAMPLES_LEAF
    if max_samples is None:
        max_samples = config.GRID_MAX_SAMPLES
    if random_state is None:
        random_state = config.RANDOM_STATE
    if n_estimators is None:
        n_estimators = config.RF_N_ESTIMATORS

    check_training_partition(X_train, y_train)
    validate_grid(max_features, min_samples_leaf, max_samples, len(X_train), X_train.shape[1])

    grid = build_grid(max_features, min_samples_leaf, max_samples)

    logger.info("=" * 80)
    logger.info("RANDOM FOREST GRID SEARCH")
    logger.info("=" * 80)
    logger.info(f"Objective: Minimise OOB error")
    logger.info(f"Grid size: {len(grid)} combinations")
    logger.info(f"  max_features:     {list(max_features)}")
    logger.info(f"  min_samples_leaf: {list(min_samples_leaf)}")
    logger.info(f"  max_samples:      {list(max_samples)}")

    rows = []
    best_params = None
    best_error = float('inf')

    for i, params in enumerate(grid, start=1):
        model = train_random_forest(
            X_train, y_train, params,
            random_state=random_state,
            n_estimators=n_estimators
        )
        error = oob_error(model)
        rows.append({**params, 'oob_error': error})

        logger.info(f"  [{i}/{len(grid)}] {params} -> OOB error = {error:.4f}")

        # Strict comparison keeps the first occurrence on ties
        if error < best_error:
            best_error = error
            best_params = params

    results = pd.DataFrame(rows, columns=list(GRID_PARAMETERS) + ['oob_error'])

    logger.info("\n✓ Grid search complete")
    logger.info(f"Best OOB error: {best_error:.4f}")
    logger.info(f"Best parameters:")
    for param, value in best_params.items():
        logger.info(f"  {param:20s}: {value}")

    return best_params, best_error, results
