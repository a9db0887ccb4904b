"""
Breast cancer model comparison - pipeline orchestration.

Runs every stage in order, passing data explicitly between them:
load → split → grid search → train → evaluate → plot.

Usage:
    python -m breast_cancer_eval.main
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from breast_cancer_eval import config
from breast_cancer_eval.feature_pipeline import load_dataset
from breast_cancer_eval.reporting import (
    build_comparison_table,
    format_evaluation_report,
    plot_confusion_matrices,
    plot_feature_importance,
    plot_gain_charts,
    plot_roc_curves
)
from breast_cancer_eval.training_pipeline.evaluation import (
    evaluate_model,
    get_feature_importance
)
from breast_cancer_eval.training_pipeline.train_models import (
    split_train_test,
    train_random_forest,
    train_svm
)
from breast_cancer_eval.training_pipeline.tune_grid import run_grid_search

logger = logging.getLogger(__name__)


def run_evaluation_pipeline(
    file_path: Optional[str] = None,
    random_state: int = None,
    train_size: float = None,
    max_features: Sequence[int] = None,
    min_samples_leaf: Sequence[int] = None,
    max_samples: Sequence[int] = None,
    gain_resolution: float = None,
    positive_class: str = None,
    n_estimators: int = None,
    output_dir: Optional[Path] = None,
    make_plots: bool = True,
    show_plots: bool = False
) -> Dict[str, Any]:
    """
    Execute the complete model comparison pipeline.

    Stages:
    1. Load and validate data
    2. Stratified train/test split
    3. Random forest grid search on OOB error
    4. Train tuned random forest and SVM
    5. Evaluate both models on the test partition
    6. Render comparison charts

    Args:
        file_path: Input CSV. If None, uses config.RAW_DATA_PATH.
        random_state: Seed for split and models. If None, uses config.RANDOM_STATE.
        train_size: Training fraction. If None, uses config.TRAIN_SIZE.
        max_features: Grid candidates. If None, uses config.GRID_MAX_FEATURES.
        min_samples_leaf: Grid candidates. If None, uses config.GRID_MIN_SAMPLES_LEAF.
        max_samples: Grid candidates. If None, uses config.GRID_MAX_SAMPLES.
        gain_resolution: Gain table step. If None, uses config.GAIN_RESOLUTION.
        positive_class: Positive label. If None, uses config.POSITIVE_CLASS.
        n_estimators: Trees per forest. If None, uses config.RF_N_ESTIMATORS.
        output_dir: Where charts are written. If None, uses config.OUTPUT_DIR.
        make_plots: Render charts (stage 6).
        show_plots: Also display charts interactively.

    Returns:
        Dictionary with best_params, best_oob_error, grid_results, models,
        evaluations, comparison, and plot_paths.

    Raises:
        PipelineError: Subclass naming the stage that failed.
        ValueError: If positive_class is not one of the dataset's label levels,
            or the split ratio, grid, or gain resolution is invalid.
    """
    if random_state is None:
        random_state = config.RANDOM_STATE
    if positive_class is None:
        positive_class = config.POSITIVE_CLASS
    if output_dir is None:
        output_dir = config.OUTPUT_DIR

    logger.info("=" * 80)
    logger.info("BREAST CANCER MODEL COMPARISON PIPELINE")
    logger.info("=" * 80)

    # Step 1: Load data
    logger.info("\n[1/6] Loading data...")
    X, y = load_dataset(file_path)
    labels = list(y.cat.categories)
    if positive_class not in labels:
        raise ValueError(
            f"Positive class '{positive_class}' is not one of the dataset labels {labels}"
        )

    # Step 2: Train/test split
    logger.info("\n[2/6] Splitting train/test...")
    X_train, X_test, y_train, y_test = split_train_test(
        X, y, train_size=train_size, random_state=random_state
    )

    # Step 3: Grid search
    logger.info("\n[3/6] Running random forest grid search...")
    best_params, best_oob_error, grid_results = run_grid_search(
        X_train, y_train,
        max_features=max_features,
        min_samples_leaf=min_samples_leaf,
        max_samples=max_samples,
        random_state=random_state,
        n_estimators=n_estimators
    )

    # Step 4: Train final models
    logger.info("\n[4/6] Training final models...")
    rf_model = train_random_forest(
        X_train, y_train, best_params,
        random_state=random_state,
        n_estimators=n_estimators
    )
    logger.info(f"✓ Random forest trained with {best_params}")
    svm_model = train_svm(X_train, y_train, random_state=random_state)
    models = {'random_forest': rf_model, 'svm': svm_model}

    # Step 5: Evaluate
    logger.info("\n[5/6] Evaluating models on test partition...")
    evaluations = {
        key: evaluate_model(model, X_test, y_test, positive_class, gain_resolution)
        for key, model in models.items()
    }
    for key, evaluation in evaluations.items():
        logger.info("\n" + format_evaluation_report(
            config.MODEL_NAMES[key], evaluation, positive_class
        ))
    comparison = build_comparison_table(evaluations)
    importance_df = get_feature_importance(rf_model, X_train.columns)

    # Step 6: Plots
    plot_paths = {}
    if make_plots:
        logger.info("\n[6/6] Rendering charts...")
        output_dir = Path(output_dir)
        plot_paths = {
            'roc': output_dir / config.ROC_PLOT_FILENAME,
            'gain': output_dir / config.GAIN_PLOT_FILENAME,
            'confusion': output_dir / config.CONFUSION_PLOT_FILENAME,
            'feature_importance': output_dir / config.FEATURE_IMPORTANCE_PLOT_FILENAME,
        }
        negative_class = next(c for c in y.cat.categories if c != positive_class)
        plot_roc_curves(
            {key: ev['roc_curve'] for key, ev in evaluations.items()},
            {key: ev['auc'] for key, ev in evaluations.items()},
            save_path=plot_paths['roc'], show=show_plots
        )
        plot_gain_charts(
            {key: ev['gain_table'] for key, ev in evaluations.items()},
            save_path=plot_paths['gain'], show=show_plots
        )
        plot_confusion_matrices(
            {key: ev['metrics'] for key, ev in evaluations.items()},
            positive_class=positive_class,
            negative_class=negative_class,
            save_path=plot_paths['confusion'], show=show_plots
        )
        plot_feature_importance(
            importance_df, save_path=plot_paths['feature_importance'], show=show_plots
        )
    else:
        logger.info("\n[6/6] Skipping charts")

    logger.info("\n" + "=" * 80)
    logger.info("✓ PIPELINE COMPLETE")
    logger.info("=" * 80)
    logger.info(f"Best grid point: {best_params} (OOB error = {best_oob_error:.4f})")
    logger.info(f"\nModel comparison:\n{comparison.to_string(float_format='{:.4f}'.format)}")
    for name, path in plot_paths.items():
        logger.info(f"  {name:20s}: {path}")

    return {
        'best_params': best_params,
        'best_oob_error': best_oob_error,
        'grid_results': grid_results,
        'models': models,
        'evaluations': evaluations,
        'comparison': comparison,
        'feature_importance': importance_df,
        'plot_paths': plot_paths,
    }


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    run_evaluation_pipeline()
