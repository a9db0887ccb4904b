"""
Command-line entry point for the breast cancer model comparison.

Executes complete pipeline: load → split → grid search → train → evaluate → plot.

Usage:
    python run_pipeline.py                               # Defaults from config
    python run_pipeline.py --data data/breast-cancer.csv
    python run_pipeline.py --seed 7 --train-size 0.75
    python run_pipeline.py --max-features 2 4 6 --min-samples-leaf 1 5
    python run_pipeline.py --show                        # Also display charts
"""
import argparse
import logging
import sys
from pathlib import Path

from breast_cancer_eval import config
from breast_cancer_eval.exceptions import PipelineError
from breast_cancer_eval.main import run_evaluation_pipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser exposing the pipeline configuration."""
    parser = argparse.ArgumentParser(
        description="Compare random forest and SVM on breast cancer data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with defaults
  python run_pipeline.py

  # Smaller grid, coarser gain chart
  python run_pipeline.py --max-features 3 5 --gain-resolution 0.05

  # Treat benign as the positive class
  python run_pipeline.py --positive-class B
        """
    )
    parser.add_argument(
        '--data',
        type=Path,
        default=config.RAW_DATA_PATH,
        help=f'Input CSV (default: {config.RAW_DATA_PATH})'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=config.RANDOM_STATE,
        help=f'Random seed for split and models (default: {config.RANDOM_STATE})'
    )
    parser.add_argument(
        '--train-size',
        type=float,
        default=config.TRAIN_SIZE,
        help=f'Training fraction (default: {config.TRAIN_SIZE})'
    )
    parser.add_argument(
        '--positive-class',
        default=config.POSITIVE_CLASS,
        choices=config.VALID_LABELS,
        help=f'Positive label (default: {config.POSITIVE_CLASS})'
    )
    parser.add_argument(
        '--gain-resolution',
        type=float,
        default=config.GAIN_RESOLUTION,
        help=f'Gain table population step (default: {config.GAIN_RESOLUTION})'
    )
    parser.add_argument(
        '--max-features',
        type=int,
        nargs='+',
        default=config.GRID_MAX_FEATURES,
        help=f'Grid candidates for max_features (default: {config.GRID_MAX_FEATURES})'
    )
    parser.add_argument(
        '--min-samples-leaf',
        type=int,
        nargs='+',
        default=config.GRID_MIN_SAMPLES_LEAF,
        help=f'Grid candidates for min_samples_leaf (default: {config.GRID_MIN_SAMPLES_LEAF})'
    )
    parser.add_argument(
        '--max-samples',
        type=int,
        nargs='+',
        default=config.GRID_MAX_SAMPLES,
        help=f'Grid candidates for max_samples (default: {config.GRID_MAX_SAMPLES})'
    )
    parser.add_argument(
        '--n-estimators',
        type=int,
        default=config.RF_N_ESTIMATORS,
        help=f'Trees per forest (default: {config.RF_N_ESTIMATORS})'
    )
    parser.add_argument(
        '--output-dir',
        type=Path,
        default=config.OUTPUT_DIR,
        help=f'Directory for rendered charts (default: {config.OUTPUT_DIR})'
    )
    parser.add_argument(
        '--show',
        action='store_true',
        help='Display charts interactively as well as saving them'
    )
    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns the process exit status."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = build_parser().parse_args(argv)

    try:
        run_evaluation_pipeline(
            file_path=args.data,
            random_state=args.seed,
            train_size=args.train_size,
            max_features=args.max_features,
            min_samples_leaf=args.min_samples_leaf,
            max_samples=args.max_samples,
            gain_resolution=args.gain_resolution,
            positive_class=args.positive_class,
            n_estimators=args.n_estimators,
            output_dir=args.output_dir,
            show_plots=args.show
        )
    except PipelineError as e:
        logger.error(f"❌ Pipeline failed during {e.stage}: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"❌ Pipeline failed during data loading: {e}")
        return 1
    except ValueError as e:
        logger.error(f"❌ Invalid configuration: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
