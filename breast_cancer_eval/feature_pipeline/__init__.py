"""
Feature pipeline for the breast cancer data.

Public API for loading, cleaning, and label-encoding the raw CSV.
"""
from breast_cancer_eval.feature_pipeline.load import (
    load_raw_data,
    drop_identifier_columns,
    encode_target,
    validate_features,
    load_dataset
)

__all__ = [
    'load_raw_data',
    'drop_identifier_columns',
    'encode_target',
    'validate_features',
    'load_dataset',
]
