"""
Data loading module for the breast cancer pipeline.

Handles loading the raw CSV, dropping the identifier column, validating
feature columns, and casting the diagnosis label to a two-level categorical.
"""
import pandas as pd
from pandas.api.types import is_numeric_dtype
from typing import List, Optional, Tuple
import logging

from breast_cancer_eval import config
from breast_cancer_eval.exceptions import DataFormatError

logger = logging.getLogger(__name__)


def load_raw_data(file_path: Optional[str] = None) -> pd.DataFrame:
    """
    Load raw breast cancer data from CSV file.

    Args:
        file_path: Path to raw CSV file. If None, uses default from config.

    Returns:
        DataFrame with raw data (569 rows × 32 columns for the WDBC file).

    Raises:
        FileNotFoundError: If CSV file doesn't exist.
        DataFormatError: If the file is empty, not UTF-8, or cannot be parsed as CSV.

    Example:
        >>> df = load_raw_data()
        >>> print(df.shape)
        (569, 32)
    """
    if file_path is None:
        file_path = config.RAW_DATA_PATH

    logger.info(f"Loading raw data from: {file_path}")

    try:
        df = pd.read_csv(file_path)
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise
    except pd.errors.EmptyDataError as e:
        raise DataFormatError(f"File is empty: {file_path}") from e
    except pd.errors.ParserError as e:
        raise DataFormatError(f"Could not parse CSV file {file_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise DataFormatError(f"File is not valid UTF-8 text: {file_path}") from e

    logger.info(f"Loaded {len(df):,} rows × {len(df.columns)} columns")

    return df


def drop_identifier_columns(
    df: pd.DataFrame,
    id_column: Optional[str] = None
) -> pd.DataFrame:
    """
    Drop the identifier column and any entirely empty columns.

    The public WDBC CSV ends every row with a trailing comma, which pandas
    reads as an all-NaN 'Unnamed: 32' column.

    Args:
        df: Raw DataFrame.
        id_column: Identifier column name. If None, uses config.ID_COLUMN.

    Returns:
        DataFrame without identifier and empty columns.
    """
    if id_column is None:
        id_column = config.ID_COLUMN

    df_clean = df.copy()

    if id_column in df_clean.columns:
        df_clean = df_clean.drop(columns=[id_column])
        logger.info(f"Dropped identifier column '{id_column}'")
    else:
        logger.warning(f"Identifier column '{id_column}' not found, nothing dropped")

    empty_columns = [c for c in df_clean.columns if df_clean[c].isnull().all()]
    if empty_columns:
        df_clean = df_clean.drop(columns=empty_columns)
        logger.info(f"Dropped {len(empty_columns)} empty columns: {empty_columns}")

    return df_clean


def encode_target(
    df: pd.DataFrame,
    target_column: Optional[str] = None,
    valid_labels: Optional[List[str]] = None
) -> Tuple[pd.DataFrame, pd.Series]:
    """
    Split off the label column and cast it to a two-level categorical.

    Args:
        df: DataFrame with the label column.
        target_column: Label column name. If None, uses config.TARGET_COLUMN.
        valid_labels: The two allowed label values. If None, uses config.VALID_LABELS.

    Returns:
        Tuple of (X, y) where y has categorical dtype with categories valid_labels.

    Raises:
        DataFormatError: If the label column is missing, has missing values,
            or contains values outside valid_labels.

    Example:
        >>> X, y = encode_target(df)
        >>> print(y.cat.categories.tolist())
        ['B', 'M']
    """
    if target_column is None:
        target_column = config.TARGET_COLUMN
    if valid_labels is None:
        valid_labels = config.VALID_LABELS

    if len(valid_labels) != 2:
        raise ValueError(f"Exactly two label values are required, got {valid_labels}")

    if target_column not in df.columns:
        raise DataFormatError(f"Label column '{target_column}' not found in data")

    labels = df[target_column]

    n_missing = int(labels.isnull().sum())
    if n_missing > 0:
        raise DataFormatError(f"Label column '{target_column}' has {n_missing} missing values")

    unexpected = sorted(set(labels.astype(str)) - set(valid_labels))
    if unexpected:
        raise DataFormatError(
            f"Label column '{target_column}' contains unexpected values {unexpected}; "
            f"expected only {valid_labels}"
        )

    y = pd.Series(
        pd.Categorical(labels.astype(str), categories=valid_labels),
        index=df.index,
        name=target_column
    )
    X = df.drop(columns=[target_column])

    logger.info("Class distribution:")
    for label, count in y.value_counts(sort=False).items():
        logger.info(f"  {label}: {count:,} ({count / len(y) * 100:.2f}%)")

    return X, y


def validate_features(X: pd.DataFrame) -> pd.DataFrame:
    """
    Check that every remaining feature is numeric and fully populated.

    Args:
        X: Feature matrix.

    Returns:
        The same feature matrix.

    Raises:
        DataFormatError: If there are no features, or any feature is
            non-numeric or contains missing values.
    """
    if X.shape[1] == 0:
        raise DataFormatError("No feature columns left after dropping identifier and label")

    non_numeric = [c for c in X.columns if not is_numeric_dtype(X[c])]
    if non_numeric:
        raise DataFormatError(f"Non-numeric feature columns: {non_numeric}")

    missing = X.isnull().sum()
    missing = missing[missing > 0]
    if not missing.empty:
        raise DataFormatError(f"Feature columns with missing values: {missing.to_dict()}")

    return X


def load_dataset(
    file_path: Optional[str] = None,
    id_column: Optional[str] = None,
    target_column: Optional[str] = None,
    valid_labels: Optional[List[str]] = None
) -> Tuple[pd.DataFrame, pd.Series]:
    """
    Execute full loading pipeline.

    Orchestrates all loading steps:
    1. Read CSV
    2. Drop identifier and empty columns
    3. Split off and encode the label
    4. Validate features

    Args:
        file_path: Path to raw CSV file. If None, uses config.RAW_DATA_PATH.
        id_column: Identifier column name. If None, uses config.ID_COLUMN.
        target_column: Label column name. If None, uses config.TARGET_COLUMN.
        valid_labels: The two label values. If None, uses config.VALID_LABELS.

    Returns:
        Tuple of (X, y) ready for splitting.

    Example:
        >>> X, y = load_dataset()
        >>> print(X.shape)
        (569, 30)
    """
    logger.info("Starting data loading pipeline")

    df = load_raw_data(file_path)
    df = drop_identifier_columns(df, id_column)
    X, y = encode_target(df, target_column, valid_labels)
    X = validate_features(X)

    logger.info(f"Loading complete. X shape = {X.shape}, y shape = {y.shape}")

    return X, y
