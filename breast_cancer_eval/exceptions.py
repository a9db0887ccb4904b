"""
Error taxonomy for the breast cancer model comparison pipeline.

Every error carries the pipeline stage it belongs to so the entry point can
report where a run stopped.
"""


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    stage = "pipeline"


class DataFormatError(PipelineError):
    """Input file is malformed, or expected columns / label values are missing."""

    stage = "data loading"


class TrainingError(PipelineError):
    """Training partition is degenerate (empty or single-class)."""

    stage = "training"


class EvaluationError(PipelineError):
    """Predictions and labels cannot be scored (length mismatch, single class)."""

    stage = "evaluation"
