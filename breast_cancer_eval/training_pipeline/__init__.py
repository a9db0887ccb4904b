"""
Training pipeline for the breast cancer classifiers.

Contains modules for splitting, training, grid search, and model evaluation.
"""
