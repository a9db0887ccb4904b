"""
Breast cancer model comparison.

Random forest vs. RBF SVM on the Wisconsin diagnostic data, compared with
confusion matrices, ROC curves, AUC, and cumulative gain charts.
"""
__version__ = "1.0.0"
