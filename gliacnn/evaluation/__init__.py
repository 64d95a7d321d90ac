"""
Evaluation and Reporting Package

Test-set inference, classification metrics, ROC/training-curve figures
and the prediction and metrics reports.
"""

from .evaluation_pipeline import run_final_evaluation
from .evaluator import PREDICTION_COLUMNS, EvaluationResult, evaluate_model
from .metrics import binary_auc, compute_classification_metrics, compute_roc, is_single_class
from .reporting import save_final_metrics, save_predictions
from .visualization import plot_roc_curve, plot_training_curves

__all__ = [
    "run_final_evaluation",
    "PREDICTION_COLUMNS",
    "EvaluationResult",
    "evaluate_model",
    "binary_auc",
    "compute_classification_metrics",
    "compute_roc",
    "is_single_class",
    "save_final_metrics",
    "save_predictions",
    "plot_roc_curve",
    "plot_training_curves",
]
