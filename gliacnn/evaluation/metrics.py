"""
Metrics Computation Module.

Binary classification metrics from class-1 probabilities. AUC is the
trapezoidal integral of the ROC curve; when only one class is present the
curve is undefined and the caller-chosen fallback is returned instead.
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import logging
from typing import Dict, Tuple

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import numpy as np
from sklearn.metrics import auc, f1_score, roc_curve

# =========================================================================== #
#                                Internal Imports                             #
# =========================================================================== #
from ..core.paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

# =========================================================================== #
#                                 METRIC LOGIC                                #
# =========================================================================== #


def is_single_class(labels: np.ndarray) -> bool:
    return np.unique(np.asarray(labels)).size < 2


def compute_roc(labels: np.ndarray, prob_pos: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    ROC curve points for the positive class.

    Raises:
        ValueError: If ``labels`` contains a single class.
    """
    if is_single_class(labels):
        raise ValueError("ROC curve is undefined for a single-class label set")
    fpr, tpr, thresholds = roc_curve(labels, prob_pos, pos_label=1)
    return fpr, tpr, thresholds


def binary_auc(labels: np.ndarray, prob_pos: np.ndarray, fallback: float = 0.0) -> float:
    """
    Area under the ROC curve, or ``fallback`` for single-class labels.

    Non-finite probabilities (a diverged model) also yield ``fallback``.
    """
    prob_pos = np.asarray(prob_pos, dtype=np.float64)
    if is_single_class(labels) or not np.all(np.isfinite(prob_pos)):
        return float(fallback)
    fpr, tpr, _ = compute_roc(labels, prob_pos)
    return float(auc(fpr, tpr))


def compute_classification_metrics(
    labels: np.ndarray, preds: np.ndarray, prob_pos: np.ndarray
) -> Dict[str, float]:
    """
    Computes accuracy, F1 of the positive class and ROC-AUC.

    Returns:
        dict with 'accuracy', 'auc' (NaN for single-class labels) and 'f1'.
    """
    labels = np.asarray(labels)
    preds = np.asarray(preds)
    accuracy = float(np.mean(preds == labels)) if labels.size else float("nan")

    f1 = float(f1_score(labels, preds, pos_label=1, average="binary", zero_division=0))

    if is_single_class(labels):
        logger.warning("Test labels contain a single class: AUC is undefined, reporting NaN")
    roc_auc = binary_auc(labels, prob_pos, fallback=float("nan"))

    return {"accuracy": accuracy, "auc": roc_auc, "f1": f1}
