"""
Evaluation Engine Module

Runs the trained model over the held-out test partition and consolidates
per-sample predictions, classification metrics and ROC curve points.
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import logging
from dataclasses import dataclass, field
from typing import Dict, List

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import numpy as np
import pandas as pd
import torch
import torch.nn as nn

# =========================================================================== #
#                                Internal Imports                             #
# =========================================================================== #
from ..core.paths import LOGGER_NAME
from ..data_handler import SampleDataset, build_loader
from .metrics import compute_classification_metrics, compute_roc, is_single_class

logger = logging.getLogger(LOGGER_NAME)

PREDICTION_COLUMNS = (
    "sample_id",
    "predicted_label",
    "true_label",
    "probability_class0",
    "probability_class1",
)

# =========================================================================== #
#                               EVALUATION ENGINE                             #
# =========================================================================== #


@dataclass
class EvaluationResult:
    """
    Test-set outcome.

    Attributes:
        predictions: One row per test sample, columns ``PREDICTION_COLUMNS``.
        metrics: accuracy, auc (NaN for a single-class test set) and f1.
        fpr, tpr, thresholds: ROC curve points (empty for a single-class set).
    """

    predictions: pd.DataFrame
    metrics: Dict[str, float]
    fpr: np.ndarray = field(default_factory=lambda: np.empty(0))
    tpr: np.ndarray = field(default_factory=lambda: np.empty(0))
    thresholds: np.ndarray = field(default_factory=lambda: np.empty(0))

    @property
    def roc_points(self) -> Dict[str, List[float]]:
        return {
            "fpr": self.fpr.tolist(),
            "tpr": self.tpr.tolist(),
            "thresholds": self.thresholds.tolist(),
        }


def evaluate_model(
    model: nn.Module,
    dataset: SampleDataset,
    device: torch.device,
    batch_size: int = 32,
) -> EvaluationResult:
    """
    Performs full-set inference and coordinates metric calculation.

    Probabilities are the softmax of the logits; the predicted label is
    their argmax. Samples keep the dataset order.

    Args:
        model: The trained network.
        dataset: Test partition.
        device: Hardware target (CPU/CUDA/MPS).
        batch_size: Inference batch size.

    Returns:
        EvaluationResult with the prediction table, metrics and ROC points.

    Raises:
        ValueError: If the dataset is empty.
    """
    if len(dataset) == 0:
        raise ValueError("Cannot evaluate on an empty dataset")

    loader = build_loader(dataset, batch_size=batch_size, shuffle=False)

    model.eval()
    all_probs_list: List[np.ndarray] = []
    all_labels_list: List[np.ndarray] = []

    with torch.no_grad():
        for inputs, targets in loader:
            logits = model(inputs.to(device))
            probs = torch.softmax(logits, dim=1)
            all_probs_list.append(probs.cpu().numpy())
            all_labels_list.append(targets.numpy())

    all_probs = np.concatenate(all_probs_list)
    all_labels = np.concatenate(all_labels_list)
    all_preds = all_probs.argmax(axis=1)

    predictions = pd.DataFrame(
        {
            "sample_id": list(dataset.sample_ids),
            "predicted_label": all_preds.astype(np.int64),
            "true_label": all_labels.astype(np.int64),
            "probability_class0": all_probs[:, 0],
            "probability_class1": all_probs[:, 1],
        },
        columns=list(PREDICTION_COLUMNS),
    )

    metrics = compute_classification_metrics(all_labels, all_preds, all_probs[:, 1])
    result = EvaluationResult(predictions=predictions, metrics=metrics)
    if not is_single_class(all_labels) and np.all(np.isfinite(all_probs)):
        result.fpr, result.tpr, result.thresholds = compute_roc(all_labels, all_probs[:, 1])

    logger.info(
        f"Test Metrics -> Acc: {metrics['accuracy']:.4f} | "
        f"AUC: {metrics['auc']:.4f} | F1: {metrics['f1']:.4f}"
    )
    return result
