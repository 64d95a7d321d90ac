"""
Final Evaluation Pipeline.

Inference on the test partition followed by every evaluation artifact:
prediction table, metrics document, ROC curve and the training curves of
the final model.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import torch
import torch.nn as nn

from ..core.paths import LOGGER_NAME, RunPaths
from ..data_handler import SampleDataset
from .evaluator import EvaluationResult, evaluate_model
from .reporting import save_final_metrics, save_predictions
from .visualization import plot_roc_curve, plot_training_curves

logger = logging.getLogger(LOGGER_NAME)


def run_final_evaluation(
    model: nn.Module,
    test_set: SampleDataset,
    device: torch.device,
    paths: RunPaths,
    batch_size: int = 32,
    records: Optional[Sequence[Any]] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> EvaluationResult:
    """
    Executes the complete evaluation pipeline.

    Args:
        model: Final trained network.
        test_set: Held-out test partition (never seen by the search).
        device: Inference device.
        paths: Run directories.
        batch_size: Inference batch size.
        records: Per-epoch records of the final training (objects with
            ``train_loss`` and ``train_accuracy``); plotted when given.
        context: Extra information merged into ``final_metrics.json``.
    """
    result = evaluate_model(model, test_set, device, batch_size=batch_size)

    save_predictions(result, paths.get_report_path("test_predictions.csv"))
    save_final_metrics(result, paths.get_report_path("final_metrics.json"), context=context)

    plot_roc_curve(
        result.fpr,
        result.tpr,
        result.metrics["auc"],
        out_path=paths.get_fig_path("roc_curve.png"),
    )
    if records:
        plot_training_curves(
            train_losses=[r.train_loss for r in records],
            train_accuracies=[r.train_accuracy for r in records],
            out_path=paths.get_fig_path("final_training_curves.png"),
        )

    logger.info("Final Evaluation Phase Complete.")
    return result
