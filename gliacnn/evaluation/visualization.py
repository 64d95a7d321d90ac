"""Visualization utilities for model evaluation.

ROC curve of the test set and loss/accuracy curves of the final
retraining. Figures are written with the non-interactive Agg backend
configured at startup.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from ..core.paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

FIG_DPI = 200


def plot_roc_curve(
    fpr: np.ndarray,
    tpr: np.ndarray,
    roc_auc: float,
    out_path: Path,
    title: Optional[str] = None,
) -> Optional[Path]:
    """Plot the test ROC curve against the chance diagonal.

    Returns None without writing anything when the curve is empty
    (single-class test set).
    """
    if len(fpr) == 0:
        logger.warning("ROC curve is undefined for this test set, skipping plot")
        return None

    fig, ax = plt.subplots(figsize=(7, 6))
    label = f"ROC (AUC = {roc_auc:.3f})" if np.isfinite(roc_auc) else "ROC"
    ax.plot(fpr, tpr, color="#e74c3c", lw=2, label=label)
    ax.plot([0, 1], [0, 1], color="#7f8c8d", lw=1, linestyle="--", label="Chance")
    ax.set_xlim(0.0, 1.0)
    ax.set_ylim(0.0, 1.02)
    ax.set_xlabel("False Positive Rate")
    ax.set_ylabel("True Positive Rate")
    ax.set_title(title or "Test ROC Curve", fontsize=12)
    ax.grid(True, linestyle="--", alpha=0.4)
    ax.legend(loc="lower right")

    fig.tight_layout()
    fig.savefig(out_path, dpi=FIG_DPI, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"ROC curve saved → {out_path.name}")
    return out_path


def plot_training_curves(
    train_losses: Sequence[float],
    train_accuracies: Sequence[float],
    out_path: Path,
    title: Optional[str] = None,
) -> Path:
    """Plot training loss and accuracy on a dual-axis chart.

    Saves the figure to disk and exports the raw values as ``.npz``
    next to it.
    """
    epochs = np.arange(1, len(train_losses) + 1)
    fig, ax1 = plt.subplots(figsize=(9, 6))

    ax1.plot(epochs, train_losses, color="#e74c3c", lw=2, label="Training Loss")
    ax1.set_xlabel("Epoch")
    ax1.set_ylabel("Loss", color="#e74c3c", fontweight="bold")
    ax1.tick_params(axis="y", labelcolor="#e74c3c")
    ax1.grid(True, linestyle="--", alpha=0.4)

    ax2 = ax1.twinx()
    ax2.plot(epochs, train_accuracies, color="#3498db", lw=2, label="Training Accuracy")
    ax2.set_ylabel("Accuracy", color="#3498db", fontweight="bold")
    ax2.tick_params(axis="y", labelcolor="#3498db")

    fig.suptitle(title or "Final Training Metrics", fontsize=14, y=1.02)
    fig.tight_layout()

    fig.savefig(out_path, dpi=FIG_DPI, bbox_inches="tight")
    logger.info(f"Training curves saved → {out_path.name}")

    np.savez(
        out_path.with_suffix(".npz"),
        train_losses=np.asarray(train_losses),
        train_accuracies=np.asarray(train_accuracies),
    )
    plt.close(fig)
    return out_path
