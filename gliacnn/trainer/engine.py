"""
Core Training and Validation Engines.

Stateless epoch functions shared by the fold loop and the final
retraining. The device is always an explicit argument.

    train_one_epoch   one optimization pass, returns (loss, accuracy)
    validate_epoch    loss, accuracy and ROC-AUC without gradient
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import logging
from typing import Dict, List, Optional, Tuple

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import numpy as np
import torch
import torch.nn as nn
from torch.utils.data import DataLoader
from tqdm.auto import tqdm

# =========================================================================== #
#                                Internal Imports                             #
# =========================================================================== #
from ..core.paths import LOGGER_NAME
from ..evaluation.metrics import binary_auc

logger = logging.getLogger(LOGGER_NAME)

# =========================================================================== #
#                               CORE ENGINES                                  #
# =========================================================================== #


def train_one_epoch(
    model: nn.Module,
    loader: DataLoader,
    criterion: nn.Module,
    optimizer: torch.optim.Optimizer,
    device: torch.device,
    batch_log: Optional[List[float]] = None,
    grad_clip: Optional[float] = None,
    use_tqdm: bool = False,
    log_interval: Optional[int] = None,
) -> Tuple[float, float]:
    """
    Performs one full optimization pass over ``loader``.

    For every batch: zero gradients, forward, loss, backward, (clip), step.
    Loss and accuracy are accumulated weighted by batch size.

    Args:
        model: Network, updated in place.
        loader: Training batches.
        criterion: Loss function on logits.
        optimizer: Optimizer bound to ``model``'s parameters.
        device: Compute device.
        batch_log: If given, every batch loss is appended to it.
        grad_clip: Max gradient L2 norm (None = no clipping).
        use_tqdm: Show a batch progress bar.
        log_interval: Emit a DEBUG message every N batches.

    Returns:
        (mean training loss, training accuracy) of the epoch.
    """
    model.train()
    running_loss = 0.0
    correct = 0
    seen = 0

    iterator = tqdm(loader, desc="Training", leave=False) if use_tqdm else loader
    for batch_idx, (inputs, targets) in enumerate(iterator):
        inputs, targets = inputs.to(device), targets.to(device)

        optimizer.zero_grad()
        outputs = model(inputs)
        loss = criterion(outputs, targets)
        loss.backward()

        if grad_clip is not None and grad_clip > 0:
            torch.nn.utils.clip_grad_norm_(model.parameters(), grad_clip)

        optimizer.step()

        batch_loss = loss.item()
        batch_size = inputs.size(0)
        running_loss += batch_loss * batch_size
        correct += (outputs.argmax(dim=1) == targets).sum().item()
        seen += batch_size

        if batch_log is not None:
            batch_log.append(batch_loss)
        if use_tqdm:
            iterator.set_postfix({"loss": f"{running_loss / seen:.4f}"})
        if log_interval and (batch_idx + 1) % log_interval == 0:
            logger.debug(f"Batch {batch_idx + 1}/{len(loader)} | loss={batch_loss:.4f}")

    if seen == 0:
        raise ValueError("Training loader produced no batches")

    return running_loss / seen, correct / seen


def validate_epoch(
    model: nn.Module,
    loader: DataLoader,
    criterion: nn.Module,
    device: torch.device,
) -> Dict[str, float]:
    """
    Scores the model on held-out batches.

    AUC integrates the ROC curve of the class-1 probability; a single-class
    validation set scores 0.0.

    Returns:
        dict with 'loss', 'accuracy' and 'auc'.
    """
    model.eval()
    total_loss = 0.0
    correct = 0
    seen = 0
    probs, labels = [], []

    with torch.no_grad():
        for inputs, targets in loader:
            inputs, targets = inputs.to(device), targets.to(device)
            outputs = model(inputs)
            total_loss += criterion(outputs, targets).item() * inputs.size(0)
            correct += (outputs.argmax(dim=1) == targets).sum().item()
            seen += inputs.size(0)

            probs.append(torch.softmax(outputs, dim=1)[:, 1].cpu().numpy())
            labels.append(targets.cpu().numpy())

    if seen == 0:
        raise ValueError("Validation loader produced no batches")

    val_auc = binary_auc(np.concatenate(labels), np.concatenate(probs), fallback=0.0)
    return {"loss": total_loss / seen, "accuracy": correct / seen, "auc": val_auc}
