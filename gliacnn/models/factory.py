"""
Models Factory Module.

Registry-based construction of the classifier from the run configuration
(geometry) and a trial's hyperparameters (widths, dropout).

Example:
    >>> model = get_model(device, cfg, hyperparameters)
    >>> logits = model(torch.randn(8, 3, 64, 64, device=device))
"""

import logging
from typing import Callable, Dict

import torch
import torch.nn as nn

from ..core.config import Config, TrialHyperparameters
from ..core.paths import LOGGER_NAME
from .glia_cnn import GliaCNN

logger = logging.getLogger(LOGGER_NAME)


def build_glia_cnn(cfg: Config, hparams: TrialHyperparameters) -> nn.Module:
    return GliaCNN(
        in_channels=cfg.dataset.in_channels,
        image_size=cfg.dataset.image_size,
        conv_channels=hparams.conv_channels,
        conv_dropouts=hparams.conv_dropouts,
        dense_units=hparams.dense_units,
        dense_dropout=hparams.dense_dropout,
        kernel_size=cfg.model.kernel_size,
        pool_size=cfg.model.pool_size,
    )


_MODEL_REGISTRY: Dict[str, Callable[[Config, TrialHyperparameters], nn.Module]] = {
    "glia_cnn": build_glia_cnn,
}


def get_model(
    device: torch.device,
    cfg: Config,
    hparams: TrialHyperparameters,
    verbose: bool = False,
) -> nn.Module:
    """
    Instantiates a freshly initialized model on ``device``.

    Weight initialization draws from the torch global RNG, so callers seed
    it first when they need identical initial weights.

    Raises:
        ValueError: If the architecture is not registered.
    """
    builder = _MODEL_REGISTRY.get(cfg.model.name.lower())
    if builder is None:
        raise ValueError(f"Architecture '{cfg.model.name}' is not registered in the Factory.")

    model = builder(cfg, hparams).to(device)

    if verbose:
        total_params = sum(p.numel() for p in model.parameters())
        logger.info(
            f"Model {cfg.model.name} deployed to {str(device).upper()} | "
            f"Parameters: {total_params:,}"
        )
    return model
