"""
Optimization Setup Module.

Factories for the loss function and the optimizer of a trial. The
optimizer family, learning rate and weight decay come from the trial's
hyperparameters; momentum comes from the training section.
"""

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import torch.nn as nn
import torch.optim as optim

# =========================================================================== #
#                                Internal Imports                             #
# =========================================================================== #
from ..core.config import TrialHyperparameters

# =========================================================================== #
#                                  FACTORIES                                  #
# =========================================================================== #


def get_criterion() -> nn.Module:
    """Cross-entropy over the two logits."""
    return nn.CrossEntropyLoss()


def get_optimizer(
    model: nn.Module, hparams: TrialHyperparameters, momentum: float = 0.9
) -> optim.Optimizer:
    """
    Instantiates the optimizer named in ``hparams``.

    Raises:
        ValueError: Unknown optimizer name.
    """
    name = hparams.optimizer.lower()
    params = model.parameters()
    lr = hparams.learning_rate
    wd = hparams.weight_decay

    if name == "adam":
        return optim.Adam(params, lr=lr, weight_decay=wd)
    if name == "adamw":
        return optim.AdamW(params, lr=lr, weight_decay=wd)
    if name == "sgd":
        return optim.SGD(params, lr=lr, momentum=momentum, weight_decay=wd)
    if name == "rmsprop":
        return optim.RMSprop(params, lr=lr, momentum=momentum, weight_decay=wd)

    raise ValueError(f"Unknown optimizer: {hparams.optimizer}")
