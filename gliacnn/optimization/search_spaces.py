"""
Hyperparameter Search Space.

Turns an Optuna trial into a fully materialized ``TrialHyperparameters``
record in one call, before any model is built. Bounds come from
``OptunaConfig.search_space`` and were validated with the config.

Distributions:
    optimizer       categorical over the configured optimizer names
    learning_rate   log-uniform
    weight_decay    log-uniform
    conv_channels_i integer; layer i+1 is bounded above by layer i's width
    conv_dropout_i  uniform
    dense_units     integer
    dense_dropout   uniform
"""

from typing import Any, Dict

import optuna

from ..core.config import TrialHyperparameters
from ..core.config.hyperparameters import NUM_CONV_BLOCKS
from ..core.config.optuna_config import SearchSpaceConfig


class SearchSpace:
    """
    Samples trial hyperparameters from configured bounds.

    Example:
        >>> space = SearchSpace(cfg.optuna.search_space)
        >>> hparams = space.sample(trial)
        >>> hparams.conv_channels
        (48, 40, 12)
    """

    def __init__(self, bounds: SearchSpaceConfig):
        self.bounds = bounds

    def sample(self, trial: optuna.Trial) -> TrialHyperparameters:
        b = self.bounds

        optimizer = trial.suggest_categorical("optimizer", list(b.optimizers))
        learning_rate = trial.suggest_float(
            "learning_rate", b.learning_rate_low, b.learning_rate_high, log=True
        )
        weight_decay = trial.suggest_float(
            "weight_decay", b.weight_decay_low, b.weight_decay_high, log=True
        )

        widths = []
        dropouts = []
        upper = b.conv_channels_high
        for i in range(1, NUM_CONV_BLOCKS + 1):
            width = trial.suggest_int(f"conv_channels_{i}", b.conv_channels_low, upper)
            widths.append(width)
            upper = width
            dropouts.append(
                trial.suggest_float(f"conv_dropout_{i}", b.dropout_low, b.dropout_high)
            )

        dense_units = trial.suggest_int("dense_units", b.dense_units_low, b.dense_units_high)
        dense_dropout = trial.suggest_float("dense_dropout", b.dropout_low, b.dropout_high)

        return TrialHyperparameters(
            optimizer=optimizer,
            learning_rate=learning_rate,
            weight_decay=weight_decay,
            conv_channels=tuple(widths),
            conv_dropouts=tuple(dropouts),
            dense_units=dense_units,
            dense_dropout=dense_dropout,
        )

    def describe(self) -> Dict[str, Any]:
        """Bounds as a plain dict (for the study summary)."""
        return self.bounds.model_dump()
