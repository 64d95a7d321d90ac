"""
Trial Hyperparameter Record.

A fully materialized configuration drawn once per trial, before any model
is built. Model and optimizer factories read only from this object, so
nothing downstream calls back into the sampler.
"""

from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .types import ConvWidth, DropoutRate, LearningRate, OptimizerName, WeightDecay

NUM_CONV_BLOCKS = 3


class TrialHyperparameters(BaseModel):
    """
    Searched hyperparameters of one candidate model.

    Attributes:
        optimizer: Optimizer family.
        learning_rate: Initial step size.
        weight_decay: L2 penalty passed to the optimizer.
        conv_channels: Output widths of the three convolution blocks, non-increasing.
        conv_dropouts: Dropout after each convolution block.
        dense_units: Width of the hidden dense layer.
        dense_dropout: Dropout before the output layer.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    optimizer: OptimizerName = "adam"
    learning_rate: LearningRate = 1e-3
    weight_decay: WeightDecay = 1e-4
    conv_channels: Tuple[ConvWidth, ConvWidth, ConvWidth] = (32, 32, 16)
    conv_dropouts: Tuple[DropoutRate, DropoutRate, DropoutRate] = (0.1, 0.1, 0.1)
    dense_units: ConvWidth = 64
    dense_dropout: DropoutRate = Field(default=0.3)

    @model_validator(mode="after")
    def validate_widths(self) -> "TrialHyperparameters":
        widths = self.conv_channels
        if any(later > earlier for earlier, later in zip(widths, widths[1:])):
            raise ValueError(f"conv_channels must be non-increasing, got {widths}")
        return self

    def to_flat_dict(self) -> Dict[str, Any]:
        """Flat key/value view matching the Optuna parameter names."""
        flat: Dict[str, Any] = {
            "optimizer": self.optimizer,
            "learning_rate": self.learning_rate,
            "weight_decay": self.weight_decay,
        }
        for i in range(NUM_CONV_BLOCKS):
            flat[f"conv_channels_{i + 1}"] = self.conv_channels[i]
            flat[f"conv_dropout_{i + 1}"] = self.conv_dropouts[i]
        flat["dense_units"] = self.dense_units
        flat["dense_dropout"] = self.dense_dropout
        return flat

    @classmethod
    def from_flat_dict(cls, params: Dict[str, Any]) -> "TrialHyperparameters":
        """Rebuilds the record from Optuna ``trial.params``."""
        return cls(
            optimizer=params["optimizer"],
            learning_rate=params["learning_rate"],
            weight_decay=params["weight_decay"],
            conv_channels=tuple(
                int(params[f"conv_channels_{i + 1}"]) for i in range(NUM_CONV_BLOCKS)
            ),
            conv_dropouts=tuple(
                float(params[f"conv_dropout_{i + 1}"]) for i in range(NUM_CONV_BLOCKS)
            ),
            dense_units=int(params["dense_units"]),
            dense_dropout=float(params["dense_dropout"]),
        )
