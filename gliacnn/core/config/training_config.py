"""
Training Loop Configuration Schema.

Shared by the per-fold loop (``epochs``, ``patience``) and the final
retraining (``final_epochs``, no early stopping). Optimizer choice,
learning rate and weight decay are not here: they belong to each trial's
hyperparameters.

Key Features:
    * Reproducibility: one base seed from which fold and loader seeds derive
    * Early stopping: patience counted in non-improving epochs
    * Stability: optional gradient-norm clipping
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import argparse
from typing import Optional

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
from pydantic import BaseModel, ConfigDict, Field

# =========================================================================== #
#                               Internal Imports                              #
# =========================================================================== #
from .types import BatchSize, GradNorm, Momentum, NonNegativeInt, PositiveInt

# =========================================================================== #
#                             TRAINING CONFIGURATION                          #
# =========================================================================== #


class TrainingConfig(BaseModel):
    """Epoch budgets, batch size and stopping policy."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # ==================== Reproducibility ====================
    seed: int = Field(default=42, description="Base random seed")

    # ==================== Training Loop ====================
    batch_size: BatchSize = Field(default=16, description="Samples per batch")
    epochs: PositiveInt = Field(default=50, description="Maximum epochs per fold")
    patience: NonNegativeInt = Field(default=5, description="Early stopping patience")
    final_epochs: PositiveInt = Field(
        default=30, description="Epochs for the final retraining on the whole pool"
    )
    use_tqdm: bool = Field(default=False, description="Batch progress bars")

    # ==================== Optimization ====================
    momentum: Momentum = Field(default=0.9, description="SGD / RMSprop momentum")
    grad_clip: Optional[GradNorm] = Field(default=None, description="Max gradient norm")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "TrainingConfig":
        """
        Factory from CLI arguments.

        Only overrides schema fields present in args and not None.
        """
        args_dict = vars(args)
        params = {
            k: v for k, v in args_dict.items() if k in cls.model_fields and v is not None
        }
        return cls(**params)
