"""
Cross-Validation Configuration Schema.

Fold count and the recovery/bookkeeping policy of the per-trial k-fold
loop.
"""

import argparse

from pydantic import BaseModel, ConfigDict, Field

from .types import FoldCount, NonNegativeInt, Probability


class CrossValidationConfig(BaseModel):
    """K-fold scoring policy for one trial."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    n_folds: FoldCount = Field(default=5)
    imbalance_tolerance: Probability = Field(
        default=0.15,
        description="Max |fold positive rate - pool positive rate| before warning",
    )
    max_fold_restarts: NonNegativeInt = Field(
        default=1, description="Fresh restarts after an unrecoverable checkpoint"
    )
    keep_fold_checkpoints: bool = Field(default=False)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "CrossValidationConfig":
        args_dict = vars(args)
        params = {
            k: v for k, v in args_dict.items() if k in cls.model_fields and v is not None
        }
        return cls(**params)
