"""
Optuna Optimization Configuration Schema.

Pydantic v2 schema defining study parameters, sampler and pruning
policies, the storage backend of the trial ledger and the bounds of the
hyperparameter search space.
"""

# =========================================================================== #
#                         Standard Imports                                    #
# =========================================================================== #
import argparse
from pathlib import Path
from typing import List, Literal, Optional

# =========================================================================== #
#                         Third-Party Imports                                 #
# =========================================================================== #
from pydantic import BaseModel, ConfigDict, Field, model_validator

# =========================================================================== #
#                         Internal Imports                                    #
# =========================================================================== #
from .types import (
    ConvWidth,
    DropoutRate,
    LearningRate,
    NonNegativeInt,
    OptimizerName,
    PositiveFloat,
    PositiveInt,
    PrunerType,
    SamplerType,
    WeightDecay,
)

# =========================================================================== #
#                         SEARCH SPACE BOUNDS                                 #
# =========================================================================== #


class SearchSpaceConfig(BaseModel):
    """
    Bounds of every searched hyperparameter.

    Learning rate and weight decay are sampled log-uniformly, so both
    bounds must be strictly positive. Convolution widths are sampled so
    that each layer is no wider than the previous one.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    optimizers: List[OptimizerName] = Field(default=["adam", "adamw", "sgd", "rmsprop"])
    learning_rate_low: LearningRate = 1e-5
    learning_rate_high: LearningRate = 1e-2
    weight_decay_low: WeightDecay = 1e-6
    weight_decay_high: WeightDecay = 1e-2
    conv_channels_low: ConvWidth = 8
    conv_channels_high: ConvWidth = 64
    dropout_low: DropoutRate = 0.0
    dropout_high: DropoutRate = 0.5
    dense_units_low: ConvWidth = 16
    dense_units_high: ConvWidth = 128

    @model_validator(mode="after")
    def validate_bounds(self) -> "SearchSpaceConfig":
        if not self.optimizers:
            raise ValueError("Search space needs at least one optimizer")
        if len(set(self.optimizers)) != len(self.optimizers):
            raise ValueError(f"Duplicate optimizers in search space: {self.optimizers}")

        pairs = {
            "learning_rate": (self.learning_rate_low, self.learning_rate_high),
            "weight_decay": (self.weight_decay_low, self.weight_decay_high),
            "conv_channels": (self.conv_channels_low, self.conv_channels_high),
            "dropout": (self.dropout_low, self.dropout_high),
            "dense_units": (self.dense_units_low, self.dense_units_high),
        }
        for name, (low, high) in pairs.items():
            if low > high:
                raise ValueError(f"Invalid {name} bounds: low={low} > high={high}")

        if self.weight_decay_low <= 0:
            raise ValueError("weight_decay_low must be > 0 for log-uniform sampling")
        return self


# =========================================================================== #
#                         OPTUNA CONFIGURATION                                #
# =========================================================================== #


class OptunaConfig(BaseModel):
    """
    Optuna hyperparameter optimization study configuration.

    The study always maximizes the mean fold AUC.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # ==================== Study Basics ====================
    study_name: str = Field(default="glia_cnn_search", min_length=1)
    n_trials: PositiveInt = Field(default=20, description="Total trial budget")
    timeout: Optional[PositiveFloat] = Field(
        default=None, description="Max seconds for optimization (None = unlimited)"
    )

    # ==================== Search Strategy ====================
    sampler_type: SamplerType = Field(default="tpe")
    sampler_seed: Optional[int] = Field(
        default=None, description="Sampler seed (None = training.seed)"
    )
    n_startup_trials: NonNegativeInt = Field(
        default=5, description="Random trials before TPE modelling starts"
    )
    search_space: SearchSpaceConfig = Field(default_factory=SearchSpaceConfig)

    # ==================== Pruning Strategy ====================
    enable_pruning: bool = Field(
        default=False, description="Prune trials on the running mean of fold AUCs"
    )
    pruner_type: PrunerType = Field(default="median")

    # ==================== Storage Backend ====================
    storage_type: Literal["sqlite", "memory"] = Field(default="sqlite")
    storage_url: Optional[str] = Field(
        default=None, description="Explicit RDB URL (overrides the run database)"
    )
    load_if_exists: bool = Field(default=True, description="Resume an existing study")

    # ==================== Reporting ====================
    show_progress_bar: bool = Field(default=False)
    top_k: PositiveInt = Field(default=10, description="Rows in the top-trials workbook")

    @model_validator(mode="after")
    def validate_storage(self) -> "OptunaConfig":
        if self.storage_type == "memory" and self.storage_url is not None:
            raise ValueError("storage_url is set but storage_type is 'memory'")
        return self

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "OptunaConfig":
        """Factory from CLI arguments."""
        args_dict = vars(args)
        params = {
            k: v for k, v in args_dict.items() if k in cls.model_fields and v is not None
        }
        return cls(**params)

    def get_storage_url(self, database_dir: Path) -> Optional[str]:
        """
        Resolves the Optuna storage URL for this run.

        Args:
            database_dir: The run's ``database/`` directory.

        Returns:
            RDB URL, or None for an in-memory study.
        """
        if self.storage_type == "memory":
            return None
        if self.storage_url:
            return self.storage_url
        db_path = Path(database_dir) / f"{self.study_name}.db"
        return f"sqlite:///{db_path}"
