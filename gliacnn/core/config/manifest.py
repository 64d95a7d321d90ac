"""
Experiment Manifest.

Aggregates the specialized configuration sections into one immutable
object that is the single source of truth for a run. Built either from a
YAML recipe or from CLI flags; when ``--config`` is given the recipe is
authoritative and individual flags are ignored.

Key Features:
    * Hierarchical aggregation: hardware, telemetry, dataset, model,
      training, cross-validation and Optuna sections
    * Cross-section validation: spatial size vs. pooling depth, fold count
      vs. synthetic pool size
    * Dual factories: ``from_yaml`` and ``from_args``
"""

import argparse
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..io import load_config_from_yaml
from .cross_validation_config import CrossValidationConfig
from .dataset_config import DatasetConfig
from .hardware_config import HardwareConfig
from .hyperparameters import NUM_CONV_BLOCKS
from .model_config import ModelConfig
from .optuna_config import OptunaConfig
from .telemetry_config import TelemetryConfig
from .training_config import TrainingConfig


class Config(BaseModel):
    """
    Main experiment manifest aggregating specialized sub-configurations.

    Example:
        >>> from gliacnn.core import Config, parse_args
        >>> args = parse_args()  # --config recipes/config_glia_cnn.yaml
        >>> cfg = Config.from_args(args)
        >>> cfg.cross_validation.n_folds
        5
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    hardware: HardwareConfig = Field(default_factory=HardwareConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)
    cross_validation: CrossValidationConfig = Field(default_factory=CrossValidationConfig)
    optuna: OptunaConfig = Field(default_factory=OptunaConfig)

    @model_validator(mode="after")
    def validate_logic(self) -> "Config":
        """
        Cross-section checks.

        Raises:
            ValueError: On combinations that cannot produce a valid run.
        """
        downsample = self.model.pool_size**NUM_CONV_BLOCKS
        if self.dataset.image_size % downsample != 0:
            raise ValueError(
                f"image_size={self.dataset.image_size} must be divisible by "
                f"pool_size**{NUM_CONV_BLOCKS}={downsample}"
            )

        if self.dataset.synthetic and self.dataset.synthetic_samples < self.cross_validation.n_folds:
            raise ValueError(
                f"synthetic_samples={self.dataset.synthetic_samples} is smaller than "
                f"n_folds={self.cross_validation.n_folds}"
            )
        return self

    @property
    def run_slug(self) -> str:
        return self.telemetry.project_name

    @property
    def num_workers(self) -> int:
        return self.hardware.effective_num_workers

    @property
    def sampler_seed(self) -> int:
        """Sampler seed, falling back to the training seed."""
        if self.optuna.sampler_seed is not None:
            return self.optuna.sampler_seed
        return self.training.seed

    def dump_serialized(self) -> Dict[str, Any]:
        """JSON-compatible dict for YAML mirroring and run hashing."""
        return self.model_dump(mode="json")

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "Config":
        """Factory from a YAML recipe."""
        return cls(**load_config_from_yaml(Path(yaml_path)))

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Config":
        """
        Factory from CLI arguments.

        Precedence:
            1. ``--config`` given: the YAML recipe is used as-is
            2. otherwise: CLI flags over pydantic defaults
        """
        if getattr(args, "config", None):
            return cls.from_yaml(Path(args.config))

        return cls(
            hardware=HardwareConfig.from_args(args),
            telemetry=TelemetryConfig.from_args(args),
            dataset=DatasetConfig.from_args(args),
            model=ModelConfig.from_args(args),
            training=TrainingConfig.from_args(args),
            cross_validation=CrossValidationConfig.from_args(args),
            optuna=OptunaConfig.from_args(args),
        )
