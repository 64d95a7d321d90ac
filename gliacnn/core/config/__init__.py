"""
Configuration Package Initialization.

Flat public API over the configuration sections. Imports are resolved
lazily (PEP 562) so that importing the package does not pull in the
whole schema tree until a section is actually used.

Example:
    >>> from gliacnn.core.config import Config, TrialHyperparameters
    >>> cfg = Config.from_yaml("recipes/config_glia_cnn.yaml")
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "Config",
    "HardwareConfig",
    "TelemetryConfig",
    "DatasetConfig",
    "ModelConfig",
    "TrainingConfig",
    "CrossValidationConfig",
    "OptunaConfig",
    "SearchSpaceConfig",
    "TrialHyperparameters",
    "ValidatedPath",
]

_LAZY_IMPORTS: dict[str, str] = {
    "Config": "gliacnn.core.config.manifest",
    "HardwareConfig": "gliacnn.core.config.hardware_config",
    "TelemetryConfig": "gliacnn.core.config.telemetry_config",
    "DatasetConfig": "gliacnn.core.config.dataset_config",
    "ModelConfig": "gliacnn.core.config.model_config",
    "TrainingConfig": "gliacnn.core.config.training_config",
    "CrossValidationConfig": "gliacnn.core.config.cross_validation_config",
    "OptunaConfig": "gliacnn.core.config.optuna_config",
    "SearchSpaceConfig": "gliacnn.core.config.optuna_config",
    "TrialHyperparameters": "gliacnn.core.config.hyperparameters",
    "ValidatedPath": "gliacnn.core.config.types",
}


def __getattr__(name: str) -> Any:
    """Lazily import configuration components on first access."""
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(_LAZY_IMPORTS[name])
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + __all__)
