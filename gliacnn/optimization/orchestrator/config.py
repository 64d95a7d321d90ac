"""
Optuna Sampler and Pruner Registries.

Single point of maintenance for the search algorithms accepted by
``OptunaConfig.sampler_type`` and ``OptunaConfig.pruner_type``.
"""

from typing import Callable, Dict

from optuna.pruners import BasePruner, HyperbandPruner, MedianPruner, NopPruner, PercentilePruner
from optuna.samplers import BaseSampler, CmaEsSampler, RandomSampler, TPESampler

SamplerFactory = Callable[..., BaseSampler]
PrunerFactory = Callable[[], BasePruner]

# ==================== SAMPLER REGISTRY ====================

SAMPLER_REGISTRY: Dict[str, SamplerFactory] = {
    "tpe": TPESampler,
    "cmaes": CmaEsSampler,
    "random": RandomSampler,
}
"""Registry mapping sampler type strings to Optuna sampler classes."""

# ==================== PRUNER REGISTRY ====================

PRUNER_REGISTRY: Dict[str, PrunerFactory] = {
    "median": MedianPruner,
    "percentile": lambda: PercentilePruner(percentile=25.0),
    "hyperband": HyperbandPruner,
    "none": NopPruner,
}
"""Registry mapping pruner type strings to Optuna pruner factories."""
