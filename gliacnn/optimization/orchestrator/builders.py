"""
Factory Functions for Optuna Components.

Builds the sampler and pruner of a study from the ``optuna`` config
section, with clear errors for unknown algorithm names.
"""

import logging

import optuna

from ...core.config import Config
from ...core.paths import LOGGER_NAME
from .config import PRUNER_REGISTRY, SAMPLER_REGISTRY

logger = logging.getLogger(LOGGER_NAME)


def build_sampler(cfg: Config) -> optuna.samplers.BaseSampler:
    """
    Create the study sampler.

    Every sampler is seeded with ``cfg.sampler_seed`` (``optuna.sampler_seed``,
    falling back to ``training.seed``). TPE additionally honours
    ``optuna.n_startup_trials`` random warm-up trials.

    Raises:
        ValueError: If ``sampler_type`` is not in SAMPLER_REGISTRY.

    Example:
        >>> sampler = build_sampler(cfg)
        >>> isinstance(sampler, optuna.samplers.TPESampler)
        True
    """
    sampler_type = cfg.optuna.sampler_type
    sampler_cls = SAMPLER_REGISTRY.get(sampler_type)
    if sampler_cls is None:
        raise ValueError(
            f"Unknown sampler: {sampler_type}. Valid options: {list(SAMPLER_REGISTRY.keys())}"
        )

    if sampler_type == "tpe":
        return sampler_cls(seed=cfg.sampler_seed, n_startup_trials=cfg.optuna.n_startup_trials)
    return sampler_cls(seed=cfg.sampler_seed)


def build_pruner(cfg: Config) -> optuna.pruners.BasePruner:
    """
    Create the study pruner (NopPruner when pruning is disabled).

    Raises:
        ValueError: If ``pruner_type`` is not in PRUNER_REGISTRY.
    """
    if not cfg.optuna.enable_pruning:
        return optuna.pruners.NopPruner()

    pruner_factory = PRUNER_REGISTRY.get(cfg.optuna.pruner_type)
    if pruner_factory is None:
        raise ValueError(
            f"Unknown pruner: {cfg.optuna.pruner_type}. "
            f"Valid options: {list(PRUNER_REGISTRY.keys())}"
        )
    return pruner_factory()
