"""
Progress & Summary Logging.

Formatting helpers for the search, cross-validation and pipeline phases.
All functions write to the package logger; none of them return values
used by the training logic.
"""

import logging
import math
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from ..paths import LOGGER_NAME
from .styles import LogStyle

if TYPE_CHECKING:  # pragma: no cover
    from ..config import Config

logger = logging.getLogger(LOGGER_NAME)

_I = LogStyle.INDENT
_A = LogStyle.ARROW


def _fmt_value(value: Any) -> str:
    if isinstance(value, float):
        if not math.isfinite(value):
            return str(value)
        return f"{value:.2e}" if abs(value) < 1e-3 and value != 0 else f"{value:.4f}"
    return str(value)


def log_environment(cfg: "Config", device: Any, run_root: Any, threads: int) -> None:
    """Logs the resolved runtime environment at session start."""
    logger.info("")
    logger.info(LogStyle.HEAVY)
    logger.info(f"{'ENVIRONMENT INITIALIZATION':^80}")
    logger.info(LogStyle.HEAVY)
    logger.info("[HARDWARE]")
    logger.info(f"{_I}{_A} {'Active Device':<18}: {str(device).upper()}")
    logger.info(f"{_I}{_A} {'DataLoader':<18}: {cfg.num_workers} workers")
    logger.info(f"{_I}{_A} {'Compute Threads':<18}: {threads}")
    logger.info("[DATASET]")
    source = "synthetic" if cfg.dataset.synthetic else str(cfg.dataset.data_root)
    logger.info(f"{_I}{_A} {'Source':<18}: {source}")
    logger.info(
        f"{_I}{_A} {'Sample Shape':<18}: "
        f"({cfg.dataset.in_channels}, {cfg.dataset.image_size}, {cfg.dataset.image_size})"
    )
    logger.info("[SEARCH]")
    logger.info(f"{_I}{_A} {'Trials':<18}: {cfg.optuna.n_trials}")
    logger.info(f"{_I}{_A} {'Folds':<18}: {cfg.cross_validation.n_folds}")
    logger.info(f"{_I}{_A} {'Epochs/Patience':<18}: {cfg.training.epochs}/{cfg.training.patience}")
    logger.info(f"{_I}{_A} {'Seed':<18}: {cfg.training.seed}")
    logger.info("[FILESYSTEM]")
    logger.info(f"{_I}{_A} {'Run Root':<18}: {run_root}")
    logger.info(LogStyle.HEAVY)


def log_optimization_header(cfg: "Config", remaining: int, finished: int) -> None:
    """Logs study configuration before the first trial runs."""
    logger.info("")
    logger.info(LogStyle.DOUBLE)
    logger.info(f"{'HYPERPARAMETER SEARCH':^80}")
    logger.info(LogStyle.DOUBLE)
    logger.info(f"{_I}{_A} {'Study':<18}: {cfg.optuna.study_name}")
    logger.info(f"{_I}{_A} {'Sampler':<18}: {cfg.optuna.sampler_type.upper()} (seed={cfg.sampler_seed})")
    pruner = cfg.optuna.pruner_type if cfg.optuna.enable_pruning else "disabled"
    logger.info(f"{_I}{_A} {'Pruner':<18}: {pruner}")
    logger.info(f"{_I}{_A} {'Budget':<18}: {cfg.optuna.n_trials} trials")
    if finished:
        logger.info(
            f"{_I}{_A} {'Resuming':<18}: {finished} finished, {remaining} remaining"
        )
    logger.info(LogStyle.DOUBLE)


def log_trial_start(trial_number: int, params: Mapping[str, Any]) -> None:
    """Logs the materialized hyperparameters of a trial."""
    logger.info("")
    logger.info(LogStyle.LIGHT)
    logger.info(f"[TRIAL {trial_number}]")
    for key, value in params.items():
        logger.info(f"{_I}{LogStyle.BULLET} {key:<18}: {_fmt_value(value)}")


def log_fold_result(trial_number: int, fold_index: int, score: float, epochs_run: int, stopped: bool) -> None:
    status = "early stop" if stopped else "max epochs"
    logger.info(
        f"{_I}{_A} Trial {trial_number} | Fold {fold_index}: "
        f"max AUC={score:.4f} ({epochs_run} epochs, {status})"
    )


def log_study_summary(counts: Dict[str, int], best_value: Optional[float], best_number: Optional[int]) -> None:
    """Logs completed/pruned/failed counts and the winner."""
    logger.info("")
    logger.info(LogStyle.DOUBLE)
    logger.info(f"{'STUDY SUMMARY':^80}")
    logger.info(LogStyle.DOUBLE)
    for state in ("COMPLETE", "PRUNED", "FAIL"):
        logger.info(f"{_I}{_A} {state.title():<18}: {counts.get(state, 0)}")
    if best_number is None:
        logger.warning(f"{_I}{LogStyle.WARNING} No completed trials")
    else:
        logger.info(f"{_I}{LogStyle.SUCCESS} Best trial {best_number}: objective={best_value:.4f}")
    logger.info(LogStyle.DOUBLE)


def log_training_summary(n_epochs: int, final_loss: float, final_accuracy: float, model_path: Any) -> None:
    logger.info(
        f"{_I}{LogStyle.SUCCESS} Final model trained for {n_epochs} epochs "
        f"(loss={final_loss:.4f}, acc={final_accuracy:.4f}) → {model_path}"
    )


def log_pipeline_summary(
    metrics: Mapping[str, float],
    counts: Mapping[str, int],
    run_root: Any,
    elapsed: str,
) -> None:
    """Logs the end-of-run report."""
    logger.info("")
    logger.info(LogStyle.HEAVY)
    logger.info(f"{'PIPELINE SUMMARY':^80}")
    logger.info(LogStyle.HEAVY)
    logger.info("[TRIALS]")
    for state in ("COMPLETE", "PRUNED", "FAIL"):
        logger.info(f"{_I}{_A} {state.title():<18}: {counts.get(state, 0)}")
    logger.info("[TEST SET]")
    for key, value in metrics.items():
        logger.info(f"{_I}{_A} {key.upper():<18}: {_fmt_value(value)}")
    logger.info("[RUN]")
    logger.info(f"{_I}{_A} {'Artifacts':<18}: {run_root}")
    logger.info(f"{_I}{_A} {'Duration':<18}: {elapsed}")
    logger.info(LogStyle.HEAVY)
