"""
Pipeline Phase Functions.

Reusable functions for each phase of the run, designed to work with a
shared RootOrchestrator for unified artifact management.

Phases:
    1. Data: load the searchable pool and the held-out test partition
    2. Optimization: Optuna search over k-fold cross-validation
    3. Final training: retrain the winner on the whole pool
    4. Evaluation: score the final model on the test partition
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import optuna

from ..core import LOGGER_NAME, Config, LogStyle, TrialHyperparameters
from ..data_handler import SampleDataset, load_datasets
from ..evaluation import EvaluationResult, run_final_evaluation
from ..optimization import run_optimization, select_best_trial
from ..trainer import CheckpointStore, FinalModelTrainer, TrainedModel, records_to_frame

if TYPE_CHECKING:  # pragma: no cover
    from ..core import RootOrchestrator

logger = logging.getLogger(LOGGER_NAME)


def _banner(title: str, style: str = LogStyle.HEAVY) -> None:
    logger.info("")
    logger.info(style)
    logger.info(f"{title:^80}")
    logger.info(style)


def run_data_phase(
    orchestrator: RootOrchestrator,
    cfg: Config | None = None,
) -> Tuple[SampleDataset, SampleDataset]:
    """
    Loads the searchable pool (train + val) and the test partition.

    Returns:
        Tuple of (pool, test set)
    """
    cfg = cfg or orchestrator.cfg
    _banner("DATA PREPARATION")

    pool, test_set = load_datasets(cfg)
    pool_counts = pool.class_counts()
    logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Pool':<18}: {len(pool)} samples {pool_counts}")
    logger.info(
        f"{LogStyle.INDENT}{LogStyle.ARROW} {'Test':<18}: {len(test_set)} samples {test_set.class_counts()}"
    )
    return pool, test_set


def run_optimization_phase(
    orchestrator: RootOrchestrator,
    pool: SampleDataset,
    cfg: Config | None = None,
) -> Tuple[optuna.Study, optuna.trial.FrozenTrial]:
    """
    Execute the hyperparameter search and select the winner.

    Returns:
        Tuple of (study, best COMPLETE trial)

    Raises:
        RuntimeError: If no trial completed.

    Example:
        >>> with RootOrchestrator(cfg) as orch:
        ...     pool, test_set = run_data_phase(orch)
        ...     study, best = run_optimization_phase(orch, pool)
        ...     print(f"Best mean AUC: {best.value:.4f}")
    """
    cfg = cfg or orchestrator.cfg
    paths = orchestrator.paths
    assert paths is not None, "Paths not initialized"

    study = run_optimization(cfg=cfg, pool=pool, device=orchestrator.get_device(), paths=paths)
    best = select_best_trial(study)
    return study, best


def run_final_training_phase(
    orchestrator: RootOrchestrator,
    hparams: TrialHyperparameters,
    pool: SampleDataset,
    cfg: Config | None = None,
) -> TrainedModel:
    """
    Retrains ``hparams`` on the whole pool for ``training.final_epochs`` epochs.

    The per-epoch history is written to ``reports/final_training_history.csv``.
    """
    cfg = cfg or orchestrator.cfg
    paths = orchestrator.paths
    assert paths is not None, "Paths not initialized"

    _banner("FINAL TRAINING", LogStyle.DOUBLE)
    trainer = FinalModelTrainer(cfg, orchestrator.get_device(), CheckpointStore(paths.models))
    trained = trainer.train(hparams, pool, n_epochs=cfg.training.final_epochs)

    history_path = paths.get_report_path("final_training_history.csv")
    records_to_frame(trained.records).to_csv(history_path, index=False)
    logger.info(f"Final training history saved → {history_path.name}")
    return trained


def run_evaluation_phase(
    orchestrator: RootOrchestrator,
    trained: TrainedModel,
    test_set: SampleDataset,
    context: Optional[Dict[str, Any]] = None,
    cfg: Config | None = None,
) -> EvaluationResult:
    """Scores the final model on the held-out test set and writes the reports."""
    cfg = cfg or orchestrator.cfg
    paths = orchestrator.paths
    assert paths is not None, "Paths not initialized"

    _banner("FINAL EVALUATION")
    return run_final_evaluation(
        model=trained.model,
        test_set=test_set,
        device=orchestrator.get_device(),
        paths=paths,
        batch_size=cfg.training.batch_size,
        records=trained.records,
        context=context,
    )
