"""
OptunaOrchestrator Core Implementation.

Coordinates the hyperparameter search lifecycle: study creation (or
reattachment to a persisted ledger), trial execution and artifact export.

Resumption:
    The study lives in RDB storage (SQLite under the run's ``database/``
    directory by default). When a study with the same name already exists
    it is reloaded and only ``n_trials - finished`` new trials are run, so
    trials already COMPLETE, PRUNED or FAIL are never repeated.

Typical Usage:
    >>> from gliacnn.optimization import run_optimization
    >>> study = run_optimization(cfg=config, pool=pool, device=device, paths=paths)
    >>> print(f"Best trial: {select_best_trial(study).number}")
"""

import logging
from typing import Optional

import optuna
import torch

from ...core.config import Config
from ...core.exceptions import TrialFailure
from ...core.logger import log_optimization_header, log_study_summary
from ...core.paths import LOGGER_NAME, RunPaths
from ...data_handler import SampleDataset
from ...trainer import CheckpointStore
from ..cross_validation import CrossValidationRunner, ModelFactory
from ..objective import OptunaObjective
from ..search_spaces import SearchSpace
from .builders import build_pruner, build_sampler
from .exporters import export_best_hyperparameters, export_study_summary, export_top_trials
from .ledger import TrialLedger, select_best_trial

logger = logging.getLogger(LOGGER_NAME)

STUDY_DIRECTION = "maximize"


class OptunaOrchestrator:
    """
    High-level manager for the nested hyperparameter search.

    Attributes:
        cfg: Run configuration.
        pool: Searchable samples (train + validation partitions).
        device: Compute device shared by every trial.
        paths: Output directory structure for artifacts and the ledger.
        model_factory: Optional model constructor forwarded to the
            cross-validation runner.
    """

    def __init__(
        self,
        cfg: Config,
        pool: SampleDataset,
        device: torch.device,
        paths: RunPaths,
        model_factory: Optional[ModelFactory] = None,
    ):
        self.cfg = cfg
        self.pool = pool
        self.device = device
        self.paths = paths
        self.model_factory = model_factory

    def create_study(self) -> optuna.Study:
        """Create or load the study with the configured sampler, pruner and storage."""
        return optuna.create_study(
            study_name=self.cfg.optuna.study_name,
            direction=STUDY_DIRECTION,
            sampler=build_sampler(self.cfg),
            pruner=build_pruner(self.cfg),
            storage=self.cfg.optuna.get_storage_url(self.paths.database),
            load_if_exists=self.cfg.optuna.load_if_exists,
        )

    def build_objective(self) -> OptunaObjective:
        runner = CrossValidationRunner(
            cfg=self.cfg,
            pool=self.pool,
            device=self.device,
            store=CheckpointStore(self.paths.checkpoints),
            model_factory=self.model_factory,
        )
        return OptunaObjective(
            cfg=self.cfg,
            search_space=SearchSpace(self.cfg.optuna.search_space),
            runner=runner,
        )

    def optimize(self) -> optuna.Study:
        """
        Run the trials still owed to the budget, then export the results.

        Returns:
            The study, including trials from earlier sessions.
        """
        optuna.logging.set_verbosity(optuna.logging.WARNING)
        study = self.create_study()
        ledger = TrialLedger(study)

        finished = len(ledger.finished_numbers())
        remaining = ledger.remaining(self.cfg.optuna.n_trials)
        log_optimization_header(self.cfg, remaining=remaining, finished=finished)

        if remaining == 0:
            logger.info("Trial budget already exhausted by the stored study; nothing to run.")
        else:
            objective = self.build_objective()
            try:
                study.optimize(
                    objective,
                    n_trials=remaining,
                    timeout=self.cfg.optuna.timeout,
                    n_jobs=1,
                    catch=(TrialFailure,),
                    show_progress_bar=self.cfg.optuna.show_progress_bar,
                    gc_after_trial=True,
                )
            except KeyboardInterrupt:
                logger.warning("Optimization interrupted by user. Saving partial results...")

        self._post_optimization_processing(study)
        return study

    def _post_optimization_processing(self, study: optuna.Study) -> None:
        ledger = TrialLedger(study)
        search_space = SearchSpace(self.cfg.optuna.search_space).describe()

        try:
            best = select_best_trial(study)
        except RuntimeError:
            log_study_summary(ledger.counts(), None, None)
            logger.warning("No completed trials. Skipping best hyperparameters and top trials.")
            export_study_summary(study, self.paths, search_space)
            return

        log_study_summary(ledger.counts(), best.value, best.number)
        export_best_hyperparameters(best, self.paths)
        export_study_summary(study, self.paths, search_space)
        export_top_trials(study, self.paths, top_k=self.cfg.optuna.top_k)


def run_optimization(
    cfg: Config,
    pool: SampleDataset,
    device: torch.device,
    paths: RunPaths,
    model_factory: Optional[ModelFactory] = None,
) -> optuna.Study:
    """
    Convenience function to run the complete search.

    Example:
        >>> study = run_optimization(cfg=config, pool=pool, device=device, paths=paths)
        >>> print(f"Best AUC: {select_best_trial(study).value:.3f}")
    """
    orchestrator = OptunaOrchestrator(
        cfg=cfg, pool=pool, device=device, paths=paths, model_factory=model_factory
    )
    return orchestrator.optimize()
