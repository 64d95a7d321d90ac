"""
K-Fold Cross-Validation Runner.

Scores one hyperparameter configuration on the searchable pool:

    1. shuffle the pool into K folds (seeded per trial, unstratified)
    2. per fold: fresh model and optimizer, up to ``epochs`` epochs of
       training with a validation pass after each, early stopping on
       validation loss, checkpoint on every strict improvement
    3. fold score = maximum validation AUC over the fold's epochs
    4. fold end: the best checkpoint is restored as the fold's terminal state
    5. objective = arithmetic mean of the K fold scores

Folds are not stratified. A fold whose validation positive rate drifts
from the pool rate by more than ``imbalance_tolerance`` (or that holds a
single class) raises a ``FoldImbalanceWarning`` and is still used.

A checkpoint that cannot be restored at fold end restarts the fold with
fresh weights, at most ``max_fold_restarts`` times.
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import logging
import math
import warnings
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import numpy as np
import torch
import torch.nn as nn
from sklearn.model_selection import KFold

# =========================================================================== #
#                                Internal Imports                             #
# =========================================================================== #
from ..core.config import Config, TrialHyperparameters
from ..core.environment import derive_fold_seed, derive_split_seed, set_seed
from ..core.exceptions import CheckpointCorruption
from ..core.logger import LogStyle, log_fold_result
from ..core.paths import LOGGER_NAME
from ..data_handler import SampleDataset, build_loader
from ..models import get_model
from ..trainer import (
    CheckpointStore,
    EarlyStoppingMonitor,
    EpochRecord,
    get_criterion,
    get_optimizer,
    train_one_epoch,
    validate_epoch,
)

logger = logging.getLogger(LOGGER_NAME)

FoldCallback = Callable[[int, float], None]
ModelFactory = Callable[[torch.device, Config, TrialHyperparameters], nn.Module]


class FoldImbalanceWarning(UserWarning):
    """A validation fold's class balance departs from the pool's."""


# =========================================================================== #
#                                  FOLDS                                      #
# =========================================================================== #


@dataclass(frozen=True)
class Fold:
    index: int
    train_indices: np.ndarray
    val_indices: np.ndarray


def make_folds(n_samples: int, n_folds: int, seed: int) -> List[Fold]:
    """
    Shuffled k-fold split of ``range(n_samples)``.

    The validation index sets of the returned folds partition the range
    exactly once.

    Raises:
        ValueError: If ``n_folds < 2`` or ``n_samples < n_folds``.
    """
    if n_folds < 2:
        raise ValueError(f"n_folds must be >= 2, got {n_folds}")
    if n_samples < n_folds:
        raise ValueError(f"Cannot split {n_samples} samples into {n_folds} folds")

    splitter = KFold(n_splits=n_folds, shuffle=True, random_state=seed)
    return [
        Fold(index=i, train_indices=train_idx, val_indices=val_idx)
        for i, (train_idx, val_idx) in enumerate(splitter.split(np.arange(n_samples)))
    ]


def check_fold_balance(labels: np.ndarray, folds: Sequence[Fold], tolerance: float) -> List[int]:
    """
    Flags folds whose validation positive rate is off by more than ``tolerance``.

    Returns:
        Indices of flagged folds (a FoldImbalanceWarning is emitted for each).
    """
    labels = np.asarray(labels)
    pool_rate = float(labels.mean())
    flagged = []

    for fold in folds:
        val_labels = labels[fold.val_indices]
        rate = float(val_labels.mean())
        single_class = np.unique(val_labels).size < 2
        if single_class or abs(rate - pool_rate) > tolerance:
            reason = "single-class validation set" if single_class else "positive-rate drift"
            msg = (
                f"Fold {fold.index}: {reason} (val positive rate {rate:.2f}, "
                f"pool {pool_rate:.2f}, tolerance {tolerance:.2f})"
            )
            warnings.warn(msg, FoldImbalanceWarning, stacklevel=2)
            logger.warning(f"{LogStyle.WARNING} {msg}")
            flagged.append(fold.index)

    return flagged


# =========================================================================== #
#                                 RESULTS                                     #
# =========================================================================== #


@dataclass(frozen=True)
class FoldResult:
    """
    Outcome of one fold.

    Attributes:
        index: Fold index.
        score: Maximum validation AUC over all epochs.
        records: One EpochRecord per epoch run.
        best_epoch: Epoch of the restored checkpoint (None if loss never improved).
        best_val_loss: Validation loss of the restored checkpoint.
        stopped_early: True if the early stopping monitor ended the fold.
        restarts: Fresh restarts after checkpoint corruption.
        batch_losses: Every training batch loss, in order.
    """

    index: int
    score: float
    records: Tuple[EpochRecord, ...]
    best_epoch: Optional[int] = None
    best_val_loss: float = math.inf
    stopped_early: bool = False
    restarts: int = 0
    batch_losses: Tuple[float, ...] = field(default_factory=tuple, repr=False)

    @property
    def epochs_run(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class CrossValidationResult:
    trial_number: int
    folds: Tuple[FoldResult, ...]
    objective: float

    @property
    def fold_scores(self) -> Tuple[float, ...]:
        return tuple(f.score for f in self.folds)


def checkpoint_key(trial_number: int, fold_index: int) -> str:
    return f"trial_{trial_number:04d}_fold_{fold_index}"


# =========================================================================== #
#                                  RUNNER                                     #
# =========================================================================== #


class CrossValidationRunner:
    """
    Runs the k-fold loop for one configuration at a time.

    Args:
        cfg: Run configuration (training, cross_validation sections).
        pool: Train + validation samples.
        device: Compute device shared by every fold, sequentially.
        store: Checkpoint store for the per-fold best weights.
        model_factory: Model constructor (default: ``get_model``).
    """

    def __init__(
        self,
        cfg: Config,
        pool: SampleDataset,
        device: torch.device,
        store: CheckpointStore,
        model_factory: Optional[ModelFactory] = None,
    ):
        if len(pool) < cfg.cross_validation.n_folds:
            raise ValueError(
                f"Pool of {len(pool)} samples is smaller than n_folds={cfg.cross_validation.n_folds}"
            )
        self.cfg = cfg
        self.pool = pool
        self.device = device
        self.store = store
        self._model_factory = model_factory or get_model

    def run(
        self,
        hparams: TrialHyperparameters,
        trial_number: int = 0,
        on_fold_end: Optional[FoldCallback] = None,
    ) -> CrossValidationResult:
        """
        Scores ``hparams`` by k-fold cross-validation.

        Args:
            hparams: Configuration to evaluate.
            trial_number: Used for fold shuffling, seeds and checkpoint keys.
            on_fold_end: Called with (fold index, running mean score) after
                each fold; may raise to abort the remaining folds.
        """
        cv = self.cfg.cross_validation
        split_seed = derive_split_seed(self.cfg.training.seed, trial_number)
        folds = make_folds(len(self.pool), cv.n_folds, split_seed)
        check_fold_balance(self.pool.labels, folds, cv.imbalance_tolerance)

        results: List[FoldResult] = []
        for fold in folds:
            result = self._run_fold_with_recovery(hparams, trial_number, fold)
            results.append(result)
            log_fold_result(trial_number, fold.index, result.score, result.epochs_run, result.stopped_early)

            if on_fold_end is not None:
                on_fold_end(fold.index, float(np.mean([r.score for r in results])))

        objective = float(np.mean([r.score for r in results]))
        return CrossValidationResult(trial_number=trial_number, folds=tuple(results), objective=objective)

    def _run_fold_with_recovery(
        self, hparams: TrialHyperparameters, trial_number: int, fold: Fold
    ) -> FoldResult:
        max_restarts = self.cfg.cross_validation.max_fold_restarts
        restarts = 0
        while True:
            try:
                result, _ = self.train_fold(hparams, trial_number, fold, restarts=restarts)
                return result
            except CheckpointCorruption as e:
                if restarts >= max_restarts:
                    raise
                restarts += 1
                logger.warning(
                    f"{LogStyle.WARNING} {e} Restarting trial {trial_number} fold {fold.index} "
                    f"with fresh weights ({restarts}/{max_restarts})"
                )

    def train_fold(
        self,
        hparams: TrialHyperparameters,
        trial_number: int,
        fold: Fold,
        restarts: int = 0,
    ) -> Tuple[FoldResult, nn.Module]:
        """
        Trains one fold and restores its best checkpoint.

        Returns:
            (FoldResult, model holding the best-epoch weights)

        Raises:
            CheckpointCorruption: If the best checkpoint cannot be restored.
        """
        training = self.cfg.training
        seed = derive_fold_seed(training.seed, trial_number, fold.index)
        set_seed(seed, strict=self.cfg.hardware.reproducible)

        model = self._model_factory(self.device, self.cfg, hparams)
        optimizer = get_optimizer(model, hparams, momentum=training.momentum)
        criterion = get_criterion()

        num_workers = self.cfg.num_workers
        train_loader = build_loader(
            self.pool.subset(fold.train_indices),
            batch_size=training.batch_size,
            shuffle=True,
            seed=seed,
            num_workers=num_workers,
        )
        val_loader = build_loader(
            self.pool.subset(fold.val_indices),
            batch_size=training.batch_size,
            shuffle=False,
            seed=seed,
            num_workers=num_workers,
        )

        key = checkpoint_key(trial_number, fold.index)
        self.store.discard(key)
        monitor = EarlyStoppingMonitor(training.patience)
        records: List[EpochRecord] = []
        batch_losses: List[float] = []
        best_auc = -math.inf

        try:
            for epoch in range(1, training.epochs + 1):
                train_loss, train_acc = train_one_epoch(
                    model,
                    train_loader,
                    criterion,
                    optimizer,
                    self.device,
                    batch_log=batch_losses,
                    grad_clip=training.grad_clip,
                    use_tqdm=training.use_tqdm,
                    log_interval=self.cfg.telemetry.log_interval,
                )
                val = validate_epoch(model, val_loader, criterion, self.device)
                records.append(
                    EpochRecord(
                        epoch=epoch,
                        train_loss=train_loss,
                        train_accuracy=train_acc,
                        val_loss=val["loss"],
                        val_auc=val["auc"],
                    )
                )
                best_auc = max(best_auc, val["auc"])

                if monitor.step(val["loss"], epoch):
                    self.store.save(
                        key,
                        model.state_dict(),
                        optimizer.state_dict(),
                        metadata={"epoch": epoch, "val_loss": val["loss"], "val_auc": val["auc"]},
                    )

                logger.debug(
                    f"Trial {trial_number} | Fold {fold.index} | Epoch {epoch:>3} | "
                    f"loss={train_loss:.4f} val_loss={val['loss']:.4f} val_auc={val['auc']:.4f} "
                    f"[{monitor.state.status.value}]"
                )
                if monitor.should_stop:
                    break

            if self.store.exists(key):
                self.store.restore_model(key, model)
            else:
                logger.warning(
                    f"{LogStyle.WARNING} Trial {trial_number} fold {fold.index}: validation loss "
                    f"never improved, keeping last-epoch weights"
                )
        finally:
            if not self.cfg.cross_validation.keep_fold_checkpoints:
                self.store.discard(key)

        state = monitor.state
        result = FoldResult(
            index=fold.index,
            score=float(best_auc),
            records=tuple(records),
            best_epoch=state.best_epoch,
            best_val_loss=state.best_loss,
            stopped_early=monitor.should_stop,
            restarts=restarts,
            batch_losses=tuple(batch_losses),
        )
        return result, model
