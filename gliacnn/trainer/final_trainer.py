"""
Final Model Retraining.

Retrains a fresh model with the winning hyperparameters on the entire
searchable pool: no validation split, no early stopping, exactly the
configured number of epochs. The weights are committed through the
CheckpointStore under the key ``final`` and the hyperparameter record is
written next to them.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import torch
import torch.nn as nn

from ..core.config import Config, TrialHyperparameters
from ..core.environment import set_seed
from ..core.io import save_config_as_yaml
from ..core.logger import log_training_summary
from ..core.paths import LOGGER_NAME
from ..data_handler import SampleDataset, build_loader
from ..models import get_model
from .checkpoint_store import CheckpointStore
from .engine import train_one_epoch
from .history import EpochRecord
from .setup import get_criterion, get_optimizer

logger = logging.getLogger(LOGGER_NAME)

FINAL_KEY = "final"


@dataclass
class TrainedModel:
    """Deployable model together with the telemetry of its training."""

    model: nn.Module
    hyperparameters: TrialHyperparameters
    records: Tuple[EpochRecord, ...]
    checkpoint_path: Path
    batch_losses: Tuple[float, ...] = field(default_factory=tuple)


class FinalModelTrainer:
    """
    Trains the deployable model on the whole pool.

    Args:
        cfg: Run configuration (seed, batch size, final epoch budget).
        device: Compute device.
        store: Store rooted at the run's ``models/`` directory.
    """

    def __init__(self, cfg: Config, device: torch.device, store: CheckpointStore):
        self.cfg = cfg
        self.device = device
        self.store = store

    @property
    def hyperparameters_path(self) -> Path:
        return self.store.root / f"{FINAL_KEY}_hyperparameters.yaml"

    def train(
        self,
        hparams: TrialHyperparameters,
        pool: SampleDataset,
        n_epochs: Optional[int] = None,
    ) -> TrainedModel:
        """
        Runs the retraining.

        Args:
            hparams: Winning hyperparameters.
            pool: Train + validation samples.
            n_epochs: Epoch budget (default: ``training.final_epochs``).

        Returns:
            TrainedModel with exactly ``n_epochs`` records.

        Raises:
            ValueError: Empty pool or an epoch budget below 1.
        """
        training = self.cfg.training
        if n_epochs is None:
            n_epochs = training.final_epochs
        if n_epochs < 1:
            raise ValueError(f"Final training needs at least one epoch, got {n_epochs}")
        if len(pool) == 0:
            raise ValueError("Cannot retrain on an empty pool")

        set_seed(training.seed, strict=self.cfg.hardware.reproducible)
        model = get_model(self.device, self.cfg, hparams, verbose=True)
        optimizer = get_optimizer(model, hparams, momentum=training.momentum)
        criterion = get_criterion()
        loader = build_loader(
            pool,
            batch_size=training.batch_size,
            shuffle=True,
            seed=training.seed,
            num_workers=self.cfg.num_workers,
        )

        logger.info(f"Final training on {len(pool)} samples for {n_epochs} epochs")
        records = []
        batch_losses = []
        for epoch in range(1, n_epochs + 1):
            train_loss, train_acc = train_one_epoch(
                model,
                loader,
                criterion,
                optimizer,
                self.device,
                batch_log=batch_losses,
                grad_clip=training.grad_clip,
                use_tqdm=training.use_tqdm,
                log_interval=self.cfg.telemetry.log_interval,
            )
            records.append(EpochRecord(epoch=epoch, train_loss=train_loss, train_accuracy=train_acc))
            logger.info(f"Final | Epoch {epoch:>3}/{n_epochs} | loss={train_loss:.4f} acc={train_acc:.4f}")

        checkpoint_path = self.store.save(
            FINAL_KEY,
            model.state_dict(),
            optimizer.state_dict(),
            metadata={"hyperparameters": hparams.to_flat_dict(), "epochs": n_epochs},
        )
        save_config_as_yaml(hparams, self.hyperparameters_path)

        last = records[-1]
        log_training_summary(n_epochs, last.train_loss, last.train_accuracy, checkpoint_path)

        return TrainedModel(
            model=model,
            hyperparameters=hparams,
            records=tuple(records),
            checkpoint_path=checkpoint_path,
            batch_losses=tuple(batch_losses),
        )
