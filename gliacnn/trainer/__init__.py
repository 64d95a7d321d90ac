"""
Trainer Package.

Epoch engines, early stopping, checkpoint persistence and the final
retraining on the whole pool.
"""

from .checkpoint_store import CheckpointStore
from .early_stopping import EarlyStoppingMonitor, EarlyStoppingState, StoppingStatus, advance
from .engine import train_one_epoch, validate_epoch
from .final_trainer import FINAL_KEY, FinalModelTrainer, TrainedModel
from .history import EpochRecord, records_to_frame
from .setup import get_criterion, get_optimizer

__all__ = [
    "CheckpointStore",
    "EarlyStoppingMonitor",
    "EarlyStoppingState",
    "StoppingStatus",
    "advance",
    "train_one_epoch",
    "validate_epoch",
    "FinalModelTrainer",
    "TrainedModel",
    "FINAL_KEY",
    "EpochRecord",
    "records_to_frame",
    "get_criterion",
    "get_optimizer",
]
