"""
Epoch Telemetry Records.

Training history lives in immutable records owned by the fold (or final
training) that produced them, never on the model object.
"""

from dataclasses import asdict, dataclass
from typing import Optional, Sequence

import pandas as pd


@dataclass(frozen=True)
class EpochRecord:
    """
    Summary of one epoch.

    Validation fields are None when the epoch had no validation pass
    (final retraining on the whole pool).
    """

    epoch: int
    train_loss: float
    train_accuracy: float
    val_loss: Optional[float] = None
    val_auc: Optional[float] = None


def records_to_frame(records: Sequence[EpochRecord]) -> pd.DataFrame:
    """One row per epoch, columns in EpochRecord field order."""
    columns = ["epoch", "train_loss", "train_accuracy", "val_loss", "val_auc"]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)
