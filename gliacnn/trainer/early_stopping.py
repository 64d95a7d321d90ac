"""
Early Stopping State Machine.

States and transitions on each validation loss:

    strictly lower than best   → IMPROVING (best updated, wait = 0)
    otherwise                  → WAITING   (wait += 1)
    wait > patience            → STOPPED   (terminal)

A fold therefore stops exactly ``patience + 1`` epochs after its last
strict improvement, and never before ``patience`` consecutive
non-improving epochs. A NaN loss never counts as an improvement.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class StoppingStatus(str, Enum):
    IMPROVING = "improving"
    WAITING = "waiting"
    STOPPED = "stopped"


@dataclass(frozen=True)
class EarlyStoppingState:
    best_loss: float = math.inf
    wait: int = 0
    status: StoppingStatus = StoppingStatus.IMPROVING
    best_epoch: Optional[int] = None


def advance(
    state: EarlyStoppingState, val_loss: float, patience: int, epoch: Optional[int] = None
) -> EarlyStoppingState:
    """
    Pure transition function.

    Raises:
        RuntimeError: If ``state`` is already STOPPED.
    """
    if state.status is StoppingStatus.STOPPED:
        raise RuntimeError("Early stopping monitor already stopped")

    if val_loss < state.best_loss:
        return EarlyStoppingState(
            best_loss=val_loss, wait=0, status=StoppingStatus.IMPROVING, best_epoch=epoch
        )

    wait = state.wait + 1
    status = StoppingStatus.STOPPED if wait > patience else StoppingStatus.WAITING
    return replace(state, wait=wait, status=status)


class EarlyStoppingMonitor:
    """
    Per-fold monitor wrapping the transition function.

    Example:
        >>> monitor = EarlyStoppingMonitor(patience=2)
        >>> if monitor.step(val_loss, epoch):
        ...     store.save(key, model.state_dict())
        >>> monitor.should_stop
        False
    """

    def __init__(self, patience: int):
        if patience < 0:
            raise ValueError(f"patience must be >= 0, got {patience}")
        self.patience = patience
        self._state = EarlyStoppingState()

    @property
    def state(self) -> EarlyStoppingState:
        return self._state

    @property
    def should_stop(self) -> bool:
        return self._state.status is StoppingStatus.STOPPED

    def step(self, val_loss: float, epoch: Optional[int] = None) -> bool:
        """Feeds one validation loss; returns True on a strict improvement."""
        self._state = advance(self._state, val_loss, self.patience, epoch)
        return self._state.status is StoppingStatus.IMPROVING
