"""
Trial Ledger View.

Read-side helpers over the Optuna study, which is the persistent ledger
of the search (SQLite by default). A trial is *finished* once it reaches
COMPLETE, PRUNED or FAIL; finished trials are never re-run when a study
is resumed.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

import optuna
from optuna.trial import FrozenTrial, TrialState

FINISHED_STATES = (TrialState.COMPLETE, TrialState.PRUNED, TrialState.FAIL)


@dataclass(frozen=True)
class TrialRecord:
    """
    One ledger row.

    ``objective`` is the trial value for COMPLETE trials and the recorded
    ``objective`` user attribute otherwise (``-inf`` for failures).
    """

    number: int
    params: Dict[str, Any]
    objective: float
    state: str
    fold_scores: List[float] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def from_trial(cls, trial: FrozenTrial) -> "TrialRecord":
        if trial.state == TrialState.COMPLETE and trial.value is not None:
            objective = float(trial.value)
        else:
            objective = float(trial.user_attrs.get("objective", -math.inf))
        return cls(
            number=trial.number,
            params=dict(trial.params),
            objective=objective,
            state=trial.state.name,
            fold_scores=list(trial.user_attrs.get("fold_scores", [])),
            error=trial.user_attrs.get("error"),
        )


class TrialLedger:
    """
    Queries over the trials stored in a study.

    Example:
        >>> ledger = TrialLedger(study)
        >>> ledger.counts()
        {'COMPLETE': 7, 'PRUNED': 2, 'FAIL': 1}
    """

    def __init__(self, study: optuna.Study):
        self.study = study

    def records(self) -> List[TrialRecord]:
        return [TrialRecord.from_trial(t) for t in self.study.get_trials(deepcopy=False)]

    def finished_numbers(self) -> Set[int]:
        return {
            t.number for t in self.study.get_trials(deepcopy=False, states=FINISHED_STATES)
        }

    def completed_trials(self) -> List[FrozenTrial]:
        return self.study.get_trials(deepcopy=False, states=(TrialState.COMPLETE,))

    def counts(self) -> Dict[str, int]:
        counts = {state.name: 0 for state in FINISHED_STATES}
        for trial in self.study.get_trials(deepcopy=False, states=FINISHED_STATES):
            counts[trial.state.name] += 1
        return counts

    def remaining(self, n_trials: int) -> int:
        """New trials still owed to reach a total budget of ``n_trials``."""
        return max(0, n_trials - len(self.finished_numbers()))


def select_best_trial(study: optuna.Study) -> FrozenTrial:
    """
    Returns the COMPLETE trial with the highest objective.

    Ties go to the lowest trial number.

    Raises:
        RuntimeError: If the study holds no completed trial.
    """
    completed = [
        t
        for t in TrialLedger(study).completed_trials()
        if t.value is not None and math.isfinite(t.value)
    ]
    if not completed:
        raise RuntimeError(
            f"Study '{study.study_name}' has no completed trials to select a winner from"
        )
    return max(completed, key=lambda t: (t.value, -t.number))
