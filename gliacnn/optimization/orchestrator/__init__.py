"""
Optuna Study Orchestration.

Study creation and resumption, sampler/pruner registries, the trial
ledger view and result exporters.
"""

from .builders import build_pruner, build_sampler
from .config import PRUNER_REGISTRY, SAMPLER_REGISTRY
from .exporters import (
    build_top_trials_dataframe,
    export_best_hyperparameters,
    export_study_summary,
    export_top_trials,
)
from .ledger import FINISHED_STATES, TrialLedger, TrialRecord, select_best_trial
from .orchestrator import STUDY_DIRECTION, OptunaOrchestrator, run_optimization

__all__ = [
    "build_sampler",
    "build_pruner",
    "SAMPLER_REGISTRY",
    "PRUNER_REGISTRY",
    "export_best_hyperparameters",
    "export_study_summary",
    "export_top_trials",
    "build_top_trials_dataframe",
    "FINISHED_STATES",
    "TrialLedger",
    "TrialRecord",
    "select_best_trial",
    "STUDY_DIRECTION",
    "OptunaOrchestrator",
    "run_optimization",
]
