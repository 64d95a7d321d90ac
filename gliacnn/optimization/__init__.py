"""
Optimization Package.

Nested hyperparameter search: Optuna trials over k-fold cross-validation.
"""

from .cross_validation import (
    CrossValidationResult,
    CrossValidationRunner,
    Fold,
    FoldImbalanceWarning,
    FoldResult,
    check_fold_balance,
    checkpoint_key,
    make_folds,
)
from .objective import OptunaObjective
from .orchestrator import (
    OptunaOrchestrator,
    TrialLedger,
    TrialRecord,
    build_pruner,
    build_sampler,
    export_best_hyperparameters,
    export_study_summary,
    export_top_trials,
    run_optimization,
    select_best_trial,
)
from .search_spaces import SearchSpace

__all__ = [
    "CrossValidationResult",
    "CrossValidationRunner",
    "Fold",
    "FoldImbalanceWarning",
    "FoldResult",
    "check_fold_balance",
    "checkpoint_key",
    "make_folds",
    "OptunaObjective",
    "OptunaOrchestrator",
    "TrialLedger",
    "TrialRecord",
    "build_pruner",
    "build_sampler",
    "export_best_hyperparameters",
    "export_study_summary",
    "export_top_trials",
    "run_optimization",
    "select_best_trial",
    "SearchSpace",
]
