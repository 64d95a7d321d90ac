"""
Optuna Objective for the Nested Search.

``OptunaObjective`` is the callable handed to ``study.optimize``. One call
scores one trial:

    1. materialize ``TrialHyperparameters`` from the search space
    2. run k-fold cross-validation with those hyperparameters
    3. return the mean fold AUC

The running fold mean is reported to the trial after every fold so a
configured pruner can stop unpromising trials early. Any other failure is
isolated to the trial: it is recorded with ``objective = -inf`` and
re-raised as ``TrialFailure``, which the study catches and logs as FAIL.
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import logging
import math

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import optuna
import torch

# =========================================================================== #
#                                Internal Imports                             #
# =========================================================================== #
from ..core.config import Config
from ..core.exceptions import TrialFailure
from ..core.logger import LogStyle, log_trial_start
from ..core.paths import LOGGER_NAME
from .cross_validation import CrossValidationRunner, FoldCallback
from .search_spaces import SearchSpace

logger = logging.getLogger(LOGGER_NAME)


class OptunaObjective:
    """
    Trial objective: sample, cross-validate, return the mean fold score.

    Attributes:
        cfg: Run configuration (reads ``optuna.enable_pruning``).
        search_space: Sampler of trial hyperparameters.
        runner: Cross-validation runner bound to the searchable pool.

    Example:
        >>> objective = OptunaObjective(cfg, SearchSpace(cfg.optuna.search_space), runner)
        >>> study.optimize(objective, n_trials=20, catch=(TrialFailure,))
    """

    def __init__(self, cfg: Config, search_space: SearchSpace, runner: CrossValidationRunner):
        self.cfg = cfg
        self.search_space = search_space
        self.runner = runner

    def __call__(self, trial: optuna.Trial) -> float:
        """
        Scores one trial.

        Raises:
            optuna.TrialPruned: If the pruner stops the trial between folds.
            TrialFailure: If sampling or cross-validation fails for any other reason.
        """
        try:
            hparams = self.search_space.sample(trial)
            log_trial_start(trial.number, hparams.to_flat_dict())

            result = self.runner.run(
                hparams,
                trial_number=trial.number,
                on_fold_end=self._make_fold_callback(trial),
            )
        except optuna.TrialPruned:
            logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Trial {trial.number} pruned")
            raise
        except Exception as e:
            trial.set_user_attr("objective", -math.inf)
            trial.set_user_attr("error", f"{type(e).__name__}: {e}")
            logger.error(
                f"{LogStyle.INDENT}{LogStyle.FAILURE} Trial {trial.number} failed: "
                f"{type(e).__name__}: {e}"
            )
            raise TrialFailure(trial.number, e) from e
        finally:
            self._cleanup()

        trial.set_user_attr("objective", result.objective)
        trial.set_user_attr("fold_scores", list(result.fold_scores))
        trial.set_user_attr("epochs_per_fold", [f.epochs_run for f in result.folds])
        logger.info(
            f"{LogStyle.INDENT}{LogStyle.SUCCESS} Trial {trial.number} objective: "
            f"{result.objective:.4f}"
        )
        return result.objective

    def _make_fold_callback(self, trial: optuna.Trial) -> FoldCallback:
        enable_pruning = self.cfg.optuna.enable_pruning

        def on_fold_end(fold_index: int, running_mean: float) -> None:
            trial.report(running_mean, step=fold_index)
            if enable_pruning and trial.should_prune():
                raise optuna.TrialPruned(
                    f"Pruned after fold {fold_index} (running mean {running_mean:.4f})"
                )

        return on_fold_end

    @staticmethod
    def _cleanup() -> None:
        if torch.cuda.is_available():
            torch.cuda.empty_cache()
