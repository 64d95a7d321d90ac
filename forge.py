"""
GliaCNN: Nested-Search Training Entry Point.

Single entry point orchestrating the complete run:
    1. Data: searchable pool (train + val) and held-out test partition
    2. Hyperparameter search: Optuna TPE over k-fold cross-validation
    3. Final training of the winning configuration on the whole pool
    4. Evaluation on the test partition

Usage:
    # Defaults (dataset/ under the project root)
    python forge.py

    # Recipe file (takes precedence over flags)
    python forge.py --config recipes/config_glia_cnn.yaml

    # Quick synthetic smoke run
    python forge.py --synthetic --n_trials 2 --n_folds 2 --epochs 2 --final_epochs 2

    # Resume an interrupted search (same run id reuses the SQLite ledger;
    # with a recipe, set telemetry.run_id there instead)
    python forge.py --run_id 20260101_glia-cnn_abc123
"""

from gliacnn.core import Config, LogStyle, RootOrchestrator, TrialHyperparameters, parse_args
from gliacnn.core.logger import log_pipeline_summary
from gliacnn.optimization import TrialLedger
from gliacnn.pipeline import (
    run_data_phase,
    run_evaluation_phase,
    run_final_training_phase,
    run_optimization_phase,
)


def main() -> None:
    """
    Main orchestrator for the forge pipeline.

    All timing is managed by RootOrchestrator's TimeTracker.
    """
    args = parse_args()
    cfg = Config.from_args(args)

    with RootOrchestrator(cfg) as orchestrator:
        run_logger = orchestrator.run_logger
        paths = orchestrator.paths

        try:
            pool, test_set = run_data_phase(orchestrator)

            study, best = run_optimization_phase(orchestrator, pool)
            hparams = TrialHyperparameters.from_flat_dict(best.params)
            run_logger.info(
                f"{LogStyle.SUCCESS} Winner: trial {best.number} (mean fold AUC {best.value:.4f})"
            )

            trained = run_final_training_phase(orchestrator, hparams, pool)

            result = run_evaluation_phase(
                orchestrator,
                trained,
                test_set,
                context={
                    "best_trial": best.number,
                    "cv_objective": best.value,
                    "fold_scores": best.user_attrs.get("fold_scores", []),
                    "final_epochs": len(trained.records),
                    "model_path": trained.checkpoint_path,
                },
            )

            log_pipeline_summary(
                metrics=result.metrics,
                counts=TrialLedger(study).counts(),
                run_root=paths.root,
                elapsed=orchestrator.time_tracker.elapsed_formatted,
            )

        except KeyboardInterrupt:
            run_logger.warning(f"{LogStyle.WARNING} Interrupted by user.")
            raise SystemExit(1)

        except Exception as e:
            run_logger.error(f"{LogStyle.WARNING} Pipeline failed: {e}", exc_info=True)
            raise


if __name__ == "__main__":
    main()
