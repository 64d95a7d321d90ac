"""
Argument Parsing Module.

Command-line interface for forge.py. Every flag defaults to None so that
only values given on the command line override the schema defaults; when
``--config`` is passed the YAML recipe wins and flags are ignored.
"""

import argparse


def parse_args(argv=None) -> argparse.Namespace:
    """
    Configure and parse command-line arguments.

    Args:
        argv: Optional argument list (defaults to sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Nested-search training of the glia IHC classifier.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # ===== Global Strategy =====
    strat_group = parser.add_argument_group("Global Strategy")
    strat_group.add_argument("--config", type=str, default=None, help="Path to YAML recipe")
    strat_group.add_argument("--project_name", type=str, default=None)
    strat_group.add_argument(
        "--run_id", type=str, default=None, help="Reattach to an existing run directory"
    )
    strat_group.add_argument(
        "--reproducible",
        action="store_true",
        default=None,
        help="Enforce strict determinism (num_workers=0); also GLIACNN_REPRODUCIBLE=TRUE",
    )

    # ===== System & Hardware =====
    sys_group = parser.add_argument_group("System & Hardware")
    sys_group.add_argument("--device", type=str, default=None, help="cpu, cuda, mps, auto")
    sys_group.add_argument("--num_workers", type=int, default=None)

    # ===== Paths & Logging =====
    path_group = parser.add_argument_group("Paths & Logging")
    path_group.add_argument("--data_root", type=str, default=None, help="Partitioned dataset root")
    path_group.add_argument("--output_dir", type=str, default=None)
    path_group.add_argument("--log_level", type=str, default=None)

    # ===== Dataset =====
    data_group = parser.add_argument_group("Dataset")
    data_group.add_argument("--in_channels", type=int, default=None)
    data_group.add_argument("--image_size", type=int, default=None)
    data_group.add_argument(
        "--synthetic", action="store_true", default=None, help="Use a generated dataset"
    )
    data_group.add_argument("--synthetic_samples", type=int, default=None)

    # ===== Training =====
    train_group = parser.add_argument_group("Training")
    train_group.add_argument("--seed", type=int, default=None)
    train_group.add_argument("--batch_size", type=int, default=None)
    train_group.add_argument("--epochs", type=int, default=None, help="Max epochs per fold")
    train_group.add_argument("--patience", type=int, default=None)
    train_group.add_argument("--final_epochs", type=int, default=None)
    train_group.add_argument("--grad_clip", type=float, default=None)

    # ===== Cross-Validation =====
    cv_group = parser.add_argument_group("Cross-Validation")
    cv_group.add_argument("--n_folds", type=int, default=None)
    cv_group.add_argument("--max_fold_restarts", type=int, default=None)

    # ===== Optuna =====
    optuna_group = parser.add_argument_group("Hyperparameter Search")
    optuna_group.add_argument("--study_name", type=str, default=None)
    optuna_group.add_argument("--n_trials", type=int, default=None)
    optuna_group.add_argument("--sampler_type", type=str, default=None)
    optuna_group.add_argument("--sampler_seed", type=int, default=None)
    optuna_group.add_argument("--enable_pruning", action="store_true", default=None)
    optuna_group.add_argument("--storage_url", type=str, default=None)
    optuna_group.add_argument("--timeout", type=float, default=None)

    return parser.parse_args(argv)
