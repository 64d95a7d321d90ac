"""
Reproducibility Environment.

Seeds Python, NumPy and PyTorch from one integer and derives the per-fold
and per-loader seeds used across the nested search, so that a fixed base
seed reproduces the same folds, initial weights and batch order.

Seed derivation:
    fold seed   = base + trial_number * 1000 + fold_index
    split seed  = base + trial_number
"""

import logging
import os
import random

import numpy as np
import torch

from ..paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def is_repro_mode_requested(cli_flag: bool = False) -> bool:
    """
    Detect if strict reproducibility mode is requested.

    Either the CLI flag or ``GLIACNN_REPRODUCIBLE=TRUE`` enables it.
    """
    env_flag = os.environ.get("GLIACNN_REPRODUCIBLE", "FALSE").upper() == "TRUE"
    return cli_flag or env_flag


def set_seed(seed: int, strict: bool = False) -> None:
    """
    Seed all PRNGs and optionally enforce deterministic algorithms.

    Args:
        seed: The seed value to set across all PRNGs.
        strict: If True, enforces deterministic kernels (slower on GPU).
    """
    random.seed(seed)
    os.environ["PYTHONHASHSEED"] = str(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)

    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)
        torch.backends.cudnn.deterministic = True
        torch.backends.cudnn.benchmark = False

        if strict:
            os.environ["CUBLAS_WORKSPACE_CONFIG"] = ":4096:8"
            torch.use_deterministic_algorithms(True)
            logger.info("STRICT REPRODUCIBILITY ENABLED: Using deterministic algorithms.")


def derive_fold_seed(base_seed: int, trial_number: int, fold_index: int) -> int:
    """Seed used for one fold's weight init and batch order."""
    return (base_seed + trial_number * 1000 + fold_index) % 2**32


def derive_split_seed(base_seed: int, trial_number: int) -> int:
    """Seed used to shuffle the pool into folds for one trial."""
    return (base_seed + trial_number) % 2**32


def worker_init_fn(worker_id: int) -> None:
    """
    Initialize PRNGs for a DataLoader worker subprocess.

    The sub-seed derives from the loader's generator, so worker processes
    stay deterministic for a fixed loader seed.
    """
    worker_info = torch.utils.data.get_worker_info()
    if worker_info is None:
        return

    seed = (worker_info.seed + worker_id) % 2**32
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
