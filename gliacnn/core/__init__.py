"""
Core Utilities Package.

Configuration, logging, environment management, I/O helpers, path
constants, the exception taxonomy and the RootOrchestrator.
"""

from .cli import parse_args
from .config import Config, TrialHyperparameters
from .environment import (
    TimeTracker,
    derive_fold_seed,
    derive_split_seed,
    detect_best_device,
    set_seed,
    to_device_obj,
    worker_init_fn,
)
from .exceptions import (
    CheckpointCorruption,
    DataLoadError,
    GliaCNNError,
    NumericDegeneracy,
    RunLocked,
    TrialFailure,
)
from .io import load_config_from_yaml, md5_checksum, save_config_as_yaml, save_json
from .logger import Logger, LogStyle
from .orchestrator import RootOrchestrator
from .paths import LOGGER_NAME, PROJECT_ROOT, RunPaths

__all__ = [
    "parse_args",
    "Config",
    "TrialHyperparameters",
    "TimeTracker",
    "derive_fold_seed",
    "derive_split_seed",
    "detect_best_device",
    "set_seed",
    "to_device_obj",
    "worker_init_fn",
    "GliaCNNError",
    "DataLoadError",
    "TrialFailure",
    "CheckpointCorruption",
    "NumericDegeneracy",
    "RunLocked",
    "load_config_from_yaml",
    "save_config_as_yaml",
    "save_json",
    "md5_checksum",
    "Logger",
    "LogStyle",
    "RootOrchestrator",
    "LOGGER_NAME",
    "PROJECT_ROOT",
    "RunPaths",
]
