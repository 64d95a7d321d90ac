"""
Telemetry and Reporting Package.

    - Logger: stream and rotating-file logging initialization
    - LogStyle: unified logging style constants
    - Progress functions: search, fold and pipeline progress logging
"""

from .logger import Logger
from .progress import (
    log_environment,
    log_fold_result,
    log_optimization_header,
    log_pipeline_summary,
    log_study_summary,
    log_training_summary,
    log_trial_start,
)
from .styles import LogStyle

__all__ = [
    "Logger",
    "LogStyle",
    "log_environment",
    "log_fold_result",
    "log_optimization_header",
    "log_pipeline_summary",
    "log_study_summary",
    "log_training_summary",
    "log_trial_start",
]
