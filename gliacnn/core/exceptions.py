"""
Exception Taxonomy.

Every error raised deliberately by the package derives from GliaCNNError.
Each subclass is tied to the boundary where it is isolated:

    * DataLoadError: per sample, caught by the dataset loader (sample skipped)
    * TrialFailure: per trial, caught by the Optuna study (trial marked FAIL)
    * CheckpointCorruption: per checkpoint, handled by fallback or fold restart
    * NumericDegeneracy: zero-variance channels, resolved in place by epsilon
      substitution during normalization
    * RunLocked: per run directory, fatal at startup (single writer per ledger)

Configuration problems are reported as ValueError / pydantic ValidationError
and are fatal at startup.
"""

from typing import Optional


class GliaCNNError(Exception):
    """Base class for all package-specific errors."""


class DataLoadError(GliaCNNError):
    """A sample file is missing, unreadable or has the wrong tensor shape."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class TrialFailure(GliaCNNError):
    """
    Raised when a trial's objective evaluation fails.

    Wraps the original exception so the study can record the trial as
    failed and move on to the next candidate.
    """

    def __init__(self, trial_number: int, cause: BaseException):
        super().__init__(f"Trial {trial_number} failed: {type(cause).__name__}: {cause}")
        self.trial_number = trial_number
        self.cause = cause


class CheckpointCorruption(GliaCNNError):
    """No checkpoint for a key passes its integrity check."""

    def __init__(self, key: str, message: str = ""):
        super().__init__(f"Checkpoint '{key}' is corrupt or missing. {message}".strip())
        self.key = key


class NumericDegeneracy(GliaCNNError):
    """A channel has zero variance (or zero range) during normalization."""


class RunLocked(GliaCNNError):
    """Another live process holds the lock on this run directory."""

    def __init__(self, lock_file: str, holder: str = "unknown process"):
        super().__init__(f"Run is already in use by {holder} (lock: {lock_file})")
        self.lock_file = lock_file
        self.holder = holder
