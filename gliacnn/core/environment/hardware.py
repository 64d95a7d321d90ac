"""
Hardware & Runtime Environment.

Device resolution and CPU thread budgeting for the search. The resolved
``torch.device`` is returned to the caller and passed explicitly to every
trainer and evaluator call; nothing here keeps a process-wide device
handle. Folds share that single device and run one after the other.
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import os
from typing import Final, Tuple

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import matplotlib
import torch

# Preference order for ``device: auto``
DEVICE_PRIORITY: Final[Tuple[str, ...]] = ("cuda", "mps", "cpu")

THREAD_ENV_VARS: Final[Tuple[str, ...]] = ("OMP_NUM_THREADS", "MKL_NUM_THREADS")

# =========================================================================== #
#                               System Configuration                          #
# =========================================================================== #


def configure_system_libraries() -> None:
    """
    Prepares plotting for a headless run.

    Figures (ROC, training curves) are only ever written to disk, so the
    non-interactive Agg backend is selected unconditionally.
    """
    matplotlib.use("Agg")
    matplotlib.rcParams["pdf.fonttype"] = 42


# =========================================================================== #
#                              Device Resolution                              #
# =========================================================================== #


def _is_available(name: str) -> bool:
    if name == "cuda":
        return torch.cuda.is_available()
    if name == "mps":
        return hasattr(torch.backends, "mps") and torch.backends.mps.is_available()
    return name == "cpu"


def available_devices() -> Tuple[str, ...]:
    """Usable device names, best first."""
    return tuple(name for name in DEVICE_PRIORITY if _is_available(name))


def detect_best_device() -> str:
    return available_devices()[0]


def to_device_obj(device_str: str) -> torch.device:
    """
    Resolves ``hardware.device`` to a ``torch.device``.

    Args:
        device_str: 'cuda', 'mps', 'cpu', or 'auto' (best available).

    Raises:
        ValueError: Unknown name, or an explicitly requested accelerator
            that is not available on this host.
    """
    name = device_str.lower()
    if name == "auto":
        return torch.device(detect_best_device())

    if name not in DEVICE_PRIORITY:
        raise ValueError(f"Unsupported device: {device_str}")
    if not _is_available(name):
        raise ValueError(
            f"{name.upper()} requested but not available (available: {', '.join(available_devices())})"
        )
    return torch.device(name)


# =========================================================================== #
#                          CPU Thread Management                              #
# =========================================================================== #


def apply_cpu_threads(num_workers: int) -> int:
    """
    Gives the compute threads every core not used by DataLoader workers.

    Returns:
        Number of intra-op threads set on torch.
    """
    threads = max(1, (os.cpu_count() or 1) - num_workers)

    torch.set_num_threads(threads)
    for var in THREAD_ENV_VARS:
        os.environ[var] = str(threads)
    return threads
