"""
Environment & Infrastructure Abstraction Layer.

Hardware discovery, run locking, seeding and timing utilities consumed by the
RootOrchestrator and the training loops.
"""

from .guards import describe_holder, ensure_single_instance, release_single_instance
from .hardware import (
    apply_cpu_threads,
    available_devices,
    configure_system_libraries,
    detect_best_device,
    to_device_obj,
)
from .reproducibility import (
    derive_fold_seed,
    derive_split_seed,
    is_repro_mode_requested,
    set_seed,
    worker_init_fn,
)
from .timing import TimeTracker

__all__ = [
    "configure_system_libraries",
    "available_devices",
    "detect_best_device",
    "to_device_obj",
    "apply_cpu_threads",
    "set_seed",
    "is_repro_mode_requested",
    "derive_fold_seed",
    "derive_split_seed",
    "worker_init_fn",
    "TimeTracker",
    "ensure_single_instance",
    "release_single_instance",
    "describe_holder",
]
