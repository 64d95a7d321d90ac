"""
Experiment Lifecycle Orchestration.

RootOrchestrator prepares everything a run needs before the first trial:
seeding, thread policy, the run directory and its single-writer lock,
file logging, the frozen config mirror and the compute device. Collaborators are injectable so the
lifecycle can be exercised in tests without touching the real environment.

Typical Usage:
    >>> cfg = Config.from_args(parse_args())
    >>> with RootOrchestrator(cfg) as orchestrator:
    ...     device = orchestrator.get_device()
    ...     paths = orchestrator.paths
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Literal, Optional

import torch

from .environment import (
    TimeTracker,
    apply_cpu_threads,
    configure_system_libraries,
    ensure_single_instance,
    release_single_instance,
    set_seed,
    to_device_obj,
)
from .io import save_config_as_yaml
from .logger import Logger, log_environment
from .paths import LOGGER_NAME, RunPaths

LOCK_FILE_NAME = ".run.lock"

if TYPE_CHECKING:  # pragma: no cover
    from .config import Config

logger = logging.getLogger(LOGGER_NAME)


class RootOrchestrator:
    """
    Central coordinator for the run lifecycle.

    Initialization Phases:
        1. Determinism: global RNG seeding
        2. Runtime Configuration: CPU threads, headless matplotlib
        3. Filesystem Provisioning: RunPaths for this run, locked against
           a second process on the same run id
        4. Logging Initialization: rotating file handler in ``logs/``
        5. Config Persistence: ``reports/config.yaml``
        6. Environment Reporting: device, dataset source, search budget

    Attributes:
        cfg: Validated configuration manifest
        paths: Run directory layout (set on entry)
        run_logger: Active logger after phase 4
        time_tracker: Wall-clock tracker started on entry
    """

    def __init__(
        self,
        cfg: "Config",
        time_tracker: Optional[TimeTracker] = None,
        log_initializer: Optional[Callable] = None,
        seed_setter: Optional[Callable] = None,
        thread_applier: Optional[Callable] = None,
        system_configurator: Optional[Callable] = None,
        config_saver: Optional[Callable] = None,
        device_resolver: Optional[Callable] = None,
        lock_acquirer: Optional[Callable] = None,
        lock_releaser: Optional[Callable] = None,
    ) -> None:
        self.cfg = cfg
        self.time_tracker = time_tracker if time_tracker is not None else TimeTracker()
        self._log_initializer = log_initializer or Logger.setup
        self._seed_setter = seed_setter or set_seed
        self._thread_applier = thread_applier or apply_cpu_threads
        self._system_configurator = system_configurator or configure_system_libraries
        self._config_saver = config_saver or save_config_as_yaml
        self._device_resolver = device_resolver or to_device_obj
        self._lock_acquirer = lock_acquirer or ensure_single_instance
        self._lock_releaser = lock_releaser or release_single_instance

        self._initialized = False
        self.paths: Optional[RunPaths] = None
        self.run_logger: Optional[logging.Logger] = None
        self._device_cache: Optional[torch.device] = None
        self._lock_file: Optional[Path] = None

        self.repro_mode = self.cfg.hardware.reproducible
        self.num_workers = self.cfg.hardware.effective_num_workers

    def __enter__(self) -> "RootOrchestrator":
        try:
            self.time_tracker.start()
            self.initialize_core_services()
            return self
        except Exception:
            self.cleanup()
            raise

    def __exit__(self, exc_type, exc_val, exc_tb) -> Literal[False]:
        self.time_tracker.stop()
        self.cleanup()
        return False

    def initialize_core_services(self) -> RunPaths:
        """
        Runs the initialization phases once.

        Returns:
            The provisioned RunPaths (cached on repeated calls).
        """
        if self._initialized and self.paths is not None:
            return self.paths

        logger.debug("Phase 1: Applying deterministic seeding (seed=%d)", self.cfg.training.seed)
        self._seed_setter(self.cfg.training.seed, strict=self.repro_mode)

        logger.debug("Phase 2: Configuring runtime (workers=%d)", self.num_workers)
        applied_threads = self._thread_applier(self.num_workers)
        self._system_configurator()

        logger.debug("Phase 3: Provisioning filesystem")
        self.paths = RunPaths.create(
            project_slug=self.cfg.run_slug,
            run_cfg=self.cfg.dump_serialized(),
            base_dir=self.cfg.telemetry.output_dir,
            run_id=self.cfg.telemetry.run_id,
        )
        lock_file = self.paths.database / LOCK_FILE_NAME
        self._lock_acquirer(lock_file, logger)
        self._lock_file = lock_file

        self.run_logger = self._log_initializer(
            name=LOGGER_NAME, log_dir=self.paths.logs, level=self.cfg.telemetry.log_level
        )

        self._config_saver(data=self.cfg, yaml_path=self.paths.get_report_path("config.yaml"))

        log_environment(self.cfg, self.get_device(), self.paths.root, applied_threads)

        self._initialized = True
        return self.paths

    def get_device(self) -> torch.device:
        """Resolves and caches the compute device."""
        if self._device_cache is None:
            self._device_cache = self._device_resolver(self.cfg.hardware.device)
        return self._device_cache

    def cleanup(self) -> None:
        """Releases the run lock, then flushes and closes the logging handlers."""
        if self._lock_file is not None:
            self._lock_releaser(self._lock_file)
            self._lock_file = None
        if self.run_logger:
            for handler in self.run_logger.handlers[:]:
                handler.flush()
                handler.close()
                self.run_logger.removeHandler(handler)
