"""
Test Suite for RootOrchestrator.

Exercises the initialization phases through dependency injection, then a
real (unmocked) lifecycle on a tmp_path output root.
"""

# Standard Imports
import os
from unittest.mock import MagicMock

# Third-Party Imports
import pytest
import torch
import yaml

# Internal Imports
from gliacnn.core import LOGGER_NAME, RootOrchestrator, RunLocked


def _mocked_orchestrator(cfg):
    return RootOrchestrator(
        cfg=cfg,
        log_initializer=MagicMock(return_value=MagicMock(handlers=[])),
        seed_setter=MagicMock(),
        thread_applier=MagicMock(return_value=2),
        system_configurator=MagicMock(),
        config_saver=MagicMock(),
        device_resolver=MagicMock(return_value=torch.device("cpu")),
        lock_acquirer=MagicMock(),
        lock_releaser=MagicMock(),
    )


# INITIALIZATION
@pytest.mark.unit
def test_init_is_lazy(tiny_cfg):
    orch = RootOrchestrator(cfg=tiny_cfg)

    assert orch.paths is None
    assert orch.run_logger is None
    assert orch._device_cache is None
    assert orch.repro_mode is False
    assert orch.num_workers == 0


@pytest.mark.unit
def test_phases_call_injected_collaborators(tiny_cfg):
    orch = _mocked_orchestrator(tiny_cfg)

    paths = orch.initialize_core_services()

    orch._seed_setter.assert_called_once_with(tiny_cfg.training.seed, strict=False)
    orch._thread_applier.assert_called_once_with(0)
    orch._system_configurator.assert_called_once()
    orch._log_initializer.assert_called_once()
    assert orch._log_initializer.call_args.kwargs["name"] == LOGGER_NAME
    orch._config_saver.assert_called_once()
    assert orch._config_saver.call_args.kwargs["yaml_path"] == paths.reports / "config.yaml"
    assert paths.root.parent == tiny_cfg.telemetry.output_dir
    orch._lock_acquirer.assert_called_once()
    assert orch._lock_acquirer.call_args.args[0] == paths.database / ".run.lock"


@pytest.mark.unit
def test_initialize_is_idempotent(tiny_cfg):
    orch = _mocked_orchestrator(tiny_cfg)

    first = orch.initialize_core_services()
    second = orch.initialize_core_services()

    assert first is second
    orch._seed_setter.assert_called_once()


@pytest.mark.unit
def test_device_is_cached(tiny_cfg):
    orch = _mocked_orchestrator(tiny_cfg)

    assert orch.get_device() == torch.device("cpu")
    orch.get_device()
    orch._device_resolver.assert_called_once_with("cpu")


@pytest.mark.unit
def test_exit_does_not_suppress_exceptions(tiny_cfg):
    orch = _mocked_orchestrator(tiny_cfg)

    with pytest.raises(RuntimeError, match="boom"):
        with orch:
            raise RuntimeError("boom")


# REAL LIFECYCLE
@pytest.mark.integration
def test_real_lifecycle_creates_run_tree(tiny_cfg):
    with RootOrchestrator(tiny_cfg) as orch:
        paths = orch.paths
        assert orch.get_device().type == "cpu"

    for sub in ("figures", "models", "reports", "logs", "database"):
        assert (paths.root / sub).is_dir()

    mirrored = yaml.safe_load((paths.reports / "config.yaml").read_text())
    assert mirrored["cross_validation"]["n_folds"] == 3
    assert any(paths.logs.iterdir())
    assert not orch.run_logger.handlers


@pytest.mark.integration
def test_explicit_run_id_reattaches(cfg_factory):
    cfg = cfg_factory(telemetry={"run_id": "resume_me"})

    with RootOrchestrator(cfg) as first:
        root = first.paths.root
    with RootOrchestrator(cfg) as second:
        assert second.paths.root == root
    assert root.name == "resume_me"


@pytest.mark.unit
def test_cleanup_releases_acquired_lock(tiny_cfg):
    orch = _mocked_orchestrator(tiny_cfg)

    with orch:
        lock_file = orch._lock_acquirer.call_args.args[0]
        orch._lock_releaser.assert_not_called()

    orch._lock_releaser.assert_called_once_with(lock_file)


@pytest.mark.unit
def test_failed_lock_is_not_released(tiny_cfg):
    orch = _mocked_orchestrator(tiny_cfg)
    orch._lock_acquirer.side_effect = RunLocked("x.lock", "PID 1")

    with pytest.raises(RunLocked):
        with orch:
            pass

    orch._lock_releaser.assert_not_called()


# SINGLE WRITER
@pytest.mark.integration
def test_second_process_on_same_run_is_refused(cfg_factory):
    cfg = cfg_factory(telemetry={"run_id": "shared_run"})

    with RootOrchestrator(cfg) as first:
        with pytest.raises(RunLocked) as exc:
            with RootOrchestrator(cfg):
                pass
        assert str(os.getpid()) in exc.value.holder
        assert first.paths is not None

    # lock is free again once the owner exits
    with RootOrchestrator(cfg) as third:
        assert third.paths.root.name == "shared_run"


@pytest.mark.integration
def test_distinct_runs_do_not_contend(cfg_factory):
    with RootOrchestrator(cfg_factory(telemetry={"run_id": "run_a"})):
        with RootOrchestrator(cfg_factory(telemetry={"run_id": "run_b"})) as other:
            assert other.paths.root.name == "run_b"
