"""
Test Suite for the Run Lock.

Exclusive acquisition, refusal with the holder's identity, release, and
the no-op paths (foreign lock, platforms without flock).
"""

# Standard Imports
import logging
import os
from unittest.mock import patch

# Third-Party Imports
import psutil
import pytest

# Internal Imports
from gliacnn.core import RunLocked
from gliacnn.core.environment import (
    describe_holder,
    ensure_single_instance,
    release_single_instance,
)

logger = logging.getLogger("test_guards")


@pytest.fixture
def lock_file(tmp_path):
    path = tmp_path / "database" / ".run.lock"
    yield path
    release_single_instance(path)


@pytest.mark.unit
@patch("platform.system", return_value="Linux")
def test_acquire_creates_sentinel_with_pid(mock_platform, lock_file):
    ensure_single_instance(lock_file, logger)

    assert lock_file.exists()
    assert lock_file.read_text(encoding="utf-8") == str(os.getpid())


@pytest.mark.unit
@patch("platform.system", return_value="Linux")
def test_second_acquire_is_refused(mock_platform, lock_file):
    ensure_single_instance(lock_file, logger)

    with pytest.raises(RunLocked) as exc:
        ensure_single_instance(lock_file, logger)

    assert exc.value.lock_file == str(lock_file)
    assert f"PID {os.getpid()}" in exc.value.holder


@pytest.mark.unit
@patch("platform.system", return_value="Linux")
def test_release_allows_reacquire(mock_platform, lock_file):
    ensure_single_instance(lock_file, logger)
    release_single_instance(lock_file)

    ensure_single_instance(lock_file, logger)
    assert lock_file.exists()


@pytest.mark.unit
def test_release_of_unheld_lock_is_noop(tmp_path):
    path = tmp_path / "never.lock"
    release_single_instance(path)
    assert not path.exists()


@pytest.mark.unit
@patch("platform.system", return_value="Linux")
def test_flock_contention_raises(mock_platform, lock_file):
    with patch("fcntl.flock", side_effect=BlockingIOError):
        with pytest.raises(RunLocked):
            ensure_single_instance(lock_file, logger)


@pytest.mark.unit
@patch("platform.system", return_value="Windows")
def test_unsupported_platform_skips_locking(mock_platform, lock_file):
    ensure_single_instance(lock_file, logger)
    assert not lock_file.exists()


# HOLDER DESCRIPTION
@pytest.mark.unit
def test_describe_holder_variants(tmp_path):
    sentinel = tmp_path / "holder.lock"
    assert describe_holder(sentinel) == "unknown process"

    sentinel.write_text("not-a-pid", encoding="utf-8")
    assert describe_holder(sentinel) == "unknown process"

    sentinel.write_text(str(os.getpid()), encoding="utf-8")
    assert describe_holder(sentinel).startswith(f"PID {os.getpid()}")


@pytest.mark.unit
def test_describe_holder_of_dead_process(tmp_path):
    sentinel = tmp_path / "holder.lock"
    sentinel.write_text("424242", encoding="utf-8")

    with patch("psutil.Process", side_effect=psutil.NoSuchProcess(424242)):
        assert describe_holder(sentinel) == "PID 424242"
