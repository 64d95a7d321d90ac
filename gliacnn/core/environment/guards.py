"""
Process & Resource Guarding Utilities.

A run directory has exactly one writer: the process that owns its SQLite
trial ledger, its checkpoints and the compute device. The owner takes an
exclusive advisory ``flock`` on a sentinel file inside ``database/`` and
writes its PID there, so a second process started on the same run id
(e.g. a duplicated resume) is refused with the holder's identity instead
of racing the first one through the remaining trials.
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import logging
import os
import platform
from pathlib import Path
from typing import IO, Dict

# Tentative import for Unix-specific file locking
try:
    import fcntl

    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import psutil

# =========================================================================== #
#                                Internal Imports                             #
# =========================================================================== #
from ..exceptions import RunLocked

# =========================================================================== #
#                               Global State                                  #
# =========================================================================== #
# Open descriptors keep the locks alive until released
_held_locks: Dict[Path, IO] = {}


def describe_holder(lock_file: Path) -> str:
    """
    Identifies the process recorded in a lock sentinel.

    Returns:
        ``PID <n> (<cmdline>)`` when the process is alive and visible,
        ``PID <n>`` when it is not, or ``unknown process``.
    """
    try:
        pid = int(lock_file.read_text(encoding="utf-8").strip())
    except (OSError, ValueError):
        return "unknown process"

    try:
        cmdline = " ".join(psutil.Process(pid).cmdline())
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return f"PID {pid}"
    return f"PID {pid} ({cmdline})" if cmdline else f"PID {pid}"


def ensure_single_instance(lock_file: Path, logger: logging.Logger) -> None:
    """
    Takes a non-blocking exclusive lock on ``lock_file``.

    Args:
        lock_file: Sentinel path, created if missing.
        logger: Logger for reporting acquisition status.

    Raises:
        RunLocked: If another open descriptor (in this or any other
            process) already holds the lock.
    """
    lock_file = Path(lock_file)

    # Locking is only supported on Unix-like systems via fcntl
    if platform.system() not in ("Linux", "Darwin") or not HAS_FCNTL:
        logger.debug("File locking unavailable on this platform, run lock skipped")
        return

    lock_file.parent.mkdir(parents=True, exist_ok=True)
    f = open(lock_file, "a+", encoding="utf-8")
    try:
        fcntl.flock(f, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError:
        f.close()
        holder = describe_holder(lock_file)
        logger.error(f"Another process is already running this study: {holder}")
        raise RunLocked(str(lock_file), holder)

    f.seek(0)
    f.truncate()
    f.write(str(os.getpid()))
    f.flush()
    _held_locks[lock_file] = f
    logger.debug(f"Exclusive run lock acquired: {lock_file}")


def release_single_instance(lock_file: Path) -> None:
    """
    Releases a lock taken by this process; no-op for locks it never held.

    The sentinel itself stays on disk: once unlinked, a process still
    holding the old inode could lock it alongside a newcomer.
    """
    f = _held_locks.pop(Path(lock_file), None)
    if f is None:
        return
    try:
        if HAS_FCNTL:
            fcntl.flock(f, fcntl.LOCK_UN)
    finally:
        f.close()
