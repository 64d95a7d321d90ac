"""
File Integrity Utilities.

MD5 digests for checkpoint sidecars and an fsync-backed atomic replace
used by the checkpoint store.
"""

import hashlib
import os
from pathlib import Path


def md5_checksum(path: Path) -> str:
    """
    Calculates the MD5 checksum of a file using buffered reading.

    Args:
        path: Path to the file to verify.

    Returns:
        The hexadecimal MD5 digest.
    """
    hash_md5 = hashlib.md5()
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            hash_md5.update(chunk)
    return hash_md5.hexdigest()


def fsync_file(path: Path) -> None:
    """Forces a file's contents to stable storage."""
    with Path(path).open("rb") as f:
        os.fsync(f.fileno())


def write_text_atomic(path: Path, text: str) -> None:
    """Writes a small text file through a temp file and os.replace."""
    tmp = path.with_name(path.name + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, path)
