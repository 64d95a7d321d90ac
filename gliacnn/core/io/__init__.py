"""
Input/Output & Persistence Utilities.

Configuration serialization (YAML), JSON reports and file integrity
verification via MD5 checksums.
"""

from .data_io import fsync_file, md5_checksum, write_text_atomic
from .serialization import load_config_from_yaml, save_config_as_yaml, save_json

__all__ = [
    "save_config_as_yaml",
    "load_config_from_yaml",
    "save_json",
    "md5_checksum",
    "fsync_file",
    "write_text_atomic",
]
