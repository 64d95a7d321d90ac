"""
Filesystem Authority and Path Orchestration Package.

1. Static: project root and global directory constants via 'constants'.
2. Dynamic: run-specific directory management via 'RunPaths'.
"""

from .constants import (
    DATASET_DIR,
    LOGGER_NAME,
    OUTPUTS_ROOT,
    PROJECT_ROOT,
    get_project_root,
)
from .run_paths import RunPaths

__all__ = [
    "PROJECT_ROOT",
    "DATASET_DIR",
    "OUTPUTS_ROOT",
    "LOGGER_NAME",
    "get_project_root",
    "RunPaths",
]
