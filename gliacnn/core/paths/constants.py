"""
Project-wide Path Constants.

Single source of truth for the physical filesystem layout: project root
discovery, the default dataset/output locations and the shared logger name.
"""

import os
from pathlib import Path
from typing import Final

# Global logger identity used by all modules to ensure log synchronization
LOGGER_NAME: Final[str] = "gliacnn"


def get_project_root() -> Path:
    """
    Locates the project root by searching upwards for anchor files.

    Returns:
        Directory containing one of the root markers, or the package parent
        when no marker is found.
    """
    # Environment override for container setups
    if str(os.getenv("IN_DOCKER")).upper() in ("1", "TRUE"):
        return Path("/app").resolve()

    current_path = Path(__file__).resolve().parent
    root_markers = {".git", "pyproject.toml", "README.md"}

    for parent in [current_path] + list(current_path.parents):
        if any((parent / marker).exists() for marker in root_markers):
            return parent

    return current_path.parents[2]


PROJECT_ROOT: Final[Path] = get_project_root().resolve()

# Input: partitioned sample directories (train/val/test)
DATASET_DIR: Final[Path] = (PROJECT_ROOT / "dataset").resolve()

# Output: default root directory for all run artifacts
OUTPUTS_ROOT: Final[Path] = (PROJECT_ROOT / "outputs").resolve()
