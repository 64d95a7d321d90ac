"""
Configuration & Report Serialization.

Converts pydantic models, dataclasses and plain containers into YAML/JSON
and persists them with flush + fsync so a crash never leaves a truncated
config mirror or hyperparameter record behind.
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Dict

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import numpy as np
import yaml

# =========================================================================== #
#                                Internal Imports                             #
# =========================================================================== #
from ..paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

# =========================================================================== #
#                               YAML Orchestration                            #
# =========================================================================== #


def save_config_as_yaml(data: Any, yaml_path: Path) -> Path:
    """
    Saves a configuration object (pydantic model or dict) as a YAML file.

    Args:
        data: The configuration data.
        yaml_path: The target filesystem path for the YAML file.

    Returns:
        The path where the configuration was stored.
    """
    raw_dict = data.model_dump(mode="json") if hasattr(data, "model_dump") else data
    final_data = _sanitize(raw_dict)

    yaml_path.parent.mkdir(parents=True, exist_ok=True)
    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(final_data, f, default_flow_style=False, sort_keys=False, indent=4)
        f.flush()
        os.fsync(f.fileno())

    logger.debug(f"YAML written → {yaml_path.name}")
    return yaml_path


def load_config_from_yaml(yaml_path: Path) -> Dict[str, Any]:
    """
    Loads a raw configuration dictionary from a YAML file.

    Raises:
        FileNotFoundError: If the specified path does not exist.
        ValueError: If the document is not a mapping.
    """
    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        raise FileNotFoundError(f"YAML configuration file not found at: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {yaml_path}, got {type(data).__name__}")
    return data


def save_json(data: Any, json_path: Path) -> Path:
    """Writes a JSON report; NaN and infinities are stored as null."""
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(_sanitize(data), f, indent=4)
        f.flush()
        os.fsync(f.fileno())
    return json_path


# =========================================================================== #
#                               Internal Helpers                              #
# =========================================================================== #


def _sanitize(obj: Any) -> Any:
    """Recursively converts paths, numpy scalars and non-finite floats."""
    if isinstance(obj, dict):
        return {str(k): _sanitize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize(i) for i in obj]
    if isinstance(obj, np.ndarray):
        return [_sanitize(i) for i in obj.tolist()]
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, np.generic):
        obj = obj.item()
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    return obj
