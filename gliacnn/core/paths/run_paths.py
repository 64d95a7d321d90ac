"""
Dynamic Run Directory Management.

Provides RunPaths, which creates an isolated directory tree per run. The
run identifier combines the date, the project slug and a short hash of the
configuration so that a changed setup never overwrites a previous run,
while re-launching an identical setup reattaches to the same directory
(which is what lets an interrupted search resume from its trial ledger).
"""

import hashlib
import json
import time
from pathlib import Path
from typing import Any, Dict, Final, Optional

from pydantic import BaseModel, ConfigDict

from .constants import OUTPUTS_ROOT


class RunPaths(BaseModel):
    """
    Immutable blueprint of one run's output tree.

    Example structure:
        outputs/20261018_glia-cnn_a3f7c2/
        ├── figures/    <- ROC curve, training curves
        ├── models/     <- final model and per-fold checkpoints
        ├── reports/    <- config mirror, study summary, predictions
        ├── logs/       <- rotating log files
        └── database/   <- SQLite trial ledger
    """

    model_config = ConfigDict(frozen=True)

    SUB_DIRS: Final[tuple] = ("figures", "models", "reports", "logs", "database")

    run_id: str
    root: Path
    figures: Path
    models: Path
    reports: Path
    logs: Path
    database: Path

    @classmethod
    def create(
        cls,
        project_slug: str,
        run_cfg: Dict[str, Any],
        base_dir: Optional[Path] = None,
        run_id: Optional[str] = None,
    ) -> "RunPaths":
        """
        Builds and materializes the run directory tree.

        Args:
            project_slug: Experiment name used in the directory name.
            run_cfg: Configuration dictionary hashed into the run id.
            base_dir: Output root (default: OUTPUTS_ROOT).
            run_id: Explicit run id, bypassing the hash (used to resume).

        Returns:
            RunPaths with all sub-directories created.
        """
        if not isinstance(project_slug, str) or not project_slug:
            raise ValueError(f"Expected non-empty project slug, got {project_slug!r}")

        resolved_id = run_id or cls._generate_run_id(project_slug.lower(), run_cfg)
        root = Path(base_dir or OUTPUTS_ROOT) / resolved_id

        instance = cls(
            run_id=resolved_id,
            root=root,
            figures=root / "figures",
            models=root / "models",
            reports=root / "reports",
            logs=root / "logs",
            database=root / "database",
        )
        instance._setup_run_directories()
        return instance

    @staticmethod
    def _generate_run_id(slug: str, cfg: Dict[str, Any]) -> str:
        """Date + slug + 6-char blake2b digest of the serialized config."""
        params_json = json.dumps(cfg, sort_keys=True, default=str)
        run_hash = hashlib.blake2b(params_json.encode(), digest_size=3).hexdigest()
        return f"{time.strftime('%Y%m%d')}_{slug}_{run_hash}"

    def _setup_run_directories(self) -> None:
        for folder_name in self.SUB_DIRS:
            getattr(self, folder_name).mkdir(parents=True, exist_ok=True)

    @property
    def checkpoints(self) -> Path:
        """Directory for per-trial/per-fold checkpoints."""
        return self.models / "checkpoints"

    def get_fig_path(self, filename: str) -> Path:
        return self.figures / filename

    def get_report_path(self, filename: str) -> Path:
        return self.reports / filename
