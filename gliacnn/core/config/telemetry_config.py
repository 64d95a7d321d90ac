"""
Telemetry & Run Layout Configuration Schema.

Controls the experiment name, the output root, logging verbosity and the
optional explicit run id used to reattach to an interrupted run.
"""

import argparse
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..paths import OUTPUTS_ROOT
from .types import LogFrequency, LogLevel, ProjectSlug, ValidatedPath


class TelemetryConfig(BaseModel):
    """Experiment identity, filesystem root and logging policy."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_name: ProjectSlug = Field(default="glia-cnn")
    output_dir: ValidatedPath = Field(default=OUTPUTS_ROOT)
    run_id: Optional[str] = Field(
        default=None, description="Reuse an existing run directory (resume)"
    )
    log_level: LogLevel = "INFO"
    log_interval: LogFrequency = Field(
        default=10, description="Batches between DEBUG batch-loss messages"
    )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "TelemetryConfig":
        args_dict = vars(args)
        params = {
            k: v for k, v in args_dict.items() if k in cls.model_fields and v is not None
        }
        return cls(**params)
