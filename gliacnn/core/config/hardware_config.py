"""
Hardware Configuration Schema.

Device request and DataLoader worker policy. The device string is kept
as requested ('auto' included); the RootOrchestrator turns it into a
concrete ``torch.device`` that is then passed explicitly to every
training and evaluation call.

Environment Variables:
    GLIACNN_REPRODUCIBLE: "TRUE" turns strict determinism on whenever the
        recipe or CLI leaves ``reproducible`` unset.
"""

import argparse

from pydantic import BaseModel, ConfigDict, Field

from ..environment.reproducibility import is_repro_mode_requested
from .types import DeviceName, WorkerCount


class HardwareConfig(BaseModel):
    """Compute device and data-loading concurrency."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    device: DeviceName = Field(default="auto", description="cpu, cuda, mps or auto")
    num_workers: WorkerCount = Field(default=0, description="DataLoader worker processes")
    reproducible: bool = Field(
        default_factory=lambda: is_repro_mode_requested(),
        description="Strict determinism (forces num_workers=0)",
    )

    @property
    def effective_num_workers(self) -> int:
        """Workers actually used; strict mode disables multiprocessing."""
        return 0 if self.reproducible else self.num_workers

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "HardwareConfig":
        args_dict = vars(args)
        params = {
            k: v for k, v in args_dict.items() if k in cls.model_fields and v is not None
        }
        return cls(**params)
