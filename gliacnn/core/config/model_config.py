"""
Model Geometry Configuration Schema.

The layer topology is fixed (three convolution blocks followed by one
hidden dense layer); only the kernel and pooling geometry are set here.
Widths and dropout rates come from the trial hyperparameters.
"""

import argparse
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .types import KernelSize


class ModelConfig(BaseModel):
    """Fixed architecture geometry."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Literal["glia_cnn"] = "glia_cnn"
    kernel_size: KernelSize = Field(default=3)
    pool_size: int = Field(default=2, ge=1, le=4)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ModelConfig":
        args_dict = vars(args)
        params = {
            k: v for k, v in args_dict.items() if k in cls.model_fields and v is not None
        }
        return cls(**params)
