"""
Dataset Configuration Schema.

Describes where the partitioned sample tree lives and what every sample
must look like after channel selection: ``(in_channels, image_size,
image_size)``. Samples that disagree are skipped at load time.

Expected layout::

    data_root/
    ├── train/<class_name>/<sample files>
    ├── val/<class_name>/<sample files>
    └── test/<class_name>/<sample files>
"""

import argparse
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..paths import DATASET_DIR
from .types import Channels, Epsilon, ImageSize, NonNegativeInt, PositiveInt, ValidatedPath


class DatasetConfig(BaseModel):
    """Input layout, sample geometry and normalization policy."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data_root: ValidatedPath = Field(default=DATASET_DIR)
    in_channels: Channels = Field(default=3, description="Channels after selection")
    image_size: ImageSize = Field(default=64, description="Square spatial size in pixels")
    channels: Optional[List[NonNegativeInt]] = Field(
        default=None, description="Indices of raw channels to keep (None = all)"
    )
    class_names: Optional[List[str]] = Field(
        default=None,
        description="Class subdirectories in label order (None = sorted directory names)",
    )
    epsilon: Epsilon = Field(default=1e-8, description="Substitute for zero range/std")

    # Smoke-run source that bypasses the filesystem
    synthetic: bool = Field(default=False)
    synthetic_samples: PositiveInt = Field(default=120)

    @model_validator(mode="after")
    def validate_channel_policy(self) -> "DatasetConfig":
        if self.channels is not None:
            if len(self.channels) != self.in_channels:
                raise ValueError(
                    f"channels selects {len(self.channels)} channels but "
                    f"in_channels={self.in_channels}"
                )
            if len(set(self.channels)) != len(self.channels):
                raise ValueError(f"Duplicate channel indices: {self.channels}")
        return self

    @model_validator(mode="after")
    def validate_class_names(self) -> "DatasetConfig":
        if self.class_names is not None:
            if len(self.class_names) != 2 or len(set(self.class_names)) != 2:
                raise ValueError(
                    f"Binary classification needs exactly two distinct class names, "
                    f"got {self.class_names}"
                )
        return self

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "DatasetConfig":
        args_dict = vars(args)
        params = {
            k: v for k, v in args_dict.items() if k in cls.model_fields and v is not None
        }
        return cls(**params)
