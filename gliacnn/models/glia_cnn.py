"""
Glia CNN Architecture.

Fixed topology for small multi-channel IHC crops::

    [Conv → ReLU → MaxPool → Dropout] x 3 → Flatten → Dense → ReLU → Dropout → Linear(2)

Only widths and dropout rates vary between trials; they come from a
``TrialHyperparameters`` record. The module holds no training history.
"""

from typing import Sequence

import torch
import torch.nn as nn

NUM_CLASSES = 2


class GliaCNN(nn.Module):
    """Three convolution blocks followed by a single hidden dense layer."""

    def __init__(
        self,
        in_channels: int,
        image_size: int,
        conv_channels: Sequence[int],
        conv_dropouts: Sequence[float],
        dense_units: int,
        dense_dropout: float,
        kernel_size: int = 3,
        pool_size: int = 2,
        num_classes: int = NUM_CLASSES,
    ):
        super().__init__()
        if len(conv_channels) != len(conv_dropouts):
            raise ValueError("conv_channels and conv_dropouts must have the same length")

        blocks = []
        prev = in_channels
        for width, p in zip(conv_channels, conv_dropouts):
            blocks += [
                nn.Conv2d(prev, width, kernel_size=kernel_size, padding=kernel_size // 2),
                nn.ReLU(inplace=True),
                nn.MaxPool2d(pool_size),
                nn.Dropout(p),
            ]
            prev = width
        self.features = nn.Sequential(*blocks)

        spatial = image_size // (pool_size ** len(conv_channels))
        if spatial < 1:
            raise ValueError(
                f"image_size={image_size} is too small for {len(conv_channels)} pooling stages"
            )

        self.classifier = nn.Sequential(
            nn.Flatten(),
            nn.Linear(prev * spatial * spatial, dense_units),
            nn.ReLU(inplace=True),
            nn.Dropout(dense_dropout),
            nn.Linear(dense_units, num_classes),
        )

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.classifier(self.features(x))
