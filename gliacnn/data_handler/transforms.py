"""
Per-Sample Channel Transforms.

Raw IHC crops are normalized sample by sample and channel by channel:

    1. scale to [-1, 1] by the channel's maximum absolute intensity
    2. standardize with the channel's own mean and standard deviation

Flat channels (zero range or zero variance) get ``epsilon`` as divisor,
so a blank stain channel comes out as zeros instead of NaN.
"""

from typing import Optional, Sequence

import numpy as np

from ..core.exceptions import DataLoadError


def to_channels_first(array: np.ndarray, in_channels: Optional[int] = None) -> np.ndarray:
    """
    Brings a 2D or 3D array into (C, H, W) layout.

    (H, W) becomes (1, H, W). A 3D array whose last axis is the channel axis
    (it matches ``in_channels``, or is clearly smaller than the spatial axes)
    is transposed.
    """
    if array.ndim == 2:
        return array[np.newaxis, ...]
    if array.ndim != 3:
        raise DataLoadError(f"Expected a 2D or 3D array, got shape {array.shape}")

    first, _, last = array.shape
    if in_channels is not None and first != in_channels and last == in_channels:
        return np.transpose(array, (2, 0, 1))
    if in_channels is None and last < first and array.shape[0] == array.shape[1]:
        return np.transpose(array, (2, 0, 1))
    return array


def select_channels(image: np.ndarray, channels: Optional[Sequence[int]]) -> np.ndarray:
    """Keeps the listed channel indices of a (C, H, W) image, in order."""
    if channels is None:
        return image
    available = image.shape[0]
    missing = [c for c in channels if c >= available]
    if missing:
        raise DataLoadError(
            f"Channel indices {missing} out of range for an image with {available} channels"
        )
    return image[list(channels)]


def normalize_channels(image: np.ndarray, epsilon: float = 1e-8) -> np.ndarray:
    """
    Normalizes every channel of a (C, H, W) image independently.

    Args:
        image: Raw intensities, any numeric dtype.
        epsilon: Divisor substituted for a zero maximum or zero std.

    Returns:
        float32 array of the same shape.
    """
    out = image.astype(np.float64, copy=True)
    for c in range(out.shape[0]):
        channel = out[c]

        peak = float(np.max(np.abs(channel))) if channel.size else 0.0
        channel /= peak if peak > 0 else epsilon

        std = float(channel.std())
        channel -= channel.mean()
        channel /= std if std > 0 else epsilon

    return out.astype(np.float32)
