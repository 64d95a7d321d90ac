"""
Synthetic Data Handler.

Builds small, balanced and learnable datasets in memory for tests and
smoke runs: class-1 crops carry a bright Gaussian blob on the first
channel, class-0 crops are background noise only. Samples go through the
same channel normalization as files read from disk.
"""

import numpy as np

from .dataset import Partition, Sample, SampleDataset
from .transforms import normalize_channels


def create_synthetic_dataset(
    n_samples: int = 100,
    in_channels: int = 3,
    image_size: int = 32,
    seed: int = 0,
    signal: float = 1.5,
    partition: Partition = None,
    id_prefix: str = "synthetic",
    epsilon: float = 1e-8,
) -> SampleDataset:
    """
    Creates a balanced synthetic dataset (first half control, second half disease).

    Args:
        n_samples: Total samples; ``n_samples // 2`` are positive.
        in_channels: Channels per sample.
        image_size: Square spatial size.
        seed: Seed of the generator drawing the noise.
        signal: Peak height of the class-1 blob relative to the noise.
        partition: Partition tag attached to the dataset.
        id_prefix: Prefix of the generated sample ids.
        epsilon: Normalization epsilon.
    """
    if n_samples < 2:
        raise ValueError(f"n_samples must be >= 2, got {n_samples}")

    rng = np.random.default_rng(seed)
    yy, xx = np.mgrid[0:image_size, 0:image_size]
    center = (image_size - 1) / 2.0
    blob = np.exp(-((yy - center) ** 2 + (xx - center) ** 2) / (2 * (image_size / 6.0) ** 2))

    n_positive = n_samples // 2
    samples = []
    for i in range(n_samples):
        label = int(i >= n_samples - n_positive)
        image = rng.uniform(0.0, 1.0, size=(in_channels, image_size, image_size))
        if label == 1:
            image[0] += signal * blob
        samples.append(
            Sample(
                sample_id=f"{id_prefix}_{i:05d}",
                image=normalize_channels(image, epsilon),
                label=label,
            )
        )
    return SampleDataset(samples, partition)
