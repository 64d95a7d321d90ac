"""
Data Loader Orchestration Module.

Builds seeded DataLoaders and resolves the two datasets the pipeline
consumes: the searchable pool (train + validation) and the held-out test
partition.

Batch order depends only on the seed passed to ``build_loader``: the
shuffling generator is created per loader, and worker processes (when
enabled) only materialize batches whose order is already fixed.
"""

import logging
from typing import Tuple

import torch
from torch.utils.data import DataLoader

from ..core.config import Config
from ..core.environment import worker_init_fn
from ..core.paths import LOGGER_NAME
from .dataset import Partition, SampleDataset, load_partitions
from .synthetic import create_synthetic_dataset

logger = logging.getLogger(LOGGER_NAME)


def build_loader(
    dataset: SampleDataset,
    batch_size: int,
    shuffle: bool,
    seed: int = 0,
    num_workers: int = 0,
) -> DataLoader:
    """
    Creates a DataLoader with a dedicated, seeded generator.

    Args:
        dataset: Source dataset.
        batch_size: Samples per batch.
        shuffle: Reshuffle every epoch (order fixed by ``seed``).
        seed: Generator seed.
        num_workers: Worker processes for batch materialization.
    """
    generator = torch.Generator()
    generator.manual_seed(seed)

    return DataLoader(
        dataset,
        batch_size=batch_size,
        shuffle=shuffle,
        num_workers=num_workers,
        generator=generator,
        worker_init_fn=worker_init_fn if num_workers > 0 else None,
        pin_memory=torch.cuda.is_available(),
        drop_last=False,
    )


def load_datasets(cfg: Config) -> Tuple[SampleDataset, SampleDataset]:
    """
    Resolves the searchable pool and the held-out test set.

    Returns:
        (pool, test) where pool = train + validation.

    Raises:
        ValueError: Empty partitions, overlapping partitions, or a pool
            smaller than the fold count.
    """
    ds = cfg.dataset
    if ds.synthetic:
        n_test = max(2, ds.synthetic_samples // 4)
        pool = create_synthetic_dataset(
            n_samples=ds.synthetic_samples,
            in_channels=ds.in_channels,
            image_size=ds.image_size,
            seed=cfg.training.seed,
            id_prefix="pool",
            epsilon=ds.epsilon,
        )
        test = create_synthetic_dataset(
            n_samples=n_test,
            in_channels=ds.in_channels,
            image_size=ds.image_size,
            seed=cfg.training.seed + 1,
            partition=Partition.TEST,
            id_prefix="test",
            epsilon=ds.epsilon,
        )
        logger.info(f"Synthetic data: pool={len(pool)}, test={len(test)}")
    else:
        partitions = load_partitions(ds)
        pool = SampleDataset.concat(partitions[Partition.TRAIN], partitions[Partition.VALIDATION])
        test = partitions[Partition.TEST]

    if len(pool) < cfg.cross_validation.n_folds:
        raise ValueError(
            f"Pool has {len(pool)} samples, fewer than n_folds={cfg.cross_validation.n_folds}"
        )
    return pool, test
