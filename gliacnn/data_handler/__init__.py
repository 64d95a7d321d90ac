"""
Data Handler Package.

Sample loading and normalization, synthetic data and seeded loaders.
"""

from .dataset import (
    Partition,
    Sample,
    SampleDataset,
    load_partition,
    load_partitions,
    load_sample,
    read_sample_array,
    resolve_class_names,
)
from .loader import build_loader, load_datasets
from .synthetic import create_synthetic_dataset
from .transforms import normalize_channels, select_channels, to_channels_first

__all__ = [
    "Partition",
    "Sample",
    "SampleDataset",
    "load_partition",
    "load_partitions",
    "load_sample",
    "read_sample_array",
    "resolve_class_names",
    "build_loader",
    "load_datasets",
    "create_synthetic_dataset",
    "normalize_channels",
    "select_channels",
    "to_channels_first",
]
