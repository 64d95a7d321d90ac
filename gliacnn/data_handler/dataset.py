"""
Sample Dataset Definition Module.

Loads the externally partitioned IHC crop tree into memory as immutable
``Sample`` records and exposes them through a ``torch.utils.data.Dataset``
with subset and concatenation helpers used by the k-fold runner.

Expected layout::

    data_root/{train,val,test}/<class_name>/<sample file>

Supported sample files are ``.npy`` arrays and raster images readable by
Pillow (multi-frame TIFFs contribute one channel per frame). Each sample is
brought to (C, H, W), reduced to the selected channels, checked against the
declared shape and normalized. A sample that fails any step is skipped
with a warning.

Sample ids are ``<partition>/<class_name>/<file stem>``, so the same file
name may be reused across partitions. Partition disjointness is checked on
file contents: a byte-identical file in two partitions is fatal.
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import numpy as np
import torch
from PIL import Image, ImageSequence, UnidentifiedImageError
from torch.utils.data import Dataset

# =========================================================================== #
#                              Internal Imports                               #
# =========================================================================== #
from ..core.config.dataset_config import DatasetConfig
from ..core.exceptions import DataLoadError
from ..core.io import md5_checksum
from ..core.paths import LOGGER_NAME
from .transforms import normalize_channels, select_channels, to_channels_first

logger = logging.getLogger(LOGGER_NAME)

IMAGE_SUFFIXES = frozenset({".png", ".tif", ".tiff", ".jpg", ".jpeg"})
ARRAY_SUFFIXES = frozenset({".npy"})


class Partition(str, Enum):
    """Upstream split tags and their subdirectory names."""

    TRAIN = "train"
    VALIDATION = "val"
    TEST = "test"


@dataclass(frozen=True)
class Sample:
    """
    One labeled, normalized crop. ``image`` is a read-only (C, H, W) array;
    ``source_digest`` is the MD5 of the file it was read from (None for
    generated samples).
    """

    sample_id: str
    image: np.ndarray
    label: int
    source_digest: Optional[str] = None

    def __post_init__(self):
        self.image.setflags(write=False)


# =========================================================================== #
#                                DATASET CLASS                                #
# =========================================================================== #


class SampleDataset(Dataset):
    """
    Ordered, in-memory collection of samples sharing one shape.

    Index order is fixed at construction; ``subset`` and ``concat`` preserve
    the order of the indices / datasets they are given.
    """

    def __init__(self, samples: Sequence[Sample], partition: Optional[Partition] = None):
        self._samples: Tuple[Sample, ...] = tuple(samples)
        self.partition = partition

        shapes = {s.image.shape for s in self._samples}
        if len(shapes) > 1:
            raise ValueError(f"Samples have inconsistent shapes: {sorted(shapes)}")

    def __len__(self) -> int:
        return len(self._samples)

    def __getitem__(self, idx: int) -> Tuple[torch.Tensor, torch.Tensor]:
        sample = self._samples[idx]
        return torch.tensor(sample.image, dtype=torch.float32), torch.tensor(
            sample.label, dtype=torch.long
        )

    @property
    def samples(self) -> Tuple[Sample, ...]:
        return self._samples

    @property
    def sample_ids(self) -> List[str]:
        return [s.sample_id for s in self._samples]

    @property
    def labels(self) -> np.ndarray:
        return np.array([s.label for s in self._samples], dtype=np.int64)

    @property
    def sample_shape(self) -> Optional[Tuple[int, ...]]:
        return self._samples[0].image.shape if self._samples else None

    def class_counts(self) -> Dict[int, int]:
        return dict(sorted(Counter(int(s.label) for s in self._samples).items()))

    def subset(self, indices: Iterable[int]) -> "SampleDataset":
        """New dataset holding the samples at ``indices`` in that order."""
        return SampleDataset([self._samples[int(i)] for i in indices], self.partition)

    @staticmethod
    def concat(*datasets: "SampleDataset") -> "SampleDataset":
        """Concatenates datasets; sample ids must stay unique."""
        samples = [s for ds in datasets for s in ds.samples]
        _check_unique_ids(samples)
        return SampleDataset(samples)


# =========================================================================== #
#                                SAMPLE LOADING                               #
# =========================================================================== #


def read_sample_array(path: Path) -> np.ndarray:
    """
    Reads a sample file into a numeric array.

    Raises:
        DataLoadError: Unsupported suffix or unreadable file.
    """
    suffix = path.suffix.lower()
    try:
        if suffix in ARRAY_SUFFIXES:
            return np.load(path, allow_pickle=False)

        if suffix in IMAGE_SUFFIXES:
            with Image.open(path) as img:
                frames = [np.asarray(frame.copy()) for frame in ImageSequence.Iterator(img)]
            if len(frames) == 1:
                return frames[0]
            # Multi-frame TIFF: one frame per channel
            return np.stack([f if f.ndim == 2 else f[..., 0] for f in frames])
    except (OSError, ValueError, UnidentifiedImageError) as e:
        raise DataLoadError(f"Cannot read {path.name}: {e}", path=str(path)) from e

    raise DataLoadError(f"Unsupported sample format '{suffix}'", path=str(path))


def load_sample(path: Path, sample_id: str, label: int, cfg: DatasetConfig) -> Sample:
    """
    Reads, reshapes, selects channels, validates and normalizes one sample.

    Raises:
        DataLoadError: On any read or shape problem.
    """
    raw = read_sample_array(path)
    if not np.issubdtype(raw.dtype, np.number):
        raise DataLoadError(f"Non-numeric sample dtype {raw.dtype}", path=str(path))

    channels_hint = None if cfg.channels is not None else cfg.in_channels
    image = select_channels(to_channels_first(raw, channels_hint), cfg.channels)

    expected = (cfg.in_channels, cfg.image_size, cfg.image_size)
    if image.shape != expected:
        raise DataLoadError(
            f"Shape {image.shape} does not match declared {expected}", path=str(path)
        )
    if not np.all(np.isfinite(image)):
        raise DataLoadError("Sample contains non-finite values", path=str(path))

    return Sample(
        sample_id=sample_id,
        image=normalize_channels(image, cfg.epsilon),
        label=label,
        source_digest=md5_checksum(path),
    )


def resolve_class_names(cfg: DatasetConfig) -> List[str]:
    """
    Class names in label order: explicit config, else sorted train subdirectories.

    Raises:
        ValueError: If there are not exactly two classes.
    """
    if cfg.class_names is not None:
        return list(cfg.class_names)

    train_dir = Path(cfg.data_root) / Partition.TRAIN.value
    if not train_dir.is_dir():
        raise ValueError(f"Training partition not found at {train_dir}")

    names = sorted(p.name for p in train_dir.iterdir() if p.is_dir())
    if len(names) != 2:
        raise ValueError(f"Expected exactly two class directories in {train_dir}, found {names}")
    return names


def load_partition(
    partition: Partition, cfg: DatasetConfig, class_names: Optional[List[str]] = None
) -> SampleDataset:
    """
    Loads one partition directory.

    Unreadable or mis-shaped samples are skipped with a warning.

    Raises:
        ValueError: If no valid sample remains.
    """
    class_names = class_names or resolve_class_names(cfg)
    part_dir = Path(cfg.data_root) / partition.value

    samples: List[Sample] = []
    skipped = 0
    for label, class_name in enumerate(class_names):
        class_dir = part_dir / class_name
        if not class_dir.is_dir():
            logger.warning(f"Missing class directory {class_dir}")
            continue

        for path in sorted(p for p in class_dir.iterdir() if p.is_file()):
            if path.suffix.lower() not in IMAGE_SUFFIXES | ARRAY_SUFFIXES:
                continue
            sample_id = f"{partition.value}/{class_name}/{path.stem}"
            try:
                samples.append(load_sample(path, sample_id, label, cfg))
            except DataLoadError as e:
                skipped += 1
                logger.warning(f"Skipping sample {sample_id}: {e}")

    if not samples:
        raise ValueError(f"Partition '{partition.value}' at {part_dir} has no valid samples")

    _check_unique_ids(samples)
    dataset = SampleDataset(samples, partition)
    logger.info(
        f"Loaded {partition.value}: {len(dataset)} samples "
        f"(skipped {skipped}, classes {dataset.class_counts()})"
    )
    return dataset


def load_partitions(cfg: DatasetConfig) -> Dict[Partition, SampleDataset]:
    """
    Loads train, validation and test partitions and checks they are disjoint.

    Raises:
        ValueError: Empty partition, or the same file contents present in
            two partitions.
    """
    class_names = resolve_class_names(cfg)
    partitions = {p: load_partition(p, cfg, class_names) for p in Partition}

    seen: Dict[str, Tuple[Partition, str]] = {}
    for partition, dataset in partitions.items():
        for sample in dataset.samples:
            if sample.source_digest is None:
                continue
            owner = seen.get(sample.source_digest)
            if owner is not None and owner[0] is not partition:
                raise ValueError(
                    f"Sample '{sample.sample_id}' has the same contents as "
                    f"'{owner[1]}': it appears in both '{owner[0].value}' and "
                    f"'{partition.value}'"
                )
            seen.setdefault(sample.source_digest, (partition, sample.sample_id))
    return partitions


def _check_unique_ids(samples: Sequence[Sample]) -> None:
    counts = Counter(s.sample_id for s in samples)
    duplicates = [sid for sid, n in counts.items() if n > 1]
    if duplicates:
        raise ValueError(f"Duplicate sample ids: {duplicates[:5]}")
