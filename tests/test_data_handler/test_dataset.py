"""
Test Suite for SampleDataset and partition loading.

Uses tiny on-disk datasets written to tmp_path in the
``root/{train,val,test}/<class>/<file>`` layout.
"""

# Standard Imports
from pathlib import Path

# Third-Party Imports
import numpy as np
import pytest
import torch
from PIL import Image

# Internal Imports
from gliacnn.core.config import DatasetConfig
from gliacnn.data_handler import (
    Partition,
    Sample,
    SampleDataset,
    create_synthetic_dataset,
    load_partition,
    load_partitions,
    read_sample_array,
)

CLASSES = ("control", "disease")


def _write_split(root: Path, partition: str, n_per_class: int, size: int = 8, offset: int = 0):
    rng = np.random.default_rng(offset)
    for label, class_name in enumerate(CLASSES):
        class_dir = root / partition / class_name
        class_dir.mkdir(parents=True, exist_ok=True)
        for i in range(n_per_class):
            arr = rng.uniform(0, 255, size=(size, size, 3)) + 40 * label
            np.save(class_dir / f"{partition}_{offset + i:03d}.npy", arr.astype(np.float32))


@pytest.fixture
def dataset_root(tmp_path):
    root = tmp_path / "dataset"
    _write_split(root, "train", 4)
    _write_split(root, "val", 2, offset=100)
    _write_split(root, "test", 2, offset=200)
    return root


@pytest.fixture
def ds_cfg(dataset_root):
    return DatasetConfig(data_root=dataset_root, in_channels=3, image_size=8)


# DATASET CLASS
@pytest.mark.unit
def test_getitem_returns_float_image_and_long_label(tiny_pool):
    image, label = tiny_pool[0]

    assert image.dtype == torch.float32
    assert image.shape == (1, 8, 8)
    assert label.dtype == torch.long


@pytest.mark.unit
def test_samples_are_read_only(tiny_pool):
    with pytest.raises(ValueError):
        tiny_pool.samples[0].image[0, 0, 0] = 1.0


@pytest.mark.unit
def test_subset_preserves_order(tiny_pool):
    subset = tiny_pool.subset([5, 2, 9])
    assert subset.sample_ids == [tiny_pool.sample_ids[i] for i in (5, 2, 9)]


@pytest.mark.unit
def test_concat_rejects_duplicate_ids(tiny_pool):
    with pytest.raises(ValueError, match="Duplicate"):
        SampleDataset.concat(tiny_pool, tiny_pool)


@pytest.mark.unit
def test_inconsistent_shapes_rejected():
    a = Sample("a", np.zeros((1, 8, 8), dtype=np.float32), 0)
    b = Sample("b", np.zeros((1, 4, 4), dtype=np.float32), 1)
    with pytest.raises(ValueError, match="inconsistent"):
        SampleDataset([a, b])


@pytest.mark.unit
def test_synthetic_dataset_is_balanced():
    ds = create_synthetic_dataset(n_samples=11, in_channels=2, image_size=8)
    assert ds.class_counts() == {0: 6, 1: 5}
    assert ds.sample_shape == (2, 8, 8)


# FILE READING
@pytest.mark.unit
def test_read_multiframe_tiff(tmp_path):
    path = tmp_path / "stack.tif"
    frames = [Image.fromarray(np.full((8, 8), v, dtype=np.uint8)) for v in (10, 20, 30)]
    frames[0].save(path, save_all=True, append_images=frames[1:])

    arr = read_sample_array(path)

    assert arr.shape == (3, 8, 8)
    assert arr[2, 0, 0] == 30


# PARTITION LOADING
@pytest.mark.unit
def test_load_partition(ds_cfg):
    train = load_partition(Partition.TRAIN, ds_cfg)

    assert len(train) == 8
    assert train.class_counts() == {0: 4, 1: 4}
    assert train.sample_ids[0] == "train/control/train_000"
    assert train.sample_shape == (3, 8, 8)


@pytest.mark.unit
def test_bad_samples_are_skipped(dataset_root, ds_cfg):
    bad_dir = dataset_root / "train" / "control"
    np.save(bad_dir / "wrong_shape.npy", np.zeros((3, 16, 16), dtype=np.float32))
    (bad_dir / "corrupt.png").write_bytes(b"not an image")
    nan_arr = np.zeros((8, 8, 3), dtype=np.float32)
    nan_arr[0, 0, 0] = np.nan
    np.save(bad_dir / "nan.npy", nan_arr)

    train = load_partition(Partition.TRAIN, ds_cfg)

    assert len(train) == 8
    assert not any("wrong_shape" in sid or "corrupt" in sid for sid in train.sample_ids)


@pytest.mark.unit
def test_empty_partition_is_fatal(tmp_path):
    root = tmp_path / "empty"
    for class_name in CLASSES:
        (root / "train" / class_name).mkdir(parents=True)
    cfg = DatasetConfig(data_root=root, in_channels=3, image_size=8)

    with pytest.raises(ValueError, match="no valid samples"):
        load_partition(Partition.TRAIN, cfg)


@pytest.mark.unit
def test_load_partitions_returns_all_three(ds_cfg):
    partitions = load_partitions(ds_cfg)
    assert {p: len(d) for p, d in partitions.items()} == {
        Partition.TRAIN: 8,
        Partition.VALIDATION: 4,
        Partition.TEST: 4,
    }


@pytest.mark.unit
def test_wrong_number_of_classes_is_fatal(tmp_path):
    root = tmp_path / "three"
    for class_name in ("a", "b", "c"):
        (root / "train" / class_name).mkdir(parents=True)
    with pytest.raises(ValueError, match="exactly two"):
        load_partition(Partition.TRAIN, DatasetConfig(data_root=root, image_size=8))


@pytest.mark.unit
def test_channel_selection_from_disk(dataset_root):
    cfg = DatasetConfig(data_root=dataset_root, in_channels=1, image_size=8, channels=[2])
    train = load_partition(Partition.TRAIN, cfg)
    assert train.sample_shape == (1, 8, 8)


# PARTITION DISJOINTNESS
@pytest.mark.unit
def test_shared_file_name_with_different_contents_is_allowed(dataset_root, ds_cfg):
    rng = np.random.default_rng(999)
    for partition in ("train", "test"):
        arr = rng.uniform(0, 255, size=(8, 8, 3)).astype(np.float32)
        np.save(dataset_root / partition / "control" / "crop_01.npy", arr)

    partitions = load_partitions(ds_cfg)

    assert "train/control/crop_01" in partitions[Partition.TRAIN].sample_ids
    assert "test/control/crop_01" in partitions[Partition.TEST].sample_ids


@pytest.mark.unit
def test_identical_file_in_two_partitions_is_fatal(dataset_root, ds_cfg):
    leaked = dataset_root / "train" / "disease" / "train_001.npy"
    (dataset_root / "test" / "disease" / "renamed.npy").write_bytes(leaked.read_bytes())

    with pytest.raises(ValueError, match="appears in both 'train' and 'test'"):
        load_partitions(ds_cfg)


@pytest.mark.unit
def test_identical_files_within_one_partition_are_not_a_leak(dataset_root, ds_cfg):
    original = dataset_root / "val" / "control" / "val_100.npy"
    (dataset_root / "val" / "control" / "copy.npy").write_bytes(original.read_bytes())

    partitions = load_partitions(ds_cfg)
    assert len(partitions[Partition.VALIDATION]) == 5
