"""
Pytest Configuration and Shared Fixtures for the GliaCNN Test Suite.

Provides:
- A tiny, CPU-only Config (8x8 single-channel crops, in-memory study)
- Synthetic pools small enough for full nested-search runs in seconds
- CLI argument namespaces
- RunPaths rooted in pytest's tmp_path
"""

# Standard Imports
import argparse

# Third-Party Imports
import pytest
import torch

# Internal Imports
from gliacnn.core import Config, RunPaths, TrialHyperparameters
from gliacnn.data_handler import create_synthetic_dataset


# CONFIG FIXTURES
def make_config(tmp_path, **overrides) -> Config:
    """Builds a small CPU config; ``overrides`` are merged per section."""
    sections = {
        "hardware": {"device": "cpu", "num_workers": 0},
        "telemetry": {"project_name": "glia-test", "output_dir": str(tmp_path / "outputs")},
        "dataset": {
            "in_channels": 1,
            "image_size": 8,
            "synthetic": True,
            "synthetic_samples": 30,
        },
        "training": {"seed": 7, "batch_size": 8, "epochs": 3, "patience": 1, "final_epochs": 2},
        "cross_validation": {"n_folds": 3},
        "optuna": {
            "study_name": "test_study",
            "n_trials": 2,
            "n_startup_trials": 1,
            "storage_type": "memory",
            "search_space": {
                "optimizers": ["adam", "sgd"],
                "learning_rate_low": 1e-3,
                "learning_rate_high": 1e-2,
                "conv_channels_low": 2,
                "conv_channels_high": 4,
                "dense_units_low": 4,
                "dense_units_high": 8,
            },
        },
    }
    for section, values in overrides.items():
        sections.setdefault(section, {}).update(values)
    return Config(**sections)


@pytest.fixture
def tiny_cfg(tmp_path):
    """Small CPU-only config writing under tmp_path."""
    return make_config(tmp_path)


@pytest.fixture
def cfg_factory(tmp_path):
    """Builds tiny configs with per-section overrides."""

    def _factory(**overrides):
        return make_config(tmp_path, **overrides)

    return _factory


@pytest.fixture
def tiny_hparams():
    """Fixed, small trial hyperparameters."""
    return TrialHyperparameters(
        optimizer="adam",
        learning_rate=5e-3,
        weight_decay=1e-5,
        conv_channels=(4, 4, 2),
        conv_dropouts=(0.0, 0.0, 0.0),
        dense_units=8,
        dense_dropout=0.0,
    )


# DATA FIXTURES
@pytest.fixture
def tiny_pool():
    """Balanced 30-sample, 1x8x8 synthetic pool."""
    return create_synthetic_dataset(n_samples=30, in_channels=1, image_size=8, seed=0)


@pytest.fixture
def cpu():
    return torch.device("cpu")


@pytest.fixture
def run_paths(tmp_path):
    """Materialized RunPaths under tmp_path."""
    return RunPaths.create("glia-test", {"k": "v"}, base_dir=tmp_path, run_id="test_run")


# CLI ARGUMENT FIXTURES
@pytest.fixture
def basic_args():
    """CLI namespace with every flag unset except a few overrides."""
    return argparse.Namespace(
        config=None,
        project_name="glia-cli",
        run_id=None,
        reproducible=None,
        device="cpu",
        num_workers=None,
        data_root=None,
        output_dir=None,
        log_level=None,
        in_channels=1,
        image_size=16,
        synthetic=True,
        synthetic_samples=40,
        seed=3,
        batch_size=None,
        epochs=4,
        patience=None,
        final_epochs=None,
        grad_clip=None,
        n_folds=4,
        max_fold_restarts=None,
        study_name=None,
        n_trials=6,
        sampler_type=None,
        sampler_seed=None,
        enable_pruning=None,
        storage_url=None,
        timeout=None,
    )
