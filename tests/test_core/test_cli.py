"""
Test Suite for the Command-Line Interface.
"""

# Third-Party Imports
import pytest

# Internal Imports
from gliacnn.core import parse_args


@pytest.mark.unit
def test_all_flags_default_to_none():
    """Unset flags must not override schema defaults."""
    args = parse_args([])
    values = {k: v for k, v in vars(args).items()}

    assert values
    assert all(v is None for v in values.values())


@pytest.mark.unit
def test_parse_typed_flags():
    args = parse_args(
        [
            "--n_trials",
            "12",
            "--n_folds",
            "3",
            "--synthetic",
            "--enable_pruning",
            "--timeout",
            "60",
            "--device",
            "cpu",
        ]
    )

    assert args.n_trials == 12
    assert args.n_folds == 3
    assert args.synthetic is True
    assert args.enable_pruning is True
    assert args.timeout == 60.0
    assert args.device == "cpu"


@pytest.mark.unit
def test_config_flag():
    args = parse_args(["--config", "recipes/config_glia_cnn.yaml"])
    assert args.config == "recipes/config_glia_cnn.yaml"
