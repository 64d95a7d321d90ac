"""
Test Suite for the GliaCNN architecture and model factory.
"""

# Third-Party Imports
import pytest
import torch
import torch.nn as nn

# Internal Imports
from gliacnn.core import TrialHyperparameters, set_seed
from gliacnn.models import GliaCNN, get_model


@pytest.mark.unit
def test_forward_shape():
    model = GliaCNN(
        in_channels=3,
        image_size=32,
        conv_channels=(16, 8, 8),
        conv_dropouts=(0.1, 0.1, 0.1),
        dense_units=12,
        dense_dropout=0.2,
    )
    logits = model(torch.randn(5, 3, 32, 32))
    assert logits.shape == (5, 2)


@pytest.mark.unit
def test_layer_structure():
    model = GliaCNN(
        in_channels=1,
        image_size=16,
        conv_channels=(8, 4, 4),
        conv_dropouts=(0.0, 0.1, 0.2),
        dense_units=6,
        dense_dropout=0.3,
    )
    convs = [m for m in model.modules() if isinstance(m, nn.Conv2d)]
    linears = [m for m in model.modules() if isinstance(m, nn.Linear)]

    assert [c.out_channels for c in convs] == [8, 4, 4]
    assert convs[0].in_channels == 1
    assert linears[0].in_features == 4 * 2 * 2
    assert linears[-1].out_features == 2


@pytest.mark.unit
def test_factory_builds_from_config(tiny_cfg, tiny_hparams, cpu):
    model = get_model(cpu, tiny_cfg, tiny_hparams)
    assert model(torch.randn(2, 1, 8, 8)).shape == (2, 2)


@pytest.mark.unit
def test_seeded_init_is_identical(tiny_cfg, tiny_hparams, cpu):
    set_seed(11)
    a = get_model(cpu, tiny_cfg, tiny_hparams)
    set_seed(11)
    b = get_model(cpu, tiny_cfg, tiny_hparams)

    for pa, pb in zip(a.parameters(), b.parameters()):
        assert torch.equal(pa, pb)


@pytest.mark.unit
def test_hyperparameters_reach_the_model(tiny_cfg, cpu):
    hparams = TrialHyperparameters(conv_channels=(6, 5, 3), dense_units=9)
    model = get_model(cpu, tiny_cfg, hparams)
    convs = [m for m in model.modules() if isinstance(m, nn.Conv2d)]

    assert [c.out_channels for c in convs] == [6, 5, 3]
