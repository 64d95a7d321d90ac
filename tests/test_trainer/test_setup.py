"""
Test Suite for the criterion and optimizer factories.
"""

# Third-Party Imports
import pytest
import torch
import torch.nn as nn

# Internal Imports
from gliacnn.core import TrialHyperparameters
from gliacnn.trainer import get_criterion, get_optimizer


@pytest.fixture
def model():
    return nn.Linear(4, 2)


@pytest.mark.unit
def test_criterion_is_cross_entropy():
    assert isinstance(get_criterion(), nn.CrossEntropyLoss)


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, cls",
    [
        ("adam", torch.optim.Adam),
        ("adamw", torch.optim.AdamW),
        ("sgd", torch.optim.SGD),
        ("rmsprop", torch.optim.RMSprop),
    ],
)
def test_optimizer_family(model, name, cls):
    hparams = TrialHyperparameters(optimizer=name, learning_rate=3e-3, weight_decay=1e-4)
    optimizer = get_optimizer(model, hparams, momentum=0.8)

    assert type(optimizer) is cls
    group = optimizer.param_groups[0]
    assert group["lr"] == pytest.approx(3e-3)
    assert group["weight_decay"] == pytest.approx(1e-4)
    if name in ("sgd", "rmsprop"):
        assert group["momentum"] == pytest.approx(0.8)
