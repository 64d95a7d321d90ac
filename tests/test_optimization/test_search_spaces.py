"""
Test Suite for the hyperparameter search space.
"""

# Third-Party Imports
import optuna
import pytest

# Internal Imports
from gliacnn.core import TrialHyperparameters
from gliacnn.optimization import SearchSpace


@pytest.fixture
def space(tiny_cfg):
    return SearchSpace(tiny_cfg.optuna.search_space)


@pytest.mark.unit
def test_sampled_configs_respect_bounds(space):
    study = optuna.create_study(direction="maximize", sampler=optuna.samplers.RandomSampler(seed=0))
    bounds = space.bounds

    for _ in range(25):
        hparams = space.sample(study.ask())

        assert isinstance(hparams, TrialHyperparameters)
        assert hparams.optimizer in bounds.optimizers
        assert bounds.learning_rate_low <= hparams.learning_rate <= bounds.learning_rate_high
        assert bounds.dense_units_low <= hparams.dense_units <= bounds.dense_units_high
        assert all(bounds.conv_channels_low <= w <= bounds.conv_channels_high for w in hparams.conv_channels)


@pytest.mark.unit
def test_conv_widths_never_increase(space):
    study = optuna.create_study(direction="maximize", sampler=optuna.samplers.RandomSampler(seed=1))

    for _ in range(25):
        widths = space.sample(study.ask()).conv_channels
        assert widths[0] >= widths[1] >= widths[2]


@pytest.mark.unit
def test_trial_params_round_trip_to_hparams(space):
    study = optuna.create_study(direction="maximize")
    trial = study.ask()
    hparams = space.sample(trial)

    assert TrialHyperparameters.from_flat_dict(trial.params) == hparams


@pytest.mark.unit
def test_describe_lists_bounds(space):
    described = space.describe()
    assert described["optimizers"] == ["adam", "sgd"]
    assert described["conv_channels_high"] == 4
