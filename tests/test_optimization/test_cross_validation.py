"""
Test Suite for the K-Fold Cross-Validation Runner.

Covers fold construction, the imbalance warning, per-fold early stopping,
best-checkpoint restoration, seeded determinism and the restart path for
unrestorable checkpoints.
"""

# Standard Imports
import warnings

# Third-Party Imports
import numpy as np
import pytest

# Internal Imports
from gliacnn.core.exceptions import CheckpointCorruption
from gliacnn.data_handler import build_loader, create_synthetic_dataset
from gliacnn.optimization import (
    CrossValidationRunner,
    Fold,
    FoldImbalanceWarning,
    check_fold_balance,
    checkpoint_key,
    make_folds,
)
from gliacnn.trainer import CheckpointStore, get_criterion, validate_epoch


# FIXTURES
@pytest.fixture
def store(tmp_path):
    return CheckpointStore(tmp_path / "checkpoints")


@pytest.fixture
def runner(tiny_cfg, tiny_pool, cpu, store):
    return CrossValidationRunner(tiny_cfg, tiny_pool, cpu, store)


# TESTS: folds
@pytest.mark.unit
@pytest.mark.parametrize("n_samples, n_folds", [(30, 3), (31, 4), (100, 5), (5, 5)])
def test_validation_folds_partition_the_pool(n_samples, n_folds):
    folds = make_folds(n_samples, n_folds, seed=11)

    assert len(folds) == n_folds
    all_val = np.concatenate([f.val_indices for f in folds])
    assert sorted(all_val.tolist()) == list(range(n_samples))

    for fold in folds:
        assert set(fold.train_indices).isdisjoint(fold.val_indices)
        assert len(fold.train_indices) + len(fold.val_indices) == n_samples


@pytest.mark.unit
def test_fold_split_depends_on_seed():
    a = make_folds(40, 4, seed=1)
    b = make_folds(40, 4, seed=1)
    c = make_folds(40, 4, seed=2)

    assert all(np.array_equal(x.val_indices, y.val_indices) for x, y in zip(a, b))
    assert any(not np.array_equal(x.val_indices, z.val_indices) for x, z in zip(a, c))


@pytest.mark.unit
@pytest.mark.parametrize("n_samples, n_folds", [(10, 1), (3, 4)])
def test_invalid_fold_requests(n_samples, n_folds):
    with pytest.raises(ValueError):
        make_folds(n_samples, n_folds, seed=0)


@pytest.mark.unit
def test_runner_rejects_pool_smaller_than_folds(tiny_cfg, tiny_pool, cpu, store):
    with pytest.raises(ValueError, match="smaller than n_folds"):
        CrossValidationRunner(tiny_cfg, tiny_pool.subset([0, 1]), cpu, store)


@pytest.mark.unit
def test_single_class_fold_triggers_imbalance_warning():
    labels = np.array([0] * 10 + [1] * 10)
    folds = [
        Fold(index=0, train_indices=np.arange(10, 20), val_indices=np.arange(0, 10)),
        Fold(index=1, train_indices=np.arange(0, 10), val_indices=np.arange(10, 20)),
    ]

    with pytest.warns(FoldImbalanceWarning, match="single-class"):
        flagged = check_fold_balance(labels, folds, tolerance=0.15)

    assert flagged == [0, 1]


@pytest.mark.unit
def test_balanced_folds_do_not_warn():
    labels = np.array([0, 1] * 10)
    even_folds = [
        Fold(index=0, train_indices=np.arange(10, 20), val_indices=np.arange(0, 10)),
        Fold(index=1, train_indices=np.arange(0, 10), val_indices=np.arange(10, 20)),
    ]
    with warnings.catch_warnings():
        warnings.simplefilter("error", FoldImbalanceWarning)
        assert check_fold_balance(labels, even_folds, tolerance=0.15) == []


@pytest.mark.unit
def test_checkpoint_key_format():
    assert checkpoint_key(3, 1) == "trial_0003_fold_1"


# TESTS: fold training
@pytest.mark.integration
def test_nested_search_single_configuration(cfg_factory, tiny_hparams, cpu, store):
    cfg = cfg_factory(
        dataset={"synthetic_samples": 100},
        training={"epochs": 5, "patience": 2},
    )
    pool = create_synthetic_dataset(n_samples=100, in_channels=1, image_size=8, seed=3)
    runner = CrossValidationRunner(cfg, pool, cpu, store)

    result = runner.run(tiny_hparams, trial_number=0)

    assert len(result.folds) == 3
    for fold in result.folds:
        assert 1 <= fold.epochs_run <= 5
        assert fold.score == max(r.val_auc for r in fold.records)
        assert 0.0 <= fold.score <= 1.0
        assert fold.best_epoch is not None
    assert result.objective == pytest.approx(np.mean(result.fold_scores))


@pytest.mark.integration
def test_restored_weights_reproduce_best_validation_loss(
    cfg_factory, tiny_hparams, tiny_pool, cpu, store
):
    cfg = cfg_factory(cross_validation={"keep_fold_checkpoints": True})
    runner = CrossValidationRunner(cfg, tiny_pool, cpu, store)
    fold = make_folds(len(tiny_pool), 3, seed=5)[0]

    result, model = runner.train_fold(tiny_hparams, trial_number=0, fold=fold)

    loader = build_loader(
        tiny_pool.subset(fold.val_indices), batch_size=cfg.training.batch_size, shuffle=False
    )
    metrics = validate_epoch(model, loader, get_criterion(), cpu)
    saved = store.load(checkpoint_key(0, fold.index))["metadata"]
    best_record = result.records[result.best_epoch - 1]

    # bit-identical, not approximately equal
    assert metrics["loss"] == saved["val_loss"]
    assert saved["epoch"] == result.best_epoch
    assert best_record.val_loss == saved["val_loss"] == result.best_val_loss


@pytest.mark.integration
def test_fold_checkpoints_are_discarded_by_default(runner, tiny_hparams, store):
    runner.run(tiny_hparams, trial_number=2)
    assert not any(store.exists(checkpoint_key(2, i)) for i in range(3))


@pytest.mark.integration
def test_fold_checkpoints_kept_on_request(cfg_factory, tiny_pool, tiny_hparams, cpu, store):
    cfg = cfg_factory(cross_validation={"keep_fold_checkpoints": True})
    CrossValidationRunner(cfg, tiny_pool, cpu, store).run(tiny_hparams, trial_number=1)

    assert all(store.exists(checkpoint_key(1, i)) for i in range(3))


@pytest.mark.integration
def test_objective_is_deterministic(tiny_cfg, tiny_pool, tiny_hparams, cpu, tmp_path):
    first = CrossValidationRunner(tiny_cfg, tiny_pool, cpu, CheckpointStore(tmp_path / "a"))
    second = CrossValidationRunner(tiny_cfg, tiny_pool, cpu, CheckpointStore(tmp_path / "b"))

    a = first.run(tiny_hparams, trial_number=4)
    b = second.run(tiny_hparams, trial_number=4)

    assert a.fold_scores == b.fold_scores
    assert a.objective == b.objective
    for fold_a, fold_b in zip(a.folds, b.folds):
        assert [r.val_auc for r in fold_a.records] == [r.val_auc for r in fold_b.records]
        assert [r.val_loss for r in fold_a.records] == [r.val_loss for r in fold_b.records]


@pytest.mark.integration
def test_fold_callback_receives_running_mean(runner, tiny_hparams):
    seen = []
    result = runner.run(tiny_hparams, on_fold_end=lambda i, mean: seen.append((i, mean)))

    assert [i for i, _ in seen] == [0, 1, 2]
    scores = result.fold_scores
    assert seen[0][1] == pytest.approx(scores[0])
    assert seen[-1][1] == pytest.approx(result.objective)


# TESTS: checkpoint recovery
def _corrupt_first_restores(monkeypatch, store, n_failures):
    calls = {"n": 0}
    original = store.restore_model

    def flaky_restore(key, model, optimizer=None):
        calls["n"] += 1
        if calls["n"] <= n_failures:
            raise CheckpointCorruption(key, "simulated")
        return original(key, model, optimizer)

    monkeypatch.setattr(store, "restore_model", flaky_restore)
    return calls


@pytest.mark.integration
def test_corrupted_checkpoint_restarts_fold(monkeypatch, runner, store, tiny_hparams):
    _corrupt_first_restores(monkeypatch, store, n_failures=1)

    result = runner.run(tiny_hparams)

    assert result.folds[0].restarts == 1
    assert [f.restarts for f in result.folds[1:]] == [0, 0]


@pytest.mark.integration
def test_restart_budget_exhausted_propagates(monkeypatch, cfg_factory, tiny_pool, cpu, store, tiny_hparams):
    cfg = cfg_factory(cross_validation={"max_fold_restarts": 0})
    runner = CrossValidationRunner(cfg, tiny_pool, cpu, store)
    _corrupt_first_restores(monkeypatch, store, n_failures=1)

    with pytest.raises(CheckpointCorruption):
        runner.run(tiny_hparams)
