"""
Test Suite for the Crash-Safe Checkpoint Store.

Round trip, rotation to the previous checkpoint, fallback on corruption,
the unrecoverable case, and saves interrupted between renames.
"""

# Standard Imports
import os
from unittest.mock import patch

# Third-Party Imports
import pytest
import torch
import torch.nn as nn

# Internal Imports
from gliacnn.core import CheckpointCorruption
from gliacnn.trainer import CheckpointStore


@pytest.fixture
def store(tmp_path):
    return CheckpointStore(tmp_path / "ckpt")


def _model(fill: float) -> nn.Module:
    model = nn.Linear(3, 2)
    with torch.no_grad():
        for p in model.parameters():
            p.fill_(fill)
    return model


@pytest.mark.unit
def test_save_writes_checkpoint_and_digest(store):
    path = store.save("k", _model(1.0).state_dict(), metadata={"epoch": 3})

    assert path == store.root / "k.pt"
    assert (store.root / "k.pt.md5").exists()
    assert not (store.root / ".k.pt.tmp").exists()


@pytest.mark.unit
def test_roundtrip_restores_weights_and_metadata(store):
    source = _model(0.25)
    optimizer = torch.optim.SGD(source.parameters(), lr=0.1, momentum=0.9)
    store.save("k", source.state_dict(), optimizer.state_dict(), metadata={"val_loss": 0.5})

    target = _model(0.0)
    metadata = store.restore_model("k", target)

    assert metadata == {"val_loss": 0.5}
    for a, b in zip(source.parameters(), target.parameters()):
        assert torch.equal(a, b)


@pytest.mark.unit
def test_second_save_rotates_previous(store):
    store.save("k", _model(1.0).state_dict())
    store.save("k", _model(2.0).state_dict())

    assert (store.root / "k.prev.pt").exists()
    assert (store.root / "k.prev.pt.md5").exists()
    payload = store.load("k")
    assert torch.all(payload["model_state"]["weight"] == 2.0)


@pytest.mark.unit
def test_corrupt_current_falls_back_to_previous(store):
    store.save("k", _model(1.0).state_dict())
    store.save("k", _model(2.0).state_dict())

    current = store.root / "k.pt"
    current.write_bytes(current.read_bytes()[:20])

    payload = store.load("k")
    assert torch.all(payload["model_state"]["weight"] == 1.0)


@pytest.mark.unit
def test_corrupt_without_previous_raises(store):
    store.save("k", _model(1.0).state_dict())
    (store.root / "k.pt").write_bytes(b"garbage")

    with pytest.raises(CheckpointCorruption) as exc:
        store.load("k")
    assert exc.value.key == "k"


@pytest.mark.unit
def test_missing_key_raises(store):
    with pytest.raises(CheckpointCorruption):
        store.load("absent")


@pytest.mark.unit
def test_save_after_corruption_keeps_valid_previous(store):
    """A corrupt current file is never rotated over a valid previous one."""
    store.save("k", _model(1.0).state_dict())
    store.save("k", _model(2.0).state_dict())
    (store.root / "k.pt").write_bytes(b"garbage")

    store.save("k", _model(3.0).state_dict())
    (store.root / "k.pt").write_bytes(b"garbage again")

    payload = store.load("k")
    assert torch.all(payload["model_state"]["weight"] == 1.0)


@pytest.mark.unit
def test_discard_removes_every_file(store):
    store.save("k", _model(1.0).state_dict())
    store.save("k", _model(2.0).state_dict())

    store.discard("k")

    assert not store.exists("k")
    assert list(store.root.iterdir()) == []


# CRASH DURING ROTATION
class _Crash(Exception):
    pass


def _replace_failing_at(call: int):
    """os.replace that raises on its ``call``-th invocation."""
    real_replace = os.replace
    calls = {"n": 0}

    def _replace(src, dst):
        calls["n"] += 1
        if calls["n"] == call:
            raise _Crash(f"interrupted at os.replace #{call}")
        return real_replace(src, dst)

    return _replace, calls


@pytest.mark.unit
def test_rotation_commits_through_four_replaces(store):
    store.save("k", _model(1.0).state_dict())
    replace, calls = _replace_failing_at(call=0)

    with patch("os.replace", side_effect=replace):
        store.save("k", _model(2.0).state_dict())

    assert calls["n"] == 4


@pytest.mark.unit
@pytest.mark.parametrize("crash_at", [1, 2, 3, 4])
def test_interrupted_save_leaves_a_valid_checkpoint(store, crash_at):
    store.save("k", _model(1.0).state_dict())
    replace, _ = _replace_failing_at(crash_at)

    with patch("os.replace", side_effect=replace):
        with pytest.raises(_Crash):
            store.save("k", _model(2.0).state_dict())

    payload = store.load("k")
    assert torch.all(payload["model_state"]["weight"] == 1.0)

    store.save("k", _model(3.0).state_dict())
    payload = store.load("k")
    assert torch.all(payload["model_state"]["weight"] == 3.0)


@pytest.mark.unit
@pytest.mark.parametrize("crash_at", [1, 2, 3, 4])
def test_discard_after_interrupted_save_removes_leftovers(store, crash_at):
    store.save("k", _model(1.0).state_dict())
    replace, _ = _replace_failing_at(crash_at)

    with patch("os.replace", side_effect=replace):
        with pytest.raises(_Crash):
            store.save("k", _model(2.0).state_dict())

    store.discard("k")
    assert list(store.root.iterdir()) == []
