"""
Crash-Safe Checkpoint Store.

One checkpoint per key (``trial_0003_fold_1``, ``final``), overwritten on
every improvement. Each write goes through a temp file that is fsynced
before it is renamed into place, and every checkpoint carries an MD5
sidecar. Before a new checkpoint replaces it, the current one is copied
to ``<key>.prev.pt`` with its own digest, so at any instant at least one
of the two files is complete and verifiable.

Layout::

    root/
    ├── <key>.pt
    ├── <key>.pt.md5
    ├── <key>.prev.pt
    └── <key>.prev.pt.md5
"""

# =========================================================================== #
#                                Standard Imports                             #
# =========================================================================== #
import logging
import os
import pickle
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

# =========================================================================== #
#                                Third-Party Imports                          #
# =========================================================================== #
import torch
import torch.nn as nn

# =========================================================================== #
#                                Internal Imports                             #
# =========================================================================== #
from ..core.exceptions import CheckpointCorruption
from ..core.io import fsync_file, md5_checksum, write_text_atomic
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class CheckpointStore:
    """
    Keyed model/optimizer snapshots with integrity checks.

    Example:
        >>> store = CheckpointStore(paths.checkpoints)
        >>> store.save("trial_0000_fold_0", model.state_dict(), optimizer.state_dict())
        >>> store.restore_model("trial_0000_fold_0", model)
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    # ---------------------------------------------------------------- paths
    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.pt"

    def _prev_path(self, key: str) -> Path:
        return self.root / f"{key}.prev.pt"

    @staticmethod
    def _digest_path(path: Path) -> Path:
        return path.with_name(path.name + ".md5")

    # ----------------------------------------------------------------- write
    def save(
        self,
        key: str,
        model_state: Dict[str, torch.Tensor],
        optimizer_state: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Path:
        """
        Atomically replaces the checkpoint for ``key``.

        Returns:
            Path of the committed checkpoint.
        """
        path = self.path_for(key)
        tmp = self.root / f".{key}.pt.tmp"
        payload = {
            "model_state": {k: v.detach().cpu() for k, v in model_state.items()},
            "optimizer_state": optimizer_state,
            "metadata": metadata or {},
        }

        torch.save(payload, tmp)
        fsync_file(tmp)
        digest = md5_checksum(tmp)

        # The current file stays in place while it is copied to prev, and prev
        # is complete before the current file is replaced
        if self._is_valid(path):
            self._copy_to_prev(key, path)

        os.replace(tmp, path)
        write_text_atomic(self._digest_path(path), digest)
        return path

    def _copy_to_prev(self, key: str, path: Path) -> None:
        prev = self._prev_path(key)
        prev_tmp = self.root / f".{key}.prev.pt.tmp"
        shutil.copyfile(path, prev_tmp)
        fsync_file(prev_tmp)
        os.replace(prev_tmp, prev)
        digest = self._digest_path(path).read_text(encoding="utf-8").strip()
        write_text_atomic(self._digest_path(prev), digest)

    # ------------------------------------------------------------------ read
    def _is_valid(self, path: Path) -> bool:
        digest_path = self._digest_path(path)
        if not path.exists() or not digest_path.exists():
            return False
        expected = digest_path.read_text(encoding="utf-8").strip()
        return expected == md5_checksum(path)

    def _read(self, path: Path) -> Optional[Dict[str, Any]]:
        if not self._is_valid(path):
            return None
        try:
            payload = torch.load(path, map_location="cpu", weights_only=True)
        except (RuntimeError, EOFError, OSError, pickle.UnpicklingError) as e:
            logger.warning(f"{LogStyle.WARNING} Failed to deserialize {path.name}: {e}")
            return None
        if not isinstance(payload, dict) or "model_state" not in payload:
            return None
        return payload

    def load(self, key: str) -> Dict[str, Any]:
        """
        Returns the newest verifiable payload for ``key``.

        Falls back to ``<key>.prev.pt`` with a warning when the current file
        fails its integrity check.

        Raises:
            CheckpointCorruption: If neither file is valid.
        """
        payload = self._read(self.path_for(key))
        if payload is not None:
            return payload

        payload = self._read(self._prev_path(key))
        if payload is not None:
            logger.warning(
                f"{LogStyle.WARNING} Checkpoint '{key}' failed verification, "
                f"restored previous checkpoint"
            )
            return payload

        raise CheckpointCorruption(key, "No valid current or previous checkpoint.")

    def restore_model(
        self, key: str, model: nn.Module, optimizer: Optional[torch.optim.Optimizer] = None
    ) -> Dict[str, Any]:
        """
        Loads weights (and optionally optimizer state) for ``key`` in place.

        Returns:
            The checkpoint metadata.
        """
        payload = self.load(key)
        model.load_state_dict(payload["model_state"])
        if optimizer is not None and payload.get("optimizer_state") is not None:
            optimizer.load_state_dict(payload["optimizer_state"])
        return payload.get("metadata", {})

    # ------------------------------------------------------------- lifecycle
    def exists(self, key: str) -> bool:
        return self.path_for(key).exists() or self._prev_path(key).exists()

    def discard(self, key: str) -> None:
        """Deletes every file belonging to ``key``."""
        for path in (self.path_for(key), self._prev_path(key)):
            digest = self._digest_path(path)
            for leftover in (
                path,
                digest,
                digest.with_name(digest.name + ".tmp"),
                self.root / f".{path.name}.tmp",
            ):
                leftover.unlink(missing_ok=True)
