"""
Test-Set Reports.

Persists the per-sample prediction table (CSV) and the final metrics
document (JSON: accuracy, AUC, F1, ROC points and run context).
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..core.io import save_json
from ..core.paths import LOGGER_NAME
from .evaluator import EvaluationResult

logger = logging.getLogger(LOGGER_NAME)


def save_predictions(result: EvaluationResult, out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    result.predictions.to_csv(out_path, index=False)
    logger.info(f"Test predictions saved → {out_path.name} ({len(result.predictions)} rows)")
    return out_path


def save_final_metrics(
    result: EvaluationResult,
    out_path: Path,
    context: Optional[Mapping[str, Any]] = None,
) -> Path:
    """
    Writes ``final_metrics.json``.

    Args:
        result: Evaluation outcome.
        out_path: Target file.
        context: Extra run information stored under ``"context"`` (best
            trial number, cross-validation objective, final epochs...).
    """
    payload: Dict[str, Any] = {
        "metrics": dict(result.metrics),
        "n_samples": len(result.predictions),
        "roc": result.roc_points,
    }
    if context:
        payload["context"] = dict(context)

    save_json(payload, out_path)
    logger.info(f"Final metrics saved → {out_path.name}")
    return out_path
