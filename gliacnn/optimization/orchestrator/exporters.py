"""
Study Result Export Functions.

Serializes the search ledger into run artifacts:
    - Winning hyperparameters (YAML)
    - Complete study metadata with per-fold AUCs (JSON)
    - Top K trials comparison (Excel)

Studies with no completed trial still get a summary; the best-trial
and top-trials exports are skipped with a warning.
"""

# Standard Imports
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

# Third-Party Imports
import optuna
import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils.dataframe import dataframe_to_rows

# Internal Imports
from ...core.config import TrialHyperparameters
from ...core.io import save_config_as_yaml, save_json
from ...core.paths import LOGGER_NAME, RunPaths
from .ledger import TrialLedger, TrialRecord

logger = logging.getLogger(LOGGER_NAME)


def export_best_hyperparameters(best_trial: optuna.trial.FrozenTrial, paths: RunPaths) -> Path:
    """
    Writes the winning trial's hyperparameters to ``reports/best_hyperparameters.yaml``.

    The record is rebuilt through ``TrialHyperparameters`` so the file is
    validated and nested (per-layer tuples) rather than Optuna's flat keys.
    """
    hparams = TrialHyperparameters.from_flat_dict(best_trial.params)
    payload = {
        "trial_number": best_trial.number,
        "objective": best_trial.value,
        "hyperparameters": hparams.model_dump(mode="json"),
    }
    output_path = paths.get_report_path("best_hyperparameters.yaml")
    save_config_as_yaml(payload, output_path)
    logger.info(f"Saved best hyperparameters to {output_path}")
    return output_path


def export_study_summary(
    study: optuna.Study,
    paths: RunPaths,
    search_space: Optional[Dict[str, Any]] = None,
) -> Path:
    """
    Export complete study metadata to JSON.

    Output Structure:
        {
            "study_name": str,
            "direction": str,
            "n_trials": int,
            "counts": {"COMPLETE": int, "PRUNED": int, "FAIL": int},
            "search_space": {...} or null,
            "best_trial": {...} or null,
            "trials": [...]
        }

    Non-finite objectives (failed trials) are stored as null.
    """
    ledger = TrialLedger(study)
    records = {r.number: r for r in ledger.records()}

    summary = {
        "study_name": study.study_name,
        "direction": study.direction.name,
        "n_trials": len(study.trials),
        "counts": ledger.counts(),
        "search_space": search_space,
        "best_trial": build_best_trial_data(study),
        "trials": [build_trial_data(t, records[t.number]) for t in study.trials],
    }

    output_path = paths.get_report_path("study_summary.json")
    save_json(summary, output_path)
    logger.info(f"Saved study summary to {output_path}")
    return output_path


def export_top_trials(study: optuna.Study, paths: RunPaths, top_k: int = 10) -> Optional[Path]:
    """
    Export the top K completed trials to an Excel sheet.

    DataFrame Columns:
        - Rank: 1-based ranking
        - Trial: Trial number
        - Mean AUC: Objective value
        - Fold AUCs: Per-fold scores
        - {param_name}: Each hyperparameter
        - Duration (s): Trial duration if available
    """
    completed = TrialLedger(study).completed_trials()
    if not completed:
        logger.warning("No completed trials. Cannot export top trials.")
        return None

    sorted_trials = sorted(completed, key=lambda t: t.value, reverse=True)[:top_k]
    df = build_top_trials_dataframe(sorted_trials)

    output_path = paths.get_report_path("top_trials.xlsx")

    wb = Workbook()
    ws = wb.active
    ws.title = "Top Trials"

    header_fill = PatternFill(start_color="D7E4BC", end_color="D7E4BC", fill_type="solid")
    header_font = Font(bold=True)
    border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )
    alignment_left = Alignment(horizontal="left", vertical="center", wrap_text=True)
    alignment_center = Alignment(horizontal="center", vertical="center")

    for r_idx, row in enumerate(dataframe_to_rows(df, index=False, header=True), 1):
        for c_idx, value in enumerate(row, 1):
            cell = ws.cell(row=r_idx, column=c_idx, value=value)
            cell.border = border

            if r_idx == 1:
                cell.fill = header_fill
                cell.font = header_font
                cell.alignment = alignment_center
            else:
                cell.alignment = alignment_left
                if isinstance(value, float):
                    cell.number_format = "0.0000"
                elif isinstance(value, int) and not isinstance(value, bool):
                    cell.number_format = "0"

    for column in ws.columns:
        max_length = 0
        column_letter = column[0].column_letter
        for cell in column:
            if cell.value:
                max_length = max(max_length, len(str(cell.value)))
        ws.column_dimensions[column_letter].width = min(max(max_length + 2, 12), 50)

    wb.save(output_path)
    logger.info(f"Saved top {len(sorted_trials)} trials to {output_path}")
    return output_path


# ==================== HELPER FUNCTIONS ====================


def build_best_trial_data(study: optuna.Study) -> Optional[Dict[str, Any]]:
    completed = TrialLedger(study).completed_trials()
    if not completed:
        return None

    best = max(completed, key=lambda t: (t.value, -t.number))
    return {
        "number": best.number,
        "value": best.value,
        "params": best.params,
        "fold_scores": best.user_attrs.get("fold_scores", []),
        "datetime_start": best.datetime_start.isoformat() if best.datetime_start else None,
        "datetime_complete": (
            best.datetime_complete.isoformat() if best.datetime_complete else None
        ),
    }


def build_trial_data(trial: optuna.trial.FrozenTrial, record: TrialRecord) -> Dict[str, Any]:
    """
    Build trial metadata dictionary.

    Handles missing timestamps and computes the duration when both
    start and complete times are available.
    """
    duration = None
    if trial.datetime_complete and trial.datetime_start:
        duration = (trial.datetime_complete - trial.datetime_start).total_seconds()

    return {
        "number": trial.number,
        "state": record.state,
        "objective": record.objective,
        "params": record.params,
        "fold_scores": record.fold_scores,
        "epochs_per_fold": trial.user_attrs.get("epochs_per_fold", []),
        "error": record.error,
        "datetime_start": trial.datetime_start.isoformat() if trial.datetime_start else None,
        "datetime_complete": (
            trial.datetime_complete.isoformat() if trial.datetime_complete else None
        ),
        "duration_seconds": duration,
    }


def build_top_trials_dataframe(sorted_trials: List[optuna.trial.FrozenTrial]) -> pd.DataFrame:
    rows = []
    for rank, trial in enumerate(sorted_trials, 1):
        fold_scores = trial.user_attrs.get("fold_scores", [])
        row = {
            "Rank": rank,
            "Trial": trial.number,
            "Mean AUC": trial.value,
            "Fold AUCs": ", ".join(f"{s:.4f}" for s in fold_scores),
        }
        row.update(trial.params)

        if trial.datetime_complete and trial.datetime_start:
            duration = (trial.datetime_complete - trial.datetime_start).total_seconds()
            row["Duration (s)"] = int(duration)

        rows.append(row)

    return pd.DataFrame(rows)
