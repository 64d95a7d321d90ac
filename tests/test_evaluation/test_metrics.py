"""
Test Suite for classification metrics.
"""

# Standard Imports
import math

# Third-Party Imports
import numpy as np
import pytest

# Internal Imports
from gliacnn.evaluation import binary_auc, compute_classification_metrics, is_single_class


@pytest.mark.unit
def test_perfect_separation():
    labels = np.array([0, 0, 1, 1])
    probs = np.array([0.1, 0.2, 0.8, 0.9])

    metrics = compute_classification_metrics(labels, (probs > 0.5).astype(int), probs)

    assert metrics == {"accuracy": 1.0, "auc": 1.0, "f1": 1.0}


@pytest.mark.unit
def test_auc_ignores_threshold():
    labels = np.array([0, 0, 1, 1])
    probs = np.array([0.40, 0.45, 0.46, 0.49])
    preds = np.zeros(4, dtype=int)

    metrics = compute_classification_metrics(labels, preds, probs)

    assert metrics["auc"] == pytest.approx(1.0)
    assert metrics["accuracy"] == pytest.approx(0.5)
    assert metrics["f1"] == 0.0


@pytest.mark.unit
def test_single_class_auc_fallbacks():
    labels = np.zeros(5, dtype=int)
    probs = np.linspace(0.1, 0.9, 5)

    assert is_single_class(labels)
    assert binary_auc(labels, probs) == 0.0
    assert math.isnan(binary_auc(labels, probs, fallback=float("nan")))
    assert math.isnan(compute_classification_metrics(labels, labels, probs)["auc"])


@pytest.mark.unit
def test_non_finite_probabilities_use_fallback():
    labels = np.array([0, 1, 0, 1])
    probs = np.array([0.1, np.nan, 0.2, 0.9])
    assert binary_auc(labels, probs, fallback=0.0) == 0.0
