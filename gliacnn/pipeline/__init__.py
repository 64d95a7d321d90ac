"""
Pipeline Package.

Phase functions chained by the ``forge.py`` entry point.
"""

from .phases import (
    run_data_phase,
    run_evaluation_phase,
    run_final_training_phase,
    run_optimization_phase,
)

__all__ = [
    "run_data_phase",
    "run_optimization_phase",
    "run_final_training_phase",
    "run_evaluation_phase",
]
