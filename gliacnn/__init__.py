"""
Glia CNN: nested-search training core for multi-channel IHC classifiers.

Packages:
    - core: configuration, logging, I/O, environment and run orchestration
    - data_handler: sample datasets, normalization and DataLoader construction
    - models: fixed convolutional architecture and factory
    - trainer: epoch engines, early stopping, checkpointing, final retraining
    - optimization: k-fold objective and Optuna search orchestration
    - evaluation: held-out scoring, ROC analysis and reporting
    - pipeline: end-to-end phase functions used by forge.py
"""

__version__ = "0.1.0"
