"""Model definitions and factory."""

from .factory import get_model
from .glia_cnn import NUM_CLASSES, GliaCNN

__all__ = ["get_model", "GliaCNN", "NUM_CLASSES"]
