"""
Exception types for TÄFFÄ.
"""


class TaffaError(Exception):
    """Base class for TÄFFÄ errors."""


class ModelLoadError(TaffaError):
    """The model artifact could not be read or interpreted."""


class PredictionError(TaffaError):
    """The model produced an unusable value (NaN or infinity)."""
