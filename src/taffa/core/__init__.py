"""Core components for TÄFFÄ."""

from .config import Config
from .errors import ModelLoadError, PredictionError, TaffaError
from .poller import POLL_INTERVAL_S, Poller
from .predictor import Predictor, load_predictor
from .result import FetchResult, PollerState, Publication
from .state import PublishedState

__all__ = [
    "Config",
    "TaffaError",
    "ModelLoadError",
    "PredictionError",
    "POLL_INTERVAL_S",
    "Poller",
    "Predictor",
    "load_predictor",
    "FetchResult",
    "PollerState",
    "Publication",
    "PublishedState",
]
