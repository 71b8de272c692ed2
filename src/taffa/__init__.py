"""
TÄFFÄ - Visitor Count and Waiting Time Monitor

Polls a remote endpoint for the current number of visitors and shows the
waiting time predicted by an on-device TensorFlow Lite model.
"""

__version__ = "0.1.0"
__author__ = "TÄFFÄ Team"

from .core.poller import Poller
from .core.predictor import Predictor
from .core.result import Publication

__all__ = ["Poller", "Predictor", "Publication", "__version__"]
