"""
Waiting time predictor backed by a TensorFlow Lite regression model.

The model is a flat buffer with exactly one float32 input tensor and one
output tensor, each holding a single scalar: visitors in, minutes out.
"""

import logging
import math
from pathlib import Path
from typing import Any, Callable

import numpy as np

from .errors import ModelLoadError, PredictionError

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent.parent

InterpreterFactory = Callable[[bytes], Any]


def _litert_interpreter(model_content: bytes) -> Any:
    """Create a LiteRT interpreter from an in-memory flat buffer."""
    try:
        from ai_edge_litert.interpreter import Interpreter
    except ImportError as e:
        raise ModelLoadError(
            "ai-edge-litert package not installed. Run: pip install ai-edge-litert"
        ) from e
    return Interpreter(model_content=model_content)


class Predictor:
    """
    Single-scalar regression model.

    Usage:
        predictor = Predictor.load(artifact_bytes)
        minutes = predictor.predict(37.0)
    """

    def __init__(self, interpreter: Any):
        """
        Wrap an interpreter whose tensors are already allocated.

        Use Predictor.load() instead of calling this directly.
        """
        self._interpreter = interpreter

        input_details = interpreter.get_input_details()
        output_details = interpreter.get_output_details()
        if len(input_details) != 1 or len(output_details) != 1:
            raise ModelLoadError(
                f"Expected 1 input and 1 output tensor, got "
                f"{len(input_details)} and {len(output_details)}"
            )

        self._input = input_details[0]
        self._output = output_details[0]

        for name, detail in (("input", self._input), ("output", self._output)):
            size = int(np.prod(detail["shape"]))
            if size != 1:
                raise ModelLoadError(
                    f"Expected scalar {name} tensor, got shape {list(detail['shape'])}"
                )

        if np.dtype(self._input["dtype"]) != np.float32:
            raise ModelLoadError(
                f"Expected float32 input tensor, got {np.dtype(self._input['dtype'])}"
            )

    @classmethod
    def load(
        cls,
        model_artifact: bytes,
        interpreter_factory: InterpreterFactory | None = None,
    ) -> "Predictor":
        """
        Deserialize a model from a byte buffer.

        Args:
            model_artifact: Contents of the .tflite file.
            interpreter_factory: Builds an interpreter from the bytes.
                Defaults to the LiteRT interpreter.

        Returns:
            Ready-to-use Predictor.

        Raises:
            ModelLoadError: If the buffer is empty, truncated, malformed, or
                the model does not map one scalar to one scalar.
        """
        if not model_artifact:
            raise ModelLoadError("Model artifact is empty")

        factory = interpreter_factory or _litert_interpreter
        try:
            interpreter = factory(bytes(model_artifact))
            interpreter.allocate_tensors()
        except ModelLoadError:
            raise
        except (ValueError, RuntimeError) as e:
            raise ModelLoadError(f"Invalid model artifact: {e}") from e

        return cls(interpreter)

    def predict(self, value: float) -> float:
        """
        Run one forward pass.

        Args:
            value: Model input, the visitor count as a float.

        Returns:
            Predicted waiting time in minutes.

        Raises:
            PredictionError: If inference fails or the output is NaN or infinite.
        """
        input_data = np.full(self._input["shape"], value, dtype=np.float32)
        try:
            self._interpreter.set_tensor(self._input["index"], input_data)
            self._interpreter.invoke()
            output = self._interpreter.get_tensor(self._output["index"])
        except (ValueError, RuntimeError) as e:
            raise PredictionError(f"Inference failed for input {value}: {e}") from e

        logger.debug(f"Output: {np.ravel(output).tolist()}")

        minutes = float(np.ravel(output)[0])
        if not math.isfinite(minutes):
            raise PredictionError(f"Model returned {minutes} for input {value}")
        return minutes


def resolve_model_path(path: str | Path) -> Path:
    """Resolve a configured model path; relative paths are package-relative."""
    path = Path(path)
    if not path.is_absolute():
        path = PACKAGE_DIR / path
    return path


def load_predictor(
    path: str | Path,
    interpreter_factory: InterpreterFactory | None = None,
) -> Predictor | None:
    """
    Load the bundled model, tolerating failure.

    Args:
        path: Location of the .tflite file (package-relative if not absolute).
        interpreter_factory: Passed through to Predictor.load().

    Returns:
        Predictor, or None if the model could not be loaded. Callers then
        run in degraded mode and show only the visitor count.
    """
    model_path = resolve_model_path(path)
    try:
        artifact = model_path.read_bytes()
        logger.debug(f"Model file opened successfully: {len(artifact)} bytes")
        predictor = Predictor.load(artifact, interpreter_factory)
    except (OSError, ModelLoadError) as e:
        logger.error(f"TensorFlow Lite model failed to load: {e}")
        return None

    logger.info(f"TensorFlow Lite model loaded successfully from {model_path}")
    return predictor
