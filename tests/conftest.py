"""
Pytest fixtures for TÄFFÄ tests.

Provides common test fixtures including:
- A fake TFLite interpreter computing a linear function
- Fake HTTP sessions/responses
- A temporary configuration directory
"""

import os

import numpy as np
import pytest

from taffa.core.predictor import Predictor

SLOPE = 0.1
INTERCEPT = 0.6


class FakeInterpreter:
    """
    Stand-in for the LiteRT interpreter.

    Computes output = slope * input + intercept over a [1, 1] float32 tensor.
    """

    def __init__(
        self,
        model_content: bytes = b"",
        slope: float = SLOPE,
        intercept: float = INTERCEPT,
        input_shape: tuple = (1, 1),
        output_shape: tuple = (1, 1),
        input_dtype=np.float32,
        n_inputs: int = 1,
    ):
        self.model_content = model_content
        self.slope = slope
        self.intercept = intercept
        self.input_shape = np.array(input_shape, dtype=np.int32)
        self.output_shape = np.array(output_shape, dtype=np.int32)
        self.input_dtype = input_dtype
        self.n_inputs = n_inputs
        self.allocated = False
        self.inputs_seen: list[float] = []
        self._tensors: dict[int, np.ndarray] = {}

    def allocate_tensors(self):
        self.allocated = True

    def get_input_details(self):
        return [
            {"index": i, "shape": self.input_shape, "dtype": self.input_dtype}
            for i in range(self.n_inputs)
        ]

    def get_output_details(self):
        return [{"index": 10, "shape": self.output_shape, "dtype": np.float32}]

    def set_tensor(self, index, value):
        assert value.dtype == np.float32
        assert tuple(value.shape) == tuple(self.input_shape)
        self._tensors[index] = value

    def invoke(self):
        x = float(np.ravel(self._tensors[0])[0])
        self.inputs_seen.append(x)
        y = np.float32(self.slope) * np.float32(x) + np.float32(self.intercept)
        self._tensors[10] = np.full(self.output_shape, y, dtype=np.float32)

    def get_tensor(self, index):
        return self._tensors[index]


class FakeResponse:
    """Minimal requests.Response replacement."""

    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class FakeSession:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[str, float | None]] = []
        self.closed = False

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


@pytest.fixture
def fake_interpreter():
    """A fresh linear fake interpreter."""
    return FakeInterpreter()


@pytest.fixture
def predictor(fake_interpreter):
    """Predictor wrapping the linear fake interpreter."""
    return Predictor.load(b"model", interpreter_factory=lambda content: fake_interpreter)


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Temporary config directory with a default.yaml and a clean TAFFA_* environment."""
    for key in list(os.environ):
        if key.startswith("TAFFA_"):
            monkeypatch.delenv(key)

    (tmp_path / "default.yaml").write_text(
        """
app:
  version: "0.1.0"
server:
  url: "http://example.invalid/visitors"
  timeout: null
model:
  path: "assets/model.tflite"
display:
  title: "TÄFFÄ"
  capacity: 200
logging:
  level: "INFO"
""",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def make_interpreter():
    """Factory for fake interpreters with custom layout or coefficients."""
    return FakeInterpreter


@pytest.fixture
def make_response():
    """Factory for fake HTTP responses."""
    return FakeResponse


@pytest.fixture
def make_session():
    """Factory for fake HTTP sessions."""
    return FakeSession
