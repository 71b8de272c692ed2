"""
Unit tests for the TFLite predictor wrapper.
"""

import math

import numpy as np
import pytest

from taffa.core.errors import ModelLoadError, PredictionError
from taffa.core.predictor import Predictor, load_predictor, resolve_model_path


class TestPredictorLoad:
    """Tests for deserializing model artifacts."""

    def test_load_allocates_tensors(self, fake_interpreter):
        Predictor.load(b"model", interpreter_factory=lambda content: fake_interpreter)
        assert fake_interpreter.allocated

    def test_load_passes_bytes_to_factory(self, make_interpreter):
        seen = []

        def factory(content):
            seen.append(content)
            return make_interpreter(content)

        Predictor.load(bytearray(b"\x1c\x00\x00\x00TFL3"), interpreter_factory=factory)
        assert seen == [b"\x1c\x00\x00\x00TFL3"]

    def test_empty_artifact(self, make_interpreter):
        with pytest.raises(ModelLoadError, match="empty"):
            Predictor.load(b"", interpreter_factory=make_interpreter)

    def test_malformed_artifact(self):
        def factory(content):
            raise ValueError("Model provided has model identifier 'garb'")

        with pytest.raises(ModelLoadError, match="Invalid model artifact"):
            Predictor.load(b"garbage", interpreter_factory=factory)

    def test_allocation_failure(self, make_interpreter):
        interpreter = make_interpreter()

        def fail():
            raise RuntimeError("truncated")

        interpreter.allocate_tensors = fail
        with pytest.raises(ModelLoadError):
            Predictor.load(b"model", interpreter_factory=lambda content: interpreter)

    def test_rejects_multiple_inputs(self, make_interpreter):
        interpreter = make_interpreter(n_inputs=2)
        with pytest.raises(ModelLoadError, match="1 input"):
            Predictor.load(b"model", interpreter_factory=lambda content: interpreter)

    def test_rejects_non_scalar_input(self, make_interpreter):
        interpreter = make_interpreter(input_shape=(1, 3))
        with pytest.raises(ModelLoadError, match="scalar input"):
            Predictor.load(b"model", interpreter_factory=lambda content: interpreter)

    def test_rejects_non_scalar_output(self, make_interpreter):
        interpreter = make_interpreter(output_shape=(1, 2))
        with pytest.raises(ModelLoadError, match="scalar output"):
            Predictor.load(b"model", interpreter_factory=lambda content: interpreter)

    def test_rejects_quantized_input(self, make_interpreter):
        interpreter = make_interpreter(input_dtype=np.int8)
        with pytest.raises(ModelLoadError, match="float32"):
            Predictor.load(b"model", interpreter_factory=lambda content: interpreter)

    def test_real_runtime_rejects_garbage(self):
        pytest.importorskip("ai_edge_litert")
        with pytest.raises(ModelLoadError):
            Predictor.load(b"this is not a flatbuffer")


class TestPredictorPredict:
    """Tests for running inference."""

    def test_predict_linear(self, predictor):
        assert predictor.predict(37.0) == pytest.approx(4.3, abs=1e-5)

    def test_predict_feeds_input(self, predictor, fake_interpreter):
        predictor.predict(12.0)
        assert fake_interpreter.inputs_seen == [12.0]

    def test_predict_is_stateless(self, predictor):
        first = predictor.predict(20.0)
        predictor.predict(150.0)
        assert predictor.predict(20.0) == first

    def test_predict_scalar_shape(self, make_interpreter):
        interpreter = make_interpreter(input_shape=(1,), output_shape=(1,))
        predictor = Predictor.load(b"model", interpreter_factory=lambda content: interpreter)
        assert predictor.predict(0.0) == pytest.approx(0.6, abs=1e-6)

    @pytest.mark.parametrize("count", [0, 1, 37, 200, 10_000])
    def test_finite_for_non_negative_counts(self, predictor, count):
        assert math.isfinite(predictor.predict(float(count)))

    def test_nan_output_raises(self, make_interpreter):
        interpreter = make_interpreter(slope=float("nan"))
        predictor = Predictor.load(b"model", interpreter_factory=lambda content: interpreter)
        with pytest.raises(PredictionError):
            predictor.predict(5.0)

    def test_infinite_output_raises(self, make_interpreter):
        interpreter = make_interpreter(intercept=float("inf"))
        predictor = Predictor.load(b"model", interpreter_factory=lambda content: interpreter)
        with pytest.raises(PredictionError):
            predictor.predict(5.0)

    def test_interpreter_failure_raises_prediction_error(self, make_interpreter):
        interpreter = make_interpreter()
        predictor = Predictor.load(b"model", interpreter_factory=lambda content: interpreter)

        def fail():
            raise RuntimeError("Fatal error in invoke")

        interpreter.invoke = fail
        with pytest.raises(PredictionError, match="Inference failed"):
            predictor.predict(5.0)

    def test_returns_python_float(self, predictor):
        assert type(predictor.predict(3.0)) is float


class TestLoadPredictor:
    """Tests for loading the bundled artifact with degraded-mode fallback."""

    def test_missing_file_returns_none(self, tmp_path, make_interpreter):
        assert load_predictor(tmp_path / "missing.tflite", make_interpreter) is None

    def test_malformed_file_returns_none(self, tmp_path):
        path = tmp_path / "model.tflite"
        path.write_bytes(b"garbage")

        def factory(content):
            raise ValueError("bad flatbuffer")

        assert load_predictor(path, factory) is None

    def test_empty_file_returns_none(self, tmp_path, make_interpreter):
        path = tmp_path / "model.tflite"
        path.write_bytes(b"")
        assert load_predictor(path, make_interpreter) is None

    def test_valid_file(self, tmp_path, make_interpreter):
        path = tmp_path / "model.tflite"
        path.write_bytes(b"model")
        predictor = load_predictor(path, make_interpreter)
        assert predictor is not None
        assert predictor.predict(10.0) == pytest.approx(1.6, abs=1e-6)

    def test_relative_path_is_package_relative(self):
        resolved = resolve_model_path("assets/model.tflite")
        assert resolved.is_absolute()
        assert resolved.parts[-3:] == ("taffa", "assets", "model.tflite")
