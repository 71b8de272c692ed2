#!/usr/bin/env python3
"""
Waiting Time Model Export Tool for TÄFFÄ.

Fits a one-input linear regression (visitors -> waiting minutes) on a CSV
of observations and writes it as a TensorFlow Lite flat buffer that the
app bundles as taffa/assets/model.tflite.

The CSV needs a header row and two columns: visitors, wait_minutes.

Usage:
    python scripts/export_model.py observations.csv
    python scripts/export_model.py observations.csv --output model.tflite

Requires the training extra: pip install -e ".[training]"
"""

import argparse
import sys
from pathlib import Path

import numpy as np
import tensorflow as tf

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from taffa.core.predictor import Predictor


def load_observations(csv_path: Path) -> tuple[np.ndarray, np.ndarray]:
    """Read (visitors, wait_minutes) pairs from a CSV file."""
    data = np.loadtxt(csv_path, delimiter=",", skiprows=1, dtype=np.float32, ndmin=2)
    if data.shape[1] != 2:
        raise ValueError(f"Expected 2 columns, got {data.shape[1]}")
    return data[:, 0], data[:, 1]


def fit_linear(visitors: np.ndarray, minutes: np.ndarray) -> tuple[float, float]:
    """Least-squares slope and intercept."""
    design = np.stack([visitors, np.ones_like(visitors)], axis=1)
    (slope, intercept), *_ = np.linalg.lstsq(design, minutes, rcond=None)
    return float(slope), float(intercept)


def build_model(slope: float, intercept: float) -> tf.keras.Model:
    """Single Dense unit carrying the fitted coefficients."""
    model = tf.keras.Sequential([
        tf.keras.Input(shape=(1,), batch_size=1, dtype=tf.float32),
        tf.keras.layers.Dense(1),
    ])
    model.layers[-1].set_weights([
        np.array([[slope]], dtype=np.float32),
        np.array([intercept], dtype=np.float32),
    ])
    return model


def main():
    parser = argparse.ArgumentParser(
        description="TÄFFÄ Waiting Time Model Export Tool",
    )
    parser.add_argument("csv", type=str, help="CSV with visitors,wait_minutes rows")
    parser.add_argument(
        "--output",
        type=str,
        default=str(Path(__file__).parent.parent / "src" / "taffa" / "assets" / "model.tflite"),
        help="Output .tflite path",
    )

    args = parser.parse_args()

    visitors, minutes = load_observations(Path(args.csv))
    if len(visitors) < 2:
        print("Error: Need at least two observations")
        sys.exit(1)

    slope, intercept = fit_linear(visitors, minutes)
    print(f"Fitted: minutes = {slope:.4f} * visitors + {intercept:.4f}")

    model = build_model(slope, intercept)
    converter = tf.lite.TFLiteConverter.from_keras_model(model)
    artifact = converter.convert()

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(artifact)
    print(f"Saved: {output} ({len(artifact)} bytes)")

    # Check the artifact loads the same way the app loads it
    predictor = Predictor.load(artifact)
    for count in (0, 50, 100, 200):
        print(f"  {count:>3} visitors -> {predictor.predict(float(count)):.1f} mins")


if __name__ == "__main__":
    main()
