from __future__ import annotations

import sys
from pathlib import Path

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

# Ensure imports like `import main` and `from utilities import mnist_utils` work when
# running pytest from the repo root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


class RecordingDisplay:
    def __init__(self):
        self.frames = []
        self.duration_hints = []
        self.closed = False

    def on_frame_update(self, image, duration_hint_millis):
        self.frames.append(np.array(image, copy=True))
        self.duration_hints.append(duration_hint_millis)

    def close(self):
        self.closed = True


def _write_pixel_csv(path: Path, n_rows: int, n_columns: int = 784, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    data = rng.random((n_rows, n_columns))
    data[data < 0.8] = 0.0
    np.savetxt(path, data, delimiter=",", fmt="%.4g")
    return np.loadtxt(path, delimiter=",", ndmin=2)


@pytest.fixture
def recording_display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def make_pixel_csv(tmp_path: Path):
    """Write a headerless CSV of sparse pixel rows in [0, 1]; returns (path, data)."""

    def _make(n_rows: int, n_columns: int = 784, name: str = "pixels.csv", seed: int = 0):
        path = tmp_path / name
        data = _write_pixel_csv(path, n_rows, n_columns, seed)
        return path, data

    return _make
