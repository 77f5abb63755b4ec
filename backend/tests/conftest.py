import numpy as np
import pytest
from PIL import Image

from engine.pipeline import flush_timing


def random_grid(h=40, w=30, seed=42) -> np.ndarray:
    """Deterministic noisy uint8 grid."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, (h, w), dtype=np.uint8)


def brute_force_median(grid: np.ndarray, y: int, x: int) -> int:
    """Median of the 5x5 window centred on (y, x), computed the slow way."""
    window = sorted(int(v) for v in grid[y - 2 : y + 3, x - 2 : x + 3].ravel())
    return window[12]


@pytest.fixture(autouse=True)
def _reset_timing():
    """Isolate rolling timing stats between tests."""
    flush_timing()
    yield
    flush_timing()


@pytest.fixture
def noisy_grid():
    return random_grid()


@pytest.fixture
def flat_grid():
    return np.full((10, 10), 100, dtype=np.uint8)


@pytest.fixture
def rgb_png(tmp_path):
    """A 32x24 RGB PNG with a gradient and some salt-and-pepper noise."""
    rng = np.random.default_rng(7)
    h, w = 24, 32
    pixels = np.zeros((h, w, 3), dtype=np.uint8)
    pixels[:, :, 0] = np.linspace(0, 255, w, dtype=np.uint8)[np.newaxis, :]
    pixels[:, :, 1] = 128
    pixels[:, :, 2] = np.linspace(255, 0, h, dtype=np.uint8)[:, np.newaxis]
    noise = rng.random((h, w)) < 0.05
    pixels[noise] = 255
    path = tmp_path / "input.png"
    Image.fromarray(pixels).save(path)
    return path
