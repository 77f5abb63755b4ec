"""Grayscale PNG encoding via Pillow."""

import numpy as np
from PIL import Image


def save_grayscale(grid: np.ndarray, path: str):
    """Write a 2-D uint8 grid as an 8-bit grayscale PNG.

    The file is always PNG, whatever the extension of path.
    """
    if not isinstance(grid, np.ndarray) or grid.ndim != 2:
        raise ValueError("Grayscale output must be a 2-D numpy array")
    if grid.dtype != np.uint8:
        raise ValueError(f"Grayscale output must be uint8, got {grid.dtype}")
    img = Image.fromarray(np.ascontiguousarray(grid))
    img.save(path, format="PNG")
