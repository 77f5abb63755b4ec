"""Pixel grids and the read-only view shared by every filter invocation."""

import numpy as np


class BoundsViolation(IndexError):
    """A coordinate or region fell outside the backing grid (programming error)."""


def make_grid(height: int, width: int) -> np.ndarray:
    """Allocate a zero-filled (height, width) uint8 grid."""
    return np.zeros((height, width), dtype=np.uint8)


class GridView:
    """Read-only, zero-copy access to a 2-D uint8 grid.

    The view keeps a non-writeable alias of the backing array, so any number
    of worker threads can read it at once. It is valid only while the
    backing grid is alive and unmodified.
    """

    def __init__(self, grid: np.ndarray):
        if not isinstance(grid, np.ndarray) or grid.ndim != 2:
            raise ValueError("GridView requires a 2-D numpy array")
        if grid.dtype != np.uint8:
            raise ValueError(f"GridView requires uint8 samples, got {grid.dtype}")
        self._data = grid.view()
        self._data.flags.writeable = False

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self._data.shape

    def get(self, y: int, x: int) -> int:
        """Return the sample at row y, column x."""
        # numpy would silently wrap negative indices
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise BoundsViolation(
                f"({y}, {x}) outside grid of shape {self.height}x{self.width}"
            )
        return int(self._data[y, x])

    def region(self, start_y: int, end_y: int, start_x: int, end_x: int) -> np.ndarray:
        """Return a read-only view of rows [start_y, end_y) x cols [start_x, end_x)."""
        if not (0 <= start_y <= end_y <= self.height) or not (
            0 <= start_x <= end_x <= self.width
        ):
            raise BoundsViolation(
                f"region [{start_y}:{end_y}, {start_x}:{end_x}] outside grid "
                f"of shape {self.height}x{self.width}"
            )
        return self._data[start_y:end_y, start_x:end_x]
