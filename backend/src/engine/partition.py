"""Row-band partitioning of an image for concurrent filtering."""

from dataclasses import dataclass
from enum import Enum

from engine.median import RADIUS


class ConfigurationError(ValueError):
    """Thread count cannot produce a valid partition of the image."""


class SeamPolicy(Enum):
    # Each band reads only its own rows; seam rows come out black.
    LEGACY = "legacy"
    # Each band reads RADIUS rows into its neighbours but writes only its own.
    OVERLAP = "overlap"


@dataclass(frozen=True)
class RowBand:
    """Output rows [start_y, end_y) plus the rows the kernel reads to make them."""

    start_y: int
    end_y: int
    start_x: int
    end_x: int
    read_start_y: int
    read_end_y: int

    @property
    def height(self) -> int:
        return self.end_y - self.start_y

    @property
    def offset(self) -> int:
        """Row of the kernel result that maps to global row start_y."""
        return self.start_y - self.read_start_y


def compute_bands(
    height: int,
    width: int,
    thread_count: int,
    seam: SeamPolicy = SeamPolicy.LEGACY,
) -> list[RowBand]:
    """Split [0, height) into thread_count contiguous bands.

    The last band absorbs the remainder of the integer division.

    Raises:
        ConfigurationError: thread_count is not positive, or exceeds height.
    """
    if thread_count <= 0:
        raise ConfigurationError(f"thread count must be positive, got {thread_count}")

    band_height = height // thread_count
    if band_height == 0:
        raise ConfigurationError(
            f"thread count {thread_count} exceeds image height {height}"
        )

    bands = []
    for t in range(thread_count):
        start_y = t * band_height
        end_y = height if t == thread_count - 1 else (t + 1) * band_height
        if seam is SeamPolicy.OVERLAP:
            read_start_y = max(0, start_y - RADIUS)
            read_end_y = min(height, end_y + RADIUS)
        else:
            read_start_y, read_end_y = start_y, end_y
        bands.append(RowBand(start_y, end_y, 0, width, read_start_y, read_end_y))
    return bands
