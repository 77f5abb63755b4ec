"""5x5 median filter kernel over a rectangular region of a grid view.

Pixels closer than RADIUS to any edge of the region are not filtered and
stay 0. This applies to every region edge, including internal band seams
when the coordinator splits an image into row bands.
"""

import numpy as np
from scipy.ndimage import median_filter

from engine.grid import GridView, make_grid

RADIUS = 2
WINDOW_SIZE = 2 * RADIUS + 1
WINDOW_AREA = WINDOW_SIZE * WINDOW_SIZE
MEDIAN_INDEX = WINDOW_AREA // 2  # 13th smallest of 25


def filter_region(
    start_y: int, end_y: int, start_x: int, end_x: int, source: GridView
) -> np.ndarray:
    """Median-filter rows [start_y, end_y) x cols [start_x, end_x) of source.

    Returns a (end_y - start_y, end_x - start_x) uint8 grid whose row 0 is
    global row start_y. The RADIUS-wide frame of the result is left at 0.
    """
    height = end_y - start_y
    width = end_x - start_x
    region = source.region(start_y, end_y, start_x, end_x)
    filtered = make_grid(height, width)
    if height <= 2 * RADIUS or width <= 2 * RADIUS:
        return filtered

    # Every window centred in the interior lies inside the region, so the
    # boundary mode never reaches the kept cells.
    ranked = median_filter(region.astype(np.int16), size=WINDOW_SIZE, mode="nearest")
    filtered[RADIUS:-RADIUS, RADIUS:-RADIUS] = ranked[
        RADIUS:-RADIUS, RADIUS:-RADIUS
    ].astype(np.uint8)
    return filtered

