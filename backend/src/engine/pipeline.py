"""Filter pipeline — fans row bands out to worker threads and merges the results.

Each run spawns a fresh thread pool, one worker per band. All workers read
the same GridView; the coordinator waits for every band before it writes
anything to the output grid.

Includes rolling timing stats per thread count and a slow-run warning.
"""

import logging
import time
from collections import defaultdict, deque
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import sentry_sdk

from engine.grid import BoundsViolation, GridView, make_grid
from engine.median import filter_region
from engine.partition import RowBand, SeamPolicy, compute_bands

logger = logging.getLogger(__name__)

# Runs slower than this log a warning (milliseconds)
RUN_WARN_MS = 2000

# Rolling timing stats keyed by thread count
_run_timing: dict[int, deque] = defaultdict(lambda: deque(maxlen=100))


def record_timing(thread_count: int, elapsed_ms: float):
    """Record a timing sample for a run."""
    _run_timing[thread_count].append(elapsed_ms)


def get_run_stats() -> dict[int, dict]:
    """Return p50/p95/max per thread count."""
    result = {}
    for threads, samples in _run_timing.items():
        s = sorted(samples)
        result[threads] = {
            "p50": s[len(s) // 2] if s else 0,
            "p95": s[int(len(s) * 0.95)] if len(s) >= 20 else None,
            "max": max(s) if s else 0,
            "samples": len(s),
        }
    return result


def flush_timing():
    """Clear all timing stats."""
    _run_timing.clear()


def _merge(output: np.ndarray, band: RowBand, partial: np.ndarray):
    rows = partial[band.offset : band.offset + band.height]
    output[band.start_y : band.end_y, band.start_x : band.end_x] = rows


def run(
    height: int,
    width: int,
    thread_count: int,
    source: GridView,
    seam: SeamPolicy = SeamPolicy.LEGACY,
) -> np.ndarray:
    """Median-filter a full image, optionally split across worker threads.

    Args:
        height:       Image height in rows.
        width:        Image width in columns.
        thread_count: Number of row bands / worker threads. 1 filters the
                      whole image in the calling thread with no merge step.
        source:       Read-only view of the luminance grid.
        seam:         How bands treat the rows next to an internal seam.

    Returns:
        (height, width) uint8 grid.

    Raises:
        ConfigurationError: thread_count is not positive or exceeds height.
        BoundsViolation: source does not match (height, width).
    """
    bands = compute_bands(height, width, thread_count, seam)
    if source.shape != (height, width):
        raise BoundsViolation(
            f"source is {source.height}x{source.width}, expected {height}x{width}"
        )

    t0 = time.monotonic()

    if thread_count == 1:
        output = filter_region(0, height, 0, width, source)
    else:
        sentry_sdk.add_breadcrumb(
            category="filter",
            message=f"Dispatching {len(bands)} bands",
            data={"height": height, "width": width, "seam": seam.value},
            level="info",
        )
        # Leaving the with-block joins every worker, so a failing band
        # surfaces only after its siblings have finished.
        with ThreadPoolExecutor(
            max_workers=thread_count, thread_name_prefix="median-band"
        ) as pool:
            futures = [
                pool.submit(
                    filter_region,
                    band.read_start_y,
                    band.read_end_y,
                    band.start_x,
                    band.end_x,
                    source,
                )
                for band in bands
            ]
            partials = [f.result() for f in futures]

        output = make_grid(height, width)
        for band, partial in zip(bands, partials):
            _merge(output, band, partial)

    elapsed_ms = (time.monotonic() - t0) * 1000
    record_timing(thread_count, elapsed_ms)

    if elapsed_ms > RUN_WARN_MS:
        logger.warning(
            "Median filter on %dx%d with %d threads took %.0fms (>%dms warn threshold)",
            width,
            height,
            thread_count,
            elapsed_ms,
            RUN_WARN_MS,
        )
    else:
        logger.debug(
            "Median filter on %dx%d with %d threads took %.0fms",
            width,
            height,
            thread_count,
            elapsed_ms,
        )

    return output
