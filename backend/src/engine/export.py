"""Filter job — decode, extract luminance, median-filter, encode."""

import logging
import time
from dataclasses import dataclass

import sentry_sdk

from engine.grid import GridView
from engine.partition import SeamPolicy
from engine.pipeline import run
from imaging.luminance import extract_luminance
from imaging.reader import load_image
from imaging.writer import save_grayscale
from security import validate_dimensions

logger = logging.getLogger(__name__)


@dataclass
class FilterReport:
    """Summary of one completed filter job."""

    output_path: str
    width: int
    height: int
    threads: int
    seam: SeamPolicy
    elapsed_ms: float


def _capture_with_context(e: Exception, extra: dict):
    """Capture a job failure to Sentry with job-level context."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("stage", extra.get("stage", "unknown"))
        scope.fingerprint = ["filter-job", type(e).__name__]
        scope.set_context("filter_job", extra)
        sentry_sdk.capture_exception(e, scope=scope)


def filter_file(
    input_path: str,
    output_path: str,
    threads: int = 1,
    seam: SeamPolicy = SeamPolicy.LEGACY,
) -> FilterReport:
    """Read input_path, denoise its luminance, and write a grayscale PNG.

    Any decode or encode failure aborts the whole job; nothing is written
    unless filtering completed.
    """
    t0 = time.monotonic()
    ctx = {"threads": threads, "seam": seam.value, "stage": "decode"}

    try:
        img = load_image(input_path)
    except OSError as e:
        _capture_with_context(e, ctx)
        logger.error("Failed to decode input image: %s", type(e).__name__)
        raise

    errors = validate_dimensions(img.shape[0], img.shape[1])
    if errors:
        raise ValueError("; ".join(errors))

    pixels = extract_luminance(img)
    height, width = pixels.shape
    ctx.update(width=width, height=height, stage="filter")
    logger.info(
        "Filtering %dx%d image with %d thread(s), seam=%s",
        width,
        height,
        threads,
        seam.value,
    )

    output = run(height, width, threads, GridView(pixels), seam)

    ctx["stage"] = "encode"
    try:
        save_grayscale(output, output_path)
    except OSError as e:
        _capture_with_context(e, ctx)
        logger.error("Failed to write output image: %s", type(e).__name__)
        raise

    elapsed_ms = (time.monotonic() - t0) * 1000
    logger.info("Wrote %s in %.0fms", output_path, elapsed_ms)
    return FilterReport(
        output_path=output_path,
        width=width,
        height=height,
        threads=threads,
        seam=seam,
        elapsed_ms=elapsed_ms,
    )
