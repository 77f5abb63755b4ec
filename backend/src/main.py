import argparse
import os
import sys
from pathlib import Path

import sentry_sdk

from _version import __version__
from diagnostics import init_diagnostics, setup_console_logging
from engine.export import filter_file
from engine.partition import SeamPolicy
from security import strip_pii, validate_input_path, validate_output_path

CONSENT_PATH = "~/.medianfilter/telemetry_consent"


def _init_sentry():
    """Consent-gated Sentry init. Without opt-in the DSN stays empty (no-op client)."""
    consent_path = os.path.expanduser(CONSENT_PATH)
    dsn = ""
    if os.path.exists(consent_path) and Path(consent_path).read_text().strip() == "yes":
        dsn = os.environ.get("SENTRY_DSN", "")

    sentry_sdk.init(
        dsn=dsn,
        release=f"median-denoise@{__version__}",
        environment=os.environ.get("SENTRY_ENV", "development"),
        traces_sample_rate=0.1,
        before_send=strip_pii,
        max_breadcrumbs=50,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert an image to grayscale and apply a 5x5 median filter."
    )
    parser.add_argument(
        "-in", "--in", dest="input", default="ship.png", help="Specify the input file."
    )
    parser.add_argument(
        "-out", "--out", dest="output", default="out.png", help="Specify the output file."
    )
    parser.add_argument(
        "-threads",
        "--threads",
        type=int,
        default=1,
        help="Specify the number of worker threads to use.",
    )
    parser.add_argument(
        "--seam",
        choices=[p.value for p in SeamPolicy],
        default=SeamPolicy.LEGACY.value,
        help="Band seam handling: 'legacy' blacks out rows next to each seam, "
        "'overlap' reads across seams so output matches a single thread.",
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Console log level (default WARNING)."
    )
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    init_diagnostics()
    setup_console_logging(args.log_level)
    _init_sentry()

    errors = validate_input_path(args.input) + validate_output_path(args.output)
    if errors:
        for err in errors:
            print(f"error: {err}", file=sys.stderr)
        return 2

    try:
        report = filter_file(
            args.input, args.output, threads=args.threads, seam=SeamPolicy(args.seam)
        )
    except ValueError as e:
        # ConfigurationError and oversized images; I/O errors propagate
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(
        f"{report.output_path}: {report.width}x{report.height}, "
        f"{report.threads} thread(s), {report.elapsed_ms:.0f}ms",
        flush=True,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
