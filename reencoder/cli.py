"""
Command-Line Interface (CLI) setup for the Media Re-encoder.

Defaults come from `reencoder.config.common`, which already reflects any
overrides found in `config.user.yaml`; flags given here take precedence.
"""
import argparse
from typing import List, Optional

from .config.common import (
    MAX_WORKERS,
    PROCESS_TIMEOUT,
    QUALITY_CHECK_ENABLED,
    SERVER_HOST,
    SERVER_PORT,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Re-encode the images and videos of a folder into AV1/JPEG XL and score them with VMAF."
    )
    parser.add_argument(
        "--target-dir", type=str, default=None,
        help="Folder to re-encode. Defaults to the current working directory.",
    )
    parser.add_argument(
        "--processes", type=int, default=MAX_WORKERS,
        help="Number of files encoded at the same time.",
    )
    parser.add_argument(
        "--timeout", type=float, default=PROCESS_TIMEOUT,
        help="Seconds an encoder, decoder or scorer may run before it is killed.",
    )
    parser.add_argument(
        "--no-quality-check", dest="quality_check", action="store_false", default=QUALITY_CHECK_ENABLED,
        help="Skip the VMAF quality check after encoding.",
    )
    parser.add_argument(
        "--no-logs", dest="write_logs", action="store_false",
        help="Do not write reencode_log.yaml and error.txt into the output folder.",
    )
    parser.add_argument(
        "--log-level", type=str, default=None, choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level. Defaults to DEBUG, or INFO when run with python -O.",
    )
    parser.add_argument(
        "--serve", action="store_true",
        help="Run the HTTP service for the gallery front-end instead of a single batch.",
    )
    parser.add_argument("--host", type=str, default=SERVER_HOST, help="Host the HTTP service binds to.")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help="Port the HTTP service listens on.")
    return parser


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments.

    Args:
        argv: Argument list to parse; `sys.argv[1:]` when None.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.processes < 1:
        parser.error("--processes must be at least 1")
    if args.timeout <= 0:
        parser.error("--timeout must be greater than 0")
    return args
