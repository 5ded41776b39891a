"""
Command-Line Interface (CLI) setup for the Batch Transcoder.

This module uses Python's `argparse` to define and parse the command-line
arguments that control a run. Defaults come from `batch_transcoder.config`,
which in turn honours the optional `config.user.yaml`.
"""
import argparse
from typing import List, Optional

from .config.audio import SAMPLE_BLOCK_SIZE, SOURCE_EXTENSIONS
from .config.common import (
    DEFAULT_INPUT_DIR,
    DEFAULT_MAX_WORKERS,
    DEFAULT_OUTPUT_DIR,
    KEEP_PARTIAL_OUTPUT,
    LOG_LEVELS,
)


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected 0 or a positive integer, got {value}")
    return number


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the Batch Transcoder.

    Args:
        argv: Arguments to parse. Defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: The parsed arguments. `extensions` is always a
                            non-empty list.
    """
    parser = argparse.ArgumentParser(
        description="Convert every compressed audio file in a directory tree to 16-bit stereo WAV."
    )
    parser.add_argument(
        "--input-dir", type=str, default=str(DEFAULT_INPUT_DIR),
        help="Root directory scanned recursively for source files."
    )
    parser.add_argument(
        "--output-dir", type=str, default=str(DEFAULT_OUTPUT_DIR),
        help="Directory receiving the converted files (flat, created if missing)."
    )
    parser.add_argument(
        "--workers", type=_non_negative_int, default=DEFAULT_MAX_WORKERS,
        help="Number of files converted concurrently. 0 starts one worker per file."
    )
    parser.add_argument(
        "--extension", dest="extensions", action="append", default=None,
        help=f"Source file extension to match, case-insensitive. Repeatable. Default: {' '.join(SOURCE_EXTENSIONS)}."
    )
    parser.add_argument(
        "--block-size", type=_positive_int, default=SAMPLE_BLOCK_SIZE,
        help="Maximum number of decoded bytes read per block."
    )
    parser.add_argument(
        "--keep-partial-output", action="store_true", default=KEEP_PARTIAL_OUTPUT,
        help="Leave partially written output files on disk when a conversion fails."
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO", choices=LOG_LEVELS,
        help="Set the logging level."
    )
    parser.add_argument(
        "--debug", dest="debug_mode", action="store_true",
        help="Shortcut for --log-level DEBUG."
    )

    args = parser.parse_args(argv)
    if not args.extensions:
        args.extensions = list(SOURCE_EXTENSIONS)
    return args
