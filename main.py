"""
Main entry point for the Batch Transcoder application.

This script configures logging, parses command-line arguments, checks the
external FFmpeg tools and runs one batch over the input directory. The process
exit code reflects the aggregated result of the batch.
"""

import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from batch_transcoder.cli import get_args
from batch_transcoder.config.common import LOGGER_FORMAT
from batch_transcoder.domain.exceptions import RunLevelException
from batch_transcoder.pipeline.batch_pipeline import BatchCoordinator
from batch_transcoder.utils.external_tools import Modules

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_RUN_ERROR = 2


# Configure the logger for initial setup.
# The level might be overridden later by command-line arguments.
logger.remove()
logger.add(sys.stderr, level="INFO", format=LOGGER_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs a batch transcode and returns the process exit code.

    Steps:
    1. Parses command-line arguments and re-configures the logger.
    2. Verifies that ffmpeg and ffprobe can be executed.
    3. Runs the `BatchCoordinator` and writes the report and error log.

    Returns:
        0 if every file was converted, 1 if at least one file failed, 2 if the
        run could not start (missing tools, output directory or discovery error).
    """
    args = get_args(argv)

    effective_log_level = "DEBUG" if args.debug_mode else args.log_level
    logger.remove()
    logger.add(sys.stderr, level=effective_log_level, format=LOGGER_FORMAT)
    logger.debug(f"Parsed arguments: {args}")

    if not Modules.run_all():
        logger.error("Required FFmpeg tools are unavailable. Nothing was converted.")
        return EXIT_RUN_ERROR

    try:
        coordinator = BatchCoordinator(
            Path(args.input_dir).resolve(), Path(args.output_dir).resolve(), args=args
        )
    except ValueError as e:
        logger.error(f"Invalid settings: {e}")
        return EXIT_RUN_ERROR
    try:
        summary = coordinator.run()
    except RunLevelException as e:
        logger.error(str(e))
        return EXIT_RUN_ERROR

    coordinator.post_actions(summary)
    return EXIT_OK if summary.all_succeeded else EXIT_PARTIAL_FAILURE


if __name__ == "__main__":
    sys.exit(main())
