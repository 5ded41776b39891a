"""
This module provides classes for the on-disk logs written after each run.

It separates two concerns: `ErrorLog` appends a human-readable block for every
failed file to a plain text file, and `TranscodeReport` writes the whole
`BatchSummary` as a machine-readable YAML document. Both live in the output
directory, next to the converted files. Console logging is handled by loguru
and configured in `main.py`.
"""

from datetime import datetime
from pathlib import Path
from typing import Union

import yaml
from loguru import logger

from ..config.common import ERROR_LOG_FILE_NAME, REPORT_FILE_NAME
from ..domain.results import BatchSummary, TranscodeOutcome


class Log:
    """
    A base class for the file-based logs.

    It resolves the log directory from a base path and makes sure it exists.
    """

    # A decorative separator line used in text-based logs for better readability.
    linesep_marker: str = "=" * 50

    def __init__(self, log_base_path: Path):
        """
        Args:
            log_base_path: If it is a directory, log files are created inside
                           it. Otherwise its parent is used.
        """
        self.log_file_path: Path
        if log_base_path.is_dir():
            self.log_dir: Path = log_base_path.resolve()
        else:
            self.log_dir: Path = log_base_path.parent.resolve()
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def write(self, log_content: Union[dict, list, str]):
        raise NotImplementedError("Subclasses must implement the write() method.")


class ErrorLog(Log):
    """
    Appends error messages to a plain text file.

    Each call adds the given lines followed by a separator, so the file is a
    chronological record of failures across runs.
    """

    def __init__(self, error_log_dir: Path, filename: str = ERROR_LOG_FILE_NAME):
        super().__init__(error_log_dir)
        self.log_file_path = self.log_dir / filename

    def write(self, *error_messages: str):
        if not error_messages:
            return

        content_to_write = "\n".join(error_messages) + "\n" + self.linesep_marker + "\n"

        try:
            with self.log_file_path.open("a", encoding="utf-8") as f:
                f.write(content_to_write)
        except OSError as e:
            # Fall back to the console so the messages are not lost.
            logger.error(f"Failed to write to error log {self.log_file_path}: {e}")
            for msg in error_messages:
                logger.error(f"  - {msg}")

    def write_outcome(self, outcome: TranscodeOutcome):
        """Writes one failed outcome. Successful outcomes are ignored."""
        if outcome.succeeded:
            return
        self.write(
            f"Time: {outcome.finished_at}",
            f"Source: {outcome.source}",
            f"Destination: {outcome.destination}",
            f"Cause: {outcome.cause}",
            f"Error: {outcome.message}",
        )


class TranscodeReport(Log):
    """
    Writes the summary of one run as YAML.

    The report is overwritten on every run; it describes the latest batch only.
    """

    def __init__(self, report_dir: Path, filename: str = REPORT_FILE_NAME):
        super().__init__(report_dir)
        self.log_file_path = self.log_dir / filename

    def write(self, summary: BatchSummary):
        if not isinstance(summary, BatchSummary):
            logger.error("TranscodeReport.write expects a BatchSummary.")
            return

        content = {"generated_at": datetime.now().isoformat()}
        content.update(summary.to_dict())
        try:
            with self.log_file_path.open("w", encoding="utf-8") as f:
                yaml.dump(
                    content,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                    indent=4,
                    width=220,
                )
        except OSError as e:
            logger.error(f"Failed to write transcode report {self.log_file_path}: {e}")
            return
        logger.info(f"Wrote transcode report: {self.log_file_path}")
