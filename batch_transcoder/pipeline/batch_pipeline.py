import argparse
import concurrent.futures
import threading
import traceback
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from ..config.audio import SAMPLE_BLOCK_SIZE, SOURCE_EXTENSIONS
from ..config.common import DEFAULT_MAX_WORKERS, KEEP_PARTIAL_OUTPUT
from ..domain.exceptions import OutputCollisionException, OutputDirCreationException
from ..domain.media import SourceFile, TranscodeTask
from ..domain.results import BatchSummary, TranscodeOutcome
from ..services.file_processing_service import DiscoveryWalker
from ..services.file_transcoder import DecoderFactory, EncoderFactory, FileTranscoder
from ..services.logging_service import ErrorLog, TranscodeReport
from ..utils.format_utils import format_timedelta


class BatchCoordinator:
    """
    Converts every source file under `input_dir` into `output_dir`.

    The coordinator is the only synchronization point of a run. Each task is
    executed by a `FileTranscoder` on a thread pool and reports exactly one
    outcome; the coordinator waits for all of them before returning.
    """

    def __init__(
        self,
        input_dir: Path,
        output_dir: Path,
        args: Optional[argparse.Namespace] = None,
        decoder_factory: Optional[DecoderFactory] = None,
        encoder_factory: Optional[EncoderFactory] = None,
    ):
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.args = args
        self.workers: int = self._arg("workers", DEFAULT_MAX_WORKERS)
        self.extensions: Sequence[str] = self._arg("extensions", SOURCE_EXTENSIONS)
        self.block_size: int = self._arg("block_size", SAMPLE_BLOCK_SIZE)
        self.keep_partial_output: bool = self._arg("keep_partial_output", KEEP_PARTIAL_OUTPUT)
        self.decoder_factory = decoder_factory
        self.encoder_factory = encoder_factory
        self.cancel_event = threading.Event()

        if self.workers < 0:
            raise ValueError(f"workers must be 0 (unbounded) or positive, got {self.workers}")
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive, got {self.block_size}")

    def _arg(self, name: str, default: Any) -> Any:
        value = getattr(self.args, name, None) if self.args is not None else None
        return default if value is None else value

    def cancel(self):
        """Asks every running and pending task to stop at its next suspension point."""
        if not self.cancel_event.is_set():
            logger.warning("Cancellation requested. Remaining tasks will stop.")
        self.cancel_event.set()

    def prepare_output_dir(self):
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirCreationException(
                f"Error creating output directory {self.output_dir}: {e}"
            ) from e
        logger.debug(f"Output directory ready: {self.output_dir}")

    def discover(self) -> Tuple[SourceFile, ...]:
        return DiscoveryWalker(self.input_dir, self.extensions).discover()

    def plan_tasks(
        self, sources: Iterable[SourceFile]
    ) -> Tuple[List[TranscodeTask], List[TranscodeOutcome]]:
        """
        Derives one task per source and rejects output name collisions.

        Output is flat, so sources in different subdirectories can map to the
        same file name. Sources are taken in path order; the first one keeps the
        name and every later one gets a failed outcome instead of a task. Names
        are compared case-insensitively so the policy holds on case-insensitive
        filesystems too.

        A source whose output would replace the source itself (input and output
        directory are the same and the output extension is matched) is rejected
        the same way.

        Returns:
            The tasks to launch and the outcomes of the rejected sources.
        """
        tasks: List[TranscodeTask] = []
        rejected: List[TranscodeOutcome] = []
        claimed: Dict[str, Path] = {}

        for source in sorted(sources, key=lambda s: str(s.path)):
            task = TranscodeTask.for_source(source, self.output_dir)
            key = task.destination.name.lower()
            error = None
            if self._overwrites_source(task):
                error = OutputCollisionException(f"{source.path} would be overwritten by its own output")
            elif key in claimed:
                error = OutputCollisionException(
                    f"{source.path} maps to {task.destination.name}, already claimed by {claimed[key]}"
                )
            if error is not None:
                logger.error(f"Error converting file {source.path} ({error.cause}): {error}")
                rejected.append(
                    TranscodeOutcome.failure_from(source.path, task.destination, error)
                )
                continue
            claimed[key] = source.path
            tasks.append(task)
        return tasks, rejected

    @staticmethod
    def _overwrites_source(task: TranscodeTask) -> bool:
        destination, source = task.destination, task.source.path
        if destination.resolve() == source.resolve():
            return True
        return destination.exists() and destination.samefile(source)

    def process_single_file(self, task: TranscodeTask) -> TranscodeOutcome:
        return FileTranscoder(
            task,
            block_size=self.block_size,
            keep_partial_output=self.keep_partial_output,
            cancel_event=self.cancel_event,
            decoder_factory=self.decoder_factory,
            encoder_factory=self.encoder_factory,
        ).run()

    def run(self, sources: Optional[Iterable[SourceFile]] = None) -> BatchSummary:
        """
        Executes a whole batch and returns its summary.

        Args:
            sources: Files to convert. When omitted, the input directory is
                     discovered first.

        Raises:
            OutputDirCreationException: The output directory cannot be created.
            DiscoveryWalkException: The input tree cannot be fully traversed.
            Both are raised before any task is launched.
        """
        logger.info(f"Starting batch transcode: {self.input_dir} -> {self.output_dir}")
        self.prepare_output_dir()
        if sources is None:
            sources = self.discover()

        tasks, rejected = self.plan_tasks(sources)
        summary = BatchSummary(outcomes=list(rejected))
        self._run_tasks(tasks, summary)

        logger.info("**** All files have been processed. ****")
        if summary.all_succeeded:
            logger.success(f"{summary.succeeded}/{summary.total} file(s) converted.")
        else:
            logger.warning(
                f"{summary.succeeded}/{summary.total} file(s) converted, {summary.failed} failed."
            )
        return summary

    def _run_tasks(self, tasks: List[TranscodeTask], summary: BatchSummary):
        if not tasks:
            logger.info("No files to process.")
            return

        max_workers = self.workers or len(tasks)
        logger.info(f"Processing {len(tasks)} file(s) with {max_workers} worker thread(s).")

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="transcode"
        ) as executor:
            futures = {executor.submit(self.process_single_file, task): task for task in tasks}
            pending = set(futures)
            while pending:
                try:
                    for future in concurrent.futures.as_completed(list(pending)):
                        pending.discard(future)
                        outcome = self._collect(future, futures[future])
                        summary.add(outcome)
                        logger.debug(
                            f"Completed {summary.total}/{summary.total + len(pending)}: "
                            f"{outcome.source.name} ({'ok' if outcome.succeeded else outcome.cause}, "
                            f"{format_timedelta(timedelta(seconds=outcome.elapsed_seconds))})"
                        )
                except KeyboardInterrupt:
                    logger.warning("Interrupted by user. Waiting for running tasks to stop.")
                    self.cancel()

    @staticmethod
    def _collect(future: concurrent.futures.Future, task: TranscodeTask) -> TranscodeOutcome:
        try:
            return future.result()
        except Exception as exc:
            # FileTranscoder.run() reports its own failures; this only guards the 1:1 mapping.
            tb_str = traceback.format_exception(type(exc), exc, exc.__traceback__)
            logger.error(
                f"Error processing task for {task.source.name} in pool:\n"
                f"Exception type: {type(exc).__name__}\n"
                f"Exception message: {exc}\n"
                f"Traceback: {''.join(tb_str)}"
            )
            return TranscodeOutcome.failure_from(task.source.path, task.destination, exc)

    def post_actions(self, summary: BatchSummary):
        """Writes the error log and the YAML report into the output directory."""
        if summary.failures:
            error_log = ErrorLog(self.output_dir)
            for outcome in summary.failures:
                error_log.write_outcome(outcome)
        TranscodeReport(self.output_dir).write(summary)
