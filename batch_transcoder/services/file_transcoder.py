"""
This module defines the FileTranscoder service, which converts one source file.

A transcode walks through the states `open -> decoding -> encoding -> closed`.
Any error moves it to `failed`, which is absorbing. Whatever happens, `run()`
returns exactly one `TranscodeOutcome` and never raises, so a failing file can
never take its siblings or the batch down with it.

Decoder and encoder are created through factories so the pipeline can be driven
with other collaborators (the tests inject fakes to provoke each failure).
"""

import threading
import time
from pathlib import Path
from typing import Any, BinaryIO, Callable, Optional

from loguru import logger

from ..config.audio import OUTPUT_BIT_DEPTH, OUTPUT_CHANNELS, SAMPLE_BLOCK_SIZE
from ..config.common import (
    KEEP_PARTIAL_OUTPUT,
    STATE_CLOSED,
    STATE_DECODING,
    STATE_ENCODING,
    STATE_FAILED,
    STATE_OPEN,
    STATE_PENDING,
)
from ..domain.exceptions import (
    FileOpenException,
    SampleWriteException,
    TranscodeCancelledException,
    TranscodeException,
)
from ..domain.media import TranscodeTask
from ..domain.results import TranscodeOutcome
from ..utils.format_utils import formatted_size
from .container_encoder import ContainerEncoder
from .decoder import SampleDecoder
from .frame_converter import FrameConverter

DecoderFactory = Callable[[Path, BinaryIO], Any]
EncoderFactory = Callable[..., Any]


class FileTranscoder:
    """
    Runs the decode -> convert -> encode loop for a single `TranscodeTask`.

    No handle, buffer or codec instance is shared with other transcoders; the
    only shared object is the batch's cancellation event, which is read-only
    from here.

    Attributes:
        task (TranscodeTask): Source and destination of this transcode.
        state (str): Current state, one of the `STATE_*` constants.
        block_size (int): Maximum bytes pulled from the decoder per read.
        keep_partial_output (bool): Leave a partially written output on disk
                                    after a failure instead of deleting it.
    """

    def __init__(
        self,
        task: TranscodeTask,
        block_size: int = SAMPLE_BLOCK_SIZE,
        keep_partial_output: bool = KEEP_PARTIAL_OUTPUT,
        cancel_event: Optional[threading.Event] = None,
        decoder_factory: Optional[DecoderFactory] = None,
        encoder_factory: Optional[EncoderFactory] = None,
    ):
        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")
        self.task = task
        self.block_size = block_size
        self.keep_partial_output = keep_partial_output
        self.cancel_event = cancel_event or threading.Event()
        self.decoder_factory: DecoderFactory = decoder_factory or SampleDecoder
        self.encoder_factory: EncoderFactory = encoder_factory or ContainerEncoder

        self.state = STATE_PENDING
        self.sample_rate: Optional[int] = None
        self.source_channels: Optional[int] = None
        self.frames_written = 0
        self.dropped_bytes = 0
        self._destination_created = False

    @property
    def source_path(self) -> Path:
        return self.task.source.path

    def _check_cancelled(self, before: str):
        if self.cancel_event.is_set():
            raise TranscodeCancelledException(f"Batch cancelled before {before} of {self.source_path}")

    def run(self) -> TranscodeOutcome:
        """
        Transcodes the task's source into its destination.

        Returns:
            A success outcome once the container was finalized, otherwise a
            failure outcome carrying the cause and the offending path.
        """
        started = time.monotonic()
        logger.info(f"Processing file: {self.source_path}")
        try:
            self._transcode()
        except Exception as e:
            self.state = STATE_FAILED
            removed = self._handle_partial_output()
            if isinstance(e, TranscodeException):
                logger.error(f"Error converting file {self.source_path} ({e.cause}): {e}")
            else:
                logger.exception(f"Unexpected error converting file {self.source_path}: {e}")
            return TranscodeOutcome.failure_from(
                self.source_path,
                self.task.destination,
                e,
                sample_rate=self.sample_rate,
                source_channels=self.source_channels,
                frames_written=self.frames_written,
                dropped_bytes=self.dropped_bytes,
                partial_output_removed=removed,
                elapsed_seconds=time.monotonic() - started,
            )

        logger.info(
            f"Successfully converted {self.source_path} to {self.task.destination.name} "
            f"({self._output_size()})"
        )
        return TranscodeOutcome(
            source=self.source_path,
            destination=self.task.destination,
            succeeded=True,
            sample_rate=self.sample_rate,
            source_channels=self.source_channels,
            frames_written=self.frames_written,
            dropped_bytes=self.dropped_bytes,
            elapsed_seconds=time.monotonic() - started,
        )

    def _transcode(self):
        self._check_cancelled("open")
        self.state = STATE_OPEN
        try:
            source_handle = self.source_path.open("rb")
        except OSError as e:
            raise FileOpenException(f"Error opening source file {self.source_path}: {e}") from e
        try:
            try:
                destination_handle = self.task.destination.open("w+b")
            except OSError as e:
                raise FileOpenException(
                    f"Error creating output file {self.task.destination}: {e}"
                ) from e
            self._destination_created = True
            try:
                self._decode_and_encode(source_handle, destination_handle)
            finally:
                destination_handle.close()
        finally:
            source_handle.close()
        self.state = STATE_CLOSED

    def _decode_and_encode(self, source_handle: BinaryIO, destination_handle: BinaryIO):
        self.state = STATE_DECODING
        decoder = self.decoder_factory(self.source_path, source_handle)
        try:
            self.sample_rate = decoder.sample_rate
            self.source_channels = getattr(decoder, "source_channels", None)
            try:
                encoder = self.encoder_factory(
                    destination_handle,
                    sample_rate=decoder.sample_rate,
                    bit_depth=OUTPUT_BIT_DEPTH,
                    num_channels=OUTPUT_CHANNELS,
                )
            except (RuntimeError, OSError, ValueError) as e:
                raise SampleWriteException(f"Error creating encoder for {self.task.destination}: {e}") from e

            converter = FrameConverter(decoder.sample_rate, num_channels=OUTPUT_CHANNELS)
            self.state = STATE_ENCODING
            try:
                self._pump(decoder, converter, encoder)
            except BaseException:
                encoder.abort()
                raise
            encoder.close()
        finally:
            decoder.close()

    def _pump(self, decoder, converter: FrameConverter, encoder):
        while True:
            self._check_cancelled("read")
            block = decoder.read(self.block_size)
            if not block:
                break
            frame_buffer = converter.convert(block)
            if frame_buffer.frame_count == 0:
                continue
            self._check_cancelled("write")
            encoder.write(frame_buffer)
            self.frames_written += frame_buffer.frame_count
        self.dropped_bytes = converter.flush()
        logger.trace(
            f"Decoded {self.frames_written} frame(s) from {self.source_path.name}, "
            f"dropped {self.dropped_bytes} byte(s)"
        )

    def _output_size(self) -> str:
        try:
            return formatted_size(self.task.destination.stat().st_size)
        except OSError:
            return "size unknown"

    def _handle_partial_output(self) -> bool:
        """Deletes the destination after a failure, unless told to keep it."""
        if not self._destination_created:
            return False
        destination = self.task.destination
        if self.keep_partial_output:
            logger.warning(f"Keeping partial output {destination} after failure.")
            return False
        try:
            destination.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Could not remove partial output {destination}: {e}")
            return False
        logger.info(f"Removed partial output {destination}")
        return True
