"""
This module defines the ContainerEncoder, which writes frames into a WAV file.

Header and chunk layout are delegated to libsndfile through `soundfile`. The
encoder writes into a destination handle the caller already created, and the
header sizes are fixed up when the encoder is finalized.
"""

from typing import BinaryIO

import soundfile as sf
from loguru import logger

from ..config.audio import OUTPUT_BIT_DEPTH, OUTPUT_CHANNELS, OUTPUT_CONTAINER_FORMAT, OUTPUT_SUBTYPE
from ..domain.exceptions import FinalizeException, SampleWriteException
from ..domain.media import FrameBuffer

# libsndfile subtype for each supported PCM bit depth.
PCM_SUBTYPES = {OUTPUT_BIT_DEPTH: OUTPUT_SUBTYPE}


class ContainerEncoder:
    """
    Appends sample frames to an uncompressed WAV container.

    The encoder is stateful and append-only: blocks must be written in stream
    order, and the file is only valid after `close()` succeeded.

    Attributes:
        sample_rate (int): Declared rate of the container.
        bit_depth (int): Declared bits per sample.
        num_channels (int): Declared channel count.
        frames_written (int): Frames appended so far.
    """

    def __init__(
        self,
        destination_handle: BinaryIO,
        sample_rate: int,
        bit_depth: int = OUTPUT_BIT_DEPTH,
        num_channels: int = OUTPUT_CHANNELS,
    ):
        if bit_depth not in PCM_SUBTYPES:
            raise ValueError(f"Unsupported output bit depth: {bit_depth}")
        self.sample_rate = sample_rate
        self.bit_depth = bit_depth
        self.num_channels = num_channels
        self.frames_written = 0
        try:
            self._sound_file = sf.SoundFile(
                destination_handle,
                mode="w",
                samplerate=sample_rate,
                channels=num_channels,
                subtype=PCM_SUBTYPES[bit_depth],
                format=OUTPUT_CONTAINER_FORMAT,
            )
        except (RuntimeError, OSError, ValueError) as e:
            raise SampleWriteException(f"Could not initialize {OUTPUT_CONTAINER_FORMAT} encoder: {e}") from e

    def write(self, frame_buffer: FrameBuffer):
        """Appends one buffer of frames. Blocks until the data is handed to libsndfile."""
        if frame_buffer.num_channels != self.num_channels:
            raise SampleWriteException(
                f"Buffer has {frame_buffer.num_channels} channel(s), container declares {self.num_channels}"
            )
        if frame_buffer.frame_count == 0:
            return
        try:
            self._sound_file.write(frame_buffer.frames)
        except (RuntimeError, OSError, ValueError) as e:
            raise SampleWriteException(f"Error writing {OUTPUT_CONTAINER_FORMAT} file: {e}") from e
        self.frames_written += frame_buffer.frame_count

    def close(self):
        """Flushes and finalizes the container header."""
        if self._sound_file.closed:
            return
        try:
            self._sound_file.close()
        except (RuntimeError, OSError, ValueError) as e:
            raise FinalizeException(f"Error closing {OUTPUT_CONTAINER_FORMAT} file: {e}") from e

    def abort(self):
        """Closes the container after a failure, without raising."""
        if self._sound_file.closed:
            return
        try:
            self._sound_file.close()
        except (RuntimeError, OSError, ValueError) as e:
            logger.debug(f"Ignoring error while closing an aborted container: {e}")
