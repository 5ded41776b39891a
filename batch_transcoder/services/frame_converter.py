"""
Converts raw decoder output into frames for the container encoder.

The decoder delivers interleaved little-endian signed 16-bit PCM in blocks of
arbitrary length. A block may end in the middle of a sample (odd length) or in
the middle of a frame (one channel's sample of a stereo pair). Those trailing
bytes are carried over and prepended to the next block, so no sample is ever
split or shifted. Whatever is still carried when the stream ends is less than
one frame; it is dropped and reported by `flush()`.
"""

import numpy as np
from loguru import logger

from ..config.audio import BYTES_PER_SAMPLE, OUTPUT_BIT_DEPTH, OUTPUT_CHANNELS
from ..domain.media import FrameBuffer

SAMPLE_DTYPE = np.dtype("<i2")


def bytes_to_samples(block: bytes) -> np.ndarray:
    """
    Interprets an even-length byte block as little-endian signed 16-bit samples.

    Args:
        block: Raw bytes; `len(block)` must be even.

    Returns:
        An int16 array with one value per byte pair, in input order.

    Raises:
        ValueError: If the block has an odd number of bytes.
    """
    if len(block) % BYTES_PER_SAMPLE:
        raise ValueError(f"Cannot convert {len(block)} bytes into 16-bit samples: length is odd.")
    return np.frombuffer(block, dtype=SAMPLE_DTYPE).astype(np.int16)


class FrameConverter:
    """
    Turns successive raw blocks of one stream into `FrameBuffer`s.

    One instance belongs to one file; it holds the bytes carried between reads.

    Attributes:
        sample_rate (int): Rate reported by the decoder, attached to every buffer.
        num_channels (int): Channels per frame.
        frame_size (int): Bytes per frame (channels x 2).
    """

    def __init__(self, sample_rate: int, num_channels: int = OUTPUT_CHANNELS):
        self.sample_rate = sample_rate
        self.num_channels = num_channels
        self.frame_size = num_channels * BYTES_PER_SAMPLE
        self._carry = b""

    @property
    def pending_bytes(self) -> int:
        return len(self._carry)

    def convert(self, block: bytes) -> FrameBuffer:
        """
        Converts every whole frame available after prepending the carried bytes.

        The returned buffer may be empty when the carried bytes plus `block` do
        not make up a single frame.
        """
        data = self._carry + bytes(block) if self._carry else bytes(block)
        usable = len(data) - (len(data) % self.frame_size)
        self._carry = data[usable:]
        return FrameBuffer(
            data=bytes_to_samples(data[:usable]),
            sample_rate=self.sample_rate,
            num_channels=self.num_channels,
            source_bit_depth=OUTPUT_BIT_DEPTH,
        )

    def flush(self) -> int:
        """Ends the stream. Returns the number of orphan bytes dropped."""
        dropped = self.pending_bytes
        if dropped:
            logger.warning(
                f"Dropping {dropped} trailing byte(s) at end of stream: not a whole {self.num_channels}-channel frame."
            )
        self._carry = b""
        return dropped
