"""
Value objects describing the work of a batch: the discovered source files, the
per-file tasks derived from them, and the blocks of sample frames that flow
from the decoder to the container encoder.
"""
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from ..config.audio import OUTPUT_BIT_DEPTH, OUTPUT_CHANNELS, OUTPUT_EXTENSION


@dataclass(frozen=True)
class SourceFile:
    """
    A compressed audio file found during discovery.

    Attributes:
        path: Location of the file on disk.
        extension: The recognized suffix the file name matched, as configured
                   (e.g. ".mp3"). The match itself is case-insensitive, so the
                   actual name may end in ".MP3".
    """

    path: Path
    extension: str

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def base_name(self) -> str:
        """The file name with the matched extension removed."""
        return self.name[: len(self.name) - len(self.extension)]

    def output_name(self, output_extension: str = OUTPUT_EXTENSION) -> str:
        return f"{self.base_name}{output_extension}"


@dataclass(frozen=True)
class TranscodeTask:
    """The unit of work for one source file. Never shared between workers."""

    source: SourceFile
    destination: Path

    @classmethod
    def for_source(cls, source: SourceFile, output_dir: Path) -> "TranscodeTask":
        return cls(source=source, destination=output_dir / source.output_name())


@dataclass
class FrameBuffer:
    """
    Signed integer samples converted from one raw block, with format metadata.

    `data` holds interleaved samples (L, R, L, R, ...). It always contains a
    whole number of frames.
    """

    data: np.ndarray
    sample_rate: int
    num_channels: int = OUTPUT_CHANNELS
    source_bit_depth: int = OUTPUT_BIT_DEPTH
    frames: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        if self.data.size % self.num_channels:
            raise ValueError(
                f"FrameBuffer holds {self.data.size} samples, not a multiple of {self.num_channels} channels."
            )
        self.frames = self.data.reshape(-1, self.num_channels)

    @property
    def frame_count(self) -> int:
        return int(self.frames.shape[0])
