"""
This module defines the SampleDecoder, a thin wrapper around FFmpeg.

The compressed format itself is never parsed here. `ffmpeg.probe` reports the
source's native sample rate and channel count, and an `ffmpeg` subprocess reads
the already-open source handle on its stdin and streams interleaved
little-endian signed 16-bit PCM to its stdout, which is consumed in blocks.
"""

import subprocess
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional

import ffmpeg
from loguru import logger

from ..config.audio import DECODER_CODEC, DECODER_SAMPLE_FORMAT, OUTPUT_CHANNELS
from ..domain.exceptions import DecodeInitException, SampleReadException
from ..utils.external_tools import Modules

# Bytes of ffmpeg stderr kept in error messages.
STDERR_TAIL_LENGTH = 500


class SampleDecoder:
    """
    Streams raw PCM decoded from one compressed audio source.

    The decoder always produces `OUTPUT_CHANNELS` interleaved channels. Sources
    with a different channel count are up- or down-mixed by FFmpeg so the data
    matches the fixed output declaration; the original count is kept in
    `source_channels`.

    Attributes:
        source_path (Path): The file being decoded, used for probing and logs.
        sample_rate (int): Native sample rate of the source. Not resampled.
        source_channels (int | None): Channel count reported by the probe.
    """

    def __init__(self, source_path: Path, source_handle: BinaryIO):
        self.source_path = Path(source_path)
        self.sample_rate: int = 0
        self.source_channels: Optional[int] = None
        self._process: Optional[subprocess.Popen] = None
        self._stderr_file = None

        self._probe()
        self._start(source_handle)

    def _probe(self):
        try:
            probe = ffmpeg.probe(
                str(self.source_path),
                cmd=Modules.get_tool_path("ffprobe"),
                select_streams="a:0",
            )
        except ffmpeg.Error as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise DecodeInitException(
                f"Error decoding {self.source_path.name}: {stderr[-STDERR_TAIL_LENGTH:] or 'ffprobe failed'}"
            ) from e
        except FileNotFoundError as e:
            raise DecodeInitException(f"ffprobe executable not found: {e}") from e

        audio_streams = [s for s in probe.get("streams", []) if s.get("codec_type") == "audio"]
        if not audio_streams:
            raise DecodeInitException(f"No audio stream found in {self.source_path.name}")

        stream = audio_streams[0]
        try:
            self.sample_rate = int(stream["sample_rate"])
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeInitException(
                f"Audio stream of {self.source_path.name} reports no usable sample rate"
            ) from e
        if self.sample_rate <= 0:
            raise DecodeInitException(
                f"Audio stream of {self.source_path.name} reports sample rate {self.sample_rate}"
            )
        self.source_channels = stream.get("channels")
        logger.debug(
            f"Probed {self.source_path.name}: codec={stream.get('codec_name')}, "
            f"sample_rate={self.sample_rate}, channels={self.source_channels}"
        )
        if self.source_channels and self.source_channels != OUTPUT_CHANNELS:
            logger.debug(
                f"{self.source_path.name} has {self.source_channels} channel(s); "
                f"decoding as {OUTPUT_CHANNELS}-channel output."
            )

    def _build_command(self) -> list:
        stream = ffmpeg.input("pipe:0").output(
            "pipe:1",
            format=DECODER_SAMPLE_FORMAT,
            acodec=DECODER_CODEC,
            ac=OUTPUT_CHANNELS,
            vn=None,
        )
        return [
            Modules.get_tool_path("ffmpeg"),
            "-hide_banner",
            "-nostats",
            "-loglevel",
            "error",
        ] + ffmpeg.get_args(stream)

    def _start(self, source_handle: BinaryIO):
        cmd = self._build_command()
        logger.trace(f"Starting decoder for {self.source_path.name}: {cmd}")
        # stderr goes to a file: a full stderr pipe would stall ffmpeg while we block on stdout.
        self._stderr_file = tempfile.TemporaryFile()
        try:
            self._process = subprocess.Popen(
                cmd,
                stdin=source_handle,
                stdout=subprocess.PIPE,
                stderr=self._stderr_file,
            )
        except OSError as e:
            self._stderr_file.close()
            self._stderr_file = None
            raise DecodeInitException(f"Could not start ffmpeg for {self.source_path.name}: {e}") from e

    def _stderr_tail(self) -> str:
        if self._stderr_file is None:
            return ""
        self._stderr_file.seek(0)
        text = self._stderr_file.read().decode("utf-8", errors="replace").strip()
        return text[-STDERR_TAIL_LENGTH:]

    def read(self, size: int) -> bytes:
        """
        Returns up to `size` bytes of decoded PCM.

        An empty result means the stream is exhausted and ffmpeg exited cleanly.

        Raises:
            SampleReadException: If the pipe cannot be read, or ffmpeg exits
                with an error once its output is drained.
        """
        if self._process is None or self._process.stdout is None:
            raise SampleReadException(f"Decoder for {self.source_path.name} is closed")
        try:
            chunk = self._process.stdout.read(size)
        except (OSError, ValueError) as e:
            raise SampleReadException(f"Error reading decoded samples of {self.source_path.name}: {e}") from e

        if chunk:
            return chunk

        return_code = self._process.wait()
        if return_code != 0:
            raise SampleReadException(
                f"Error reading {self.source_path.name}: ffmpeg exited with code {return_code}: "
                f"{self._stderr_tail() or 'no error output'}"
            )
        return b""

    def close(self):
        """Stops ffmpeg if it is still running and releases the pipes."""
        if self._process is not None:
            if self._process.poll() is None:
                logger.debug(f"Terminating decoder for {self.source_path.name} before end of stream.")
                self._process.kill()
            self._process.wait()
            if self._process.stdout is not None:
                self._process.stdout.close()
            self._process = None
        if self._stderr_file is not None:
            self._stderr_file.close()
            self._stderr_file = None
