"""Pytest fixtures for batch_transcoder tests"""

import shutil
import subprocess
import tempfile
from pathlib import Path

import numpy as np
import pytest
from loguru import logger

from batch_transcoder.domain.exceptions import (
    DecodeInitException,
    FinalizeException,
    SampleReadException,
    SampleWriteException,
)

# Markers understood by RawPcmDecoder. A source starting with one of them
# simulates a broken file; anything else is treated as raw stereo PCM.
CORRUPT_HEADER = b"BAD!"
READ_FAIL_HEADER = b"RERR"


class RawPcmDecoder:
    """Decoder stand-in that serves the source bytes as already-decoded PCM."""

    instances = []

    def __init__(self, source_path, source_handle, sample_rate=22050):
        header = source_handle.read(4)
        if header == CORRUPT_HEADER:
            raise DecodeInitException(f"Error decoding {Path(source_path).name}: invalid header")
        self._fail_reads = header == READ_FAIL_HEADER
        source_handle.seek(0)
        self._handle = source_handle
        self.sample_rate = sample_rate
        self.source_channels = 2
        self.closed = False
        RawPcmDecoder.instances.append(self)

    def read(self, size):
        if self._fail_reads:
            raise SampleReadException("simulated decoder failure")
        return self._handle.read(size)

    def close(self):
        self.closed = True


class FakeEncoder:
    """Encoder stand-in that records frames and can fail on demand."""

    def __init__(
        self,
        destination_handle,
        sample_rate,
        bit_depth=16,
        num_channels=2,
        fail_on_write=False,
        fail_on_close=False,
    ):
        self.handle = destination_handle
        self.sample_rate = sample_rate
        self.bit_depth = bit_depth
        self.num_channels = num_channels
        self.fail_on_write = fail_on_write
        self.fail_on_close = fail_on_close
        self.samples = []
        self.closed = False
        self.aborted = False

    def write(self, frame_buffer):
        if self.fail_on_write:
            raise SampleWriteException("simulated write failure")
        self.samples.extend(frame_buffer.data.tolist())
        self.handle.write(frame_buffer.data.tobytes())

    def close(self):
        if self.fail_on_close:
            raise FinalizeException("simulated finalize failure")
        self.closed = True

    def abort(self):
        self.aborted = True


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def input_dir(temp_dir):
    path = temp_dir / "data"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(temp_dir):
    path = temp_dir / "converted"
    path.mkdir()
    return path


@pytest.fixture
def stereo_samples():
    """A short 440 Hz stereo sine as interleaved int16 samples (L, R, L, R, ...)."""
    sample_rate = 22050
    duration = 0.1
    t = np.linspace(0, duration, int(sample_rate * duration), False)
    left = (np.sin(2 * np.pi * 440.0 * t) * 20000).astype(np.int16)
    right = (-left).astype(np.int16)
    return np.column_stack([left, right]).reshape(-1)


@pytest.fixture
def stereo_pcm(stereo_samples):
    """The stereo sine as little-endian bytes."""
    return stereo_samples.astype("<i2").tobytes()


@pytest.fixture
def write_source():
    """Write a source file (creating parents) and return its path."""

    def _write(path: Path, content: bytes) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _write


@pytest.fixture
def raw_decoder_factory():
    RawPcmDecoder.instances = []
    return RawPcmDecoder


@pytest.fixture
def fake_encoder_factory():
    return FakeEncoder


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="TRACE")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def mono_mp3(input_dir):
    """A valid 2-second mono 22.05 kHz MP3 produced by the installed ffmpeg."""
    if shutil.which("ffmpeg") is None:
        pytest.skip("ffmpeg not installed")
    path = input_dir / "a.mp3"
    result = subprocess.run(
        [
            "ffmpeg", "-hide_banner", "-loglevel", "error", "-y",
            "-f", "lavfi", "-i", "sine=frequency=440:sample_rate=22050:duration=2",
            "-ac", "1", "-f", "mp3", str(path),
        ],
        capture_output=True,
    )
    if result.returncode != 0:
        pytest.skip(f"ffmpeg cannot encode MP3 here: {result.stderr.decode(errors='replace')}")
    return path
