"""End-to-end tests running the real ffmpeg decoder and soundfile encoder"""

import shutil

import numpy as np
import pytest
import soundfile as sf

import main
from batch_transcoder.pipeline.batch_pipeline import BatchCoordinator

pytestmark = pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="ffmpeg/ffprobe not installed",
)


class TestFFmpegBatch:
    def test_valid_and_corrupted_source(self, input_dir, output_dir, write_source, mono_mp3, log_messages):
        """A corrupted file fails alone while a valid mono file becomes stereo WAV"""
        corrupted = write_source(input_dir / "b.mp3", b"\x00" * 512)

        coordinator = BatchCoordinator(input_dir, output_dir)
        summary = coordinator.run()
        coordinator.post_actions(summary)

        assert summary.total == 2
        good = summary.outcome_for(mono_mp3)
        bad = summary.outcome_for(corrupted)
        assert good.succeeded
        assert good.sample_rate == 22050
        assert bad.cause == "decode-init error"

        info = sf.info(str(output_dir / "a.wav"))
        assert (info.samplerate, info.channels, info.subtype) == (22050, 2, "PCM_16")
        data, _ = sf.read(str(output_dir / "a.wav"), dtype="int16")
        assert np.array_equal(data[:, 0], data[:, 1])
        assert 1.9 < len(data) / 22050 < 2.2

        assert not (output_dir / "b.wav").exists()
        assert "b.mp3" in (output_dir / "error.txt").read_text(encoding="utf-8")
        assert "**** All files have been processed. ****" in log_messages

    def test_main_reports_partial_failure(self, input_dir, output_dir, write_source, mono_mp3):
        write_source(input_dir / "nested" / "b.mp3", b"\x00" * 256)
        argv = ["--input-dir", str(input_dir), "--output-dir", str(output_dir), "--workers", "2"]
        assert main.main(argv) == main.EXIT_PARTIAL_FAILURE
        assert (output_dir / "a.wav").exists()
