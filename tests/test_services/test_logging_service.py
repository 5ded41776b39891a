"""Tests for batch_transcoder.services.logging_service"""

from pathlib import Path

import yaml

from batch_transcoder.domain.exceptions import FinalizeException
from batch_transcoder.domain.results import BatchSummary, TranscodeOutcome
from batch_transcoder.services.logging_service import ErrorLog, TranscodeReport


def _read_report(report):
    with report.log_file_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _failure(name="b"):
    return TranscodeOutcome.failure_from(
        Path(f"/in/{name}.mp3"), Path(f"/out/{name}.wav"), FinalizeException("disk full")
    )


class TestErrorLog:
    def test_appends_blocks(self, output_dir):
        log = ErrorLog(output_dir)
        log.write_outcome(_failure("one"))
        log.write_outcome(_failure("two"))

        text = (output_dir / "error.txt").read_text(encoding="utf-8")
        assert text.count(ErrorLog.linesep_marker) == 2
        assert "Cause: finalize error" in text
        assert text.index("one.mp3") < text.index("two.mp3")

    def test_success_is_ignored(self, output_dir):
        log = ErrorLog(output_dir)
        log.write_outcome(TranscodeOutcome(source=Path("/in/a.mp3"), destination=Path("/out/a.wav"), succeeded=True))
        assert not (output_dir / "error.txt").exists()

    def test_file_path_uses_parent(self, output_dir):
        """A file path as base puts the log next to it"""
        log = ErrorLog(output_dir / "whatever.wav")
        assert log.log_file_path == output_dir.resolve() / "error.txt"


class TestTranscodeReport:
    def test_write_summary(self, output_dir):
        summary = BatchSummary(
            outcomes=[
                TranscodeOutcome(source=Path("/in/a.mp3"), destination=Path("/out/a.wav"), succeeded=True),
                _failure(),
            ]
        )
        report = TranscodeReport(output_dir)
        report.write(summary)

        data = _read_report(report)
        assert (data["total"], data["succeeded"], data["failed"]) == (2, 1, 1)
        assert "generated_at" in data
        assert data["outcomes"][1]["cause"] == "finalize error"

    def test_overwrites_previous_report(self, output_dir):
        report = TranscodeReport(output_dir)
        report.write(BatchSummary(outcomes=[_failure()]))
        report.write(BatchSummary())
        assert _read_report(report)["total"] == 0
