"""
Defines the result models of a batch run.

Every discovered source file produces exactly one `TranscodeOutcome`, whether it
was converted, failed mid-way, was rejected before launch or was cancelled. The
coordinator collects them into a `BatchSummary`, which exists only for the
duration of one run and is written to the YAML report at the end.
"""
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import TranscodeException


@dataclass(frozen=True)
class TranscodeOutcome:
    """
    The immutable result of one file's transcode.

    Attributes:
        source: Path of the source file.
        destination: Path the output was (or would have been) written to.
        succeeded: True only after the output container was finalized.
        cause: Short label of the failure (e.g. "decode-init error"), None on success.
        message: Human-readable description of the failure, None on success.
        sample_rate: Native rate reported by the decoder, if it got that far.
        source_channels: Channel count of the source stream, if known.
        frames_written: Number of sample frames handed to the encoder.
        dropped_bytes: Orphan bytes discarded at end of stream.
        partial_output_removed: True if a partially written output was deleted.
        elapsed_seconds: Wall-clock time spent on the task.
    """

    source: Path
    destination: Path
    succeeded: bool
    cause: Optional[str] = None
    message: Optional[str] = None
    sample_rate: Optional[int] = None
    source_channels: Optional[int] = None
    frames_written: int = 0
    dropped_bytes: int = 0
    partial_output_removed: bool = False
    elapsed_seconds: float = 0.0
    finished_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @classmethod
    def failure_from(
        cls, source: Path, destination: Path, error: Exception, **details: Any
    ) -> "TranscodeOutcome":
        cause = error.cause if isinstance(error, TranscodeException) else TranscodeException.cause
        return cls(
            source=source,
            destination=destination,
            succeeded=False,
            cause=cause,
            message=str(error) or type(error).__name__,
            **details,
        )

    def to_log_entry(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "source": str(self.source),
            "destination": str(self.destination),
            "status": "succeeded" if self.succeeded else "failed",
        }
        if not self.succeeded:
            entry["cause"] = self.cause
            entry["message"] = self.message
            entry["partial_output_removed"] = self.partial_output_removed
        entry.update(
            {
                "sample_rate": self.sample_rate,
                "source_channels": self.source_channels,
                "frames_written": self.frames_written,
                "dropped_bytes": self.dropped_bytes,
                "elapsed_seconds": round(self.elapsed_seconds, 3),
                "finished_at": self.finished_at,
            }
        )
        return entry


@dataclass
class BatchSummary:
    """Aggregate of all outcomes of one run."""

    outcomes: List[TranscodeOutcome] = field(default_factory=list)

    def add(self, outcome: TranscodeOutcome):
        self.outcomes.append(outcome)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    @property
    def failures(self) -> List[TranscodeOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    def outcome_for(self, source: Path) -> Optional[TranscodeOutcome]:
        for outcome in self.outcomes:
            if outcome.source == source:
                return outcome
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "outcomes": [
                o.to_log_entry() for o in sorted(self.outcomes, key=lambda o: str(o.source))
            ],
        }
