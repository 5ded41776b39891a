"""
Defines custom exception types for the Batch Transcoder.

Errors fall into two groups. Run-level errors (`RunLevelException`) are raised
before any task is launched and abort the whole batch. Per-file errors
(`TranscodeException`) are raised inside a single task, caught at the task
boundary and turned into a failed `TranscodeOutcome`; they never reach the
coordinator as exceptions.

Every per-file exception carries a short `cause` label that ends up in logs and
in the YAML report.

All custom exceptions inherit from the base `TranscoderException`.
"""


class TranscoderException(Exception):
    """Base class for all custom exceptions in the Batch Transcoder."""

    pass


# --- Run-Level Exceptions ---
class RunLevelException(TranscoderException):
    """Base class for errors that abort a batch before fan-out."""

    pass


class OutputDirCreationException(RunLevelException):
    """Raised when the output directory cannot be created."""

    pass


class DiscoveryWalkException(RunLevelException):
    """
    Raised when the input tree cannot be fully traversed.

    Partial discovery is never accepted: the coordinator needs the complete set
    of tasks up front, so an unreadable directory anywhere in the tree aborts
    the run before any file is transcoded.
    """

    pass


# --- Per-File Exceptions ---
class TranscodeException(TranscoderException):
    """Base class for failures isolated to a single file."""

    cause = "unexpected error"


class FileOpenException(TranscodeException):
    """Raised when the source cannot be opened or the destination cannot be created."""

    cause = "open error"


class DecodeInitException(TranscodeException):
    """
    Raised when the decoder cannot be initialized against the source.

    Typically the file is not valid compressed audio (corrupted header) or it
    contains no audio stream.
    """

    cause = "decode-init error"


class SampleReadException(TranscodeException):
    """Raised when the decoder fails mid-stream for a reason other than end of stream."""

    cause = "read error"


class SampleWriteException(TranscodeException):
    """Raised when a block of frames cannot be written to the output container."""

    cause = "write error"


class FinalizeException(TranscodeException):
    """Raised when the output container cannot be flushed and closed."""

    cause = "finalize error"


class TranscodeCancelledException(TranscodeException):
    """Raised at a suspension point once the batch has been cancelled."""

    cause = "cancelled"


class OutputCollisionException(TranscodeException):
    """
    Raised when two sources would be written to the same output file.

    Output is flat, so `a/x.mp3` and `b/x.mp3` both map to `x.wav`. The first
    source in path order keeps the name and later ones are rejected without
    being launched.
    """

    cause = "output collision"
