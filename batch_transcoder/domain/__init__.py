"""
This package contains the core domain models of the Batch Transcoder.

The domain layer holds the value objects passed between discovery, the per-file
transcoder and the batch coordinator. None of them perform I/O.

Modules:
    exceptions.py: The exception hierarchy, split into run-level errors that
                   abort a batch and per-file errors that become outcomes.
    media.py: `SourceFile`, `TranscodeTask` and `FrameBuffer`.
    results.py: `TranscodeOutcome` and the aggregated `BatchSummary`.
"""
