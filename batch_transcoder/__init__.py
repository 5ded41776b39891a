"""
This file marks the 'batch_transcoder' directory as a Python package.

The package converts trees of compressed audio files into uncompressed WAV
containers. It is organised in layers:

- `config`: static settings and the optional user YAML overrides.
- `domain`: value objects (`SourceFile`, `TranscodeTask`, `FrameBuffer`,
  `TranscodeOutcome`, `BatchSummary`) and the exception hierarchy.
- `services`: discovery, decoding, frame conversion, container encoding and
  the per-file transcoder, plus the report/error log writers.
- `pipeline`: the `BatchCoordinator` that fans tasks out to a worker pool.
- `utils`: formatting helpers and the external tool check.
"""

__version__ = "1.0.0"
