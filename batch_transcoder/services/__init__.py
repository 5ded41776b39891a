"""
Services Package for the Batch Transcoder.

This package contains the "service layer" of the application: classes that
perform one well-defined stage of the work and are coordinated by the pipeline.

- **Discovery (`DiscoveryWalker`):** finds source audio files in the input tree.

- **Decoding (`SampleDecoder`):** wraps FFmpeg to turn a compressed stream into
  raw interleaved 16-bit PCM, read in fixed-size blocks.

- **Frame conversion (`FrameConverter`):** turns raw blocks into `FrameBuffer`s,
  carrying incomplete frames over to the next block.

- **Container encoding (`ContainerEncoder`):** writes frames to a WAV file via
  soundfile.

- **Per-file transcoding (`FileTranscoder`):** runs one file through the stages
  above and reports a single `TranscodeOutcome`.

- **Logging Service (`ErrorLog`, `TranscodeReport`):** writes the per-run error
  log (plain text) and report (YAML) into the output directory.
"""
