"""
Configuration Package for the Batch Transcoder.

This package centralizes the static configuration settings for the application.
Keeping them out of the processing code makes it easy to adjust directories,
worker counts and output format constants without touching the pipeline.

This package includes settings for:
- Common application settings like logging formats, report file names, user
  overridable paths and the per-file transcode state names.
- Audio input recognition and the fixed output container format.
"""
