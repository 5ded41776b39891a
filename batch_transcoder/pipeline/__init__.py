"""
This package contains the batch pipeline of the Batch Transcoder.

The pipeline orchestrates a whole run: it prepares the output directory,
discovers source files, plans one task per file, fans the tasks out to a
bounded worker pool and aggregates their outcomes into a summary.
"""
