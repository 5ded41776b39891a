"""
Utilities Package for the Batch Transcoder.

Helpers that are not specific to any single stage of the pipeline.

Modules:
    - format_utils.py: Human-readable durations and sizes, and suffix matching
      used by discovery.
    - external_tools.py: Verifies that the external ffmpeg/ffprobe tools are
      reachable before a run starts.
"""
