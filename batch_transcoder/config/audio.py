"""
Configuration settings related to audio processing.

This module defines the recognized input extensions, the size of the raw sample
blocks pulled from the decoder, and the fixed format of the output container.
"""
from .common import USER_TRANSCODE_SETTINGS, setting_int

# ======================================================================================
# Audio File Identification
# ======================================================================================

# Files whose full name ends with one of these suffixes (case-insensitive) are
# picked up by discovery.
SOURCE_EXTENSIONS = (".mp3",)

# Extension given to every converted file.
OUTPUT_EXTENSION = ".wav"


# ======================================================================================
# Decoding Parameters
# ======================================================================================

# Maximum number of raw bytes pulled from the decoder per read.
SAMPLE_BLOCK_SIZE = setting_int(USER_TRANSCODE_SETTINGS, "block_size", 1024, minimum=1)

# Raw PCM layout requested from ffmpeg: interleaved little-endian signed 16-bit.
DECODER_SAMPLE_FORMAT = "s16le"
DECODER_CODEC = "pcm_s16le"


# ======================================================================================
# Output Container Format
# ======================================================================================

# These are fixed policy, not derived from the source. Mono sources are upmixed
# by the decoder so the data matches the declared channel count.
OUTPUT_BIT_DEPTH = 16
OUTPUT_CHANNELS = 2
OUTPUT_CONTAINER_FORMAT = "WAV"
OUTPUT_SUBTYPE = "PCM_16"

# WAVE_FORMAT_PCM
OUTPUT_AUDIO_FORMAT_TAG = 1

BYTES_PER_SAMPLE = OUTPUT_BIT_DEPTH // 8
