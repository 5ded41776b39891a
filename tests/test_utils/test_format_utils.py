"""Tests for batch_transcoder.utils.format_utils"""

from datetime import timedelta

from batch_transcoder.utils.format_utils import (
    format_timedelta,
    formatted_size,
    matching_extension,
    normalize_extensions,
)


class TestFormatTimedelta:
    def test_hours_minutes_seconds(self):
        assert format_timedelta(timedelta(seconds=7261)) == "02:01:01"

    def test_invalid_input(self):
        assert format_timedelta(12) == "00:00:00"


class TestFormattedSize:
    def test_units(self):
        assert formatted_size(0) == "0 B"
        assert formatted_size(512) == "512 B"
        assert formatted_size(1536) == "1.50 KB"
        assert formatted_size(2 * 1024 * 1024) == "2 MB"


class TestExtensions:
    def test_normalize(self):
        assert normalize_extensions(["MP3", ".Flac", ""]) == (".mp3", ".flac")

    def test_matching_is_case_insensitive(self):
        assert matching_extension("Track.MP3", [".mp3"]) == ".mp3"

    def test_multi_part_extension(self):
        assert matching_extension("archive.tar.gz", ["gz", ".tar.gz"]) == ".gz"
        assert matching_extension("archive.tar.gz", [".tar.gz"]) == ".tar.gz"

    def test_no_match(self):
        assert matching_extension("song.mp3.bak", [".mp3"]) is None
