"""Tests for batch_transcoder.config.common"""

from pathlib import Path

import pytest

from batch_transcoder.config.common import (
    config_section,
    load_user_config,
    setting_flag,
    setting_int,
    setting_path,
)


class TestLoadUserConfig:
    def test_missing_file(self, temp_dir):
        assert load_user_config(temp_dir / "config.user.yaml") == {}

    def test_valid_file(self, temp_dir):
        path = temp_dir / "config.user.yaml"
        path.write_text("transcode:\n  workers: 8\n", encoding="utf-8")
        assert load_user_config(path) == {"transcode": {"workers": 8}}

    def test_broken_yaml_falls_back(self, temp_dir, log_messages):
        path = temp_dir / "config.user.yaml"
        path.write_text("transcode: [unclosed\n", encoding="utf-8")
        assert load_user_config(path) == {}
        assert any("Could not load or parse" in m for m in log_messages)

    def test_section_must_be_a_mapping(self, log_messages):
        assert config_section({"transcode": ["workers", 2]}, "transcode") == {}
        assert config_section({}, "transcode") == {}
        assert any("not a mapping" in m for m in log_messages)


class TestSettingInt:
    """Invalid integers warn and fall back instead of crashing at import"""

    def test_valid_value(self):
        assert setting_int({"workers": 8}, "workers", 4, minimum=0) == 8
        assert setting_int({"workers": "0"}, "workers", 4, minimum=0) == 0

    def test_missing_value(self):
        assert setting_int({}, "workers", 4, minimum=0) == 4

    @pytest.mark.parametrize("value", ["four", [2], {"n": 2}, True])
    def test_non_integer_falls_back(self, value, log_messages):
        assert setting_int({"workers": value}, "workers", 4, minimum=0) == 4
        assert any("Invalid value for 'workers'" in m for m in log_messages)

    def test_negative_workers_fall_back(self, log_messages):
        assert setting_int({"workers": -1}, "workers", 4, minimum=0) == 4
        assert any("must be at least 0" in m for m in log_messages)

    def test_zero_block_size_falls_back(self, log_messages):
        assert setting_int({"block_size": 0}, "block_size", 1024, minimum=1) == 1024
        assert any("must be at least 1" in m for m in log_messages)


class TestSettingFlagAndPath:
    def test_flag(self, log_messages):
        assert setting_flag({"keep_partial_output": True}, "keep_partial_output", False) is True
        assert setting_flag({"keep_partial_output": "yes"}, "keep_partial_output", False) is False
        assert any("Invalid value for 'keep_partial_output'" in m for m in log_messages)

    def test_path(self, log_messages):
        assert setting_path({"input_dir": "music"}, "input_dir", Path("./data")) == Path("music")
        assert setting_path({"input_dir": ""}, "input_dir", Path("./data")) == Path("./data")
        assert setting_path({"input_dir": 5}, "input_dir", Path("./data")) == Path("./data")
        assert setting_path({}, "ffmpeg_dir", None) is None
        assert any("Invalid path for 'input_dir'" in m for m in log_messages)
