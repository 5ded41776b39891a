"""Tests for batch_transcoder.cli and the main entry point"""

import pytest

import main
from batch_transcoder.cli import get_args
from batch_transcoder.config.audio import SAMPLE_BLOCK_SIZE, SOURCE_EXTENSIONS
from batch_transcoder.config.common import DEFAULT_MAX_WORKERS


class TestGetArgs:
    def test_defaults(self):
        args = get_args([])
        assert args.workers == DEFAULT_MAX_WORKERS
        assert args.extensions == list(SOURCE_EXTENSIONS)
        assert args.block_size == SAMPLE_BLOCK_SIZE
        assert args.log_level == "INFO"
        assert not args.debug_mode

    def test_flags(self):
        args = get_args(
            [
                "--input-dir", "in", "--output-dir", "out", "--workers", "0",
                "--extension", ".mp3", "--extension", "MP2", "--block-size", "4096",
                "--keep-partial-output", "--debug",
            ]
        )
        assert (args.input_dir, args.output_dir) == ("in", "out")
        assert args.workers == 0
        assert args.extensions == [".mp3", "MP2"]
        assert args.block_size == 4096
        assert args.keep_partial_output
        assert args.debug_mode

    @pytest.mark.parametrize("argv", [["--workers", "-1"], ["--block-size", "0"], ["--log-level", "LOUD"]])
    def test_invalid_values_exit(self, argv):
        with pytest.raises(SystemExit):
            get_args(argv)


class TestMainExitCodes:
    """Test the process exit code of a run"""

    @pytest.fixture
    def tools_available(self, monkeypatch):
        monkeypatch.setattr(main.Modules, "run_all", staticmethod(lambda: True))

    def test_missing_tools(self, input_dir, output_dir, monkeypatch):
        monkeypatch.setattr(main.Modules, "run_all", staticmethod(lambda: False))
        assert main.main(["--input-dir", str(input_dir), "--output-dir", str(output_dir)]) == main.EXIT_RUN_ERROR

    def test_missing_input_dir(self, temp_dir, output_dir, tools_available):
        argv = ["--input-dir", str(temp_dir / "missing"), "--output-dir", str(output_dir)]
        assert main.main(argv) == main.EXIT_RUN_ERROR

    def test_empty_input_dir(self, input_dir, output_dir, tools_available):
        argv = ["--input-dir", str(input_dir), "--output-dir", str(output_dir)]
        assert main.main(argv) == main.EXIT_OK
        assert (output_dir / "transcode_report.yaml").exists()

    @pytest.mark.parametrize("setting, value", [("workers", -1), ("block_size", 0)])
    def test_invalid_settings_are_run_errors(
        self, input_dir, output_dir, tools_available, monkeypatch, setting, value
    ):
        """Settings rejected by the coordinator exit with 2, not with the partial-failure code"""
        args = get_args(["--input-dir", str(input_dir), "--output-dir", str(output_dir)])
        setattr(args, setting, value)
        monkeypatch.setattr(main, "get_args", lambda argv=None: args)

        assert main.main([]) == main.EXIT_RUN_ERROR
