"""
This module provides the Modules class to locate and verify the external tools
the decoder depends on: ffmpeg and ffprobe.
"""
import subprocess
import sys

from loguru import logger

from ..config.common import MODULE_PATH

REQUIRED_TOOLS = ("ffmpeg", "ffprobe")


class Modules:
    """
    A utility class for the external ffmpeg/ffprobe executables.

    It reads the `ffmpeg_dir` from the user's `config.user.yaml` to locate the
    executables, with a fallback to the system's PATH if no specific path is
    configured.
    """

    @staticmethod
    def get_tool_path(tool_name: str) -> str:
        """
        Determines the command or absolute path to use for `tool_name`.

        The configured `ffmpeg_dir` is preferred. If it is not set, or the tool
        is missing from it, the bare name is returned so the system PATH is used.
        Platform-specific executable names (".exe" on Windows) are handled.
        """
        exe_name = f"{tool_name}.exe" if sys.platform == "win32" else tool_name

        if MODULE_PATH and MODULE_PATH.is_dir():
            configured_path = MODULE_PATH / exe_name
            if configured_path.is_file():
                logger.trace(f"Using {tool_name} from configured path: '{configured_path}'")
                return str(configured_path)
            logger.warning(
                f"`ffmpeg_dir` is configured, but '{exe_name}' was not found there. Falling back to system PATH."
            )

        return tool_name

    @staticmethod
    def verify_tool(tool_name: str) -> bool:
        """
        Runs `<tool> -version` and reports whether the tool can be executed.

        The first line of the version output is logged on success, a detailed
        error otherwise.
        """
        tool_cmd = Modules.get_tool_path(tool_name)
        try:
            result = subprocess.run(
                [tool_cmd, "-version"],
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"{tool_name} version command failed (return code {e.returncode}):\n{e.stderr}")
            return False
        except FileNotFoundError:
            logger.error(
                f"{tool_name} command not found. Please ensure FFmpeg is installed and accessible.\n"
                "You can either add it to your system's PATH or specify its location in the 'config.user.yaml' file."
            )
            return False

        version_output_lines = result.stdout.splitlines()
        first_line = version_output_lines[0] if version_output_lines else "<no output>"
        logger.debug(f"{tool_name} version check successful: {first_line}")
        return True

    @staticmethod
    def run_all() -> bool:
        """Verifies every required tool. Returns False if any is unusable."""
        return all([Modules.verify_tool(tool) for tool in REQUIRED_TOOLS])
