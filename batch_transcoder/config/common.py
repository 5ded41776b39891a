"""
Common configuration settings used throughout the application.

This module contains globally shared configuration settings and constants that are
used across the Batch Transcoder. It centralizes parameters for logging, report
files, worker pool sizing and per-file state tracking. It also handles the loading
of user-specific configuration from an external YAML file, allowing for easy
customization without modifying the source code.
"""
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


def load_user_config(config_path: Path) -> Dict[str, Any]:
    """
    Reads the optional user configuration file.

    Args:
        config_path: Path to a YAML file with optional `paths` and `transcode`
                     sections.

    Returns:
        The parsed mapping, or an empty dict if the file is missing, empty or
        could not be parsed.
    """
    if not config_path.is_file():
        logger.debug(f"User config '{config_path}' not found. Using built-in defaults.")
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{config_path}': {e}")
        return {}
    if not isinstance(loaded, dict):
        if loaded is not None:
            logger.warning(f"User config '{config_path}' is not a mapping. Ignoring it.")
        return {}
    return loaded


def config_section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Returns a top-level section of the user config, or {} if it is absent or not a mapping."""
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        logger.warning(f"Section '{name}' of the user config is not a mapping. Ignoring it.")
        return {}
    return section


def setting_int(settings: Dict[str, Any], key: str, default: int, minimum: int) -> int:
    """
    Reads an integer setting, falling back to `default` with a warning when the
    value is not an integer or is below `minimum`.
    """
    value = settings.get(key)
    if value is None:
        return default
    try:
        if isinstance(value, bool):
            raise TypeError(f"{value!r} is a boolean")
        number = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value for '{key}' in user config: {value!r}. Using default {default}.")
        return default
    if number < minimum:
        logger.warning(
            f"Value for '{key}' in user config must be at least {minimum}, got {number}. Using default {default}."
        )
        return default
    return number


def setting_flag(settings: Dict[str, Any], key: str, default: bool) -> bool:
    """Reads a boolean setting; anything but true/false falls back to `default` with a warning."""
    value = settings.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        logger.warning(f"Invalid value for '{key}' in user config: {value!r}. Using default {default}.")
        return default
    return value


def setting_path(settings: Dict[str, Any], key: str, default: Optional[Path]) -> Optional[Path]:
    """Reads a path setting; empty or non-string values fall back to `default`."""
    value = settings.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        logger.warning(f"Invalid path for '{key}' in user config: {value!r}. Using default {default}.")
        return default
    return Path(value)


# --- User-Defined Configuration ---
# This block loads user-specific settings from a 'config.user.yaml' file located
# at the project root. Missing keys fall back to the defaults below.

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

_user_config = load_user_config(USER_CONFIG_PATH)
USER_PATH_SETTINGS: Dict[str, Any] = config_section(_user_config, "paths")
USER_TRANSCODE_SETTINGS: Dict[str, Any] = config_section(_user_config, "transcode")

# The directory containing the ffmpeg and ffprobe executables. If not provided,
# the application assumes the executables are available in the system's PATH.
MODULE_PATH: Optional[Path] = setting_path(USER_PATH_SETTINGS, "ffmpeg_dir", None)


# --- Logging Configuration ---

# The format string for the Loguru logger. Workers are threads, so the thread
# name identifies which task a line belongs to.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{thread.name} - <level>{message}</level>"
)

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR")


# --- Directory and File Management ---

# Root of the tree scanned for source files.
DEFAULT_INPUT_DIR = setting_path(USER_TRANSCODE_SETTINGS, "input_dir", Path("./data"))

# Flat directory receiving one output file per source file.
DEFAULT_OUTPUT_DIR = setting_path(USER_TRANSCODE_SETTINGS, "output_dir", Path("./converted"))

# Written into the output directory after every run.
REPORT_FILE_NAME = "transcode_report.yaml"
ERROR_LOG_FILE_NAME = "error.txt"

# Partially written outputs are deleted after a mid-stream failure unless this is set.
KEEP_PARTIAL_OUTPUT = setting_flag(USER_TRANSCODE_SETTINGS, "keep_partial_output", False)


# --- Concurrency ---

# Size of the worker pool. 0 launches one worker per task (unbounded fan-out).
DEFAULT_MAX_WORKERS = setting_int(USER_TRANSCODE_SETTINGS, "workers", 4, minimum=0)


# --- Transcode State Constants ---
# The states a single file passes through. `failed` is reachable from any
# non-terminal state and is absorbing.

STATE_PENDING = "pending"
STATE_OPEN = "open"
STATE_DECODING = "decoding"
STATE_ENCODING = "encoding"
STATE_CLOSED = "closed"
STATE_FAILED = "failed"
