"""
Small formatting and matching helpers shared by logging and discovery.
"""

from datetime import timedelta
from typing import Iterable, Optional

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_timedelta(td_object: timedelta) -> str:
    """Renders a duration as "HH:MM:SS"; anything that is not a timedelta gives "00:00:00"."""
    if not isinstance(td_object, timedelta):
        return "00:00:00"
    minutes, seconds = divmod(int(td_object.total_seconds()), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def formatted_size(size_bytes: int) -> str:
    """
    Human-readable size of an output file.

    Bytes are shown as an integer, larger units with two decimals and
    trailing ".00" removed: 512 -> "512 B", 1536 -> "1.50 KB", 2 MiB -> "2 MB".
    """
    size = float(max(size_bytes, 0))
    for unit in SIZE_UNITS:
        if size < 1024 or unit == SIZE_UNITS[-1]:
            break
        size /= 1024
    if unit == "B":
        return f"{int(size)} B"
    return f"{size:.2f} {unit}".replace(".00", "")


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    """Lowercases extensions and makes sure each starts with a dot."""
    return tuple(
        ext.lower() if ext.startswith(".") else f".{ext.lower()}"
        for ext in extensions
        if ext
    )


def matching_extension(file_name: str, extensions: Iterable[str]) -> Optional[str]:
    """
    Returns the first extension the full file name ends with (case-insensitive).

    Unlike `Path.suffix`, this compares against the whole name, so multi-part
    extensions such as ".tar.gz" also match.

    Args:
        file_name: The base name of the file (no directory part).
        extensions: Extensions to check, with or without a leading dot.

    Returns:
        The matching normalized extension, or None if nothing matches.
    """
    lowered = file_name.lower()
    for ext in normalize_extensions(extensions):
        if lowered.endswith(ext):
            return ext
    return None
