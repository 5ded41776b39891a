"""
Provides the discovery service for the initial phase of the pipeline.

The `DiscoveryWalker` scans an input tree for source audio files. Discovery is
all-or-nothing: the batch coordinator needs the complete set of tasks before it
launches any of them, so any traversal error aborts discovery with a
`DiscoveryWalkException` instead of returning a partial listing.
"""

import os
from pathlib import Path
from typing import Iterable, Iterator, Tuple

from loguru import logger

from ..config.audio import SOURCE_EXTENSIONS
from ..domain.exceptions import DiscoveryWalkException
from ..domain.media import SourceFile
from ..utils.format_utils import matching_extension, normalize_extensions


class DiscoveryWalker:
    """
    Recursively enumerates source files under a root directory.

    Only regular files whose full name ends with one of the configured
    extensions (case-insensitive) are yielded. Directories are traversed, never
    yielded. Names are visited in sorted order so repeated runs over the same
    tree discover files in the same order.

    Attributes:
        root (Path): The directory to scan.
        extensions (Tuple[str, ...]): Normalized extensions to match.
    """

    def __init__(self, root: Path, extensions: Iterable[str] = SOURCE_EXTENSIONS):
        self.root = Path(root)
        self.extensions: Tuple[str, ...] = normalize_extensions(extensions)
        if not self.extensions:
            raise ValueError("DiscoveryWalker needs at least one extension to match.")

    def _raise_walk_error(self, error: OSError):
        raise DiscoveryWalkException(
            f"Error walking through directory {error.filename or self.root}: {error.strerror or error}"
        ) from error

    def walk(self) -> Iterator[SourceFile]:
        """
        Lazily yields a `SourceFile` for every matching file in the tree.

        Raises:
            DiscoveryWalkException: If the root is missing or not a directory,
                or if any directory in the tree cannot be read.
        """
        if not self.root.exists():
            raise DiscoveryWalkException(f"Input directory does not exist: {self.root}")
        if not self.root.is_dir():
            raise DiscoveryWalkException(f"Input path is not a directory: {self.root}")

        for dir_path, dir_names, file_names in os.walk(self.root, onerror=self._raise_walk_error):
            dir_names.sort()
            for file_name in sorted(file_names):
                extension = matching_extension(file_name, self.extensions)
                if extension is None:
                    continue
                file_path = Path(dir_path) / file_name
                if not file_path.is_file():
                    logger.trace(f"Skipping non-regular file: {file_path}")
                    continue
                yield SourceFile(path=file_path, extension=extension)

    def discover(self) -> Tuple[SourceFile, ...]:
        """Materializes `walk()`. Nothing is returned unless the whole tree was read."""
        sources = tuple(self.walk())
        logger.debug(f"Discovered {len(sources)} source file(s) under {self.root}")
        return sources
