"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Walks root directories and yields the regular files to register.
Features:
- Uses os.walk for fast traversal, pathlib for path handling
- Skips symbolic links (a hardlink must replace a real file, not a link to one)
- Skips excluded directories and leftover temporary link directories
- Applies optional size filters (empty files are kept by default)
- Sorts directory listings by name so discovery order is reproducible
"""

import os
import stat
import time
import logging
from pathlib import Path
from typing import List, Optional, Iterator

from dupelink.core.errors import DiscoveryError
from dupelink.core.interfaces import FileScanner
from dupelink.core.linker import TEMP_DIR_PREFIX

logger = logging.getLogger(__name__)


class FileScannerImpl(FileScanner):
    """
    Yields regular-file paths under a root directory.

    Attributes:
        min_size: Minimum file size in bytes (optional)
        max_size: Maximum file size in bytes (optional)
        excluded_dirs: Directories that are never entered
    """

    def __init__(
        self,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
        excluded_dirs: Optional[List[str]] = None
    ):
        self.min_size = min_size
        self.max_size = max_size
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []

    def scan(self, root: str) -> Iterator[str]:
        """
        Yields matching file paths under `root`, depth first, sorted by name.

        Raises:
            DiscoveryError: If `root` is missing, not a directory or unreadable.
        """
        root_path = Path(root)
        logger.debug(f"Root directory: {root}")
        logger.debug(f"Filters: min_size={self.min_size}, max_size={self.max_size}")

        if not root_path.exists():
            raise DiscoveryError(root, "directory does not exist")
        if not root_path.is_dir():
            raise DiscoveryError(root, "not a directory")
        if not os.access(root_path, os.R_OK | os.X_OK):
            raise DiscoveryError(root, "permission denied")

        start_time = time.time()
        accepted = 0

        def on_error(error: OSError):
            logger.warning(f"Cannot list directory: {error}")

        for current, dirs, files in os.walk(str(root_path), onerror=on_error):
            # Pre-filter subdirectories BEFORE os.walk enters them
            dirs[:] = sorted(d for d in dirs if self._prefilter_dirs(Path(current) / d))

            for filename in sorted(files):
                path = Path(current) / filename
                if self._accept_file(path):
                    accepted += 1
                    yield str(path)

        logger.debug(f"Scan of {root} took {time.time() - start_time:.2f} seconds, {accepted} files accepted")

    @staticmethod
    def _is_excluded_directory(path: Path, excluded_dirs: List[str]) -> bool:
        """Check if path is within an excluded directory."""
        try:
            path_str = str(path.resolve(strict=False))
            for excluded_dir in excluded_dirs:
                normalized_excluded = os.path.normpath(excluded_dir)
                if path_str.startswith(normalized_excluded + os.sep) or \
                        path_str == normalized_excluded:
                    return True
            return False
        except (OSError, ValueError):
            return False

    def _prefilter_dirs(self, path: Path) -> bool:
        """Skip symlinked, excluded, temporary and inaccessible directories."""
        if path.name.startswith(TEMP_DIR_PREFIX):
            logger.debug(f"Skipping temporary link directory: {path}")
            return False

        if path.is_symlink():
            logger.debug(f"Skipping symbolic link: {path}")
            return False

        if self.excluded_dirs and self._is_excluded_directory(path, self.excluded_dirs):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        try:
            return path.is_dir() and os.access(path, os.R_OK | os.X_OK)
        except OSError:
            logger.debug(f"Skipping inaccessible directory: {path}")
            return False

    def _accept_file(self, path: Path) -> bool:
        """True if `path` is a regular file (not a link) within the size limits."""
        try:
            stat_result = path.lstat()
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return False

        if stat.S_ISLNK(stat_result.st_mode):
            logger.debug(f"Skipping symbolic link: {path}")
            return False

        if not stat.S_ISREG(stat_result.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return False

        if not self._size_passes(stat_result.st_size):
            logger.debug(f"Skipping {path} (size {stat_result.st_size} bytes outside range)")
            return False

        return True

    def _size_passes(self, size: int) -> bool:
        if self.min_size is not None and size < self.min_size:
            return False
        if self.max_size is not None and size > self.max_size:
            return False
        return True
