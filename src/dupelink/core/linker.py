"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/linker.py
Atomic replacement of a duplicate file with a hardlink to the retained copy.

PROTOCOL
--------
1. Create a uniquely named temporary directory next to `to_replace`
   (same parent, therefore same filesystem).
2. Hardlink `link_target` into that directory. `link_target` is not modified.
3. os.replace() the temporary link onto `to_replace`. This is a single rename:
   the path always resolves to either the old file or the new link.
4. Remove the temporary link (if still there) and the temporary directory.

Step 4 runs on every exit path. A failure in steps 1-3 leaves `to_replace`
untouched and is reported as ConsolidationError. A failure in step 4 is only
logged: the outcome was already decided by step 3.

An interrupted run can leave a `.dupelink-*` directory holding one extra link
to existing data. find_orphaned_temp_dirs() and clean_orphaned_temp_dir()
deal with those leftovers.
"""

import os
import tempfile
import logging
from contextlib import contextmanager
from typing import Iterator, List

from dupelink.core.errors import ConsolidationError
from dupelink.core.interfaces import Linker

logger = logging.getLogger(__name__)

TEMP_DIR_PREFIX = ".dupelink-"
TEMP_LINK_NAME = "link"


@contextmanager
def temp_sibling_dir(path: str) -> Iterator[str]:
    """
    Yields a fresh directory in the same parent as `path`; removes it on exit.
    Removal failures are logged, never raised.
    """
    parent = os.path.dirname(os.path.abspath(path))
    temp_dir = tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=parent)
    try:
        yield temp_dir
    finally:
        try:
            os.rmdir(temp_dir)
        except OSError as e:
            logger.warning(f"Cannot delete temporary directory {temp_dir}: {e}")


@contextmanager
def temp_link(link_path: str, target: str) -> Iterator[str]:
    """
    Creates a hardlink `link_path` -> `target`; unlinks it on exit if it
    is still there (it is gone after a successful move).
    """
    os.link(target, link_path)
    try:
        yield link_path
    finally:
        if os.path.lexists(link_path):
            try:
                os.unlink(link_path)
            except OSError as e:
                logger.warning(f"Cannot delete temporary link {link_path}: {e}")


class LinkerImpl(Linker):
    """Performs the four-step replacement protocol."""

    def consolidate(self, link_target: str, to_replace: str) -> None:
        """
        Makes `to_replace` a hardlink to `link_target`.

        Raises:
            ConsolidationError: If the temp directory, the link or the rename
                cannot be created. `to_replace` is unchanged in that case.
        """
        try:
            with temp_sibling_dir(to_replace) as temp_dir:
                link_path = os.path.join(temp_dir, TEMP_LINK_NAME)
                with temp_link(link_path, link_target):
                    logger.debug(f"Moving {link_path} to {to_replace}")
                    os.replace(link_path, to_replace)
        except OSError as e:
            raise ConsolidationError(link_target, to_replace, str(e)) from e

        logger.info(f"Linked {to_replace} -> {link_target}")


def find_orphaned_temp_dirs(root: str) -> List[str]:
    """Temporary directories left behind by an interrupted run, under `root`."""
    found = []
    for current, dirs, _files in os.walk(root):
        for name in sorted(dirs):
            if name.startswith(TEMP_DIR_PREFIX):
                found.append(os.path.join(current, name))
        dirs[:] = [d for d in dirs if not d.startswith(TEMP_DIR_PREFIX)]
    return found


def clean_orphaned_temp_dir(temp_dir: str) -> bool:
    """
    Removes a leftover temporary directory.

    A leftover link is only unlinked while some other name still references its
    data (link count above one), so no file content can be lost. Returns True
    if the directory was removed.
    """
    removed_all = True
    for name in os.listdir(temp_dir):
        path = os.path.join(temp_dir, name)
        try:
            st = os.lstat(path)
        except OSError as e:
            logger.warning(f"Cannot inspect {path}: {e}")
            removed_all = False
            continue
        if st.st_nlink > 1 and not os.path.isdir(path):
            os.unlink(path)
            logger.info(f"Removed leftover link {path}")
        else:
            logger.warning(f"Keeping {path}: it is the only name of its data")
            removed_all = False

    if not removed_all:
        return False
    os.rmdir(temp_dir)
    logger.info(f"Removed leftover directory {temp_dir}")
    return True
