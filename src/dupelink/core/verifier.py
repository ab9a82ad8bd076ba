"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/verifier.py
Byte-exact comparison of two catalog entries.

A shared digest only nominates a pair; this module decides. Files are compared
through read-only memory maps in fixed windows, so neither file is ever loaded
whole. Empty files never get a mapping (mmap rejects zero-length regions) and
compare equal to each other.
"""

import mmap
import os
import logging
from contextlib import contextmanager

from dupelink.core.catalog import Catalog
from dupelink.core.errors import DupelinkError, VerificationError
from dupelink.core.interfaces import CandidateVerifier

logger = logging.getLogger(__name__)

COMPARE_WINDOW = 1024 * 1024  # 1 MiB


@contextmanager
def mmap_open(path: str):
    """Memory-map a file for reading. Yields b'' for empty files."""
    with open(path, 'rb') as f:
        size = os.fstat(f.fileno()).st_size
        if size == 0:
            yield b""
        else:
            mm = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
            try:
                yield mm
            finally:
                mm.close()


def contents_equal(path1: str, path2: str, window: int = COMPARE_WINDOW) -> bool:
    """
    Compares the full contents of two files.

    Raises:
        OSError / ValueError: If either file cannot be opened or mapped.
    """
    with mmap_open(path1) as view1, mmap_open(path2) as view2:
        size = len(view1)
        if size != len(view2):
            return False
        for offset in range(0, size, window):
            if view1[offset:offset + window] != view2[offset:offset + window]:
                return False
    return True


class CandidateVerifierImpl(CandidateVerifier):
    """
    Verifies candidate pairs, short-circuiting pairs that already share storage.
    """

    def __init__(self, catalog: Catalog, window: int = COMPARE_WINDOW):
        self.catalog = catalog
        self.window = window

    def is_duplicate_of(self, a, b) -> bool:
        """
        True if `b` holds the same bytes as `a` but is a separate file.

        Raises:
            VerificationError: If either file cannot be opened or compared.
        """
        try:
            if self.catalog.same_physical_storage(a, b):
                logger.debug(f"Already linked: {a.path} and {b.path}")
                return False
        except DupelinkError as e:
            raise VerificationError(a.path, b.path, str(e)) from e

        try:
            return contents_equal(a.path, b.path, self.window)
        except (OSError, ValueError) as e:
            raise VerificationError(a.path, b.path, str(e)) from e
