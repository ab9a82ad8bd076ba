"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/catalog.py
Insertion-ordered repository of discovered entries.

Entries are only ever appended (during discovery) and never removed. Digest and
physical identity are computed lazily on first request and then cached for the
rest of the run; neither is re-validated against the filesystem afterwards.
"""

import os
import logging
from typing import List, Iterator

from dupelink.core.errors import DupelinkError
from dupelink.core.hasher import HasherImpl
from dupelink.core.interfaces import Hasher
from dupelink.core.models import Entry, PhysicalIdentity

logger = logging.getLogger(__name__)


class Catalog:
    """
    Holds one Entry per registered path, in discovery order.

    The caller is responsible for not registering the same path twice.
    """

    def __init__(self, hasher: Hasher = None):
        self.hasher = hasher or HasherImpl()
        self._entries: List[Entry] = []

    def add(self, path: str) -> Entry:
        """Registers a new entry for `path`. No file content is read here."""
        entry = Entry(path=str(path), index=len(self._entries))
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> List[Entry]:
        """Snapshot of the entries in discovery order."""
        return list(self._entries)

    def get_digest(self, entry: Entry) -> str:
        """
        Returns the memoized digest, computing it on first call.

        Raises:
            DigestError: If the file cannot be read.
        """
        if entry.digest is not None:
            return entry.digest
        with entry.lock:
            if entry.digest is None:
                entry.digest = self.hasher.compute_digest(entry.path)
        return entry.digest

    def get_physical_identity(self, entry: Entry) -> PhysicalIdentity:
        """
        Returns the memoized (st_dev, st_ino) of the file at entry.path.
        The stat is taken at first request; later link changes are not seen.
        """
        if entry.identity is not None:
            return entry.identity
        with entry.lock:
            if entry.identity is None:
                try:
                    stat_result = os.stat(entry.path)
                except OSError as e:
                    raise DupelinkError(f"Cannot get inode of {entry.path}: {e}") from e
                entry.identity = (stat_result.st_dev, stat_result.st_ino)
                entry.size = stat_result.st_size
        return entry.identity

    def set_physical_identity(self, entry: Entry, identity: PhysicalIdentity) -> None:
        """Records the identity an entry has after its path was relinked."""
        with entry.lock:
            entry.identity = identity

    def same_physical_storage(self, a: Entry, b: Entry) -> bool:
        """True iff both entries resolve to the same storage object."""
        return self.get_physical_identity(a) == self.get_physical_identity(b)

    def __len__(self):
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __repr__(self):
        return f"<Catalog({len(self._entries)} entries)>"
