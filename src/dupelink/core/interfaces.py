"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/interfaces.py

Defines core interfaces (Protocols) used throughout the consolidation engine.
These protocols use structural typing (`typing.Protocol`) so alternative
implementations can be injected in tests without inheritance.

Key Components:
---------------
- HashAlgorithm: Incremental hash accumulator factory (MD5, SHA-256, xxHash64).
- Hasher: Computes a stable content fingerprint of a file.
- FileScanner: Walks root directories and yields regular-file paths.
- CandidateVerifier: Authoritative byte-exact comparison of two entries.
- Linker: Atomically replaces a path with a hardlink to another path.
- Deduplicator: Drives digest -> bucket -> verify -> consolidate.
"""

from typing import Protocol, List, Dict, Iterator, Optional, Callable, Tuple
from dupelink.core.models import Entry, LinkResult, DeduplicationStats


# ===== Interfaces =====

class HashAccumulator(Protocol):
    """Object returned by HashAlgorithm.new(); mirrors the hashlib API."""
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for incremental hash algorithms.

    Allows plugging in different hashing functions like MD5, SHA-256 or xxHash
    without affecting the rest of the pipeline.
    """
    name: str

    def new(self) -> HashAccumulator:
        """Returns a fresh accumulator."""
        ...


class Hasher(Protocol):
    """Interface for computing the content fingerprint of a file."""
    def compute_digest(self, path: str) -> str: ...


class FileScanner(Protocol):
    """
    Interface for walking one root directory.

    Methods:
        scan: Yields regular-file paths in a stable order.
    """
    def scan(self, root: str) -> Iterator[str]:
        """
        Raises:
            DiscoveryError: if the root itself cannot be enumerated.
        """
        ...


class CandidateVerifier(Protocol):
    """Single source of truth for "are these two files byte-identical"."""
    def is_duplicate_of(self, a: Entry, b: Entry) -> bool: ...


class Linker(Protocol):
    """Makes `to_replace` resolve to the same storage as `link_target`."""
    def consolidate(self, link_target: str, to_replace: str) -> None: ...


class Deduplicator(Protocol):
    """
    Interface for the orchestration engine.

    Coordinates phases 2-4 (digest, group, verify + consolidate) over an
    already populated catalog.
    """
    def run(
        self,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[List[LinkResult], DeduplicationStats]:
        """
        Returns:
            A tuple containing:
                - One LinkResult per verified duplicate pair
                - Statistics collected during processing
        """
        ...

    def group(self) -> Dict[str, List[Entry]]:
        """Digest bucket map, built once per run."""
        ...
