"""
Core consolidation engine: scanner, hasher, catalog, grouper, verifier, linker and orchestrator.

This package contains the correctness-critical foundation of dupelink:
- FileScannerImpl: recursive directory traversal with size/exclusion filters
- HasherImpl + Md5AlgorithmImpl / Sha256AlgorithmImpl / XXHashAlgorithmImpl: streamed content digests
- Catalog: discovery-ordered entries with memoized digest and physical identity
- group_by_digest: digest bucket map
- CandidateVerifierImpl: byte-exact comparison via memory maps
- LinkerImpl: crash-safe hardlink replacement (temp dir + link + atomic rename)
- DeduplicatorImpl: digest -> group -> verify -> link pipeline

All components are pure Python with no GUI dependencies.
"""

from .errors import DupelinkError, DiscoveryError, DigestError, VerificationError, ConsolidationError
from .scanner import FileScannerImpl
from .hasher import HasherImpl, Md5AlgorithmImpl, Sha256AlgorithmImpl, XXHashAlgorithmImpl, algorithm_for
from .catalog import Catalog
from .grouper import group_by_digest, duplicate_candidates
from .verifier import CandidateVerifierImpl
from .linker import LinkerImpl, find_orphaned_temp_dirs, clean_orphaned_temp_dir
from .deduplicator import DeduplicatorImpl
from .models import (
    Entry, DigestBucket, LinkResult, LinkOutcome, HashAlgorithmName,
    DeduplicationParams, DeduplicationStats)

__all__ = [
    "DupelinkError",
    "DiscoveryError",
    "DigestError",
    "VerificationError",
    "ConsolidationError",
    "FileScannerImpl",
    "HasherImpl",
    "Md5AlgorithmImpl",
    "Sha256AlgorithmImpl",
    "XXHashAlgorithmImpl",
    "algorithm_for",
    "Catalog",
    "group_by_digest",
    "duplicate_candidates",
    "CandidateVerifierImpl",
    "LinkerImpl",
    "find_orphaned_temp_dirs",
    "clean_orphaned_temp_dir",
    "DeduplicatorImpl",
    "Entry",
    "DigestBucket",
    "LinkResult",
    "LinkOutcome",
    "HashAlgorithmName",
    "DeduplicationParams",
    "DeduplicationStats",
]
