"""
dupelink: reclaim disk space by replacing duplicate files with hardlinks.

Core features:
- Content digests (MD5 by default, SHA-256 or xxHash64 on request) bucket candidate files
- Every candidate pair is confirmed byte for byte before anything is changed
- Duplicates are replaced atomically (temporary link + rename), never deleted
- The first file discovered in each group of identical files is always kept
"""

from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("dupelink")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from dupelink.commands import DeduplicationCommand
from dupelink.core import (
    Catalog, DeduplicatorImpl, DeduplicationParams, DeduplicationStats,
    HashAlgorithmName, LinkOutcome, LinkResult,
    DupelinkError, DiscoveryError, DigestError, VerificationError, ConsolidationError)
from dupelink.utils.convert_utils import ConvertUtils

__all__ = [
    "DeduplicationCommand",
    "Catalog",
    "DeduplicatorImpl",
    "DeduplicationParams",
    "DeduplicationStats",
    "HashAlgorithmName",
    "LinkOutcome",
    "LinkResult",
    "DupelinkError",
    "DiscoveryError",
    "DigestError",
    "VerificationError",
    "ConsolidationError",
    "ConvertUtils",
    "__version__",
]
