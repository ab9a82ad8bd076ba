"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Partitions catalog entries into buckets keyed by content digest.
"""

from typing import List, Dict, Iterable, Any, Callable

from dupelink.core.catalog import Catalog
from dupelink.core.models import Entry, DigestBucket


def group_by_digest(entries: Iterable[Entry], catalog: Catalog) -> Dict[str, List[Entry]]:
    """
    Groups entries by digest.

    Every entry lands in exactly one bucket. Buckets keep discovery order, and
    the dict itself is ordered by the first entry seen for each digest.
    Singleton buckets are kept; see duplicate_candidates().
    """
    return _group_by(entries, catalog.get_digest)


def duplicate_candidates(buckets: Dict[str, List[Entry]]) -> List[DigestBucket]:
    """Buckets with at least two entries, in bucket order."""
    result = []
    for digest, entries in buckets.items():
        bucket = DigestBucket(digest=digest, entries=entries)
        if bucket.is_candidate():
            result.append(bucket)
    return result


def _group_by(entries: Iterable[Entry], key_func: Callable[[Entry], Any]) -> Dict[Any, List[Entry]]:
    """
    Helper to group entries by any computed key.
    Errors from key_func propagate to the caller.
    """
    groups: Dict[Any, List[Entry]] = {}
    for entry in entries:
        groups.setdefault(key_func(entry), []).append(entry)
    return groups
