"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for file discovery, digest bucketing and hardlink consolidation.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Union, Tuple


# =============================
# Enums
# =============================

class HashAlgorithmName(Enum):
    """
    Content fingerprint algorithm used by the digest engine.
    """
    MD5 = "md5"
    SHA256 = "sha256"
    XXH64 = "xxh64"

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    DISCOVERY = "Discovery"
    DIGEST = "Digest"
    GROUPING = "Grouping"
    CONSOLIDATION = "Consolidation"

    @classmethod
    def get_all(cls):
        return [cls.DISCOVERY, cls.DIGEST, cls.GROUPING, cls.CONSOLIDATION]


class LinkOutcome(Enum):
    LINKED = "linked"
    PLANNED = "planned"  # dry run
    FAILED = "failed"


# ======================
#  Core Data Models
# ======================

PhysicalIdentity = Tuple[int, int]  # (st_dev, st_ino)


class Entry:
    """
    One discovered file path.

    ``digest`` and ``identity`` start unset (None) and are assigned once by the
    catalog. ``lock`` serializes that first computation when several threads
    ask for the same entry.
    """

    __slots__ = ("path", "index", "digest", "identity", "size", "lock")

    def __init__(self, path: str, index: int):
        self.path = path
        self.index = index  # discovery order
        self.digest: Optional[str] = None
        self.identity: Optional[PhysicalIdentity] = None
        self.size: Optional[int] = None
        self.lock = threading.Lock()

    @property
    def has_digest(self) -> bool:
        return self.digest is not None

    def __repr__(self):
        return f"<Entry #{self.index} path={self.path}, digest={self.digest}, identity={self.identity}>"


@dataclass
class DigestBucket:
    """
    Entries sharing one content digest, in discovery order.
    Only buckets with two or more entries are duplicate candidates.
    """
    digest: str
    entries: List[Entry]

    @property
    def entry_count(self) -> int:
        return len(self.entries)

    def is_candidate(self) -> bool:
        """True if this bucket contains at least two entries."""
        return self.entry_count >= 2

    def __repr__(self):
        return f"<DigestBucket digest={self.digest}, count={len(self.entries)}>"


@dataclass
class LinkResult:
    """Outcome of one verified duplicate pair."""
    link_target: str
    replaced: str
    size: int
    outcome: LinkOutcome
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome in (LinkOutcome.LINKED, LinkOutcome.PLANNED)

    def __repr__(self):
        return f"<LinkResult {self.outcome.value} {self.replaced} -> {self.link_target}>"


@dataclass
class DeduplicationParams:
    """Parameters for a discovery + consolidation run, validated on creation."""
    roots: List[str]
    min_size_bytes: int = 0
    max_size_bytes: Optional[int] = None
    excluded_dirs: List[str] = field(default_factory=list)
    algorithm: HashAlgorithmName = HashAlgorithmName.MD5
    dry_run: bool = False
    skip_unreadable: bool = False
    workers: int = 1

    def __post_init__(self):
        if not self.roots:
            raise ValueError("At least one root directory is required")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.max_size_bytes is not None and self.max_size_bytes < self.min_size_bytes:
            raise ValueError("Maximum size cannot be less than minimum size")

        if self.workers < 1:
            raise ValueError("Number of workers must be at least 1")


class DeduplicationStats:
    """Counters and timings collected while a run progresses."""

    COUNTERS = (
        "files_registered",
        "digests_computed",
        "digest_failures",
        "buckets",
        "candidate_buckets",
        "comparisons",
        "verification_failures",
        "duplicates_found",
        "links_created",
        "link_failures",
        "bytes_reclaimed",
    )

    def __init__(self):
        self.total_time: float = 0.0
        self.stage_times: Dict[str, float] = {}
        self.counters: Dict[str, int] = {name: 0 for name in self.COUNTERS}
        self._lock = threading.Lock()

    def increment(self, counter: str, amount: int = 1) -> None:
        if counter not in self.counters:
            raise KeyError(f"Unknown counter: {counter}")
        with self._lock:
            self.counters[counter] += amount

    def update_stage(self, stage_name: str, duration: float) -> None:
        self.stage_times[stage_name] = self.stage_times.get(stage_name, 0.0) + duration

    def __getitem__(self, counter: str) -> Union[int, float]:
        return self.counters[counter]

    def print_summary(self) -> str:
        labels = {
            "files_registered": "Files registered",
            "digests_computed": "Digests computed",
            "digest_failures": "Unreadable files skipped",
            "buckets": "Digest buckets",
            "candidate_buckets": "Buckets with 2+ files",
            "comparisons": "Byte comparisons",
            "verification_failures": "Comparison errors",
            "duplicates_found": "Duplicates found",
            "links_created": "Hardlinks created",
            "link_failures": "Hardlink failures",
        }

        lines = [
            "Deduplication Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
        ]
        for stage, duration in self.stage_times.items():
            lines.append(f"{stage}: {duration:.3f}s")
        lines.append("")
        for key, label in labels.items():
            lines.append(f"{label}: {self.counters[key]}")

        return "\n".join(lines)
