"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/deduplicator.py
Drives a populated catalog through the consolidation pipeline:
    digest (every entry) -> bucket by digest -> verify + hardlink per bucket

Discovery must be complete before run() is called; the catalog is read-only
from here on. Inside one bucket, subjects and candidates are processed strictly
in discovery order, because each consolidation changes the physical identity
later comparisons see. Different buckets are independent and may run on
separate worker threads.
"""

import time
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Dict, Optional, Callable, Tuple

from dupelink.core.catalog import Catalog
from dupelink.core.errors import DigestError, VerificationError, ConsolidationError
from dupelink.core.grouper import group_by_digest, duplicate_candidates
from dupelink.core.interfaces import Deduplicator, CandidateVerifier, Linker
from dupelink.core.linker import LinkerImpl
from dupelink.core.models import (
    Entry, DigestBucket, LinkResult, LinkOutcome, DeduplicationStats, Stage)
from dupelink.core.verifier import CandidateVerifierImpl

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, Optional[int]], None]


# =============================
# Main Deduplicator Class
# =============================
class DeduplicatorImpl(Deduplicator):
    """
    Orchestrates phases 2-4 over a catalog.

    Args:
        catalog: Catalog filled during discovery
        verifier: Byte-exact comparator (defaults to CandidateVerifierImpl)
        linker: Replacement protocol (defaults to LinkerImpl)
        dry_run: Verify and report pairs without touching the filesystem
        skip_unreadable: Leave out entries whose digest fails instead of aborting
        workers: Thread count for digesting and for per-bucket processing
    """

    def __init__(
        self,
        catalog: Catalog,
        verifier: CandidateVerifier = None,
        linker: Linker = None,
        dry_run: bool = False,
        skip_unreadable: bool = False,
        workers: int = 1,
    ):
        self.catalog = catalog
        self.verifier = verifier or CandidateVerifierImpl(catalog)
        self.linker = linker or LinkerImpl()
        self.dry_run = dry_run
        self.skip_unreadable = skip_unreadable
        self.workers = max(1, workers)
        self.stats = DeduplicationStats()
        self._buckets: Optional[Dict[str, List[Entry]]] = None
        self._unreadable: List[Entry] = []

    def run(
        self,
        progress_callback: Optional[ProgressCallback] = None
    ) -> Tuple[List[LinkResult], DeduplicationStats]:
        """
        Main pipeline.

        Returns:
            Tuple[List[LinkResult], DeduplicationStats]

        Raises:
            DigestError: If a file cannot be read and skip_unreadable is False.
        """
        total_start_time = time.time()
        self.stats.increment("files_registered", len(self.catalog))

        start_time = time.time()
        self.compute_digests(progress_callback)
        self.stats.update_stage(Stage.DIGEST.value, time.time() - start_time)

        start_time = time.time()
        candidates = duplicate_candidates(self.group())
        self.stats.increment("candidate_buckets", len(candidates))
        self.stats.update_stage(Stage.GROUPING.value, time.time() - start_time)

        start_time = time.time()
        results = self.consolidate_buckets(candidates, progress_callback)
        self.stats.update_stage(Stage.CONSOLIDATION.value, time.time() - start_time)

        self.stats.total_time = time.time() - total_start_time
        return results, self.stats

    # ---------- phase 2 ----------

    def compute_digests(self, progress_callback: Optional[ProgressCallback] = None) -> None:
        """Computes (and memoizes) the digest of every entry."""
        entries = self.catalog.entries
        total = len(entries)
        logger.info(f"Getting the digests of {total} files...")

        if self.workers == 1:
            outcomes = map(self._digest_one, entries)
            self._collect_digests(outcomes, total, progress_callback)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                outcomes = executor.map(self._digest_one, entries)
                self._collect_digests(outcomes, total, progress_callback)

    def _collect_digests(self, outcomes, total: int, progress_callback: Optional[ProgressCallback]) -> None:
        for processed, ok in enumerate(outcomes, 1):
            if ok:
                self.stats.increment("digests_computed")
            else:
                self.stats.increment("digest_failures")
            if progress_callback:
                progress_callback(Stage.DIGEST.value, processed, total)

    def _digest_one(self, entry: Entry) -> bool:
        try:
            self.catalog.get_digest(entry)
            return True
        except DigestError as e:
            if not self.skip_unreadable:
                logger.error(str(e))
                raise
            logger.warning(f"Skipping unreadable file: {e}")
            self._unreadable.append(entry)
            return False

    # ---------- phase 3 ----------

    def group(self) -> Dict[str, List[Entry]]:
        """
        Builds the digest bucket map once; later calls return the same map.
        Entries whose digest could not be computed are not grouped.
        """
        if self._buckets is None:
            readable = [e for e in self.catalog if e.has_digest]
            self._buckets = group_by_digest(readable, self.catalog)
            self.stats.increment("buckets", len(self._buckets))
        return self._buckets

    @property
    def unreadable(self) -> List[Entry]:
        return list(self._unreadable)

    # ---------- phase 4 ----------

    def consolidate_buckets(
        self,
        buckets: List[DigestBucket],
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[LinkResult]:
        """Processes every candidate bucket; results come back in bucket order."""
        total = len(buckets)
        results: List[LinkResult] = []

        if self.workers == 1:
            per_bucket = map(self.consolidate_bucket, buckets)
            for processed, bucket_results in enumerate(per_bucket, 1):
                results.extend(bucket_results)
                if progress_callback:
                    progress_callback(Stage.CONSOLIDATION.value, processed, total)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                for processed, bucket_results in enumerate(executor.map(self.consolidate_bucket, buckets), 1):
                    results.extend(bucket_results)
                    if progress_callback:
                        progress_callback(Stage.CONSOLIDATION.value, processed, total)
        return results

    def consolidate_bucket(self, bucket: DigestBucket) -> List[LinkResult]:
        """
        For each subject i, link the first later duplicate j > i to it, then
        move on to subject i + 1. A run of N identical files converges to a
        single physical file through N - 1 replacements, and the earliest
        discovered file is never replaced.
        """
        entries = bucket.entries
        logger.info(f"Checking the {len(entries)} files which have digest \"{bucket.digest}\"...")
        results: List[LinkResult] = []

        for i, subject in enumerate(entries):
            for candidate in entries[i + 1:]:
                self.stats.increment("comparisons")
                try:
                    if not self.verifier.is_duplicate_of(subject, candidate):
                        continue
                except VerificationError as e:
                    logger.error(str(e))
                    self.stats.increment("verification_failures")
                    continue

                logger.info(f"Duplicate: subject={subject.path} dup={candidate.path}")
                self.stats.increment("duplicates_found")
                results.append(self._link(subject, candidate))
                break

        return results

    def _link(self, subject: Entry, candidate: Entry) -> LinkResult:
        size = candidate.size or 0
        if self.dry_run:
            self.catalog.set_physical_identity(candidate, self.catalog.get_physical_identity(subject))
            return LinkResult(subject.path, candidate.path, size, LinkOutcome.PLANNED)

        try:
            self.linker.consolidate(link_target=subject.path, to_replace=candidate.path)
        except ConsolidationError as e:
            logger.error(str(e))
            self.stats.increment("link_failures")
            return LinkResult(subject.path, candidate.path, size, LinkOutcome.FAILED, error=str(e))

        # candidate.path now names the subject's storage
        self.catalog.set_physical_identity(candidate, self.catalog.get_physical_identity(subject))
        self.stats.increment("links_created")
        self.stats.increment("bytes_reclaimed", size)
        return LinkResult(subject.path, candidate.path, size, LinkOutcome.LINKED)
