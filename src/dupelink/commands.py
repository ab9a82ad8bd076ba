"""
Unified command orchestrator for discovery and consolidation.
This is the SINGLE entry point for business logic, used by the CLI and by library callers.
"""
import os
import time
import logging
from typing import List, Optional, Callable, Tuple

from dupelink.core.catalog import Catalog
from dupelink.core.deduplicator import DeduplicatorImpl
from dupelink.core.errors import DiscoveryError
from dupelink.core.hasher import HasherImpl, algorithm_for
from dupelink.core.models import DeduplicationParams, DeduplicationStats, LinkResult, Stage
from dupelink.core.scanner import FileScannerImpl

logger = logging.getLogger(__name__)


class DeduplicationCommand:
    """
    Runs the whole workflow in two strict phases:
    1. Discovery: walk every root and register each file in a fresh Catalog
    2. Consolidation: hand the finished catalog to DeduplicatorImpl

    Usage:
        params = DeduplicationParams(roots=["/srv/photos", "/srv/backup"])
        command = DeduplicationCommand()
        results, stats = command.execute(params, progress_callback=printer)
    """

    def __init__(self):
        self._catalog: Optional[Catalog] = None
        self._failed_roots: List[DiscoveryError] = []

    def execute(
            self,
            params: DeduplicationParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[List[LinkResult], DeduplicationStats]:
        """
        Execute discovery and consolidation with the given parameters.

        Returns:
            Tuple of (link_results, statistics)

        Raises:
            DigestError: If a file cannot be read and params.skip_unreadable is False
        """
        catalog = Catalog(HasherImpl(algorithm_for(params.algorithm)))
        self._catalog = catalog
        self._failed_roots = []

        start_time = time.time()
        self.discover(params, catalog, progress_callback)
        discovery_time = time.time() - start_time

        deduplicator = DeduplicatorImpl(
            catalog,
            dry_run=params.dry_run,
            skip_unreadable=params.skip_unreadable,
            workers=params.workers,
        )
        results, stats = deduplicator.run(progress_callback=progress_callback)
        stats.update_stage(Stage.DISCOVERY.value, discovery_time)
        stats.total_time += discovery_time
        return results, stats

    def discover(
            self,
            params: DeduplicationParams,
            catalog: Catalog,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> None:
        """Registers every file under every root; a failing root is skipped."""
        scanner = FileScannerImpl(
            min_size=params.min_size_bytes,
            max_size=params.max_size_bytes,
            excluded_dirs=params.excluded_dirs,
        )
        seen = set()

        for root in params.roots:
            try:
                for path in scanner.scan(root):
                    key = os.path.realpath(path)
                    if key in seen:
                        logger.debug(f"Already registered: {path}")
                        continue
                    seen.add(key)
                    catalog.add(path)
                    if progress_callback and len(catalog) % 5000 == 0:
                        progress_callback(Stage.DISCOVERY.value, len(catalog), None)
            except DiscoveryError as e:
                logger.error(str(e))
                self._failed_roots.append(e)

        if progress_callback:
            progress_callback(Stage.DISCOVERY.value, len(catalog), None)
        logger.info(f"Discovered {len(catalog)} files under {len(params.roots)} root(s)")

    @property
    def catalog(self) -> Optional[Catalog]:
        """Catalog of the last execution."""
        return self._catalog

    @property
    def failed_roots(self) -> List[DiscoveryError]:
        return list(self._failed_roots)
