#!/usr/bin/env python3
"""
dupelink CLI: Command line interface for replacing duplicate files with hardlinks.
All operations are safe: duplicates are relinked atomically, never deleted.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
try:
    import xxhash  # noqa: F401
except ImportError:
    print("❌ Missing required dependency: xxhash", file=sys.stderr)
    print("   pip install xxhash", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupelink.core.errors import DigestError
from dupelink.core.linker import find_orphaned_temp_dirs, clean_orphaned_temp_dir
from dupelink.core.models import DeduplicationParams, DeduplicationStats, LinkResult, LinkOutcome
from dupelink.commands import DeduplicationCommand
from dupelink.utils.convert_utils import ConvertUtils
from dupelink.aliases import ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT, EPILOG_TEXT


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupelink",
            description="dupelink: Replace duplicate files with hardlinks to a single copy",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "roots",
            nargs="+",
            metavar="ROOT",
            help="Directories to scan (processed in the given order)"
        )

        # Filtering options
        parser.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='',
            help="Minimum file size (e.g., 500KB, 1MB). Default: 0"
        )
        parser.add_argument(
            "--max-size", "-M",
            default=None,
            type=str,
            metavar='',
            help="Maximum file size (e.g., 10MB, 1GB). Default: no limit"
        )
        parser.add_argument(
            "--excluded-dirs", "-e",
            nargs="+",
            default=[],
            type=str,
            metavar='',
            dest="excluded_dirs",
            help="Excluded/ignored directories (space separated)"
        )

        # Consolidation options
        parser.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default="md5",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--workers", "-w",
            default=1,
            type=int,
            metavar='',
            help="Worker threads for hashing and per-bucket linking. Default: 1"
        )
        parser.add_argument(
            "--skip-unreadable",
            action="store_true",
            help="Skip files that cannot be read instead of stopping the run"
        )

        # Actions
        parser.add_argument(
            "--dry-run", "-n",
            action="store_true",
            help="Report what would be linked without changing anything"
        )
        parser.add_argument(
            "--clean-orphans",
            action="store_true",
            help="Remove temporary directories left by an interrupted run, then exit"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Log every digest and every skipped path"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

        if args.workers < 1:
            self.error_exit("Number of workers must be at least 1")

        for root in args.roots:
            root_path = Path(root)
            if not root_path.exists():
                self.warning(f"Directory not found: {root}")
            elif not root_path.is_dir():
                self.warning(f"Path is not a directory: {root}")

        try:
            min_size = ConvertUtils.human_to_bytes(args.min_size)
            if args.max_size is not None:
                max_size = ConvertUtils.human_to_bytes(args.max_size)
                if max_size < min_size:
                    self.error_exit("Maximum size cannot be less than minimum size")
        except ValueError as e:
            self.error_exit(f"Invalid size format: {e}")

        for excl_dir in args.excluded_dirs:
            excl_path = Path(excl_dir).resolve()
            if not excl_path.exists():
                self.warning(f"Excluded directory not found: {excl_dir}")
            elif not excl_path.is_dir():
                self.warning(f"Excluded path is not a directory: {excl_dir}")

    def create_params(self, args: argparse.Namespace) -> DeduplicationParams:
        """Create DeduplicationParams from CLI arguments."""
        try:
            max_size = ConvertUtils.human_to_bytes(args.max_size) if args.max_size is not None else None
            return DeduplicationParams(
                roots=[str(Path(root)) for root in args.roots],
                min_size_bytes=ConvertUtils.human_to_bytes(args.min_size),
                max_size_bytes=max_size,
                excluded_dirs=[str(Path(d.strip()).resolve()) for d in args.excluded_dirs],
                algorithm=ALGORITHM_ALIASES[args.algorithm],
                dry_run=args.dry_run,
                skip_unreadable=args.skip_unreadable,
                workers=args.workers,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    @staticmethod
    def configure_logging(args: argparse.Namespace) -> None:
        if args.debug:
            level = logging.DEBUG
        elif args.verbose:
            level = logging.INFO
        else:
            level = logging.ERROR
        logging.getLogger().setLevel(level)

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def run_consolidation(self, params: DeduplicationParams) -> tuple[List[LinkResult], DeduplicationStats]:
        """Execute the discovery + consolidation workflow."""
        command = DeduplicationCommand()
        try:
            results, stats = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except DigestError as e:
            if self.verbose:
                sys.stderr.write("\n")
            self.error_exit(f"{e}\nNo further files were linked. Use --skip-unreadable to continue past such files.")

        if self.verbose:
            sys.stderr.write("\n")
        for failed in command.failed_roots:
            self.warning(str(failed))
        if len(command.failed_roots) == len(params.roots):
            self.error_exit("None of the given directories could be scanned")
        return results, stats

    def output_results(self, results: List[LinkResult], stats: DeduplicationStats, dry_run: bool) -> None:
        """Print one line per verified pair, then a summary."""
        if self.quiet:
            return

        if not results:
            print("No duplicate files found.")
            return

        markers = {
            LinkOutcome.LINKED: "[LINK]",
            LinkOutcome.PLANNED: "[PLAN]",
            LinkOutcome.FAILED: "[FAIL]",
        }
        for result in results:
            print(f"{markers[result.outcome]} {result.replaced}")
            print(f"       -> {result.link_target}")
            if result.error:
                print(f"       {result.error}")

        succeeded = [r for r in results if r.succeeded]
        failed = len(results) - len(succeeded)
        space = ConvertUtils.bytes_to_human(sum(r.size for r in succeeded))

        print("=" * 60)
        if dry_run:
            print(f"Dry run: {len(succeeded)} files would be replaced by hardlinks (up to {space} reclaimed)")
        else:
            print(f"Replaced {len(succeeded)} files by hardlinks (up to {space} reclaimed)")
        if failed:
            print(f"⚠️  {failed} file(s) could not be linked")

        if self.verbose:
            print()
            print(stats.print_summary())

    def clean_orphans(self, roots: List[str]) -> None:
        """Remove leftovers of interrupted runs under every root."""
        removed = kept = 0
        for root in roots:
            if not Path(root).is_dir():
                continue
            for temp_dir in find_orphaned_temp_dirs(root):
                try:
                    if clean_orphaned_temp_dir(temp_dir):
                        removed += 1
                        continue
                except OSError as e:
                    self.warning(f"Cannot clean {temp_dir}: {e}")
                kept += 1
                self.warning(f"Left in place: {temp_dir}")
        if not self.quiet:
            print(f"Removed {removed} leftover temporary director{'y' if removed == 1 else 'ies'}")
        if kept:
            self.error_exit(f"{kept} temporary director{'y' if kept == 1 else 'ies'} could not be removed")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose or args.debug
        self.quiet = args.quiet
        self.configure_logging(args)

        self.validate_args(args)

        if args.clean_orphans:
            self.clean_orphans(args.roots)
            return

        params = self.create_params(args)
        if not self.quiet:
            print(f"Scanning: {', '.join(params.roots)}")

        results, stats = self.run_consolidation(params)
        self.output_results(results, stats, dry_run=params.dry_run)

        if self.verbose:
            elapsed = time.time() - self.start_time
            print(f"\n✅ Completed in {elapsed:.2f} seconds")

        if any(r.outcome == LinkOutcome.FAILED for r in results):
            sys.exit(2)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
