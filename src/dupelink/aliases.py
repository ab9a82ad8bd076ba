from dupelink.core.models import HashAlgorithmName

ALGORITHM_ALIASES = {
    "md5": HashAlgorithmName.MD5,
    "sha256": HashAlgorithmName.SHA256,
    "xxh64": HashAlgorithmName.XXH64,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Content fingerprint used to bucket files before byte comparison:\n"
    "  md5     : MD5 (default)\n"
    "  sha256  : SHA-256 (slower)\n"
    "  xxh64   : xxHash64 (fastest, not cryptographic)\n"
    "Every match is confirmed byte for byte whatever the algorithm."
)

EPILOG_TEXT = """
Examples:
  Show which files would be hardlinked, change nothing
  %(prog)s ~/Photos ~/Backup/Photos --dry-run

  Replace duplicates with hardlinks to the first copy found
  %(prog)s ~/Photos ~/Backup/Photos

  Only files of 1MB or more, skipping a cache directory
  %(prog)s ~/Projects -m 1M -e ~/Projects/.cache

  Keep going when some files cannot be read
  %(prog)s /srv/share --skip-unreadable -v

  Remove temporary directories left by an interrupted run
  %(prog)s /srv/share --clean-orphans

Files are only ever relinked, never deleted. All paths must be on one filesystem
for two copies to be linked together.
"""
