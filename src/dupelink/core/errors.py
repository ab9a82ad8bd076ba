"""
core/errors.py
Exception hierarchy for discovery, digesting, verification and consolidation.

Scope of each error:
- DiscoveryError: one root directory; other roots still run
- DigestError: the whole run, unless unreadable files are skipped
- VerificationError: one candidate pair
- ConsolidationError: one candidate pair
"""


class DupelinkError(RuntimeError):
    """Base class for all errors raised by dupelink."""


class DiscoveryError(DupelinkError):
    """A root directory cannot be enumerated."""

    def __init__(self, root: str, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot walk tree {root}: {reason}")


class DigestError(DupelinkError):
    """A file's bytes cannot be fully read while computing its digest."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot compute digest of {path}: {reason}")


class VerificationError(DupelinkError):
    """Either file of a candidate pair cannot be opened or compared."""

    def __init__(self, first: str, second: str, reason: str):
        self.first = first
        self.second = second
        self.reason = reason
        super().__init__(f"Cannot check if {first} and {second} are duplicates: {reason}")


class ConsolidationError(DupelinkError):
    """A step of the hardlink replacement failed; the destination was left untouched."""

    def __init__(self, link_target: str, to_replace: str, reason: str):
        self.link_target = link_target
        self.to_replace = to_replace
        self.reason = reason
        super().__init__(f"Cannot replace {to_replace} with a link to {link_target}: {reason}")
