"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/hasher.py
Streams file contents through a fixed-size buffer into an incremental hash.

This implementation ensures predictable behavior:
- The whole file is hashed, never a partial region
- Memory use is bounded by BUFFER_SIZE regardless of file size
- The same bytes always produce the same hex fingerprint, whatever the path
"""

import hashlib
import logging

import xxhash

from dupelink.core.errors import DigestError
from dupelink.core.interfaces import HashAlgorithm, Hasher
from dupelink.core.models import HashAlgorithmName

logger = logging.getLogger(__name__)

BUFFER_SIZE = 1024 * 1024  # 1 MiB


class Md5AlgorithmImpl(HashAlgorithm):
    """MD5 accumulator. Default fingerprint algorithm."""
    name = HashAlgorithmName.MD5.value

    def new(self):
        return hashlib.md5()


class Sha256AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.SHA256.value

    def new(self):
        return hashlib.sha256()


class XXHashAlgorithmImpl(HashAlgorithm):
    """xxHash64 accumulator. Much faster, not cryptographic."""
    name = HashAlgorithmName.XXH64.value

    def new(self):
        return xxhash.xxh64()


ALGORITHMS = {
    HashAlgorithmName.MD5: Md5AlgorithmImpl,
    HashAlgorithmName.SHA256: Sha256AlgorithmImpl,
    HashAlgorithmName.XXH64: XXHashAlgorithmImpl,
}


def algorithm_for(name: HashAlgorithmName) -> HashAlgorithm:
    """Returns a HashAlgorithm instance for the given enum value."""
    try:
        return ALGORITHMS[name]()
    except KeyError:
        raise ValueError(f"Unsupported hash algorithm: {name!r}")


class HasherImpl(Hasher):
    """
    Concrete digest engine using an injected HashAlgorithm.
    Memoization lives in the catalog, not here: every call reads the file.
    """

    def __init__(self, algorithm: HashAlgorithm = None, buffer_size: int = BUFFER_SIZE):
        self.algorithm = algorithm or Md5AlgorithmImpl()
        self.buffer_size = buffer_size

    def compute_digest(self, path: str) -> str:
        """
        Computes the hex digest of the entire file at `path`.

        Raises:
            DigestError: If the file cannot be opened or a read fails partway.
        """
        accumulator = self.algorithm.new()
        try:
            with open(path, 'rb') as f:
                while True:
                    chunk = f.read(self.buffer_size)
                    if not chunk:
                        break
                    accumulator.update(chunk)
        except OSError as e:
            raise DigestError(path, str(e)) from e

        digest = accumulator.hexdigest()
        logger.debug(f"{digest}  {path}")
        return digest
