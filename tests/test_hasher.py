"""
Unit tests for HasherImpl and the HashAlgorithm implementations.
Verifies streamed digests depend only on file bytes.
"""
import hashlib
import pytest
import xxhash
from dupelink.core.errors import DigestError
from dupelink.core.hasher import (
    HasherImpl, Md5AlgorithmImpl, Sha256AlgorithmImpl, XXHashAlgorithmImpl, algorithm_for, BUFFER_SIZE)
from dupelink.core.models import HashAlgorithmName


class TestHasherImpl:
    """Test digest computation with buffered reading."""

    def test_same_content_produces_same_digest_regardless_of_path(self, tmp_path, write_file):
        """Identical bytes under different names and directories give identical digests."""
        content = b"test content " * 1000
        f1 = write_file(tmp_path / "one.dat", content)
        f2 = write_file(tmp_path / "nested" / "deeper" / "other_name.txt", content)

        hasher = HasherImpl()
        assert hasher.compute_digest(str(f1)) == hasher.compute_digest(str(f2))

    def test_different_content_produces_different_digests(self, tmp_path, write_file):
        f1 = write_file(tmp_path / "a", b"A" * 1024)
        f2 = write_file(tmp_path / "b", b"B" * 1024)

        hasher = HasherImpl()
        assert hasher.compute_digest(str(f1)) != hasher.compute_digest(str(f2))

    def test_default_algorithm_is_md5_hex(self, tmp_path, write_file):
        """Default fingerprint is the lowercase MD5 hex string of the content."""
        f = write_file(tmp_path / "hello", b"hello")
        assert HasherImpl().compute_digest(str(f)) == hashlib.md5(b"hello").hexdigest()

    def test_empty_file_has_digest(self, tmp_path, write_file):
        f = write_file(tmp_path / "empty", b"")
        assert HasherImpl().compute_digest(str(f)) == hashlib.md5(b"").hexdigest()

    def test_content_larger_than_buffer_is_fully_hashed(self, tmp_path, write_file):
        """
        Files spanning several buffers must hash like the whole content,
        and a difference in the last byte must change the digest.
        """
        content = b"x" * (BUFFER_SIZE * 2 + 17)
        f1 = write_file(tmp_path / "big1", content)
        f2 = write_file(tmp_path / "big2", content[:-1] + b"y")

        hasher = HasherImpl()
        assert hasher.compute_digest(str(f1)) == hashlib.md5(content).hexdigest()
        assert hasher.compute_digest(str(f1)) != hasher.compute_digest(str(f2))

    def test_small_buffer_gives_same_result(self, tmp_path, write_file):
        """Buffer size is an implementation detail; the fingerprint must not depend on it."""
        content = bytes(range(256)) * 40
        f = write_file(tmp_path / "data", content)
        assert HasherImpl(buffer_size=7).compute_digest(str(f)) == HasherImpl().compute_digest(str(f))

    def test_missing_file_raises_digest_error(self, tmp_path):
        missing = tmp_path / "gone.txt"
        with pytest.raises(DigestError) as exc_info:
            HasherImpl().compute_digest(str(missing))
        assert exc_info.value.path == str(missing)
        assert "gone.txt" in str(exc_info.value)

    def test_directory_raises_digest_error(self, tmp_path):
        with pytest.raises(DigestError):
            HasherImpl().compute_digest(str(tmp_path))


class TestAlgorithms:
    """Each algorithm maps to its library implementation."""

    def test_sha256(self, tmp_path, write_file):
        f = write_file(tmp_path / "f", b"hello")
        digest = HasherImpl(Sha256AlgorithmImpl()).compute_digest(str(f))
        assert digest == hashlib.sha256(b"hello").hexdigest()

    def test_xxh64(self, tmp_path, write_file):
        f = write_file(tmp_path / "f", b"hello")
        digest = HasherImpl(XXHashAlgorithmImpl()).compute_digest(str(f))
        assert digest == xxhash.xxh64(b"hello").hexdigest()
        assert len(digest) == 16  # 64 bits

    def test_algorithm_for_returns_matching_implementation(self):
        assert isinstance(algorithm_for(HashAlgorithmName.MD5), Md5AlgorithmImpl)
        assert isinstance(algorithm_for(HashAlgorithmName.SHA256), Sha256AlgorithmImpl)
        assert isinstance(algorithm_for(HashAlgorithmName.XXH64), XXHashAlgorithmImpl)

    def test_algorithm_for_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            algorithm_for("crc32")
