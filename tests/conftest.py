"""
Shared fixtures for consolidation tests.
Creates isolated temporary directory trees with controlled file contents.
"""
import pytest
from pathlib import Path
from typing import Dict


@pytest.fixture
def write_file():
    """Returns a helper that writes bytes to a path, creating parent dirs."""
    def _write(path: Path, content: bytes) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return _write


@pytest.fixture
def hello_world_files(tmp_path, write_file) -> Dict[str, Path]:
    """
    Three files discovered in order a, b, c:
    - a and b hold "hello" (duplicates)
    - c holds "world" (unique)
    """
    return {
        "a": write_file(tmp_path / "a", b"hello"),
        "b": write_file(tmp_path / "b", b"hello"),
        "c": write_file(tmp_path / "c", b"world"),
    }


@pytest.fixture
def test_tree(tmp_path, write_file) -> Dict[str, Path]:
    """
    Creates a small tree for end-to-end scenarios:
    - 3 identical files (1KB of 'A'), one in a subdirectory
    - 2 identical files (2KB of 'B')
    - 1 unique file
    - 2 empty files
    """
    content_a = b"A" * 1024
    content_b = b"B" * 2048
    return {
        "dup1_a": write_file(tmp_path / "dup1_a.txt", content_a),
        "dup1_b": write_file(tmp_path / "dup1_b.txt", content_a),
        "dup1_sub": write_file(tmp_path / "subdir" / "dup1_c.txt", content_a),
        "dup2_a": write_file(tmp_path / "dup2_a.bin", content_b),
        "dup2_b": write_file(tmp_path / "dup2_b.bin", content_b),
        "unique": write_file(tmp_path / "unique.txt", b"C" * 1500),
        "empty1": write_file(tmp_path / "empty1", b""),
        "empty2": write_file(tmp_path / "empty2", b""),
    }
