"""
Tests for file utility functions.

Tests size calculation and directory creation.
All tests use temporary files/directories for safety.
"""

from pathlib import Path

from pagesearch.utils.file_utils import get_file_size_mb, ensure_directory


class TestGetFileSizeMb:
    """Tests for get_file_size_mb function."""

    def test_small_file(self, temp_dir: Path):
        test_file = temp_dir / "small.txt"
        test_file.write_bytes(b"x" * 100)

        assert get_file_size_mb(test_file) == 0.0

    def test_one_megabyte(self, temp_dir: Path):
        test_file = temp_dir / "big.bin"
        test_file.write_bytes(b"x" * 1024 * 1024)

        assert get_file_size_mb(str(test_file)) == 1.0


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_creates_nested_directories(self, temp_dir: Path):
        target = temp_dir / "a" / "b" / "c"

        result = ensure_directory(target)

        assert result == target
        assert target.is_dir()

    def test_existing_directory_ok(self, temp_dir: Path):
        assert ensure_directory(str(temp_dir)) == temp_dir
