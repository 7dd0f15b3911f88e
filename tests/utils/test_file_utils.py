"""Tests for file utilities."""

from pathlib import Path

import pytest

from figma_icon_sync.file_utils import (
    FileDeleteError,
    FileError,
    FileWriteError,
    compute_checksum,
    delete_file,
    ensure_directory,
    write_file_atomic,
)


@pytest.mark.asyncio
async def test_compute_checksum():
    """Test checksum computation."""
    checksum = await compute_checksum("test content")
    assert isinstance(checksum, str)
    assert len(checksum) == 64  # SHA-256 produces 64 char hex string


@pytest.mark.asyncio
async def test_compute_checksum_text_matches_bytes():
    assert await compute_checksum("héllo") == await compute_checksum("héllo".encode("utf-8"))


@pytest.mark.asyncio
async def test_compute_checksum_error():
    """Test checksum error handling."""
    with pytest.raises(FileError):
        await compute_checksum(object())  # pyright: ignore [reportArgumentType]


@pytest.mark.asyncio
async def test_ensure_directory(tmp_path: Path):
    """Test directory creation."""
    test_dir = tmp_path / "a" / "b"
    await ensure_directory(test_dir)
    assert test_dir.is_dir()

    # Idempotent
    await ensure_directory(test_dir)
    assert test_dir.is_dir()


@pytest.mark.asyncio
async def test_ensure_directory_error(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(FileWriteError):
        await ensure_directory(blocker / "icons")


@pytest.mark.asyncio
async def test_write_file_atomic(tmp_path: Path):
    """Test atomic file writing."""
    test_file = tmp_path / "icon.svg"
    content = "<svg>\r\n</svg>"

    await write_file_atomic(test_file, content)
    assert test_file.read_bytes() == content.encode("utf-8")

    # Temp file should be cleaned up
    assert not (tmp_path / "icon.svg.tmp").exists()


@pytest.mark.asyncio
async def test_write_file_atomic_error(tmp_path: Path):
    """Test atomic write error handling."""
    test_file = tmp_path / "nonexistent" / "icon.svg"

    with pytest.raises(FileWriteError):
        await write_file_atomic(test_file, "test content")


@pytest.mark.asyncio
async def test_delete_file(tmp_path: Path):
    test_file = tmp_path / "icon.svg"
    test_file.write_text("<svg/>")

    await delete_file(test_file)
    assert not test_file.exists()

    # Missing files are fine
    await delete_file(test_file)


@pytest.mark.asyncio
async def test_delete_file_error(tmp_path: Path):
    directory = tmp_path / "icon.svg"
    directory.mkdir()

    with pytest.raises(FileDeleteError):
        await delete_file(directory)
