"""Utilities for file operations."""
import hashlib
from pathlib import Path
from typing import Union

from loguru import logger


class FileError(Exception):
    """Base exception for file operations."""
    pass


class FileWriteError(FileError):
    """Raised when writing a file or creating a directory fails."""
    pass


class FileDeleteError(FileError):
    """Raised when deleting a file fails."""
    pass


async def compute_checksum(content: Union[str, bytes]) -> str:
    """
    Compute SHA-256 checksum of content.

    Text is hashed as its UTF-8 encoding, so a string and the bytes written
    for it produce the same checksum.

    Args:
        content: Text or raw bytes to hash

    Returns:
        SHA-256 hex digest

    Raises:
        FileError: If checksum computation fails
    """
    try:
        if isinstance(content, str):
            content = content.encode("utf-8")
        return hashlib.sha256(content).hexdigest()
    except Exception as e:
        logger.error(f"Failed to compute checksum: {e}")
        raise FileError(f"Failed to compute checksum: {e}")


async def ensure_directory(path: Path) -> None:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path to ensure

    Raises:
        FileWriteError: If directory creation fails
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except Exception as e:
        logger.error(f"Failed to create directory: {path}: {e}")
        raise FileWriteError(f"Failed to create directory {path}: {e}")


async def write_file_atomic(path: Path, content: str) -> None:
    """
    Write file with atomic operation using temporary file.

    The temporary file keeps the full target name so that `icon.svg` and
    `icon.tsx` never share a temp path.

    Args:
        path: Target file path
        content: Content to write

    Raises:
        FileWriteError: If write operation fails
    """
    temp_path = path.with_name(f"{path.name}.tmp")
    try:
        temp_path.write_bytes(content.encode("utf-8"))
        temp_path.replace(path)
    except Exception as e:
        temp_path.unlink(missing_ok=True)
        logger.error(f"Failed to write file: {path}: {e}")
        raise FileWriteError(f"Failed to write file {path}: {e}")


async def delete_file(path: Path) -> None:
    """
    Delete a file if it exists.

    Raises:
        FileDeleteError: If the file exists but cannot be removed
    """
    try:
        path.unlink(missing_ok=True)
    except Exception as e:
        logger.error(f"Failed to delete file: {path}: {e}")
        raise FileDeleteError(f"Failed to delete file {path}: {e}")
