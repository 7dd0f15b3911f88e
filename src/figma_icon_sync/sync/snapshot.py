"""Point-in-time view of the output directory."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Dict, Optional, Set

from loguru import logger

from figma_icon_sync.file_utils import compute_checksum
from figma_icon_sync.models import MANAGED_EXTENSIONS


@dataclass
class DirectorySnapshot:
    """Managed files found in the output directory at the start of a batch."""

    directory: Path
    # file name -> checksum
    files: Dict[str, str] = field(default_factory=dict)
    # file name -> error message
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def names(self) -> Set[str]:
        """Every managed file present, including ones that could not be read."""
        return set(self.files) | set(self.errors)

    def checksum(self, file_name: str) -> Optional[str]:
        return self.files.get(file_name)

    def __contains__(self, file_name: str) -> bool:
        return file_name in self.files or file_name in self.errors


async def scan_directory(
    directory: Path, extensions: AbstractSet[str] = MANAGED_EXTENSIONS
) -> DirectorySnapshot:
    """
    Scan the top level of directory for managed files and their checksums.

    Args:
        directory: Output directory to scan
        extensions: File extensions to record, other files are skipped

    Returns:
        DirectorySnapshot with checksums and any read errors
    """
    logger.debug(f"Scanning directory: {directory}")
    snapshot = DirectorySnapshot(directory=directory)

    if not directory.exists():
        logger.debug(f"Directory does not exist: {directory}")
        return snapshot

    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix not in extensions:
            continue

        try:
            snapshot.files[path.name] = await compute_checksum(path.read_bytes())
        except Exception as e:
            snapshot.errors[path.name] = str(e)
            logger.error(f"Failed to read {path.name}: {e}")

    logger.debug(f"Found {len(snapshot.files)} managed files")
    if snapshot.errors:
        logger.warning(f"Encountered {len(snapshot.errors)} errors while scanning")

    return snapshot
