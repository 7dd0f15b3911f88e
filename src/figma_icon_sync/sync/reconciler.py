"""Bring the output directory in line with the files a batch wants."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from figma_icon_sync import file_utils
from figma_icon_sync.exceptions import FileOperationError
from figma_icon_sync.models import MANAGED_EXTENSIONS, DesiredFile, FileStatus
from figma_icon_sync.sync.snapshot import DirectorySnapshot, scan_directory
from figma_icon_sync.sync.utils import AssetError


@dataclass
class ReconcileResult:
    written: List[Tuple[str, FileStatus]] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    errors: List[AssetError] = field(default_factory=list)


def resolve_collisions(desired: Sequence[DesiredFile]) -> List[DesiredFile]:
    """
    Keep one desired file per target file name.

    The last file in input order wins. Losers are logged, not reported.
    """
    winners: Dict[str, DesiredFile] = {}
    for item in desired:
        previous = winners.pop(item.file_name, None)
        if previous is not None and previous.source != item.source:
            logger.warning(
                f"Name collision on {item.file_name}: '{item.source}' replaces '{previous.source}'"
            )
        winners[item.file_name] = item
    return list(winners.values())


class DirectoryReconciler:
    """
    Writes desired files into a flat directory and removes orphans.

    The directory listing is the only state: a file is unchanged when its
    bytes on disk equal the desired content, and an orphan when its base name
    is not wanted by the current batch.
    """

    def __init__(
        self,
        directory: Path,
        extensions: AbstractSet[str] = MANAGED_EXTENSIONS,
        max_workers: int = 8,
    ):
        self.directory = directory
        self.extensions = extensions
        self.max_workers = max_workers

    def report_path(self, file_name: str) -> str:
        return str(self.directory / file_name)

    def target_path(self, file_name: str) -> Path:
        """Resolve file_name inside the directory.

        Raises:
            FileOperationError: If the name points outside the directory
        """
        path = self.directory / file_name
        if path.resolve().parent != self.directory.resolve():
            raise FileOperationError(f"Refusing to write outside {self.directory}: {file_name}")
        return path

    async def prepare(self) -> DirectorySnapshot:
        """Create the directory if needed and take the batch snapshot.

        Raises:
            FileWriteError: If the directory cannot be created
        """
        await file_utils.ensure_directory(self.directory)
        return await scan_directory(self.directory, self.extensions)

    async def reconcile_file(self, desired: DesiredFile, snapshot: DirectorySnapshot) -> FileStatus:
        """Write one file unless the snapshot shows it is already up to date."""
        path = self.target_path(desired.file_name)

        if desired.file_name not in snapshot:
            status = FileStatus.ADDED
        elif snapshot.checksum(desired.file_name) == await file_utils.compute_checksum(
            desired.content
        ):
            status = FileStatus.UNCHANGED
        else:
            status = FileStatus.UPDATED

        logger.debug(f"{desired.file_name}: {status.value}")
        if status != FileStatus.UNCHANGED:
            await file_utils.write_file_atomic(path, desired.content)
        return status

    async def delete_orphans(
        self, snapshot: DirectorySnapshot, desired_base_names: AbstractSet[str]
    ) -> Tuple[List[str], List[AssetError]]:
        """Delete managed files whose base name the batch does not want."""
        deleted: List[str] = []
        errors: List[AssetError] = []

        for file_name in sorted(snapshot.names):
            path = self.directory / file_name
            if path.suffix not in self.extensions or path.stem in desired_base_names:
                continue

            try:
                await file_utils.delete_file(path)
            except file_utils.FileError as e:
                errors.append(AssetError(source=file_name, error=str(e)))
                continue

            logger.info(f"Deleted orphaned file: {file_name}")
            deleted.append(self.report_path(file_name))

        return deleted, errors

    async def reconcile(
        self,
        desired: Sequence[DesiredFile],
        desired_base_names: Optional[AbstractSet[str]] = None,
    ) -> ReconcileResult:
        """
        Write every desired file, then delete orphans.

        Writes run concurrently up to max_workers. Orphan detection only starts
        once every write has finished, and is skipped if the batch is cancelled.

        Args:
            desired: Files the batch wants to exist
            desired_base_names: Base names to keep when detecting orphans,
                defaults to the base names of desired

        Raises:
            FileWriteError: If the directory cannot be created
        """
        if desired_base_names is None:
            desired_base_names = {item.base_name for item in desired}

        snapshot = await self.prepare()
        semaphore = asyncio.Semaphore(self.max_workers)
        result = ReconcileResult()

        async def write(item: DesiredFile) -> Tuple[DesiredFile, Optional[FileStatus], str]:
            async with semaphore:
                try:
                    return item, await self.reconcile_file(item, snapshot), ""
                except Exception as e:
                    logger.error(f"Failed to write {item.file_name} for '{item.source}': {e}")
                    return item, None, str(e)

        outcomes = await asyncio.gather(*(write(item) for item in resolve_collisions(desired)))

        for item, status, error in outcomes:
            if status is None:
                result.errors.append(AssetError(source=item.source, error=error))
            else:
                result.written.append((self.report_path(item.file_name), status))

        deleted, errors = await self.delete_orphans(snapshot, desired_base_names)
        result.deleted.extend(deleted)
        result.errors.extend(errors)
        return result
