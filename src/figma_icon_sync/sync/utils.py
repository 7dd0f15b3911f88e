"""Types and utilities for icon sync reports."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from figma_icon_sync.models import FileStatus


@dataclass
class AssetError:
    """A failure attributed to one icon (or one orphaned file)."""

    source: str
    error: str


@dataclass
class BatchReport:
    """Report of one reconciliation pass over the output directory.

    Attributes:
        added: Files that did not exist and were written
        updated: Files whose content changed and were overwritten
        unchanged: Files already up to date, left untouched
        deleted: Managed files with no matching icon in the batch, removed
        errors: Per-icon failures; the rest of the batch still ran
    """

    added: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    errors: List[AssetError] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        """Number of files written or removed."""
        return len(self.added) + len(self.updated) + len(self.deleted)

    @property
    def has_changes(self) -> bool:
        return self.total_changes > 0

    def record(self, path: str, status: FileStatus) -> None:
        getattr(self, status.value).append(path)

    def add_error(self, source: str, error: str) -> None:
        self.errors.append(AssetError(source=source, error=error))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
