from .reconciler import DirectoryReconciler
from .snapshot import DirectorySnapshot, scan_directory
from .sync_service import IconSyncService, run_sync
from .utils import AssetError, BatchReport

__all__ = [
    "AssetError",
    "BatchReport",
    "DirectoryReconciler",
    "DirectorySnapshot",
    "IconSyncService",
    "run_sync",
    "scan_directory",
]
