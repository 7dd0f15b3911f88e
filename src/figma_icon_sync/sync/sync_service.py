"""Service for syncing fetched icons into the output directory."""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from loguru import logger

from figma_icon_sync import normalizer
from figma_icon_sync.config import SyncConfig
from figma_icon_sync.models import DesiredFile, RawAsset
from figma_icon_sync.naming import transform_name
from figma_icon_sync.sync.reconciler import DirectoryReconciler
from figma_icon_sync.sync.utils import BatchReport


@dataclass
class AssetOutcome:
    """Result of rendering one icon: either its desired files or an error."""

    asset: RawAsset
    base_name: str
    files: List[DesiredFile] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class IconSyncService:
    """Turns a batch of fetched icons into files in the output directory."""

    def __init__(self, config: SyncConfig, reconciler: Optional[DirectoryReconciler] = None):
        self.config = config
        self.reconciler = reconciler or DirectoryReconciler(
            config.output.directory, max_workers=config.max_workers
        )

    def filter_assets(self, assets: Sequence[RawAsset]) -> List[RawAsset]:
        """Apply include/exclude patterns to the Figma names."""
        filters = self.config.filters
        kept = [asset for asset in assets if filters.accepts(asset.original_name)]
        if len(kept) != len(assets):
            logger.info(f"Filtered to {len(kept)} icon(s) after include/exclude patterns")
        return kept

    def render_asset(self, asset: RawAsset, scour_options: Any = None) -> AssetOutcome:
        """Build every configured output file for one icon."""
        base_name = transform_name(asset.name, self.config.naming)
        outcome = AssetOutcome(asset=asset, base_name=base_name)

        if not base_name:
            outcome.error = f"Name {asset.name!r} produces an empty file name"
            return outcome

        react = self.config.output.react
        try:
            svg = normalizer.normalize_svg(asset.content, self.config.svgo, scour_options)
            for kind in self.config.output.formats:
                outcome.files.append(
                    DesiredFile(
                        file_name=f"{base_name}{kind.extension(react.typescript)}",
                        content=normalizer.render(base_name, svg, kind, react),
                        base_name=base_name,
                        kind=kind,
                        source=asset.original_name,
                    )
                )
        except Exception as e:
            outcome.files = []
            outcome.error = str(e)

        return outcome

    async def sync(self, assets: Sequence[RawAsset]) -> BatchReport:
        """
        Reconcile the output directory against a batch of icons.

        An empty batch returns an empty report without touching the
        directory, so a failed or empty fetch never deletes anything.

        Raises:
            ConfigError: If the optimizer plugin settings are invalid
            FileWriteError: If the output directory cannot be created
        """
        report = BatchReport()
        if not assets:
            logger.warning("No icons to sync, leaving output directory untouched")
            return report

        assets = self.filter_assets(assets)
        if not assets:
            logger.warning("All icons were filtered out, leaving output directory untouched")
            return report

        scour_options = None
        if self.config.svgo.enabled:
            scour_options = normalizer.build_scour_options(self.config.svgo.plugins)

        outcomes = [self.render_asset(asset, scour_options) for asset in assets]
        desired: List[DesiredFile] = []
        for outcome in outcomes:
            if outcome.ok:
                desired.extend(outcome.files)
            else:
                logger.error(f"Failed to process '{outcome.asset.original_name}': {outcome.error}")
                report.add_error(outcome.asset.original_name, outcome.error or "")

        # Icons that failed to render still protect their existing files
        keep = {outcome.base_name for outcome in outcomes if outcome.base_name}
        result = await self.reconciler.reconcile(desired, keep)

        for path, status in result.written:
            report.record(path, status)
        report.deleted.extend(result.deleted)
        report.errors.extend(result.errors)

        log_summary(report)
        return report


def log_summary(report: BatchReport) -> None:
    logger.info(
        f"Sync summary: {len(report.added)} added, {len(report.updated)} updated, "
        f"{len(report.deleted)} deleted, {len(report.unchanged)} unchanged, "
        f"{len(report.errors)} error(s)"
    )
    for error in report.errors:
        logger.warning(f"  {error.source}: {error.error}")


async def run_sync(assets: Sequence[RawAsset], config: SyncConfig) -> BatchReport:
    """Sync a batch of icons using the given configuration."""
    return await IconSyncService(config).sync(assets)
