"""Backup orchestrator: wire client, sinks and progress for one output mode.

This module provides two layers:

1) `BackupService.run(...)` (in `tpbackup.core.use_cases.backup`):
   - Pure application-layer use case.
   - Depends ONLY on interfaces (IPageProvider, ISink, IProgressObserver).

2) `run_backup(...)`:
   - Wires concrete implementations (ApiClient, file/stdout sinks, rich
     progress) for the selected `OutputMode`.
   - Owns lifecycle: closes the HTTP client, packages and removes the
     staging directory in archive mode.
"""

from __future__ import annotations

import logging
import sys
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path
from typing import BinaryIO

from tpbackup.clients.api import ApiClient
from tpbackup.core.config import BackupConfig, OutputMode
from tpbackup.core.errors import ResourceBackupError
from tpbackup.core.interfaces import IPageProvider, IProgressObserver, SinkFactory
from tpbackup.core.models import BackupStats
from tpbackup.core.use_cases.backup import BackupService
from tpbackup.orchestration.display import RichProgressObserver
from tpbackup.storage.archive import archive_and_remove, default_archive_path
from tpbackup.storage.sinks import SharedStreamSink, file_sink_factory, shared_sink_factory

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class BackupOutput:
    """High-level output of the orchestrator."""
    stats: BackupStats
    mode: OutputMode
    out_dir: Path | None = None
    archive_path: Path | None = None


# ---------------------------------------------------------------------------
# Mode helpers
# ---------------------------------------------------------------------------


def _prepare_out_dir(config: BackupConfig) -> Path:
    if config.mode is OutputMode.ARCHIVE:
        config.staging_root.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix="tpbackup-", dir=config.staging_root))
    config.out_dir.mkdir(parents=True, exist_ok=True)
    return config.out_dir


def _resolve_observer(
    config: BackupConfig,
    observer: IProgressObserver | None,
) -> IProgressObserver | None:
    if not config.effective_progress:
        return None
    return observer if observer is not None else RichProgressObserver()


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


async def run_backup(
    config: BackupConfig,
    *,
    pages: IPageProvider | None = None,
    observer: IProgressObserver | None = None,
    stream: BinaryIO | None = None,
) -> BackupOutput:
    """Run a full backup for `config`.

    Parameters
    ----------
    config : BackupConfig
        Run configuration (resources, mode, concurrency, ...).
    pages : IPageProvider | None
        Page provider override; an `ApiClient` is created (and closed) otherwise.
    observer : IProgressObserver | None
        Progress observer; defaults to `RichProgressObserver` when progress is on.
    stream : BinaryIO | None
        Shared stream for stdout mode; defaults to ``sys.stdout.buffer``.

    Raises
    ------
    ResourceBackupError
        A resource failed (the first one by default, all failed ones with
        ``continue_on_error``).
    """
    concurrency = config.effective_concurrency
    client: ApiClient | None = None
    if pages is None:
        client_config = replace(
            config.client,
            max_connections=max(config.client.max_connections, concurrency),
        )
        client = ApiClient(client_config)
        pages = client

    try:
        return await _run(config, pages, _resolve_observer(config, observer), stream, concurrency)
    finally:
        if client is not None:
            await client.aclose()


async def _run(
    config: BackupConfig,
    pages: IPageProvider,
    observer: IProgressObserver | None,
    stream: BinaryIO | None,
    concurrency: int,
) -> BackupOutput:
    service = BackupService(pages)

    async def backup(sink_factory: SinkFactory) -> BackupStats:
        stats = await service.run(
            config.resources,
            concurrency=concurrency,
            sink_factory=sink_factory,
            progress=observer,
            continue_on_error=config.continue_on_error,
        )
        if stats.failed:
            raise ResourceBackupError(stats.failed)
        return stats

    if config.mode is OutputMode.STDOUT:
        logger.debug("start backup in stdout")
        sink = SharedStreamSink(stream if stream is not None else sys.stdout.buffer)
        stats = await backup(shared_sink_factory(sink))
        return BackupOutput(stats=stats, mode=config.mode)

    out_dir = _prepare_out_dir(config)
    logger.debug("start backup in files: %s", out_dir)

    if config.mode is OutputMode.FILES:
        stats = await backup(file_sink_factory(out_dir))
        return BackupOutput(stats=stats, mode=config.mode, out_dir=out_dir)

    try:
        stats = await backup(file_sink_factory(out_dir))
    except ResourceBackupError:
        logger.warning("staging directory kept at %s", out_dir)
        raise

    archive_path = config.archive_path or default_archive_path()
    logger.debug("compressing results into %s", archive_path)
    archive_and_remove(out_dir, archive_path)
    return BackupOutput(stats=stats, mode=config.mode, archive_path=archive_path)
