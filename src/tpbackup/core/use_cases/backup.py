from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

from tpbackup.constants import CHUNK, DETECTION_START
from tpbackup.core.errors import ConfigError, ResourceBackupError
from tpbackup.core.interfaces import IPageProvider, IProgressObserver, ISink, SinkFactory
from tpbackup.core.models import BackupStats
from tpbackup.core.progress import ProgressTracker, ResourceProgress

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collection size estimation
# ---------------------------------------------------------------------------


async def estimate_size(
    pages: IPageProvider,
    resource: str,
    *,
    start: int = DETECTION_START,
) -> int:
    """
    Return the number of items in `resource` using single-item requests.

    The API has no count field, only a "next page" cursor, so the size is
    found by doubling an upper bound until an empty page shows up and then
    binary-searching the last non-empty offset.

    The result is advisory (progress sizing only): the fetch loop stops on
    its own cursor, so a stale estimate never drops or duplicates items.
    """
    low, high = 0, start

    # Find an empty offset
    while True:
        page = await pages.get_resource_page(resource, 1, high)
        if page.is_empty:
            break
        if not page.has_next:
            return high + len(page.items)
        low, high = high, high * 2

    # Items exist below `low` (unless low == 0), offset `high` is empty
    while True:
        v = low + (high - low) // 2
        page = await pages.get_resource_page(resource, 1, v)

        if page.is_empty:
            if v == 0:
                return 0
            high = v
        elif not page.has_next:
            return v + 1
        else:
            low = v

        if high - low <= 1 and v == low:
            # `low` has a next cursor but `high` is empty: collection changed mid-search
            return high


# ---------------------------------------------------------------------------
# Resource streaming
# ---------------------------------------------------------------------------


def _document_prefix(resource: str) -> bytes:
    return f'{{"type": {json.dumps(resource)}, "items": ['.encode()


_DOCUMENT_SUFFIX = b"]}"


async def stream_resource(
    pages: IPageProvider,
    resource: str,
    sink: ISink,
    progress: ResourceProgress | None = None,
    *,
    chunk: int = CHUNK,
) -> int:
    """
    Stream every item of `resource` into `sink` as one JSON document.

    Output is ``{"type": "<resource>", "items": [...]}`` written page by page;
    only one page is held in memory. Returns the number of items written.

    A page fetch error propagates before the closing ``]}`` is written, so a
    failed resource never looks like a complete document.
    """
    logger.debug("starting resource backup: %s", resource)

    fetch = True
    if progress is not None:
        total = await estimate_size(pages, resource)
        progress.start(resource, total)
        fetch = total > 0

    await sink.write(_document_prefix(resource))

    written = 0
    skip = 0
    while fetch:
        page = await pages.get_resource_page(resource, chunk, skip)
        if page.is_empty:
            break

        encoded = json.dumps(page.items, separators=(",", ":"))
        body = encoded[1:-1].encode()
        await sink.write(b"," + body if written else body)

        written += len(page.items)
        if progress is not None:
            progress.advance(len(page.items))

        if not page.has_next:
            break
        skip += chunk

    await sink.write(_DOCUMENT_SUFFIX)

    logger.debug("resource backup complete: %s (%d items)", resource, written)
    return written


# ---------------------------------------------------------------------------
# Work queue
# ---------------------------------------------------------------------------


class WorkQueue:
    """Remaining resource names, shared by all workers."""

    def __init__(self, resources: Iterable[str]) -> None:
        self._items: deque[str] = deque(resources)
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._items)

    async def pop(self) -> str | None:
        """Claim the next resource, or None once the queue is drained."""
        async with self._lock:
            return self._items.popleft() if self._items else None


# ---------------------------------------------------------------------------
# Worker context
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class WorkerContext:
    """Shared state for backup workers (keeps worker signatures small)."""

    queue: WorkQueue
    sink_factory: SinkFactory
    stats: BackupStats
    tracker: ProgressTracker | None
    continue_on_error: bool


# ---------------------------------------------------------------------------
# Domain service – BackupService
# ---------------------------------------------------------------------------


class BackupService:
    """
    Coordinator for backing up many resources with a fixed worker pool.

    It depends only on the abstract page provider and on a caller-supplied
    sink factory, so it performs no I/O of its own.
    """

    def __init__(self, pages: IPageProvider) -> None:
        self._pages = pages

    async def run(
        self,
        resources: Iterable[str],
        *,
        concurrency: int,
        sink_factory: SinkFactory,
        progress: IProgressObserver | None = None,
        continue_on_error: bool = False,
    ) -> BackupStats:
        """
        Back up every resource exactly once using `concurrency` workers.

        Parameters
        ----------
        resources : Iterable[str]
            Resource names, claimed in order.
        concurrency : int
            Number of workers (capped at the number of resources).
        sink_factory : SinkFactory
            Async callable returning the sink for a resource name.
        progress : IProgressObserver | None
            Observer for progress events; also enables size estimation.
        continue_on_error : bool
            If False, the first failing resource cancels the other workers and
            raises `ResourceBackupError`. If True, failures are recorded in the
            returned stats and workers move on.
        """
        if concurrency < 1:
            raise ConfigError("concurrency must be >= 1")

        names = list(resources)
        stats = BackupStats(resources_total=len(names))
        if not names:
            return stats

        workers = min(concurrency, len(names))
        tracker = (
            ProgressTracker(progress, resources_total=len(names), workers=workers)
            if progress is not None
            else None
        )
        ctx = WorkerContext(
            queue=WorkQueue(names),
            sink_factory=sink_factory,
            stats=stats,
            tracker=tracker,
            continue_on_error=continue_on_error,
        )

        logger.info("backing up %d resources with %d workers", len(names), workers)

        tasks = [
            asyncio.create_task(self._worker(ctx, worker_id), name=f"tpbackup-worker-{worker_id}")
            for worker_id in range(workers)
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        finally:
            if tracker is not None:
                tracker.close()

        logger.info(
            "backup finished: %d done, %d failed, %d items",
            stats.resources_done,
            stats.resources_failed,
            stats.items_written,
        )
        return stats

    async def _worker(self, ctx: WorkerContext, worker_id: int) -> None:
        progress = ctx.tracker.for_worker(worker_id) if ctx.tracker is not None else None

        while (resource := await ctx.queue.pop()) is not None:
            try:
                items = await self._backup_one(ctx, resource, progress)
            except Exception as e:
                if not ctx.continue_on_error:
                    raise ResourceBackupError([resource], detail=f"{type(e).__name__}: {e}") from e
                logger.error("resource %s failed: %s: %s", resource, type(e).__name__, e)
                ctx.stats.resources_failed += 1
                ctx.stats.failed.append(resource)
                if ctx.tracker is not None:
                    ctx.tracker.resource_failed(worker_id, resource)
            else:
                ctx.stats.resources_done += 1
                ctx.stats.items_written += items
                if ctx.tracker is not None:
                    ctx.tracker.resource_done(worker_id, resource)

    async def _backup_one(
        self,
        ctx: WorkerContext,
        resource: str,
        progress: ResourceProgress | None,
    ) -> int:
        sink = await ctx.sink_factory(resource)
        try:
            return await stream_resource(self._pages, resource, sink, progress)
        finally:
            await sink.aclose()
