"""Progress state for a backup run.

`ProgressTracker` owns one `WorkerProgress` per worker plus the aggregate
done and failed counters and forwards every change to an `IProgressObserver`.
Each worker only touches its own `ResourceProgress` handle.
"""

from __future__ import annotations

from tpbackup.core.interfaces import IProgressObserver
from tpbackup.core.models import WorkerProgress


class ResourceProgress:
    """Per-worker progress handle passed to the resource streamer."""

    def __init__(self, state: WorkerProgress, observer: IProgressObserver) -> None:
        self._state = state
        self._observer = observer

    @property
    def state(self) -> WorkerProgress:
        return self._state

    def start(self, resource: str, total: int) -> None:
        self._state.resource = resource
        self._state.done = 0
        self._state.total = total
        self._observer.on_resource_progress(self._state.worker_id, resource, 0, total)

    def advance(self, count: int) -> None:
        if self._state.resource is None:
            return
        self._state.done += count
        self._observer.on_resource_progress(
            self._state.worker_id, self._state.resource, self._state.done, self._state.total
        )


class ProgressTracker:
    """Per-worker and aggregate progress for one run."""

    def __init__(self, observer: IProgressObserver, *, resources_total: int, workers: int) -> None:
        self._observer = observer
        self.resources_total = resources_total
        self.resources_done = 0
        self.resources_failed = 0
        self._workers = [WorkerProgress(worker_id=i) for i in range(workers)]
        self._observer.on_run_start(resources_total, workers)

    def for_worker(self, worker_id: int) -> ResourceProgress:
        return ResourceProgress(self._workers[worker_id], self._observer)

    def resource_done(self, worker_id: int, resource: str) -> None:
        self._workers[worker_id].reset()
        self.resources_done += 1
        self._observer.on_resource_done(worker_id, resource)
        self._observer.on_overall_progress(self.resources_done, self.resources_total)

    def resource_failed(self, worker_id: int, resource: str) -> None:
        self._workers[worker_id].reset()
        self.resources_failed += 1
        self._observer.on_resource_failed(worker_id, resource, self.resources_failed)

    def close(self) -> None:
        self._observer.on_run_end()
