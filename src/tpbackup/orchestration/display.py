"""Terminal progress display built on `rich.progress`.

One bar per worker (current resource, items done/estimated) plus one bar for
the whole run (resources backed up/total, plus a failure count once a
resource fails). Rendered on stderr so stdout stays free for data.
"""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from tpbackup.core.interfaces import IProgressObserver

OVERALL_LABEL = "all resources"
IDLE_LABEL = "idle"


class RichProgressObserver(IProgressObserver):
    """Render progress events as live `rich` progress bars."""

    def __init__(self, console: Console | None = None) -> None:
        self.progress = Progress(
            SpinnerColumn(style="green"),
            TextColumn("[bold][{task.description}][/]"),
            BarColumn(complete_style="cyan", finished_style="blue"),
            MofNCompleteColumn(),
            TextColumn("•"),
            TimeElapsedColumn(),
            console=console or Console(stderr=True),
            transient=True,
            expand=True,
        )
        self._overall: TaskID | None = None
        self._workers: dict[int, TaskID] = {}

    def on_run_start(self, resources_total: int, workers: int) -> None:
        self._overall = self.progress.add_task(OVERALL_LABEL, total=resources_total)
        for worker_id in range(workers):
            self._workers[worker_id] = self.progress.add_task(IDLE_LABEL, total=None)
        self.progress.start()

    def on_resource_progress(self, worker_id: int, resource: str, done: int, total: int) -> None:
        task = self._workers[worker_id]
        # the estimate can lag behind a growing collection
        self.progress.update(task, description=resource, completed=done, total=max(total, done))

    def on_resource_done(self, worker_id: int, resource: str) -> None:
        self.progress.reset(self._workers[worker_id], description=IDLE_LABEL, total=None)

    def on_resource_failed(self, worker_id: int, resource: str, resources_failed: int) -> None:
        self.progress.reset(self._workers[worker_id], description=IDLE_LABEL, total=None)
        if self._overall is not None:
            self.progress.update(self._overall, description=f"{OVERALL_LABEL} ({resources_failed} failed)")

    def on_overall_progress(self, resources_done: int, resources_total: int) -> None:
        if self._overall is not None:
            self.progress.update(self._overall, completed=resources_done, total=resources_total)

    def on_run_end(self) -> None:
        for task in self._workers.values():
            self.progress.remove_task(task)
        self._workers.clear()
        self.progress.stop()
