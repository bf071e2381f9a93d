from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from tpbackup.core.models import ResourcePage


# ---------------------------------------------------------------------------
# IPageProvider
# ---------------------------------------------------------------------------

@runtime_checkable
class IPageProvider(Protocol):
    """
    Abstract provider of resource collection pages.

    Domain expectations:
    - It returns ResourcePage objects already decoded from the wire envelope.
    - Errors (transport, status, decode) propagate; no retries.
    """

    async def get_resource_page(self, resource: str, take: int, skip: int) -> ResourcePage:
        """
        Return the page of `resource` holding at most `take` items starting at `skip`.

        Implementations:
        - HTTP-based (`ApiClient`)
        - In-memory provider for testing
        """
        ...


# ---------------------------------------------------------------------------
# ISink
# ---------------------------------------------------------------------------

@runtime_checkable
class ISink(Protocol):
    """
    Sequential, append-only byte destination for one resource document.

    Domain expectations:
    - `write` appends bytes in call order and raises OSError on failure.
    - A sink is owned by one streamer invocation; shared sinks serialize
      each `write` call internally.
    """

    async def write(self, data: bytes) -> None:
        ...

    async def aclose(self) -> None:
        """Flush and release the sink. Shared sinks only flush."""
        ...


SinkFactory = Callable[[str], Awaitable[ISink]]


# ---------------------------------------------------------------------------
# IProgressObserver
# ---------------------------------------------------------------------------

@runtime_checkable
class IProgressObserver(Protocol):
    """
    Presentation-side consumer of progress events.

    Implementations:
    - `RichProgressObserver` (terminal bars)
    - Recording observer for testing
    """

    def on_run_start(self, resources_total: int, workers: int) -> None:
        ...

    def on_resource_progress(self, worker_id: int, resource: str, done: int, total: int) -> None:
        ...

    def on_resource_done(self, worker_id: int, resource: str) -> None:
        ...

    def on_resource_failed(self, worker_id: int, resource: str, resources_failed: int) -> None:
        """`resource` was abandoned; `resources_failed` counts failures so far."""
        ...

    def on_overall_progress(self, resources_done: int, resources_total: int) -> None:
        """`resources_done` counts resources backed up successfully."""
        ...

    def on_run_end(self) -> None:
        ...
