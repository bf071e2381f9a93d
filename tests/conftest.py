import asyncio
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from tpbackup.core.models import ResourcePage


class FakePages:
    """In-memory page provider mimicking the API's skip/take paging."""

    def __init__(self, collections: dict[str, list[Any]], fail_at: dict[str, int] | None = None) -> None:
        self.collections = collections
        self.fail_at = fail_at or {}
        self.calls: list[tuple[str, int, int]] = []

    async def get_resource_page(self, resource: str, take: int, skip: int) -> ResourcePage:
        self.calls.append((resource, take, skip))
        await asyncio.sleep(0)
        if self.fail_at.get(resource) == skip:
            raise httpx.ConnectError(f"connection reset while fetching {resource}")
        items = self.collections[resource]
        page = items[skip : skip + take]
        has_next = skip + take < len(items)
        return ResourcePage(
            items=page,
            next=f"/api/v1/{resource}?skip={skip + take}&take={take}" if has_next else None,
            prev=None,
        )


class RecordingObserver:
    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_run_start(self, resources_total: int, workers: int) -> None:
        self.events.append(("start", resources_total, workers))

    def on_resource_progress(self, worker_id: int, resource: str, done: int, total: int) -> None:
        self.events.append(("progress", worker_id, resource, done, total))

    def on_resource_done(self, worker_id: int, resource: str) -> None:
        self.events.append(("done", worker_id, resource))

    def on_resource_failed(self, worker_id: int, resource: str, resources_failed: int) -> None:
        self.events.append(("failed", worker_id, resource, resources_failed))

    def on_overall_progress(self, resources_done: int, resources_total: int) -> None:
        self.events.append(("overall", resources_done, resources_total))

    def on_run_end(self) -> None:
        self.events.append(("end",))


def make_items(resource: str, n: int) -> list[dict[str, Any]]:
    return [{"Id": i, "Name": f"{resource} #{i}", "ResourceType": resource} for i in range(n)]


@pytest.fixture
def fake_pages():
    """Factory: fake_pages({"Bugs": 250, "Users": 0}) -> FakePages."""

    def _make(sizes: dict[str, int], fail_at: dict[str, int] | None = None) -> FakePages:
        return FakePages({name: make_items(name, n) for name, n in sizes.items()}, fail_at=fail_at)

    return _make


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def mock_pages():
    pages = AsyncMock()
    pages.get_resource_page = AsyncMock(return_value=ResourcePage(items=[], next=None))
    return pages
