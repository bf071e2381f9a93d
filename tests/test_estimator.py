import pytest

from tpbackup.constants import DETECTION_START
from tpbackup.core.models import ResourcePage
from tpbackup.core.use_cases.backup import estimate_size


@pytest.mark.asyncio
@pytest.mark.parametrize("size", [0, 1, 2, 3, 250, 499, 500, 501, 999, 1000, 1001, 4321, 10000])
async def test_estimate_size_is_exact(fake_pages, size: int) -> None:
    pages = fake_pages({"Bugs": size})

    assert await estimate_size(pages, "Bugs") == size


@pytest.mark.asyncio
async def test_estimate_size_only_requests_single_items(fake_pages) -> None:
    pages = fake_pages({"Bugs": 10000})

    await estimate_size(pages, "Bugs")

    assert pages.calls
    assert all(take == 1 for _, take, _ in pages.calls)
    # doubling phase: 500, 1000, 2000, 4000, 8000, 16000
    assert [skip for _, _, skip in pages.calls[:6]] == [500, 1000, 2000, 4000, 8000, 16000]
    assert len(pages.calls) < 6 + 16


@pytest.mark.asyncio
async def test_estimate_size_small_collection_past_start(fake_pages) -> None:
    pages = fake_pages({"Bugs": DETECTION_START + 1})

    assert await estimate_size(pages, "Bugs") == DETECTION_START + 1
    # the last item sits exactly at the initial guess: answered by one request
    assert len(pages.calls) == 1


@pytest.mark.asyncio
async def test_estimate_size_custom_start(fake_pages) -> None:
    pages = fake_pages({"Bugs": 37})

    assert await estimate_size(pages, "Bugs", start=4) == 37


class ShrinkingPages:
    """Items below `limit` exist but always claim a next page (collection shrank)."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.calls = 0

    async def get_resource_page(self, resource: str, take: int, skip: int) -> ResourcePage:
        self.calls += 1
        if skip < self.limit:
            return ResourcePage(items=[{"Id": skip}], next="more")
        return ResourcePage(items=[], next=None)


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [1, 300, 777])
async def test_estimate_size_terminates_on_inconsistent_cursor(limit: int) -> None:
    pages = ShrinkingPages(limit)

    assert await estimate_size(pages, "Bugs") == limit
    assert pages.calls < 40
