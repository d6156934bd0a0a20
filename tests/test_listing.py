"""Tests for paginated branch listing."""

from __future__ import annotations

import pytest

from gitextender import ProviderError, list_all_branches
from gitextender.provider.protocols import BranchPage
from tests.fakes import FakeProvider


async def test_single_page():
    fake = FakeProvider({"main": "a", "feature/x": "b"})
    branches = await list_all_branches(fake, "acme", "shop")
    assert [b.name for b in branches] == ["main", "feature/x"]
    assert fake.calls_to("list_branches") == [(1,)]


async def test_follows_pages_until_no_next():
    fake = FakeProvider({f"feature/{i}": f"sha{i}" for i in range(7)}, page_size=3)
    branches = await list_all_branches(fake, "acme", "shop")
    assert len(branches) == 7
    assert [b.sha for b in branches] == [f"sha{i}" for i in range(7)]
    assert fake.calls_to("list_branches") == [(1,), (2,), (3,)]


async def test_exact_page_boundary_stops_on_missing_next():
    fake = FakeProvider({f"b{i}": str(i) for i in range(6)}, page_size=3)
    branches = await list_all_branches(fake, "acme", "shop")
    assert len(branches) == 6
    assert fake.calls_to("list_branches") == [(1,), (2,)]


async def test_empty_repository():
    fake = FakeProvider()
    assert await list_all_branches(fake, "acme", "shop") == []


async def test_stops_on_empty_page_even_if_next_signalled():
    class LyingProvider(FakeProvider):
        async def list_branches(self, owner, repo, page=1):
            await self._enter("list_branches", page)
            if page == 1:
                return BranchPage(
                    branches=[{"name": "feature/a", "sha": "1"}], has_next=True
                )
            return BranchPage(branches=[], has_next=True)

    fake = LyingProvider()
    branches = await list_all_branches(fake, "acme", "shop")
    assert [b.name for b in branches] == ["feature/a"]
    assert fake.calls_to("list_branches") == [(1,), (2,)]


async def test_failed_page_aborts_without_partial_result():
    fake = FakeProvider({f"feature/{i}": str(i) for i in range(5)}, page_size=2)
    fake.fail("list_branches", 2)
    with pytest.raises(ProviderError):
        await list_all_branches(fake, "acme", "shop")
