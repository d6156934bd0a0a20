"""Shared test fixtures for GitExtender.

Provides a repository handle, a fake provider seeded with the three
default target branches, and a fixed clock.
"""

from datetime import datetime, timezone

import pytest

from gitextender.models.repository import RepositoryHandle
from tests.fakes import FakeProvider

FIXED_NOW = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def repo() -> RepositoryHandle:
    return RepositoryHandle(owner="acme", name="shop", token="t0k3n")


@pytest.fixture
def anonymous_repo() -> RepositoryHandle:
    return RepositoryHandle(owner="acme", name="shop")


@pytest.fixture
def provider() -> FakeProvider:
    """Fake provider with Development, Quality and Production present."""
    fake = FakeProvider()
    fake.add_branch("main", "sha-main")
    fake.add_branch("Development", "sha-dev")
    fake.add_branch("Quality", "sha-qa")
    fake.add_branch("Production", "sha-prod")
    return fake


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
