"""Fixtures for registry client component tests (uses respx to mock HTTP calls).

Run standalone: pytest tests/components/registry/ -v
No real mock server required.
"""

import pytest
import pytest_asyncio
import respx

from mockdeck.cli.client import RegistryClient

BACKEND = "http://mock.test"


@pytest.fixture
def backend():
    """respx router standing in for the mock server's admin API."""
    with respx.mock(base_url=BACKEND, assert_all_called=False) as router:
        yield router


@pytest_asyncio.fixture
async def client(state, backend):
    async with RegistryClient(state, base_url=BACKEND) as c:
        yield c
