"""Shared fixtures for integration tests.

Tests are skipped unless RUN_FRONTIER_NETWORK_TESTS=1.
"""

import pytest_asyncio

from digitalbits.frontier import ClientConfig, Network, Server


@pytest_asyncio.fixture
async def testnet():
    async with Server(ClientConfig.for_network(Network.TESTNET)) as server:
        yield server
