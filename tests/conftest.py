"""Pytest configuration and shared fixtures.

Fixtures are organized by category:
- Config fixtures: Connection settings for a fake control plane
- Client fixtures: Real ChainlaunchClient and AsyncMock stand-ins
- Data fixtures: Sample API payloads
"""

from unittest.mock import AsyncMock

import pytest

from src.reconciler.api.client import ChainlaunchClient
from src.reconciler.config import ChainlaunchConfig

BASE_URL = "https://chainlaunch.example.com"
API_URL = f"{BASE_URL}/api/v1"


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def chainlaunch_config() -> ChainlaunchConfig:
    """Connection config using username/password auth."""
    return ChainlaunchConfig(url=BASE_URL, username="admin", password="s3cret")


@pytest.fixture
def api_key_config() -> ChainlaunchConfig:
    """Connection config using API key auth."""
    return ChainlaunchConfig(url=BASE_URL, api_key="key-123")


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
async def client(chainlaunch_config):
    """Real client; pair with respx to mock the API."""
    client = ChainlaunchClient(chainlaunch_config)
    yield client
    await client.close()


@pytest.fixture
def mock_client() -> AsyncMock:
    """AsyncMock with the ChainlaunchClient interface.

    Example:
        def test_something(mock_client):
            mock_client.post.return_value = b'{"id": 12}'
    """
    return AsyncMock(spec=ChainlaunchClient)


# =============================================================================
# Payload Fixtures
# =============================================================================


@pytest.fixture
def network_payload() -> dict:
    """Network descriptor returned by a join call."""
    return {
        "id": 12,
        "name": "mychannel",
        "platform": "fabric",
        "status": "running",
        "createdAt": "2024-05-01T10:00:00Z",
    }


@pytest.fixture
def nodes_payload() -> dict:
    """Members of network 12."""
    return {
        "nodes": [
            {"nodeId": 3, "role": "orderer", "status": "joined"},
            {"nodeId": 7, "role": "peer", "status": "joined"},
        ]
    }
