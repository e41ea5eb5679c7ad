"""Pytest fixtures for testing"""

from typing import Any, Dict

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from csas_sync.auth.oauth_manager import TokenManager
from csas_sync.data.entity_cache import EntityCache
from csas_sync.data.bank_connector import BankConnector
from csas_sync.aggregator.transaction_aggregator import TransactionAggregator
from tests.helpers import FakeBank


@pytest_asyncio.fixture
async def fake_bank():
    """Running fake bank server"""
    bank = FakeBank()
    server = TestServer(bank.make_app())
    await server.start_server()
    bank.host = f"http://{server.host}:{server.port}"
    try:
        yield bank
    finally:
        await server.close()


@pytest.fixture
def csas_config(fake_bank: FakeBank) -> Dict[str, Any]:
    return {
        "host": fake_bank.host,
        "client_id": "client-id",
        "client_secret": "client-secret",
        "refresh_token": "refresh-token",
        "web_api_key": "api-key",
        "redirect_uri": "https://localhost/code",
        "timeout": 5,
    }


@pytest.fixture
def token_manager(csas_config: Dict[str, Any]) -> TokenManager:
    return TokenManager(csas_config)


@pytest.fixture
def entity_cache() -> EntityCache:
    return EntityCache()


@pytest.fixture
def bank_connector(token_manager: TokenManager, entity_cache: EntityCache) -> BankConnector:
    return BankConnector(token_manager, entity_cache)


@pytest.fixture
def aggregator(bank_connector: BankConnector, entity_cache: EntityCache) -> TransactionAggregator:
    return TransactionAggregator(bank_connector, entity_cache, history_interval=14)
