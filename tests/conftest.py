"""
Test configuration and fixtures for txbridge tests
"""

import asyncio
import os

import pytest
from eth_account import Account

from tests.core.signing import (
    CONTRACT_RECIPIENT,
    EOA_RECIPIENT,
    sign_legacy_transaction,
    test_private_keys,
)


@pytest.fixture
def test_key():
    return test_private_keys[0]


@pytest.fixture
def test_account(test_key):
    return Account.from_key(test_key)


@pytest.fixture
def signed_transfer(test_key):
    """1 token transfer to an externally owned account, no data"""
    return sign_legacy_transaction(test_key, to=EOA_RECIPIENT, value=10**18)


@pytest.fixture
def mock_transport():
    """In-memory gateway for testing without network calls"""
    from tests.core.mock_transport import MockActionTransport

    transport = MockActionTransport()
    transport.set_account(EOA_RECIPIENT, is_contract=False)
    transport.set_account(CONTRACT_RECIPIENT, is_contract=True)
    return transport


def pytest_collection_modifyitems(config, items):
    """Automatically mark async tests"""
    for item in items:
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)


def pytest_configure(config):
    """Configure test environment"""
    os.environ.setdefault("TXBRIDGE_LOG_LEVEL", "DEBUG")

    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
