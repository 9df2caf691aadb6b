"""
Pytest configuration and shared fixtures for dasync tests.

Provides:
- Mock fixtures for asyncpg, Pool and Store
- A mock remote DA client
- Sample wire payloads for rollup stores, data stores and transactions
"""

import base64
import logging
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from dasync.core.pool import DatabaseConfig, Pool, PoolConfig
from dasync.core.store import Store


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Database Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_connection() -> MagicMock:
    """Create a mock asyncpg connection."""
    conn = MagicMock()
    conn.fetchval = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="OK")

    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=conn)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    conn.transaction = MagicMock(return_value=mock_transaction)

    return conn


@pytest.fixture
def mock_asyncpg_pool(mock_connection: MagicMock) -> MagicMock:
    """Create a mock asyncpg pool."""
    pool = MagicMock()
    pool.close = AsyncMock()

    mock_acquire = MagicMock()
    mock_acquire.__aenter__ = AsyncMock(return_value=mock_connection)
    mock_acquire.__aexit__ = AsyncMock(return_value=None)
    pool.acquire = MagicMock(return_value=mock_acquire)

    return pool


@pytest.fixture
def mock_pool(
    mock_asyncpg_pool: MagicMock, mock_connection: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> Pool:
    """Create a connected Pool with mocked internals."""
    monkeypatch.setenv("DB_PASSWORD", "test_password")

    config = PoolConfig(
        database=DatabaseConfig(
            host="localhost",
            port=5432,
            database="test_db",
            user="test_user",
        )
    )
    pool = Pool(config=config)
    pool._pool = mock_asyncpg_pool
    pool._is_connected = True

    pool._mock_connection = mock_connection  # type: ignore[attr-defined]

    return pool


@pytest.fixture
def mock_store(mock_pool: Pool) -> Store:
    """Create a Store backed by the mocked pool."""
    return Store(pool=mock_pool)


@pytest.fixture
def store_double() -> MagicMock:
    """A Store stand-in with every contract method as an AsyncMock."""
    store = MagicMock(spec=Store)
    store.get_last_batch_index = AsyncMock(return_value=None)
    store.put_last_batch_index = AsyncMock()
    store.get_enqueue_by_index = AsyncMock(return_value=None)
    store.put_transactions = AsyncMock(return_value=0)
    store.put_batch_transactions_by_ds_id = AsyncMock()
    store.put_tx_list_by_ds_id = AsyncMock()
    store.put_rollup_store_by_batch_index = AsyncMock()
    store.put_ds_by_id = AsyncMock()
    return store


@pytest.fixture
def client_double() -> MagicMock:
    """A DaClient stand-in with every endpoint as an AsyncMock."""
    client = MagicMock()
    client.open = AsyncMock()
    client.close = AsyncMock()
    client.get_latest_batch_index = AsyncMock(return_value=0)
    client.get_rollup_store = AsyncMock(return_value=None)
    client.get_data_store = AsyncMock(return_value=None)
    client.get_batch_transactions = AsyncMock(return_value=[])
    client.get_transaction_list = AsyncMock(return_value=[])
    return client


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def pool_config_dict() -> dict[str, Any]:
    """Sample pool configuration dictionary."""
    return {
        "database": {
            "host": "localhost",
            "port": 5432,
            "database": "test_db",
            "user": "test_user",
        },
        "limits": {
            "min_size": 2,
            "max_size": 10,
            "max_queries": 1000,
            "max_inactive_connection_lifetime": 60.0,
        },
        "timeouts": {
            "acquisition": 5.0,
        },
        "retry": {
            "max_attempts": 2,
            "initial_delay": 0.5,
            "max_delay": 2.0,
            "exponential_backoff": True,
        },
        "server_settings": {
            "application_name": "test_app",
            "timezone": "UTC",
        },
    }


# ============================================================================
# Sample Wire Payloads
# ============================================================================


RAW_TX_BYTES = bytes.fromhex("f86c0a8502540be400")
RAW_TX_BASE64 = base64.b64encode(RAW_TX_BYTES).decode()


def make_batch_tx(
    index: int = 100,
    *,
    queue_origin: int = 0,
    queue_index: int | None = None,
    v: int | str = 10035,
    r: str = "0xab",
    s: str = "0x" + "1" * 64,
    to: str | None = "0x" + "c" * 40,
) -> dict[str, Any]:
    """Build one element of the batch transactions response."""
    return {
        "TxMeta": {
            "index": index,
            "l1BlockNumber": 1234,
            "l1Timestamp": 1700000000,
            "queueOrigin": queue_origin,
            "queueIndex": queue_index,
            "rawTransaction": RAW_TX_BASE64,
        },
        "TxDetail": {
            "nonce": "0x0a",
            "gasPrice": 10_000_000_000,
            "gas": "21000",
            "value": "0x0",
            "to": to,
            "input": "0x",
            "v": v,
            "r": r,
            "s": s,
        },
    }


def make_data_store(store_id: int = 7, *, confirmed: bool = True) -> dict[str, Any]:
    """Build a data store response in the remote PascalCase shape."""
    return {
        "Id": store_id,
        "StoreNumber": store_id,
        "DurationDataStoreId": 3,
        "Index": 1,
        "DataCommitment": "0xdeadbeef",
        "MsgHash": "0xfeed",
        "StakesFromBlockNumber": 100,
        "InitTime": 1700000000,
        "ExpireTime": 1700086400,
        "Duration": 1,
        "NumSys": 8,
        "NumPar": 4,
        "Degree": 2,
        "StorePeriodLength": 10,
        "Fee": 12345,
        "Confirmer": "0x" + "a" * 40,
        "Header": "0x01",
        "InitTxHash": "0x" + "b" * 64,
        "InitGasUsed": 21000,
        "InitBlockNumber": 99,
        "Confirmed": confirmed,
        "EthSigned": "100",
        "EigenSigned": "100",
        "NonSignerPubKeyHashes": None,
        "SignatoryRecord": "0x",
        "ConfirmTxHash": "0x" + "c" * 64,
        "ConfirmGasUsed": 50000,
    }


@pytest.fixture
def batch_tx_payload() -> dict[str, Any]:
    return make_batch_tx()


@pytest.fixture
def data_store_payload() -> dict[str, Any]:
    return make_data_store()


@pytest.fixture
def batch_tx_factory() -> Any:
    """Return the ``make_batch_tx`` builder."""
    return make_batch_tx


@pytest.fixture
def data_store_factory() -> Any:
    """Return the ``make_data_store`` builder."""
    return make_data_store
