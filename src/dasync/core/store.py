"""
Persistence layer for synchronized rollup data.

The [Store][dasync.core.store.Store] implements the storage contract the
ingestion service depends on: the batch checkpoint, base-layer enqueue
entries, decoded transactions (by index and grouped by data store), the
explorer transaction list, rollup store entries and data store metadata.

Everything lives in one namespaced key-value table::

    kv_entry(namespace TEXT, key TEXT, value JSONB, updated_at BIGINT)

Every write is an upsert keyed by a stable identifier, so replaying a batch
after a restart overwrites identical rows instead of duplicating them.
Bulk writes pass column arrays to ``unnest`` for a single round-trip per
chunk and run all chunks of one call inside a single transaction.

Uses composition with [Pool][dasync.core.pool.Pool] for connection
management and implements an async context manager for automatic pool
lifecycle handling.
"""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any

import asyncpg
from pydantic import BaseModel, Field, field_validator

from dasync.models import (
    LAST_BATCH_INDEX_KEY,
    DataStoreEntry,
    EnqueueEntry,
    RollupStoreEntry,
    StoreNamespace,
    TransactionEntry,
    TransactionListEntry,
)

from .exceptions import QueryError
from .logger import Logger
from .pool import Pool, PoolConfig
from .yaml import load_yaml


if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


_MIN_TIMEOUT_SECONDS = 0.1  # Floor for all configurable timeouts

_CREATE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv_entry (
    namespace TEXT NOT NULL,
    key TEXT NOT NULL,
    value JSONB NOT NULL,
    updated_at BIGINT NOT NULL,
    PRIMARY KEY (namespace, key)
)
"""

_UPSERT_SQL = """
INSERT INTO kv_entry (namespace, key, value, updated_at)
SELECT $1, t.key, t.value::jsonb, $4
FROM unnest($2::text[], $3::text[]) AS t(key, value)
ON CONFLICT (namespace, key)
DO UPDATE SET value = EXCLUDED.value, updated_at = EXCLUDED.updated_at
"""

_SELECT_SQL = "SELECT value FROM kv_entry WHERE namespace = $1 AND key = $2"


# ---------------------------------------------------------------------------
# Configuration Models
# ---------------------------------------------------------------------------


class BatchConfig(BaseModel):
    """Controls the maximum number of rows per bulk upsert statement."""

    max_size: int = Field(
        default=1000, ge=1, le=100_000, description="Maximum rows per upsert statement"
    )


class StoreTimeoutsConfig(BaseModel):
    """Timeout settings for Store operations (in seconds).

    Each timeout can be set to None for no limit or to a float >= 0.1.
    """

    query: float | None = Field(default=60.0, description="Query timeout (seconds, None=infinite)")
    batch: float | None = Field(
        default=120.0, description="Bulk upsert timeout (seconds, None=infinite)"
    )

    @field_validator("query", "batch", mode="after")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        """Validate timeout: None (infinite) or >= 0.1 seconds."""
        if v is not None and v < _MIN_TIMEOUT_SECONDS:
            raise ValueError(
                f"Timeout must be None (infinite) or >= {_MIN_TIMEOUT_SECONDS} seconds"
            )
        return v


class StoreConfig(BaseModel):
    """Aggregate configuration for the Store."""

    batch: BatchConfig = Field(default_factory=BatchConfig)
    timeouts: StoreTimeoutsConfig = Field(default_factory=StoreTimeoutsConfig)


# ---------------------------------------------------------------------------
# Store Class
# ---------------------------------------------------------------------------


class Store:
    """Durable storage for the synchronization engine.

    All ``put_*`` methods return once the write is committed. Getters
    return ``None`` (or an empty list) for keys that were never written.

    Example:
        store = Store.from_yaml("config/store.yaml")

        async with store:
            await store.create_schema()
            await store.put_last_batch_index(42)
            assert await store.get_last_batch_index() == 42
    """

    def __init__(
        self,
        pool: Pool | None = None,
        config: StoreConfig | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            pool: Connection pool for database access. Creates a default
                Pool if not provided.
            config: Store configuration (batch sizes, timeouts).
        """
        self._pool = pool or Pool()
        self._config = config or StoreConfig()
        self._logger = Logger("store")

    @property
    def config(self) -> StoreConfig:
        """The Store configuration (read-only)."""
        return self._config

    @property
    def pool_config(self) -> PoolConfig:
        """Read-only access to the underlying pool configuration."""
        return self._pool.config

    @classmethod
    def from_yaml(cls, config_path: str) -> Store:
        """Create a Store from a YAML file with a ``pool`` key and optional ``batch``/``timeouts``."""
        return cls.from_dict(load_yaml(config_path))

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> Store:
        """Create a Store from a configuration dictionary.

        Extracts the ``pool`` key to build the Pool and passes the remaining
        keys as StoreConfig fields.
        """
        pool = None
        if "pool" in config_dict:
            pool = Pool.from_dict(config_dict["pool"])

        store_config_dict = {k: v for k, v in config_dict.items() if k != "pool"}
        config = StoreConfig(**store_config_dict) if store_config_dict else None

        return cls(pool=pool, config=config)

    # -------------------------------------------------------------------------
    # Helper Methods
    # -------------------------------------------------------------------------

    def _chunks(self, rows: Sequence[tuple[str, str]]) -> Iterator[Sequence[tuple[str, str]]]:
        size = self._config.batch.max_size
        for offset in range(0, len(rows), size):
            yield rows[offset : offset + size]

    async def _upsert(self, namespace: StoreNamespace, items: Sequence[tuple[str, Any]]) -> int:
        """Upsert ``(key, value)`` pairs into one namespace.

        Values are serialized to JSON here; rows are split into chunks of
        ``batch.max_size`` and written in a single transaction.

        Raises:
            QueryError: On a PostgreSQL error.
            ConnectionPoolError: If no connection could be obtained.
        """
        if not items:
            return 0

        rows = [(key, json.dumps(value)) for key, value in items]
        updated_at = int(time.time())

        try:
            async with self._pool.transaction() as conn:
                for chunk in self._chunks(rows):
                    keys = [key for key, _ in chunk]
                    values = [value for _, value in chunk]
                    await conn.execute(
                        _UPSERT_SQL,
                        namespace.value,
                        keys,
                        values,
                        updated_at,
                        timeout=self._config.timeouts.batch,
                    )
        except asyncpg.PostgresError as e:
            raise QueryError(f"upsert into {namespace} failed: {e}") from e

        self._logger.debug("kv_upserted", namespace=namespace.value, count=len(rows))
        return len(rows)

    async def _get(self, namespace: StoreNamespace, key: str) -> Any:
        """Return the decoded JSON value stored under ``(namespace, key)``, or None."""
        try:
            return await self._pool.fetchval(
                _SELECT_SQL, namespace.value, key, timeout=self._config.timeouts.query
            )
        except asyncpg.PostgresError as e:
            raise QueryError(f"read from {namespace} failed: {e}") from e

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    async def create_schema(self) -> None:
        """Create the ``kv_entry`` table if it does not exist. Idempotent."""
        try:
            await self._pool.execute(_CREATE_SCHEMA_SQL, timeout=self._config.timeouts.query)
        except asyncpg.PostgresError as e:
            raise QueryError(f"schema creation failed: {e}") from e
        self._logger.info("schema_ready")

    # -------------------------------------------------------------------------
    # Checkpoint
    # -------------------------------------------------------------------------

    async def get_last_batch_index(self) -> int | None:
        """Return the last fully handled batch index, or None if never written."""
        value = await self._get(StoreNamespace.CHECKPOINT, LAST_BATCH_INDEX_KEY)
        return int(value) if value is not None else None

    async def put_last_batch_index(self, index: int) -> None:
        """Persist the checkpoint."""
        await self._upsert(StoreNamespace.CHECKPOINT, [(LAST_BATCH_INDEX_KEY, index)])

    # -------------------------------------------------------------------------
    # Enqueue Entries
    # -------------------------------------------------------------------------

    async def get_enqueue_by_index(self, index: int) -> EnqueueEntry | None:
        """Return the base-layer enqueue entry for a queue index, or None."""
        value = await self._get(StoreNamespace.ENQUEUE, str(index))
        return EnqueueEntry.from_payload(value) if value is not None else None

    async def put_enqueues(self, entries: list[EnqueueEntry]) -> int:
        """Upsert enqueue entries keyed by queue index.

        Written by base-layer ingestion; the sync engine only reads them.
        """
        return await self._upsert(
            StoreNamespace.ENQUEUE, [(str(e.index), e.to_payload()) for e in entries]
        )

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def put_transactions(self, transactions: list[TransactionEntry]) -> int:
        """Upsert decoded transactions keyed by transaction index."""
        return await self._upsert(
            StoreNamespace.TRANSACTION,
            [(str(tx.index), tx.to_payload()) for tx in transactions],
        )

    async def get_transaction_by_index(self, index: int) -> TransactionEntry | None:
        value = await self._get(StoreNamespace.TRANSACTION, str(index))
        return TransactionEntry.from_payload(value) if value is not None else None

    async def put_batch_transactions_by_ds_id(
        self, transactions: list[TransactionEntry], store_id: int
    ) -> None:
        """Replace the transaction group of a data store."""
        await self._upsert(
            StoreNamespace.BATCH_TRANSACTION,
            [(str(store_id), [tx.to_payload() for tx in transactions])],
        )

    async def get_batch_transactions_by_ds_id(self, store_id: int) -> list[TransactionEntry]:
        value = await self._get(StoreNamespace.BATCH_TRANSACTION, str(store_id))
        return [TransactionEntry.from_payload(item) for item in value or []]

    async def put_tx_list_by_ds_id(self, entries: list[TransactionListEntry], store_id: int) -> None:
        """Replace the explorer transaction list of a data store."""
        await self._upsert(
            StoreNamespace.TRANSACTION_LIST,
            [(str(store_id), [entry.to_payload() for entry in entries])],
        )

    async def get_tx_list_by_ds_id(self, store_id: int) -> list[TransactionListEntry]:
        value = await self._get(StoreNamespace.TRANSACTION_LIST, str(store_id))
        return [TransactionListEntry.from_payload(item) for item in value or []]

    # -------------------------------------------------------------------------
    # Rollup and Data Stores
    # -------------------------------------------------------------------------

    async def put_rollup_store_by_batch_index(self, entry: RollupStoreEntry, index: int) -> None:
        await self._upsert(StoreNamespace.ROLLUP_STORE, [(str(index), entry.to_payload())])

    async def get_rollup_store_by_batch_index(self, index: int) -> RollupStoreEntry | None:
        value = await self._get(StoreNamespace.ROLLUP_STORE, str(index))
        return RollupStoreEntry.from_payload(value) if value is not None else None

    async def put_ds_by_id(self, entry: DataStoreEntry, store_id: int) -> None:
        await self._upsert(StoreNamespace.DATA_STORE, [(str(store_id), entry.to_payload())])

    async def get_ds_by_id(self, store_id: int) -> DataStoreEntry | None:
        value = await self._get(StoreNamespace.DATA_STORE, str(store_id))
        return DataStoreEntry.from_payload(value) if value is not None else None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def connect(self) -> None:
        """Connect the underlying pool. Idempotent."""
        await self._pool.connect()
        self._logger.debug("session_started")

    async def close(self) -> None:
        """Close the underlying pool. Idempotent."""
        self._logger.debug("session_ending")
        await self._pool.close()

    async def __aenter__(self) -> Store:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        db = self._pool.config.database
        return f"Store(host={db.host}, database={db.database}, connected={self._pool.is_connected})"
