"""
Async client for the remote data-availability API.

Every call except the latest batch index query converts transport failures
(connection errors, timeouts, non-2xx statuses, oversized or non-JSON
bodies) into a sentinel value so a sync pass can stop cleanly at the
current index:

| Call | Sentinel |
|---|---|
| ``get_rollup_store`` | ``None`` |
| ``get_data_store`` | ``None`` |
| ``get_batch_transactions`` | ``[]`` |
| ``get_transaction_list`` | ``[]`` |

The latest batch index has no safe sentinel, so its failure raises
[TransportError][dasync.core.exceptions.TransportError] unless
``latest_index_fallback`` is configured.

A body that is valid JSON but does not match its schema raises
[PayloadError][dasync.core.exceptions.PayloadError].

Examples:
    ```python
    async with DaClient(RemoteConfig(host="mt-batcher", port=8080)) as client:
        latest = await client.get_latest_batch_index()
        rollup = await client.get_rollup_store(latest - 1)
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from dasync.core.exceptions import PayloadError, TransportError
from dasync.core.logger import Logger
from dasync.utils.http import read_bounded_json

from .schemas import (
    BatchTransactionSchema,
    DataStoreSchema,
    RollupStoreSchema,
    TransactionListItemSchema,
)


if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from dasync.models import DataStoreEntry, RollupStoreEntry, TransactionListEntry

    from .configs import RemoteConfig


SchemaT = TypeVar("SchemaT", bound=BaseModel)

LATEST_BATCH_INDEX_PATH = "/eigen/getLatestTransactionBatchIndex"
ROLLUP_STORE_PATH = "/eigen/getRollupStoreByRollupBatchIndex"
BATCH_TRANSACTIONS_PATH = "/dtl/getBatchTransactionByDataStoreId"
DATA_STORE_PATH = "/browser/getDataStoreById"
TRANSACTION_LIST_PATH = "/browser/GetTransactionListByStoreNumber"

_TRANSPORT_ERRORS = (TimeoutError, OSError, aiohttp.ClientError, ValueError)


class _CallFailedError(Exception):
    """Internal marker: the HTTP exchange failed before a JSON body was obtained."""


def _validate(schema: type[SchemaT], data: Any, path: str) -> SchemaT:
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise PayloadError(f"unexpected response from {path}: {e}", code=path) from e


def _validate_list(schema: type[SchemaT], data: Any, path: str) -> list[SchemaT]:
    # Empty object and null both mean "no entries"
    if data is None or data == {}:
        return []
    if not isinstance(data, list):
        raise PayloadError(
            f"unexpected response from {path}: expected a list, got {type(data).__name__}",
            code=path,
        )
    return [_validate(schema, item, path) for item in data]


class DaClient:
    """HTTP client for the remote DA endpoints.

    Owns one ``aiohttp.ClientSession`` for connection pooling; use it as an
    async context manager or call ``open()``/``close()`` explicitly.

    Args:
        config: Remote API settings.
        on_transport_error: Optional callback invoked with the request path
            whenever a call degrades to its sentinel.
    """

    def __init__(
        self,
        config: RemoteConfig,
        *,
        on_transport_error: Callable[[str], None] | None = None,
    ) -> None:
        self._config = config
        self._on_transport_error = on_transport_error
        self._session: aiohttp.ClientSession | None = None
        self._logger = Logger("da_client")

    @property
    def config(self) -> RemoteConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Session Lifecycle
    # -------------------------------------------------------------------------

    async def open(self) -> None:
        """Create the HTTP session. Idempotent."""
        if self._session is None:
            timeout = aiohttp.ClientTimeout(
                total=self._config.timeout,
                connect=min(self._config.connect_timeout, self._config.timeout),
                sock_read=self._config.timeout,
            )
            self._session = aiohttp.ClientSession(
                base_url=self._config.base_url,
                timeout=timeout,
                headers={"Accept": "application/json"},
            )

    async def close(self) -> None:
        """Close the HTTP session. Idempotent."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> DaClient:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        """Perform one request and return the parsed JSON body.

        Raises:
            _CallFailedError: On any transport-level failure (logged here).
        """
        if self._session is None:
            raise RuntimeError("DaClient not opened. Call open() first.")

        try:
            async with self._session.request(method, path, json=body) as resp:
                resp.raise_for_status()
                return await read_bounded_json(resp, self._config.max_response_size)
        except _TRANSPORT_ERRORS as e:
            self._logger.warning(
                "remote_call_failed",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            if self._on_transport_error is not None:
                self._on_transport_error(path)
            raise _CallFailedError(path) from e

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    async def get_latest_batch_index(self) -> int:
        """Return the latest batch index known to the remote layer.

        Raises:
            TransportError: If the call fails and no fallback is configured.
            PayloadError: If the response is not a non-negative integer.
        """
        fallback = self._config.latest_index_fallback
        try:
            data = await self._request("GET", LATEST_BATCH_INDEX_PATH)
        except _CallFailedError as e:
            if fallback is not None:
                self._logger.warning("latest_index_fallback_used", fallback=fallback)
                return fallback
            raise TransportError(
                "latest batch index unavailable", code=LATEST_BATCH_INDEX_PATH
            ) from e

        if isinstance(data, bool) or not isinstance(data, int) or data < 0:
            if fallback is not None:
                self._logger.warning(
                    "latest_index_fallback_used", fallback=fallback, response=data
                )
                return fallback
            raise PayloadError(
                f"unexpected response from {LATEST_BATCH_INDEX_PATH}: {data!r}",
                code=LATEST_BATCH_INDEX_PATH,
            )
        return data

    async def get_rollup_store(self, batch_index: int) -> RollupStoreEntry | None:
        """Return the rollup store entry of a batch index, or None on failure."""
        try:
            data = await self._request("POST", ROLLUP_STORE_PATH, {"batch_index": batch_index})
        except _CallFailedError:
            return None
        if data is None:
            return None
        return _validate(RollupStoreSchema, data, ROLLUP_STORE_PATH).to_entry(batch_index)

    async def get_data_store(self, store_id: int) -> DataStoreEntry | None:
        """Return data store metadata, or None if absent or on failure."""
        try:
            data = await self._request("POST", DATA_STORE_PATH, {"store_id": str(store_id)})
        except _CallFailedError:
            return None
        if data is None or data == {}:
            return None
        return _validate(DataStoreSchema, data, DATA_STORE_PATH).to_entry()

    async def get_batch_transactions(self, store_number: int) -> list[BatchTransactionSchema]:
        """Return the raw transactions of a data store, or ``[]`` on failure."""
        try:
            data = await self._request(
                "POST", BATCH_TRANSACTIONS_PATH, {"store_number": store_number}
            )
        except _CallFailedError:
            return []
        return _validate_list(BatchTransactionSchema, data, BATCH_TRANSACTIONS_PATH)

    async def get_transaction_list(self, store_number: int) -> list[TransactionListEntry]:
        """Return the explorer transaction list of a data store, or ``[]`` on failure.

        Entries are numbered by their position in the response.
        """
        try:
            data = await self._request(
                "POST", TRANSACTION_LIST_PATH, {"store_number": store_number}
            )
        except _CallFailedError:
            return []
        items = _validate_list(TransactionListItemSchema, data, TRANSACTION_LIST_PATH)
        return [item.to_entry(position) for position, item in enumerate(items)]
