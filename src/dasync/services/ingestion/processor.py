"""
Sequential processing of a window of rollup batch indices.

For each index, in strictly increasing order:

1. Fetch the rollup store entry. A failed fetch or a ``data_store_id`` of
   ``0`` (not yet produced) ends the pass.
2. Fetch the data store metadata. A missing or failed fetch ends the pass.
3. If the data store is confirmed, mirror it: rebuild the explorer
   transaction list, decode and persist the batch transactions, then
   persist the rollup store entry and the data store metadata.
4. Persist the checkpoint at this index, confirmed or not.

Errors raised while handling an index (decode failures, invalid payloads,
store errors, missing enqueue entries) propagate to the caller before the
checkpoint is written, so the index is retried on the next pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dasync.core.logger import Logger

from .decoder import decode_transaction


if TYPE_CHECKING:
    from collections.abc import Callable

    from dasync.core.store import Store
    from dasync.models import BatchIndexRange, TransactionEntry
    from dasync.services.common.client import DaClient


class BatchProcessor:
    """Mirrors confirmed data stores and advances the checkpoint.

    Args:
        store: Local persistence.
        client: Remote DA client.
        l2_chain_id: Chain id used to normalize signatures.
        strict_enqueue: Raise a missing-element error when a referenced
            enqueue entry is not in the store yet.
        on_index_synced: Called with ``(index, transaction_count)`` after
            each checkpoint write.
        logger: Logger to use; defaults to one named ``batch_processor``.
    """

    def __init__(
        self,
        store: Store,
        client: DaClient,
        *,
        l2_chain_id: int,
        strict_enqueue: bool = False,
        on_index_synced: Callable[[int, int], None] | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self._l2_chain_id = l2_chain_id
        self._strict_enqueue = strict_enqueue
        self._on_index_synced = on_index_synced
        self._logger = logger or Logger("batch_processor")

    async def process(self, window: BatchIndexRange) -> int:
        """Process ``window`` in order and return the number of indices advanced."""
        advanced = 0
        for index in window:
            if not await self.process_index(index):
                break
            advanced += 1
        return advanced

    async def process_index(self, index: int) -> bool:
        """Handle one batch index.

        Returns:
            True if the checkpoint was advanced to ``index``, False if the
            remote layer is not ready and the pass should stop.
        """
        self._logger.info("batch_index_sync_started", index=index)

        rollup = await self._client.get_rollup_store(index)
        if rollup is None or not rollup.is_available:
            self._logger.info("rollup_store_unavailable", index=index)
            return False

        store_id = rollup.data_store_id
        data_store = await self._client.get_data_store(store_id)
        if data_store is None:
            self._logger.info("data_store_unavailable", index=index, store_id=store_id)
            return False

        tx_count = 0
        if data_store.confirmed:
            await self._store_transaction_list(store_id)
            tx_count = await self._store_batch_transactions(store_id, index)
            await self._store.put_rollup_store_by_batch_index(rollup, index)
            await self._store.put_ds_by_id(data_store, store_id)
        else:
            self._logger.debug("data_store_unconfirmed", index=index, store_id=store_id)

        await self._store.put_last_batch_index(index)
        self._logger.info(
            "batch_index_synced",
            index=index,
            store_id=store_id,
            confirmed=data_store.confirmed,
            transactions=tx_count,
        )
        if self._on_index_synced is not None:
            self._on_index_synced(index, tx_count)
        return True

    async def _store_transaction_list(self, store_id: int) -> None:
        entries = await self._client.get_transaction_list(store_id)
        if not entries:
            return
        await self._store.put_tx_list_by_ds_id(entries, store_id)

    async def _store_batch_transactions(self, store_id: int, batch_index: int) -> int:
        """Decode and persist the transactions of a data store.

        Returns:
            The number of transactions written (``0`` when none were fetched).
        """
        raw_transactions = await self._client.get_batch_transactions(store_id)
        if not raw_transactions:
            self._logger.info("batch_transactions_empty", store_id=store_id)
            return 0

        transactions: list[TransactionEntry] = []
        for raw in raw_transactions:
            queue_index = raw.tx_meta.queue_index
            enqueue = (
                await self._store.get_enqueue_by_index(queue_index)
                if queue_index is not None
                else None
            )
            entry = decode_transaction(
                raw,
                batch_index=batch_index,
                l2_chain_id=self._l2_chain_id,
                enqueue=enqueue,
                strict_enqueue=self._strict_enqueue,
            )
            if entry.decoded is not None and not entry.decoded.sig.has_recovery_id:
                self._logger.warning(
                    "unexpected_signature_v",
                    index=entry.index,
                    batch_index=batch_index,
                    v=entry.decoded.sig.v,
                    chain_id=self._l2_chain_id,
                )
            transactions.append(entry)

        await self._store.put_transactions(transactions)
        await self._store.put_batch_transactions_by_ds_id(transactions, store_id)
        return len(transactions)

