"""DA ingestion service for dasync.

Mirrors rollup batches published to a data-availability layer into the
local [Store][dasync.core.store.Store]. Each cycle plans a window of batch
indices starting at the stored checkpoint, bounded by ``sync_step`` and by
the latest index reported remotely, and hands it to the
[BatchProcessor][dasync.services.ingestion.processor.BatchProcessor].

On entry the service writes ``init_batch_index`` as the checkpoint when
none is stored yet (or the stored one is not positive).

Failure handling is inherited from
[BaseService.run_forever()][dasync.core.base_service.BaseService.run_forever]:
a missing enqueue entry is retried, a failed latest-index call is retried a
bounded number of times, anything else stops the service unless
``dangerously_catch_all_errors`` is set.

Examples:
    ```python
    from dasync.core import Store
    from dasync.services import DaIngestion

    store = Store.from_yaml("config/store.yaml")
    service = DaIngestion.from_yaml("config/services/da_ingestion.yaml", store=store)

    async with store, service:
        await service.run_forever()
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from dasync.core.base_service import BaseService
from dasync.models.constants import ServiceName
from dasync.services.common.client import DaClient

from .configs import DaIngestionConfig
from .planner import plan_range
from .processor import BatchProcessor


if TYPE_CHECKING:
    from types import TracebackType

    from dasync.core.store import Store
    from dasync.models import BatchIndexRange


class DaIngestion(BaseService[DaIngestionConfig]):
    """Batch synchronization service.

    Args:
        store: Local persistence.
        config: Service configuration.
        client: Remote DA client; built from ``config.remote`` if omitted.
    """

    SERVICE_NAME: ClassVar[ServiceName] = ServiceName.DA_INGESTION
    CONFIG_CLASS: ClassVar[type[DaIngestionConfig]] = DaIngestionConfig

    def __init__(
        self,
        store: Store,
        config: DaIngestionConfig | None = None,
        *,
        client: DaClient | None = None,
    ) -> None:
        super().__init__(store=store, config=config)
        self._client = client or DaClient(
            self._config.remote, on_transport_error=self._record_transport_error
        )
        self._processor = BatchProcessor(
            store,
            self._client,
            l2_chain_id=self._config.l2_chain_id,
            strict_enqueue=self._config.strict_enqueue,
            on_index_synced=self._record_index_synced,
            logger=self._logger,
        )

    async def __aenter__(self) -> DaIngestion:
        await super().__aenter__()
        await self._client.open()
        try:
            await self.initialize()
        except BaseException:
            await self.__aexit__(None, None, None)
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            await self._client.close()
        finally:
            await super().__aexit__(exc_type, exc_val, exc_tb)

    async def initialize(self) -> None:
        """Write the initial checkpoint if none is stored or it is not positive."""
        checkpoint = await self._store.get_last_batch_index()
        if checkpoint is None or checkpoint <= 0:
            await self._store.put_last_batch_index(self._config.init_batch_index)
            self._logger.info(
                "checkpoint_initialized",
                previous=checkpoint,
                checkpoint=self._config.init_batch_index,
            )
            checkpoint = self._config.init_batch_index
        self.set_gauge("synced_batch_index", checkpoint)

    async def plan(self) -> BatchIndexRange:
        """Plan the next window from the stored checkpoint and the remote latest index."""
        checkpoint = await self._store.get_last_batch_index()
        if checkpoint is None:
            checkpoint = self._config.init_batch_index
        latest = await self._client.get_latest_batch_index()
        return plan_range(checkpoint, latest, self._config.sync_step)

    async def run(self) -> bool:
        """Run one sync pass.

        Returns:
            False if the remote layer had nothing new, True otherwise.
        """
        window = await self.plan()
        if not window.has_work:
            self._logger.debug("sync_range_empty", start=window.start, end=window.end)
            return False

        self._logger.info("sync_range_started", start=window.start, end=window.end)
        advanced = await self._processor.process(window)
        self._logger.info(
            "sync_range_completed",
            start=window.start,
            end=window.end,
            advanced=advanced,
        )
        return True

    def _record_index_synced(self, index: int, transactions: int) -> None:
        self.set_gauge("synced_batch_index", index)
        self.inc_counter("batches_processed")
        if transactions:
            self.inc_counter("transactions_synced", transactions)

    def _record_transport_error(self, _path: str) -> None:
        self.inc_counter("transport_error_count")
