"""Shared infrastructure for dasync services.

Attributes:
    configs: [RemoteConfig][dasync.services.common.configs.RemoteConfig],
        connection settings of the remote DA API.
    schemas: Pydantic wire schemas of the remote responses.
    client: [DaClient][dasync.services.common.client.DaClient], the async
        HTTP client with sentinel fallbacks.
"""

from .client import DaClient
from .configs import RemoteConfig
from .schemas import (
    BatchTransactionSchema,
    DataStoreSchema,
    RollupStoreSchema,
    TransactionListItemSchema,
    TxDetailSchema,
    TxMetaSchema,
)


__all__ = [
    "BatchTransactionSchema",
    "DaClient",
    "DataStoreSchema",
    "RemoteConfig",
    "RollupStoreSchema",
    "TransactionListItemSchema",
    "TxDetailSchema",
    "TxMetaSchema",
]
