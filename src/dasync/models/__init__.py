"""Pure frozen dataclasses with zero I/O for rollup batches and transactions.

The models layer is the foundation of the package. It has **no dependencies**
on any other dasync package -- only the Python standard library. Every model
uses ``@dataclass(frozen=True, slots=True)`` and validates its fields in
``__post_init__`` so invalid instances never escape the constructor.

Attributes:
    BatchIndexRange: Half-open window of batch indices for one sync pass.
    RollupStoreEntry: Batch index to remote data store mapping.
    DataStoreEntry: Remote data store metadata.
    TransactionEntry: Canonical decoded rollup transaction.
    DecodedTransaction: Signed fields of a sequencer transaction.
    Signature: Normalized signature components.
    TransactionListEntry: Explorer index row of a data store.
    EnqueueEntry: Base-layer enqueue entry used for field overrides.
    QueueOrigin: ``l1`` or ``sequencer``.

See Also:
    [dasync.core.store][]: Persists these models as JSON payloads.
    [dasync.services.common.schemas][]: Wire shapes converted into these models.
"""

from .batch_range import BatchIndexRange
from .constants import (
    LAST_BATCH_INDEX_KEY,
    SIGNATURE_HEX_LENGTH,
    ZERO_ADDRESS,
    QueueOrigin,
    QueueOriginTag,
    ServiceName,
    StoreNamespace,
)
from .data_store import DataStoreEntry
from .enqueue import EnqueueEntry
from .rollup_store import RollupStoreEntry
from .transaction import DecodedTransaction, Signature, TransactionEntry, TransactionListEntry


__all__ = [
    "LAST_BATCH_INDEX_KEY",
    "SIGNATURE_HEX_LENGTH",
    "ZERO_ADDRESS",
    "BatchIndexRange",
    "DataStoreEntry",
    "DecodedTransaction",
    "EnqueueEntry",
    "QueueOrigin",
    "QueueOriginTag",
    "RollupStoreEntry",
    "ServiceName",
    "Signature",
    "StoreNamespace",
    "TransactionEntry",
    "TransactionListEntry",
]
