"""Shared constants for the models layer.

Defines enumerations and other constants that are used across multiple
model modules. Placing them here avoids circular dependencies between
the models and the core/services layers.

See Also:
    [dasync.models.transaction][]: Uses [QueueOrigin][dasync.models.constants.QueueOrigin]
        to classify decoded transactions.
    [dasync.core.store][]: Uses [StoreNamespace][dasync.models.constants.StoreNamespace]
        to partition the key-value table.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class QueueOrigin(StrEnum):
    """Origin of a rollup transaction.

    Attributes:
        L1: Enqueued on the base layer; not independently signed at this
            layer, so it carries no decoded sub-record.
        SEQUENCER: Submitted by the sequencer in a batch; carries a signed,
            decoded sub-record.

    See Also:
        [QueueOriginTag][dasync.models.constants.QueueOriginTag]: The numeric
            tag the remote layer uses on the wire.
    """

    L1 = "l1"
    SEQUENCER = "sequencer"

    @classmethod
    def from_tag(cls, tag: int) -> QueueOrigin:
        """Map the remote numeric tag to an origin (``1`` is L1, anything else sequencer)."""
        return cls.L1 if tag == QueueOriginTag.L1 else cls.SEQUENCER


class QueueOriginTag(IntEnum):
    """Numeric queue-origin tags as reported by the remote layer."""

    SEQUENCER = 0
    L1 = 1


class ServiceName(StrEnum):
    """Canonical service identifiers used in logging and metrics.

    The string values are used as the ``service`` label in Prometheus
    metrics and as the logger name of each service.

    Attributes:
        DA_INGESTION: Batch synchronization service
            ([DaIngestion][dasync.services.ingestion.DaIngestion]).
    """

    DA_INGESTION = "da_ingestion"


class StoreNamespace(StrEnum):
    """Key namespaces of the ``kv_entry`` table.

    Each namespace holds one kind of record, keyed by a stable identifier
    so that every write is an idempotent upsert.

    Attributes:
        CHECKPOINT: The last fully handled batch index (single key).
        ENQUEUE: Base-layer enqueue entries keyed by queue index.
        TRANSACTION: Decoded transactions keyed by transaction index.
        BATCH_TRANSACTION: Decoded transactions grouped by data store id.
        TRANSACTION_LIST: Explorer transaction list grouped by data store id.
        ROLLUP_STORE: Rollup store entries keyed by batch index.
        DATA_STORE: Data store metadata keyed by data store id.
    """

    CHECKPOINT = "checkpoint"
    ENQUEUE = "enqueue"
    TRANSACTION = "transaction"
    BATCH_TRANSACTION = "batch_transaction"
    TRANSACTION_LIST = "transaction_list"
    ROLLUP_STORE = "rollup_store"
    DATA_STORE = "data_store"


ZERO_ADDRESS = "0x" + "0" * 40

#: Width of a 32-byte signature component in hex characters.
SIGNATURE_HEX_LENGTH = 64

#: Key under which the checkpoint is stored in its namespace.
LAST_BATCH_INDEX_KEY = "last_batch_index"
