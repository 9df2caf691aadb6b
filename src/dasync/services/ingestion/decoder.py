"""Conversion of raw remote transactions into canonical entries.

Pure functions with no I/O: the enqueue lookup is done by the caller
through [Store.get_enqueue_by_index()][dasync.core.store.Store.get_enqueue_by_index]
and its result passed in.

Field rules:

- Queue origin tag ``1`` is L1, any other tag is sequencer.
- The raw payload is base64 on the wire and stored as ``0x`` hex.
- Only sequencer transactions carry a decoded sub-record, with numeric
  fields as decimal strings and ``v`` reduced with the L2 chain id.
- A transaction with a queue index takes ``gas_limit``, ``target`` and
  ``origin`` from its enqueue entry when one is known.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dasync.core.exceptions import MissingElementError
from dasync.models import (
    ZERO_ADDRESS,
    DecodedTransaction,
    QueueOrigin,
    Signature,
    TransactionEntry,
)
from dasync.utils.hex import (
    base64_to_hex,
    normalize_hex,
    normalize_v,
    pad_signature_component,
    to_decimal_string,
)


if TYPE_CHECKING:
    from dasync.models import EnqueueEntry
    from dasync.services.common.schemas import BatchTransactionSchema, TxDetailSchema


def decode_signed_fields(detail: TxDetailSchema, l2_chain_id: int) -> DecodedTransaction:
    """Build the decoded sub-record of a sequencer transaction.

    Raises:
        ValueError: If a numeric field is malformed.
    """
    return DecodedTransaction(
        nonce=to_decimal_string(detail.nonce),
        gas_price=to_decimal_string(detail.gas_price),
        gas_limit=to_decimal_string(detail.gas),
        value=str(detail.value),
        target=normalize_hex(detail.to) if detail.to else None,
        data=detail.input,
        sig=Signature(
            v=normalize_v(int(to_decimal_string(detail.v)), l2_chain_id),
            r=pad_signature_component(detail.r),
            s=pad_signature_component(detail.s),
        ),
    )


def decode_transaction(
    raw: BatchTransactionSchema,
    *,
    batch_index: int,
    l2_chain_id: int,
    enqueue: EnqueueEntry | None,
    strict_enqueue: bool = False,
) -> TransactionEntry:
    """Decode one raw batch transaction.

    Args:
        raw: Validated remote transaction.
        batch_index: Rollup batch index being synchronized.
        l2_chain_id: Chain id used to normalize ``v``.
        enqueue: Enqueue entry for ``raw.tx_meta.queue_index``, if any.
        strict_enqueue: Raise instead of using defaults when the queue
            index is set but ``enqueue`` is None.

    Raises:
        MissingElementError: If ``strict_enqueue`` is set and the enqueue
            entry is missing.
        ValueError: If the payload cannot be decoded.
    """
    meta = raw.tx_meta
    detail = raw.tx_detail
    queue_origin = QueueOrigin.from_tag(meta.queue_origin)

    gas_limit = "0"
    target = ZERO_ADDRESS
    origin: str | None = None
    if meta.queue_index is not None:
        if enqueue is not None:
            gas_limit = enqueue.gas_limit
            target = enqueue.target
            origin = enqueue.origin
        elif strict_enqueue:
            raise MissingElementError(
                f"enqueue {meta.queue_index} not found for transaction {meta.index}",
                code="enqueue",
            )

    decoded = None
    if queue_origin is QueueOrigin.SEQUENCER:
        decoded = decode_signed_fields(detail, l2_chain_id)

    return TransactionEntry(
        index=meta.index,
        batch_index=batch_index,
        block_number=meta.l1_block_number,
        timestamp=meta.l1_timestamp,
        gas_limit=gas_limit,
        target=target,
        origin=origin,
        data=base64_to_hex(meta.raw_transaction),
        queue_origin=queue_origin,
        value=str(detail.value),
        queue_index=meta.queue_index,
        decoded=decoded,
        confirmed=True,
    )
