"""
Canonical decoded rollup transactions and the explorer transaction list.

[TransactionEntry][dasync.models.transaction.TransactionEntry] is the record
downstream consumers read. Sequencer-origin transactions additionally carry
a [DecodedTransaction][dasync.models.transaction.DecodedTransaction] with the
signed fields; L1-origin transactions do not, because they are not signed at
this layer.

[TransactionListEntry][dasync.models.transaction.TransactionListEntry] is a
lightweight per-store index (ordinal -> block number and hash) used for
explorer-style lookups.

See Also:
    [decode_transaction()][dasync.services.ingestion.decoder.decode_transaction]:
        Builds transaction entries from raw remote payloads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._validation import (
    validate_decimal_str,
    validate_hex_str,
    validate_instance,
    validate_non_negative_int,
    validate_optional_non_negative_int,
    validate_str_no_null,
)
from .constants import QueueOrigin


if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class Signature:
    """ECDSA signature components of a sequencer transaction.

    Attributes:
        v: Normalized recovery id. ``0`` or ``1`` for a well-formed
            signature; any other value is the reduction of a ``v`` signed
            for a different chain id and is stored as computed.
        r: ``0x``-prefixed, zero-padded hex string.
        s: ``0x``-prefixed, zero-padded hex string.
    """

    v: int
    r: str
    s: str

    def __post_init__(self) -> None:
        if isinstance(self.v, bool) or not isinstance(self.v, int):
            raise TypeError(f"v must be an int, got {type(self.v).__name__}")
        validate_hex_str(self.r, "r")
        validate_hex_str(self.s, "s")

    @property
    def has_recovery_id(self) -> bool:
        """Whether ``v`` is a valid recovery id (``0`` or ``1``)."""
        return self.v in (0, 1)

    def to_payload(self) -> dict[str, Any]:
        return {"v": self.v, "r": self.r, "s": self.s}


@dataclass(frozen=True, slots=True)
class DecodedTransaction:
    """Signed fields of a sequencer-origin transaction.

    Attributes:
        nonce: Sender nonce as a decimal string.
        gas_price: Gas price as a decimal string.
        gas_limit: Gas limit as a decimal string.
        value: Transferred value, as reported by the remote layer.
        target: Recipient address, or ``None`` for contract creation.
        data: Calldata, as reported by the remote layer.
        sig: Normalized signature.
    """

    nonce: str
    gas_price: str
    gas_limit: str
    value: str
    target: str | None
    data: str
    sig: Signature

    def __post_init__(self) -> None:
        validate_decimal_str(self.nonce, "nonce")
        validate_decimal_str(self.gas_price, "gas_price")
        validate_decimal_str(self.gas_limit, "gas_limit")
        validate_str_no_null(self.value, "value")
        if self.target is not None:
            validate_hex_str(self.target, "target")
        validate_str_no_null(self.data, "data")
        validate_instance(self.sig, Signature, "sig")

    def to_payload(self) -> dict[str, Any]:
        return {
            "nonce": self.nonce,
            "gas_price": self.gas_price,
            "gas_limit": self.gas_limit,
            "value": self.value,
            "target": self.target,
            "data": self.data,
            "sig": self.sig.to_payload(),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> DecodedTransaction:
        return cls(
            nonce=payload["nonce"],
            gas_price=payload["gas_price"],
            gas_limit=payload["gas_limit"],
            value=payload["value"],
            target=payload["target"],
            data=payload["data"],
            sig=Signature(**payload["sig"]),
        )


@dataclass(frozen=True, slots=True)
class TransactionEntry:
    """Canonical decoded rollup transaction.

    Attributes:
        index: Global transaction index.
        batch_index: Rollup batch index the transaction was synced under.
        block_number: Base-layer block number.
        timestamp: Base-layer timestamp.
        gas_limit: Gas limit as a decimal string (from the enqueue entry
            when one exists, ``"0"`` otherwise).
        target: Target address (from the enqueue entry when one exists,
            the zero address otherwise).
        origin: Base-layer sender from the enqueue entry, else ``None``.
        data: Raw signed payload as ``0x`` hex.
        queue_origin: Where the transaction entered the rollup.
        value: Transferred value, as reported by the remote layer.
        queue_index: Enqueue index, ``None`` for sequencer transactions.
        decoded: Signed fields; present if and only if
            ``queue_origin`` is ``SEQUENCER``.
        confirmed: Always ``True`` for mirrored transactions.

    Raises:
        ValueError: If ``decoded`` presence does not match ``queue_origin``.
    """

    index: int
    batch_index: int
    block_number: int
    timestamp: int
    gas_limit: str
    target: str
    origin: str | None
    data: str
    queue_origin: QueueOrigin
    value: str
    queue_index: int | None
    decoded: DecodedTransaction | None
    confirmed: bool = True

    def __post_init__(self) -> None:
        validate_non_negative_int(self.index, "index")
        validate_non_negative_int(self.batch_index, "batch_index")
        validate_non_negative_int(self.block_number, "block_number")
        validate_non_negative_int(self.timestamp, "timestamp")
        validate_decimal_str(self.gas_limit, "gas_limit")
        validate_hex_str(self.target, "target")
        if self.origin is not None:
            validate_hex_str(self.origin, "origin")
        validate_hex_str(self.data, "data")
        validate_str_no_null(self.value, "value")
        validate_optional_non_negative_int(self.queue_index, "queue_index")
        validate_instance(self.confirmed, bool, "confirmed")
        object.__setattr__(self, "queue_origin", QueueOrigin(self.queue_origin))

        if (self.queue_origin == QueueOrigin.SEQUENCER) != (self.decoded is not None):
            raise ValueError(
                f"decoded must be present only for sequencer transactions "
                f"(queue_origin={self.queue_origin}, decoded={self.decoded is not None})"
            )

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-compatible dict for persistence."""
        return {
            "index": self.index,
            "batch_index": self.batch_index,
            "block_number": self.block_number,
            "timestamp": self.timestamp,
            "gas_limit": self.gas_limit,
            "target": self.target,
            "origin": self.origin,
            "data": self.data,
            "queue_origin": self.queue_origin.value,
            "value": self.value,
            "queue_index": self.queue_index,
            "decoded": self.decoded.to_payload() if self.decoded is not None else None,
            "confirmed": self.confirmed,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TransactionEntry:
        """Rebuild an entry from a persisted payload."""
        decoded = payload.get("decoded")
        return cls(
            index=payload["index"],
            batch_index=payload["batch_index"],
            block_number=payload["block_number"],
            timestamp=payload["timestamp"],
            gas_limit=payload["gas_limit"],
            target=payload["target"],
            origin=payload["origin"],
            data=payload["data"],
            queue_origin=QueueOrigin(payload["queue_origin"]),
            value=payload["value"],
            queue_index=payload["queue_index"],
            decoded=DecodedTransaction.from_payload(decoded) if decoded is not None else None,
            confirmed=payload.get("confirmed", True),
        )


@dataclass(frozen=True, slots=True)
class TransactionListEntry:
    """Explorer index row of one data store's transaction list.

    Attributes:
        index: Local ordinal of the transaction within its data store.
        tx_index: Transaction index as reported by the remote layer.
        block_number: Rollup block number.
        tx_hash: Transaction hash.
    """

    index: int
    tx_index: int
    block_number: int
    tx_hash: str

    def __post_init__(self) -> None:
        validate_non_negative_int(self.index, "index")
        validate_non_negative_int(self.tx_index, "tx_index")
        validate_non_negative_int(self.block_number, "block_number")
        validate_str_no_null(self.tx_hash, "tx_hash")

    def to_payload(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "tx_index": self.tx_index,
            "block_number": self.block_number,
            "tx_hash": self.tx_hash,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TransactionListEntry:
        return cls(**payload)
