"""Base-layer enqueue entry, the authoritative source for L1-origin fields.

Enqueue entries are written by the base-layer ingestion, which is outside
this package. The decoder only reads them back through
[Store.get_enqueue_by_index()][dasync.core.store.Store.get_enqueue_by_index]
to override ``gas_limit``, ``target`` and ``origin`` of transactions that
carry a queue index.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._validation import (
    validate_decimal_str,
    validate_hex_str,
    validate_non_negative_int,
)


if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class EnqueueEntry:
    """A transaction enqueued on the base layer.

    Attributes:
        index: Queue index.
        target: Target address (``0x`` hex).
        gas_limit: Gas limit as a decimal string.
        origin: Sender address on the base layer (``0x`` hex).
        block_number: Base-layer block number of the enqueue.
        timestamp: Base-layer timestamp of the enqueue.
        data: Calldata (``0x`` hex).
    """

    index: int
    target: str
    gas_limit: str
    origin: str
    block_number: int = 0
    timestamp: int = 0
    data: str = "0x"

    def __post_init__(self) -> None:
        validate_non_negative_int(self.index, "index")
        validate_hex_str(self.target, "target")
        validate_decimal_str(self.gas_limit, "gas_limit")
        validate_hex_str(self.origin, "origin")
        validate_non_negative_int(self.block_number, "block_number")
        validate_non_negative_int(self.timestamp, "timestamp")
        validate_hex_str(self.data, "data")

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-compatible dict for persistence."""
        return {
            "index": self.index,
            "target": self.target,
            "gas_limit": self.gas_limit,
            "origin": self.origin,
            "block_number": self.block_number,
            "timestamp": self.timestamp,
            "data": self.data,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> EnqueueEntry:
        """Rebuild an entry from a persisted payload."""
        return cls(
            index=payload["index"],
            target=payload["target"],
            gas_limit=str(payload["gas_limit"]),
            origin=payload["origin"],
            block_number=payload.get("block_number", 0),
            timestamp=payload.get("timestamp", 0),
            data=payload.get("data", "0x"),
        )
