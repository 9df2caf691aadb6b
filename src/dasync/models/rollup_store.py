"""
Mapping from a rollup batch index to the remote data store that carries it.

A [RollupStoreEntry][dasync.models.rollup_store.RollupStoreEntry] is the
first record fetched for every batch index. Its ``data_store_id`` of ``0``
is a sentinel meaning the remote layer has not produced that index yet.

See Also:
    [DataStoreEntry][dasync.models.data_store.DataStoreEntry]: The metadata
        record referenced by ``data_store_id``.
    [BatchProcessor][dasync.services.ingestion.processor.BatchProcessor]:
        Halts a pass on the sentinel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._validation import validate_non_negative_int


if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class RollupStoreEntry:
    """Rollup batch index to data store mapping with confirmation status.

    Attributes:
        index: Rollup batch index this entry belongs to.
        data_store_id: Remote data store identifier, ``0`` if not yet available.
        status: Remote confirmation status code, persisted as reported.
        confirm_at: Remote confirmation time, persisted as reported.
    """

    index: int
    data_store_id: int
    status: int
    confirm_at: int

    def __post_init__(self) -> None:
        validate_non_negative_int(self.index, "index")
        validate_non_negative_int(self.data_store_id, "data_store_id")
        validate_non_negative_int(self.status, "status")
        validate_non_negative_int(self.confirm_at, "confirm_at")

    @property
    def is_available(self) -> bool:
        """Whether the remote layer has assigned a data store to this index."""
        return self.data_store_id != 0

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-compatible dict for persistence."""
        return {
            "index": self.index,
            "data_store_id": self.data_store_id,
            "status": self.status,
            "confirm_at": self.confirm_at,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> RollupStoreEntry:
        """Rebuild an entry from a persisted payload."""
        return cls(
            index=payload["index"],
            data_store_id=payload["data_store_id"],
            status=payload["status"],
            confirm_at=payload["confirm_at"],
        )
