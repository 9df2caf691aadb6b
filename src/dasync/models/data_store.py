"""
Metadata record of one remote data store.

A data store is the unit of data published to the data-availability layer.
Its metadata carries the commitment and signature fields, timing, fee and
audit (gas / tx hash) fields, and the ``confirmed`` flag that gates whether
the store's transactions are mirrored locally.

The record is immutable once fetched and persisted verbatim keyed by
``data_store_id``.

See Also:
    [DataStoreSchema][dasync.services.common.schemas.DataStoreSchema]: Wire
        shape validated at the HTTP boundary and converted into this model.
    [Store.put_ds_by_id()][dasync.core.store.Store.put_ds_by_id]: Persistence.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

from ._validation import validate_instance, validate_non_negative_int, validate_str_no_null


if TYPE_CHECKING:
    from collections.abc import Mapping


_INT_FIELDS = (
    "data_store_id",
    "store_number",
    "duration_data_store_id",
    "index",
    "stakes_from_block_number",
    "init_time",
    "expire_time",
    "duration",
    "num_sys",
    "num_par",
    "degree",
    "store_period_length",
    "fee",
    "init_gas_used",
    "init_block_number",
    "confirm_gas_used",
)

_STR_FIELDS = (
    "data_commitment",
    "msg_hash",
    "confirmer",
    "header",
    "init_tx_hash",
    "eth_signed",
    "eigen_signed",
    "signatory_record",
    "confirm_tx_hash",
)


@dataclass(frozen=True, slots=True)
class DataStoreEntry:
    """Immutable metadata of a remote data store.

    Attributes:
        data_store_id: Remote identifier (primary key).
        confirmed: Whether the store is confirmed; only confirmed stores
            have their transactions mirrored.
        non_signer_pub_key_hashes: Public key hashes of operators that did
            not sign the store.

    The remaining attributes mirror the remote record field by field.
    """

    data_store_id: int
    confirmed: bool
    store_number: int = 0
    duration_data_store_id: int = 0
    index: int = 0
    data_commitment: str = ""
    msg_hash: str = ""
    stakes_from_block_number: int = 0
    init_time: int = 0
    expire_time: int = 0
    duration: int = 0
    num_sys: int = 0
    num_par: int = 0
    degree: int = 0
    store_period_length: int = 0
    fee: int = 0
    confirmer: str = ""
    header: str = ""
    init_tx_hash: str = ""
    init_gas_used: int = 0
    init_block_number: int = 0
    eth_signed: str = ""
    eigen_signed: str = ""
    non_signer_pub_key_hashes: tuple[str, ...] = ()
    signatory_record: str = ""
    confirm_tx_hash: str = ""
    confirm_gas_used: int = 0

    def __post_init__(self) -> None:
        for name in _INT_FIELDS:
            validate_non_negative_int(getattr(self, name), name)
        for name in _STR_FIELDS:
            validate_str_no_null(getattr(self, name), name)
        validate_instance(self.confirmed, bool, "confirmed")
        object.__setattr__(
            self, "non_signer_pub_key_hashes", tuple(self.non_signer_pub_key_hashes)
        )
        for item in self.non_signer_pub_key_hashes:
            validate_str_no_null(item, "non_signer_pub_key_hashes")

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-compatible dict for persistence."""
        payload = {f.name: getattr(self, f.name) for f in fields(self)}
        payload["non_signer_pub_key_hashes"] = list(self.non_signer_pub_key_hashes)
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> DataStoreEntry:
        """Rebuild an entry from a persisted payload (unknown keys ignored)."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in payload.items() if k in known})
