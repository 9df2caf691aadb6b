"""Unit tests for services.common.schemas module."""

from typing import Any

import pytest
from pydantic import ValidationError

from dasync.services.common.schemas import (
    BatchTransactionSchema,
    DataStoreSchema,
    RollupStoreSchema,
    TransactionListItemSchema,
)


class TestRollupStoreSchema:
    """Rollup store response."""

    def test_to_entry(self) -> None:
        schema = RollupStoreSchema.model_validate(
            {"data_store_id": 7, "status": 1, "confirm_at": 1700000000, "extra": "x"}
        )
        entry = schema.to_entry(12)
        assert entry.index == 12
        assert entry.data_store_id == 7
        assert entry.is_available

    def test_nulls_and_missing_default_to_zero(self) -> None:
        entry = RollupStoreSchema.model_validate({"data_store_id": None}).to_entry(12)
        assert entry.data_store_id == 0
        assert not entry.is_available

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RollupStoreSchema.model_validate({"data_store_id": -1})


class TestDataStoreSchema:
    """Data store response in PascalCase."""

    def test_to_entry(self, data_store_payload: dict[str, Any]) -> None:
        entry = DataStoreSchema.model_validate(data_store_payload).to_entry()
        assert entry.data_store_id == 7
        assert entry.store_number == 7
        assert entry.confirmed is True
        assert entry.fee == 12345
        assert entry.data_commitment == "0xdeadbeef"
        assert entry.confirm_gas_used == 50000
        assert entry.non_signer_pub_key_hashes == ()

    def test_non_signers(self, data_store_factory: Any) -> None:
        payload = data_store_factory()
        payload["NonSignerPubKeyHashes"] = ["0xaa"]
        entry = DataStoreSchema.model_validate(payload).to_entry()
        assert entry.non_signer_pub_key_hashes == ("0xaa",)

    def test_minimal(self) -> None:
        entry = DataStoreSchema.model_validate({"Id": 3}).to_entry()
        assert entry.data_store_id == 3
        assert entry.confirmed is False

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            DataStoreSchema.model_validate({"Confirmed": True})


class TestBatchTransactionSchema:
    """Batch transaction elements."""

    def test_parses(self, batch_tx_payload: dict[str, Any]) -> None:
        schema = BatchTransactionSchema.model_validate(batch_tx_payload)
        assert schema.tx_meta.index == 100
        assert schema.tx_meta.l1_block_number == 1234
        assert schema.tx_meta.queue_index is None
        assert schema.tx_detail.gas_price == 10_000_000_000
        assert schema.tx_detail.v == 10035

    def test_missing_detail_defaults(self, batch_tx_payload: dict[str, Any]) -> None:
        del batch_tx_payload["TxDetail"]
        schema = BatchTransactionSchema.model_validate(batch_tx_payload)
        assert schema.tx_detail.input == "0x"

    def test_missing_raw_transaction_rejected(self, batch_tx_payload: dict[str, Any]) -> None:
        del batch_tx_payload["TxMeta"]["rawTransaction"]
        with pytest.raises(ValidationError):
            BatchTransactionSchema.model_validate(batch_tx_payload)

    def test_frozen(self, batch_tx_payload: dict[str, Any]) -> None:
        schema = BatchTransactionSchema.model_validate(batch_tx_payload)
        with pytest.raises(ValidationError):
            schema.tx_meta = schema.tx_meta  # type: ignore[misc]


class TestTransactionListItemSchema:
    """Explorer transaction list elements."""

    def test_to_entry_uses_position(self) -> None:
        schema = TransactionListItemSchema.model_validate(
            {"index": 42, "BlockNumber": 9, "TxHash": "0xabc"}
        )
        entry = schema.to_entry(3)
        assert entry.index == 3
        assert entry.tx_index == 42
        assert entry.block_number == 9
        assert entry.tx_hash == "0xabc"
