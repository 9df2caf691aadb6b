"""Wire schemas of the remote data-availability API.

Each schema validates one JSON response shape at the HTTP boundary and
converts it into the corresponding model. Field aliases carry the remote
key names (PascalCase for data stores, camelCase for transaction metadata);
unknown keys are ignored and JSON ``null`` falls back to the field default.

See Also:
    [DaClient][dasync.services.common.client.DaClient]: Validates every
        response against these schemas.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dasync.models import DataStoreEntry, RollupStoreEntry, TransactionListEntry


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat explicit ``null`` values as missing keys."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class RollupStoreSchema(_WireModel):
    """Response of ``/eigen/getRollupStoreByRollupBatchIndex``."""

    data_store_id: int = Field(default=0, ge=0)
    status: int = Field(default=0, ge=0)
    confirm_at: int = Field(default=0, ge=0)

    def to_entry(self, index: int) -> RollupStoreEntry:
        return RollupStoreEntry(
            index=index,
            data_store_id=self.data_store_id,
            status=self.status,
            confirm_at=self.confirm_at,
        )


class DataStoreSchema(_WireModel):
    """Response of ``/browser/getDataStoreById``."""

    id: int = Field(alias="Id", ge=0)
    store_number: int = Field(default=0, alias="StoreNumber", ge=0)
    duration_data_store_id: int = Field(default=0, alias="DurationDataStoreId", ge=0)
    index: int = Field(default=0, alias="Index", ge=0)
    data_commitment: str = Field(default="", alias="DataCommitment")
    msg_hash: str = Field(default="", alias="MsgHash")
    stakes_from_block_number: int = Field(default=0, alias="StakesFromBlockNumber", ge=0)
    init_time: int = Field(default=0, alias="InitTime", ge=0)
    expire_time: int = Field(default=0, alias="ExpireTime", ge=0)
    duration: int = Field(default=0, alias="Duration", ge=0)
    num_sys: int = Field(default=0, alias="NumSys", ge=0)
    num_par: int = Field(default=0, alias="NumPar", ge=0)
    degree: int = Field(default=0, alias="Degree", ge=0)
    store_period_length: int = Field(default=0, alias="StorePeriodLength", ge=0)
    fee: int = Field(default=0, alias="Fee", ge=0)
    confirmer: str = Field(default="", alias="Confirmer")
    header: str = Field(default="", alias="Header")
    init_tx_hash: str = Field(default="", alias="InitTxHash")
    init_gas_used: int = Field(default=0, alias="InitGasUsed", ge=0)
    init_block_number: int = Field(default=0, alias="InitBlockNumber", ge=0)
    confirmed: bool = Field(default=False, alias="Confirmed")
    eth_signed: str = Field(default="", alias="EthSigned")
    eigen_signed: str = Field(default="", alias="EigenSigned")
    non_signer_pub_key_hashes: list[str] = Field(
        default_factory=list, alias="NonSignerPubKeyHashes"
    )
    signatory_record: str = Field(default="", alias="SignatoryRecord")
    confirm_tx_hash: str = Field(default="", alias="ConfirmTxHash")
    confirm_gas_used: int = Field(default=0, alias="ConfirmGasUsed", ge=0)

    def to_entry(self) -> DataStoreEntry:
        fields = self.model_dump(exclude={"id"})
        return DataStoreEntry(data_store_id=self.id, **fields)


class TxMetaSchema(_WireModel):
    """Batch-level metadata of one raw transaction."""

    index: int = Field(ge=0)
    l1_block_number: int = Field(default=0, alias="l1BlockNumber", ge=0)
    l1_timestamp: int = Field(default=0, alias="l1Timestamp", ge=0)
    queue_origin: int = Field(default=0, alias="queueOrigin")
    queue_index: int | None = Field(default=None, alias="queueIndex", ge=0)
    raw_transaction: str = Field(alias="rawTransaction")


class TxDetailSchema(_WireModel):
    """Signed fields of one raw transaction.

    Numeric fields are kept as reported (int, decimal or hex string) and
    normalized by the decoder.
    """

    nonce: int | str = 0
    gas_price: int | str = Field(default=0, alias="gasPrice")
    gas: int | str = 0
    value: int | str = "0"
    to: str | None = None
    input: str = "0x"
    v: int | str = 0
    r: str = "0x"
    s: str = "0x"


class BatchTransactionSchema(_WireModel):
    """One element of ``/dtl/getBatchTransactionByDataStoreId``."""

    tx_meta: TxMetaSchema = Field(alias="TxMeta")
    tx_detail: TxDetailSchema = Field(default_factory=TxDetailSchema, alias="TxDetail")


class TransactionListItemSchema(_WireModel):
    """One element of ``/browser/GetTransactionListByStoreNumber``."""

    index: int = Field(ge=0)
    block_number: int = Field(default=0, alias="BlockNumber", ge=0)
    tx_hash: str = Field(default="", alias="TxHash")

    def to_entry(self, position: int) -> TransactionListEntry:
        return TransactionListEntry(
            index=position,
            tx_index=self.index,
            block_number=self.block_number,
            tx_hash=self.tx_hash,
        )
