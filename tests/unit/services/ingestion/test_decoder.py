"""
Unit tests for services.ingestion.decoder module.

Tests:
- Queue origin branching (L1 vs sequencer)
- Signed field normalization (decimal strings, padded r/s, recovery id)
- Enqueue overrides for transactions carrying a queue index
- Strict enqueue mode
"""

from typing import Any

import pytest

from dasync.core.exceptions import MissingElementError
from dasync.models import ZERO_ADDRESS, EnqueueEntry, QueueOrigin
from dasync.services.common.schemas import BatchTransactionSchema
from dasync.services.ingestion.decoder import decode_signed_fields, decode_transaction


CHAIN_ID = 5000


def _raw(batch_tx_factory: Any, **kwargs: Any) -> BatchTransactionSchema:
    return BatchTransactionSchema.model_validate(batch_tx_factory(**kwargs))


def _enqueue(index: int = 3) -> EnqueueEntry:
    return EnqueueEntry(
        index=index,
        target="0x" + "d" * 40,
        gas_limit="50000",
        origin="0x" + "e" * 40,
    )


class TestDecodeSignedFields:
    """Sequencer signed sub-record."""

    def test_numeric_fields_as_decimal(self, batch_tx_factory: Any) -> None:
        decoded = decode_signed_fields(_raw(batch_tx_factory).tx_detail, CHAIN_ID)
        assert decoded.nonce == "10"
        assert decoded.gas_price == "10000000000"
        assert decoded.gas_limit == "21000"
        assert decoded.value == "0x0"
        assert decoded.data == "0x"

    def test_short_r_is_left_padded(self, batch_tx_factory: Any) -> None:
        decoded = decode_signed_fields(_raw(batch_tx_factory).tx_detail, CHAIN_ID)
        assert decoded.sig.r == "0x" + "0" * 62 + "ab"
        assert decoded.sig.s == "0x" + "1" * 64

    @pytest.mark.parametrize(
        ("v", "expected"),
        [(10035, 0), (10036, 1), ("0x2733", 0), (27, 0), (28, 1), (0, 0), (1, 1)],
    )
    def test_v_normalized(self, batch_tx_factory: Any, v: Any, expected: int) -> None:
        decoded = decode_signed_fields(_raw(batch_tx_factory, v=v).tx_detail, CHAIN_ID)
        assert decoded.sig.v == expected

    def test_v_for_other_chain_kept_as_computed(self, batch_tx_factory: Any) -> None:
        decoded = decode_signed_fields(_raw(batch_tx_factory, v=10035).tx_detail, 1)
        assert decoded.sig.v == 10035 - 37
        assert not decoded.sig.has_recovery_id

    def test_missing_to_is_contract_creation(self, batch_tx_factory: Any) -> None:
        decoded = decode_signed_fields(_raw(batch_tx_factory, to=None).tx_detail, CHAIN_ID)
        assert decoded.target is None

    def test_to_lowercased(self, batch_tx_factory: Any) -> None:
        decoded = decode_signed_fields(
            _raw(batch_tx_factory, to="0x" + "C" * 40).tx_detail, CHAIN_ID
        )
        assert decoded.target == "0x" + "c" * 40


class TestDecodeTransaction:
    """Full transaction decoding."""

    def test_sequencer_transaction(self, batch_tx_factory: Any) -> None:
        entry = decode_transaction(
            _raw(batch_tx_factory, index=100),
            batch_index=12,
            l2_chain_id=CHAIN_ID,
            enqueue=None,
        )
        assert entry.index == 100
        assert entry.batch_index == 12
        assert entry.block_number == 1234
        assert entry.timestamp == 1700000000
        assert entry.queue_origin is QueueOrigin.SEQUENCER
        assert entry.queue_index is None
        assert entry.gas_limit == "0"
        assert entry.target == ZERO_ADDRESS
        assert entry.origin is None
        assert entry.data == "0xf86c0a8502540be400"
        assert entry.value == "0x0"
        assert entry.confirmed is True
        assert entry.decoded is not None

    def test_l1_transaction_has_no_decoded(self, batch_tx_factory: Any) -> None:
        entry = decode_transaction(
            _raw(batch_tx_factory, queue_origin=1, queue_index=3),
            batch_index=12,
            l2_chain_id=CHAIN_ID,
            enqueue=_enqueue(),
        )
        assert entry.queue_origin is QueueOrigin.L1
        assert entry.decoded is None

    def test_l1_transaction_ignores_bad_signature(self, batch_tx_factory: Any) -> None:
        entry = decode_transaction(
            _raw(batch_tx_factory, queue_origin=1, queue_index=3, v=999),
            batch_index=12,
            l2_chain_id=CHAIN_ID,
            enqueue=_enqueue(),
        )
        assert entry.decoded is None

    def test_enqueue_overrides_fields(self, batch_tx_factory: Any) -> None:
        entry = decode_transaction(
            _raw(batch_tx_factory, queue_origin=1, queue_index=3),
            batch_index=12,
            l2_chain_id=CHAIN_ID,
            enqueue=_enqueue(),
        )
        assert entry.gas_limit == "50000"
        assert entry.target == "0x" + "d" * 40
        assert entry.origin == "0x" + "e" * 40
        assert entry.queue_index == 3

    def test_missing_enqueue_uses_defaults(self, batch_tx_factory: Any) -> None:
        entry = decode_transaction(
            _raw(batch_tx_factory, queue_origin=1, queue_index=3),
            batch_index=12,
            l2_chain_id=CHAIN_ID,
            enqueue=None,
        )
        assert entry.gas_limit == "0"
        assert entry.target == ZERO_ADDRESS
        assert entry.origin is None

    def test_missing_enqueue_strict_raises(self, batch_tx_factory: Any) -> None:
        with pytest.raises(MissingElementError) as exc_info:
            decode_transaction(
                _raw(batch_tx_factory, queue_origin=1, queue_index=3),
                batch_index=12,
                l2_chain_id=CHAIN_ID,
                enqueue=None,
                strict_enqueue=True,
            )
        assert exc_info.value.code == "enqueue"

    def test_unknown_origin_tag_is_sequencer(self, batch_tx_factory: Any) -> None:
        entry = decode_transaction(
            _raw(batch_tx_factory, queue_origin=7),
            batch_index=12,
            l2_chain_id=CHAIN_ID,
            enqueue=None,
        )
        assert entry.queue_origin is QueueOrigin.SEQUENCER

    def test_invalid_base64_raises(self, batch_tx_factory: Any) -> None:
        payload = batch_tx_factory()
        payload["TxMeta"]["rawTransaction"] = "not base64!"
        with pytest.raises(ValueError, match="base64"):
            decode_transaction(
                BatchTransactionSchema.model_validate(payload),
                batch_index=12,
                l2_chain_id=CHAIN_ID,
                enqueue=None,
            )
