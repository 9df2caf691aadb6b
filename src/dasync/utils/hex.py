"""Hex, base64 and signature helpers for decoding remote transactions.

Built on ``eth_utils`` prefix handling and integer parsing so that every
numeric field reaches the models as a canonical string, whatever shape the
remote layer used for it (JSON number, decimal string or ``0x`` hex).

See Also:
    [decode_transaction()][dasync.services.ingestion.decoder.decode_transaction]:
        The only consumer of these helpers.
"""

from __future__ import annotations

import base64
import binascii

from eth_utils import add_0x_prefix, is_0x_prefixed, is_hex, remove_0x_prefix, to_int

from dasync.models.constants import SIGNATURE_HEX_LENGTH


_LEGACY_V_OFFSET = 27
_EIP155_V_OFFSET = 35


def to_decimal_string(value: int | str) -> str:
    """Render an integer-like value as a base-10 string.

    Accepts ints, decimal strings and ``0x`` hex strings (``"0x"`` alone is
    zero).

    Raises:
        ValueError: If the value is not integer-like.
    """
    if isinstance(value, bool):
        raise ValueError(f"not an integer value: {value!r}")
    if isinstance(value, int):
        return str(value)
    if not isinstance(value, str):
        raise ValueError(f"not an integer value: {value!r}")
    text = value.strip()
    if is_0x_prefixed(text):
        if not is_hex(text):
            raise ValueError(f"not a hex integer: {value!r}")
        return str(to_int(hexstr=text)) if len(text) > 2 else "0"
    return str(int(text, 10))


def normalize_hex(value: str) -> str:
    """Return *value* as a lowercase ``0x``-prefixed hex string.

    Raises:
        ValueError: If the value is not hex.
    """
    if not is_hex(value):
        raise ValueError(f"not a hex string: {value!r}")
    return add_0x_prefix(value.lower())


def pad_signature_component(value: str) -> str:
    """Left-pad an ``r``/``s`` component to 32 bytes of hex.

    Padding is applied to the string, not the number: ``"0xab"`` becomes
    ``"0x" + "0" * 62 + "ab"``. Longer inputs are returned unchanged apart
    from the prefix.
    """
    return "0x" + remove_0x_prefix(value).rjust(SIGNATURE_HEX_LENGTH, "0")


def base64_to_hex(payload: str) -> str:
    """Decode a base64 payload into ``0x``-prefixed lowercase hex.

    Raises:
        ValueError: If the payload is not valid base64.
    """
    try:
        raw = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 payload: {e}") from e
    return "0x" + raw.hex()


def normalize_v(v: int, chain_id: int) -> int:
    """Reduce a signature ``v`` to a recovery id.

    ``0``/``1`` are returned as is, legacy ``27``/``28`` lose their offset,
    anything else is treated as EIP-155 ``recid + chain_id * 2 + 35``.

    The EIP-155 reduction is returned even when it is not ``0`` or ``1``
    (a ``v`` signed for another chain id), so such a transaction is still
    mirrored; callers check
    [Signature.has_recovery_id][dasync.models.transaction.Signature.has_recovery_id].
    """
    if v in (0, 1):
        return v
    if v in (_LEGACY_V_OFFSET, _LEGACY_V_OFFSET + 1):
        return v - _LEGACY_V_OFFSET
    return v - (2 * chain_id + _EIP155_V_OFFSET)
