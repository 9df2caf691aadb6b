"""Unit tests for utils.hex module."""

import base64

import pytest

from dasync.utils.hex import (
    base64_to_hex,
    normalize_hex,
    normalize_v,
    pad_signature_component,
    to_decimal_string,
)


class TestToDecimalString:
    """Integer-like values rendered in base 10."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "0"),
            (21000, "21000"),
            ("21000", "21000"),
            ("0x0a", "10"),
            ("0x", "0"),
            ("0x2540be400", "10000000000"),
            (" 7 ", "7"),
        ],
    )
    def test_valid(self, value: int | str, expected: str) -> None:
        assert to_decimal_string(value) == expected

    @pytest.mark.parametrize("value", ["abc", "0xzz", "", True, 1.5])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(ValueError):
            to_decimal_string(value)  # type: ignore[arg-type]


class TestNormalizeHex:
    """Lowercase 0x-prefixed hex."""

    def test_lowercases(self) -> None:
        assert normalize_hex("0xABcd") == "0xabcd"

    def test_adds_prefix(self) -> None:
        assert normalize_hex("abcd") == "0xabcd"

    def test_rejects_non_hex(self) -> None:
        with pytest.raises(ValueError, match="hex"):
            normalize_hex("0xnothex")


class TestPadSignatureComponent:
    """Left padding to 32 bytes."""

    def test_short_value(self) -> None:
        assert pad_signature_component("0xab") == "0x" + "0" * 62 + "ab"

    def test_full_value_unchanged(self) -> None:
        value = "0x" + "f" * 64
        assert pad_signature_component(value) == value

    def test_unprefixed(self) -> None:
        assert pad_signature_component("1") == "0x" + "0" * 63 + "1"

    def test_longer_value_kept(self) -> None:
        assert pad_signature_component("0x" + "1" * 66) == "0x" + "1" * 66


class TestBase64ToHex:
    """Raw payload conversion."""

    def test_decodes(self) -> None:
        payload = base64.b64encode(bytes.fromhex("f86c0a")).decode()
        assert base64_to_hex(payload) == "0xf86c0a"

    def test_empty(self) -> None:
        assert base64_to_hex("") == "0x"

    def test_invalid(self) -> None:
        with pytest.raises(ValueError, match="base64"):
            base64_to_hex("not base64!")


class TestNormalizeV:
    """Recovery id extraction."""

    @pytest.mark.parametrize(
        ("v", "chain_id", "expected"),
        [
            (0, 5000, 0),
            (1, 5000, 1),
            (27, 5000, 0),
            (28, 5000, 1),
            (10035, 5000, 0),
            (10036, 5000, 1),
            (37, 1, 0),
            (38, 1, 1),
        ],
    )
    def test_valid(self, v: int, chain_id: int, expected: int) -> None:
        assert normalize_v(v, chain_id) == expected

    @pytest.mark.parametrize(
        ("v", "chain_id", "expected"), [(10037, 5000, 2), (2, 5000, -10033), (37, 5000, -9998)]
    )
    def test_chain_mismatch_returns_reduction(self, v: int, chain_id: int, expected: int) -> None:
        assert normalize_v(v, chain_id) == expected
