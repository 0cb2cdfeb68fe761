"""
Тесты для канонического MessagePack codec и digest примитивов

Проверяет:
1. Детерминизм кодирования (порядок ключей, вложенные map)
2. Типы: bytes → bin, str → str, минимальная ширина целых
3. DecodeError для структурно некорректного входа
4. SHA-512/256 и domain separation
"""

import msgpack
import pytest

from src.core.crypto import (
    DIGEST_SIZE,
    TGID_PREFIX,
    TXID_PREFIX,
    ZERO_DIGEST,
    digest_to_b64,
    hash_with_prefix,
    is_zero_digest,
    sha512_256,
    validate_digest,
)
from src.core.encoding import DecodeError, canonicalize, decode_map, encode_canonical


# =============================================================================
# ENCODING
# =============================================================================


class TestEncodeCanonical:
    """Тесты канонического кодирования"""

    def test_key_order_does_not_matter(self):
        """Одинаковые логические map → одинаковые байты"""
        a = encode_canonical({"type": "pay", "amt": 5, "fee": 1000})
        b = encode_canonical({"fee": 1000, "amt": 5, "type": "pay"})
        assert a == b

    def test_keys_sorted_in_output(self):
        decoded = msgpack.unpackb(encode_canonical({"snd": b"x", "amt": 1, "fee": 2}), raw=False)
        assert list(decoded) == ["amt", "fee", "snd"]

    def test_nested_maps_sorted(self):
        encoded = encode_canonical({"apar": {"un": "TST", "am": b"m", "t": 10}})
        decoded = msgpack.unpackb(encoded, raw=False)
        assert list(decoded["apar"]) == ["am", "t", "un"]

    def test_maps_inside_lists_sorted(self):
        value = canonicalize({"l": [{"b": 1, "a": 2}]})
        assert list(value["l"][0]) == ["a", "b"]

    def test_bytes_encoded_as_bin(self):
        encoded = encode_canonical({"gh": bytes(32)})
        # fixmap(1), fixstr "gh", bin8 (0xc4) длины 32
        assert encoded[:5] == b"\x81\xa2gh\xc4"
        assert encoded[5] == 32

    def test_bytearray_normalized_to_bytes(self):
        assert encode_canonical({"n": bytearray(b"ab")}) == encode_canonical({"n": b"ab"})

    def test_minimal_integer_width(self):
        """1000000 кодируется как uint32 (0xce)"""
        encoded = encode_canonical({"amt": 1000000})
        assert encoded == b"\x81\xa3amt\xce\x00\x0f\x42\x40"

    def test_tuple_encoded_as_array(self):
        assert encode_canonical({"x": (1, 2)}) == encode_canonical({"x": [1, 2]})

    def test_encoding_is_deterministic(self):
        record = {"type": "acfg", "caid": 2, "note": b"n", "apar": {"t": 2**64 - 1}}
        assert encode_canonical(record) == encode_canonical(dict(record))

    def test_unsupported_key_type(self):
        with pytest.raises(TypeError):
            encode_canonical({None: "a", "b": 2})

    def test_integer_keys_sorted_numerically(self):
        """10 после 2, целые ключи перед строковыми"""
        encoded = encode_canonical({"apls": {10: b"x", 2: b"y", "n": 1}})
        decoded = msgpack.unpackb(encoded, raw=False, strict_map_key=False)
        assert list(decoded["apls"]) == [2, 10, "n"]

    def test_float_rejected(self):
        with pytest.raises(TypeError, match="Floating point"):
            encode_canonical({"rate": 1.5})


# =============================================================================
# DECODING
# =============================================================================


class TestDecodeMap:
    """Тесты декодирования записи"""

    def test_roundtrip(self):
        record = {"amt": 1, "fee": 1000, "note": b"hello", "type": "pay"}
        assert decode_map(encode_canonical(record)) == record

    def test_accepts_bytearray_and_memoryview(self):
        encoded = encode_canonical({"a": 1})
        assert decode_map(bytearray(encoded)) == {"a": 1}
        assert decode_map(memoryview(encoded)) == {"a": 1}

    @pytest.mark.parametrize(
        "data",
        [
            b"",  # пустой вход
            b"\x81\xa1a",  # обрезанная запись
            b"\x81\xa1a\x01\x01",  # лишние байты после записи
            b"\x81\xa1a\xa1\xff",  # невалидный UTF-8 в str
            b"\xc1",  # зарезервированный байт формата
        ],
    )
    def test_malformed_input(self, data):
        with pytest.raises(DecodeError):
            decode_map(data)

    def test_nested_integer_keys_roundtrip(self):
        original = msgpack.packb({"amt": 5, "apls": {1: 2, 3: {4: b"v"}}}, use_bin_type=True)
        decoded = decode_map(original)
        assert decoded["apls"] == {1: 2, 3: {4: b"v"}}
        assert encode_canonical(decoded) == original

    @pytest.mark.parametrize("single_float", [True, False])
    def test_float_field_rejected(self, single_float):
        """float32 и float64 не переживают повторное кодирование байт-в-байт"""
        data = msgpack.packb({"amt": 5, "rate": 1.5}, use_single_float=single_float)
        with pytest.raises(DecodeError, match="Floating point") as exc_info:
            decode_map(data)
        assert exc_info.value.__cause__ is not None

    def test_nested_float_rejected(self):
        data = msgpack.packb({"apar": {"l": [1, 2.5]}})
        with pytest.raises(DecodeError):
            decode_map(data)

    def test_nil_map_key_rejected(self):
        data = msgpack.packb({"apar": {None: 1}})
        with pytest.raises(DecodeError, match="map key"):
            decode_map(data)

    def test_non_map_top_level(self):
        with pytest.raises(DecodeError, match="expected map"):
            decode_map(encode_canonical([1, 2, 3]))

    def test_non_bytes_input(self):
        with pytest.raises(DecodeError, match="expected bytes"):
            decode_map("not bytes")

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_map(b"")

    def test_decode_error_chains_cause(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_map(b"\x81\xa1a")
        assert exc_info.value.__cause__ is not None

    def test_decode_error_index(self):
        error = DecodeError("broken")
        assert error.index is None
        located = error.at_index(3)
        assert located.index == 3
        assert located.reason == "broken"
        assert "index 3" in str(located)


# =============================================================================
# DIGEST PRIMITIVES
# =============================================================================


class TestDigest:
    """Тесты SHA-512/256 и domain separation"""

    def test_sha512_256_known_answer(self):
        """NIST FIPS 180-4 пример для 'abc'"""
        assert sha512_256(b"abc").hex() == (
            "53048e2681941ef99b2e29b76b4c7dabe4c2d0c634fc6d46e0e2f13107e7af23"
        )

    def test_digest_size(self):
        assert len(sha512_256(b"")) == DIGEST_SIZE == 32

    def test_prefix_is_prepended(self):
        assert hash_with_prefix(TXID_PREFIX, b"payload") == sha512_256(b"TXpayload")

    def test_domain_separation(self):
        """Один payload под разными префиксами → разные digest"""
        assert hash_with_prefix(TXID_PREFIX, b"x") != hash_with_prefix(TGID_PREFIX, b"x")

    def test_empty_prefix_rejected(self):
        with pytest.raises(ValueError):
            hash_with_prefix(b"", b"x")

    def test_zero_digest(self):
        assert ZERO_DIGEST == bytes(32)
        assert is_zero_digest(ZERO_DIGEST)
        assert not is_zero_digest(b"\x01" + bytes(31))

    def test_validate_digest(self):
        assert validate_digest(bytearray(32)) == bytes(32)
        with pytest.raises(ValueError):
            validate_digest(bytes(31))
        with pytest.raises(ValueError):
            validate_digest("a" * 32)

    def test_digest_to_b64(self):
        assert digest_to_b64(ZERO_DIGEST) == "A" * 43 + "="
