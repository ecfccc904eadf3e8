"""
Tests for the Base58 codec.
"""
import pytest

from solwallet_sdk.codec import b58
from solwallet_sdk.exceptions import MalformedInput


@pytest.mark.parametrize("raw, text", [
    (b"", ""),
    (b"\x00", "1"),
    (b"\x00\x00", "11"),
    (b"\x00\x01", "12"),
    (b"\x00\x00\x01", "112"),
    (b"\x01", "2"),
    (b"\x39", "z"),
    (b"\x3a", "21"),
    (b"\xff", "5Q"),
    (b"Hello World!", "2NEpo7TZRRrLZSi2U"),
    (bytes(32), "11111111111111111111111111111111"),
])
def test_known_vectors(raw, text):
    assert b58.encode(raw) == text
    assert b58.decode(text) == raw


def test_each_leading_zero_maps_to_one_character():
    for zeros in range(1, 6):
        encoded = b58.encode(bytes(zeros) + b"\x05")
        assert encoded == "1" * zeros + "6"
        assert b58.decode(encoded) == bytes(zeros) + b"\x05"


def test_round_trip_32_byte_key():
    key = bytes(range(1, 33))
    assert b58.decode(b58.encode(key)) == key


def test_encode_accepts_bytearray():
    assert b58.encode(bytearray(b"\x00\x01")) == "12"


def test_encode_rejects_text():
    with pytest.raises(TypeError):
        b58.encode("not bytes")


@pytest.mark.parametrize("text", ["0", "O", "I", "l", "abc0", " 2", "2 ", "2\n", "ä", "2+2"])
def test_decode_rejects_characters_outside_alphabet(text):
    with pytest.raises(MalformedInput):
        b58.decode(text)


def test_malformed_input_is_value_error():
    with pytest.raises(ValueError):
        b58.decode("0OIl")


def test_decode_rejects_non_string():
    with pytest.raises(MalformedInput):
        b58.decode(b"2NEpo7TZRRrLZSi2U")


def test_decode_address_requires_32_bytes():
    assert b58.decode_address("11111111111111111111111111111111") == bytes(32)
    with pytest.raises(MalformedInput):
        b58.decode_address("2NEpo7TZRRrLZSi2U")


def test_is_valid_address(sender):
    assert b58.is_valid_address(sender.address)
    assert not b58.is_valid_address("not-an-address")
    assert not b58.is_valid_address("2NEpo7TZRRrLZSi2U")
    assert not b58.is_valid_address("")
