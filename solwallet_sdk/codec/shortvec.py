"""
Compact-u16 ("shortvec") length prefixes used by the transaction wire format.

A length is written 7 bits at a time, least significant group first, with
the high bit of each byte set when another byte follows. Values below 0x80
take a single byte.
"""
from typing import Tuple

from solwallet_sdk.exceptions import MalformedInput

MAX_VALUE = 0xFFFF
MAX_ENCODED_LENGTH = 3


def encode_length(value: int) -> bytes:
    """
    Encode a length as a compact-u16.

    Args:
        value: Length in the range 0..0xFFFF

    Returns:
        1 to 3 encoded bytes
    """
    if not isinstance(value, int) or value < 0 or value > MAX_VALUE:
        raise ValueError(f"Compact length must be in 0..{MAX_VALUE}, got {value!r}")

    out = bytearray()
    remaining = value
    while True:
        byte = remaining & 0x7F
        remaining >>= 7
        if remaining:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_length(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a compact-u16 length.

    Args:
        data: Buffer holding the encoded length
        offset: Position of the first length byte

    Returns:
        Tuple of (value, number of bytes consumed)

    Raises:
        MalformedInput: If the buffer ends early or the encoding is invalid
    """
    value = 0
    for size in range(MAX_ENCODED_LENGTH):
        position = offset + size
        if position >= len(data):
            raise MalformedInput("Truncated compact length")
        byte = data[position]
        value |= (byte & 0x7F) << (7 * size)
        if not byte & 0x80:
            # Reject non-canonical forms such as 0x80 0x00
            if size > 0 and byte == 0:
                raise MalformedInput("Non-canonical compact length")
            if value > MAX_VALUE:
                raise MalformedInput(f"Compact length {value} exceeds {MAX_VALUE}")
            return value, size + 1
    raise MalformedInput("Compact length longer than 3 bytes")
