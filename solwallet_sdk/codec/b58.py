"""
Base58 text encoding for addresses, block hashes and signatures.
"""
import logging

# Import base58 for the big-integer conversion
try:
    import base58
except ImportError:
    raise ImportError(
        "base58 package is required for the codec module. "
        "Install with: pip install base58"
    )

from solwallet_sdk.exceptions import MalformedInput

logger = logging.getLogger(__name__)

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_ALPHABET_SET = frozenset(ALPHABET)

PUBLIC_KEY_LENGTH = 32


def encode(data: bytes) -> str:
    """
    Encode bytes as Base58 text.

    Each leading zero byte becomes one leading '1'.

    Args:
        data: Bytes to encode (any length, may be empty)

    Returns:
        Base58 string ("" for empty input)
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"Expected bytes, got {type(data).__name__}")
    return base58.b58encode(bytes(data), alphabet=ALPHABET.encode("ascii")).decode("ascii")


def decode(text: str) -> bytes:
    """
    Decode Base58 text to bytes.

    Args:
        text: Base58 string

    Returns:
        Decoded bytes, with one zero byte per leading '1'

    Raises:
        MalformedInput: If any character is outside the Base58 alphabet
    """
    if not isinstance(text, str):
        raise MalformedInput(f"Base58 input must be str, got {type(text).__name__}")

    # The base58 package tolerates trailing whitespace; we do not
    for position, char in enumerate(text):
        if char not in _ALPHABET_SET:
            raise MalformedInput(f"Invalid Base58 character {char!r} at position {position}")

    try:
        return base58.b58decode(text, alphabet=ALPHABET.encode("ascii"))
    except ValueError as e:
        raise MalformedInput(f"Invalid Base58 input: {e}") from e


def decode_address(text: str, length: int = PUBLIC_KEY_LENGTH) -> bytes:
    """
    Decode a Base58 address or block hash to its raw bytes.

    Args:
        text: Base58 string
        length: Required decoded length (32 for keys and block hashes)

    Returns:
        Raw bytes of exactly ``length`` bytes

    Raises:
        MalformedInput: If decoding fails or the length is wrong
    """
    raw = decode(text)
    if len(raw) != length:
        raise MalformedInput(f"Expected {length} bytes, decoded {len(raw)} from {text[:6]!r}…")
    return raw


def is_valid_address(text: str) -> bool:
    """Check whether text decodes to a 32-byte public key"""
    try:
        decode_address(text)
    except MalformedInput:
        return False
    return True
