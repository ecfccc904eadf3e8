"""
Deterministic derivation of signing keys from a recovery phrase.

A phrase is stretched into a 64-byte seed with PBKDF2-HMAC-SHA512 (BIP-39),
then a hardened-only SLIP-0010 path is walked over the seed to produce the
32-byte Ed25519 private seed.
"""
import hashlib
import hmac
import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import Tuple, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from solwallet_sdk.config import DEFAULT_DERIVATION_PATH
from solwallet_sdk.exceptions import MalformedInput, InvalidKeyMaterial

logger = logging.getLogger(__name__)

SEED_LENGTH = 64
SEED_SALT_PREFIX = "mnemonic"
SEED_ITERATIONS = 2048

HARDENED_OFFSET = 0x80000000
ED25519_CURVE_KEY = b"ed25519 seed"

_SEGMENT_RE = re.compile(r"^(\d+)'$")


def _normalize(text: str) -> bytes:
    return unicodedata.normalize("NFKD", text).encode("utf-8")


def derive_seed(phrase: str, passphrase: str = "") -> bytes:
    """
    Stretch a recovery phrase into a 64-byte seed.

    Args:
        phrase: Recovery phrase (not checked against the wordlist)
        passphrase: Optional BIP-39 passphrase appended to the salt

    Returns:
        64-byte seed
    """
    if not isinstance(phrase, str):
        raise TypeError(f"Recovery phrase must be str, got {type(phrase).__name__}")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA512(),
        length=SEED_LENGTH,
        salt=_normalize(SEED_SALT_PREFIX + passphrase),
        iterations=SEED_ITERATIONS,
    )
    return kdf.derive(_normalize(phrase))


@dataclass(frozen=True)
class DerivedKeyMaterial:
    """
    Key and chain code at one node of the derivation tree.

    Attributes:
        key: 32-byte private key (the Ed25519 private seed at the leaf)
        chain_code: 32-byte chain code
    """
    key: bytes
    chain_code: bytes

    def __post_init__(self):
        if len(self.key) != 32 or len(self.chain_code) != 32:
            raise InvalidKeyMaterial("Derived key and chain code must be 32 bytes each")

    def __repr__(self) -> str:
        return "DerivedKeyMaterial(key=<redacted>, chain_code=<redacted>)"


@dataclass(frozen=True)
class DerivationPath:
    """
    A hardened-only hierarchical derivation path.

    Attributes:
        indices: Child indices without the hardened offset
    """
    indices: Tuple[int, ...]

    @classmethod
    def parse(cls, path: str) -> "DerivationPath":
        """
        Parse a path such as "m/44'/501'/0'/0'".

        Raises:
            MalformedInput: If the path is malformed or has a non-hardened level
        """
        if not isinstance(path, str):
            raise MalformedInput(f"Derivation path must be str, got {type(path).__name__}")
        segments = path.strip().split("/")
        if segments[0] != "m":
            raise MalformedInput(f"Derivation path must start with 'm': {path!r}")

        indices = []
        for segment in segments[1:]:
            match = _SEGMENT_RE.match(segment)
            if not match:
                # Ed25519 has no public (non-hardened) derivation
                raise MalformedInput(f"Only hardened path segments are supported, got {segment!r}")
            index = int(match.group(1))
            if index >= HARDENED_OFFSET:
                raise MalformedInput(f"Path index {index} out of range")
            indices.append(index)
        return cls(tuple(indices))

    def __str__(self) -> str:
        return "/".join(["m"] + [f"{index}'" for index in self.indices])


DEFAULT_PATH = DerivationPath.parse(DEFAULT_DERIVATION_PATH)


def _hmac_sha512(key: bytes, data: bytes) -> Tuple[bytes, bytes]:
    digest = hmac.new(key, data, hashlib.sha512).digest()
    return digest[:32], digest[32:]


def master_key(seed: bytes) -> DerivedKeyMaterial:
    """
    Compute the SLIP-0010 Ed25519 master node for a seed.

    Args:
        seed: Seed bytes (64 bytes when produced by derive_seed)

    Returns:
        Master key and chain code
    """
    if not seed:
        raise InvalidKeyMaterial("Seed must not be empty")
    key, chain_code = _hmac_sha512(ED25519_CURVE_KEY, bytes(seed))
    return DerivedKeyMaterial(key=key, chain_code=chain_code)


def derive_child(parent: DerivedKeyMaterial, index: int) -> DerivedKeyMaterial:
    """
    Derive the hardened child at ``index`` (without the hardened offset).
    """
    if not 0 <= index < HARDENED_OFFSET:
        raise MalformedInput(f"Path index {index} out of range")
    data = b"\x00" + parent.key + (index | HARDENED_OFFSET).to_bytes(4, "big")
    key, chain_code = _hmac_sha512(parent.chain_code, data)
    return DerivedKeyMaterial(key=key, chain_code=chain_code)


def derive_signing_seed(
    seed: bytes,
    path: Union[DerivationPath, str] = DEFAULT_PATH,
) -> DerivedKeyMaterial:
    """
    Walk a hardened derivation path from a seed.

    Args:
        seed: 64-byte seed from derive_seed
        path: DerivationPath or its string form

    Returns:
        Key material of the final node; ``key`` is the Ed25519 private seed
    """
    if isinstance(path, str):
        path = DerivationPath.parse(path)

    node = master_key(seed)
    for index in path.indices:
        node = derive_child(node, index)
    logger.debug("Derived key material for path %s", path)
    return node
