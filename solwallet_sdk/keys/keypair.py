"""
Ed25519 signing key pair for a wallet account.
"""
import logging
import threading
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey, Ed25519PublicKey
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from solwallet_sdk.codec import b58
from solwallet_sdk.exceptions import InvalidKeyMaterial
from solwallet_sdk.keys.derivation import (
    DEFAULT_PATH, DerivationPath, derive_seed, derive_signing_seed
)

logger = logging.getLogger(__name__)

PRIVATE_SEED_LENGTH = 32
PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 64
SIGNATURE_LENGTH = 64


def verify_signature(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """
    Verify an Ed25519 signature.

    Args:
        public_key: 32-byte public key
        message: Exact bytes that were signed
        signature: 64-byte signature

    Returns:
        True if the signature is valid for this key and message
    """
    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise InvalidKeyMaterial(f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(public_key)}")
    if len(signature) != SIGNATURE_LENGTH:
        return False
    try:
        verifier = Ed25519PublicKey.from_public_bytes(bytes(public_key))
    except ValueError as e:
        raise InvalidKeyMaterial(f"Invalid public key: {e}") from e
    try:
        verifier.verify(bytes(signature), bytes(message))
    except InvalidSignature:
        return False
    return True


class KeyPair:
    """
    An Ed25519 private key and its public key.

    The pair is immutable after construction and may be shared between
    threads that only sign or read the address. ``wipe()`` zeroes the
    retained private seed and disables signing.
    """

    def __init__(self, private_seed: Union[bytes, bytearray]):
        """
        Initialize from a 32-byte Ed25519 private seed.

        Args:
            private_seed: 32-byte private seed

        Raises:
            InvalidKeyMaterial: If the seed is the wrong length or all zero
        """
        if not isinstance(private_seed, (bytes, bytearray)):
            raise InvalidKeyMaterial(f"Private seed must be bytes, got {type(private_seed).__name__}")
        if len(private_seed) != PRIVATE_SEED_LENGTH:
            raise InvalidKeyMaterial(
                f"Private seed must be {PRIVATE_SEED_LENGTH} bytes, got {len(private_seed)}"
            )
        if not any(private_seed):
            raise InvalidKeyMaterial("Private seed must not be all zero")

        self._seed: Optional[bytearray] = bytearray(private_seed)
        self._private_key: Optional[Ed25519PrivateKey] = Ed25519PrivateKey.from_private_bytes(
            bytes(self._seed)
        )
        self._public_key = self._private_key.public_key().public_bytes(
            Encoding.Raw, PublicFormat.Raw
        )
        self._address = b58.encode(self._public_key)
        self._lock = threading.Lock()

    @classmethod
    def from_private_seed(cls, private_seed: bytes) -> "KeyPair":
        """Build a key pair from a 32-byte private seed"""
        return cls(private_seed)

    @classmethod
    def from_phrase(
        cls,
        phrase: str,
        path: Union[DerivationPath, str] = DEFAULT_PATH,
        passphrase: str = "",
    ) -> "KeyPair":
        """
        Derive the key pair for a recovery phrase and path.

        Args:
            phrase: Recovery phrase
            path: Hardened derivation path
            passphrase: Optional BIP-39 passphrase

        Returns:
            KeyPair for the derived private seed
        """
        material = derive_signing_seed(derive_seed(phrase, passphrase), path)
        keypair = cls(material.key)
        logger.debug("Derived key pair %s… for path %s", keypair.address[:6], path)
        return keypair

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> "KeyPair":
        """
        Build a key pair from a 64-byte secret key (private seed ‖ public key).

        Raises:
            InvalidKeyMaterial: If the embedded public key does not match
        """
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise InvalidKeyMaterial(f"Secret key must be {SECRET_KEY_LENGTH} bytes, got {len(secret_key)}")
        keypair = cls(secret_key[:PRIVATE_SEED_LENGTH])
        if keypair.public_key != bytes(secret_key[PRIVATE_SEED_LENGTH:]):
            keypair.wipe()
            raise InvalidKeyMaterial("Secret key public half does not match its private seed")
        return keypair

    @property
    def public_key(self) -> bytes:
        """32-byte public key"""
        return self._public_key

    @property
    def address(self) -> str:
        """Base58 address of the public key"""
        return self._address

    def public_key_address(self) -> str:
        return self._address

    @property
    def secret_key(self) -> bytes:
        """64-byte secret key in the Solana CLI layout (private seed ‖ public key)"""
        seed = self._require_seed()
        return bytes(seed) + self._public_key

    @property
    def is_wiped(self) -> bool:
        return self._private_key is None

    def _require_seed(self) -> bytearray:
        seed = self._seed
        if seed is None:
            raise InvalidKeyMaterial("Key pair has been wiped")
        return seed

    def sign(self, message: bytes) -> bytes:
        """
        Sign the exact message bytes.

        Args:
            message: Bytes to sign

        Returns:
            64-byte deterministic Ed25519 signature

        Raises:
            InvalidKeyMaterial: If the key pair has been wiped
        """
        private_key = self._private_key
        if private_key is None:
            raise InvalidKeyMaterial("Key pair has been wiped")
        return private_key.sign(bytes(message))

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Verify a signature against this key pair's public key"""
        return verify_signature(self._public_key, message, signature)

    def wipe(self) -> None:
        """Zero the retained private seed and drop the signing key"""
        with self._lock:
            if self._seed is not None:
                for i in range(len(self._seed)):
                    self._seed[i] = 0
            self._seed = None
            self._private_key = None

    def __enter__(self) -> "KeyPair":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyPair):
            return NotImplemented
        return self._public_key == other._public_key

    def __hash__(self) -> int:
        return hash(self._public_key)

    def __repr__(self) -> str:
        return f"KeyPair(address={self._address!r})"
