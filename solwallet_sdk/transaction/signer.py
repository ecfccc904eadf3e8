"""
Signing and envelope assembly for transfer transactions.
"""
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Tuple

from solwallet_sdk.codec import b58, shortvec
from solwallet_sdk.exceptions import InvalidKeyMaterial, MalformedInput
from solwallet_sdk.keys.keypair import KeyPair, SIGNATURE_LENGTH, verify_signature
from solwallet_sdk.transaction.message import Message, _Reader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedTransaction:
    """
    Signatures plus the message they cover.

    Signature ``i`` belongs to the signer at account index ``i``.
    """
    signatures: Tuple[bytes, ...]
    message: Message

    def __post_init__(self):
        signatures = tuple(bytes(s) for s in self.signatures)
        object.__setattr__(self, "signatures", signatures)
        if len(signatures) != self.message.header.num_required_signatures:
            raise MalformedInput(
                f"Transaction carries {len(signatures)} signatures, "
                f"message requires {self.message.header.num_required_signatures}"
            )
        for signature in signatures:
            if len(signature) != SIGNATURE_LENGTH:
                raise MalformedInput(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")

    @property
    def signature(self) -> bytes:
        """Fee payer signature, which also identifies the transaction"""
        return self.signatures[0]

    def serialize(self) -> bytes:
        """compact(signature count) ‖ signatures ‖ message bytes"""
        out = bytearray(shortvec.encode_length(len(self.signatures)))
        for signature in self.signatures:
            out += signature
        out += self.message.serialize()
        return bytes(out)

    @classmethod
    def deserialize(cls, data: bytes) -> "SignedTransaction":
        """
        Parse signed transaction bytes.

        Raises:
            MalformedInput: If the data is truncated or inconsistent
        """
        reader = _Reader(data)
        count = reader.read_length()
        signatures = tuple(reader.read(SIGNATURE_LENGTH) for _ in range(count))
        message = reader.read_message()
        if not reader.at_end():
            raise MalformedInput(f"{reader.remaining()} trailing bytes after transaction")
        return cls(signatures, message)


def sign_transaction(message: Message, signer: KeyPair) -> SignedTransaction:
    """
    Sign a single-signer message.

    Args:
        message: Compiled message whose fee payer is the signer
        signer: Key pair of the fee payer

    Returns:
        Signed transaction carrying one signature over the serialized message

    Raises:
        MalformedInput: If the message needs more than one signature
        InvalidKeyMaterial: If the signer is not the fee payer or has been wiped
    """
    if message.header.num_required_signatures != 1:
        raise MalformedInput(
            f"Only single-signer messages are supported, message requires "
            f"{message.header.num_required_signatures} signatures"
        )
    if signer.public_key != message.fee_payer:
        raise InvalidKeyMaterial(
            f"Signer {signer.address[:6]}… is not the fee payer {b58.encode(message.fee_payer)[:6]}…"
        )

    signature = signer.sign(message.serialize())
    tx = SignedTransaction((signature,), message)
    logger.debug("Signed transaction %s…", b58.encode(signature)[:8])
    return tx


def verify_transaction(tx: SignedTransaction) -> bool:
    """Check every signature against its signer key over the serialized message"""
    payload = tx.message.serialize()
    return all(
        verify_signature(key, payload, signature)
        for key, signature in zip(tx.message.signer_keys(), tx.signatures)
    )


def transaction_id(tx: SignedTransaction) -> str:
    """Base58 text of the fee payer signature"""
    return b58.encode(tx.signature)


def encode_transaction(raw: bytes) -> str:
    """Base64-encode signed transaction bytes for RPC submission"""
    return base64.b64encode(bytes(raw)).decode("ascii")


def decode_transaction(text: str) -> bytes:
    """
    Decode base64 transaction text.

    Raises:
        MalformedInput: If the text is not valid base64
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedInput(f"Invalid base64 transaction: {e}") from e
