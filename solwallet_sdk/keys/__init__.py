"""
Keys module for the SolWallet SDK.

This module handles recovery phrases, deterministic key derivation and
the Ed25519 key pair that signs transactions.
"""
import logging
from typing import Union

from solwallet_sdk.keys.derivation import (
    DEFAULT_PATH, DerivationPath, DerivedKeyMaterial, derive_seed, derive_signing_seed
)
from solwallet_sdk.keys.keypair import KeyPair, verify_signature
from solwallet_sdk.keys.phrase import generate_phrase, normalize_phrase, validate_phrase
from solwallet_sdk.keys.types import Wallet
from solwallet_sdk.exceptions import MalformedInput

__all__ = [
    'create_wallet',
    'restore_wallet',
    'derive_seed',
    'derive_signing_seed',
    'generate_phrase',
    'validate_phrase',
    'verify_signature',
    'DerivationPath',
    'DerivedKeyMaterial',
    'KeyPair',
    'Wallet',
]

logger = logging.getLogger(__name__)


def create_wallet(words: int = 12) -> Wallet:
    """
    Create a wallet from a freshly generated recovery phrase.

    Args:
        words: Phrase length in words

    Returns:
        New wallet at the default derivation path
    """
    phrase = generate_phrase(words)
    with KeyPair.from_phrase(phrase) as keypair:
        wallet = Wallet(address=keypair.address, phrase=phrase, derivation_path=str(DEFAULT_PATH))
    logger.info("Created wallet %s…", wallet.address[:6])
    return wallet


def restore_wallet(
    phrase: str,
    path: Union[DerivationPath, str] = DEFAULT_PATH,
    validate: bool = True,
) -> Wallet:
    """
    Restore a wallet from an existing recovery phrase.

    Args:
        phrase: Recovery phrase entered by the user
        path: Hardened derivation path
        validate: Reject phrases that fail the wordlist checksum

    Returns:
        Wallet for the phrase

    Raises:
        MalformedInput: If validation is requested and the phrase is invalid
    """
    phrase = normalize_phrase(phrase)
    if validate and not validate_phrase(phrase):
        raise MalformedInput("Recovery phrase is not a valid BIP-39 phrase")
    if isinstance(path, str):
        path = DerivationPath.parse(path)

    with KeyPair.from_phrase(phrase, path) as keypair:
        wallet = Wallet(address=keypair.address, phrase=phrase, derivation_path=str(path))
    logger.info("Restored wallet %s…", wallet.address[:6])
    return wallet
