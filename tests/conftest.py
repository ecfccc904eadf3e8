"""
Pytest fixtures for the SolWallet SDK tests.
"""
import hashlib
import hmac

import pytest
from nacl.signing import SigningKey

from solwallet_sdk.codec import b58
from solwallet_sdk.keys import wallet_store
from solwallet_sdk.keys.keypair import KeyPair

# Constants for testing
TEST_PHRASE = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)
TEST_PHRASE_2 = "legal winner thank year wave sausage worth useful legal winner thank yellow"
# Address for TEST_PHRASE at the default path, as shown by other Solana wallets
TEST_ADDRESS = "HAgk14JpMQLgt6rVgv7cBQFJWFto5Dqxi472uT3DKpqk"
TEST_PATH = "m/44'/501'/0'/0'"
TEST_BLOCKHASH_BYTES = bytes(range(32))
TEST_BLOCKHASH = b58.encode(TEST_BLOCKHASH_BYTES)
TEST_MASTER_KEY = b"0123456789abcdef0123456789abcdef"
SYSTEM_PROGRAM_ADDRESS = "11111111111111111111111111111111"


# ─────────────────────────────────────────────────────────────────────────
#  INDEPENDENT REFERENCE DERIVATION (hashlib + PyNaCl)
# ─────────────────────────────────────────────────────────────────────────

def reference_seed(phrase: str, passphrase: str = "") -> bytes:
    return hashlib.pbkdf2_hmac(
        "sha512", phrase.encode("utf-8"), ("mnemonic" + passphrase).encode("utf-8"), 2048, 64
    )


def reference_slip10(seed: bytes, path: str) -> bytes:
    digest = hmac.new(b"ed25519 seed", seed, hashlib.sha512).digest()
    key, chain_code = digest[:32], digest[32:]
    for segment in path.split("/")[1:]:
        index = int(segment.rstrip("'")) | 0x80000000
        data = b"\x00" + key + index.to_bytes(4, "big")
        digest = hmac.new(chain_code, data, hashlib.sha512).digest()
        key, chain_code = digest[:32], digest[32:]
    return key


def reference_signing_key(phrase: str, path: str = TEST_PATH) -> SigningKey:
    return SigningKey(reference_slip10(reference_seed(phrase), path))


def reference_address(phrase: str, path: str = TEST_PATH) -> str:
    return b58.encode(bytes(reference_signing_key(phrase, path).verify_key))


# ─────────────────────────────────────────────────────────────────────────
#  FIXTURES
# ─────────────────────────────────────────────────────────────────────────

@pytest.fixture
def sender():
    """Key pair with a fixed private seed"""
    return KeyPair(bytes([1]) * 32)


@pytest.fixture
def recipient():
    return KeyPair(bytes([2]) * 32)


@pytest.fixture
def phrase_keypair():
    """Key pair derived from TEST_PHRASE at the default path"""
    return KeyPair.from_phrase(TEST_PHRASE)


@pytest.fixture
def store(tmp_path):
    """Wallet store in a temporary directory with a fixed encryption key"""
    return wallet_store.WalletStore(str(tmp_path / "wallet" / "wallet.json"), encryption_key=TEST_MASTER_KEY)


@pytest.fixture(autouse=True)
def _reset_encryption_key_cache(monkeypatch):
    """Never leak a keyring-backed key between tests"""
    monkeypatch.setattr(wallet_store, "_encryption_key_cache", None)
