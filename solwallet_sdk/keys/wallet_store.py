"""
Encrypted local storage for the wallet phrase, network choice and history.
"""
import os
import json
import stat
import base64
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List

import keyring
from keyring.errors import KeyringError
import nacl.exceptions
import nacl.secret
import nacl.utils

# Import portalocker for file locking
try:
    import portalocker
except ImportError:
    raise ImportError(
        "portalocker package is required for the wallet store. "
        "Install with: pip install portalocker"
    )

from solwallet_sdk.config import (
    MASTER_KEY_ENV, MAX_HISTORY_ENTRIES, SolanaNetwork,
    default_network, default_store_path,
)
from solwallet_sdk.exceptions import WalletStoreError
from solwallet_sdk.keys.types import Wallet
from solwallet_sdk.models import TransactionRecord, WalletInfo

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "solwallet-sdk"
KEYRING_KEY_NAME = "master-key"
STORE_FORMAT_VERSION = 1

# Module-level cache for the keyring-backed encryption key
_encryption_key_cache: Optional[bytes] = None


def _empty_store() -> Dict[str, Any]:
    return {"wallet": None, "network": None, "history": []}


def get_encryption_key() -> bytes:
    """
    Get the store encryption key from the OS keyring or environment.

    Returns:
        32-byte SecretBox key

    Note:
        SOLWALLET_MASTER_KEY is only honoured when CI=true. A fresh key is
        generated and saved to the keyring when none exists yet.
    """
    global _encryption_key_cache

    if _encryption_key_cache is not None:
        return _encryption_key_cache

    key = None
    in_ci = os.environ.get("CI") == "true"

    try:
        stored = keyring.get_password(KEYRING_SERVICE, KEYRING_KEY_NAME)
        if stored:
            key = base64.b64decode(stored)
    except KeyringError as e:
        logger.warning("Keyring access failed: %s", e)

    if not key and in_ci:
        env_key = os.environ.get(MASTER_KEY_ENV)
        if env_key:
            key = base64.b64decode(env_key)

    if not key:
        key = nacl.utils.random(nacl.secret.SecretBox.KEY_SIZE)
        try:
            keyring.set_password(
                KEYRING_SERVICE,
                KEYRING_KEY_NAME,
                base64.b64encode(key).decode("ascii"),
            )
        except KeyringError as e:
            if not in_ci:
                raise WalletStoreError(
                    "Failed to store encryption key in OS keyring and not in CI environment"
                ) from e
            logger.warning("Set %s environment variable for CI", MASTER_KEY_ENV)

    if len(key) != nacl.secret.SecretBox.KEY_SIZE:
        raise WalletStoreError(f"Encryption key must be {nacl.secret.SecretBox.KEY_SIZE} bytes")

    _encryption_key_cache = key
    return key


class WalletStore:
    """Process-safe wallet store backed by a locked JSON file"""

    def __init__(self, store_path: Optional[str] = None, encryption_key: Optional[bytes] = None):
        """
        Initialize the wallet store.

        Args:
            store_path: Optional custom path (defaults to SOLWALLET_STORE_PATH
                or ~/.solwallet/wallet.json)
            encryption_key: Optional 32-byte key; the keyring is used if omitted
        """
        self.store_path = Path(store_path) if store_path else default_store_path()
        if encryption_key is not None and len(encryption_key) != nacl.secret.SecretBox.KEY_SIZE:
            raise WalletStoreError(f"Encryption key must be {nacl.secret.SecretBox.KEY_SIZE} bytes")
        self._encryption_key = encryption_key
        self._ensure_dir()

    def _ensure_dir(self):
        """Ensure store directory and file exist with owner-only permissions"""
        directory = self.store_path.parent
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            if os.name == 'posix':
                os.chmod(directory, stat.S_IRUSR | stat.S_IWUSR | stat.S_IXUSR)  # 0700

        if not self.store_path.exists():
            with open(self.store_path, 'w') as f:
                json.dump(_empty_store(), f)

        if os.name == 'posix':
            os.chmod(self.store_path, stat.S_IRUSR | stat.S_IWUSR)  # 0600

    def _get_lock_path(self) -> str:
        return str(self.store_path) + '.lock'

    def _box(self) -> nacl.secret.SecretBox:
        return nacl.secret.SecretBox(self._encryption_key or get_encryption_key())

    def _read_unlocked(self) -> Dict[str, Any]:
        try:
            with open(self.store_path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            return _empty_store()
        except json.JSONDecodeError as e:
            raise WalletStoreError(f"Wallet store {self.store_path} is corrupt: {e}") from e
        if not isinstance(data, dict):
            raise WalletStoreError(f"Wallet store {self.store_path} does not hold a JSON object")
        store = _empty_store()
        store.update(data)
        return store

    def _write_unlocked(self, data: Dict[str, Any]):
        with open(self.store_path, 'w') as f:
            json.dump(data, f, indent=2)

    def read(self) -> Dict[str, Any]:
        """
        Read the raw store with proper locking.

        Returns:
            Dictionary with store contents
        """
        with portalocker.Lock(self._get_lock_path(), timeout=10):
            return self._read_unlocked()

    def _update(self, **changes):
        with portalocker.Lock(self._get_lock_path(), timeout=10):
            store = self._read_unlocked()
            store.update(changes)
            self._write_unlocked(store)

    def save_wallet(self, wallet: Wallet):
        """
        Save a wallet; the phrase is encrypted, the address is kept in clear.

        Args:
            wallet: Wallet to persist
        """
        payload = json.dumps(wallet.to_json()).encode("utf-8")
        encrypted = self._box().encrypt(payload)
        self._update(wallet={
            "encrypted": base64.b64encode(encrypted).decode("ascii"),
            "version": STORE_FORMAT_VERSION,
            "publicKey": wallet.address,
        })
        logger.info("Saved wallet %s…", wallet.address[:6])

    def load_wallet(self) -> Optional[Wallet]:
        """
        Load and decrypt the saved wallet.

        Returns:
            Wallet or None if no wallet is stored

        Raises:
            WalletStoreError: If the entry cannot be decrypted or parsed
        """
        entry = self.read().get("wallet")
        if not entry:
            return None
        try:
            decrypted = self._box().decrypt(base64.b64decode(entry["encrypted"]))
            info = WalletInfo.model_validate(json.loads(decrypted.decode("utf-8")))
        except (nacl.exceptions.CryptoError, KeyError, ValueError) as e:
            raise WalletStoreError(f"Failed to decrypt wallet data: {e}") from e
        return Wallet.from_info(info)

    def has_wallet(self) -> bool:
        return bool(self.read().get("wallet"))

    def delete_wallet(self):
        """Delete the saved wallet together with its transaction history"""
        self._update(wallet=None, history=[])
        logger.info("Deleted stored wallet")

    def save_network(self, network: SolanaNetwork):
        self._update(network=SolanaNetwork(network).value)

    def load_network(self) -> SolanaNetwork:
        """
        Load the selected network.

        Returns:
            Stored network, or the configured default if none or unknown
        """
        value = self.read().get("network")
        if value is None:
            return default_network()
        try:
            return SolanaNetwork(value)
        except ValueError:
            logger.warning("Unknown stored network %r, using default", value)
            return default_network()

    def save_history(self, records: List[TransactionRecord]):
        history = [r.model_dump(by_alias=True, mode="json") for r in records[:MAX_HISTORY_ENTRIES]]
        self._update(history=history)

    def load_history(self) -> List[TransactionRecord]:
        """
        Load the transaction history, newest first.

        Raises:
            WalletStoreError: If a stored entry is invalid
        """
        entries = self.read().get("history") or []
        try:
            return [TransactionRecord.model_validate(entry) for entry in entries]
        except ValueError as e:
            raise WalletStoreError(f"Invalid transaction history entry: {e}") from e

    def add_transaction(self, record: TransactionRecord):
        """Prepend a record to the history, keeping the newest entries only"""
        entry = record.model_dump(by_alias=True, mode="json")
        with portalocker.Lock(self._get_lock_path(), timeout=10):
            store = self._read_unlocked()
            history = [entry] + list(store.get("history") or [])
            store["history"] = history[:MAX_HISTORY_ENTRIES]
            self._write_unlocked(store)

    def clear(self):
        """Remove all stored data"""
        with portalocker.Lock(self._get_lock_path(), timeout=10):
            self._write_unlocked(_empty_store())
