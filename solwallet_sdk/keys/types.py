"""
Data types for the keys module.
"""
import time
from dataclasses import dataclass, field
from typing import Dict, Any

from solwallet_sdk.config import DEFAULT_DERIVATION_PATH
from solwallet_sdk.keys.keypair import KeyPair
from solwallet_sdk.models import WalletInfo


@dataclass(frozen=True)
class Wallet:
    """
    A wallet account identified by its recovery phrase.

    Only the phrase and address are held; the key pair is recomputed on
    demand and never stored.

    Attributes:
        address: Base58 address of the derived public key
        phrase: Recovery phrase
        derivation_path: Hardened path the key pair is derived at
        created_at: Creation time in epoch milliseconds
    """
    address: str
    phrase: str = field(repr=False)
    derivation_path: str = DEFAULT_DERIVATION_PATH
    created_at: int = field(default_factory=lambda: int(time.time() * 1000))

    def keypair(self, passphrase: str = "") -> KeyPair:
        """Recompute the signing key pair for this wallet"""
        return KeyPair.from_phrase(self.phrase, self.derivation_path, passphrase)

    def to_info(self) -> WalletInfo:
        return WalletInfo(
            public_key=self.address,
            mnemonic=self.phrase,
            derivation_path=self.derivation_path,
            created_at=self.created_at,
        )

    def to_json(self) -> Dict[str, Any]:
        """Serialize for storage; private key material is never included"""
        return self.to_info().model_dump(by_alias=True)

    @classmethod
    def from_info(cls, info: WalletInfo) -> "Wallet":
        return cls(
            address=info.public_key,
            phrase=info.mnemonic,
            derivation_path=info.derivation_path,
            created_at=info.created_at,
        )
