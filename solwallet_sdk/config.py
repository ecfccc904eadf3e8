"""
Configuration constants and network presets for the SolWallet SDK.
"""
import os
import logging
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

# 1 SOL = 10^9 lamports
LAMPORTS_PER_SOL = 1_000_000_000

# Static per-signature fee; live fee lookups belong to the RPC layer
FLAT_FEE_LAMPORTS = 5000

MAX_LAMPORTS = 2**64 - 1

# Solana's all-hardened account path: purpose / coin type / account / change
DEFAULT_DERIVATION_PATH = "m/44'/501'/0'/0'"

# System program: 32 zero bytes ("11111111111111111111111111111111")
SYSTEM_PROGRAM_ID = bytes(32)

# System program instruction index for Transfer
TRANSFER_DISCRIMINATOR = 2

MAX_HISTORY_ENTRIES = 100

STORE_PATH_ENV = "SOLWALLET_STORE_PATH"
NETWORK_ENV = "SOLWALLET_NETWORK"
MASTER_KEY_ENV = "SOLWALLET_MASTER_KEY"

DEFAULT_STORE_PATH = "~/.solwallet/wallet.json"


class SolanaNetwork(str, Enum):
    """Cluster presets known to the wallet."""
    MAINNET = "mainnet"
    DEVNET = "devnet"
    TESTNET = "testnet"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def rpc_url(self) -> str:
        return _RPC_URLS[self]

    @property
    def supports_airdrop(self) -> bool:
        return self is not SolanaNetwork.MAINNET


_LABELS = {
    SolanaNetwork.MAINNET: "Mainnet",
    SolanaNetwork.DEVNET: "Devnet",
    SolanaNetwork.TESTNET: "Testnet",
}

_RPC_URLS = {
    SolanaNetwork.MAINNET: "https://api.mainnet-beta.solana.com",
    SolanaNetwork.DEVNET: "https://api.devnet.solana.com",
    SolanaNetwork.TESTNET: "https://api.testnet.solana.com",
}


def default_network() -> SolanaNetwork:
    """
    Get the default network, honouring SOLWALLET_NETWORK.

    Returns:
        The configured network, or devnet if unset or unrecognised
    """
    value = os.environ.get(NETWORK_ENV)
    if not value:
        return SolanaNetwork.DEVNET
    try:
        return SolanaNetwork(value.strip().lower())
    except ValueError:
        logger.warning("Unknown %s value %r, using devnet", NETWORK_ENV, value)
        return SolanaNetwork.DEVNET


def default_store_path() -> Path:
    """Resolve the wallet store path from SOLWALLET_STORE_PATH or the default"""
    return Path(os.path.expanduser(os.environ.get(STORE_PATH_ENV, DEFAULT_STORE_PATH)))
