"""
SolWallet SDK - key derivation and transaction codec for a Solana wallet.
"""
from .version import __version__
from .config import SolanaNetwork
from .models import SimulationResult, TransactionRecord, WalletInfo
from .exceptions import (
    WalletError, MalformedInput, InvalidKeyMaterial, AmountOutOfRange,
    PreflightRejected, PreflightReason, WalletStoreError,
)
from .codec import b58
from .keys import (
    DerivationPath, KeyPair, Wallet, create_wallet, restore_wallet,
    derive_seed, derive_signing_seed, generate_phrase, validate_phrase,
)
from .transaction import (
    Message, SignedTransaction, build_transfer_message, sign_transaction,
    verify_transaction, encode_transaction,
)
from .units import sol_to_lamports, lamports_to_sol, simulate_transfer, check_transfer

__all__ = [
    "SolanaNetwork",
    "SimulationResult",
    "TransactionRecord",
    "WalletInfo",
    "WalletError",
    "MalformedInput",
    "InvalidKeyMaterial",
    "AmountOutOfRange",
    "PreflightRejected",
    "PreflightReason",
    "WalletStoreError",
    "b58",
    "DerivationPath",
    "KeyPair",
    "Wallet",
    "create_wallet",
    "restore_wallet",
    "derive_seed",
    "derive_signing_seed",
    "generate_phrase",
    "validate_phrase",
    "Message",
    "SignedTransaction",
    "build_transfer_message",
    "sign_transaction",
    "verify_transaction",
    "encode_transaction",
    "sol_to_lamports",
    "lamports_to_sol",
    "simulate_transfer",
    "check_transfer",
    "__version__",
]
