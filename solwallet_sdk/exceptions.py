"""
Exceptions for the SolWallet SDK.
"""
from enum import Enum


class PreflightReason(str, Enum):
    """
    Reason codes carried by PreflightRejected.

    Values are the stable strings reported to the boundary layer.
    """
    INSUFFICIENT_FUNDS = "insufficient-funds"
    INVALID_ADDRESS = "invalid-address"
    SELF_TRANSFER = "self-transfer"


class WalletError(Exception):
    """Base exception for all SolWallet SDK errors."""
    pass


class MalformedInput(WalletError, ValueError):
    """Raised when text or binary input cannot be decoded."""
    pass


class InvalidKeyMaterial(WalletError, ValueError):
    """Raised when key bytes have the wrong shape or are unusable."""
    pass


class AmountOutOfRange(WalletError, ValueError):
    """Raised when an amount does not fit an unsigned 64-bit lamport value."""
    pass


class PreflightRejected(WalletError):
    """Raised when a transfer fails the pre-flight policy checks."""

    def __init__(self, reason: PreflightReason, message: str):
        self.reason = reason
        super().__init__(message)


class WalletStoreError(WalletError):
    """Raised when the local wallet store cannot be read or decrypted."""
    pass
