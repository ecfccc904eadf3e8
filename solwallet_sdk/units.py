"""
Lamport/SOL conversion, static fee estimate and transfer pre-flight checks.
"""
import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from .codec import b58
from .config import FLAT_FEE_LAMPORTS, LAMPORTS_PER_SOL, MAX_LAMPORTS
from .exceptions import AmountOutOfRange, MalformedInput, PreflightReason, PreflightRejected
from .models import SimulationResult

logger = logging.getLogger(__name__)


def sol_to_lamports(sol: Union[float, int]) -> int:
    """
    Convert SOL to lamports, rounding half away from zero.

    Args:
        sol: Amount in SOL

    Returns:
        Amount in lamports

    Raises:
        AmountOutOfRange: If the amount is negative, not finite or above 2**64 - 1
    """
    if isinstance(sol, bool) or not isinstance(sol, (int, float)):
        raise TypeError(f"SOL amount must be a number, got {type(sol).__name__}")
    if isinstance(sol, float) and not math.isfinite(sol):
        raise AmountOutOfRange(f"SOL amount must be finite, got {sol}")
    if sol < 0:
        raise AmountOutOfRange(f"SOL amount must not be negative, got {sol}")

    # Scale in floating point first so the result matches other clients bit for bit
    scaled = Decimal(sol * LAMPORTS_PER_SOL)
    lamports = int(scaled.to_integral_value(rounding=ROUND_HALF_UP))
    if lamports > MAX_LAMPORTS:
        raise AmountOutOfRange(f"{sol} SOL does not fit in 64-bit lamports")
    return lamports


def lamports_to_sol(lamports: int) -> float:
    """Convert lamports to SOL for display; lossy above 2**53 lamports"""
    return lamports / LAMPORTS_PER_SOL


def estimate_fee(num_signatures: int = 1) -> int:
    """Static fee estimate in lamports"""
    if num_signatures < 1:
        raise ValueError("A transaction needs at least one signature")
    return FLAT_FEE_LAMPORTS * num_signatures


def check_transfer(
    from_address: str,
    to_address: str,
    sol_amount: Union[float, int],
    current_balance: int,
) -> int:
    """
    Run the transfer pre-flight checks.

    Checks run in order: balance covers amount plus fee, both addresses
    decode, sender differs from recipient.

    Args:
        from_address: Base58 sender address
        to_address: Base58 recipient address
        sol_amount: Amount to send in SOL
        current_balance: Sender balance in lamports

    Returns:
        The transfer amount in lamports

    Raises:
        PreflightRejected: With the reason of the first failing check
        AmountOutOfRange: If sol_amount cannot be converted
    """
    lamports = sol_to_lamports(sol_amount)
    fee = estimate_fee()
    total = lamports + fee

    if current_balance < total:
        raise PreflightRejected(
            PreflightReason.INSUFFICIENT_FUNDS,
            f"Insufficient funds: need {lamports_to_sol(total)} SOL, "
            f"have {lamports_to_sol(current_balance)} SOL",
        )

    try:
        from_pubkey = b58.decode_address(from_address)
        to_pubkey = b58.decode_address(to_address)
    except MalformedInput as e:
        raise PreflightRejected(PreflightReason.INVALID_ADDRESS, f"Invalid address: {e}") from e

    if from_pubkey == to_pubkey:
        raise PreflightRejected(PreflightReason.SELF_TRANSFER, "Cannot transfer to the sending address")

    return lamports


def simulate_transfer(
    from_address: str,
    to_address: str,
    sol_amount: Union[float, int],
    current_balance: int,
) -> SimulationResult:
    """
    Report whether a transfer would pass the pre-flight checks.

    Args:
        from_address: Base58 sender address
        to_address: Base58 recipient address
        sol_amount: Amount to send in SOL
        current_balance: Sender balance in lamports

    Returns:
        SimulationResult; on rejection ``reason`` holds the first failing check
        and ``remaining_balance`` is None
    """
    lamports = sol_to_lamports(sol_amount)
    fee = estimate_fee()
    try:
        check_transfer(from_address, to_address, sol_amount, current_balance)
    except PreflightRejected as e:
        logger.info("Transfer pre-flight rejected: %s", e.reason.value)
        return SimulationResult(
            ok=False,
            reason=e.reason,
            message=str(e),
            amount_lamports=lamports,
            estimated_fee=fee,
            total_cost=lamports + fee,
        )

    return SimulationResult(
        ok=True,
        amount_lamports=lamports,
        estimated_fee=fee,
        total_cost=lamports + fee,
        remaining_balance=current_balance - (lamports + fee),
    )
