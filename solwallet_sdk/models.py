"""
Data models exchanged with the boundary layer.
"""
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from .exceptions import PreflightReason


class SimulationResult(BaseModel):
    """Outcome of a transfer pre-flight check"""
    ok: bool
    reason: Optional[PreflightReason] = None
    message: Optional[str] = None
    amount_lamports: int = Field(0, alias="amountLamports")
    estimated_fee: int = Field(..., alias="estimatedFee")
    total_cost: int = Field(..., alias="totalCost")
    remaining_balance: Optional[int] = Field(None, alias="remainingBalance")

    class Config:
        populate_by_name = True


class TransactionRecord(BaseModel):
    """Entry of the local transaction history"""
    signature: str = ""
    timestamp: datetime
    amount: int = 0
    from_address: str = Field("", alias="fromAddress")
    to_address: str = Field("", alias="toAddress")
    status: str = "unknown"
    block_time: Optional[int] = Field(None, alias="blockTime")
    slot: Optional[int] = None
    error: Optional[str] = None

    class Config:
        populate_by_name = True

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "TransactionRecord":
        """
        Build a record from an RPC signature-status style dictionary.

        Missing fields fall back to empty values; the timestamp is taken
        from ``blockTime`` (epoch seconds).
        """
        block_time = data.get("blockTime")
        error = data.get("error", data.get("err"))
        return cls(
            signature=data.get("signature") or "",
            timestamp=datetime.fromtimestamp(block_time or 0, tz=timezone.utc),
            amount=data.get("amount") or 0,
            from_address=data.get("fromAddress") or "",
            to_address=data.get("toAddress") or "",
            status=data.get("confirmationStatus") or "unknown",
            block_time=block_time,
            slot=data.get("slot"),
            error=None if error is None else str(error),
        )


class WalletInfo(BaseModel):
    """Persisted description of a wallet; never includes private keys"""
    public_key: str = Field(..., alias="publicKey")
    mnemonic: str
    derivation_path: str = Field(..., alias="derivationPath")
    created_at: int = Field(..., alias="createdAt")

    class Config:
        populate_by_name = True
