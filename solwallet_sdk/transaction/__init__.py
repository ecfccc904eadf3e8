"""
Transaction module for the SolWallet SDK.

Builds, signs and serializes single-signer transfer transactions in the
legacy (unversioned) wire format.
"""
from solwallet_sdk.transaction.message import (
    AccountMeta, CompiledInstruction, Instruction, Message, MessageHeader,
    build_transfer_message, compile_message, parse_transfer_data, transfer_instruction,
)
from solwallet_sdk.transaction.signer import (
    SignedTransaction, decode_transaction, encode_transaction, sign_transaction,
    transaction_id, verify_transaction,
)

__all__ = [
    'AccountMeta',
    'CompiledInstruction',
    'Instruction',
    'Message',
    'MessageHeader',
    'SignedTransaction',
    'build_transfer_message',
    'compile_message',
    'decode_transaction',
    'encode_transaction',
    'parse_transfer_data',
    'sign_transaction',
    'transaction_id',
    'transfer_instruction',
    'verify_transaction',
]
