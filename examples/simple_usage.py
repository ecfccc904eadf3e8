#!/usr/bin/env python3
"""
Simple example of using the SolWallet SDK.
"""
import os
import logging

from solwallet_sdk import (
    build_transfer_message, encode_transaction, restore_wallet, create_wallet,
    sign_transaction, simulate_transfer,
)


def main():
    """
    Demonstrate basic usage of the SDK.

    This example shows how to:
    1. Restore (or create) a wallet from a recovery phrase
    2. Run the transfer pre-flight checks
    3. Build, sign and encode a transfer for RPC submission
    """
    logging.basicConfig(level=logging.INFO)

    # Read configuration from environment
    phrase = os.environ.get("WALLET_PHRASE")
    recipient = os.environ.get("RECIPIENT_ADDRESS")
    blockhash = os.environ.get("RECENT_BLOCKHASH", "11111111111111111111111111111111")
    balance = int(os.environ.get("BALANCE_LAMPORTS", "2000000000"))

    wallet = restore_wallet(phrase) if phrase else create_wallet()
    print(f"Wallet address: {wallet.address}")

    if not recipient:
        print("Set RECIPIENT_ADDRESS to build a transfer")
        return

    preflight = simulate_transfer(wallet.address, recipient, 0.01, balance)
    if not preflight.ok:
        print(f"Transfer rejected ({preflight.reason.value}): {preflight.message}")
        return

    with wallet.keypair() as keypair:
        message = build_transfer_message(keypair.address, recipient, preflight.amount_lamports, blockhash)
        tx = sign_transaction(message, keypair)

    print(f"Fee: {preflight.estimated_fee} lamports, remaining: {preflight.remaining_balance}")
    print(f"Signed transaction (base64): {encode_transaction(tx.serialize())}")


if __name__ == "__main__":
    main()
