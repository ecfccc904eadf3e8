"""
End-to-end: recovery phrase to signed, transport-encoded transfer.

The expected bytes are assembled independently with hashlib, PyNaCl and
struct, and cross-checked against the solders transaction builder.
"""
import base64
import struct

from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message as ReferenceMessage
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction as ReferenceTransaction

from solwallet_sdk import (
    KeyPair, b58, build_transfer_message, encode_transaction, restore_wallet,
    sign_transaction, simulate_transfer, verify_transaction,
)
from solwallet_sdk.keys.derivation import derive_seed, derive_signing_seed
from solwallet_sdk.transaction import SignedTransaction, parse_transfer_data
from conftest import (
    TEST_ADDRESS, TEST_BLOCKHASH, TEST_BLOCKHASH_BYTES, TEST_PHRASE, TEST_PHRASE_2,
    reference_address, reference_signing_key,
)

LAMPORTS = 1_234_567


def _expected_transaction(from_phrase: str, to_phrase: str) -> bytes:
    signing_key = reference_signing_key(from_phrase)
    from_key = bytes(signing_key.verify_key)
    to_key = bytes(reference_signing_key(to_phrase).verify_key)

    message = b"".join([
        bytes([1, 0, 1]),
        bytes([3]), from_key, to_key, bytes(32),
        TEST_BLOCKHASH_BYTES,
        bytes([1]),
        bytes([2]), bytes([2, 0, 1]),
        bytes([12]), struct.pack("<I", 2), struct.pack("<Q", LAMPORTS),
    ])
    signature = signing_key.sign(message).signature
    return bytes([1]) + signature + message


def test_phrase_to_address():
    assert restore_wallet(TEST_PHRASE).address == TEST_ADDRESS
    assert reference_address(TEST_PHRASE) == TEST_ADDRESS


def test_signed_transfer_is_byte_identical():
    sender = KeyPair.from_phrase(TEST_PHRASE)
    recipient = restore_wallet(TEST_PHRASE_2)

    message = build_transfer_message(sender.address, recipient.address, LAMPORTS, TEST_BLOCKHASH)
    tx = sign_transaction(message, sender)

    assert tx.serialize() == _expected_transaction(TEST_PHRASE, TEST_PHRASE_2)
    assert verify_transaction(tx)


def test_full_flow():
    sender_wallet = restore_wallet(TEST_PHRASE)
    recipient_wallet = restore_wallet(TEST_PHRASE_2)

    preflight = simulate_transfer(sender_wallet.address, recipient_wallet.address, 0.001234567, 10**9)
    assert preflight.ok
    assert preflight.amount_lamports == LAMPORTS

    with sender_wallet.keypair() as keypair:
        message = build_transfer_message(
            keypair.address, recipient_wallet.address, preflight.amount_lamports, TEST_BLOCKHASH
        )
        encoded = encode_transaction(sign_transaction(message, keypair).serialize())

    parsed = SignedTransaction.deserialize(base64.b64decode(encoded))
    assert verify_transaction(parsed)
    assert b58.encode(parsed.message.fee_payer) == sender_wallet.address
    assert b58.encode(parsed.message.account_keys[1]) == recipient_wallet.address
    assert parse_transfer_data(parsed.message.instructions[0].data) == LAMPORTS
    assert encoded == base64.b64encode(_expected_transaction(TEST_PHRASE, TEST_PHRASE_2)).decode("ascii")


def _solders_transaction(from_phrase: str, to_address: str) -> ReferenceTransaction:
    payer = Keypair.from_seed(derive_signing_seed(derive_seed(from_phrase)).key)
    blockhash = Hash(TEST_BLOCKHASH_BYTES)
    instruction = transfer(TransferParams(
        from_pubkey=payer.pubkey(),
        to_pubkey=Pubkey.from_string(to_address),
        lamports=LAMPORTS,
    ))
    message = ReferenceMessage.new_with_blockhash([instruction], payer.pubkey(), blockhash)
    return ReferenceTransaction([payer], message, blockhash)


def test_matches_solders_transaction():
    sender = KeyPair.from_phrase(TEST_PHRASE)
    recipient = restore_wallet(TEST_PHRASE_2)
    assert str(Keypair.from_seed(derive_signing_seed(derive_seed(TEST_PHRASE)).key).pubkey()) == TEST_ADDRESS

    message = build_transfer_message(sender.address, recipient.address, LAMPORTS, TEST_BLOCKHASH)
    expected = _solders_transaction(TEST_PHRASE, recipient.address)

    assert message.serialize() == bytes(expected.message)
    assert sign_transaction(message, sender).serialize() == bytes(expected)
