"""
Tests for recovery phrases and wallet creation/restore.
"""
import json
import logging

import pytest

from solwallet_sdk.exceptions import MalformedInput
from solwallet_sdk.keys import create_wallet, restore_wallet, Wallet, KeyPair
from solwallet_sdk.keys.phrase import generate_phrase, normalize_phrase, validate_phrase
from conftest import TEST_ADDRESS, TEST_PHRASE, TEST_PHRASE_2, TEST_PATH, reference_address


@pytest.mark.parametrize("words", [12, 15, 18, 21, 24])
def test_generate_phrase_lengths(words):
    phrase = generate_phrase(words)
    assert len(phrase.split(" ")) == words
    assert validate_phrase(phrase)


def test_generate_phrase_is_random():
    assert generate_phrase() != generate_phrase()


@pytest.mark.parametrize("words", [0, 11, 13, 25])
def test_generate_phrase_rejects_length(words):
    with pytest.raises(ValueError):
        generate_phrase(words)


def test_validate_phrase():
    assert validate_phrase(TEST_PHRASE)
    assert validate_phrase(TEST_PHRASE_2)
    assert validate_phrase("  Abandon " + TEST_PHRASE.split(" ", 1)[1].upper())
    # Bad checksum
    assert not validate_phrase(" ".join(["abandon"] * 12))
    # Unknown word
    assert not validate_phrase(TEST_PHRASE.replace("about", "aboutt"))
    # Wrong length
    assert not validate_phrase("abandon about")
    assert not validate_phrase(None)


def test_normalize_phrase():
    assert normalize_phrase("  Legal\tWINNER  thank\n") == "legal winner thank"


def test_create_wallet():
    wallet = create_wallet()
    assert validate_phrase(wallet.phrase)
    assert wallet.derivation_path == TEST_PATH
    assert wallet.address == KeyPair.from_phrase(wallet.phrase).address


def test_restore_wallet_known_address():
    wallet = restore_wallet(TEST_PHRASE)
    assert wallet.address == TEST_ADDRESS
    assert wallet.address == reference_address(TEST_PHRASE)
    assert wallet.phrase == TEST_PHRASE


def test_restore_wallet_logs_once_at_info(caplog):
    with caplog.at_level(logging.INFO, logger="solwallet_sdk"):
        restore_wallet(TEST_PHRASE)
    info = [r for r in caplog.records if r.levelno == logging.INFO]
    assert len(info) == 1
    assert TEST_PHRASE not in caplog.text


def test_restore_wallet_normalizes_input():
    assert restore_wallet("  " + TEST_PHRASE.upper() + " ").address == restore_wallet(TEST_PHRASE).address


def test_restore_wallet_other_path():
    wallet = restore_wallet(TEST_PHRASE, "m/44'/501'/1'/0'")
    assert wallet.derivation_path == "m/44'/501'/1'/0'"
    assert wallet.address == reference_address(TEST_PHRASE, "m/44'/501'/1'/0'")
    assert wallet.address != restore_wallet(TEST_PHRASE).address


def test_restore_wallet_rejects_invalid_phrase():
    with pytest.raises(MalformedInput):
        restore_wallet("not a valid phrase at all")


def test_restore_wallet_without_validation():
    wallet = restore_wallet("not a valid phrase at all", validate=False)
    assert wallet.address == KeyPair.from_phrase("not a valid phrase at all").address


def test_wallet_keypair_is_recomputed():
    wallet = restore_wallet(TEST_PHRASE)
    with wallet.keypair() as keypair:
        assert keypair.address == wallet.address


def test_wallet_json_excludes_private_key():
    wallet = restore_wallet(TEST_PHRASE)
    data = wallet.to_json()
    assert data == {
        "publicKey": wallet.address,
        "mnemonic": TEST_PHRASE,
        "derivationPath": TEST_PATH,
        "createdAt": wallet.created_at,
    }
    secret = KeyPair.from_phrase(TEST_PHRASE).secret_key
    assert secret.hex() not in json.dumps(data)


def test_wallet_repr_hides_phrase():
    wallet = restore_wallet(TEST_PHRASE)
    assert "abandon" not in repr(wallet)


def test_wallet_info_round_trip():
    wallet = restore_wallet(TEST_PHRASE)
    assert Wallet.from_info(wallet.to_info()) == wallet
