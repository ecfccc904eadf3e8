"""
Recovery phrase generation and wordlist validation.

These helpers sit at the boundary: seed derivation accepts any string and
never enforces the wordlist checksum itself.
"""
import logging

from mnemonic import Mnemonic

logger = logging.getLogger(__name__)

# Standard BIP-39 English wordlist
_MNEMONIC = Mnemonic("english")

# Phrase length in words -> entropy strength in bits
WORD_COUNT_STRENGTH = {12: 128, 15: 160, 18: 192, 21: 224, 24: 256}


def normalize_phrase(phrase: str) -> str:
    """Lower-case a phrase and collapse runs of whitespace to single spaces"""
    return " ".join(phrase.lower().split())


def generate_phrase(words: int = 12) -> str:
    """
    Generate a new recovery phrase from fresh entropy.

    Args:
        words: Number of words (12, 15, 18, 21 or 24)

    Returns:
        Space-separated recovery phrase
    """
    if words not in WORD_COUNT_STRENGTH:
        raise ValueError(f"Phrase length must be one of {sorted(WORD_COUNT_STRENGTH)}, got {words}")
    return _MNEMONIC.generate(strength=WORD_COUNT_STRENGTH[words])


def validate_phrase(phrase: str) -> bool:
    """
    Check a phrase against the wordlist and its checksum.

    Args:
        phrase: Recovery phrase as entered by the user

    Returns:
        True if every word is in the wordlist and the checksum matches
    """
    if not isinstance(phrase, str):
        return False
    normalized = normalize_phrase(phrase)
    if len(normalized.split(" ")) not in WORD_COUNT_STRENGTH:
        return False
    try:
        return _MNEMONIC.check(normalized)
    except (ValueError, LookupError) as e:
        logger.debug("Phrase failed wordlist check: %s", type(e).__name__)
        return False
