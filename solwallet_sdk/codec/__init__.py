"""
Text and binary codecs for the SolWallet SDK.
"""
from solwallet_sdk.codec import b58, shortvec
from solwallet_sdk.codec.b58 import decode_address, is_valid_address

__all__ = ['b58', 'shortvec', 'decode_address', 'is_valid_address']
