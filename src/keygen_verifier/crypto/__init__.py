"""
Cryptographic operations for Keygen Verifier
"""

from .ed25519 import (
    Ed25519KeyPair,
    generate_key_pair,
    parse_public_key,
    sign_message,
    verify_signature,
    ED25519_PUBLIC_KEY_LENGTH,
    ED25519_SIGNATURE_LENGTH,
)

__all__ = [
    'Ed25519KeyPair',
    'generate_key_pair',
    'parse_public_key',
    'sign_message',
    'verify_signature',
    'ED25519_PUBLIC_KEY_LENGTH',
    'ED25519_SIGNATURE_LENGTH',
]
