"""
Ed25519 primitives for Keygen Verifier

This module wraps the cryptography package's Ed25519 implementation with the
raw-bytes key handling the verifier needs: parsing the embedded hex trust
anchor, verifying detached signatures and, for test fixtures, signing.
"""

from typing import Union
from dataclasses import dataclass

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives import serialization
from cryptography.exceptions import InvalidSignature

from ..exceptions import ValidationError

# Constants for Ed25519 key operations
ED25519_PRIVATE_KEY_LENGTH = 32
ED25519_PUBLIC_KEY_LENGTH = 32
ED25519_SIGNATURE_LENGTH = 64


@dataclass(frozen=True)
class Ed25519KeyPair:
    """
    Represents an Ed25519 key pair with private and public keys.
    
    Attributes:
        private_key: The private key as bytes (32 bytes)
        public_key: The public key as bytes (32 bytes)
    """
    private_key: bytes
    public_key: bytes
    
    def __post_init__(self):
        """Validate key pair after initialization"""
        _validate_private_key(self.private_key)
        _validate_public_key(self.public_key)


def _validate_private_key(private_key: bytes) -> None:
    if not isinstance(private_key, bytes):
        raise ValidationError("Private key must be bytes", "INVALID_PRIVATE_KEY_TYPE")
    
    if len(private_key) != ED25519_PRIVATE_KEY_LENGTH:
        raise ValidationError(
            f"Private key must be exactly {ED25519_PRIVATE_KEY_LENGTH} bytes",
            "INVALID_PRIVATE_KEY_LENGTH"
        )


def _validate_public_key(public_key: bytes) -> None:
    if not isinstance(public_key, bytes):
        raise ValidationError("Public key must be bytes", "INVALID_PUBLIC_KEY_TYPE")
    
    if len(public_key) != ED25519_PUBLIC_KEY_LENGTH:
        raise ValidationError(
            f"Public key must be exactly {ED25519_PUBLIC_KEY_LENGTH} bytes",
            "INVALID_PUBLIC_KEY_LENGTH"
        )


def parse_public_key(key_data: Union[str, bytes]) -> bytes:
    """
    Parse an Ed25519 public key from hex text or raw bytes.
    
    Args:
        key_data: 64 hex characters or 32 raw bytes
        
    Returns:
        bytes: Raw 32-byte public key
        
    Raises:
        ValidationError: If the key cannot be parsed or is not a valid point
    """
    if isinstance(key_data, str):
        try:
            key_bytes = bytes.fromhex(key_data.strip())
        except ValueError as e:
            raise ValidationError(f"Invalid hex public key: {e}", "INVALID_HEX")
    else:
        key_bytes = key_data
    
    _validate_public_key(key_bytes)
    
    try:
        Ed25519PublicKey.from_public_bytes(key_bytes)
    except ValueError as e:
        raise ValidationError(f"Invalid Ed25519 public key: {e}", "INVALID_PUBLIC_KEY")
    
    return bytes(key_bytes)


def generate_key_pair() -> Ed25519KeyPair:
    """
    Generate an Ed25519 key pair.
    
    Returns:
        Ed25519KeyPair: The generated key pair
    """
    private_key_obj = Ed25519PrivateKey.generate()
    
    private_key_bytes = private_key_obj.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_key_bytes = private_key_obj.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )
    
    return Ed25519KeyPair(private_key=private_key_bytes, public_key=public_key_bytes)


def sign_message(private_key: bytes, message: Union[str, bytes]) -> bytes:
    """
    Sign a message using Ed25519 private key.
    
    Args:
        private_key: Ed25519 private key bytes (32 bytes)
        message: Message to sign (string or bytes)
        
    Returns:
        bytes: Ed25519 signature (64 bytes)
        
    Raises:
        ValidationError: If the private key is invalid
    """
    _validate_private_key(private_key)
    
    if isinstance(message, str):
        message_bytes = message.encode('utf-8')
    else:
        message_bytes = message
    
    private_key_obj = Ed25519PrivateKey.from_private_bytes(private_key)
    return private_key_obj.sign(message_bytes)


def verify_signature(public_key: bytes, message: Union[str, bytes], signature: bytes) -> bool:
    """
    Verify a signature using Ed25519 public key.
    
    A signature of the wrong length is reported as invalid rather than raised,
    so that every malformed signature fails the same way a forged one does.
    
    Args:
        public_key: Ed25519 public key bytes (32 bytes)
        message: Original message (string or bytes)
        signature: Signature to verify (64 bytes)
        
    Returns:
        bool: True if signature is valid, False otherwise
        
    Raises:
        ValidationError: If the public key is invalid
    """
    _validate_public_key(public_key)
    
    if not isinstance(signature, bytes) or len(signature) != ED25519_SIGNATURE_LENGTH:
        return False
    
    if isinstance(message, str):
        message_bytes = message.encode('utf-8')
    else:
        message_bytes = message
    
    public_key_obj = Ed25519PublicKey.from_public_bytes(public_key)
    
    try:
        public_key_obj.verify(signature, message_bytes)
        return True
    except InvalidSignature:
        return False
