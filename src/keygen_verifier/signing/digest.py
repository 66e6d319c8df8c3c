"""
Body digest calculation
"""

import base64
import hashlib

from .types import Digest, DigestAlgorithm
from ..exceptions import ValidationError


def calculate_digest(body: bytes) -> Digest:
    """
    Calculate the SHA-256 digest of a response body.
    
    The digest must be taken over the exact bytes received. Text is rejected
    so that no implicit re-encoding happens before hashing.
    
    Args:
        body: Raw body bytes
        
    Returns:
        Digest: Digest with base64 value, rendered as ``sha-256=<base64>``
        
    Raises:
        ValidationError: If body is not bytes
    """
    if not isinstance(body, (bytes, bytearray, memoryview)):
        raise ValidationError(
            f"Body must be bytes, got {type(body).__name__}",
            "INVALID_BODY_TYPE"
        )
    
    digest_bytes = hashlib.sha256(body).digest()
    digest_b64 = base64.b64encode(digest_bytes).decode('ascii')
    
    return Digest(algorithm=DigestAlgorithm.SHA256, value=digest_b64)
