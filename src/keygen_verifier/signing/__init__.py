"""
Keygen Verifier - Signing Protocol Module

Digest calculation and canonical signing string construction for
Keygen-signed API responses.
"""

from .types import (
    Digest,
    DigestAlgorithm,
    SigningComponents,
    SignatureEnvelope,
)

from .digest import calculate_digest

from .canonical_string import (
    CanonicalStringBuilder,
    build_canonical_string,
    SIGNED_HEADERS,
)

__all__ = [
    'Digest',
    'DigestAlgorithm',
    'SigningComponents',
    'SignatureEnvelope',
    'calculate_digest',
    'CanonicalStringBuilder',
    'build_canonical_string',
    'SIGNED_HEADERS',
]
