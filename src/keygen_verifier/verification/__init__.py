"""
Response signature verification for Keygen Verifier

Extraction of signature parameters from transport responses and Ed25519
verification of the canonical signing string.
"""

from .types import (
    VerifiableResponse,
    ResponseParameters,
    VerificationError,
    VerificationErrorCodes,
)

from .verifier import (
    ResponseSignatureVerifier,
    create_verifier,
)

from .utils import (
    find_header_case_insensitive,
    parse_signature_header,
    build_request_target,
    extract_response_parameters,
    SIGNATURE_HEADER,
    DIGEST_HEADER,
    DATE_HEADER,
)

__all__ = [
    'VerifiableResponse',
    'ResponseParameters',
    'VerificationError',
    'VerificationErrorCodes',
    'ResponseSignatureVerifier',
    'create_verifier',
    'find_header_case_insensitive',
    'parse_signature_header',
    'build_request_target',
    'extract_response_parameters',
    'SIGNATURE_HEADER',
    'DIGEST_HEADER',
    'DATE_HEADER',
]
