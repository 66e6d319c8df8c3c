"""
Utility functions for response verification

This module extracts the signature envelope, date and body digest from a
transport response and normalizes them into ``ResponseParameters``.
"""

import logging
from typing import Dict, Optional

from .types import (
    ResponseParameters,
    VerifiableResponse,
    VerificationError,
    VerificationErrorCodes,
)
from ..signing.types import SignatureEnvelope
from ..signing.digest import calculate_digest

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Keygen-Signature"
DIGEST_HEADER = "Digest"
DATE_HEADER = "Date"


def find_header_case_insensitive(headers: Dict[str, str], target_name: str) -> Optional[str]:
    """Find header with case-insensitive lookup"""
    target_lower = target_name.lower()
    for key, value in headers.items():
        if key.lower() == target_lower:
            return value
    return None


def parse_signature_header(header: str) -> SignatureEnvelope:
    """
    Parse a Keygen-Signature header value.
    
    The header is a comma-separated list of ``name="value"`` pairs, e.g.
    ``keyid="...", algorithm="ed25519", signature="..."``.
    
    Args:
        header: Raw header value
        
    Returns:
        SignatureEnvelope: Parsed envelope
        
    Raises:
        VerificationError: If the header is malformed or has no signature
    """
    params: Dict[str, str] = {}
    
    for parameter in header.split(','):
        name, sep, value = parameter.partition('=')
        name = name.strip()
        if not sep or not name:
            raise VerificationError(
                'Malformed signature header parameter',
                VerificationErrorCodes.INVALID_SIGNATURE_FORMAT,
                {'parameter': parameter}
            )
        params[name] = value.strip().strip('"')
    
    signature = params.get('signature')
    if not signature:
        raise VerificationError(
            'Signature header has no signature parameter',
            VerificationErrorCodes.MISSING_SIGNATURE,
            {'parameters': sorted(params)}
        )
    
    return SignatureEnvelope(
        signature=signature,
        key_id=params.get('keyid'),
        algorithm=params.get('algorithm'),
        headers=params.get('headers'),
        params=params,
    )


def build_request_target(method: str, path: str) -> str:
    """Build the ``(request-target)`` value for a request as issued"""
    if not method or not path:
        raise VerificationError(
            'Request method and path are required',
            VerificationErrorCodes.INVALID_TARGET,
            {'method': method, 'path': path}
        )
    return f"{method.lower()} {path}"


def extract_response_parameters(response: VerifiableResponse, host: str) -> ResponseParameters:
    """
    Extract signature verification parameters from a response.
    
    The digest is always recomputed over the raw body. When the server also
    sent a Digest header it must match the recomputed value.
    
    Args:
        response: Transport response
        host: Issuer host to sign against
        
    Returns:
        ResponseParameters: Normalized parameters
        
    Raises:
        VerificationError: If required headers are missing or malformed
    """
    signature_header = find_header_case_insensitive(response.headers, SIGNATURE_HEADER)
    if not signature_header:
        raise VerificationError(
            f'{SIGNATURE_HEADER} header not found',
            VerificationErrorCodes.MISSING_SIGNATURE
        )
    
    date_header = find_header_case_insensitive(response.headers, DATE_HEADER)
    if not date_header:
        raise VerificationError(
            f'{DATE_HEADER} header not found',
            VerificationErrorCodes.MISSING_DATE
        )
    
    envelope = parse_signature_header(signature_header)
    target = build_request_target(response.method, response.path)
    digest = calculate_digest(response.body)
    
    received_digest = find_header_case_insensitive(response.headers, DIGEST_HEADER)
    if received_digest is not None and received_digest.strip() != digest.header_value:
        raise VerificationError(
            'Digest header does not match response body',
            VerificationErrorCodes.DIGEST_MISMATCH,
            {'received': received_digest, 'calculated': digest.header_value}
        )
    
    logger.debug(f"Extracted response parameters: target={target} date={date_header}")
    
    return ResponseParameters(
        envelope=envelope,
        target=target,
        host=host,
        date=date_header,
        digest=digest,
        body=response.body,
        received_digest=received_digest,
    )
