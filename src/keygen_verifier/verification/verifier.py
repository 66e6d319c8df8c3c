"""
Response signature verifier

This module verifies Ed25519 signatures over the canonical signing string of
a Keygen response. The same digest -> canonical string -> signature pipeline
is used for live responses and for cached records, so the two paths cannot
drift apart.
"""

import base64
import binascii
import logging
from typing import Union

from .types import (
    ResponseParameters,
    VerifiableResponse,
    VerificationError,
    VerificationErrorCodes,
)
from .utils import extract_response_parameters
from ..signing.types import SigningComponents
from ..signing.digest import calculate_digest
from ..signing.canonical_string import CanonicalStringBuilder
from ..crypto.ed25519 import parse_public_key, verify_signature

logger = logging.getLogger(__name__)


class ResponseSignatureVerifier:
    """
    Ed25519 verifier bound to a single trusted issuer
    
    The public key and issuer host are the trust anchor. They are fixed for
    the lifetime of the verifier; there is no key lookup or rotation.
    """
    
    def __init__(self, public_key: Union[str, bytes], host: str):
        """
        Initialize the verifier.
        
        Args:
            public_key: Issuer Ed25519 public key (hex string or 32 raw bytes)
            host: Issuer host used in the signing string
            
        Raises:
            ValidationError: If the public key is invalid
            ValueError: If host is empty
        """
        if not host:
            raise ValueError("Issuer host cannot be empty")
        
        self._public_key = parse_public_key(public_key)
        self.host = host
    
    @property
    def public_key(self) -> bytes:
        return self._public_key
    
    def verify(self, components: SigningComponents, signature: str) -> bool:
        """
        Verify a base64 signature over the canonical string of ``components``.
        
        Malformed base64 and malformed signatures are reported as ``False``,
        exactly like a signature that does not match.
        
        Args:
            components: Signing components
            signature: Base64-encoded Ed25519 signature
            
        Returns:
            bool: True only if the signature is valid
        """
        try:
            signature_bytes = base64.b64decode(signature, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            logger.debug(f"Undecodable signature: {e}")
            return False

        # Padding-bit variants of a base64 string decode to the same bytes;
        # only the canonical encoding is accepted.
        if base64.b64encode(signature_bytes).decode('ascii') != signature:
            logger.debug("Signature is not canonically base64-encoded")
            return False

        signing_data = CanonicalStringBuilder(components).build_bytes()
        return verify_signature(self._public_key, signing_data, signature_bytes)
    
    def verify_signed_data(self, target: str, date: str, body: bytes, signature: str) -> bool:
        """
        Verify signed response data from its stored or received parts.
        
        Args:
            target: Request target, ``"{method} {path}"``
            date: Date the issuer signed
            body: Raw body bytes
            signature: Base64-encoded signature
            
        Returns:
            bool: True only if the signature is valid
        """
        try:
            components = SigningComponents.from_target(
                target,
                host=self.host,
                date=date,
                digest_header=calculate_digest(body).header_value,
            )
        except ValueError as e:
            logger.debug(f"Cannot build signing components: {e}")
            return False
        
        return self.verify(components, signature)
    
    def verify_parameters(self, params: ResponseParameters) -> bool:
        """Verify extracted response parameters"""
        return self.verify_signed_data(params.target, params.date, params.body, params.signature)
    
    def verify_response(self, response: VerifiableResponse) -> ResponseParameters:
        """
        Extract and verify a transport response.
        
        Args:
            response: Transport response
            
        Returns:
            ResponseParameters: Verified parameters, ready for cache write-through
            
        Raises:
            VerificationError: If extraction fails or the signature is invalid
        """
        params = extract_response_parameters(response, self.host)
        
        if not self.verify_parameters(params):
            raise VerificationError(
                'Invalid response signature',
                VerificationErrorCodes.SIGNATURE_INVALID,
                {'target': params.target, 'date': params.date}
            )
        
        return params


def create_verifier(public_key: Union[str, bytes], host: str) -> ResponseSignatureVerifier:
    """
    Create a response signature verifier.
    
    Args:
        public_key: Issuer public key
        host: Issuer host
        
    Returns:
        ResponseSignatureVerifier: Configured verifier
    """
    return ResponseSignatureVerifier(public_key, host)
