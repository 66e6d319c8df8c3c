"""
Type definitions for response verification

This module provides the response shape handed over by the transport layer
and the normalized parameters extracted from it for signature verification
and cache write-through.
"""

from typing import Dict, Optional, Any
from dataclasses import dataclass

from ..signing.types import Digest, SignatureEnvelope, SigningComponents


class VerificationErrorCodes:
    """Error codes for verification operations"""
    MISSING_SIGNATURE = "MISSING_SIGNATURE"
    INVALID_SIGNATURE_FORMAT = "INVALID_SIGNATURE_FORMAT"
    MISSING_DATE = "MISSING_DATE"
    DIGEST_MISMATCH = "DIGEST_MISMATCH"
    INVALID_TARGET = "INVALID_TARGET"
    SIGNATURE_INVALID = "SIGNATURE_INVALID"


class VerificationError(Exception):
    """Error class for verification operations"""
    
    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"


@dataclass
class VerifiableResponse:
    """
    Response that can be verified
    
    ``method`` and ``path`` describe the request as it was issued, not any
    redirected location the transport may have followed.
    """
    status: int
    headers: Dict[str, str]
    body: bytes
    method: str
    path: str
    
    def __post_init__(self):
        """Validate response data"""
        if not isinstance(self.status, int) or self.status < 100 or self.status >= 600:
            raise ValueError("Status must be a valid HTTP status code")
        if not isinstance(self.body, bytes):
            raise ValueError("Body must be raw bytes")
        self.headers = dict(self.headers)


@dataclass(frozen=True)
class ResponseParameters:
    """
    Parameters extracted from a signed response
    
    Attributes:
        envelope: Parsed signature header
        target: Request target, ``"{method} {path}"`` with a lower-case method
        host: Issuer host from configuration
        date: Response Date header
        digest: Digest recomputed over ``body``
        body: Raw body bytes
        received_digest: Digest header as sent by the server, if any
    """
    envelope: SignatureEnvelope
    target: str
    host: str
    date: str
    digest: Digest
    body: bytes
    received_digest: Optional[str] = None
    
    @property
    def signature(self) -> str:
        return self.envelope.signature
    
    @property
    def components(self) -> SigningComponents:
        return SigningComponents.from_target(
            self.target,
            host=self.host,
            date=self.date,
            digest_header=self.digest.header_value,
        )
