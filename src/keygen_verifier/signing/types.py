"""
Type definitions for the signed-response protocol

This module provides the data classes that describe what an issuer signed:
the named signing components, the body digest, and the parsed signature
envelope carried in the response headers.
"""

from typing import Dict, Optional
from dataclasses import dataclass, field
from enum import Enum


class DigestAlgorithm(str, Enum):
    """Content digest algorithms"""
    SHA256 = "sha-256"


@dataclass(frozen=True)
class Digest:
    """
    Content digest of a response body
    
    Attributes:
        algorithm: Digest algorithm label
        value: Base64-encoded digest value
    """
    algorithm: DigestAlgorithm
    value: str
    
    @property
    def header_value(self) -> str:
        """Digest as it appears in the Digest header and the signing string"""
        return f"{self.algorithm.value}={self.value}"
    
    def __str__(self) -> str:
        return self.header_value


@dataclass(frozen=True)
class SigningComponents:
    """
    Named components that fully determine the signing string
    
    Attributes:
        method: Lower-cased request method
        path: Request path as issued, including any query string
        host: Issuer host (a configured constant, never read from a response)
        date: Value of the response Date header
        digest_header: Rendered digest, e.g. ``sha-256=<base64>``
    """
    method: str
    path: str
    host: str
    date: str
    digest_header: str
    
    def __post_init__(self):
        """Normalize method case"""
        object.__setattr__(self, 'method', self.method.lower())
    
    @property
    def request_target(self) -> str:
        return f"{self.method} {self.path}"
    
    @classmethod
    def from_target(cls, target: str, host: str, date: str, digest_header: str) -> 'SigningComponents':
        """
        Build components from a combined ``"{method} {path}"`` target.
        
        The target is taken verbatim, so its method must already be
        lower-cased.

        Raises:
            ValueError: If the target has no method/path separator or its
                method is not lower-case
        """
        method, sep, path = target.partition(' ')
        if not sep or not method or not path:
            raise ValueError(f"Invalid request target: {target!r}")
        if method != method.lower():
            raise ValueError(f"Invalid request target, method must be lower-case: {target!r}")
        return cls(method=method, path=path, host=host, date=date, digest_header=digest_header)


@dataclass(frozen=True)
class SignatureEnvelope:
    """
    Parsed Keygen-Signature header
    
    Only the signature is used for verification. The remaining parameters are
    kept as parsed so callers can inspect them.
    """
    signature: str
    key_id: Optional[str] = None
    algorithm: Optional[str] = None
    headers: Optional[str] = None
    params: Dict[str, str] = field(default_factory=dict)
