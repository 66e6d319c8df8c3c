"""
License validation orchestrator

Sequences cache lookup, network fallback, signature enforcement, API error
detection and cache write-through. Every failure is terminal and returned as
a typed result; deciding whether to exit the process is left to the caller.
"""

import logging
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from enum import Enum

from .cache.storage import TamperEvidentCache
from .config import VerifierConfig
from .exceptions import (
    APIError,
    CacheIntegrityError,
    PayloadError,
    ServerCommunicationError,
)
from .http_client import KeygenHttpClient
from .payload import VerifiedPayload
from .verification.types import VerificationError
from .verification.verifier import ResponseSignatureVerifier

logger = logging.getLogger(__name__)

VALIDATE_CACHE_KEY = "validate"


class FailureKind(str, Enum):
    """Fatal outcomes of a validation attempt"""
    CACHE_INTEGRITY = "cache_integrity"
    SIGNATURE_INVALID = "signature_invalid"
    API_ERROR = "api_error"
    MALFORMED_PAYLOAD = "malformed_payload"
    TRANSPORT_ERROR = "transport_error"


class ResultSource(str, Enum):
    """Where a verified payload came from"""
    CACHE = "cache"
    NETWORK = "network"


@dataclass
class ValidationResult:
    """
    Outcome of a validation attempt
    
    Exactly one of ``payload`` and ``failure`` is set. A payload is only ever
    present after its signature has been verified.
    """
    payload: Optional[VerifiedPayload] = None
    source: Optional[ResultSource] = None
    failure: Optional[FailureKind] = None
    message: Optional[str] = None
    http_status: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)
    
    @classmethod
    def success(cls, payload: VerifiedPayload, source: ResultSource) -> 'ValidationResult':
        return cls(payload=payload, source=source)
    
    @classmethod
    def fatal(
        cls,
        failure: FailureKind,
        message: str,
        http_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> 'ValidationResult':
        return cls(failure=failure, message=message, http_status=http_status, details=details or {})
    
    @property
    def ok(self) -> bool:
        return self.failure is None
    
    def raise_for_failure(self) -> VerifiedPayload:
        """
        Return the payload, or raise the exception matching the failure.
        
        Raises:
            CacheIntegrityError, VerificationError, APIError, PayloadError,
            ServerCommunicationError
        """
        if self.ok:
            return self.payload
        
        if self.failure == FailureKind.CACHE_INTEGRITY:
            raise CacheIntegrityError(self.message, self.details.get('key', ''), self.details)
        if self.failure == FailureKind.SIGNATURE_INVALID:
            raise VerificationError(self.message, self.details.get('code', 'SIGNATURE_INVALID'), self.details)
        if self.failure == FailureKind.API_ERROR:
            raise APIError(self.message, self.details.get('errors', []), self.http_status or 0)
        if self.failure == FailureKind.MALFORMED_PAYLOAD:
            raise PayloadError(self.message, "MALFORMED_PAYLOAD", self.details)
        raise ServerCommunicationError(self.message, http_status=self.http_status or 0, details=self.details)


class LicenseValidator:
    """
    Validates license keys against a signing issuer, with a verified cache
    """
    
    def __init__(
        self,
        config: VerifierConfig,
        client: Optional[KeygenHttpClient] = None,
        verifier: Optional[ResponseSignatureVerifier] = None,
        cache: Optional[TamperEvidentCache] = None
    ):
        self.config = config
        self.verifier = verifier or ResponseSignatureVerifier(config.public_key, config.host)
        self.client = client or KeygenHttpClient(config)
        self.cache = cache or TamperEvidentCache(self.verifier, config.cache_dir)
    
    def validate(self, license_key: str, use_cache: bool = True) -> ValidationResult:
        """
        Validate a license key, serving a verified cached result when present.
        
        Args:
            license_key: License key to validate
            use_cache: Consult and update the cache
            
        Returns:
            ValidationResult: Verified payload or a fatal failure
        """
        key = VALIDATE_CACHE_KEY
        
        if use_cache:
            try:
                cached = self.cache.get(key)
            except CacheIntegrityError as e:
                return ValidationResult.fatal(
                    FailureKind.CACHE_INTEGRITY,
                    "Invalid cache signature! It has likely been tampered with.",
                    details={'key': e.key, **e.details}
                )
            except PayloadError as e:
                return ValidationResult.fatal(FailureKind.MALFORMED_PAYLOAD, str(e), details={'key': key})
            
            if cached is not None:
                return ValidationResult.success(cached, ResultSource.CACHE)
        
        try:
            response = self.client.validate_key(license_key)
        except ServerCommunicationError as e:
            logger.error(f"[Validate] Request failed: {e}")
            return ValidationResult.fatal(
                FailureKind.TRANSPORT_ERROR,
                str(e),
                http_status=e.http_status or None,
                details={'code': e.error_code}
            )
        
        try:
            params = self.verifier.verify_response(response)
        except VerificationError as e:
            logger.error(f"[Validate] Invalid response signature! {e}")
            return ValidationResult.fatal(
                FailureKind.SIGNATURE_INVALID,
                "Invalid response signature!",
                http_status=response.status,
                details={'code': e.code, 'reason': e.message}
            )
        
        try:
            payload = VerifiedPayload.from_body(params.body)
        except PayloadError as e:
            logger.error(f"[Validate] Malformed payload: {e}")
            return ValidationResult.fatal(
                FailureKind.MALFORMED_PAYLOAD,
                str(e),
                http_status=response.status
            )
        
        if payload.has_errors:
            logger.error(f"[Validate] An API error occurred! Status={response.status} Errors={payload.errors}")
            return ValidationResult.fatal(
                FailureKind.API_ERROR,
                "An API error occurred!",
                http_status=response.status,
                details={'errors': payload.errors}
            )
        
        # TODO: expire cached validations once a TTL policy is defined
        if use_cache:
            self.cache.put(key, params)
        
        return ValidationResult.success(payload, ResultSource.NETWORK)
    
    def close(self) -> None:
        self.client.close()


def validate_license(license_key: str, config: Optional[VerifierConfig] = None,
                     use_cache: bool = True) -> ValidationResult:
    """
    Validate a license key with a one-off validator.
    
    Args:
        license_key: License key to validate
        config: Verifier configuration (default: built-in defaults)
        use_cache: Consult and update the cache
        
    Returns:
        ValidationResult: Verified payload or a fatal failure
    """
    validator = LicenseValidator(config or VerifierConfig())
    try:
        return validator.validate(license_key, use_cache=use_cache)
    finally:
        validator.close()
