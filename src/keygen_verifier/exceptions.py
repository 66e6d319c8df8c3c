"""
Exception classes for Keygen Verifier
"""

from typing import Optional, Dict, Any, List


class KeygenVerifierError(Exception):
    """Base exception for all Keygen Verifier errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ValidationError(KeygenVerifierError):
    """Exception raised for invalid arguments or key material"""
    pass


class ConfigurationError(KeygenVerifierError):
    """Exception raised when configuration cannot be loaded or is invalid"""
    pass


class CacheIntegrityError(KeygenVerifierError):
    """
    Exception raised when a cached record fails signature re-verification.

    A cached record that no longer verifies has been modified after it was
    written. This is never downgraded to a cache miss.
    """
    
    def __init__(self, message: str, key: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CACHE_INTEGRITY_VIOLATION", details)
        self.key = key


class PayloadError(KeygenVerifierError):
    """Exception raised when a verified body is not a well-formed payload"""
    pass


class APIError(KeygenVerifierError):
    """Exception raised for authentically signed responses that carry an error list"""
    
    def __init__(self, message: str, errors: List[Any], http_status: int = 0,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "API_ERROR", details)
        self.errors = errors
        self.http_status = http_status


class ServerCommunicationError(KeygenVerifierError):
    """Exception raised for server communication errors"""
    
    def __init__(self, message: str, error_code: str = "SERVER_ERROR", 
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status
