"""
Keygen Verifier
Signed license validation with a tamper-evident response cache
"""

from .version import __version__
from .crypto.ed25519 import (
    Ed25519KeyPair,
    generate_key_pair,
    parse_public_key,
    sign_message,
    verify_signature,
)
from .exceptions import (
    KeygenVerifierError,
    ValidationError,
    ConfigurationError,
    CacheIntegrityError,
    PayloadError,
    APIError,
    ServerCommunicationError,
)
from .signing import (
    Digest,
    DigestAlgorithm,
    SigningComponents,
    SignatureEnvelope,
    calculate_digest,
    CanonicalStringBuilder,
    build_canonical_string,
)
from .verification import (
    VerifiableResponse,
    ResponseParameters,
    VerificationError,
    VerificationErrorCodes,
    ResponseSignatureVerifier,
    create_verifier,
    parse_signature_header,
    extract_response_parameters,
)
from .cache import (
    CacheRecord,
    TamperEvidentCache,
)
from .config import (
    VerifierConfig,
    load_config_from_dict,
    load_config_from_json,
    load_config_from_file,
    load_config_from_env,
)
from .payload import VerifiedPayload
from .http_client import (
    KeygenHttpClient,
    create_client,
)
from .validator import (
    LicenseValidator,
    ValidationResult,
    FailureKind,
    ResultSource,
    validate_license,
)

__all__ = [
    '__version__',
    # Ed25519 primitives
    'Ed25519KeyPair',
    'generate_key_pair',
    'parse_public_key',
    'sign_message',
    'verify_signature',
    # Exceptions
    'KeygenVerifierError',
    'ValidationError',
    'ConfigurationError',
    'CacheIntegrityError',
    'PayloadError',
    'APIError',
    'ServerCommunicationError',
    # Signing protocol
    'Digest',
    'DigestAlgorithm',
    'SigningComponents',
    'SignatureEnvelope',
    'calculate_digest',
    'CanonicalStringBuilder',
    'build_canonical_string',
    # Verification
    'VerifiableResponse',
    'ResponseParameters',
    'VerificationError',
    'VerificationErrorCodes',
    'ResponseSignatureVerifier',
    'create_verifier',
    'parse_signature_header',
    'extract_response_parameters',
    # Cache
    'CacheRecord',
    'TamperEvidentCache',
    # Configuration
    'VerifierConfig',
    'load_config_from_dict',
    'load_config_from_json',
    'load_config_from_file',
    'load_config_from_env',
    # Validation
    'VerifiedPayload',
    'KeygenHttpClient',
    'create_client',
    'LicenseValidator',
    'ValidationResult',
    'FailureKind',
    'ResultSource',
    'validate_license',
]
