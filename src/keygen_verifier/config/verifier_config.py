"""
Configuration management for Keygen Verifier

Provides the verifier configuration, its embedded trust-anchor defaults, and
loaders for JSON documents, files and environment variables.
"""

import os
import json
from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass, fields, replace
from pathlib import Path
from urllib.parse import urlparse

from ..exceptions import ConfigurationError
from ..cache.storage import DEFAULT_CACHE_DIR

# Embedded trust anchor for the default issuer
DEFAULT_PUBLIC_KEY = "e8601e48b69383ba520245fd07971e983d06d22c4257cfd82304601479cee788"
DEFAULT_ACCOUNT_ID = "1fddcec8-8dd3-4d8d-9b16-215cac0f9b52"
DEFAULT_HOST = "api.keygen.sh"
DEFAULT_TIMEOUT = 30.0

ENV_VARIABLES = {
    'account_id': 'KEYGEN_ACCOUNT_ID',
    'public_key': 'KEYGEN_PUBLIC_KEY',
    'host': 'KEYGEN_HOST',
    'base_url': 'KEYGEN_API_URL',
    'cache_dir': 'KEYGEN_CACHE_DIR',
    'timeout': 'KEYGEN_TIMEOUT',
}


@dataclass(frozen=True)
class VerifierConfig:
    """
    Verifier configuration
    
    Attributes:
        account_id: Issuer account whose licenses are validated
        public_key: Hex-encoded Ed25519 public key of the issuer
        host: Issuer host, used verbatim in the signing string
        base_url: API base URL (default: https://{host})
        cache_dir: Directory for cached responses
        timeout: Request timeout in seconds
        verify_ssl: Whether to verify TLS certificates
    """
    account_id: str = DEFAULT_ACCOUNT_ID
    public_key: str = DEFAULT_PUBLIC_KEY
    host: str = DEFAULT_HOST
    base_url: Optional[str] = None
    cache_dir: str = DEFAULT_CACHE_DIR
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    
    def __post_init__(self):
        """Validate configuration and derive base URL"""
        if not self.account_id:
            raise ConfigurationError("account_id cannot be empty", "INVALID_ACCOUNT_ID")
        
        if not self.host:
            raise ConfigurationError("host cannot be empty", "INVALID_HOST")
        
        if not self.public_key:
            raise ConfigurationError("public_key cannot be empty", "INVALID_PUBLIC_KEY")
        
        if self.base_url is None:
            object.__setattr__(self, 'base_url', f"https://{self.host}")
        
        parsed = urlparse(self.base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError(f"Invalid API URL format: {self.base_url}", "INVALID_BASE_URL")
        
        try:
            timeout = float(self.timeout)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Timeout must be a number: {self.timeout!r}", "INVALID_TIMEOUT")
        if timeout <= 0:
            raise ConfigurationError("Timeout must be positive", "INVALID_TIMEOUT")
        object.__setattr__(self, 'timeout', timeout)
    
    @property
    def validate_key_path(self) -> str:
        """Path of the validate-key action for the configured account"""
        return f"/v1/accounts/{self.account_id}/licenses/actions/validate-key"
    
    def with_overrides(self, **overrides: Any) -> 'VerifierConfig':
        """Return a copy with every non-None override applied"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        # base_url follows a changed host unless it was set explicitly
        if 'host' in changes and 'base_url' not in changes and self.base_url == f"https://{self.host}":
            changes['base_url'] = None
        return replace(self, **changes)
    
    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config_from_dict(data: Mapping[str, Any]) -> VerifierConfig:
    """
    Create configuration from a mapping.
    
    Raises:
        ConfigurationError: If unknown keys are present or values are invalid
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError("Configuration must be an object", "INVALID_CONFIG_FORMAT")
    
    known = {f.name for f in fields(VerifierConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            "UNKNOWN_CONFIG_KEYS"
        )
    
    return VerifierConfig(**dict(data))


def load_config_from_json(json_text: str) -> VerifierConfig:
    """
    Load configuration from JSON text.
    
    Raises:
        ConfigurationError: If the JSON is invalid
    """
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration JSON: {e}", "INVALID_JSON")
    
    return load_config_from_dict(data)


def load_config_from_file(path: str) -> VerifierConfig:
    """
    Load configuration from a JSON file.
    
    Raises:
        ConfigurationError: If the file cannot be read or is invalid
    """
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {config_path}: {e}", "CONFIG_READ_FAILED")
    
    return load_config_from_json(text)


def load_config_from_env(
    environ: Optional[Mapping[str, str]] = None,
    base: Optional[VerifierConfig] = None
) -> VerifierConfig:
    """
    Apply ``KEYGEN_*`` environment variables on top of a base configuration.
    
    Args:
        environ: Environment mapping (default: os.environ)
        base: Configuration to override (default: built-in defaults)
        
    Returns:
        VerifierConfig: Resulting configuration
    """
    if environ is None:
        environ = os.environ
    if base is None:
        base = VerifierConfig()
    
    overrides = {
        name: environ[variable]
        for name, variable in ENV_VARIABLES.items()
        if environ.get(variable)
    }
    
    return base.with_overrides(**overrides)
