"""
Configuration management for Keygen Verifier
"""

from .verifier_config import (
    VerifierConfig,
    DEFAULT_PUBLIC_KEY,
    DEFAULT_ACCOUNT_ID,
    DEFAULT_HOST,
    DEFAULT_CACHE_DIR,
    DEFAULT_TIMEOUT,
    ENV_VARIABLES,
    load_config_from_dict,
    load_config_from_json,
    load_config_from_file,
    load_config_from_env,
)

__all__ = [
    'VerifierConfig',
    'DEFAULT_PUBLIC_KEY',
    'DEFAULT_ACCOUNT_ID',
    'DEFAULT_HOST',
    'DEFAULT_CACHE_DIR',
    'DEFAULT_TIMEOUT',
    'ENV_VARIABLES',
    'load_config_from_dict',
    'load_config_from_json',
    'load_config_from_file',
    'load_config_from_env',
]
