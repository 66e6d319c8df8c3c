"""
Tamper-evident cache for verified responses
"""

from .storage import (
    CacheRecord,
    TamperEvidentCache,
    DEFAULT_CACHE_DIR,
    CACHE_FILE_EXTENSION,
    CACHE_FILE_PERMISSIONS,
)

__all__ = [
    'CacheRecord',
    'TamperEvidentCache',
    'DEFAULT_CACHE_DIR',
    'CACHE_FILE_EXTENSION',
    'CACHE_FILE_PERMISSIONS',
]
