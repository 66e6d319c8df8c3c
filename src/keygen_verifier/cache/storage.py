"""
Tamper-evident response cache for Keygen Verifier

This module persists verified responses as JSON files and re-verifies each
record against the issuer's signature every time it is read. A record that
no longer verifies is treated as an integrity violation, never as a miss.
"""

import os
import json
import logging
import platform
import tempfile
from typing import List, Optional
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from ..exceptions import CacheIntegrityError, ValidationError
from ..payload import VerifiedPayload
from ..verification.types import ResponseParameters
from ..verification.verifier import ResponseSignatureVerifier

logger = logging.getLogger(__name__)

# Constants
DEFAULT_CACHE_DIR = "cache"
CACHE_FILE_EXTENSION = ".json"
CACHE_FILE_PERMISSIONS = 0o600  # Owner read/write only


def is_valid_cache_key(key: str) -> bool:
    """Check that a key is usable verbatim as a cache file name"""
    if not key or key.startswith("."):
        return False
    return all(c.isalnum() or c in "-_." for c in key)


@dataclass(frozen=True)
class CacheRecord:
    """
    Persisted form of a verified response
    
    Attributes:
        date: Date header the issuer signed
        target: Request target, ``"{method} {path}"``
        signature: Base64-encoded issuer signature
        body: Response body as UTF-8 text
    """
    date: str
    target: str
    signature: str
    body: str
    
    @classmethod
    def from_parameters(cls, params: ResponseParameters) -> 'CacheRecord':
        """
        Build a record from verified response parameters.
        
        Raises:
            UnicodeDecodeError: If the body is not UTF-8 text
        """
        return cls(
            date=params.date,
            target=params.target,
            signature=params.signature,
            body=params.body.decode('utf-8'),
        )
    
    @classmethod
    def from_json(cls, text: str) -> 'CacheRecord':
        """
        Parse a record from its JSON file contents.
        
        Raises:
            ValueError: If the text is not a JSON object with exactly the
                record's string fields
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Cache record must be a JSON object")
        
        names = {f.name for f in fields(cls)}
        if set(data) != names:
            raise ValueError(f"Cache record keys must be {sorted(names)}, got {sorted(data)}")
        
        for name in names:
            if not isinstance(data[name], str):
                raise ValueError(f"Cache record field '{name}' must be a string")
        
        return cls(**data)
    
    def to_json(self) -> str:
        return json.dumps(asdict(self))
    
    @property
    def body_bytes(self) -> bytes:
        return self.body.encode('utf-8')


class TamperEvidentCache:
    """
    File cache of verified responses keyed by operation name
    
    Each key maps to one JSON file holding a ``CacheRecord``. Writes are not
    verified (callers only write verified data); reads always are. The cache
    assumes a single process and takes no locks.
    """
    
    def __init__(self, verifier: ResponseSignatureVerifier, cache_dir: Optional[str] = None):
        """
        Initialize the cache
        
        Args:
            verifier: Verifier used to re-check records on read
            cache_dir: Directory holding cache files (default: ./cache)
        """
        self.verifier = verifier
        self.cache_dir = Path(cache_dir) if cache_dir else Path(DEFAULT_CACHE_DIR)
    
    def _ensure_cache_dir(self) -> None:
        """Ensure cache directory exists, created owner-only"""
        self.cache_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    
    def path_for(self, key: str) -> Path:
        """
        Get file path for a cache key
        
        Keys are used as file names unchanged, so distinct keys never share
        a file.
        
        Raises:
            ValidationError: If the key is empty or not filesystem-safe
        """
        if not is_valid_cache_key(key):
            raise ValidationError(f"Invalid cache key: {key!r}", "INVALID_CACHE_KEY")
        return self.cache_dir / f"{key}{CACHE_FILE_EXTENSION}"
    
    def read_record(self, key: str) -> Optional[CacheRecord]:
        """
        Read the raw record for ``key`` without verifying it.
        
        Returns:
            CacheRecord or None: None if missing, unreadable or malformed
        """
        path = self.path_for(key)
        
        try:
            text = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            logger.info(f"Cache miss: key={key}")
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cache unreadable: key={key} error={e}")
            return None
        
        try:
            return CacheRecord.from_json(text)
        except ValueError as e:
            logger.info(f"Cache invalid: key={key} error={e}")
            return None
    
    def get(self, key: str) -> Optional[VerifiedPayload]:
        """
        Get the verified payload cached at ``key``.
        
        Args:
            key: Cache key (operation name)
            
        Returns:
            VerifiedPayload or None: None on a miss or an unparseable record
            
        Raises:
            CacheIntegrityError: If the record fails signature verification
            PayloadError: If the verified body is not a well-formed payload
        """
        record = self.read_record(key)
        if record is None:
            return None
        
        logger.info(f"Cache hit: key={key}")
        
        ok = self.verifier.verify_signed_data(
            record.target,
            record.date,
            record.body_bytes,
            record.signature,
        )
        if not ok:
            logger.error(f"Invalid cache signature! It has likely been tampered with: key={key}")
            raise CacheIntegrityError(
                f"Cached record '{key}' failed signature verification",
                key,
                {'path': str(self.path_for(key)), 'target': record.target, 'date': record.date}
            )
        
        return VerifiedPayload.from_body(record.body)
    
    def put(self, key: str, params: ResponseParameters) -> bool:
        """
        Overwrite the record at ``key`` with verified response parameters.
        
        Writing is best-effort: failures are logged and reported through the
        return value only.
        
        Args:
            key: Cache key (operation name)
            params: Parameters of a response that has already been verified
            
        Returns:
            bool: True if the record was written
        """
        try:
            record = CacheRecord.from_parameters(params)
        except UnicodeDecodeError as e:
            logger.warning(f"Cache write skipped, body is not UTF-8: key={key} error={e}")
            return False
        
        try:
            path = self.path_for(key)
            self._ensure_cache_dir()
            self._write_atomic(path, record.to_json())
        except (OSError, ValidationError) as e:
            logger.warning(f"Cache write failed: key={key} error={e}")
            return False
        
        logger.info(f"Cache write: key={key}")
        return True
    
    def _write_atomic(self, path: Path, text: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                fh.write(text)
            if platform.system() != "Windows":
                os.chmod(tmp_name, CACHE_FILE_PERMISSIONS)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    
    def delete(self, key: str) -> bool:
        """
        Delete the record at ``key``.
        
        Returns:
            bool: True if a record was removed
        """
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info(f"Cache delete: key={key}")
        return True
    
    def keys(self) -> List[str]:
        """List cache keys that have a record on disk"""
        if not self.cache_dir.is_dir():
            return []
        return sorted(
            p.stem for p in self.cache_dir.glob(f"*{CACHE_FILE_EXTENSION}")
            if p.is_file() and is_valid_cache_key(p.stem)
        )
    
    def clear(self) -> int:
        """
        Delete every record in the cache directory.
        
        Returns:
            int: Number of records removed
        """
        removed = 0
        for key in self.keys():
            if self.delete(key):
                removed += 1
        return removed
