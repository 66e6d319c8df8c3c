"""
Verified license validation payload

A thin accessor layer over the JSON document returned by the validate-key
action. Only the fields needed to decide success or failure are interpreted;
the full document stays available through ``data``.
"""

import json
from typing import Any, Dict, List, Optional, Union

from .exceptions import PayloadError


class VerifiedPayload:
    """
    Parsed payload of a response whose signature has been verified
    """
    
    def __init__(self, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise PayloadError(
                f"Payload must be a JSON object, got {type(data).__name__}",
                "INVALID_PAYLOAD_TYPE"
            )
        
        errors = data.get('errors')
        if errors is not None and not isinstance(errors, list):
            raise PayloadError("Payload 'errors' member must be a list", "INVALID_ERRORS_TYPE")
        
        meta = data.get('meta')
        if meta is not None and not isinstance(meta, dict):
            raise PayloadError("Payload 'meta' member must be an object", "INVALID_META_TYPE")
        
        self.data = data
    
    @classmethod
    def from_body(cls, body: Union[str, bytes]) -> 'VerifiedPayload':
        """
        Parse a payload from a raw response body.
        
        Raises:
            PayloadError: If the body is not a JSON object
        """
        try:
            data = json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            raise PayloadError(f"Payload is not valid JSON: {e}", "INVALID_JSON")
        return cls(data)
    
    @property
    def errors(self) -> List[Any]:
        return self.data.get('errors') or []
    
    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
    
    @property
    def meta(self) -> Dict[str, Any]:
        return self.data.get('meta') or {}
    
    @property
    def is_valid(self) -> bool:
        """Whether the issuer reported the license as valid"""
        return self.meta.get('valid') is True
    
    @property
    def detail(self) -> Optional[str]:
        return self.meta.get('detail')
    
    @property
    def code(self) -> Optional[str]:
        """Validation code, e.g. ``VALID`` or ``EXPIRED``"""
        return self.meta.get('constant') or self.meta.get('code')
    
    def to_dict(self) -> Dict[str, Any]:
        return self.data
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VerifiedPayload):
            return NotImplemented
        return self.data == other.data
    
    def __repr__(self) -> str:
        return f"VerifiedPayload(valid={self.is_valid!r}, code={self.code!r})"
