"""
Canonical signing string construction

The issuer signs a four-line string built from the request target, host,
date and body digest. Verification only succeeds when the exact same bytes
are rebuilt here, so field order, header-name case, separators and the
absence of a trailing newline are all fixed.
"""

from .types import SigningComponents

SIGNED_HEADERS = ("(request-target)", "host", "date", "digest")


class CanonicalStringBuilder:
    """
    Builder for the signing string of a response
    """
    
    def __init__(self, components: SigningComponents):
        """
        Initialize canonical string builder.
        
        Args:
            components: Signing components of the response
        """
        self.components = components
    
    def build(self) -> str:
        """
        Build the canonical string.
        
        Returns:
            str: Newline-joined signing string with no trailing newline
        """
        values = (
            self.components.request_target,
            self.components.host,
            self.components.date,
            self.components.digest_header,
        )
        return '\n'.join(f"{name}: {value}" for name, value in zip(SIGNED_HEADERS, values))
    
    def build_bytes(self) -> bytes:
        """Build the canonical string as the UTF-8 bytes that were signed"""
        return self.build().encode('utf-8')


def build_canonical_string(components: SigningComponents) -> str:
    """
    Build the canonical signing string for the given components.
    
    Args:
        components: Signing components
        
    Returns:
        str: Canonical signing string
    """
    return CanonicalStringBuilder(components).build()
