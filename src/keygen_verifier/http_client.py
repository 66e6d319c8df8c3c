"""
HTTP client for the Keygen licensing API

This module issues license validation requests and hands the raw response
(status, headers, exact body bytes, and the request as issued) to the
verification layer. It does not interpret or trust the response itself.
"""

import json
import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter

from .config import VerifierConfig
from .exceptions import ServerCommunicationError, ValidationError
from .verification.types import VerifiableResponse
from .version import __version__

logger = logging.getLogger(__name__)

JSON_API_MEDIA_TYPE = "application/vnd.api+json"


class KeygenHttpClient:
    """
    HTTP client for communicating with the Keygen API.
    
    Requests are sent once, without retries, and redirects are not followed:
    the signature covers the path that was requested.
    """
    
    def __init__(self, config: VerifierConfig, session: Optional[requests.Session] = None):
        """
        Initialize the HTTP client.
        
        Args:
            config: Verifier configuration
            session: Pre-built session (optional)
        """
        self.config = config
        self.session = session if session is not None else self._create_session()
        
        logger.debug(f"Initialized Keygen HTTP client for server: {config.base_url}")
    
    def _create_session(self) -> requests.Session:
        """Create HTTP session without automatic retries."""
        session = requests.Session()
        
        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        
        # Set default headers
        session.headers.update({
            'Content-Type': JSON_API_MEDIA_TYPE,
            'Accept': JSON_API_MEDIA_TYPE,
            'User-Agent': f'Keygen-Verifier-Python/{__version__}'
        })
        
        return session
    
    def request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> VerifiableResponse:
        """
        Send a request and capture the raw response.
        
        Args:
            method: HTTP method
            path: Absolute request path, including any query string
            payload: JSON body (optional)
            
        Returns:
            VerifiableResponse: Raw response for verification
            
        Raises:
            ServerCommunicationError: On network errors
        """
        # base_url may carry a path prefix, e.g. behind a proxy
        url = self.config.base_url.rstrip('/') + path
        data = json.dumps(payload) if payload is not None else None
        
        try:
            logger.debug(f"Making {method} request to {url}")
            response = self.session.request(
                method,
                url,
                data=data,
                headers={
                    'Content-Type': JSON_API_MEDIA_TYPE,
                    'Accept': JSON_API_MEDIA_TYPE,
                },
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
                allow_redirects=False,
            )
        except requests.exceptions.Timeout:
            raise ServerCommunicationError(
                f"Request timeout after {self.config.timeout} seconds",
                "TIMEOUT"
            )
        except requests.exceptions.ConnectionError as e:
            raise ServerCommunicationError(f"Connection error: {e}", "CONNECTION_ERROR")
        except requests.exceptions.RequestException as e:
            raise ServerCommunicationError(f"Request failed: {e}", "REQUEST_FAILED")
        
        logger.debug(f"Received HTTP {response.status_code} from {url}")
        
        try:
            return VerifiableResponse(
                status=response.status_code,
                headers=dict(response.headers),
                body=response.content,
                method=method,
                path=path,
            )
        except ValueError as e:
            raise ServerCommunicationError(
                f"Unusable response: {e}",
                "INVALID_RESPONSE",
                http_status=response.status_code
            )
    
    def validate_key(self, license_key: str) -> VerifiableResponse:
        """
        Request validation of a license key.
        
        Args:
            license_key: License key to validate
            
        Returns:
            VerifiableResponse: Raw, unverified response
            
        Raises:
            ValidationError: If the license key is empty
            ServerCommunicationError: On network errors
        """
        if not license_key:
            raise ValidationError("license_key cannot be empty", "INVALID_LICENSE_KEY")
        
        return self.request(
            'POST',
            self.config.validate_key_path,
            {'meta': {'key': license_key}},
        )
    
    def close(self):
        """Close the HTTP session."""
        self.session.close()
        logger.debug("HTTP session closed")
    
    def __enter__(self) -> 'KeygenHttpClient':
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_client(config: Optional[VerifierConfig] = None) -> KeygenHttpClient:
    """
    Create a Keygen HTTP client.
    
    Args:
        config: Verifier configuration (default: built-in defaults)
        
    Returns:
        KeygenHttpClient: Configured HTTP client
    """
    return KeygenHttpClient(config or VerifierConfig())
