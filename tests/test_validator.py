"""
End-to-end tests for the license validation orchestrator
"""

import json
from unittest.mock import Mock

import pytest

from keygen_verifier.validator import (
    LicenseValidator,
    ValidationResult,
    FailureKind,
    ResultSource,
    VALIDATE_CACHE_KEY,
)
from keygen_verifier.cache import TamperEvidentCache
from keygen_verifier.exceptions import (
    APIError,
    CacheIntegrityError,
    PayloadError,
    ServerCommunicationError,
)
from keygen_verifier.http_client import KeygenHttpClient
from keygen_verifier.payload import VerifiedPayload
from keygen_verifier.verification.types import VerificationError

from conftest import VALID_PAYLOAD, sign_response

LICENSE_KEY = "C1B6DE-39A6E3-DE1529-8559A0-4AF593-V3"


@pytest.fixture
def client():
    return Mock(spec=KeygenHttpClient)


@pytest.fixture
def validator(config, client):
    return LicenseValidator(config, client=client)


def cache_path(validator):
    return validator.cache.path_for(VALIDATE_CACHE_KEY)


class TestValidSignedResponse:
    """Scenario: a valid signed response"""
    
    def test_returns_payload_and_writes_cache(self, validator, client, signed_response):
        client.validate_key.return_value = signed_response
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.ok is True
        assert result.source == ResultSource.NETWORK
        assert result.payload.to_dict() == VALID_PAYLOAD
        assert result.payload.is_valid is True
        assert result.payload.detail == "is valid"
        assert result.payload.code == "VALID"
        client.validate_key.assert_called_once_with(LICENSE_KEY)
        assert cache_path(validator).exists()
    
    def test_second_call_served_from_cache(self, validator, client, signed_response):
        client.validate_key.return_value = signed_response
        validator.validate(LICENSE_KEY)
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.ok is True
        assert result.source == ResultSource.CACHE
        assert result.payload.to_dict() == VALID_PAYLOAD
        assert client.validate_key.call_count == 1
    
    def test_cache_shared_across_validators(self, config, signed_response):
        first_client = Mock(spec=KeygenHttpClient)
        first_client.validate_key.return_value = signed_response
        LicenseValidator(config, client=first_client).validate(LICENSE_KEY)
        
        second_client = Mock(spec=KeygenHttpClient)
        result = LicenseValidator(config, client=second_client).validate(LICENSE_KEY)
        
        assert result.source == ResultSource.CACHE
        second_client.validate_key.assert_not_called()
    
    def test_no_cache(self, validator, client, signed_response):
        client.validate_key.return_value = signed_response
        
        result = validator.validate(LICENSE_KEY, use_cache=False)
        
        assert result.ok is True
        assert result.source == ResultSource.NETWORK
        assert not cache_path(validator).exists()
    
    def test_invalid_license_is_not_a_failure(self, validator, client, key_pair):
        """Test that a signed 'invalid' verdict is a successful validation"""
        body = {"meta": {"valid": False, "detail": "is suspended", "constant": "SUSPENDED"}}
        client.validate_key.return_value = sign_response(key_pair.private_key, body)
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.ok is True
        assert result.payload.is_valid is False
        assert result.payload.code == "SUSPENDED"


class TestSignatureFailures:
    """Scenario: missing or garbled signature"""
    
    def test_missing_signature_header(self, validator, client, signed_response):
        del signed_response.headers["Keygen-Signature"]
        client.validate_key.return_value = signed_response
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.ok is False
        assert result.failure == FailureKind.SIGNATURE_INVALID
        assert result.payload is None
        assert result.details["code"] == "MISSING_SIGNATURE"
        assert not cache_path(validator).exists()
    
    def test_garbled_signature_header(self, validator, client, signed_response):
        signed_response.headers["Keygen-Signature"] = "signature=???"
        client.validate_key.return_value = signed_response
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.failure == FailureKind.SIGNATURE_INVALID
        assert not cache_path(validator).exists()
    
    def test_forged_signature(self, validator, client, other_key_pair):
        client.validate_key.return_value = sign_response(other_key_pair.private_key, VALID_PAYLOAD)
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.failure == FailureKind.SIGNATURE_INVALID
        assert result.http_status == 200
        assert not cache_path(validator).exists()
    
    def test_raise_for_failure(self, validator, client, signed_response):
        del signed_response.headers["Keygen-Signature"]
        client.validate_key.return_value = signed_response
        
        with pytest.raises(VerificationError):
            validator.validate(LICENSE_KEY).raise_for_failure()


class TestApiErrors:
    """Scenario: authentically signed API error"""
    
    def test_error_list_is_fatal(self, validator, client, key_pair):
        errors = [{"title": "Bad request", "detail": "is missing", "source": {"pointer": "/meta/key"}}]
        client.validate_key.return_value = sign_response(key_pair.private_key, {"errors": errors}, status=400)
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.failure == FailureKind.API_ERROR
        assert result.http_status == 400
        assert result.details["errors"] == errors
        assert not cache_path(validator).exists()
        
        with pytest.raises(APIError) as exc_info:
            result.raise_for_failure()
        assert exc_info.value.errors == errors
        assert exc_info.value.http_status == 400
    
    def test_empty_error_list_is_not_fatal(self, validator, client, key_pair):
        body = dict(VALID_PAYLOAD, errors=[])
        client.validate_key.return_value = sign_response(key_pair.private_key, body)
        
        assert validator.validate(LICENSE_KEY).ok is True
    
    def test_malformed_signed_payload(self, validator, client, key_pair):
        client.validate_key.return_value = sign_response(key_pair.private_key, b"<html></html>")
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.failure == FailureKind.MALFORMED_PAYLOAD
        with pytest.raises(PayloadError):
            result.raise_for_failure()


class TestTransportFailures:
    """Scenario: the request never produced a response"""
    
    def test_transport_error(self, validator, client):
        client.validate_key.side_effect = ServerCommunicationError("Connection error: refused", "CONNECTION_ERROR")
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.failure == FailureKind.TRANSPORT_ERROR
        assert result.details["code"] == "CONNECTION_ERROR"
        with pytest.raises(ServerCommunicationError):
            result.raise_for_failure()


class TestTamperedCache:
    """Scenario: cache file edited between runs"""
    
    def test_edited_body_is_fatal(self, validator, client, signed_response):
        client.validate_key.return_value = signed_response
        validator.validate(LICENSE_KEY)
        
        path = cache_path(validator)
        record = json.loads(path.read_text(encoding="utf-8"))
        record["body"] = record["body"].replace("true", "false")
        path.write_text(json.dumps(record), encoding="utf-8")
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.ok is False
        assert result.failure == FailureKind.CACHE_INTEGRITY
        assert result.payload is None
        assert client.validate_key.call_count == 1
        
        with pytest.raises(CacheIntegrityError) as exc_info:
            result.raise_for_failure()
        assert exc_info.value.key == VALIDATE_CACHE_KEY

    def test_method_case_edit_is_fatal(self, validator, client, signed_response):
        """Test that upper-casing the cached method is caught as tampering"""
        client.validate_key.return_value = signed_response
        validator.validate(LICENSE_KEY)

        path = cache_path(validator)
        record = json.loads(path.read_text(encoding="utf-8"))
        record["target"] = "POST" + record["target"][4:]
        path.write_text(json.dumps(record), encoding="utf-8")

        result = validator.validate(LICENSE_KEY)

        assert result.failure == FailureKind.CACHE_INTEGRITY
        assert result.payload is None
        assert client.validate_key.call_count == 1

    def test_unparseable_cache_falls_back_to_network(self, validator, client, signed_response):
        client.validate_key.return_value = signed_response
        path = cache_path(validator)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{truncated", encoding="utf-8")
        
        result = validator.validate(LICENSE_KEY)
        
        assert result.ok is True
        assert result.source == ResultSource.NETWORK
        assert json.loads(path.read_text(encoding="utf-8"))["target"].startswith("post ")
    
    def test_no_cache_bypasses_tampered_record(self, validator, client, signed_response):
        client.validate_key.return_value = signed_response
        validator.validate(LICENSE_KEY)
        path = cache_path(validator)
        record = json.loads(path.read_text(encoding="utf-8"))
        record["date"] = "Thu, 01 Jan 2099 00:00:00 GMT"
        path.write_text(json.dumps(record), encoding="utf-8")
        
        result = validator.validate(LICENSE_KEY, use_cache=False)
        
        assert result.ok is True
        assert result.source == ResultSource.NETWORK


class TestValidationResult:
    """Test cases for ValidationResult"""
    
    def test_success(self):
        payload = VerifiedPayload(VALID_PAYLOAD)
        result = ValidationResult.success(payload, ResultSource.CACHE)
        
        assert result.ok is True
        assert result.raise_for_failure() is payload
    
    def test_fatal(self):
        result = ValidationResult.fatal(FailureKind.API_ERROR, "An API error occurred!", http_status=422)
        
        assert result.ok is False
        assert result.payload is None
        assert result.details == {}


class TestCollaborators:
    """Test default wiring"""
    
    def test_builds_cache_in_configured_directory(self, config, client):
        validator = LicenseValidator(config, client=client)
        
        assert isinstance(validator.cache, TamperEvidentCache)
        assert str(validator.cache.cache_dir) == config.cache_dir
        assert validator.verifier.host == config.host
    
    def test_close_closes_client(self, validator, client):
        validator.close()
        
        client.close.assert_called_once()
