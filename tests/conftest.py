"""
Shared fixtures for Keygen Verifier tests
"""

import base64
import json

import pytest

from keygen_verifier.crypto.ed25519 import generate_key_pair, sign_message
from keygen_verifier.signing.canonical_string import build_canonical_string
from keygen_verifier.signing.digest import calculate_digest
from keygen_verifier.signing.types import SigningComponents
from keygen_verifier.verification.types import VerifiableResponse
from keygen_verifier.verification.verifier import ResponseSignatureVerifier
from keygen_verifier.config import VerifierConfig

TEST_HOST = "api.keygen.sh"
TEST_ACCOUNT = "ACME"
TEST_PATH = f"/v1/accounts/{TEST_ACCOUNT}/licenses/actions/validate-key"
TEST_DATE = "Tue, 01 Jan 2030 00:00:00 GMT"

VALID_PAYLOAD = {
    "meta": {
        "valid": True,
        "detail": "is valid",
        "constant": "VALID",
    },
    "data": {
        "id": "3a2f1c0e-6b7d-4e1a-9c55-0f5b6d7e8a91",
        "type": "licenses",
    },
}


def sign_response(
    private_key,
    body,
    method="POST",
    path=TEST_PATH,
    host=TEST_HOST,
    date=TEST_DATE,
    status=200,
    extra_headers=None,
):
    """Build a response signed the way the issuer signs it"""
    if isinstance(body, dict):
        body = json.dumps(body).encode("utf-8")
    
    digest = calculate_digest(body)
    components = SigningComponents(
        method=method,
        path=path,
        host=host,
        date=date,
        digest_header=digest.header_value,
    )
    signature = sign_message(private_key, build_canonical_string(components))
    signature_b64 = base64.b64encode(signature).decode("ascii")
    
    headers = {
        "Date": date,
        "Digest": digest.header_value,
        "Keygen-Signature": (
            f'keyid="{TEST_ACCOUNT}", algorithm="ed25519", '
            f'signature="{signature_b64}", headers="(request-target) host date digest"'
        ),
        "Content-Type": "application/vnd.api+json",
    }
    if extra_headers:
        headers.update(extra_headers)
    
    return VerifiableResponse(status=status, headers=headers, body=body, method=method, path=path)


@pytest.fixture
def key_pair():
    return generate_key_pair()


@pytest.fixture
def other_key_pair():
    return generate_key_pair()


@pytest.fixture
def verifier(key_pair):
    return ResponseSignatureVerifier(key_pair.public_key, TEST_HOST)


@pytest.fixture
def config(key_pair, tmp_path):
    return VerifierConfig(
        account_id=TEST_ACCOUNT,
        public_key=key_pair.public_key.hex(),
        host=TEST_HOST,
        cache_dir=str(tmp_path / "cache"),
    )


@pytest.fixture
def signed_response(key_pair):
    return sign_response(key_pair.private_key, VALID_PAYLOAD)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep KEYGEN_* variables from the host environment out of tests"""
    for name in (
        "KEYGEN_ACCOUNT_ID",
        "KEYGEN_PUBLIC_KEY",
        "KEYGEN_HOST",
        "KEYGEN_API_URL",
        "KEYGEN_CACHE_DIR",
        "KEYGEN_TIMEOUT",
        "KEYGEN_LICENSE_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
