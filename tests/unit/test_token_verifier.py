from datetime import timedelta

import jwt

from chitchat.auth.token_verifier import TokenVerifier
from chitchat.utils.settings.core import AuthSettings


def test_issued_token_round_trips_user_id(verifier):
    token = verifier.issue("u1")

    assert verifier.verify(token) == "u1"


def test_missing_token_is_unauthenticated(verifier):
    assert verifier.verify(None) is None
    assert verifier.verify("") is None


def test_malformed_token_is_unauthenticated(verifier):
    assert verifier.verify("not-a-jwt") is None


def test_wrong_signature_is_unauthenticated(verifier):
    other = TokenVerifier(secret="someone-else")

    assert verifier.verify(other.issue("u1")) is None


def test_expired_token_is_unauthenticated(verifier):
    token = verifier.issue("u1", expires_in=timedelta(seconds=-5))

    assert verifier.verify(token) is None


def test_token_without_user_claim_is_unauthenticated(verifier):
    token = jwt.encode({"role": "admin"}, verifier.secret, algorithm="HS256")

    assert verifier.verify(token) is None


def test_sub_claim_is_accepted(verifier):
    token = jwt.encode({"sub": "u7"}, verifier.secret, algorithm="HS256")

    assert verifier.verify(token) == "u7"


def test_authorization_header_parsing(verifier):
    token = verifier.issue("u1")

    assert verifier.token_from_header(f"Bearer {token}") == token
    assert verifier.token_from_header(f"bearer {token}") == token
    assert verifier.verify(verifier.token_from_header(f"Bearer {token}")) == "u1"
    assert verifier.token_from_header(token) is None
    assert verifier.token_from_header("Basic abc") is None
    assert verifier.token_from_header("Bearer") is None
    assert verifier.token_from_header(None) is None


def test_from_settings_uses_configured_secret():
    settings = AuthSettings(jwt_secret="configured", token_ttl_days=1)
    verifier = TokenVerifier.from_settings(settings)

    assert verifier.token_ttl == timedelta(days=1)
    decoded = jwt.decode(verifier.issue("u1"), "configured", algorithms=["HS256"])
    assert decoded["id"] == "u1"
