"""
Plant API — Token Service Unit Tests
=====================================

What we test:
    ✅ verify(issue(claims)) returns {id, username}
    ✅ Expired, tampered and foreign-secret tokens are rejected
    ✅ Tokens without identity claims are rejected
    ✅ An unconfigured secret fails loudly
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from plant_api.exceptions import TokenVerificationError
from plant_api.services.token_service import TokenService

SECRET = "unit-test-secret-0123456789abcdef0123"


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


class TestTokenRoundTrip:

    def setup_method(self):
        self.tokens = TokenService(SECRET)

    def test_issue_then_verify(self):
        token = self.tokens.issue({"id": 7, "username": "fern"})
        assert self.tokens.verify(token) == {"id": 7, "username": "fern"}

    def test_extra_claims_are_dropped(self):
        token = self.tokens.issue({"id": 7, "username": "fern", "role": "admin"})
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert "role" not in payload

    def test_expiry_is_one_hour_after_issue(self):
        token = self.tokens.issue({"id": 1, "username": "ivy"})
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["exp"] - payload["iat"] == 3600


class TestTokenRejection:

    def setup_method(self):
        self.tokens = TokenService(SECRET)

    def test_expired_token(self):
        two_hours_ago = datetime.now(timezone.utc) - timedelta(hours=2)
        token = self.tokens.issue({"id": 7, "username": "fern"}, issued_at=two_hours_ago)
        with pytest.raises(TokenVerificationError) as exc_info:
            self.tokens.verify(token)
        assert exc_info.value.context["reason"] == "expired"

    def test_tampered_payload(self):
        token = self.tokens.issue({"id": 7, "username": "fern"})
        header, payload, signature = token.split(".")
        claims = jwt.decode(token, SECRET, algorithms=["HS256"])
        claims["id"] = 1
        forged = ".".join([header, _b64(claims), signature])
        with pytest.raises(TokenVerificationError):
            self.tokens.verify(forged)

    def test_signed_with_another_secret(self):
        other = TokenService("some-other-secret-0123456789abcdef")
        token = other.issue({"id": 7, "username": "fern"})
        with pytest.raises(TokenVerificationError):
            self.tokens.verify(token)

    def test_garbage(self):
        with pytest.raises(TokenVerificationError):
            self.tokens.verify("not.a.token")

    def test_missing_identity_claims(self):
        now = int(datetime.now(timezone.utc).timestamp())
        token = jwt.encode({"id": 7, "iat": now, "exp": now + 60}, SECRET, algorithm="HS256")
        with pytest.raises(TokenVerificationError) as exc_info:
            self.tokens.verify(token)
        assert exc_info.value.context["claims"] == ["username"]

    def test_unconfigured_secret(self):
        with pytest.raises(RuntimeError):
            TokenService("").issue({"id": 1, "username": "ivy"})
