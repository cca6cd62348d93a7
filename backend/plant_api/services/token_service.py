"""
Plant API — Token Service
==========================

What:  Issues and verifies signed, time-limited bearer tokens.
How:   PyJWT, HS256 by default. The payload carries the identity claims
       {id, username} plus `iat` and `exp` (iat + 60 minutes by default).
Who:   AuthService issues tokens on login; the bearer gate verifies them.

Contract:
    verify(issue(claims)) == claims   while within the expiry window
    verify(tampered or expired token) raises TokenVerificationError

    Expiry and signature failures are not distinguished to the caller;
    the underlying PyJWT error class is kept in the exception context.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

import jwt

from plant_api.exceptions import TokenVerificationError

logger = logging.getLogger(__name__)

IDENTITY_CLAIMS = ("id", "username")


class TokenService:
    """
    Signs and checks bearer tokens with one process-wide secret.

    The secret is handed in at startup (from JWT_SECRET). An empty secret
    is a deployment mistake: issuing or verifying then fails loudly.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 60):
        self._secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def _require_secret(self) -> str:
        if not self._secret:
            raise RuntimeError("JWT_SECRET is not configured")
        return self._secret

    def issue(
        self,
        claims: Mapping[str, Any],
        issued_at: Optional[datetime] = None,
    ) -> str:
        """
        Sign `claims` ({id, username}) into a token.

        Args:
            claims: Identity claims; extra keys are ignored.
            issued_at: Override the issue time (UTC). Defaults to now.
        """
        secret = self._require_secret()
        now = issued_at or datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "id": claims["id"],
            "username": claims["username"],
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=self.expires_minutes)).timestamp()),
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Validate signature and expiry; return the identity claims.

        Raises:
            TokenVerificationError on any signature, format or expiry failure.
        """
        secret = self._require_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Rejected expired token")
            raise TokenVerificationError(context={"reason": "expired"}) from e
        except jwt.InvalidTokenError as e:
            logger.info("Rejected invalid token: %s", type(e).__name__)
            raise TokenVerificationError(context={"reason": type(e).__name__}) from e

        missing = [claim for claim in IDENTITY_CLAIMS if claim not in payload]
        if missing:
            raise TokenVerificationError(context={"reason": "missing_claims", "claims": missing})

        return {claim: payload[claim] for claim in IDENTITY_CLAIMS}
