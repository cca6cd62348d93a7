"""
Plant API — Bearer Token Gate
==============================

What:  FastAPI dependency that admits a request only with a valid bearer token.
How:   HTTPBearer(auto_error=False) parses the Authorization header; the
       token is checked by the TokenService stored on app.state.

    no Authorization header             → 401 AuthenticationRequiredError
    not "Bearer <token>"                → 401 AuthenticationRequiredError
    token fails signature / expiry      → 403 TokenVerificationError
    token verified                      → request.state.user = Identity

Usage:
    @router.get("/me")
    async def me(user: Identity = Depends(require_user)): ...

    APIRouter(dependencies=[Depends(require_user)])   # whole router
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from plant_api.dependencies import get_token_service
from plant_api.exceptions import AuthenticationRequiredError
from plant_api.schemas.auth import Identity
from plant_api.services.token_service import TokenService

_bearer = HTTPBearer(auto_error=False)


async def require_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    if credentials is None or not credentials.credentials:
        # Distinguish the two 401 causes in the server log only
        reason = "missing" if "authorization" not in request.headers else "malformed"
        raise AuthenticationRequiredError(context={"reason": reason})

    claims = tokens.verify(credentials.credentials)
    identity = Identity(**claims)
    request.state.user = identity
    return identity
