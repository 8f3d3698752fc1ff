"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The shared AuthService lives on app.state (built in the api/main.py lifespan).
get_auth_service() fetches it; require_claims() guards protected routes with
the Authorization: <scheme> <token> header (normally "Bearer").

Status mapping for protected routes:
  no Authorization header                -> 403 token_missing
  header with no token after the scheme  -> 401 unauthorized
  token malformed / forged / expired     -> 401 unauthorized (one message for all)

Layer rule: auth/dependencies.py may import from fastapi (for Request /
HTTPException) because this module is part of the FastAPI dependency
injection system. No imports from api/ or core/.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.errors import ErrorKind
from auth.models import TokenClaims
from auth.service import AuthService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def extract_token(header_value: str) -> str | None:
    """Return the token from "<scheme> <token>", or None if nothing follows the scheme.

    Any scheme is accepted; only the part after it is verified.
    """
    _scheme, _, token = header_value.strip().partition(" ")
    token = token.strip()
    return token or None


def require_claims(request: Request) -> TokenClaims:
    """Require a valid bearer token. Returns the verified claims.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(claims: TokenClaims = Depends(require_claims)): ...
    """
    header = request.headers.get("Authorization")
    if not header:
        raise HTTPException(
            status_code=403,
            detail={"code": "token_missing", "message": "Token not provided."},
        )

    token = extract_token(header)
    result = get_auth_service(request).authorize(token)
    if result.error is ErrorKind.INTERNAL:
        raise HTTPException(
            status_code=500,
            detail={"code": "internal_error", "message": "An unexpected error occurred."},
        )
    if not result.ok:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Invalid or expired token."},
        )
    return result.value
