"""
API request and response models for CredGate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Separation of concerns: auth/ models = domain truth; api/ models = API contract.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import TokenClaims

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for POST /api/v1/register and POST /api/v1/login.

    Both fields are optional at the schema level: a missing or empty value is
    reported by AuthService as invalid_input, the same code a malformed body
    gets. Values are NOT stripped -- usernames are case- and space-sensitive
    as provided, and passwords are used verbatim.

    max_length keeps passwords well below bcrypt's 72-byte window in the
    common case and bounds the work a single request can cause.
    """

    username: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    """Response for POST /api/v1/register."""

    model_config = ConfigDict(frozen=True)

    message: str


class LoginResponse(BaseModel):
    """Response for POST /api/v1/login."""

    model_config = ConfigDict(frozen=True)

    message: str
    token: str


class ClaimsResponse(BaseModel):
    """Identity claims extracted from a verified token."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    iat: int
    exp: int

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "ClaimsResponse":
        return cls(**claims.to_payload())


class ProtectedResponse(BaseModel):
    """Response for GET /api/v1/protected."""

    model_config = ConfigDict(frozen=True)

    message: str
    user: ClaimsResponse


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    accounts: int
