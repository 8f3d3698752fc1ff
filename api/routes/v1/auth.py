"""
api/routes/v1/auth.py -- Registration, login and protected-resource endpoints.

Routes:
  POST /api/v1/register   -- create an account; 201
  POST /api/v1/login      -- verify credentials; 200 with a bearer token
  GET  /api/v1/protected  -- requires Authorization: Bearer <token>; echoes claims

These handlers are a thin adapter: they call AuthService and translate its
AuthResult into a status code and the shared error envelope. No credential
logic lives here.

Security:
  [H2] POST /login and POST /register are rate-limited per IP (settings).
  [C1] Login failures use one fixed body for unknown user and wrong password.
  [M5] Cache-Control: no-store on login responses.

register and login are plain `def` handlers: FastAPI runs them on its worker
threadpool, so bcrypt never blocks the event loop.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter, login_limit, register_limit
from api.models import (
    ClaimsResponse,
    CredentialsRequest,
    ErrorDetail,
    ErrorResponse,
    LoginResponse,
    MessageResponse,
    ProtectedResponse,
)
from auth.dependencies import get_auth_service, require_claims
from auth.errors import ErrorKind
from auth.models import TokenClaims

# Auth policy:
# - POST /api/v1/register:   public
# - POST /api/v1/login:      public
# - GET  /api/v1/protected:  requires bearer token (require_claims)
router = APIRouter()

# ErrorKind -> (HTTP status, public message). Messages are fixed strings so
# responses never carry internal detail.
_ERROR_MAP: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.INVALID_INPUT: (400, "Username and password are required."),
    ErrorKind.DUPLICATE_USERNAME: (409, "Username already exists."),
    ErrorKind.AUTHENTICATION_FAILED: (401, "Authentication failed."),
    ErrorKind.UNAUTHORIZED: (401, "Invalid or expired token."),
    ErrorKind.INTERNAL: (500, "An unexpected error occurred."),
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def error_response(kind: ErrorKind) -> JSONResponse:
    status_code, message = _ERROR_MAP[kind]
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=kind.value, message=message)).model_dump(exclude_none=True),
    )


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/register", response_model=MessageResponse, status_code=201, responses=_ERROR_RESPONSES)
@limiter.limit(register_limit)  # [H2] must sit BELOW @router so the router registers the limited wrapper
def register(request: Request, body: CredentialsRequest) -> JSONResponse:
    """Register a new account. The response echoes nothing about the account."""
    result = get_auth_service(request).register(body.username, body.password)
    if not result.ok:
        return error_response(result.error)
    return JSONResponse(
        status_code=201,
        content=MessageResponse(message="User registered successfully.").model_dump(),
    )


@router.post("/login", response_model=LoginResponse, responses=_ERROR_RESPONSES)
@limiter.limit(login_limit)  # [H2]
def login(request: Request, body: CredentialsRequest) -> JSONResponse:
    """Authenticate with username and password; return a bearer token.

    Returns the same generic error for wrong username and wrong password
    ("authentication_failed") to avoid leaking username existence [C1].
    """
    result = get_auth_service(request).login(body.username, body.password)
    if result.ok:
        resp = JSONResponse(
            status_code=200,
            content=LoginResponse(message="Authentication successful.", token=result.value).model_dump(),
        )
    else:
        resp = error_response(result.error)
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/protected",
    response_model=ProtectedResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def protected(claims: TokenClaims = Depends(require_claims)) -> ProtectedResponse:
    """Return the identity bound to the presented token."""
    return ProtectedResponse(
        message="Protected route accessed successfully.",
        user=ClaimsResponse.from_claims(claims),
    )
