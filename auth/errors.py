"""
auth/errors.py -- Error taxonomy for the credential core.

Two layers:
  ErrorKind / AuthResult: the externally observable outcome of an AuthService
      operation. Route handlers switch on result.error to pick a status code.

  Exceptions (DuplicateUsername, TokenError and subclasses): raised by the
      store and the token verifier. They never leave AuthService -- it turns
      them into AuthResult values.

TokenError subclasses keep the internal failure category (malformed, bad
signature, expired) for logs. The boundary collapses all three to
ErrorKind.UNAUTHORIZED.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    DUPLICATE_USERNAME = "duplicate_username"
    AUTHENTICATION_FAILED = "authentication_failed"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal_error"


@dataclass(frozen=True)
class AuthResult(Generic[T]):
    """Outcome of an AuthService operation: exactly one of value / error is set."""

    value: T | None = None
    error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> AuthResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind) -> AuthResult[T]:
        return cls(error=error)


class DuplicateUsername(Exception):
    """Raised by AccountStore.insert when the username is already registered."""

    def __init__(self, username: str) -> None:
        super().__init__(f"username already registered: {username!r}")
        self.username = username


class TokenError(Exception):
    """Base class for token verification failures."""


class MalformedToken(TokenError):
    """Token could not be parsed into header, claims and signature."""


class InvalidSignature(TokenError):
    """Signature does not match the claims under the configured secret/algorithm."""


class TokenExpired(TokenError):
    """Signature is valid but the expiry instant has passed."""
