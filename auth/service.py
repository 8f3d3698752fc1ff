"""
auth/service.py -- Register / Login / Authorize orchestration.

AuthService is the public contract of the credential core. Each operation is
a single pass that returns an AuthResult; nothing is retried and nothing is
persisted except the account written by a successful register().

Error policy:
  Validation and domain failures become AuthResult.failure(kind).
  Any unexpected exception (bcrypt, signing, a store backend) is logged with
  its traceback and reported as ErrorKind.INTERNAL -- callers never see the
  raw exception.

Anti-enumeration [C1]:
  login() returns the same AUTHENTICATION_FAILED for an unknown username and
  for a wrong password, and runs bcrypt in both cases so response time does
  not reveal which one happened.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import logging

from auth.errors import AuthResult, DuplicateUsername, ErrorKind, TokenError
from auth.models import Account, TokenClaims
from auth.passwords import PasswordHasher
from auth.store import AccountStore, InMemoryAccountStore
from auth.tokens import TokenIssuer, TokenVerifier

logger = logging.getLogger("credgate.auth")


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or value == ""


class AuthService:
    """Orchestrates the store, hasher, issuer and verifier.

    All collaborators are injected. One instance is shared by every request;
    the only shared mutable state lives behind the store's lock.
    """

    def __init__(
        self,
        store: AccountStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        verifier: TokenVerifier,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.verifier = verifier

    # ------------------------------------------------------------------
    # Register
    # ------------------------------------------------------------------

    def register(self, username: str | None, password: str | None) -> AuthResult[Account]:
        """Create an account for username.

        The exists() check is a fast path that skips bcrypt for obvious
        duplicates. insert() repeats the check atomically, so a concurrent
        registration that slips past the first check still fails cleanly.
        Hashing happens before insert() and therefore outside the store lock.
        """
        if _is_blank(username) or _is_blank(password):
            return AuthResult.failure(ErrorKind.INVALID_INPUT)
        try:
            if self.store.exists(username):
                return AuthResult.failure(ErrorKind.DUPLICATE_USERNAME)
            password_hash = self.hasher.hash(password)
            account = self.store.insert(username, password_hash)
        except DuplicateUsername:
            return AuthResult.failure(ErrorKind.DUPLICATE_USERNAME)
        except Exception:
            logger.exception("Registration failed with an internal error")
            return AuthResult.failure(ErrorKind.INTERNAL)
        logger.info("Registered account id=%d", account.id)
        return AuthResult.success(account)

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    def login(self, username: str | None, password: str | None) -> AuthResult[str]:
        """Verify credentials and return a signed token on success."""
        if _is_blank(username) or _is_blank(password):
            return AuthResult.failure(ErrorKind.INVALID_INPUT)
        try:
            account = self.store.find_by_username(username)
            if account is None:
                # Equalize timing -- do NOT return before running bcrypt [C1]
                self.hasher.verify_dummy(password)
                return AuthResult.failure(ErrorKind.AUTHENTICATION_FAILED)
            if not self.hasher.verify(password, account.password_hash):
                return AuthResult.failure(ErrorKind.AUTHENTICATION_FAILED)
            token = self.issuer.issue(account.id, account.username)
        except Exception:
            logger.exception("Login failed with an internal error")
            return AuthResult.failure(ErrorKind.INTERNAL)
        return AuthResult.success(token)

    # ------------------------------------------------------------------
    # Authorize
    # ------------------------------------------------------------------

    def authorize(self, token: str | None) -> AuthResult[TokenClaims]:
        """Verify token and return its claims.

        Every verification failure maps to UNAUTHORIZED. The specific
        category (malformed / signature / expired) is only logged.
        """
        if _is_blank(token):
            return AuthResult.failure(ErrorKind.UNAUTHORIZED)
        try:
            claims = self.verifier.verify(token)
        except TokenError as exc:
            logger.debug("Token rejected: %s", type(exc).__name__)
            return AuthResult.failure(ErrorKind.UNAUTHORIZED)
        except Exception:
            logger.exception("Token verification failed with an internal error")
            return AuthResult.failure(ErrorKind.INTERNAL)
        return AuthResult.success(claims)


def build_auth_service(
    secret: str,
    *,
    token_ttl_seconds: int = 3600,
    algorithm: str = "HS256",
    bcrypt_rounds: int = 10,
    store: AccountStore | None = None,
) -> AuthService:
    """Assemble an AuthService with an in-memory store unless one is given."""
    return AuthService(
        store=store if store is not None else InMemoryAccountStore(),
        hasher=PasswordHasher(rounds=bcrypt_rounds),
        issuer=TokenIssuer(secret, ttl_seconds=token_ttl_seconds, algorithm=algorithm),
        verifier=TokenVerifier(secret, algorithm=algorithm),
    )
